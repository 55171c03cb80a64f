import logging
from openai import OpenAI

from lettr.models.base_model import SummarizationOracle
from lettr.models.configs.oracle_config import OracleConfig

logger = logging.getLogger(__name__)


class OpenAIOracle(SummarizationOracle):
    """ Summarization oracle backed by an OpenAI-compatible chat endpoint. """
    def __init__(self, config: OracleConfig):
        if not config.api_key:
            raise ValueError("Missing required key: api_key")
        self.client = OpenAI(base_url=config.base_url, api_key=config.api_key)
        self.config = config

    def complete(self, prompt: str, max_tokens: int) -> str:
        response = self.client.chat.completions.create(
            model=self.config.model_name,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=self.config.temperature,
        )

        error = getattr(response, "error", None)
        if error:
            provider = error.get(
                "metadata", {}
            ).get('provider_name', 'Unknown provider')
            raise ValueError(
                f"PROVIDER [[{provider}]]\n== Error {error.get('code')}: " +
                f"{error.get('message')}"
            )

        if response.usage is not None:
            logger.debug(
                f"Oracle usage: prompt={response.usage.prompt_tokens} "
                f"completion={response.usage.completion_tokens} "
                f"total={response.usage.total_tokens}"
            )
        return response.choices[0].message.content or ""
