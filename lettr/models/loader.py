import logging
from typing import Optional

from lettr.models.base_model import SummarizationOracle
from lettr.models.configs.oracle_config import OracleConfig
from lettr.models.providers.openai_model import OpenAIOracle

logger = logging.getLogger(__name__)


def build_oracle(config: Optional[OracleConfig] = None) -> Optional[SummarizationOracle]:
    """
    Build the summarization oracle from its config.

    Returns:
        SummarizationOracle or None when no API credential is configured,
        in which case oracle-backed features are unavailable.

    Raises:
        NotImplementedError: If the provider is unknown.
    """
    config = config or OracleConfig.from_config()

    if not config.api_key:
        logger.warning("No oracle API key configured, AI features are disabled")
        return None

    if config.provider == "openai":
        return OpenAIOracle(config)

    raise NotImplementedError(
        f"No oracle provider found for given name: {config.provider}"
    )
