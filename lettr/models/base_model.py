import re
from abc import ABC, abstractmethod

from lettr.models.base_spec import PromptTemplateSpec


class PromptTemplate:
    """ A prompt template with named placeholders. """
    def __init__(self, prompt_spec: PromptTemplateSpec):
        self.prompt_spec = prompt_spec
        self.template = prompt_spec.template
        self.placeholders = self._extract_placeholders()

    def _extract_placeholders(self):
        # Skip escaped braces ({{ ... }}) used for literal JSON examples.
        return set(re.findall(r"(?<!\{)\{([\w]+)\}(?!\})", self.template))

    def __call__(self, **kwargs):
        missing = self.placeholders - kwargs.keys()
        if missing:
            raise ValueError(f"Missing values for placeholders: {missing}")
        self.prompt_spec.validate_input(kwargs)
        return self.template.format(**kwargs)

    def __repr__(self):
        return f"<PromptTemplate(name={self.prompt_spec.name}, " + \
               f"placeholders={self.placeholders})>"


class SummarizationOracle(ABC):
    """
    Single-turn text completion against a hosted LLM. No structured output
    mode is assumed: callers parse the returned text. Implementations may
    raise on network, auth or rate-limit failures.
    """

    @abstractmethod
    def complete(self, prompt: str, max_tokens: int) -> str:
        pass
