"""
Prompt specs and the summarization oracle used for content tooling.
"""

from .base_model import SummarizationOracle
from .configs.oracle_config import OracleConfig
from .loader import build_oracle
from .registry import load_prompt_spec

__all__ = [
    "OracleConfig",
    "SummarizationOracle",
    "build_oracle",
    "load_prompt_spec",
]
