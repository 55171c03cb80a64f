from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from lettr.utils.config import load_resolved_config


class OracleConfig(BaseModel):
    """Configuration for an OpenAI-compatible completion endpoint."""
    provider: str = Field("openai", description="Name of the oracle provider.")
    base_url: str = Field(
        "https://openrouter.ai/api/v1", description="API base URL"
    )
    model_name: str = Field(
        "anthropic/claude-haiku-4.5", description="Model name / identifier"
    )
    api_key_env_var: Optional[str] = Field(
        "OPENROUTER_API_KEY", description="Environment variable for API key"
    )
    api_key: Optional[str] = Field(None, description="API key")
    temperature: Optional[float] = Field(0.0, description="Sampling temperature")

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "OracleConfig":
        """Build from the `oracle` section of the resolved app config."""
        if config is None:
            config = load_resolved_config().get("oracle", {})
        return cls(**config)
