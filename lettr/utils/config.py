"""
Application config: `config.yaml` plus secrets from the environment.

Keys ending in `_dir` or `_path` are paths under `data_dir`. A key ending in
`_env_var` names an environment variable; its value is exposed under the key
without the suffix (`api_key_env_var` -> `api_key`) unless that key is
already set in the file.
"""
import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from lettr.utils.print import safe_pretty_print

DOTENV_PATH = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(DOTENV_PATH)

CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"

PATH_SUFFIXES = ("_dir", "_path")
ENV_SUFFIX = "_env_var"
QUIET_LOGGERS = ("openai", "openai._base_client", "httpx", "httpcore")

logger = logging.getLogger(__name__)


class PathResolver:
    def __init__(self, root: str):
        self.base_path = Path(root).resolve()

    def resolve_path(self, relative_path: Optional[str]) -> Path:
        """Resolves relative path under base path."""
        if not relative_path:
            return self.base_path
        return (self.base_path / relative_path).resolve()

    def resolve_env(self, env_key: str) -> Optional[str]:
        """Secret from the environment, None when unset."""
        env_val = os.getenv(env_key)
        if env_val is None:
            logger.warning(f"Environment variable {env_key} is not set")
        return env_val

    def resolve_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Return a resolved copy of a (possibly nested) config dict."""
        resolved = {}
        for key, value in config.items():
            if isinstance(value, dict):
                resolved[key] = self.resolve_config(value)
            elif isinstance(value, str) and key.endswith(PATH_SUFFIXES):
                resolved[key] = str(self.resolve_path(value))
            else:
                resolved[key] = value

        for key, value in config.items():
            if not key.endswith(ENV_SUFFIX) or not isinstance(value, str):
                continue
            target = key[:-len(ENV_SUFFIX)]
            if not config.get(target):
                resolved[target] = self.resolve_env(value)
        return resolved


class OpenAIFilter(logging.Filter):
    """Shortens prompt bodies in the OpenAI client's debug request logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, dict) and "json_data" in record.args:
            messages = record.args["json_data"].get("messages")
            for msg in messages if isinstance(messages, list) else []:
                if "content" in msg:
                    msg["content"] = safe_pretty_print(msg["content"])
        return True


def setup_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    for name in QUIET_LOGGERS:
        client_logger = logging.getLogger(name)
        client_logger.setLevel(logging.DEBUG if debug else logging.WARNING)
        if debug and name.startswith("openai"):
            client_logger.addFilter(OpenAIFilter())


def load_config(config_path: str = CONFIG_PATH) -> Dict[str, Any]:
    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    for key, value in config.items():
        if key.endswith("_dir") and isinstance(value, str):
            config[key] = os.path.abspath(value)

    setup_logging(debug=config.get("debug", False))
    return config


def load_resolved_config(config_path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Load the config with paths and environment secrets resolved."""
    config = load_config(config_path)
    return PathResolver(config["data_dir"]).resolve_config(config)
