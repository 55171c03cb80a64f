""" Test the config file. """
import logging

from lettr.utils.config import (
    OpenAIFilter,
    PathResolver,
    load_config,
    load_resolved_config,
)


def test_config_has_required_fields():
    config = load_config()

    assert isinstance(config["db_path"], str)
    assert isinstance(config["data_dir"], str)
    for section in ("classifier", "engagement", "fidelity", "oracle"):
        assert section in config, f"Missing '{section}' section in config.yaml"
    assert config["engagement"]["verification_reads"] == 3
    assert config["fidelity"]["max_content_chars"] == 4000


def test_resolved_config_paths_and_secrets(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
    monkeypatch.setenv("LETTR_HASH_SECRET", "pepper")

    config = load_resolved_config()

    assert config["db_path"].endswith("lettr.json")
    assert config["db_path"].startswith(config["data_dir"])
    assert config["oracle"]["api_key"] == "test-key"
    assert config["hash_secret"] == "pepper"


def test_resolver_keeps_explicit_values(tmp_path, monkeypatch):
    monkeypatch.setenv("LETTR_TEST_KEY", "from-env")
    monkeypatch.delenv("LETTR_TEST_UNSET", raising=False)
    resolver = PathResolver(str(tmp_path))

    resolved = resolver.resolve_config({
        "db_path": "lettr.json",
        "oracle": {"api_key": "given", "api_key_env_var": "LETTR_TEST_KEY"},
        "other": {"api_key_env_var": "LETTR_TEST_KEY"},
        "hash_secret_env_var": "LETTR_TEST_UNSET",
        "debug": False,
    })

    assert resolved["db_path"] == str(tmp_path.resolve() / "lettr.json")
    assert resolved["oracle"]["api_key"] == "given"
    assert resolved["other"]["api_key"] == "from-env"
    assert resolved["hash_secret"] is None
    assert resolved["debug"] is False


def test_openai_filter_truncates_message_content():
    record = logging.LogRecord("openai", logging.DEBUG, __file__, 1, "Request: %s", None, None)
    record.args = {"json_data": {"messages": [{"role": "user", "content": "x" * 500}]}}

    assert OpenAIFilter().filter(record)
    assert len(record.args["json_data"]["messages"][0]["content"]) < 500
