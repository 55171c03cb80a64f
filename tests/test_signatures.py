from unittest.mock import patch

import pytest

from lettr.analytics.signatures import BotSignatures, load_signatures


def test_bundled_signatures_load():
    signatures = load_signatures()

    assert "GPTBot" in signatures.ai_patterns
    assert "ClaudeBot" in signatures.ai_patterns
    assert "3." in signatures.cloud_prefixes
    assert signatures.use_crawler_library


def test_load_signatures_from_file(tmp_path):
    path = tmp_path / "signatures.yaml"
    path.write_text(
        "ai_patterns: [SomeAIBot]\n"
        "cloud_prefixes: ['192.0.2.0/24']\n"
        "use_crawler_library: false\n"
    )
    signatures = load_signatures(str(path))

    assert signatures.is_ai_bot("Mozilla/5.0 (compatible; someaibot/0.1)")
    assert signatures.is_cloud_address("192.0.2.77")
    assert not signatures.is_known_bot("SomeAIBot")


def test_invalid_pattern_is_rejected():
    with pytest.raises(ValueError):
        BotSignatures(ai_patterns=["(unclosed"], use_crawler_library=False)


def test_cloud_address_matching(signatures):
    assert signatures.is_cloud_address("3.14.15.92")
    assert signatures.is_cloud_address(" 34.0.0.1 ")
    assert signatures.is_cloud_address("10.255.0.1")
    assert not signatures.is_cloud_address("11.0.0.1")
    assert not signatures.is_cloud_address("2001:db8::1")
    assert not signatures.is_cloud_address("garbage")


def test_patterns_are_case_insensitive(signatures):
    assert signatures.is_known_bot("mozilla/5.0 googlebot")
    assert signatures.is_ai_bot("GPTBOT")


@pytest.mark.parametrize("user_agent,category", [
    ("Mozilla/5.0 (compatible; GPTBot/1.2)", "openai"),
    ("ClaudeBot/1.0", "anthropic"),
    ("Googlebot/2.1", "google"),
    ("SomeCrawler/1.0 crawler", "other_bot"),
    ("Mozilla/5.0 (Macintosh) Safari/605.1.15", "human"),
    (None, "unknown"),
])
def test_category(signatures, user_agent, category):
    assert signatures.category(user_agent) == category


def test_category_uses_compiled_patterns(signatures):
    with patch("lettr.analytics.signatures._compile", side_effect=AssertionError("recompiled")):
        assert signatures.category("ClaudeBot/1.0") == "anthropic"
        assert signatures.category("Mozilla/5.0 Firefox/128.0") == "human"
