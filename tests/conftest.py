import pytest

from lettr.analytics.signatures import BotSignatures
from lettr.models.base_model import SummarizationOracle
from lettr.storage.lettr_storage import LettrStorage


class FakeOracle(SummarizationOracle):
    """Replays canned responses; an Exception instance is raised instead."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def complete(self, prompt, max_tokens):
        self.calls.append((prompt, max_tokens))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_oracle():
    return FakeOracle


@pytest.fixture
def signatures():
    """Small signature set, independent from the bundled crawler list."""
    return BotSignatures(
        crawler_patterns=["Googlebot", "crawler", r"\bbot\b"],
        ai_patterns=["GPTBot", "ClaudeBot", "openai"],
        cloud_prefixes=["3.", "34.", "10.0.0.0/8"],
        vendor_categories=[
            {"category": "openai", "pattern": "GPTBot|openai"},
            {"category": "anthropic", "pattern": "ClaudeBot"},
            {"category": "google", "pattern": "Googlebot"},
        ],
        use_crawler_library=False,
    )


@pytest.fixture
def storage(tmp_path):
    return LettrStorage(str(tmp_path / "test.json"))
