from datetime import datetime, timezone

import pytest

from lettr.utils.date import to_aware_utc, utc_now_iso
from lettr.utils.hash import hash_source_address, sha256_key
from lettr.utils.print import safe_pretty_print, truncate_nested
from lettr.utils.text import estimate_reading_time, markdown_from_html


def test_markdown_from_html():
    html = (
        "<h2 class='title'>Weekly notes</h2>"
        "<p>Line one<br/>line <strong>two</strong> &lt;3</p>"
        "<ul><li>first</li><li><em>second</em></li></ul>"
    )

    assert markdown_from_html(html) == (
        "Weekly notes\n\nLine one\nline two <3\n\n- first\n- second"
    )


@pytest.mark.parametrize("text,minutes", [
    ("", 0),
    ("one", 1),
    ("word " * 200, 1),
    ("word " * 201, 2),
])
def test_estimate_reading_time(text, minutes):
    assert estimate_reading_time(text) == minutes


def test_hash_source_address():
    first = hash_source_address("203.0.113.9", "secret")

    assert len(first) == 16
    assert first == hash_source_address("203.0.113.9", "secret")
    assert first != hash_source_address("203.0.113.9", "other")
    assert first == sha256_key("203.0.113.9secret")[:16]
    assert "203.0.113.9" not in first


def test_to_aware_utc():
    assert to_aware_utc(None) is None
    assert to_aware_utc("2025-01-01T10:00:00") == datetime(2025, 1, 1, 10, tzinfo=timezone.utc)
    assert to_aware_utc("2025-01-01T12:00:00+02:00") == datetime(2025, 1, 1, 10, tzinfo=timezone.utc)
    assert to_aware_utc(datetime(2025, 1, 1)).tzinfo is timezone.utc


def test_utc_now_iso_is_aware():
    assert to_aware_utc(utc_now_iso()).tzinfo is not None


def test_truncate_nested():
    data = {"a": "x" * 20, "b": ["y" * 20, 3], "c": ("z" * 5,)}

    assert truncate_nested(data, max_len=10) == {
        "a": "x" * 10 + "...",
        "b": ["y" * 10 + "...", 3],
        "c": ["z" * 5],
    }


def test_safe_pretty_print_returns_text():
    output = safe_pretty_print({"human_rate": 87, "note": "n" * 200})

    assert "human_rate" in output
    assert "n" * 200 not in output
