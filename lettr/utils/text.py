"""Text utilities for issue bodies."""
import math
import re

_HTML_RULES = [
    (re.compile(r"<h[1-6][^>]*>(.*?)</h[1-6]>", re.I | re.S), r"\1\n\n"),
    (re.compile(r"<strong[^>]*>(.*?)</strong>", re.I | re.S), r"\1"),
    (re.compile(r"<em[^>]*>(.*?)</em>", re.I | re.S), r"\1"),
    (re.compile(r"<p[^>]*>(.*?)</p>", re.I | re.S), r"\1\n\n"),
    (re.compile(r"<br\s*/?>", re.I), "\n"),
    (re.compile(r"<li[^>]*>(.*?)</li>", re.I | re.S), r"- \1\n"),
    (re.compile(r"<[^>]+>"), ""),
]

_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&nbsp;": " ",
}


def markdown_from_html(html: str) -> str:
    """Flatten editor HTML into plain markdown-ish text."""
    text = html
    for pattern, replacement in _HTML_RULES:
        text = pattern.sub(replacement, text)
    for entity, char in _ENTITIES.items():
        text = text.replace(entity, char)
    return text.strip()


def estimate_reading_time(text: str, words_per_minute: int = 200) -> int:
    words = len(text.split())
    return math.ceil(words / words_per_minute)
