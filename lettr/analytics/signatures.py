""" Known-bot signature source used by the actor classifier. """
import ipaddress
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import yaml
from crawlerdetect import CrawlerDetect
from pydantic import BaseModel, Field, PrivateAttr, field_validator

logger = logging.getLogger(__name__)

SIGNATURES_PATH = Path(__file__).parent / "signatures.yaml"


def _compile(pattern: str):
    return re.compile(pattern, re.IGNORECASE)


class VendorCategory(BaseModel):
    category: str
    pattern: str

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        _compile(v)
        return v


class BotSignatures(BaseModel):
    """
    Pattern data behind bot detection. Swapping the data never requires
    touching the classifier.
    """
    crawler_patterns: List[str] = Field(
        default_factory=list, description="Regexes for general crawlers."
    )
    ai_patterns: List[str] = Field(
        default_factory=list, description="Regexes for AI vendor crawlers."
    )
    cloud_prefixes: List[str] = Field(
        default_factory=list, description="Address prefixes or CIDR networks."
    )
    vendor_categories: List[VendorCategory] = Field(default_factory=list)
    use_crawler_library: bool = Field(
        True, description="Also match against the crawlerdetect pattern list."
    )

    _crawler_res: list = PrivateAttr(default_factory=list)
    _ai_res: list = PrivateAttr(default_factory=list)
    _vendor_res: list = PrivateAttr(default_factory=list)
    _networks: list = PrivateAttr(default_factory=list)
    _string_prefixes: list = PrivateAttr(default_factory=list)
    _detector: Optional[CrawlerDetect] = PrivateAttr(default=None)

    @field_validator("crawler_patterns", "ai_patterns")
    @classmethod
    def validate_patterns(cls, v: List[str]) -> List[str]:
        for pattern in v:
            try:
                _compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid signature pattern '{pattern}': {e}")
        return v

    def model_post_init(self, __context) -> None:
        self._crawler_res = [_compile(p) for p in self.crawler_patterns]
        self._ai_res = [_compile(p) for p in self.ai_patterns]
        self._vendor_res = [
            (v.category, _compile(v.pattern)) for v in self.vendor_categories
        ]
        for prefix in self.cloud_prefixes:
            if "/" in prefix:
                self._networks.append(ipaddress.ip_network(prefix, strict=False))
            else:
                self._string_prefixes.append(prefix)
        if self.use_crawler_library:
            self._detector = CrawlerDetect()

    def is_known_bot(self, user_agent: str) -> bool:
        if any(r.search(user_agent) for r in self._crawler_res):
            return True
        if self._detector is not None:
            return bool(self._detector.isCrawler(user_agent))
        return False

    def is_ai_bot(self, user_agent: str) -> bool:
        return any(r.search(user_agent) for r in self._ai_res)

    def is_cloud_address(self, address: str) -> bool:
        address = address.strip()
        if any(address.startswith(p) for p in self._string_prefixes):
            return True
        if not self._networks:
            return False
        try:
            ip = ipaddress.ip_address(address)
        except ValueError:
            return False
        return any(ip.version == net.version and ip in net for net in self._networks)

    def category(self, user_agent: Optional[str]) -> str:
        """Vendor bucket for reporting: openai, anthropic, ..., other_bot or human."""
        if not user_agent:
            return "unknown"
        for category, pattern in self._vendor_res:
            if pattern.search(user_agent):
                return category
        if self.is_known_bot(user_agent):
            return "other_bot"
        return "human"


def load_signatures(path: Optional[str] = None) -> BotSignatures:
    """Load signature data from a YAML file (defaults to the bundled one)."""
    path = Path(path) if path else SIGNATURES_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    signatures = BotSignatures(**data)
    logger.debug(
        f"Loaded {len(signatures.crawler_patterns)} crawler and "
        f"{len(signatures.ai_patterns)} AI patterns from {path}"
    )
    return signatures


@lru_cache(maxsize=1)
def default_signatures() -> BotSignatures:
    return load_signatures()
