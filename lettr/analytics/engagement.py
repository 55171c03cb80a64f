"""
Subscriber trust levels.

Levels run from 1 (subscribed) to 4 (inner circle). The only automatic
transition is 1 -> 2, once a subscriber has fully read enough issues as a
human. Levels 3 and 4 are assigned by the creator. Levels never go down.
"""
import logging
from typing import Optional

from pydantic import BaseModel

from lettr.analytics.types import EventType
from lettr.storage.base_storage import EngagementStore
from lettr.utils.date import utc_now_iso

logger = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 4

LEVEL_LABELS = {
    1: "Subscribed",
    2: "Verified",
    3: "Active relationship",
    4: "Inner circle",
}


def level_label(level: int) -> str:
    return LEVEL_LABELS.get(level, "Unknown")


class EngagementSettings(BaseModel):
    completion_scroll_depth: int = 90
    verification_reads: int = 3
    verified_level: int = 2


class EngagementStateMachine:
    def __init__(self, storage: EngagementStore,
                 settings: Optional[EngagementSettings] = None):
        self.storage = storage
        self.settings = settings or EngagementSettings()

    def completed_reads(self, subscriber_id: str) -> int:
        """Lifetime count of human scroll events past the completion depth."""
        return self.storage.count_events(
            subscriber_id,
            EventType.SCROLL.value,
            is_bot=False,
            min_scroll_depth=self.settings.completion_scroll_depth,
        )

    def on_scroll_completed(self, subscriber_id: str,
                            activity_at: Optional[str] = None) -> bool:
        """
        Re-evaluate a subscriber after a qualifying scroll event.
        `activity_at`, when given, is written as `last_activity_at` in the
        same subscriber write as the level change, so a storage failure
        leaves neither applied.
        Returns True when this call promoted the subscriber.
        """
        reads = self.completed_reads(subscriber_id)
        if reads < self.settings.verification_reads:
            if activity_at is not None:
                self.storage.touch_subscriber(subscriber_id, activity_at)
            return False

        # Conditional max-based update: concurrent callers cannot demote
        # or double-stamp human_verified_at.
        upgraded = self.storage.raise_subscriber_level(
            subscriber_id, self.settings.verified_level, utc_now_iso(),
            activity_at=activity_at,
        )
        if upgraded:
            logger.info(
                f"✅ Subscriber {subscriber_id} verified as human after {reads} full reads"
            )
        return upgraded

    def assign_level(self, subscriber_id: str, level: int) -> bool:
        """
        Creator-driven promotion (typically to levels 3 and 4).
        Raises ValueError for unknown subscribers, out-of-range levels
        and demotions. Returns True when the level changed.
        """
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            raise ValueError(f"Level must be between {MIN_LEVEL} and {MAX_LEVEL}, got {level}")

        subscriber = self.storage.get_subscriber(subscriber_id)
        if subscriber is None:
            raise ValueError(f"No subscriber found with id {subscriber_id}")

        current = subscriber.get("level") or MIN_LEVEL
        if level < current:
            raise ValueError(
                f"Cannot demote subscriber {subscriber_id} from level {current} to {level}"
            )
        if level == current:
            return False

        changed = self.storage.raise_subscriber_level(subscriber_id, level, utc_now_iso())
        if changed:
            logger.info(
                f"✅ Subscriber {subscriber_id} promoted to level {level} ({level_label(level)})"
            )
        return changed
