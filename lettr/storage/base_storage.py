import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from tinydb import TinyDB, Query


class EngagementStore(ABC):
    """
    Narrow storage interface consumed by the event recorder and the
    engagement state machine.
    """

    @abstractmethod
    def append_event(self, event: Dict[str, Any]) -> str:
        """Append an immutable interaction event, return its id."""

    @abstractmethod
    def get_subscriber(self, subscriber_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def touch_subscriber(self, subscriber_id: str, timestamp: str) -> bool:
        """Set `last_activity_at`. Re-applying it is harmless."""

    @abstractmethod
    def raise_subscriber_level(self, subscriber_id: str, level: int,
                               timestamp: str,
                               activity_at: Optional[str] = None) -> bool:
        """
        In one atomic write, for a subscriber currently below `level`, set
        `level = max(level, level)` and
        `human_verified_at = coalesce(human_verified_at, timestamp)`.
        When `activity_at` is given, `last_activity_at` is set in the same
        write whether or not the level changes.
        Returns True when the level was raised.
        """

    @abstractmethod
    def count_events(self, subscriber_id: str, event_type: str,
                     is_bot: Optional[bool] = None,
                     min_scroll_depth: Optional[int] = None) -> int:
        pass


class TinyDBStorageService:
    # TinyDB is not thread-safe: reads and writes share this lock.
    _lock = threading.RLock()

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.db = TinyDB(db_path)

    def get_table(self, table_name: str):
        return self.db.table(table_name)

    def get_by_field(self, table_name: str, field_name: str, field_value):
        table = self.get_table(table_name)
        q = Query()
        with self._lock:
            return table.get(q[field_name] == field_value)

    def insert(self, table_name, data) -> List[int]:
        table = self.get_table(table_name)
        with self._lock:
            if isinstance(data, list):
                return table.insert_multiple(data)
            return [table.insert(data)]

    def update(self, table_name, data, query_field, query_value) -> List[int]:
        table = self.get_table(table_name)
        q = Query()
        with self._lock:
            return table.update(data, q[query_field] == query_value)

