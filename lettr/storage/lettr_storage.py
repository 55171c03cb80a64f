""" Unified storage interface for the lettr core. """
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from tinydb import Query

from lettr.utils.date import utc_now_iso
from .base_storage import EngagementStore, TinyDBStorageService
from .artifact_manager import ArtifactManager

EVENTS_TABLE = "events"
SUBSCRIBERS_TABLE = "subscribers"
ISSUES_TABLE = "issues"


class LettrStorage(TinyDBStorageService, EngagementStore):
    """
    TinyDB-backed store for interaction events, subscribers and issues.
    Events are append-only. Large issue fields are offloaded to files
    with ArtifactManager.
    """

    def __init__(self, db_path):
        super().__init__(db_path)

        artifact_dir = Path(db_path).parent / "artifacts"
        self.artifacts = ArtifactManager(base_path=str(artifact_dir))

    def save(self, table_name: str, data) -> List[str]:
        """
        Save records to the specified table, assigning `id` and
        `created_at` when missing. Returns the record ids.
        """
        if not isinstance(data, list):
            data = [data]

        records = []
        for obj in data:
            obj = dict(obj)
            obj.setdefault("id", uuid.uuid4().hex)
            obj.setdefault("created_at", utc_now_iso())
            obj = self.artifacts.save_large_fields(
                obj,
                table_name=table_name,
                timestamp=obj["created_at"]
            )
            records.append(obj)

        self.insert(table_name, records)
        return [obj["id"] for obj in records]

    def get(self, table_name: str, record_id: str) -> Optional[Dict[str, Any]]:
        record = self.get_by_field(table_name, "id", record_id)
        if record is None:
            return None
        return self.artifacts.load_fields(dict(record))

    def search(self, table_name: str, query) -> List[Dict[str, Any]]:
        table = self.get_table(table_name)
        with self._lock:
            return [dict(record) for record in table.search(query)]

    # --- Events ---
    def append_event(self, event: Dict[str, Any]) -> str:
        return self.save(EVENTS_TABLE, event)[0]

    def events(self, subscriber_id: Optional[str] = None,
               issue_id: Optional[str] = None) -> List[Dict[str, Any]]:
        q = Query()
        cond = q.id.exists()
        if subscriber_id is not None:
            cond &= q.subscriber_id == subscriber_id
        if issue_id is not None:
            cond &= q.issue_id == issue_id
        return self.search(EVENTS_TABLE, cond)

    def count_events(self, subscriber_id: str, event_type: str,
                     is_bot: Optional[bool] = None,
                     min_scroll_depth: Optional[int] = None) -> int:
        q = Query()
        cond = (q.subscriber_id == subscriber_id) & (q.event_type == event_type)
        if is_bot is not None:
            cond &= q.is_bot == is_bot
        if min_scroll_depth is not None:
            cond &= q.scroll_depth.test(
                lambda depth: depth is not None and depth >= min_scroll_depth
            )
        with self._lock:
            return self.get_table(EVENTS_TABLE).count(cond)

    # --- Subscribers ---
    def save_subscriber(self, subscriber: Dict[str, Any]) -> str:
        now = utc_now_iso()
        record = {
            "type": "human",
            "status": "active",
            "level": 1,
            "subscribed_at": now,
            "last_activity_at": now,
            "human_verified_at": None,
            **subscriber,
        }
        return self.save(SUBSCRIBERS_TABLE, record)[0]

    def get_subscriber(self, subscriber_id: str) -> Optional[Dict[str, Any]]:
        return self.get(SUBSCRIBERS_TABLE, subscriber_id)

    def touch_subscriber(self, subscriber_id: str, timestamp: str) -> bool:
        updated = self.update(
            SUBSCRIBERS_TABLE, {"last_activity_at": timestamp}, "id", subscriber_id
        )
        return bool(updated)

    def raise_subscriber_level(self, subscriber_id: str, level: int,
                               timestamp: str,
                               activity_at: Optional[str] = None) -> bool:
        raised = []

        def apply(doc):
            if activity_at is not None:
                doc["last_activity_at"] = activity_at
            # A record without a level is at the baseline.
            current = doc.get("level") or 1
            if current >= level:
                return
            doc["level"] = level
            if not doc.get("human_verified_at"):
                doc["human_verified_at"] = timestamp
            raised.append(doc["id"])

        q = Query()
        table = self.get_table(SUBSCRIBERS_TABLE)
        with self._lock:
            table.update(apply, q.id == subscriber_id)
        return bool(raised)

    # --- Issues ---
    def save_issue(self, issue: Dict[str, Any]) -> str:
        record = {
            "status": "draft",
            "key_claims": [],
            "published_at": None,
            "content_penetration_score": None,
            "fidelity": None,
            **issue,
        }
        return self.save(ISSUES_TABLE, record)[0]

    def get_issue(self, issue_id: str) -> Optional[Dict[str, Any]]:
        return self.get(ISSUES_TABLE, issue_id)

    def update_issue(self, issue_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace fields on an issue, offloading large values.
        Raises ValueError when the issue does not exist.
        """
        existing = self.get_by_field(ISSUES_TABLE, "id", issue_id)
        if existing is None:
            raise ValueError(f"No issue found with id {issue_id}")

        now = utc_now_iso()
        fields = self.artifacts.save_large_fields(
            {"id": issue_id, **fields, "updated_at": now},
            table_name=ISSUES_TABLE,
            timestamp=existing.get("created_at") or now
        )
        stale = {f"{key}_artifact" for key in fields} | {
            key[:-len("_artifact")] for key in fields if key.endswith("_artifact")
        }

        def apply(doc):
            for key in stale:
                doc.pop(key, None)
            doc.update(fields)

        q = Query()
        with self._lock:
            self.get_table(ISSUES_TABLE).update(apply, q.id == issue_id)
        return self.get_issue(issue_id)
