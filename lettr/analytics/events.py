""" Event recorder: classifies and persists interactions. """
import logging
import uuid
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

from lettr.analytics.classifier import (
    ActorClassifier,
    ClassificationResult,
    RequestHints,
)
from lettr.analytics.engagement import EngagementStateMachine
from lettr.analytics.types import BotType, EventType
from lettr.storage.base_storage import EngagementStore
from lettr.utils.date import utc_now_iso
from lettr.utils.hash import hash_source_address

logger = logging.getLogger(__name__)

AUTHENTICATED_AGENT = ClassificationResult(
    is_bot=False,
    bot_type=BotType.NONE,
    confidence=1.0,
    reasons=("authenticated_agent",),
)


class RecordingError(RuntimeError):
    """
    Persisting an interaction failed. The classification computed before
    the failure is kept on the exception for synchronous callers.
    """

    def __init__(self, message: str, classification: ClassificationResult):
        super().__init__(message)
        self.classification = classification


class InteractionEventInput(BaseModel):
    """What a request handler knows about an interaction."""
    event_type: EventType
    issue_id: Optional[str] = None
    subscriber_id: Optional[str] = None
    user_agent: Optional[str] = None
    source_address: Optional[str] = None
    request_latency_ms: Optional[float] = None
    has_pointer_movement: Optional[bool] = None
    scroll_depth: Optional[int] = Field(None, ge=0, le=100)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_scroll_depth(self):
        if self.scroll_depth is not None and self.event_type != EventType.SCROLL:
            raise ValueError(
                f"scroll_depth is only accepted on scroll events, not {self.event_type.value}"
            )
        return self

    def hints(self) -> RequestHints:
        return RequestHints(
            source_address=self.source_address,
            request_latency_ms=self.request_latency_ms,
            has_pointer_movement=self.has_pointer_movement,
        )


class InteractionEvent(BaseModel):
    """Stored form of an interaction. Never updated once written."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = Field(default_factory=utc_now_iso)
    issue_id: Optional[str] = None
    subscriber_id: Optional[str] = None
    event_type: EventType
    is_bot: bool
    bot_type: Optional[BotType] = None
    confidence: float
    reasons: List[str] = Field(default_factory=list)
    scroll_depth: Optional[int] = None
    source_hash: Optional[str] = None
    user_agent: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class EventRecorder:
    """
    Classifies each interaction, appends it to the event log and applies
    the subscriber side effects (activity timestamp, trust level).

    The event write happens first; when it fails nothing else is applied
    and a RecordingError carrying the classification is raised. The
    subscriber is then changed by a single write, so a failure there leaves
    the subscriber untouched. Subscriber updates are idempotent, so a
    retried call is safe.
    """

    def __init__(self, storage: EngagementStore,
                 classifier: Optional[ActorClassifier] = None,
                 engagement: Optional[EngagementStateMachine] = None,
                 hash_secret: str = ""):
        self.storage = storage
        self.classifier = classifier or ActorClassifier()
        self.engagement = engagement or EngagementStateMachine(storage)
        self.hash_secret = hash_secret

    def record(self, event: Union[InteractionEventInput, Dict[str, Any]]) -> ClassificationResult:
        if not isinstance(event, InteractionEventInput):
            event = InteractionEventInput.model_validate(event)

        classification = self.classifier.classify(event.user_agent, event.hints())
        self._persist(event, classification)

        if classification.is_bot or not event.subscriber_id:
            return classification

        # One subscriber write per event: activity alone, or activity
        # together with the level check after a full read.
        try:
            now = utc_now_iso()
            if self._is_completed_read(event):
                self.engagement.on_scroll_completed(event.subscriber_id, activity_at=now)
            else:
                self.storage.touch_subscriber(event.subscriber_id, now)
        except Exception as e:
            logger.error(f"❌ Failed to update subscriber {event.subscriber_id}: {e}")
            raise RecordingError(
                f"Subscriber update failed for {event.subscriber_id}", classification
            ) from e

        return classification

    def record_agent_query(self, subscriber_id: str, issue_id: Optional[str] = None,
                           user_agent: Optional[str] = None,
                           source_address: Optional[str] = None,
                           metadata: Optional[Dict[str, Any]] = None) -> ClassificationResult:
        """Authenticated agent pull: attributable access, never counted as a bot."""
        return self._record_authenticated(
            EventType.AGENT_QUERY, subscriber_id, issue_id,
            user_agent, source_address, metadata
        )

    def record_mcp_query(self, subscriber_id: str, issue_id: Optional[str] = None,
                         user_agent: Optional[str] = None,
                         source_address: Optional[str] = None,
                         metadata: Optional[Dict[str, Any]] = None) -> ClassificationResult:
        """Authenticated MCP tool call: attributable access, never counted as a bot."""
        return self._record_authenticated(
            EventType.MCP_QUERY, subscriber_id, issue_id,
            user_agent, source_address, metadata
        )

    def _record_authenticated(self, event_type: EventType, subscriber_id: str,
                              issue_id: Optional[str], user_agent: Optional[str],
                              source_address: Optional[str],
                              metadata: Optional[Dict[str, Any]]) -> ClassificationResult:
        event = InteractionEventInput(
            event_type=event_type,
            subscriber_id=subscriber_id,
            issue_id=issue_id,
            user_agent=user_agent,
            source_address=source_address,
            metadata=metadata or {},
        )
        self._persist(event, AUTHENTICATED_AGENT)
        try:
            self.storage.touch_subscriber(subscriber_id, utc_now_iso())
        except Exception as e:
            logger.error(f"❌ Failed to update subscriber {subscriber_id}: {e}")
            raise RecordingError(
                f"Subscriber update failed for {subscriber_id}", AUTHENTICATED_AGENT
            ) from e
        return AUTHENTICATED_AGENT

    def _persist(self, event: InteractionEventInput,
                 classification: ClassificationResult) -> str:
        stored = InteractionEvent(
            issue_id=event.issue_id,
            subscriber_id=event.subscriber_id,
            event_type=event.event_type,
            is_bot=classification.is_bot,
            bot_type=classification.stored_bot_type,
            confidence=classification.confidence,
            reasons=list(classification.reasons),
            scroll_depth=event.scroll_depth,
            source_hash=self._hash(event.source_address),
            user_agent=event.user_agent,
            metadata=event.metadata,
        )
        try:
            event_id = self.storage.append_event(stored.model_dump(mode="json"))
        except Exception as e:
            logger.error(f"❌ Failed to record {event.event_type.value} event: {e}")
            raise RecordingError(
                f"Could not persist {event.event_type.value} event", classification
            ) from e

        logger.debug(
            f"Recorded {event.event_type.value} event {event_id} "
            f"(bot={classification.is_bot}, reason={classification.reason or '-'})"
        )
        return event_id

    def _hash(self, address: Optional[str]) -> Optional[str]:
        if not address:
            return None
        return hash_source_address(address.strip(), self.hash_secret)

    def _is_completed_read(self, event: InteractionEventInput) -> bool:
        return (
            event.event_type == EventType.SCROLL
            and event.scroll_depth is not None
            and event.scroll_depth >= self.engagement.settings.completion_scroll_depth
        )
