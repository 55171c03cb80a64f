"""
Traffic classification, interaction events and subscriber engagement.
"""

from .types import BotType, EventType
from .classifier import ActorClassifier, ClassificationResult, ClassifierSettings, RequestHints, classify
from .engagement import EngagementSettings, EngagementStateMachine, level_label
from .events import EventRecorder, InteractionEvent, InteractionEventInput, RecordingError
from .report import ReachReport, build_reach_report
from .signatures import BotSignatures, default_signatures, load_signatures

__all__ = [
    "ActorClassifier",
    "BotSignatures",
    "BotType",
    "ClassificationResult",
    "ClassifierSettings",
    "EngagementSettings",
    "EngagementStateMachine",
    "EventRecorder",
    "EventType",
    "InteractionEvent",
    "InteractionEventInput",
    "ReachReport",
    "RecordingError",
    "RequestHints",
    "build_reach_report",
    "classify",
    "default_signatures",
    "level_label",
    "load_signatures",
]
