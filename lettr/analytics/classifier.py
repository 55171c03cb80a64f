"""
Actor classifier: decides whether a request comes from a human or an
automated agent.

Checks run in a fixed order and the first decisive one wins:

1. missing user agent
2. known crawler signature (tagged `known_ai_bot` when it is also an AI crawler)
3. AI crawler pattern alone
4. behavioral heuristics (latency, pointer movement, cloud source address)

The classifier is a pure function of its inputs, the signature data and
the settings. It keeps no per-address or per-session memory.
"""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lettr.analytics.signatures import BotSignatures, default_signatures
from lettr.analytics.types import BotType


class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_bot: bool
    bot_type: BotType
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasons: Tuple[str, ...] = ()

    @model_validator(mode="after")
    def check_bot_type(self):
        if self.is_bot != (self.bot_type != BotType.NONE):
            raise ValueError(
                f"is_bot={self.is_bot} is inconsistent with bot_type={self.bot_type.value}"
            )
        return self

    @property
    def reason(self) -> str:
        return ",".join(self.reasons)

    @property
    def stored_bot_type(self) -> Optional[str]:
        """Value persisted on events: the bot type, or None for humans."""
        return None if self.bot_type == BotType.NONE else self.bot_type.value


class RequestHints(BaseModel):
    """Optional request signals besides the user agent."""
    source_address: Optional[str] = None
    request_latency_ms: Optional[float] = None
    has_pointer_movement: Optional[bool] = None


class ClassifierSettings(BaseModel):
    """Tunable thresholds and weights."""
    instant_response_ms: float = Field(50, description="Latency below which a request looks automated.")
    instant_response_weight: float = 0.3
    no_pointer_weight: float = 0.2
    cloud_ip_weight: float = 0.2
    suspicion_threshold: float = 0.5
    missing_user_agent_confidence: float = 0.7
    known_bot_confidence: float = 0.99
    ai_pattern_confidence: float = 0.95


class ActorClassifier:
    def __init__(self, signatures: Optional[BotSignatures] = None,
                 settings: Optional[ClassifierSettings] = None):
        self.signatures = signatures or default_signatures()
        self.settings = settings or ClassifierSettings()

    def classify(self, user_agent: Optional[str],
                 hints: Optional[RequestHints] = None) -> ClassificationResult:
        hints = hints or RequestHints()
        settings = self.settings

        if not user_agent or not user_agent.strip():
            return ClassificationResult(
                is_bot=True,
                bot_type=BotType.SUSPECTED_BOT,
                confidence=settings.missing_user_agent_confidence,
                reasons=("no_user_agent",),
            )

        is_ai_bot = self.signatures.is_ai_bot(user_agent)

        if self.signatures.is_known_bot(user_agent):
            return ClassificationResult(
                is_bot=True,
                bot_type=BotType.KNOWN_BOT,
                confidence=settings.known_bot_confidence,
                reasons=("known_ai_bot" if is_ai_bot else "known_bot",),
            )

        if is_ai_bot:
            return ClassificationResult(
                is_bot=True,
                bot_type=BotType.KNOWN_BOT,
                confidence=settings.ai_pattern_confidence,
                reasons=("ai_bot_pattern",),
            )

        suspicion, reasons = self._score_behavior(hints)

        if suspicion >= settings.suspicion_threshold:
            return ClassificationResult(
                is_bot=True,
                bot_type=BotType.SUSPECTED_BOT,
                confidence=min(suspicion, 1.0),
                reasons=reasons,
            )

        return ClassificationResult(
            is_bot=False,
            bot_type=BotType.NONE,
            confidence=round(1.0 - suspicion, 4),
            reasons=reasons,
        )

    def _score_behavior(self, hints: RequestHints) -> Tuple[float, Tuple[str, ...]]:
        settings = self.settings
        suspicion = 0.0
        reasons = []

        if hints.request_latency_ms is not None \
                and hints.request_latency_ms < settings.instant_response_ms:
            suspicion += settings.instant_response_weight
            reasons.append("instant_response")

        if hints.has_pointer_movement is False:
            suspicion += settings.no_pointer_weight
            reasons.append("no_mouse_movement")

        if hints.source_address and self.signatures.is_cloud_address(hints.source_address):
            suspicion += settings.cloud_ip_weight
            reasons.append("cloud_ip")

        # Rounded so summed weights compare exactly against the threshold.
        return round(suspicion, 4), tuple(reasons)


def classify(user_agent: Optional[str], hints: Optional[RequestHints] = None,
             signatures: Optional[BotSignatures] = None,
             settings: Optional[ClassifierSettings] = None) -> ClassificationResult:
    """Classify a single request with the given (or bundled) signature data."""
    return ActorClassifier(signatures, settings).classify(user_agent, hints)
