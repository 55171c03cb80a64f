""" Wiring of the lettr core from the app config. """
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from lettr.analytics.classifier import ActorClassifier, ClassifierSettings
from lettr.analytics.engagement import EngagementSettings, EngagementStateMachine
from lettr.analytics.events import EventRecorder
from lettr.analytics.signatures import BotSignatures, default_signatures
from lettr.fidelity.scorer import FidelityScorer, FidelitySettings
from lettr.models.configs.oracle_config import OracleConfig
from lettr.models.loader import build_oracle
from lettr.storage.lettr_storage import LettrStorage
from lettr.utils.config import load_resolved_config

logger = logging.getLogger(__name__)


class LettrCore:
    """Handles shared by request handlers and publish actions."""

    def __init__(self, storage: LettrStorage, recorder: EventRecorder,
                 engagement: EngagementStateMachine, scorer: FidelityScorer,
                 signatures: BotSignatures):
        self.storage = storage
        self.recorder = recorder
        self.engagement = engagement
        self.scorer = scorer
        self.signatures = signatures


def build_core(config: Optional[Dict[str, Any]] = None,
               signatures: Optional[BotSignatures] = None) -> LettrCore:
    config = config if config is not None else load_resolved_config()

    db_path = Path(config["db_path"])
    db_path.parent.mkdir(parents=True, exist_ok=True)
    storage = LettrStorage(str(db_path))

    signatures = signatures or default_signatures()
    classifier = ActorClassifier(
        signatures, ClassifierSettings(**(config.get("classifier") or {}))
    )
    engagement = EngagementStateMachine(
        storage, EngagementSettings(**(config.get("engagement") or {}))
    )
    recorder = EventRecorder(
        storage, classifier, engagement, hash_secret=config.get("hash_secret") or ""
    )
    oracle = build_oracle(OracleConfig(**(config.get("oracle") or {})))
    scorer = FidelityScorer(oracle, FidelitySettings(**(config.get("fidelity") or {})))

    logger.info(f"✅ lettr core ready (db: {db_path}, oracle: {'on' if oracle else 'off'})")
    return LettrCore(storage, recorder, engagement, scorer, signatures)
