""" Publish an issue and attach its fidelity assessment. """
import logging
from typing import Any, Dict, List, Optional, Tuple

from lettr.fidelity.scorer import FidelityAssessment, FidelityScorer, normalize_claims
from lettr.storage.lettr_storage import LettrStorage
from lettr.utils.date import utc_now_iso
from lettr.utils.text import estimate_reading_time, markdown_from_html

logger = logging.getLogger(__name__)


def publish_issue(storage: LettrStorage, issue_id: str,
                  scorer: Optional[FidelityScorer] = None,
                  content_html: Optional[str] = None,
                  key_claims: Optional[List[str]] = None,
                  **fields: Any) -> Tuple[Dict[str, Any], Optional[FidelityAssessment]]:
    """
    Mark an issue as published, optionally replacing its body and claims.

    The fidelity score is advisory: a missing scorer, an empty claim list
    or an oracle failure leave `content_penetration_score` empty and the
    issue is published anyway.

    Returns:
        (updated issue record, assessment or None)

    Raises:
        ValueError: If the issue does not exist.
    """
    issue = storage.get_issue(issue_id)
    if issue is None:
        raise ValueError(f"No issue found with id {issue_id}")

    updates: Dict[str, Any] = dict(fields)
    if content_html is not None:
        updates["full_html"] = content_html
        updates["full_markdown"] = markdown_from_html(content_html)

    full_markdown = updates.get("full_markdown", issue.get("full_markdown")) or ""
    claims = normalize_claims(
        key_claims if key_claims is not None else issue.get("key_claims")
    )

    assessment = None
    if scorer is not None and claims and full_markdown:
        assessment = scorer.assess(full_markdown, claims)

    updates.update({
        "key_claims": claims,
        "reading_time_minutes": estimate_reading_time(full_markdown) if full_markdown
        else issue.get("reading_time_minutes"),
        "status": "published",
        "published_at": utc_now_iso(),
        "content_penetration_score": assessment.score if assessment else None,
        "fidelity": assessment.model_dump() if assessment else None,
    })

    updated = storage.update_issue(issue_id, updates)
    logger.info(
        f"✅ Published issue {issue_id} "
        f"(fidelity score: {assessment.score if assessment else 'n/a'})"
    )
    return updated, assessment
