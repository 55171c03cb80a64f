""" Oracle-backed helpers for authoring: key claims and agent summaries. """
import logging
import re
from typing import List, Optional

from lettr.models.base_model import PromptTemplate, SummarizationOracle
from lettr.models.registry import load_prompt_spec

logger = logging.getLogger(__name__)

MAX_CLAIMS = 5
MAX_CONTENT_CHARS = 3000
_LIST_MARKER = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


def extract_key_claims(content: str, title: str,
                       oracle: Optional[SummarizationOracle]) -> List[str]:
    """Ask the oracle for up to 5 key claims. Empty list on any failure."""
    if oracle is None:
        return []

    prompt = PromptTemplate(load_prompt_spec("key_claims_prompt"))
    try:
        output = oracle.complete(
            prompt(title=title, content=content[:MAX_CONTENT_CHARS]), 400
        )
    except Exception as e:
        logger.error(f"❌ Failed to extract key claims: {str(e)}")
        return []

    claims = []
    for line in output.strip().splitlines():
        line = _LIST_MARKER.sub("", line).strip()
        if line:
            claims.append(line)
    return claims[:MAX_CLAIMS]


def generate_agent_summary(content: str, title: str,
                           oracle: Optional[SummarizationOracle]) -> Optional[str]:
    """Summary served to agent subscribers. None on any failure."""
    if oracle is None:
        return None

    prompt = PromptTemplate(load_prompt_spec("agent_summary_prompt"))
    try:
        output = oracle.complete(
            prompt(title=title, content=content[:MAX_CONTENT_CHARS]), 300
        )
    except Exception as e:
        logger.error(f"❌ Failed to generate summary: {str(e)}")
        return None
    return output.strip() or None
