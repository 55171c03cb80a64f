"""
Content fidelity ("penetration") scoring.

At publish time the issue is compressed by the summarization oracle, then
the oracle judges which of the author's key claims survived in that
summary. The score is the preserved share of claims, in percent.

The oracle is a non-deterministic external dependency: two runs on the same
input may disagree. Every failure degrades to "no assessment" so that
publishing is never blocked.
"""
import json
import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union

from pydantic import BaseModel, Field

from lettr.models.base_model import PromptTemplate, SummarizationOracle
from lettr.models.registry import load_prompt_spec
from lettr.utils.print import safe_pretty_print

logger = logging.getLogger(__name__)

PARSE_FAILURE_SCORE = 50
PARSE_FAILURE_SUGGESTION = "Could not parse the claim verification result."


class FidelitySettings(BaseModel):
    max_content_chars: int = Field(4000, description="Content prefix sent to the oracle.")
    compression_max_tokens: int = 200
    verification_max_tokens: int = 600


class FidelityAssessment(BaseModel):
    score: int = Field(..., ge=0, le=100)
    ai_summary: str = ""
    preserved_claims: List[str] = Field(default_factory=list)
    lost_claims: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_claims(key_claims: Optional[Sequence[str]]) -> List[str]:
    """Strip claims and drop blanks and duplicates, keeping author order."""
    claims = []
    for claim in key_claims or []:
        claim = str(claim).strip()
        if claim and claim not in claims:
            claims.append(claim)
    return claims


def _balanced_end(text: str, start: int) -> Optional[int]:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Return the first balanced `{...}` substring that parses as a JSON object."""
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            try:
                parsed = json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, dict):
                return parsed
        start = text.find("{", start + 1)
    return None


def _match_claim(judgment: BaseModel, claims: List[str],
                 taken: Set[int]) -> Optional[int]:
    """Claim index named by the judgment's text, else by its 1-based index."""
    if judgment.claim is not None and judgment.claim.strip() in claims:
        idx = claims.index(judgment.claim.strip())
        if idx not in taken:
            return idx

    index = judgment.index
    if index is not None and 1 <= index <= len(claims) and (index - 1) not in taken:
        return index - 1
    return None


def partition_claims(claims: List[str],
                     verdict: Union[BaseModel, Dict[str, Any]]
                     ) -> Tuple[List[str], List[str]]:
    """
    Split claims into (preserved, lost) following the oracle's judgment
    order.

    Judgments naming a claim by text or index are matched first. When the
    oracle returned exactly one judgment per claim, each remaining judgment
    then takes the claim at its own position if still free, otherwise the
    next free claim. Claims left unjudged are appended to lost, so the two
    lists always partition `claims`.
    """
    if isinstance(verdict, dict):
        verdict = load_prompt_spec("verification_prompt").validate_output(verdict)
    results = verdict.results

    matched: Dict[int, int] = {}
    for position, judgment in enumerate(results):
        if judgment is None:
            continue
        idx = _match_claim(judgment, claims, set(matched.values()))
        if idx is not None:
            matched[position] = idx

    if len(results) == len(claims):
        taken = set(matched.values())
        leftovers = []
        for position, judgment in enumerate(results):
            if judgment is None or position in matched:
                continue
            if position in taken:
                leftovers.append(position)
            else:
                matched[position] = position
                taken.add(position)
        free_claims = [i for i in range(len(claims)) if i not in taken]
        matched.update(zip(leftovers, free_claims))

    preserved, lost = [], []
    for position in sorted(matched):
        claim = claims[matched[position]]
        if results[position].preserved:
            preserved.append(claim)
        else:
            lost.append(claim)

    judged = set(matched.values())
    lost += [claim for i, claim in enumerate(claims) if i not in judged]
    return preserved, lost


class FidelityScorer:
    def __init__(self, oracle: Optional[SummarizationOracle],
                 settings: Optional[FidelitySettings] = None):
        self.oracle = oracle
        self.settings = settings or FidelitySettings()
        self.compression_prompt = PromptTemplate(load_prompt_spec("compression_prompt"))
        self.verification_prompt = PromptTemplate(load_prompt_spec("verification_prompt"))

    def assess(self, content: str, key_claims: Sequence[str]) -> Optional[FidelityAssessment]:
        """
        Measure how many key claims survive AI compression of `content`.
        Returns None without an oracle, without claims, or when the
        oracle fails.
        """
        claims = normalize_claims(key_claims)
        if not claims:
            return None
        if self.oracle is None:
            logger.info("No oracle configured, skipping fidelity assessment")
            return None

        try:
            ai_summary = self._compress(content)
            verdict = self._verify(ai_summary, claims)
        except Exception as e:
            logger.error(f"❌ Failed to measure content fidelity: {str(e)}")
            return None

        parsed = extract_json_object(verdict)
        if parsed is None:
            logger.warning("❌ No JSON object in verification response, scoring as unparsed")
            return FidelityAssessment(
                score=PARSE_FAILURE_SCORE,
                ai_summary=ai_summary,
                preserved_claims=[],
                lost_claims=list(claims),
                suggestions=[PARSE_FAILURE_SUGGESTION],
            )

        judgments = self.verification_prompt.prompt_spec.validate_output(parsed)
        logger.debug(f"Validated verdict:\n{safe_pretty_print(judgments.model_dump())}")
        preserved, lost = partition_claims(claims, judgments)
        assessment = FidelityAssessment(
            score=round_half_up(100 * len(preserved) / len(claims)),
            ai_summary=ai_summary,
            preserved_claims=preserved,
            lost_claims=lost,
            suggestions=judgments.suggestions,
        )
        logger.info(
            f"✅ Fidelity score {assessment.score} "
            f"({len(preserved)}/{len(claims)} claims preserved)"
        )
        return assessment

    def _compress(self, content: str) -> str:
        prompt = self.compression_prompt(content=content[:self.settings.max_content_chars])
        summary = self.oracle.complete(prompt, self.settings.compression_max_tokens).strip()
        logger.debug(f"Compression output:\n{safe_pretty_print(summary)}")
        return summary

    def _verify(self, ai_summary: str, claims: List[str]) -> str:
        numbered = "\n".join(f"{i + 1}. {claim}" for i, claim in enumerate(claims))
        prompt = self.verification_prompt(ai_summary=ai_summary, claims=numbered)
        verdict = self.oracle.complete(prompt, self.settings.verification_max_tokens)
        logger.debug(f"Verification output:\n{safe_pretty_print(verdict)}")
        return verdict


def assess(content: str, key_claims: Sequence[str],
           oracle: Optional[SummarizationOracle],
           settings: Optional[FidelitySettings] = None) -> Optional[FidelityAssessment]:
    return FidelityScorer(oracle, settings).assess(content, key_claims)
