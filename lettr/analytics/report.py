""" Human-reach reporting over the interaction event log. """
from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from lettr.analytics.signatures import BotSignatures, default_signatures
from lettr.analytics.types import EventType
from lettr.utils.date import to_aware_utc


class ReachReport(BaseModel):
    total_events: int = 0
    human_events: int = 0
    bot_events: int = 0
    human_rate: int = Field(0, description="Human share of events, in percent.")
    bots_by_type: Dict[str, int] = Field(default_factory=dict)
    bots_by_vendor: Dict[str, int] = Field(default_factory=dict)
    human_opens_by_issue: Dict[str, int] = Field(default_factory=dict)


def build_reach_report(events: List[dict], since: Optional[datetime] = None,
                       signatures: Optional[BotSignatures] = None) -> ReachReport:
    """
    Summarize stored events. Bot suppression relies on the `is_bot` flag
    written at record time; it is never recomputed here.
    """
    signatures = signatures or default_signatures()
    since = to_aware_utc(since)

    report = ReachReport()
    by_type = Counter()
    by_vendor = Counter()
    opens = Counter()

    for event in events:
        if since is not None and to_aware_utc(event.get("created_at")) < since:
            continue

        report.total_events += 1
        if event.get("is_bot"):
            report.bot_events += 1
            by_type[event.get("bot_type") or "unclassified"] += 1
            by_vendor[signatures.category(event.get("user_agent"))] += 1
            continue

        report.human_events += 1
        if event.get("event_type") == EventType.OPEN.value and event.get("issue_id"):
            opens[event["issue_id"]] += 1

    if report.total_events:
        report.human_rate = round(100 * report.human_events / report.total_events)
    report.bots_by_type = dict(by_type)
    report.bots_by_vendor = dict(by_vendor)
    report.human_opens_by_issue = dict(opens)
    return report
