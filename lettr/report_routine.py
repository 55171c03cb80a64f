import argparse
from lettr.analytics.report import build_reach_report
from lettr.core import build_core
from lettr.utils.date import to_aware_utc
from lettr.utils.print import safe_pretty_print


def run_report_routine(since=None, issue_id=None):
    core = build_core()
    events = core.storage.events(issue_id=issue_id)
    report = build_reach_report(events, since=to_aware_utc(since), signatures=core.signatures)
    print(safe_pretty_print(report.model_dump(), max_width=100))
    return report


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Print the human-reach report.")
    parser.add_argument("--since", help="ISO date, only count events after it")
    parser.add_argument("--issue", help="Restrict to one issue id")
    args = parser.parse_args()
    run_report_routine(since=args.since, issue_id=args.issue)
