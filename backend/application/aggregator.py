"""Grouping, summation and ranking of a user's time entries."""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from domain.report import AggregatedIssue
from domain.time_entry import TimeEntry


def format_note(comments: str) -> str:
    """One markdown hard-line-break note line."""
    return f"  {comments}  \n"


def aggregate(entries: Iterable[TimeEntry]) -> List[AggregatedIssue]:
    """Roll time entries up per issue. Output order is unspecified; see ``rank``."""
    grouped: Dict[int, List[TimeEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.issue_id].append(entry)

    issues: List[AggregatedIssue] = []
    for issue_id, group in grouped.items():
        # (day, id) fixes both the note order and the float summation order
        group.sort(key=lambda entry: (entry.spent_on, entry.entry_id))
        issues.append(
            AggregatedIssue(
                issue_id=issue_id,
                hours=sum(entry.hours for entry in group),
                comments="".join(format_note(entry.comments) for entry in group),
            )
        )
    return issues


def rank(issues: Iterable[AggregatedIssue]) -> List[AggregatedIssue]:
    return sorted(issues, key=AggregatedIssue.rank_key)


def process_time_entries(entries: Iterable[TimeEntry]) -> List[AggregatedIssue]:
    """aggregate + rank in one step, as the report service uses it."""
    return rank(aggregate(entries))


def collect_issue_ids(per_user: Iterable[Iterable[AggregatedIssue]]) -> List[int]:
    """Distinct issue ids referenced by any user, ascending."""
    return sorted({issue.issue_id for issues in per_user for issue in issues})
