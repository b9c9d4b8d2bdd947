"""Markdown rendering of a ranked issue list."""
from __future__ import annotations

from typing import Iterable, Mapping

from domain.report import AggregatedIssue
from domain.time_entry import IssueSummary


def render_issue(issue: AggregatedIssue, subject: str) -> str:
    return f"* **#{issue.issue_id}: {subject.strip()}**\n\n{issue.comments}\n"


def render_report(
    ranked_issues: Iterable[AggregatedIssue],
    issue_titles: Mapping[int, IssueSummary],
) -> str:
    """Concatenate one block per issue, in the given order.

    Every issue must have a title in ``issue_titles``; the report service
    guarantees it fetched all of them, so a miss raises ``KeyError``.
    """
    return "".join(
        render_issue(issue, issue_titles[issue.issue_id].subject) for issue in ranked_issues
    )
