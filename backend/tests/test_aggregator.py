from __future__ import annotations

import random

from application.aggregator import aggregate, collect_issue_ids, process_time_entries, rank
from domain.report import AggregatedIssue

from conftest import TODAY, YESTERDAY, make_entry


def _by_id(issues):
    return {issue.issue_id: issue for issue in issues}


def test_process_time_entries_groups_and_ranks(raw_time_entries):
    processed = process_time_entries(raw_time_entries)

    assert len(processed) == 6
    issues = _by_id(processed)
    assert issues[1] == AggregatedIssue(issue_id=1, hours=3.0, comments="  Note 4  \n  Note 5  \n")
    assert issues[2] == AggregatedIssue(issue_id=2, hours=5.0, comments="  Note 3  \n")
    assert issues[3] == AggregatedIssue(issue_id=3, hours=8.0, comments="  Note 8  \n")
    assert issues[4] == AggregatedIssue(issue_id=4, hours=16.0, comments="  Note 2  \n  Note 1  \n")
    assert issues[5] == AggregatedIssue(issue_id=5, hours=8.0, comments="  Note 9  \n")
    assert issues[6] == AggregatedIssue(issue_id=6, hours=8.0, comments="  Note 10  \n")

    assert [issue.issue_id for issue in processed] == [4, 3, 5, 6, 2, 1]


def test_same_day_notes_follow_entry_id():
    entries = [
        make_entry(30, 1.0, "third", 7, TODAY),
        make_entry(10, 1.0, "first", 7, TODAY),
        make_entry(20, 1.0, "second", 7, TODAY),
        make_entry(99, 1.0, "earliest", 7, YESTERDAY),
    ]

    (issue,) = aggregate(entries)

    assert issue.comments == "  earliest  \n  first  \n  second  \n  third  \n"


def test_hours_sum_is_independent_of_input_order():
    entries = [make_entry(i, hours, f"n{i}", 1, TODAY) for i, hours in enumerate([0.1, 0.2, 0.7, 1.25, 3.3])]
    expected = aggregate(entries)[0].hours

    shuffled = list(entries)
    for seed in range(10):
        random.Random(seed).shuffle(shuffled)
        assert aggregate(shuffled)[0].hours == expected


def test_hours_are_not_rounded():
    entries = [make_entry(1, 0.25, "a", 1, TODAY), make_entry(2, 0.5, "b", 1, TODAY)]

    assert aggregate(entries)[0].hours == 0.75


def test_empty_input_aggregates_to_nothing():
    assert aggregate([]) == []
    assert process_time_entries([]) == []


def test_rank_breaks_hour_ties_by_issue_id():
    issues = [
        AggregatedIssue(issue_id=9, hours=2.0, comments=""),
        AggregatedIssue(issue_id=3, hours=2.0, comments=""),
        AggregatedIssue(issue_id=5, hours=4.5, comments=""),
        AggregatedIssue(issue_id=1, hours=0.5, comments=""),
    ]

    ranked = rank(issues)

    assert [issue.issue_id for issue in ranked] == [5, 3, 9, 1]
    assert rank(ranked) == ranked
    assert rank(reversed(issues)) == ranked


def test_collect_issue_ids_deduplicates_across_users():
    per_user = [
        [AggregatedIssue(3, 1.0, ""), AggregatedIssue(1, 1.0, "")],
        [AggregatedIssue(1, 2.0, ""), AggregatedIssue(2, 1.0, "")],
        [],
    ]

    assert collect_issue_ids(per_user) == [1, 2, 3]
