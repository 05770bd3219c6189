from datetime import datetime, timedelta

from blind75_tutor.grid import GROUP_ORDER, format_group_name, get_progress_grid
from blind75_tutor.models import Problem

NOW = datetime(2026, 3, 2, 9, 30)


def test_format_group_name():
    assert format_group_name("arrays_hashing") == "Arrays Hashing"
    assert format_group_name("dynamic_programming_1d") == "Dynamic Programming 1d"
    assert format_group_name("stack") == "Stack"


def test_grid_covers_catalog_in_canonical_order(store):
    grid = get_progress_grid(store, "u1", now=NOW)
    assert [g.group_name for g in grid] == [format_group_name(g) for g in GROUP_ORDER]
    assert sum(g.total_count for g in grid) == 75
    assert all(g.mastered_count == 0 for g in grid)
    assert grid[0].problems[0].problem.title == "Contains Duplicate"
    assert grid[0].problems[0].progress is None


def test_grid_reports_mastery_and_due(store):
    store.upsert_progress("u1", "Two Sum", {"status": "mastered", "reviews_needed": 0, "reviews_completed": 1})
    store.upsert_progress("u1", "Valid Anagram", {
        "status": "learning", "reviews_needed": 2, "reviews_completed": 1,
        "next_review_at": NOW - timedelta(hours=2),
    })
    arrays = get_progress_grid(store, "u1", now=NOW)[0]
    assert arrays.group_name == "Arrays Hashing"
    assert arrays.mastered_count == 1
    assert arrays.total_count == 8
    items = {i.problem.title: i for i in arrays.problems}
    assert items["Two Sum"].progress.status == "mastered"
    assert items["Valid Anagram"].is_due_today is True
    assert items["Two Sum"].is_due_today is False


def test_unknown_groups_sorted_after_known(store):
    store.insert_problems([
        Problem(title="LRU Cache", difficulty="medium", problem_group="design"),
        Problem(title="Bulb Switcher", difficulty="medium", problem_group="brainteaser"),
        Problem(title="Mystery", difficulty="easy"),
    ])
    names = [g.group_name for g in get_progress_grid(store, "u1", now=NOW)]
    assert names[-3:] == ["Brainteaser", "Design", "Other"]
    assert names[0] == "Arrays Hashing"
