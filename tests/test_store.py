from datetime import datetime, timedelta

import pytest

from blind75_tutor.db import PersistenceError, get_connection
from blind75_tutor.store import ProgressStore

NOW = datetime(2026, 3, 2, 9, 30)


def test_fetch_settings_missing(store):
    assert store.fetch_settings("nobody") is None


def test_upsert_settings_partial(store):
    store.upsert_settings("u1", {"target_days": 20, "daily_cap": 5, "easy_bonus": 0, "start_date": NOW})
    updated = store.upsert_settings("u1", {"daily_cap": 8})
    assert updated.daily_cap == 8
    assert updated.target_days == 20
    assert updated.easy_bonus == 0
    assert updated.start_date == NOW


def test_upsert_settings_rejects_unknown_field(store):
    with pytest.raises(ValueError):
        store.upsert_settings("u1", {"colour": "blue"})


def test_upsert_progress_roundtrip(store):
    saved = store.upsert_progress("u1", "Two Sum", {
        "status": "learning", "best_score": 60, "reviews_needed": 2,
        "reviews_completed": 1, "last_reviewed_at": NOW,
        "next_review_at": NOW + timedelta(days=1),
    })
    assert saved.status == "learning"
    assert saved.last_reviewed_at == NOW
    assert store.fetch_progress("u1", "Two Sum") == saved
    assert store.fetch_progress("u2", "Two Sum") is None


def test_upsert_progress_updates_in_place(store):
    store.upsert_progress("u1", "Two Sum", {"status": "learning", "reviews_completed": 1})
    store.upsert_progress("u1", "Two Sum", {"status": "mastered", "reviews_completed": 2})
    records = store.fetch_all_progress("u1")
    assert len(records) == 1
    assert records[0].status == "mastered"


def test_fetch_due_reviews(store):
    store.upsert_progress("u1", "Two Sum", {"status": "learning", "next_review_at": NOW - timedelta(days=2)})
    store.upsert_progress("u1", "3Sum", {"status": "learning", "next_review_at": NOW - timedelta(hours=1)})
    store.upsert_progress("u1", "Same Tree", {"status": "learning", "next_review_at": NOW + timedelta(hours=1)})
    store.upsert_progress("u1", "Word Break", {"status": "mastered", "next_review_at": NOW - timedelta(days=1)})
    due = store.fetch_due_reviews("u1", now=NOW)
    assert [p.problem_title for p in due] == ["Two Sum", "3Sum"]


def test_fetch_due_tomorrow(store):
    tomorrow = datetime(2026, 3, 3)
    store.upsert_progress("u1", "Two Sum", {"status": "learning", "next_review_at": tomorrow})
    store.upsert_progress("u1", "3Sum", {"status": "learning", "next_review_at": tomorrow + timedelta(hours=23)})
    store.upsert_progress("u1", "Same Tree", {"status": "learning", "next_review_at": tomorrow + timedelta(days=1)})
    store.upsert_progress("u1", "Word Break", {"status": "learning", "next_review_at": NOW})
    due = store.fetch_due_tomorrow("u1", now=NOW)
    assert {p.problem_title for p in due} == {"Two Sum", "3Sum"}


def test_batch_upsert_is_all_or_nothing(store):
    items = [
        {"problem_title": "Two Sum", "status": "mastered"},
        {"problem_title": "3Sum", "status": "bogus"},
    ]
    with pytest.raises(PersistenceError):
        store.batch_upsert_progress("u1", items)
    assert store.fetch_all_progress("u1") == []


def test_delete_progress(store):
    store.upsert_progress("u1", "Two Sum", {"status": "learning"})
    store.upsert_progress("u1", "3Sum", {"status": "learning"})
    store.upsert_progress("u2", "3Sum", {"status": "learning"})
    assert store.delete_progress("u1", "Two Sum") == 1
    assert store.delete_progress("u1") == 1
    assert store.fetch_all_progress("u1") == []
    assert len(store.fetch_all_progress("u2")) == 1


def test_fetch_all_problems_in_catalog_order(store):
    problems = store.fetch_all_problems()
    assert len(problems) == 75
    assert problems[0].title == "Contains Duplicate"
    assert problems[-1].title == "Sum of Two Integers"


def test_insert_problems_skips_existing_titles(store):
    from blind75_tutor.models import Problem
    inserted = store.insert_problems([
        Problem(title="Two Sum", difficulty="easy"),
        Problem(title="LRU Cache", difficulty="medium", problem_group="linked_list"),
    ])
    assert inserted == 1
    assert store.fetch_all_problems()[-1].title == "LRU Cache"


def test_uninitialised_db_raises_persistence_error(tmp_db):
    store = ProgressStore(tmp_db)
    with pytest.raises(PersistenceError):
        store.fetch_all_progress("u1")


def test_persistence_error_chains_sqlite_error(tmp_db):
    store = ProgressStore(tmp_db)
    with pytest.raises(PersistenceError) as exc:
        store.fetch_settings("u1")
    assert exc.value.__cause__ is not None
