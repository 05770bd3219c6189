"""Tests for data model classes."""
from datetime import datetime

from blind75_tutor.models import (
    NEW, Problem, QueueBreakdown, StudyStats, UserProblemProgress, UserStudySettings,
)


def test_problem_defaults():
    p = Problem(title="Two Sum", difficulty="easy")
    assert p.problem_group == ""
    assert p.prompt == ""
    assert p.detailed_hint == ""


def test_progress_defaults():
    up = UserProblemProgress(user_id="u1", problem_title="Two Sum")
    assert up.status == NEW
    assert up.best_score is None
    assert up.reviews_completed == 0
    assert up.next_review_at is None


def test_settings_defaults():
    s = UserStudySettings(user_id="u1")
    assert s.target_days == 10
    assert s.daily_cap == 15
    assert s.easy_bonus == 10
    assert isinstance(s.start_date, datetime)


def test_stats_default_queue_breakdown():
    stats = StudyStats(
        total_problems=75, new_count=75, learning_count=0, mastered_count=0,
        due_today=0, due_tomorrow=0, days_left=10, on_pace=True,
    )
    assert stats.todays_queue == QueueBreakdown(0, 0, 0)
