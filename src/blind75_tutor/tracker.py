"""Apply a practice attempt to a user's mastery record."""
import logging
from datetime import datetime, time, timedelta

from blind75_tutor.models import LEARNING, Problem, UserProblemProgress
from blind75_tutor.policy import calculate_reviews_needed, determine_status
from blind75_tutor.settings import get_settings_with_defaults
from blind75_tutor.store import ProgressStore

logger = logging.getLogger(__name__)


def next_midnight(now: datetime) -> datetime:
    """Start of the calendar day after ``now``."""
    return datetime.combine(now.date() + timedelta(days=1), time.min)


def update_progress_after_attempt(
    store: ProgressStore,
    user_id: str,
    problem_title: str,
    score: int,
    difficulty: str,
    existing_progress: UserProblemProgress | None,
    now: datetime | None = None,
) -> UserProblemProgress | None:
    """Record one attempt and return the stored record.

    Reviews needed are recomputed from this attempt alone, so a strong later
    attempt can grant mastery even after weak earlier ones.
    """
    now = now or datetime.now()
    settings = get_settings_with_defaults(store, user_id)

    reviews_needed = calculate_reviews_needed(score, difficulty, settings.easy_bonus)
    previous = existing_progress.reviews_completed if existing_progress else 0
    reviews_completed = previous + 1
    status = determine_status(reviews_completed, reviews_needed)

    next_review_at = next_midnight(now) if status == LEARNING else None

    if existing_progress and existing_progress.best_score is not None:
        best_score = max(existing_progress.best_score, score)
    else:
        best_score = score

    return store.upsert_progress(user_id, problem_title, {
        "status": status,
        "best_score": best_score,
        "reviews_needed": reviews_needed,
        "reviews_completed": reviews_completed,
        "last_reviewed_at": now,
        "next_review_at": next_review_at,
    })


def record_attempt(
    store: ProgressStore,
    user_id: str,
    problem: Problem,
    score: int,
    now: datetime | None = None,
) -> UserProblemProgress | None:
    """Load the current record for ``problem`` and apply the attempt to it."""
    existing = store.fetch_progress(user_id, problem.title)
    return update_progress_after_attempt(
        store, user_id, problem.title, score, problem.difficulty, existing, now=now,
    )


def reset_problem_progress(store: ProgressStore, user_id: str, problem_title: str) -> bool:
    """Forget a single problem; it becomes new again."""
    deleted = store.delete_progress(user_id, problem_title)
    logger.info("Reset progress on %r for user %s", problem_title, user_id)
    return deleted > 0


def reset_all_progress(store: ProgressStore, user_id: str) -> int:
    deleted = store.delete_progress(user_id)
    logger.info("Reset all progress for user %s (%d records)", user_id, deleted)
    return deleted
