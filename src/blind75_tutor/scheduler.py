"""Daily practice queue: due reviews first, then paced new problems."""
import logging
import math
import re
from datetime import datetime, timedelta

from blind75_tutor.grid import format_group_name
from blind75_tutor.models import (
    DIFFICULTY_ORDER, LEARNING, MASTERED, NEW, QueueBreakdown, QueueResult, StudyStats,
)
from blind75_tutor.policy import BUFFER_DAYS
from blind75_tutor.settings import get_settings_with_defaults
from blind75_tutor.store import ProgressStore

logger = logging.getLogger(__name__)

# Filter value meaning "no topic restriction" (used by the mastered-review view).
ALL_MASTERED = "all_mastered"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_topic(value: str) -> str:
    return _NON_ALNUM.sub("_", value.lower()).strip("_")


def matches_topic(problem_group: str, topic_filter: str) -> bool:
    """Loose match between a catalog group and a user-supplied topic.

    Case, whitespace, underscores and punctuation are ignored, and either side
    may be a substring of the other.
    """
    group = normalize_topic(problem_group or "")
    if not group:
        return False
    wanted = normalize_topic(topic_filter)
    label = format_group_name(problem_group).lower()
    return (
        wanted in group
        or group in wanted
        or topic_filter.strip().lower() in label
    )


def build_spaced_repetition_queue(
    store: ProgressStore,
    user_id: str,
    topic_filter: str | None = None,
    now: datetime | None = None,
) -> QueueResult:
    """Build today's practice queue and the stats that go with it.

    All reads finish before any computation starts; a failed read raises
    ``PersistenceError`` and nothing is returned.
    """
    now = now or datetime.now()
    settings = get_settings_with_defaults(store, user_id)
    all_progress = store.fetch_all_progress(user_id)
    due_reviews = store.fetch_due_reviews(user_id, now=now)
    due_tomorrow = store.fetch_due_tomorrow(user_id, now=now)
    all_problems = store.fetch_all_problems()
    catalog_size = len(all_problems)

    problems = all_problems
    if topic_filter and topic_filter != ALL_MASTERED:
        problems = [p for p in all_problems if matches_topic(p.problem_group, topic_filter)]
        logger.debug("Filtered to topic %r: %d problems", topic_filter, len(problems))

    by_title = {p.title: p for p in problems}
    progress_by_title = {p.problem_title: p for p in all_progress}

    # Pace
    days_passed = (now - settings.start_date) // timedelta(days=1)
    days_left = max(1, settings.target_days - days_passed)

    introduced = sum(
        1 for p in all_progress if p.problem_title in by_title and p.status != NEW
    )
    remaining_new = len(problems) - introduced
    effective_days_left = max(1, days_left - BUFFER_DAYS)
    new_per_day = math.ceil(remaining_new / effective_days_left)

    due_problems = [
        by_title[p.problem_title]
        for p in due_reviews
        if p.problem_title in by_title and p.reviews_completed < p.reviews_needed
    ]

    # sorted() is stable, so catalog order breaks difficulty ties
    new_problems = sorted(
        (p for p in problems if p.title not in progress_by_title),
        key=lambda p: DIFFICULTY_ORDER.get(p.difficulty, len(DIFFICULTY_ORDER)),
    )

    queue = due_problems[:settings.daily_cap]
    slots_for_new = max(0, min(new_per_day, settings.daily_cap - len(queue)))
    queue.extend(new_problems[:slots_for_new])

    stats = StudyStats(
        total_problems=catalog_size,
        new_count=catalog_size - len(all_progress),
        learning_count=sum(1 for p in all_progress if p.status == LEARNING),
        mastered_count=sum(1 for p in all_progress if p.status == MASTERED),
        due_today=len(due_reviews),
        due_tomorrow=len(due_tomorrow),
        days_left=days_left,
        on_pace=len(all_progress) >= days_passed * (catalog_size / settings.target_days),
        todays_queue=QueueBreakdown(
            new_problems=min(slots_for_new, len(new_problems)),
            reviews=min(len(due_problems), settings.daily_cap),
            total=len(queue),
        ),
    )

    logger.info(
        "Queue built for user %s: %d problems (%d reviews + %d new)%s",
        user_id, len(queue), stats.todays_queue.reviews, stats.todays_queue.new_problems,
        f" [topic: {topic_filter}]" if topic_filter else "",
    )
    return QueueResult(queue=queue, stats=stats)
