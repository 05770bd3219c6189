"""One-time import of problems marked mastered by the legacy browser tracker."""
import logging
from datetime import datetime

from blind75_tutor.db import PersistenceError
from blind75_tutor.models import MASTERED
from blind75_tutor.store import ProgressStore

logger = logging.getLogger(__name__)

# The legacy tracker kept no scores, so migrated records assume a passing one.
ASSUMED_BEST_SCORE = 85


def migrate_from_local_storage(
    store: ProgressStore,
    user_id: str,
    mastered_titles: list[str],
    now: datetime | None = None,
) -> bool:
    """Create mastered records for ``mastered_titles``. Returns overall success."""
    if not mastered_titles:
        return True
    now = now or datetime.now()
    logger.info("Migrating %d mastered problems for user %s", len(mastered_titles), user_id)

    items = [
        {
            "problem_title": title,
            "status": MASTERED,
            "best_score": ASSUMED_BEST_SCORE,
            "reviews_needed": 1,
            "reviews_completed": 1,
            "next_review_at": now,
        }
        for title in mastered_titles
    ]
    try:
        success = store.batch_upsert_progress(user_id, items)
    except PersistenceError:
        logger.exception("Failed to migrate legacy mastery for user %s", user_id)
        return False

    if success:
        logger.info("Migrated %d problems for user %s", len(items), user_id)
    else:
        logger.error("Failed to migrate legacy mastery for user %s", user_id)
    return success
