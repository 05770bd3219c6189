"""Per-user study settings: pacing window, daily cap and easy bonus."""
import logging
from datetime import datetime

from blind75_tutor.models import UserStudySettings
from blind75_tutor.store import ProgressStore

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "target_days": 10,
    "daily_cap": 15,
    "easy_bonus": 10,
}

UPDATABLE_FIELDS = ("target_days", "daily_cap", "easy_bonus", "start_date")


def get_settings_with_defaults(store: ProgressStore, user_id: str) -> UserStudySettings:
    """Return stored settings, creating the defaults on first read."""
    settings = store.fetch_settings(user_id)
    if settings:
        return settings
    defaults = dict(DEFAULT_SETTINGS, start_date=datetime.now())
    saved = store.upsert_settings(user_id, defaults)
    logger.info("Created default study settings for user %s", user_id)
    return saved or UserStudySettings(user_id=user_id, **defaults)


def update_settings(store: ProgressStore, user_id: str, updates: dict) -> UserStudySettings:
    """Merge the given fields into the user's settings and return the result."""
    unknown = set(updates) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"unknown settings fields: {sorted(unknown)}")
    for key in ("target_days", "daily_cap"):
        if key in updates and int(updates[key]) < 1:
            raise ValueError(f"{key} must be at least 1, got {updates[key]}")
    get_settings_with_defaults(store, user_id)
    return store.upsert_settings(user_id, updates)


def reset_study_plan(store: ProgressStore, user_id: str) -> UserStudySettings:
    """Restore default pacing and restart the plan today. Progress is kept."""
    settings = store.upsert_settings(user_id, dict(DEFAULT_SETTINGS, start_date=datetime.now()))
    logger.info("Reset study plan for user %s", user_id)
    return settings
