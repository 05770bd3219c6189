"""Seed the database with the bundled Blind 75 catalog."""
import json
import logging
from pathlib import Path

from blind75_tutor.importer import parse_problem
from blind75_tutor.store import ProgressStore

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(store: ProgressStore) -> bool:
    """Check whether the catalog has already been loaded."""
    return len(store.fetch_all_problems()) > 0


def seed_problems(store: ProgressStore) -> int:
    """Insert all problems from problems.json in catalog order."""
    data = json.loads((CONTENT_DIR / "problems.json").read_text())
    problems = [parse_problem(entry) for entry in data["problems"]]
    inserted = store.insert_problems(problems)
    logger.info("Seeded %d problems", inserted)
    return inserted


def seed_all(store: ProgressStore) -> None:
    """Load the bundled catalog unless one is already present."""
    if is_seeded(store):
        return
    seed_problems(store)
