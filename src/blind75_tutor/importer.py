"""Catalog import from JSON or YAML files."""
import json
import logging
from pathlib import Path

from blind75_tutor.models import DIFFICULTY_ORDER, Problem
from blind75_tutor.store import ProgressStore

logger = logging.getLogger(__name__)


def read_catalog_file(file_path: str) -> list[dict]:
    """Return the raw problem entries from a catalog file.

    Accepts either a top-level list or a mapping with a ``problems`` key.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        data = json.loads(path.read_text())
    elif suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text())
    else:
        raise ValueError(f"unsupported catalog format: {suffix or path.name}")

    if isinstance(data, dict):
        data = data.get("problems", [])
    if not isinstance(data, list):
        raise ValueError(f"{path.name}: expected a list of problems")
    return data


def parse_problem(entry: dict) -> Problem:
    title = str(entry.get("title") or "").strip()
    if not title:
        raise ValueError(f"problem entry without a title: {entry!r}")
    difficulty = str(entry.get("difficulty") or "").strip().lower()
    if difficulty not in DIFFICULTY_ORDER:
        raise ValueError(f"{title}: difficulty must be easy, medium or hard, got {difficulty!r}")
    return Problem(
        title=title,
        difficulty=difficulty,
        problem_group=str(entry.get("problem_group") or entry.get("group") or "").strip(),
        prompt=entry.get("prompt") or "",
        key_idea=entry.get("key_idea") or "",
        detailed_hint=entry.get("detailed_hint") or "",
    )


def import_problems(store: ProgressStore, file_path: str) -> dict:
    """Append a catalog file's problems to the store. Existing titles are kept."""
    problems = [parse_problem(e) for e in read_catalog_file(file_path)]
    inserted = store.insert_problems(problems)
    logger.info("Imported %d of %d problems from %s", inserted, len(problems), file_path)
    return {
        "filename": Path(file_path).name,
        "read": len(problems),
        "inserted": inserted,
    }
