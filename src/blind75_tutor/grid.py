"""Topic-by-topic progress overview."""
from datetime import datetime

from blind75_tutor.models import MASTERED, GroupedProblems, ProblemGridItem
from blind75_tutor.store import ProgressStore

OTHER_GROUP = "Other"

GROUP_ORDER = [
    "arrays_hashing",
    "two_pointers",
    "sliding_window",
    "stack",
    "binary_search",
    "linked_list",
    "trees",
    "tries",
    "heap",
    "backtracking",
    "graphs",
    "dynamic_programming_1d",
    "dynamic_programming_2d",
    "greedy",
    "intervals",
    "math_geometry",
    "bit_manipulation",
]


def format_group_name(name: str) -> str:
    """``dynamic_programming_1d`` -> ``Dynamic Programming 1d``."""
    return " ".join(word[:1].upper() + word[1:] for word in name.split("_"))


def _group_sort_key(name: str) -> tuple:
    if name in GROUP_ORDER:
        return (0, GROUP_ORDER.index(name), "")
    return (1, 0, name.lower())


def get_progress_grid(store: ProgressStore, user_id: str, now: datetime | None = None) -> list[GroupedProblems]:
    """Every catalog problem, grouped by topic, with the user's current status."""
    all_progress = store.fetch_all_progress(user_id)
    due_reviews = store.fetch_due_reviews(user_id, now=now)
    problems = store.fetch_all_problems()

    progress_by_title = {p.problem_title: p for p in all_progress}
    due_titles = {p.problem_title for p in due_reviews}

    grouped: dict[str, list[ProblemGridItem]] = {}
    for problem in problems:
        group = problem.problem_group or OTHER_GROUP
        grouped.setdefault(group, []).append(ProblemGridItem(
            problem=problem,
            progress=progress_by_title.get(problem.title),
            is_due_today=problem.title in due_titles,
        ))

    results = []
    for group in sorted(grouped, key=_group_sort_key):
        items = grouped[group]
        mastered = sum(1 for i in items if i.progress and i.progress.status == MASTERED)
        results.append(GroupedProblems(
            group_name=format_group_name(group),
            problems=items,
            mastered_count=mastered,
            total_count=len(items),
        ))
    return results
