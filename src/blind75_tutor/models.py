"""Data classes for the scheduler domain model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

NEW = "new"
LEARNING = "learning"
MASTERED = "mastered"

EASY = "easy"
MEDIUM = "medium"
HARD = "hard"

DIFFICULTY_ORDER = {EASY: 0, MEDIUM: 1, HARD: 2}


@dataclass(frozen=True)
class Problem:
    title: str
    difficulty: str
    problem_group: str = ""
    prompt: str = ""
    key_idea: str = ""
    detailed_hint: str = ""


@dataclass
class UserProblemProgress:
    user_id: str
    problem_title: str
    status: str = NEW
    best_score: Optional[int] = None
    reviews_needed: int = 2
    reviews_completed: int = 0
    last_reviewed_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None


@dataclass
class UserStudySettings:
    user_id: str
    target_days: int = 10
    daily_cap: int = 15
    easy_bonus: int = 10
    start_date: datetime = field(default_factory=datetime.now)


@dataclass
class QueueBreakdown:
    new_problems: int = 0
    reviews: int = 0
    total: int = 0


@dataclass
class StudyStats:
    """Derived snapshot of a user's progress; recomputed on every query."""
    total_problems: int
    new_count: int
    learning_count: int
    mastered_count: int
    due_today: int
    due_tomorrow: int
    days_left: int
    on_pace: bool
    todays_queue: QueueBreakdown = field(default_factory=QueueBreakdown)


@dataclass
class QueueResult:
    queue: list[Problem]
    stats: StudyStats


@dataclass
class ProblemGridItem:
    problem: Problem
    progress: Optional[UserProblemProgress] = None
    is_due_today: bool = False


@dataclass
class GroupedProblems:
    group_name: str
    problems: list[ProblemGridItem]
    mastered_count: int = 0
    total_count: int = 0
