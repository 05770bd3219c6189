"""Score-based review policy.

A single attempt's score, shifted by a difficulty adjustment, decides how many
reviews a problem still needs before it counts as mastered:

    adjusted >= 85  ->  0 reviews (instant mastery)
    adjusted >= 75  ->  1
    adjusted >= 50  ->  2
    otherwise       ->  3
"""
from blind75_tutor.models import EASY, HARD, LEARNING, MASTERED, MEDIUM

SCORE_THRESHOLDS = [(85, 0), (75, 1), (50, 2)]
MAX_REVIEWS = 3

# Easy problems use the per-user easy bonus instead of a fixed value.
DIFFICULTY_ADJUSTMENTS = {EASY: 10, MEDIUM: 0, HARD: -5}

# Days held back at the end of the plan for reviews only.
BUFFER_DAYS = 2


def calculate_reviews_needed(score: int, difficulty: str, easy_bonus: int = DIFFICULTY_ADJUSTMENTS[EASY]) -> int:
    """Return how many reviews (0-3) are needed after an attempt.

    Args:
        score: Attempt score, nominally 0-100. Not clamped.
        difficulty: "easy", "medium" or "hard".
        easy_bonus: Points added to the score of easy problems.

    Returns:
        Number of reviews needed before mastery.
    """
    if difficulty == EASY:
        adjustment = easy_bonus
    else:
        adjustment = DIFFICULTY_ADJUSTMENTS.get(difficulty, 0)
    adjusted = score + adjustment
    for threshold, reviews in SCORE_THRESHOLDS:
        if adjusted >= threshold:
            return reviews
    return MAX_REVIEWS


def determine_status(reviews_completed: int, reviews_needed: int) -> str:
    if reviews_needed == 0 or reviews_completed >= reviews_needed:
        return MASTERED
    return LEARNING


def validate_score(score) -> int:
    """Check a score coming from user input or a scoring client."""
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"score must be an integer, got {score!r}")
    if not 0 <= score <= 100:
        raise ValueError(f"score must be between 0 and 100, got {score}")
    return score
