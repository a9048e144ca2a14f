"""Score-to-grade mappings used in reports."""

from typing import Literal

SynergyGrade = Literal["S", "A", "B", "C", "D"]
DifficultyLevel = Literal["low", "medium", "high"]

# Lower bound (inclusive) of each grade, best first
SYNERGY_GRADE_THRESHOLDS: list[tuple[SynergyGrade, float]] = [
    ("S", 90.0),
    ("A", 80.0),
    ("B", 70.0),
    ("C", 60.0),
    ("D", 0.0),
]

SYNERGY_GRADE_COLORS: dict[str, str] = {
    "S": "text-purple-600",
    "A": "text-green-600",
    "B": "text-blue-600",
    "C": "text-yellow-600",
    "D": "text-red-600",
}

DIFFICULTY_SCORES: dict[str, int] = {"low": 3, "medium": 6, "high": 9}

DIFFICULTY_COLORS: dict[str, str] = {
    "low": "text-green-600",
    "medium": "text-yellow-600",
    "high": "text-red-600",
}


def grade_for_score(score: float) -> SynergyGrade:
    """
    Map a 0-100 synergy score to its letter grade.

    Raises:
        ValueError: If the score is outside 0-100
    """
    if not 0 <= score <= 100:
        raise ValueError(f"Synergy score must be between 0 and 100, got {score}")
    for grade, lower_bound in SYNERGY_GRADE_THRESHOLDS:
        if score >= lower_bound:
            return grade
    return "D"


def grade_color(grade: str) -> str:
    """Display colour class for a grade."""
    return SYNERGY_GRADE_COLORS[grade]
