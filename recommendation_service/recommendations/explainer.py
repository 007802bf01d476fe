"""
Human-readable explanations for recommendations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .types import RecommendationReason, RecommendationScore

# (exclusive upper bound, label); the last label covers everything up to 1.0
CONFIDENCE_LABELS: List[Tuple[float, str]] = [
    (0.3, "Suggestion"),
    (0.6, "Good Match"),
    (0.85, "Strong Match"),
]
TOP_CONFIDENCE_LABEL = "Excellent Match"

REASON_TEXTS: Dict[RecommendationReason, str] = {
    RecommendationReason.CONTINUES_LEARNING_PATH: "Continue your learning journey",
    RecommendationReason.BUILDS_ON_COMPLETED: "Builds on what you have learned",
    RecommendationReason.MATCHES_INTEREST: "Matches your interests",
    RecommendationReason.POPULAR_CHOICE: "Popular with other learners",
    RecommendationReason.SUITABLE_FOR_LEVEL: "Suitable for your skill level",
    RecommendationReason.QUICK_WIN: "Quick achievement available",
    RecommendationReason.PREREQUISITE_FOR_GOAL: "Required for your goals",
    RecommendationReason.SIMILAR_TO_LIKED: "Similar to content you enjoyed",
    RecommendationReason.FILLS_SKILL_GAP: "Helps fill a knowledge gap",
    RecommendationReason.MAINTAINS_STREAK: "Keep your learning streak going",
}


class UnknownReasonError(ValueError):
    """Raised when a recommendation carries a reason outside the closed set."""


@dataclass(frozen=True)
class Explanation:
    reason: str
    confidence: str
    details: str


def confidence_label(confidence: float) -> str:
    """Map a confidence value to its label; values are clamped into [0, 1]."""
    value = min(1.0, max(0.0, confidence))
    for upper, label in CONFIDENCE_LABELS:
        if value < upper:
            return label
    return TOP_CONFIDENCE_LABEL


def explain_recommendation(recommendation: RecommendationScore) -> Explanation:
    """
    Explain why an item was recommended.

    Raises:
        UnknownReasonError: if the reason is not one of RecommendationReason
    """
    try:
        reason = RecommendationReason(recommendation.reason)
    except ValueError as e:
        raise UnknownReasonError(f"Unknown recommendation reason: {recommendation.reason!r}") from e

    phrase = REASON_TEXTS[reason]
    title = recommendation.item.title
    details = f"{phrase}: {title}."
    if recommendation.explanation:
        details = f"{details} {recommendation.explanation}."
    return Explanation(
        reason=phrase,
        confidence=confidence_label(recommendation.confidence),
        details=details,
    )
