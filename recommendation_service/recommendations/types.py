"""
Shared recommendation records and options.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..models import Article, LearningPath, Tutorial

logger = logging.getLogger(__name__)

CatalogItem = Union[Article, Tutorial, LearningPath]

DEFAULT_MAX_RESULTS = 10
DEFAULT_DIVERSITY_FACTOR = 0.3


class RecommendationReason(str, Enum):
    """Closed set of reasons a recommendation can be labeled with."""
    CONTINUES_LEARNING_PATH = "continues_learning_path"
    BUILDS_ON_COMPLETED = "builds_on_completed"
    MATCHES_INTEREST = "matches_interest"
    POPULAR_CHOICE = "popular_choice"
    SUITABLE_FOR_LEVEL = "suitable_for_level"
    QUICK_WIN = "quick_win"
    PREREQUISITE_FOR_GOAL = "prerequisite_for_goal"
    SIMILAR_TO_LIKED = "similar_to_liked"
    FILLS_SKILL_GAP = "fills_skill_gap"
    MAINTAINS_STREAK = "maintains_streak"


@dataclass(slots=True)
class RecommendationScore:
    """A scored candidate returned to callers."""

    item: CatalogItem
    score: float
    confidence: float
    reason: RecommendationReason
    explanation: str
    breakdown: Dict[str, float] = field(default_factory=dict)


class RecommendationOptions(BaseModel):
    """Tuning knobs for a ranking call.

    Out-of-range values are clamped to sane defaults instead of raising.
    """

    include_completed: bool = False
    max_results: int = DEFAULT_MAX_RESULTS
    min_confidence: float = 0.0
    time_constraint: Optional[float] = Field(default=None, description="Minutes available")
    diversity_factor: float = DEFAULT_DIVERSITY_FACTOR
    focus_on_prerequisites: bool = False

    @field_validator("max_results", mode="before")
    @classmethod
    def _clamp_max_results(cls, value: Any) -> int:
        try:
            number = int(value)
        except (TypeError, ValueError):
            number = 0
        if number <= 0:
            logger.debug("max_results=%r is not positive, using %d", value, DEFAULT_MAX_RESULTS)
            return DEFAULT_MAX_RESULTS
        return number

    @field_validator("min_confidence", mode="before")
    @classmethod
    def _clamp_min_confidence(cls, value: Any) -> float:
        return _clamp_unit(value, default=0.0)

    @field_validator("diversity_factor", mode="before")
    @classmethod
    def _clamp_diversity(cls, value: Any) -> float:
        return _clamp_unit(value, default=DEFAULT_DIVERSITY_FACTOR)

    @field_validator("time_constraint", mode="before")
    @classmethod
    def _drop_non_positive_constraint(cls, value: Any) -> Optional[float]:
        if value is None:
            return None
        try:
            minutes = float(value)
        except (TypeError, ValueError):
            return None
        return minutes if minutes > 0 else None


def _clamp_unit(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number:  # NaN
        return default
    return min(1.0, max(0.0, number))
