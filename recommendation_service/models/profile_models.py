"""
User profile models.

A profile is derived from progress on every call and discarded afterwards.
It is only persisted by callers that keep the result of incremental updates,
which is why ``validate_user_profile`` exists for data coming back from
storage.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .content_models import ContentKind, Difficulty

logger = logging.getLogger(__name__)

MAX_INTERESTS = 10

SkillLevel = Difficulty


class _Distribution(BaseModel):
    """Weights in [0, 1] that sum to 1, or are all zero ("no data")."""

    model_config = {"frozen": True, "allow_inf_nan": False}

    @model_validator(mode="after")
    def _check_total(self):
        values = list(self.model_dump().values())
        total = sum(values)
        if total != 0 and not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ValueError(f"weights must sum to 1 or all be zero, got {total:.4f}")
        return self

    def is_empty(self) -> bool:
        return all(value == 0 for value in self.model_dump().values())


class ContentTypeWeights(_Distribution):
    """Share of completions per content kind."""
    articles: float = Field(default=0.0, ge=0.0, le=1.0)
    tutorials: float = Field(default=0.0, ge=0.0, le=1.0)
    paths: float = Field(default=0.0, ge=0.0, le=1.0)

    def weight_for(self, kind: ContentKind) -> float:
        return getattr(self, kind.plural)


class DifficultyWeights(_Distribution):
    """Share of completions per difficulty tier."""
    beginner: float = Field(default=0.0, ge=0.0, le=1.0)
    intermediate: float = Field(default=0.0, ge=0.0, le=1.0)
    advanced: float = Field(default=0.0, ge=0.0, le=1.0)

    def weight_for(self, difficulty: Difficulty) -> float:
        return getattr(self, difficulty.value)


class CompletionTimes(BaseModel):
    """Observed minutes per completed item; ``None`` when nothing was observed."""
    articles: Optional[float] = Field(default=None, ge=0.0)
    tutorials: Optional[float] = Field(default=None, ge=0.0)
    paths: Optional[float] = Field(default=None, ge=0.0)

    model_config = {"frozen": True, "allow_inf_nan": False}

    def minutes_for(self, kind: ContentKind) -> Optional[float]:
        return getattr(self, kind.plural)


class LearningPatterns(BaseModel):
    """Coarse behavioral flags derived from history."""
    prefers_short_content: bool = False
    prefers_interactive_content: bool = False
    likes_prerequisites: bool = False

    model_config = {"frozen": True}


class UserProfile(BaseModel):
    """Lightweight behavioral profile used for scoring."""
    skill_level: SkillLevel = SkillLevel.BEGINNER
    interests: List[str] = Field(default_factory=list, max_length=MAX_INTERESTS)
    preferred_content_types: ContentTypeWeights = Field(default_factory=ContentTypeWeights)
    average_completion_time: CompletionTimes = Field(default_factory=CompletionTimes)
    difficulty_preference: DifficultyWeights = Field(default_factory=DifficultyWeights)
    learning_patterns: LearningPatterns = Field(default_factory=LearningPatterns)

    model_config = {"frozen": True}

    @field_validator("interests")
    @classmethod
    def _no_blank_interests(cls, value: List[str]) -> List[str]:
        if any(not tag.strip() for tag in value):
            raise ValueError("interests must be non-empty strings")
        return value

    def interest_rank(self, tag: str) -> Optional[int]:
        """Position of a tag in the interest list, or None."""
        try:
            return self.interests.index(tag)
        except ValueError:
            return None


_REQUIRED_FIELDS = (
    "skill_level",
    "interests",
    "preferred_content_types",
    "average_completion_time",
    "learning_patterns",
)


def validate_user_profile(profile: Any) -> bool:
    """
    Check whether externally supplied profile data can be trusted.

    Accepts a UserProfile or a deserialized mapping. Never raises: malformed
    input (None, missing fields, out-of-range numbers) yields False.
    """
    if profile is None:
        return False
    if isinstance(profile, UserProfile):
        data: Dict[str, Any] = profile.model_dump()
    elif isinstance(profile, dict):
        data = profile
    else:
        return False

    missing = [name for name in _REQUIRED_FIELDS if name not in data]
    if missing:
        logger.debug("Profile rejected, missing fields: %s", ", ".join(missing))
        return False

    interests = data.get("interests")
    if not isinstance(interests, list) or not all(isinstance(tag, str) for tag in interests):
        return False

    try:
        UserProfile.model_validate(data, strict=False)
    except ValidationError as e:
        logger.debug("Profile rejected: %s", e.errors()[0].get("msg"))
        return False
    return True
