"""
Models package for the recommendation service.

This package contains the Pydantic models for catalog content, user progress
and derived user profiles.
"""

from .content_models import (
    Article,
    ContentItem,
    ContentKind,
    Difficulty,
    LearningPath,
    PathItem,
    Tutorial,
    TutorialStep,
    calculate_reading_time,
    content_kind,
)

from .progress_models import (
    CompletionEvent,
    PathProgress,
    TutorialProgress,
    UserProgress,
    create_empty_progress,
)

from .profile_models import (
    MAX_INTERESTS,
    CompletionTimes,
    ContentTypeWeights,
    DifficultyWeights,
    LearningPatterns,
    SkillLevel,
    UserProfile,
    validate_user_profile,
)

__all__ = [
    # Content models
    "Article",
    "ContentItem",
    "ContentKind",
    "Difficulty",
    "LearningPath",
    "PathItem",
    "Tutorial",
    "TutorialStep",
    "calculate_reading_time",
    "content_kind",

    # Progress models
    "CompletionEvent",
    "PathProgress",
    "TutorialProgress",
    "UserProgress",
    "create_empty_progress",

    # Profile models
    "MAX_INTERESTS",
    "CompletionTimes",
    "ContentTypeWeights",
    "DifficultyWeights",
    "LearningPatterns",
    "SkillLevel",
    "UserProfile",
    "validate_user_profile",
]
