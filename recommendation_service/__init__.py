# Recommendation service package for personalized learning content

from .models import (
    Article,
    ContentItem,
    ContentKind,
    Difficulty,
    LearningPath,
    PathItem,
    PathProgress,
    Tutorial,
    TutorialProgress,
    TutorialStep,
    UserProfile,
    UserProgress,
    create_empty_progress,
    validate_user_profile,
)
from .recommendations import (
    Explanation,
    ProfileCache,
    RecommendationOptions,
    RecommendationReason,
    RecommendationScore,
    RecommendationSet,
    ScoringWeights,
    TimeBuckets,
    UnknownReasonError,
    build_user_profile,
    explain_recommendation,
    get_all_recommendations,
    get_next_recommendation,
    get_recommendations_by_time,
    get_recommended_articles,
    get_recommended_paths,
    get_recommended_tutorials,
    score_item,
    update_profile_with_activity,
)
from .config_manager import ConfigManager, LoggingConfig
from .logging_config import (
    setup_logging,
    stop_logging,
    get_logger,
    ThreadSafeLoggingConfig,
)

__all__ = [
    "Article",
    "ContentItem",
    "ContentKind",
    "Difficulty",
    "LearningPath",
    "PathItem",
    "PathProgress",
    "Tutorial",
    "TutorialProgress",
    "TutorialStep",
    "UserProfile",
    "UserProgress",
    "create_empty_progress",
    "validate_user_profile",
    "Explanation",
    "ProfileCache",
    "RecommendationOptions",
    "RecommendationReason",
    "RecommendationScore",
    "RecommendationSet",
    "ScoringWeights",
    "TimeBuckets",
    "UnknownReasonError",
    "build_user_profile",
    "explain_recommendation",
    "get_all_recommendations",
    "get_next_recommendation",
    "get_recommendations_by_time",
    "get_recommended_articles",
    "get_recommended_paths",
    "get_recommended_tutorials",
    "score_item",
    "update_profile_with_activity",
    "ConfigManager",
    "LoggingConfig",
    "setup_logging",
    "stop_logging",
    "get_logger",
    "ThreadSafeLoggingConfig",
]
