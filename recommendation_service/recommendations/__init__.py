"""
Recommendation engine package for personalized learning content.

Provides profile derivation, signal-based item scoring, diversity-aware
ranking and explanations. Everything here is synchronous and stateless so it
can be called from any web handler or batch job.
"""

from .cache import ProfileCache
from .explainer import Explanation, UnknownReasonError, confidence_label, explain_recommendation
from .profile_builder import build_user_profile, skill_level_for_points
from .profile_updater import update_profile_with_activity
from .ranking import (
    apply_diversity,
    get_recommended_articles,
    get_recommended_paths,
    get_recommended_tutorials,
)
from .scoring import build_scoring_context, collect_goal_ids, is_continuation, score_item
from .selection import (
    RecommendationSet,
    TimeBuckets,
    get_all_recommendations,
    get_next_recommendation,
    get_recommendations_by_time,
)
from .signals import ScoringContext, ScoringSignal, ScoringWeights, SignalResult, default_signals
from .types import RecommendationOptions, RecommendationReason, RecommendationScore

__all__ = [
    "Explanation",
    "ProfileCache",
    "RecommendationOptions",
    "RecommendationReason",
    "RecommendationScore",
    "RecommendationSet",
    "ScoringContext",
    "ScoringSignal",
    "ScoringWeights",
    "SignalResult",
    "TimeBuckets",
    "UnknownReasonError",
    "apply_diversity",
    "build_scoring_context",
    "build_user_profile",
    "collect_goal_ids",
    "confidence_label",
    "default_signals",
    "explain_recommendation",
    "get_all_recommendations",
    "get_next_recommendation",
    "get_recommendations_by_time",
    "get_recommended_articles",
    "get_recommended_paths",
    "get_recommended_tutorials",
    "is_continuation",
    "score_item",
    "skill_level_for_points",
    "update_profile_with_activity",
]
