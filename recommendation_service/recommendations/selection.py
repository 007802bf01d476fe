"""
Cross-kind selection over articles, tutorials and learning paths.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..models import Article, LearningPath, Tutorial, UserProgress
from .profile_builder import build_user_profile
from .ranking import get_recommended_articles, get_recommended_paths, get_recommended_tutorials
from .scoring import build_scoring_context, collect_goal_ids, is_continuation
from .signals import ScoringWeights
from .types import RecommendationOptions, RecommendationScore

logger = logging.getLogger(__name__)

QUICK_MAX_MINUTES = 15
MODERATE_MAX_MINUTES = 45

_KIND_ORDER = {"article": 0, "tutorial": 1, "path": 2}


@dataclass(slots=True)
class RecommendationSet:
    """Ranked recommendations per content kind."""

    articles: List[RecommendationScore] = field(default_factory=list)
    tutorials: List[RecommendationScore] = field(default_factory=list)
    paths: List[RecommendationScore] = field(default_factory=list)

    def union(self) -> List[RecommendationScore]:
        """All recommendations, best score first."""
        combined = [*self.articles, *self.tutorials, *self.paths]
        return sorted(combined, key=_overall_rank)


@dataclass(slots=True)
class TimeBuckets:
    """Recommendations grouped by estimated duration."""

    quick: List[RecommendationScore] = field(default_factory=list)
    moderate: List[RecommendationScore] = field(default_factory=list)
    long: List[RecommendationScore] = field(default_factory=list)


def _overall_rank(rec: RecommendationScore):
    return (not is_continuation(rec), -rec.score, -rec.confidence, _KIND_ORDER[rec.item.kind])


def get_all_recommendations(
    progress: UserProgress,
    articles: Sequence[Article],
    tutorials: Sequence[Tutorial],
    paths: Sequence[LearningPath],
    options: Optional[RecommendationOptions] = None,
    weights: Optional[ScoringWeights] = None,
) -> RecommendationSet:
    """
    Rank all three catalogs with the same options.

    The profile and the scoring context are built once from every catalog so
    each kind sees the full completion history.
    """
    profile = build_user_profile(progress, articles, tutorials)
    context = build_scoring_context(
        progress,
        articles,
        tutorials,
        paths,
        goal_item_ids=collect_goal_ids(progress, tutorials, paths),
    )
    shared = {"profile": profile, "context": context, "weights": weights}
    return RecommendationSet(
        articles=get_recommended_articles(progress, articles, options, **shared),
        tutorials=get_recommended_tutorials(progress, tutorials, options, **shared),
        paths=get_recommended_paths(progress, paths, options, **shared),
    )


def get_next_recommendation(
    progress: UserProgress,
    articles: Sequence[Article],
    tutorials: Sequence[Tutorial],
    paths: Sequence[LearningPath],
    options: Optional[RecommendationOptions] = None,
    weights: Optional[ScoringWeights] = None,
) -> Optional[RecommendationScore]:
    """Single best item across all kinds, or None when nothing is left to recommend."""
    ranked = get_all_recommendations(progress, articles, tutorials, paths, options, weights).union()
    if not ranked:
        logger.info("No recommendation available for %s", progress.user_id)
        return None
    return ranked[0]


def get_recommendations_by_time(
    progress: UserProgress,
    articles: Sequence[Article],
    tutorials: Sequence[Tutorial],
    paths: Sequence[LearningPath],
    available_minutes: Optional[float],
    options: Optional[RecommendationOptions] = None,
    weights: Optional[ScoringWeights] = None,
) -> TimeBuckets:
    """
    Bucket the ranked union into quick, moderate and long recommendations.

    ``available_minutes`` feeds the time-fit signal when the options carry no
    constraint of their own; bucket boundaries are fixed (15 and 45 minutes).
    """
    opts = options or RecommendationOptions()
    if opts.time_constraint is None and available_minutes is not None:
        opts = RecommendationOptions(**{**opts.model_dump(), "time_constraint": available_minutes})

    buckets = TimeBuckets()
    for rec in get_all_recommendations(progress, articles, tutorials, paths, opts, weights).union():
        minutes = rec.item.duration_minutes
        if minutes <= QUICK_MAX_MINUTES:
            buckets.quick.append(rec)
        elif minutes <= MODERATE_MAX_MINUTES:
            buckets.moderate.append(rec)
        else:
            buckets.long.append(rec)
    return buckets
