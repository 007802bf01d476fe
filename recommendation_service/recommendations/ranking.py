"""
Ranking orchestrator: filter, score, diversify, sort and truncate one catalog.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from ..models import Article, LearningPath, Tutorial, UserProfile, UserProgress
from .profile_builder import build_user_profile
from .scoring import build_scoring_context, collect_goal_ids, is_continuation, score_item
from .signals import ScoringContext, ScoringWeights, tag_overlap
from .types import CatalogItem, RecommendationOptions, RecommendationScore

logger = logging.getLogger(__name__)

DIVERSITY_PENALTY = 1.0

Ranked = List[Tuple[int, RecommendationScore]]


def apply_diversity(scored: Ranked, diversity_factor: float) -> Ranked:
    """
    Greedy single-pass diversity re-ranking.

    Repeatedly selects the candidate with the highest (penalized) score,
    started items first and ties going to catalog order, then subtracts a
    penalty from every remaining candidate that shares tags with it.
    Penalties accumulate across selections. A factor of 0 leaves the scores
    untouched.

    Args:
        scored: (catalog index, score) pairs
        diversity_factor: Penalty strength in [0, 1]

    Returns:
        Pairs in selection order, carrying penalized scores
    """
    if diversity_factor <= 0 or len(scored) <= 1:
        return list(scored)

    remaining = list(scored)
    selected: Ranked = []
    while remaining:
        best_at = max(
            range(len(remaining)),
            key=lambda i: (is_continuation(remaining[i][1]), remaining[i][1].score, -remaining[i][0]),
        )
        best_index, best = remaining.pop(best_at)
        selected.append((best_index, best))

        for i, (index, rec) in enumerate(remaining):
            overlap = tag_overlap(best.item, rec.item)
            if overlap <= 0:
                continue
            penalty = diversity_factor * DIVERSITY_PENALTY * overlap
            breakdown = dict(rec.breakdown)
            breakdown["diversity"] = breakdown.get("diversity", 0.0) - penalty
            remaining[i] = (index, replace(rec, score=rec.score - penalty, breakdown=breakdown))

    return selected


def rank_candidates(
    progress: UserProgress,
    catalog: Sequence[CatalogItem],
    options: Optional[RecommendationOptions],
    profile: UserProfile,
    context: ScoringContext,
    weights: Optional[ScoringWeights] = None,
) -> List[RecommendationScore]:
    """Score and rank one catalog with an already-built profile and context.

    Items the user has started always come first, whatever their score.
    """
    opts = options or RecommendationOptions()
    if not catalog:
        return []

    candidates = [
        (index, item)
        for index, item in enumerate(catalog)
        if opts.include_completed or not progress.is_completed(item)
    ]
    scored: Ranked = [
        (index, score_item(item, profile, progress, opts, context, weights))
        for index, item in candidates
    ]

    diversified = apply_diversity(scored, opts.diversity_factor)
    kept = [(index, rec) for index, rec in diversified if rec.confidence >= opts.min_confidence]
    kept.sort(key=lambda entry: (not is_continuation(entry[1]), -entry[1].score, entry[0]))
    results = [rec for _, rec in kept[: opts.max_results]]

    logger.debug(
        "Ranked %d of %d candidates for %s (returned %d)",
        len(scored),
        len(catalog),
        progress.user_id,
        len(results),
    )
    return results


def get_recommended_articles(
    progress: UserProgress,
    articles: Sequence[Article],
    options: Optional[RecommendationOptions] = None,
    *,
    profile: Optional[UserProfile] = None,
    context: Optional[ScoringContext] = None,
    weights: Optional[ScoringWeights] = None,
) -> List[RecommendationScore]:
    """Personalized article recommendations."""
    if not articles:
        return []
    profile = profile or build_user_profile(progress, articles=articles)
    context = context or build_scoring_context(progress, articles)
    return rank_candidates(progress, articles, options, profile, context, weights)


def get_recommended_tutorials(
    progress: UserProgress,
    tutorials: Sequence[Tutorial],
    options: Optional[RecommendationOptions] = None,
    *,
    profile: Optional[UserProfile] = None,
    context: Optional[ScoringContext] = None,
    weights: Optional[ScoringWeights] = None,
) -> List[RecommendationScore]:
    """Personalized tutorial recommendations."""
    if not tutorials:
        return []
    profile = profile or build_user_profile(progress, tutorials=tutorials)
    context = context or build_scoring_context(
        progress, tutorials, goal_item_ids=collect_goal_ids(progress, tutorials=tutorials)
    )
    return rank_candidates(progress, tutorials, options, profile, context, weights)


def get_recommended_paths(
    progress: UserProgress,
    paths: Sequence[LearningPath],
    options: Optional[RecommendationOptions] = None,
    *,
    profile: Optional[UserProfile] = None,
    context: Optional[ScoringContext] = None,
    weights: Optional[ScoringWeights] = None,
) -> List[RecommendationScore]:
    """Personalized learning path recommendations."""
    if not paths:
        return []
    profile = profile or build_user_profile(progress)
    context = context or build_scoring_context(
        progress, paths, goal_item_ids=collect_goal_ids(progress, paths=paths)
    )
    return rank_candidates(progress, paths, options, profile, context, weights)
