"""
Item scorer: combines independent signals into one scored recommendation.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, List, Optional, Sequence

from ..models import LearningPath, Tutorial, UserProfile, UserProgress
from .signals import (
    ScoringContext,
    ScoringSignal,
    ScoringState,
    ScoringWeights,
    SignalResult,
    default_signals,
)
from .types import CatalogItem, RecommendationOptions, RecommendationReason, RecommendationScore

logger = logging.getLogger(__name__)

# Highest precedence first; used only for labeling, never for the score
REASON_PRECEDENCE: List[RecommendationReason] = [
    RecommendationReason.CONTINUES_LEARNING_PATH,
    RecommendationReason.BUILDS_ON_COMPLETED,
    RecommendationReason.PREREQUISITE_FOR_GOAL,
    RecommendationReason.MATCHES_INTEREST,
    RecommendationReason.SIMILAR_TO_LIKED,
    RecommendationReason.QUICK_WIN,
    RecommendationReason.MAINTAINS_STREAK,
    RecommendationReason.FILLS_SKILL_GAP,
    RecommendationReason.SUITABLE_FOR_LEVEL,
    RecommendationReason.POPULAR_CHOICE,
]

_DEFAULT_SIGNALS: Sequence[ScoringSignal] = tuple(default_signals())


def score_item(
    item: CatalogItem,
    profile: UserProfile,
    progress: UserProgress,
    options: Optional[RecommendationOptions] = None,
    context: Optional[ScoringContext] = None,
    weights: Optional[ScoringWeights] = None,
    signals: Optional[Sequence[ScoringSignal]] = None,
) -> RecommendationScore:
    """
    Score a single candidate against a profile and progress snapshot.

    Args:
        item: Candidate article, tutorial or path
        profile: Profile built for the user
        progress: Progress snapshot the profile was built from
        options: Ranking options (time constraint, prerequisite focus)
        context: Completed catalog items and goal ids shared by the call
        weights: Signal magnitudes, defaults to ScoringWeights()
        signals: Signal strategies, defaults to default_signals()

    Returns:
        RecommendationScore with an unbounded score and a confidence in [0, 1]
    """
    state = ScoringState(
        item=item,
        profile=profile,
        progress=progress,
        options=options or RecommendationOptions(),
        context=context or ScoringContext(),
        weights=weights or ScoringWeights(),
    )

    score = 0.0
    breakdown = {}
    fired: List[tuple] = []
    for position, signal in enumerate(signals or _DEFAULT_SIGNALS):
        result = signal.evaluate(state)
        if result is None or result.value == 0:
            continue
        score += result.value
        breakdown[signal.name] = breakdown.get(signal.name, 0.0) + result.value
        fired.append((position, result))

    evidence = sum(1 for _, result in fired if result.evidence and result.value > 0)
    confidence = min(1.0, max(0.0, state.weights.confidence_base + evidence * state.weights.confidence_step))
    primary = _primary_result(fired)

    return RecommendationScore(
        item=item,
        score=score,
        confidence=confidence,
        reason=primary.reason if primary else RecommendationReason.POPULAR_CHOICE,
        explanation=primary.explanation if primary else "Recommended for you",
        breakdown=breakdown,
    )


def _primary_result(fired: Iterable[tuple]) -> Optional[SignalResult]:
    """Pick the positive result whose reason ranks highest; stronger value breaks ties."""
    labeled = [(pos, r) for pos, r in fired if r.reason is not None and r.value > 0]
    if not labeled:
        return None
    _, best = min(
        labeled,
        key=lambda entry: (REASON_PRECEDENCE.index(entry[1].reason), -entry[1].value, entry[0]),
    )
    return best


def collect_goal_ids(
    progress: UserProgress,
    tutorials: Sequence[Tutorial] = (),
    paths: Sequence[LearningPath] = (),
) -> FrozenSet[str]:
    """Ids that unblock in-progress content: its prerequisites and open path items."""
    goals = set()
    for tutorial in tutorials:
        if progress.in_progress_record(tutorial) is not None:
            goals.update(tutorial.prerequisites)
    for path in paths:
        record = progress.in_progress_record(path)
        if record is None:
            continue
        goals.update(path.prerequisites)
        done = set(record.completed_items)
        for entry in path.required_items:
            if entry.id not in done and entry.slug:
                goals.add(entry.slug)
    goals -= progress.completed_ids()
    goals.discard("")
    return frozenset(goals)


def is_continuation(recommendation: RecommendationScore) -> bool:
    """True for items the user has already started; these rank ahead of every other score."""
    return recommendation.reason is RecommendationReason.CONTINUES_LEARNING_PATH


def build_scoring_context(
    progress: UserProgress,
    *catalogs: Sequence[CatalogItem],
    goal_item_ids: FrozenSet[str] = frozenset(),
) -> ScoringContext:
    """Resolve the completed items of every supplied catalog once per call."""
    completed = [
        item
        for catalog in catalogs
        for item in catalog
        if progress.is_completed(item)
    ]
    return ScoringContext(completed_items=tuple(completed), goal_item_ids=goal_item_ids)
