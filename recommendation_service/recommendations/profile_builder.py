"""
Derive a behavioral profile from a user's progress history.

The builder is a pure function of its inputs: the same progress and catalogs
always yield the same profile, and no wall-clock fields are populated.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..models import (
    MAX_INTERESTS,
    Article,
    CompletionTimes,
    ContentKind,
    ContentTypeWeights,
    Difficulty,
    DifficultyWeights,
    LearningPatterns,
    SkillLevel,
    Tutorial,
    UserProfile,
    UserProgress,
)

logger = logging.getLogger(__name__)

INTERMEDIATE_POINTS = 500
ADVANCED_POINTS = 2000
SHORT_CONTENT_MINUTES = 20
INTERACTIVE_SHARE = 0.4


def normalize_tag(tag: Optional[str]) -> Optional[str]:
    if not isinstance(tag, str):
        return None
    clean = tag.strip().lower()
    return clean or None


def skill_level_for_points(total_points: int) -> SkillLevel:
    """Map cumulative points to a skill tier; thresholds belong to the upper tier."""
    if total_points < INTERMEDIATE_POINTS:
        return SkillLevel.BEGINNER
    if total_points < ADVANCED_POINTS:
        return SkillLevel.INTERMEDIATE
    return SkillLevel.ADVANCED


def build_user_profile(
    progress: UserProgress,
    articles: Sequence[Article] = (),
    tutorials: Sequence[Tutorial] = (),
) -> UserProfile:
    """
    Build a UserProfile from progress and the article/tutorial catalogs.

    Args:
        progress: Read-only progress snapshot
        articles: Article catalog, used to resolve completed slugs
        tutorials: Tutorial catalog, used to resolve completed ids

    Returns:
        Freshly built profile
    """
    done_articles = set(progress.completed_articles)
    done_tutorials = set(progress.completed_tutorials)
    completed_articles = [a for a in articles if a.slug in done_articles]
    completed_tutorials = [t for t in tutorials if t.id in done_tutorials]

    profile = UserProfile(
        skill_level=skill_level_for_points(progress.total_points),
        interests=_rank_interests(progress, completed_articles, completed_tutorials),
        preferred_content_types=_content_type_weights(progress),
        average_completion_time=_completion_times(progress, completed_articles, completed_tutorials),
        difficulty_preference=_difficulty_weights([*completed_articles, *completed_tutorials]),
        learning_patterns=_learning_patterns(progress, completed_articles, completed_tutorials),
    )
    logger.debug(
        "Built profile for %s: level=%s interests=%d",
        progress.user_id,
        profile.skill_level.value,
        len(profile.interests),
    )
    return profile


# Internals ----------------------------------------------------------------


def _recency_index(progress: UserProgress) -> Dict[Tuple[ContentKind, str], float]:
    latest: Dict[Tuple[ContentKind, str], float] = {}
    for event in progress.completion_history:
        key = (event.kind, event.item_id)
        ts = event.completed_at.timestamp()
        if ts > latest.get(key, float("-inf")):
            latest[key] = ts
    return latest


def _rank_interests(
    progress: UserProgress,
    completed_articles: List[Article],
    completed_tutorials: List[Tutorial],
) -> List[str]:
    """Most frequent tags first; ties go to the most recently completed, then catalog order."""
    recency = _recency_index(progress)
    counts: Counter = Counter()
    first_seen: Dict[str, int] = {}
    last_completed: Dict[str, float] = {}

    tagged = [(ContentKind.ARTICLE, a) for a in completed_articles]
    tagged += [(ContentKind.TUTORIAL, t) for t in completed_tutorials]
    for kind, item in tagged:
        item_ts = recency.get((kind, item.item_id), float("-inf"))
        for raw in item.unique_tags:
            tag = normalize_tag(raw)
            if not tag:
                continue
            counts[tag] += 1
            first_seen.setdefault(tag, len(first_seen))
            last_completed[tag] = max(last_completed.get(tag, float("-inf")), item_ts)

    ordered = sorted(
        counts,
        key=lambda tag: (-counts[tag], -last_completed[tag], first_seen[tag]),
    )
    return ordered[:MAX_INTERESTS]


def _content_type_weights(progress: UserProgress) -> ContentTypeWeights:
    counts = {
        "articles": len(set(progress.completed_articles)),
        "tutorials": len(set(progress.completed_tutorials)),
        "paths": len(set(progress.completed_paths)),
    }
    total = sum(counts.values())
    if total == 0:
        return ContentTypeWeights()
    return ContentTypeWeights(**{key: count / total for key, count in counts.items()})


def _completion_times(
    progress: UserProgress,
    completed_articles: List[Article],
    completed_tutorials: List[Tutorial],
) -> CompletionTimes:
    observed: Dict[ContentKind, List[float]] = {kind: [] for kind in ContentKind}
    for event in progress.completion_history:
        if event.minutes_spent is not None:
            observed[event.kind].append(event.minutes_spent)

    # Catalog estimates stand in when no minutes were recorded
    estimated = {
        ContentKind.ARTICLE: [float(a.duration_minutes) for a in completed_articles],
        ContentKind.TUTORIAL: [float(t.duration_minutes) for t in completed_tutorials],
        ContentKind.PATH: [],
    }

    averages: Dict[str, Optional[float]] = {}
    for kind in ContentKind:
        samples = observed[kind] or estimated[kind]
        averages[kind.plural] = sum(samples) / len(samples) if samples else None
    return CompletionTimes(**averages)


def _difficulty_weights(completed: Sequence) -> DifficultyWeights:
    counts = Counter(item.difficulty for item in completed if item.difficulty is not None)
    total = sum(counts.values())
    if total == 0:
        return DifficultyWeights()
    return DifficultyWeights(**{level.value: counts[level] / total for level in Difficulty})


def _learning_patterns(
    progress: UserProgress,
    completed_articles: List[Article],
    completed_tutorials: List[Tutorial],
) -> LearningPatterns:
    durations = [item.duration_minutes for item in [*completed_articles, *completed_tutorials]]
    prefers_short = bool(durations) and float(np.median(durations)) < SHORT_CONTENT_MINUTES

    total_completed = (
        len(set(progress.completed_articles))
        + len(set(progress.completed_tutorials))
        + len(set(progress.completed_paths))
    )
    tutorial_share = len(set(progress.completed_tutorials)) / total_completed if total_completed else 0.0

    with_prerequisites = sum(1 for t in completed_tutorials if t.prerequisites)
    likes_prerequisites = bool(completed_tutorials) and with_prerequisites > len(completed_tutorials) / 2

    return LearningPatterns(
        prefers_short_content=prefers_short,
        prefers_interactive_content=tutorial_share > INTERACTIVE_SHARE,
        likes_prerequisites=likes_prerequisites,
    )
