"""
Incremental profile updates after a single activity.

Unlike ``build_user_profile`` this never looks at the full history: it blends
the new observation into the existing profile with fixed EMA weights and
returns a new profile, leaving the input untouched.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from ..models import (
    MAX_INTERESTS,
    ContentKind,
    ContentTypeWeights,
    Difficulty,
    DifficultyWeights,
    UserProfile,
)
from .profile_builder import normalize_tag

logger = logging.getLogger(__name__)

PREFERENCE_ALPHA = 0.2
COMPLETION_TIME_ALPHA = 0.3
# Boosted interests move up to this index at most
INTEREST_BOOST_INDEX = 2


def update_profile_with_activity(
    profile: UserProfile,
    kind: Union[ContentKind, str],
    tags: Optional[Iterable[str]],
    minutes_spent: float,
    difficulty: Optional[Union[Difficulty, str]] = None,
) -> UserProfile:
    """
    Blend one completed activity into a profile.

    Args:
        profile: Current profile (not modified)
        kind: Content kind of the activity
        tags: Tags of the completed content
        minutes_spent: Observed minutes; negative values count as 0
        difficulty: Optional difficulty of the completed content

    Returns:
        New UserProfile

    Raises:
        ValueError: if kind or difficulty is not a known value
    """
    kind = ContentKind(kind)
    minutes = max(0.0, float(minutes_spent))

    preferred = _blend_distribution(
        profile.preferred_content_types, kind.plural, PREFERENCE_ALPHA
    )

    old_minutes = profile.average_completion_time.minutes_for(kind)
    if old_minutes is None:
        new_minutes = minutes
    else:
        new_minutes = old_minutes * (1 - COMPLETION_TIME_ALPHA) + minutes * COMPLETION_TIME_ALPHA
    completion_time = profile.average_completion_time.model_copy(update={kind.plural: new_minutes})

    difficulty_preference = profile.difficulty_preference
    if difficulty is not None:
        difficulty_preference = _blend_distribution(
            difficulty_preference, Difficulty(difficulty).value, PREFERENCE_ALPHA
        )

    updated = UserProfile(
        skill_level=profile.skill_level,
        interests=merge_interests(profile.interests, tags or []),
        preferred_content_types=preferred,
        average_completion_time=completion_time,
        difficulty_preference=difficulty_preference,
        learning_patterns=profile.learning_patterns,
    )
    logger.debug("Profile updated with %s activity (%.1f min)", kind.value, minutes)
    return updated


def merge_interests(interests: List[str], tags: Iterable[str]) -> List[str]:
    """
    Merge activity tags into an interest list capped at MAX_INTERESTS.

    Known tags move toward the front, new tags are appended. When the list
    overflows, the last entries that were not part of this activity drop off.
    """
    fresh: List[str] = []
    for raw in tags:
        tag = normalize_tag(raw)
        if tag and tag not in fresh:
            fresh.append(tag)
    fresh = fresh[:MAX_INTERESTS]

    merged = list(interests)
    for tag in fresh:
        if tag in merged:
            index = merged.index(tag)
            merged.pop(index)
            merged.insert(min(index, INTEREST_BOOST_INDEX), tag)
        else:
            merged.append(tag)

    activity = set(fresh)
    while len(merged) > MAX_INTERESTS:
        for index in range(len(merged) - 1, -1, -1):
            if merged[index] not in activity:
                merged.pop(index)
                break
    return merged


def _blend_distribution(
    weights: Union[ContentTypeWeights, DifficultyWeights],
    key: str,
    alpha: float,
):
    """EMA step toward the one-hot vector of ``key``; an empty distribution jumps to it."""
    current = weights.model_dump()
    if weights.is_empty():
        blended = {name: 1.0 if name == key else 0.0 for name in current}
    else:
        blended = {
            name: value * (1 - alpha) + (alpha if name == key else 0.0)
            for name, value in current.items()
        }
    return type(weights)(**blended)
