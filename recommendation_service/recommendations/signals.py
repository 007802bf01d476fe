"""
Scoring signals for the item scorer.

Each signal is a small strategy object that looks at one aspect of a
candidate (continuation, prerequisites, interests, time fit, ...) and returns
an additive contribution. Signals are independent of each other so a zero
signal never zeroes out the whole score, and new signals can be plugged in
without touching the scorer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Protocol, Sequence

from ..models import (
    MAX_INTERESTS,
    ContentKind,
    LearningPath,
    Tutorial,
    UserProfile,
    UserProgress,
    content_kind,
)
from .profile_builder import normalize_tag
from .types import CatalogItem, RecommendationOptions, RecommendationReason

QUICK_MINUTES = 15
SHORT_READ_MINUTES = 10
MIN_SECTION_COMPLETIONS = 2
MIN_COMPLETIONS_FOR_GAPS = 3
# Items longer than this multiple of the usual completion time are penalized
PACE_OVERRUN_FACTOR = 2


# ---------------------------------------------------------------------------
# Core data structures
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ScoringWeights:
    """Magnitudes of every signal term. Defaults are tuned for relative ordering only."""

    popularity_base: float = 0.1
    continuation_bonus: float = 3.0
    continuation_progress_bonus: float = 0.5
    prerequisite_penalty: float = 0.6
    prerequisite_met_bonus: float = 0.2
    prerequisite_affinity_bonus: float = 0.1
    goal_prerequisite_bonus: float = 0.2
    interest_weight: float = 0.25
    similarity_weight: float = 0.3
    section_bonus: float = 0.15
    time_fit_penalty: float = 1.0
    time_fit_bonus: float = 0.15
    pace_fit_bonus: float = 0.1
    pace_overrun_penalty: float = 0.1
    short_content_bonus: float = 0.1
    streak_bonus: float = 0.1
    skill_gap_bonus: float = 0.1
    difficulty_exact_bonus: float = 0.3
    difficulty_adjacent_bonus: float = 0.1
    difficulty_gap_penalty: float = 0.3
    difficulty_preference_weight: float = 0.1
    audience_bonus: float = 0.15
    content_type_weight: float = 0.15
    interactive_bonus: float = 0.15
    confidence_base: float = 0.2
    confidence_step: float = 0.15


@dataclass(frozen=True)
class ScoringContext:
    """Catalog-derived facts shared by every candidate of one call."""

    completed_items: Sequence[CatalogItem] = ()
    goal_item_ids: FrozenSet[str] = frozenset()


@dataclass(slots=True)
class ScoringState:
    """Everything a signal may look at for a single candidate."""

    item: CatalogItem
    profile: UserProfile
    progress: UserProgress
    options: RecommendationOptions
    context: ScoringContext
    weights: ScoringWeights

    @property
    def kind(self) -> ContentKind:
        return content_kind(self.item)

    @property
    def duration(self) -> int:
        return self.item.duration_minutes


@dataclass(slots=True)
class SignalResult:
    """Contribution of one signal to one candidate."""

    value: float
    reason: Optional[RecommendationReason] = None
    explanation: str = ""
    evidence: bool = True


class ScoringSignal(Protocol):
    """Interface for plug-and-play scoring signals."""

    name: str

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        """Return the signal's contribution, or None when it does not apply."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def item_tags(item: CatalogItem) -> List[str]:
    tags = []
    for raw in item.unique_tags:
        tag = normalize_tag(raw)
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def tag_overlap(first: CatalogItem, second: CatalogItem) -> float:
    """Jaccard overlap of two items' normalized tags."""
    a, b = set(item_tags(first)), set(item_tags(second))
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def content_similarity(first: CatalogItem, second: CatalogItem) -> float:
    """Average of tag overlap, section match and shared long title words."""
    score = 0.0
    factors = 0

    if item_tags(first) and item_tags(second):
        score += tag_overlap(first, second)
        factors += 1

    if first.section and first.section == second.section:
        score += 0.5
        factors += 1

    words_a = {word for word in first.title.lower().split() if len(word) > 3}
    words_b = {word for word in second.title.lower().split() if len(word) > 3}
    shared = words_a & words_b
    if shared:
        score += len(shared) * 0.1
        factors += 1

    return score / factors if factors else 0.0


# ---------------------------------------------------------------------------
# Signals
# ---------------------------------------------------------------------------


class ContinuationSignal:
    """Large bonus for the tutorial or path the user is currently working through."""

    name = "continuation"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        record = state.progress.in_progress_record(state.item)
        if record is None:
            return None
        item = state.item
        if isinstance(item, Tutorial):
            step_ids = {step.id for step in item.steps}
            done = len(step_ids & set(record.completed_steps))
            fraction = done / len(step_ids) if step_ids else 0.0
        elif isinstance(item, LearningPath):
            fraction = item.completion_percent(record.completed_items) / 100
        else:
            fraction = 0.0
        w = state.weights
        return SignalResult(
            value=w.continuation_bonus + w.continuation_progress_bonus * fraction,
            reason=RecommendationReason.CONTINUES_LEARNING_PATH,
            explanation=f"Continue where you left off: {fraction * 100:.0f}% complete",
        )


class PrerequisiteSignal:
    """Down-weights items with unmet prerequisites instead of excluding them."""

    name = "prerequisites"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        prerequisites = list(dict.fromkeys(state.item.prerequisites))
        if not prerequisites:
            return None
        completed = state.progress.completed_ids()
        unmet = [p for p in prerequisites if p not in completed]
        if not unmet:
            value = state.weights.prerequisite_met_bonus
            # Stronger when most completed tutorials declared prerequisites
            if state.profile.learning_patterns.likes_prerequisites:
                value += state.weights.prerequisite_affinity_bonus
            return SignalResult(
                value=value,
                reason=RecommendationReason.BUILDS_ON_COMPLETED,
                explanation="Builds on content you have already completed",
            )
        return SignalResult(
            value=-state.weights.prerequisite_penalty * len(unmet) / len(prerequisites),
            explanation=f"{len(unmet)} of {len(prerequisites)} prerequisites still open",
            evidence=False,
        )


class GoalPrerequisiteSignal:
    """Bonus for items that unblock content the user has already started."""

    name = "goal_prerequisite"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        goals = state.context.goal_item_ids
        item = state.item
        if not goals or not ({item.item_id, getattr(item, "slug", "")} & goals):
            return None
        multiplier = 2.0 if state.options.focus_on_prerequisites else 1.0
        return SignalResult(
            value=state.weights.goal_prerequisite_bonus * multiplier,
            reason=RecommendationReason.PREREQUISITE_FOR_GOAL,
            explanation="Prepares you for content you have already started",
        )


class InterestSignal:
    """Tag overlap with the profile's interests, earlier interests weigh more."""

    name = "interest"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        tags = item_tags(state.item)
        category = normalize_tag(getattr(state.item, "category", None))
        if category and category not in tags:
            tags.append(category)

        value = 0.0
        matched = []
        for tag in tags:
            rank = state.profile.interest_rank(tag)
            if rank is None:
                continue
            value += state.weights.interest_weight * (MAX_INTERESTS - rank) / MAX_INTERESTS
            matched.append((rank, tag))
        if not matched:
            return None
        strongest = min(matched)[1]
        return SignalResult(
            value=value,
            reason=RecommendationReason.MATCHES_INTEREST,
            explanation=f"Matches your interest in {strongest}",
        )


class SimilaritySignal:
    """Similarity to completed items of the same kind."""

    name = "similarity"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        item = state.item
        peers = [
            done for done in state.context.completed_items
            if done.kind == item.kind and done.item_id != item.item_id
        ]
        if not peers:
            return None
        best = max(content_similarity(item, done) for done in peers)
        if best <= 0:
            return None
        return SignalResult(
            value=state.weights.similarity_weight * best,
            reason=RecommendationReason.SIMILAR_TO_LIKED,
            explanation=f"Similar to {item.kind}s you have completed",
        )


class SectionSignal:
    """Bonus for staying in a section the user keeps coming back to."""

    name = "section"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        section = state.item.section
        if not section:
            return None
        count = sum(1 for done in state.context.completed_items if done.section == section)
        if count < MIN_SECTION_COMPLETIONS:
            return None
        return SignalResult(
            value=state.weights.section_bonus,
            reason=RecommendationReason.BUILDS_ON_COMPLETED,
            explanation=f"Continues your work in {section}",
        )


class TimeFitSignal:
    """Strong penalty when an item exceeds the time the user has."""

    name = "time_fit"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        limit = state.options.time_constraint
        if not limit or limit <= 0:
            return None
        if state.duration > limit:
            return SignalResult(
                value=-state.weights.time_fit_penalty,
                explanation=f"Takes about {state.duration} minutes, more than you have",
                evidence=False,
            )
        return SignalResult(
            value=state.weights.time_fit_bonus,
            reason=RecommendationReason.QUICK_WIN,
            explanation="Fits your available time",
        )


class PaceSignal:
    """Compares the item's length with how long this user usually spends on its kind.

    Only active without an explicit time constraint, which TimeFitSignal handles.
    """

    name = "pace"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        if state.options.time_constraint:
            return None
        usual = state.profile.average_completion_time.minutes_for(state.kind)
        if not usual or usual <= 0 or state.duration <= 0:
            return None
        if state.duration <= usual:
            return SignalResult(
                value=state.weights.pace_fit_bonus,
                reason=RecommendationReason.QUICK_WIN,
                explanation=f"Fits your usual {usual:.0f}-minute sessions",
            )
        if state.duration > usual * PACE_OVERRUN_FACTOR:
            return SignalResult(
                value=-state.weights.pace_overrun_penalty,
                explanation=f"Longer than your usual {usual:.0f} minutes",
                evidence=False,
            )
        return None


class ShortContentSignal:
    name = "short_content"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        if not state.profile.learning_patterns.prefers_short_content:
            return None
        if not 0 < state.duration < SHORT_READ_MINUTES:
            return None
        return SignalResult(
            value=state.weights.short_content_bonus,
            reason=RecommendationReason.QUICK_WIN,
            explanation=f"A short {state.duration}-minute {state.item.kind}",
        )


class StreakSignal:
    """Something quick to keep an active streak alive."""

    name = "streak"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        streak = state.progress.streak_days
        if streak <= 0 or not 0 < state.duration <= QUICK_MINUTES:
            return None
        return SignalResult(
            value=state.weights.streak_bonus,
            reason=RecommendationReason.MAINTAINS_STREAK,
            explanation=f"Keep your {streak}-day streak going",
        )


class SkillGapSignal:
    name = "skill_gap"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        section = state.item.section
        completed = state.context.completed_items
        if not section or len(completed) < MIN_COMPLETIONS_FOR_GAPS:
            return None
        if any(done.section == section for done in completed):
            return None
        return SignalResult(
            value=state.weights.skill_gap_bonus,
            reason=RecommendationReason.FILLS_SKILL_GAP,
            explanation=f"Covers {section}, which you have not explored yet",
        )


class DifficultySignal:
    """Exact level match, partial credit one tier away, penalty two tiers away."""

    name = "difficulty"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        difficulty = state.item.difficulty
        if difficulty is None:
            return None
        level = state.profile.skill_level
        gap = abs(difficulty.rank - level.rank)
        w = state.weights
        if gap == 0:
            return SignalResult(
                value=w.difficulty_exact_bonus,
                reason=RecommendationReason.SUITABLE_FOR_LEVEL,
                explanation=f"Matches your {level.value} level",
            )
        if gap == 1:
            return SignalResult(
                value=w.difficulty_adjacent_bonus,
                reason=RecommendationReason.SUITABLE_FOR_LEVEL,
                explanation=f"One step from your {level.value} level",
            )
        return SignalResult(
            value=-w.difficulty_gap_penalty,
            explanation=f"{difficulty.value.capitalize()} content for a {level.value} learner",
            evidence=False,
        )


class DifficultyPreferenceSignal:
    name = "difficulty_preference"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        difficulty = state.item.difficulty
        preference = state.profile.difficulty_preference
        if difficulty is None or preference.is_empty():
            return None
        share = preference.weight_for(difficulty)
        if share <= 0:
            return None
        return SignalResult(value=state.weights.difficulty_preference_weight * share)


class AudienceSignal:
    name = "audience"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        item = state.item
        if not isinstance(item, LearningPath) or not item.target_audience:
            return None
        level = state.profile.skill_level.value
        if not any(level in audience.lower() for audience in item.target_audience):
            return None
        return SignalResult(
            value=state.weights.audience_bonus,
            reason=RecommendationReason.SUITABLE_FOR_LEVEL,
            explanation=f"Written for {level} learners",
        )


class ContentTypeSignal:
    """Follows the user's mix of content kinds; silent for a brand-new user."""

    name = "content_type"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        weights = state.profile.preferred_content_types
        if weights.is_empty():
            return None
        share = weights.weight_for(state.kind)
        if share <= 0:
            return None
        return SignalResult(value=state.weights.content_type_weight * share)


class InteractiveSignal:
    name = "interactive"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        if not isinstance(state.item, Tutorial):
            return None
        if not state.profile.learning_patterns.prefers_interactive_content:
            return None
        return SignalResult(value=state.weights.interactive_bonus)


class PopularitySignal:
    """Constant floor so every candidate gets a deterministic score."""

    name = "popularity"

    def evaluate(self, state: ScoringState) -> Optional[SignalResult]:
        return SignalResult(
            value=state.weights.popularity_base,
            reason=RecommendationReason.POPULAR_CHOICE,
            explanation="A popular starting point",
            evidence=False,
        )


def default_signals() -> List[ScoringSignal]:
    """Factory for the signal set used by the ranking functions."""
    return [
        ContinuationSignal(),
        PrerequisiteSignal(),
        GoalPrerequisiteSignal(),
        InterestSignal(),
        SimilaritySignal(),
        SectionSignal(),
        TimeFitSignal(),
        PaceSignal(),
        ShortContentSignal(),
        StreakSignal(),
        SkillGapSignal(),
        DifficultySignal(),
        DifficultyPreferenceSignal(),
        AudienceSignal(),
        ContentTypeSignal(),
        InteractiveSignal(),
        PopularitySignal(),
    ]
