"""
Tests for cross-kind selection: combined sets, next item and time buckets.
"""

import pytest

from recommendation_service.models import (
    Article,
    Difficulty,
    LearningPath,
    PathItem,
    Tutorial,
    TutorialProgress,
    TutorialStep,
    UserProgress,
    create_empty_progress,
)
from recommendation_service.recommendations import (
    RecommendationOptions,
    RecommendationReason,
    get_all_recommendations,
    get_next_recommendation,
    get_recommendations_by_time,
)


def _catalogs():
    articles = [
        Article(slug="quick-read", title="Quick Read", tags=["python"], estimated_minutes=10),
        Article(slug="deep-dive", title="Deep Dive", tags=["web"], estimated_minutes=30,
                difficulty=Difficulty.BEGINNER),
    ]
    tutorials = [
        Tutorial(
            id="build-api",
            title="Build an API",
            tags=["web"],
            estimated_minutes=40,
            steps=[TutorialStep(id="s1", has_exercise_solution=True), TutorialStep(id="s2")],
        ),
    ]
    paths = [
        LearningPath(
            id="fullstack",
            title="Fullstack",
            items=[PathItem(id="i1", slug="quick-read", estimated_minutes=10),
                   PathItem(id="i2", slug="build-api", estimated_minutes=45)],
        ),
    ]
    return articles, tutorials, paths


def test_get_all_recommendations_ranks_each_kind():
    articles, tutorials, paths = _catalogs()
    result = get_all_recommendations(create_empty_progress("u"), articles, tutorials, paths)

    assert [rec.item.item_id for rec in result.articles] == ["deep-dive", "quick-read"]
    assert [rec.item.item_id for rec in result.tutorials] == ["build-api"]
    assert [rec.item.item_id for rec in result.paths] == ["fullstack"]


def test_union_orders_by_score_then_confidence_then_kind():
    articles, tutorials, paths = _catalogs()
    union = get_all_recommendations(create_empty_progress("u"), articles, tutorials, paths).union()

    assert union[0].item.item_id == "deep-dive"
    # Equal scores and confidence fall back to article, tutorial, path order
    assert [rec.item.kind for rec in union[1:]] == ["article", "tutorial", "path"]


def test_next_recommendation_is_none_for_empty_catalogs():
    assert get_next_recommendation(create_empty_progress("u"), [], [], []) is None


def test_next_recommendation_exists_for_non_empty_catalog():
    articles, _, _ = _catalogs()
    rec = get_next_recommendation(create_empty_progress("u"), articles, [], [])

    assert rec is not None
    assert rec.item.item_id == "deep-dive"


def test_next_recommendation_is_none_when_everything_is_completed():
    articles, tutorials, paths = _catalogs()
    progress = UserProgress(
        user_id="u",
        completed_articles=[a.slug for a in articles],
        completed_tutorials=[t.id for t in tutorials],
        completed_paths=[p.id for p in paths],
    )

    assert get_next_recommendation(progress, articles, tutorials, paths) is None


def test_next_recommendation_prefers_started_tutorial():
    articles, tutorials, paths = _catalogs()
    progress = UserProgress(
        user_id="u",
        current_tutorial_progress={"build-api": TutorialProgress(tutorial_id="build-api", completed_steps=["s1"])},
    )

    rec = get_next_recommendation(progress, articles, tutorials, paths)

    assert rec.item.item_id == "build-api"
    assert rec.reason is RecommendationReason.CONTINUES_LEARNING_PATH


def test_prerequisites_met_across_kinds():
    """A tutorial prerequisite completed as an article counts as met."""
    articles, _, paths = _catalogs()
    tutorial = Tutorial(id="advanced-api", title="Advanced API", prerequisites=["quick-read"])
    progress = UserProgress(user_id="u", completed_articles=["quick-read"])

    result = get_all_recommendations(progress, articles, [tutorial], paths)

    assert result.tutorials[0].breakdown["prerequisites"] == pytest.approx(0.2)


class TestRecommendationsByTime:
    """Duration buckets and the time-fit constraint."""

    def test_buckets_by_duration(self):
        articles, tutorials, paths = _catalogs()
        buckets = get_recommendations_by_time(
            create_empty_progress("u"), articles, tutorials, paths, available_minutes=None
        )

        assert [rec.item.item_id for rec in buckets.quick] == ["quick-read"]
        assert [rec.item.item_id for rec in buckets.moderate] == ["deep-dive"]
        assert {rec.item.item_id for rec in buckets.long} == {"build-api", "fullstack"}

    def test_available_minutes_penalize_long_items(self):
        articles, tutorials, paths = _catalogs()
        buckets = get_recommendations_by_time(
            create_empty_progress("u"), articles, tutorials, paths, available_minutes=20
        )

        assert buckets.quick[0].reason is RecommendationReason.QUICK_WIN
        assert all(rec.breakdown["time_fit"] == pytest.approx(-1.0) for rec in buckets.long)

    def test_explicit_time_constraint_wins(self):
        articles, tutorials, paths = _catalogs()
        buckets = get_recommendations_by_time(
            create_empty_progress("u"),
            articles,
            tutorials,
            paths,
            available_minutes=5,
            options=RecommendationOptions(time_constraint=120),
        )

        assert "time_fit" in buckets.long[0].breakdown
        assert buckets.long[0].breakdown["time_fit"] > 0
