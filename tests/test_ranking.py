"""
Tests for the ranking orchestrator and the diversity pass.
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
    apply_diversity,
    get_all_recommendations,
    get_next_recommendation,
    get_recommendations_by_time,
    get_recommended_articles,
    get_recommended_paths,
    get_recommended_tutorials,
)


def _article(slug, tags=(), difficulty=None, minutes=20):
    return Article(
        slug=slug,
        title=slug.title(),
        tags=list(tags),
        difficulty=difficulty,
        estimated_minutes=minutes,
    )


def _catalog(count=5):
    return [_article(f"a{i}", tags=[f"topic{i}"]) for i in range(count)]


def _ids(recs):
    return [rec.item.item_id for rec in recs]


class TestFiltering:
    """Completion filtering, confidence threshold and truncation."""

    def test_empty_catalog_returns_empty_list(self):
        progress = create_empty_progress("u")
        assert get_recommended_articles(progress, []) == []
        assert get_recommended_tutorials(progress, []) == []
        assert get_recommended_paths(progress, []) == []

    def test_completed_items_are_excluded_by_default(self):
        progress = UserProgress(user_id="u", completed_articles=["a1", "a3"])

        recs = get_recommended_articles(progress, _catalog())

        assert len(recs) == 3
        assert not {"a1", "a3"} & set(_ids(recs))

    def test_include_completed_adds_exactly_the_completed_items(self):
        progress = UserProgress(user_id="u", completed_articles=["a1", "a3"])
        catalog = _catalog()

        without = get_recommended_articles(progress, catalog)
        with_completed = get_recommended_articles(
            progress, catalog, RecommendationOptions(include_completed=True)
        )

        assert len(with_completed) == len(without) + 2
        assert set(_ids(with_completed)) == {a.slug for a in catalog}

    def test_max_results_truncates(self):
        recs = get_recommended_articles(
            create_empty_progress("u"), _catalog(8), RecommendationOptions(max_results=3)
        )
        assert len(recs) == 3

    def test_invalid_max_results_falls_back_to_default(self):
        recs = get_recommended_articles(
            create_empty_progress("u"), _catalog(12), RecommendationOptions(max_results=0)
        )
        assert len(recs) == 10

    def test_min_confidence_filters_weak_candidates(self):
        catalog = [
            _article("plain"),
            _article("levelled", difficulty=Difficulty.BEGINNER),
        ]
        recs = get_recommended_articles(
            create_empty_progress("u"), catalog, RecommendationOptions(min_confidence=0.3)
        )

        assert _ids(recs) == ["levelled"]
        assert all(rec.confidence >= 0.3 for rec in recs)


class TestOrdering:
    """Sorting and tie-breaks."""

    def test_results_sorted_by_score(self):
        catalog = [
            _article("hard", tags=["x"], difficulty=Difficulty.ADVANCED),
            _article("plain", tags=["y"]),
            _article("easy", tags=["z"], difficulty=Difficulty.BEGINNER),
        ]
        recs = get_recommended_articles(create_empty_progress("u"), catalog)

        assert _ids(recs) == ["easy", "plain", "hard"]
        scores = [rec.score for rec in recs]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_catalog_order(self):
        catalog = _catalog(4)
        recs = get_recommended_articles(create_empty_progress("u"), catalog)
        assert _ids(recs) == ["a0", "a1", "a2", "a3"]

    def test_in_progress_tutorial_ranks_first(self):
        tutorials = [
            Tutorial(id="fresh", title="Fresh", difficulty=Difficulty.BEGINNER, steps=[TutorialStep(id="s")]),
            Tutorial(id="open", title="Open", difficulty=Difficulty.ADVANCED, steps=[TutorialStep(id="s")]),
        ]
        progress = UserProgress(
            user_id="u",
            current_tutorial_progress={"open": TutorialProgress(tutorial_id="open")},
        )

        recs = get_recommended_tutorials(progress, tutorials)

        assert recs[0].item.item_id == "open"
        assert recs[0].reason is RecommendationReason.CONTINUES_LEARNING_PATH

    def test_started_tutorial_beats_strong_rival_under_time_constraint(self):
        """Started items lead even when a rival matches every interest and the time limit is exceeded."""
        tags = [f"t{i}" for i in range(10)]
        tutorials = [
            Tutorial(id="done1", title="Done One", tags=tags, estimated_minutes=10),
            Tutorial(id="done2", title="Done Two", tags=tags, estimated_minutes=10),
            Tutorial(id="rival", title="Rival", tags=tags, estimated_minutes=5, prerequisites=["done1"]),
            Tutorial(id="started", title="Started", estimated_minutes=30),
        ]
        progress = UserProgress(
            user_id="u",
            completed_tutorials=["done1", "done2"],
            current_tutorial_progress={"started": TutorialProgress(tutorial_id="started")},
        )
        options = RecommendationOptions(time_constraint=20)

        recs = get_recommended_tutorials(progress, tutorials, options)
        assert _ids(recs) == ["started", "rival"]
        # The rival still has the larger raw score
        assert recs[1].score > recs[0].score

        best = get_next_recommendation(progress, [], tutorials, [], options)
        assert best.item.item_id == "started"

        buckets = get_recommendations_by_time(progress, [], tutorials, [], available_minutes=20)
        assert _ids(buckets.moderate) == ["started"]
        assert buckets.moderate[0].reason is RecommendationReason.CONTINUES_LEARNING_PATH

    def test_paths_for_users_level_rank_higher(self):
        paths = [
            LearningPath(id="pro", title="Pro", target_audience=["Advanced engineers"]),
            LearningPath(id="starter", title="Starter", target_audience=["Beginner developers"]),
        ]
        recs = get_recommended_paths(create_empty_progress("u"), paths)

        assert _ids(recs) == ["starter", "pro"]
        assert recs[0].reason is RecommendationReason.SUITABLE_FOR_LEVEL


class TestDiversity:
    """Greedy diversity re-ranking."""

    def _duplicates_and_distinct(self):
        dupes = [
            _article(f"dup{i}", tags=["python", "basics"], difficulty=Difficulty.BEGINNER)
            for i in range(3)
        ]
        return dupes + [_article("distinct", tags=["rust"])]

    def test_distinct_item_moves_up(self):
        recs = get_recommended_articles(
            create_empty_progress("u"),
            self._duplicates_and_distinct(),
            RecommendationOptions(diversity_factor=0.5),
        )

        assert _ids(recs)[:2] == ["dup0", "distinct"]
        assert recs[2].breakdown["diversity"] == pytest.approx(-0.5)

    def test_zero_factor_keeps_pure_score_order(self):
        recs = get_recommended_articles(
            create_empty_progress("u"),
            self._duplicates_and_distinct(),
            RecommendationOptions(diversity_factor=0.0),
        )

        assert _ids(recs) == ["dup0", "dup1", "dup2", "distinct"]
        assert all("diversity" not in rec.breakdown for rec in recs)

    def test_penalties_accumulate(self):
        recs = get_recommended_articles(
            create_empty_progress("u"),
            self._duplicates_and_distinct(),
            RecommendationOptions(diversity_factor=0.5),
        )
        by_id = {rec.item.item_id: rec for rec in recs}

        assert by_id["dup2"].breakdown["diversity"] == pytest.approx(-1.0)
        assert _ids(recs)[-1] == "dup2"

    def test_apply_diversity_noop_for_single_candidate(self):
        recs = get_recommended_articles(create_empty_progress("u"), [_article("only", tags=["x"])])
        pairs = [(0, recs[0])]

        assert apply_diversity(pairs, 1.0) == pairs


class TestCatalogsAreReadOnly:
    """Ranking works on copies; caller catalogs keep their order and items."""

    def test_catalog_lists_are_not_reordered(self):
        articles = [
            _article("hard", tags=["x"], difficulty=Difficulty.ADVANCED),
            _article("plain", tags=["y"]),
            _article("easy", tags=["z"], difficulty=Difficulty.BEGINNER),
        ]
        tutorials = [
            Tutorial(id="long", title="Long", estimated_minutes=90),
            Tutorial(id="short", title="Short", estimated_minutes=5, difficulty=Difficulty.BEGINNER),
        ]
        paths = [
            LearningPath(id="p2", title="Second", items=[PathItem(id="i1", estimated_minutes=60)]),
            LearningPath(id="p1", title="First", target_audience=["beginner"]),
        ]
        snapshots = [list(catalog) for catalog in (articles, tutorials, paths)]
        progress = create_empty_progress("u")

        get_recommended_articles(progress, articles)
        get_recommended_tutorials(progress, tutorials)
        get_recommended_paths(progress, paths)
        get_all_recommendations(progress, articles, tutorials, paths)
        get_recommendations_by_time(progress, articles, tutorials, paths, available_minutes=10)

        for catalog, snapshot in zip((articles, tutorials, paths), snapshots):
            assert len(catalog) == len(snapshot)
            assert all(current is original for current, original in zip(catalog, snapshot))
