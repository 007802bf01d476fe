"""
Basic import tests to verify the core functionality.
"""


def test_package_imports():
    """Test that the public API can be imported from the package root."""
    from recommendation_service import (
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
        validate_user_profile,
    )

    # Test that functions are callable
    for func in (
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
        validate_user_profile,
    ):
        assert callable(func)


def test_models_imports():
    """Test that models can be imported and instantiated."""
    from recommendation_service.models import Article, UserProfile, create_empty_progress

    article = Article(slug="intro", title="Intro")
    assert article.kind == "article"
    assert UserProfile().interests == []
    assert create_empty_progress("u").user_id == "u"


def test_default_signal_names_are_unique():
    """Breakdown keys are signal names, so they must not collide."""
    from recommendation_service.recommendations import default_signals

    names = [signal.name for signal in default_signals()]
    assert len(names) == len(set(names))
    assert names[-1] == "popularity"


def test_all_exports_resolve():
    import recommendation_service
    import recommendation_service.recommendations as recommendations

    for module in (recommendation_service, recommendations):
        for name in module.__all__:
            assert hasattr(module, name), name
