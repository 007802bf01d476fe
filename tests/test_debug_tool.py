"""
Tests for the recommendation debug tool.
"""

import json

from debug.debug_recommendations import load_catalog, load_progress, main


def _write_inputs(tmp_path):
    catalog = {
        "items": [
            {"kind": "article", "slug": "intro", "title": "Intro", "tags": ["python"], "estimated_minutes": 5},
            {"kind": "tutorial", "id": "first-app", "title": "First App", "difficulty": "beginner"},
            {"kind": "path", "id": "starter", "title": "Starter Path"},
            {"kind": "article", "slug": "next", "title": "Next Steps", "estimated_minutes": 60},
        ]
    }
    progress = {"user_id": "alice", "completed_articles": ["intro"], "total_points": 120, "streak_days": 2}

    catalog_path = tmp_path / "catalog.json"
    progress_path = tmp_path / "progress.json"
    catalog_path.write_text(json.dumps(catalog), encoding="utf-8")
    progress_path.write_text(json.dumps(progress), encoding="utf-8")
    return progress_path, catalog_path


def test_load_catalog_splits_by_kind(tmp_path):
    _, catalog_path = _write_inputs(tmp_path)
    articles, tutorials, paths = load_catalog(catalog_path)

    assert [a.slug for a in articles] == ["intro", "next"]
    assert [t.id for t in tutorials] == ["first-app"]
    assert [p.id for p in paths] == ["starter"]


def test_load_progress(tmp_path):
    progress_path, _ = _write_inputs(tmp_path)
    progress = load_progress(progress_path)

    assert progress.user_id == "alice"
    assert progress.completed_articles == ["intro"]


def test_main_prints_rankings(tmp_path, capsys):
    progress_path, catalog_path = _write_inputs(tmp_path)

    exit_code = main([str(progress_path), str(catalog_path), "--minutes", "30"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "alice" in output
    assert "first-app" in output
    assert "By Time" in output


def test_main_reports_missing_files(tmp_path, capsys):
    exit_code = main([str(tmp_path / "nope.json"), str(tmp_path / "missing.json")])

    assert exit_code == 1
    assert "not found" in capsys.readouterr().err
