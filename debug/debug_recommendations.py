#!/usr/bin/env python3
"""
Debug tool for the recommendation engine.

Usage:
    python debug/debug_recommendations.py <progress.json> <catalog.json> [--minutes N]

The catalog file holds {"items": [...]} where every item carries a "kind"
of "article", "tutorial" or "path".
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import TypeAdapter

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from recommendation_service.models import (
    Article,
    ContentItem,
    LearningPath,
    Tutorial,
    UserProgress,
)
from recommendation_service.recommendations import (
    RecommendationOptions,
    build_user_profile,
    explain_recommendation,
    get_all_recommendations,
    get_recommendations_by_time,
)

_CATALOG_ADAPTER = TypeAdapter(List[ContentItem])


def load_progress(path: Path) -> UserProgress:
    """Load a progress snapshot from JSON."""
    if not path.exists():
        raise FileNotFoundError(f"Progress file not found: {path}")
    return UserProgress.model_validate_json(path.read_text(encoding="utf-8"))


def load_catalog(path: Path) -> Tuple[List[Article], List[Tutorial], List[LearningPath]]:
    """Load a mixed catalog and split it by kind, keeping file order."""
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    raw = TypeAdapter(dict).validate_json(path.read_text(encoding="utf-8"))
    items = _CATALOG_ADAPTER.validate_python(raw.get("items", []))
    articles = [item for item in items if isinstance(item, Article)]
    tutorials = [item for item in items if isinstance(item, Tutorial)]
    paths = [item for item in items if isinstance(item, LearningPath)]
    return articles, tutorials, paths


def print_section(title: str):
    """Print a section header."""
    print(f"\n{'='*80}")
    print(f"  {title}")
    print(f"{'='*80}")


def print_recommendations(title: str, recs) -> None:
    print(f"\n{title}:")
    if not recs:
        print("  (empty)")
        return
    for rec in recs:
        explanation = explain_recommendation(rec)
        print(f"  {rec.item.item_id:30s} score={rec.score:7.3f} confidence={rec.confidence:.2f} [{explanation.confidence}]")
        print(f"    {explanation.details}")
        breakdown = ", ".join(f"{name}={value:+.2f}" for name, value in rec.breakdown.items())
        print(f"    signals: {breakdown}")


def debug_recommendations(progress_path: Path, catalog_path: Path, minutes: Optional[float] = None):
    """Print profile, per-kind rankings and time buckets for one user."""
    progress = load_progress(progress_path)
    articles, tutorials, paths = load_catalog(catalog_path)

    print_section(f"Recommendation Debug for User: {progress.user_id}")
    print(f"\n  Catalog: {len(articles)} articles, {len(tutorials)} tutorials, {len(paths)} paths")
    print(f"  Completed: {len(progress.completed_articles)} articles, "
          f"{len(progress.completed_tutorials)} tutorials, {len(progress.completed_paths)} paths")
    print(f"  Points: {progress.total_points}  Streak: {progress.streak_days} days")

    profile = build_user_profile(progress, articles, tutorials)
    print_section("Profile")
    print(profile.model_dump_json(indent=2))

    options = RecommendationOptions(max_results=5)
    result = get_all_recommendations(progress, articles, tutorials, paths, options)
    print_section("Rankings")
    print_recommendations("Articles", result.articles)
    print_recommendations("Tutorials", result.tutorials)
    print_recommendations("Paths", result.paths)

    if minutes is not None:
        buckets = get_recommendations_by_time(progress, articles, tutorials, paths, minutes, options)
        print_section(f"By Time ({minutes:g} minutes available)")
        print_recommendations("Quick (<= 15 min)", buckets.quick)
        print_recommendations("Moderate (<= 45 min)", buckets.moderate)
        print_recommendations("Long (> 45 min)", buckets.long)

    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect recommendations for one user")
    parser.add_argument("progress", type=Path, help="UserProgress JSON file")
    parser.add_argument("catalog", type=Path, help="Catalog JSON file")
    parser.add_argument("--minutes", type=float, default=None, help="Available minutes for time buckets")
    args = parser.parse_args(argv)

    try:
        debug_recommendations(args.progress, args.catalog, args.minutes)
    except (FileNotFoundError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
