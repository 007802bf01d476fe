"""
User progress models.

The progress store owns and persists these records; the recommendation
engine only reads them.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Union

from pydantic import BaseModel, Field

from .content_models import Article, ContentKind, LearningPath, Tutorial, content_kind


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TutorialProgress(BaseModel):
    """Progress through a single tutorial."""
    tutorial_id: str
    completed_steps: List[str] = Field(default_factory=list)
    current_step_id: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class PathProgress(BaseModel):
    """Progress through a single learning path."""
    path_id: str
    completed_items: List[str] = Field(default_factory=list)
    current_item_id: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class CompletionEvent(BaseModel):
    """Timestamped completion, used for recency and observed time spent."""
    kind: ContentKind
    item_id: str
    completed_at: datetime
    minutes_spent: Optional[float] = Field(default=None, ge=0)

    model_config = {"allow_inf_nan": False}


class UserProgress(BaseModel):
    """Aggregate learning progress of one user.

    The ``completed_*`` lists are kept in completion order (oldest first).
    """
    user_id: str
    completed_articles: List[str] = Field(default_factory=list, description="Article slugs")
    completed_tutorials: List[str] = Field(default_factory=list, description="Tutorial ids")
    completed_paths: List[str] = Field(default_factory=list, description="Path ids")
    current_tutorial_progress: Dict[str, TutorialProgress] = Field(default_factory=dict)
    current_path_progress: Dict[str, PathProgress] = Field(default_factory=dict)
    total_points: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    last_activity: datetime = Field(default_factory=_utcnow)
    created_at: datetime = Field(default_factory=_utcnow)
    completion_history: List[CompletionEvent] = Field(default_factory=list)

    def completed_for(self, kind: ContentKind) -> List[str]:
        if kind is ContentKind.ARTICLE:
            return self.completed_articles
        if kind is ContentKind.TUTORIAL:
            return self.completed_tutorials
        return self.completed_paths

    def completed_ids(self) -> Set[str]:
        """Every completed id or slug, regardless of kind."""
        return set(self.completed_articles) | set(self.completed_tutorials) | set(self.completed_paths)

    def is_completed(self, item: Union[Article, Tutorial, LearningPath]) -> bool:
        return item.item_id in self.completed_for(content_kind(item))

    def in_progress_record(
        self, item: Union[Article, Tutorial, LearningPath]
    ) -> Optional[Union[TutorialProgress, PathProgress]]:
        """Return the open progress record for a tutorial or path, if any."""
        if isinstance(item, Tutorial):
            record = self.current_tutorial_progress.get(item.id)
        elif isinstance(item, LearningPath):
            record = self.current_path_progress.get(item.id)
        else:
            return None
        if record is None or record.completed_at is not None:
            return None
        return record


def create_empty_progress(user_id: Optional[str] = None) -> UserProgress:
    """Create the progress record of a brand-new user."""
    return UserProgress(user_id=user_id or f"user_{uuid.uuid4().hex[:12]}")
