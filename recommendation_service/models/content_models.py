"""
Content catalog models.

This module contains the Pydantic models for the three content kinds the
recommendation engine scores: articles, tutorials and learning paths. The
variants share a ``kind`` discriminator so a mixed catalog can be parsed into
the right model without duck-typing.
"""

import math
import re
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


WORDS_PER_MINUTE = 200
EXERCISE_MINUTES = 15

_CODE_FENCE_RE = re.compile(r"```[\s\S]*?```")
_INLINE_CODE_RE = re.compile(r"`[^`]+`")
_MARKUP_RE = re.compile(r"[#*_\[\]()>-]")


class Difficulty(str, Enum):
    """Difficulty tiers shared by content items and skill levels."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return _DIFFICULTY_ORDER.index(self)


_DIFFICULTY_ORDER = [Difficulty.BEGINNER, Difficulty.INTERMEDIATE, Difficulty.ADVANCED]


class ContentKind(str, Enum):
    """The three content kinds of the catalog."""
    ARTICLE = "article"
    TUTORIAL = "tutorial"
    PATH = "path"

    @property
    def plural(self) -> str:
        """Key used by per-kind profile distributions ("articles", ...)."""
        return f"{self.value}s"


def calculate_reading_time(content: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Estimate reading time in minutes for a markdown body, ignoring code."""
    text = _CODE_FENCE_RE.sub("", content or "")
    text = _INLINE_CODE_RE.sub("", text)
    text = _MARKUP_RE.sub("", text)
    word_count = len([word for word in text.split() if word])
    return math.ceil(word_count / words_per_minute)


class _ContentBase(BaseModel):
    """Fields every catalog entry carries."""
    title: str = Field(description="Display title")
    section: str = Field(default="", description="Section or category name")
    tags: List[str] = Field(default_factory=list, description="Topic tags")
    difficulty: Optional[Difficulty] = Field(default=None, description="Declared difficulty")
    estimated_minutes: Optional[int] = Field(default=None, ge=0, description="Author estimate in minutes")
    prerequisites: List[str] = Field(default_factory=list, description="Ids of prerequisite content")

    model_config = {"frozen": True}

    @property
    def unique_tags(self) -> List[str]:
        """Tags in declaration order with duplicates removed."""
        seen = set()
        ordered = []
        for tag in self.tags:
            if tag not in seen:
                seen.add(tag)
                ordered.append(tag)
        return ordered


class Article(_ContentBase):
    """Wiki article."""
    kind: Literal["article"] = "article"
    slug: str = Field(description="Unique article slug")
    content: str = Field(default="", description="Markdown body")

    @property
    def item_id(self) -> str:
        return self.slug

    @property
    def duration_minutes(self) -> int:
        if self.estimated_minutes is not None:
            return self.estimated_minutes
        return calculate_reading_time(self.content)


class TutorialStep(BaseModel):
    """Single tutorial step."""
    id: str
    title: str = ""
    has_exercise_solution: bool = False

    model_config = {"frozen": True}


class Tutorial(_ContentBase):
    """Step-by-step interactive tutorial."""
    kind: Literal["tutorial"] = "tutorial"
    id: str = Field(description="Unique tutorial id")
    slug: str = Field(default="", description="URL slug")
    steps: List[TutorialStep] = Field(default_factory=list)

    @property
    def item_id(self) -> str:
        return self.id

    @property
    def duration_minutes(self) -> int:
        # Steps with a worked exercise add a fixed block of practice time
        exercises = sum(1 for step in self.steps if step.has_exercise_solution)
        return (self.estimated_minutes or 0) + exercises * EXERCISE_MINUTES


class PathItem(BaseModel):
    """Entry of a learning path pointing at an article or tutorial."""
    id: str
    type: Literal["article", "tutorial", "exercise", "quiz"] = "article"
    slug: str = ""
    title: str = ""
    estimated_minutes: int = Field(default=0, ge=0)
    is_optional: bool = False
    order: int = 0

    model_config = {"frozen": True}


class LearningPath(_ContentBase):
    """Curated multi-step learning path."""
    kind: Literal["path"] = "path"
    id: str = Field(description="Unique path id")
    slug: str = Field(default="", description="URL slug")
    items: List[PathItem] = Field(default_factory=list)
    target_audience: List[str] = Field(default_factory=list)
    category: Optional[str] = None

    @property
    def item_id(self) -> str:
        return self.id

    @property
    def duration_minutes(self) -> int:
        if self.estimated_minutes is not None:
            return self.estimated_minutes
        return sum(item.estimated_minutes for item in self.items)

    @property
    def required_items(self) -> List[PathItem]:
        return [item for item in self.items if not item.is_optional]

    def completion_percent(self, completed_items: List[str]) -> int:
        """Percentage of required items completed; 100 for a path with none."""
        required = self.required_items
        if not required:
            return 100
        done = set(completed_items)
        finished = sum(1 for item in required if item.id in done)
        return round(finished / len(required) * 100)


ContentItem = Annotated[Union[Article, Tutorial, LearningPath], Field(discriminator="kind")]


def content_kind(item: Union[Article, Tutorial, LearningPath]) -> ContentKind:
    """Return the ContentKind of a catalog entry."""
    return ContentKind(item.kind)
