"""Catalog Module - Read-only lesson content and quizzes."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from athos.shared.constants import DEFAULT_QUESTION_POINTS
from athos.shared.datetime_utils import datetime_to_iso, iso_to_datetime, utc_now
from athos.shared.models import ContentType, Difficulty, LearningStyle, QuestionType

# A learner's answer: one value, or several for multiple-select
Answer = str | bool | int | list[str]


@dataclass
class ContentItem:
    """A lesson unit belonging to exactly one module section."""

    id: str
    module_id: str
    section_id: str
    title: str
    type: ContentType = ContentType.LESSON
    order: int = 0
    difficulty: Difficulty = Difficulty.BEGINNER
    learning_styles: frozenset[LearningStyle] = frozenset()
    description: str = ""
    views: int = 0
    is_published: bool = True
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "module_id": self.module_id,
            "section_id": self.section_id,
            "title": self.title,
            "type": self.type.value,
            "order": self.order,
            "difficulty": self.difficulty.value,
            "learning_styles": sorted(style.value for style in self.learning_styles),
            "description": self.description,
            "views": self.views,
            "is_published": self.is_published,
            "created_at": datetime_to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContentItem":
        return cls(
            id=str(data["id"]),
            module_id=data["module_id"],
            section_id=data["section_id"],
            title=data["title"],
            type=ContentType(data.get("type", ContentType.LESSON.value)),
            order=int(data.get("order", 0)),
            difficulty=Difficulty(data.get("difficulty", Difficulty.BEGINNER.value)),
            learning_styles=frozenset(
                LearningStyle(style) for style in data.get("learning_styles", [])
            ),
            description=data.get("description", ""),
            views=int(data.get("views", 0)),
            is_published=bool(data.get("is_published", True)),
            created_at=iso_to_datetime(data.get("created_at")) or utc_now(),
        )


@dataclass
class Question:
    """A single quiz question.

    For multiple-select questions ``correct_answer`` is a frozenset of option
    values; for every other type it is a single string.
    """

    id: str
    type: QuestionType
    prompt: str
    correct_answer: str | frozenset[str]
    options: list[str] = field(default_factory=list)
    points: int = DEFAULT_QUESTION_POINTS
    explanation: str = ""

    def to_dict(self, include_answer: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "prompt": self.prompt,
            "options": list(self.options),
            "points": self.points,
        }
        if include_answer:
            data["correct_answer"] = (
                sorted(self.correct_answer)
                if isinstance(self.correct_answer, frozenset)
                else self.correct_answer
            )
            data["explanation"] = self.explanation
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        question_type = QuestionType(data["type"])
        raw_answer = data["correct_answer"]
        if question_type == QuestionType.MULTIPLE_SELECT:
            if isinstance(raw_answer, str):
                raw_answer = [raw_answer]
            correct: str | frozenset[str] = frozenset(normalize_answer(a) for a in raw_answer)
        else:
            correct = normalize_answer(raw_answer)
        return cls(
            id=str(data["id"]),
            type=question_type,
            prompt=data["prompt"],
            correct_answer=correct,
            options=[str(option) for option in data.get("options", [])],
            points=int(data.get("points", DEFAULT_QUESTION_POINTS)),
            explanation=data.get("explanation", ""),
        )


@dataclass
class Quiz:
    """An ordered set of questions attached to one module section."""

    id: str
    module_id: str
    section_id: str
    title: str
    questions: list[Question] = field(default_factory=list)
    is_published: bool = True
    created_at: datetime = field(default_factory=utc_now)

    @property
    def total_points(self) -> int:
        return sum(question.points for question in self.questions)

    def to_dict(self, include_answers: bool = True) -> dict[str, Any]:
        return {
            "id": self.id,
            "module_id": self.module_id,
            "section_id": self.section_id,
            "title": self.title,
            "questions": [q.to_dict(include_answer=include_answers) for q in self.questions],
            "total_points": self.total_points,
            "is_published": self.is_published,
            "created_at": datetime_to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Quiz":
        return cls(
            id=str(data["id"]),
            module_id=data["module_id"],
            section_id=data["section_id"],
            title=data["title"],
            questions=[Question.from_dict(q) for q in data.get("questions", [])],
            is_published=bool(data.get("is_published", True)),
            created_at=iso_to_datetime(data.get("created_at")) or utc_now(),
        )


def normalize_answer(value: Any) -> str:
    """Canonical string form of an answer value.

    Booleans become ``"true"``/``"false"`` so true-false questions compare
    the same whether the client sent JSON booleans or strings.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


class ContentOrder(str, Enum):
    """Sort orders supported by catalog queries."""

    ORDER = "order"  # lesson order ascending
    RECENT = "recent"  # newest first
    VIEWS = "views"  # most viewed first


@dataclass
class ContentQuery:
    """Filter for catalog content lookups.

    Unset fields do not filter. Results are always ordered deterministically;
    ties fall back to the content id.
    """

    module_id: str | None = None
    section_id: str | None = None
    learning_style: LearningStyle | None = None
    difficulty: Difficulty | None = None
    exclude_module_id: str | None = None
    exclude_ids: frozenset[str] = frozenset()
    published_only: bool = True
    order_by: ContentOrder = ContentOrder.ORDER
    limit: int | None = None

    def matches(self, item: ContentItem) -> bool:
        """Check an item against every filter in this query."""
        if self.published_only and not item.is_published:
            return False
        if self.module_id is not None and item.module_id != self.module_id:
            return False
        if self.section_id is not None and item.section_id != self.section_id:
            return False
        if self.learning_style is not None and self.learning_style not in item.learning_styles:
            return False
        if self.difficulty is not None and item.difficulty != self.difficulty:
            return False
        if self.exclude_module_id is not None and item.module_id == self.exclude_module_id:
            return False
        return item.id not in self.exclude_ids

    def sort_key(self, item: ContentItem) -> tuple:
        if self.order_by == ContentOrder.RECENT:
            return (-item.created_at.timestamp(), item.id)
        if self.order_by == ContentOrder.VIEWS:
            return (-item.views, item.id)
        return (item.order, item.id)


class ICatalog(Protocol):
    """Interface for the content/quiz catalog.

    The catalog is reference data owned by the authoring side. This service
    reads it, increments view counters, and seeds it for development.
    """

    async def find_content(self, query: ContentQuery) -> list[ContentItem]:
        """Find content matching a query.

        Args:
            query: Filters, ordering and limit

        Returns:
            Matching items in the query's order
        """
        ...

    async def get_content(self, content_id: str) -> ContentItem | None:
        """Get a content item by id, published or not."""
        ...

    async def increment_views(self, content_id: str) -> None:
        """Add one to a content item's view counter."""
        ...

    async def get_quiz(self, quiz_id: str) -> Quiz | None:
        """Get a quiz by id, published or not."""
        ...

    async def find_section_quiz(self, module_id: str, section_id: str) -> Quiz | None:
        """Get the published quiz for a section.

        Sections carry at most one quiz; if several are published the one
        with the lowest id is returned.
        """
        ...

    async def add_content(self, item: ContentItem) -> None:
        """Insert or replace a content item."""
        ...

    async def add_quiz(self, quiz: Quiz) -> None:
        """Insert or replace a quiz."""
        ...
