"""SQLAlchemy models for the Catalog module."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from athos.modules.catalog.interface import ContentItem, Question, Quiz
from athos.shared.database import Base
from athos.shared.datetime_utils import ensure_utc, utc_now
from athos.shared.models import ContentType, Difficulty, LearningStyle


class ContentItemModel(Base):
    """Lesson content database model."""

    __tablename__ = "content_items"
    __table_args__ = (
        Index("ix_content_items_section", "module_id", "section_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    module_id: Mapped[str] = mapped_column(String(64), nullable=False)
    section_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content_type: Mapped[str] = mapped_column(String(20), nullable=False, default=ContentType.LESSON.value)
    # "order" is reserved in SQL
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    difficulty: Mapped[str] = mapped_column(String(20), nullable=False, default=Difficulty.BEGINNER.value)
    learning_styles: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("NOW()"),
    )

    def to_entity(self) -> ContentItem:
        """Convert to the catalog dataclass."""
        return ContentItem(
            id=self.id,
            module_id=self.module_id,
            section_id=self.section_id,
            title=self.title,
            type=ContentType(self.content_type),
            order=self.sort_order,
            difficulty=Difficulty(self.difficulty),
            learning_styles=frozenset(LearningStyle(s) for s in self.learning_styles or []),
            description=self.description,
            views=self.views,
            is_published=self.is_published,
            created_at=ensure_utc(self.created_at),
        )

    @classmethod
    def from_entity(cls, item: ContentItem) -> "ContentItemModel":
        return cls(
            id=item.id,
            module_id=item.module_id,
            section_id=item.section_id,
            title=item.title,
            content_type=item.type.value,
            sort_order=item.order,
            difficulty=item.difficulty.value,
            learning_styles=sorted(style.value for style in item.learning_styles),
            description=item.description,
            views=item.views,
            is_published=item.is_published,
            created_at=item.created_at,
        )


class QuizModel(Base):
    """Section quiz database model.

    Questions are stored as a JSONB list in the same shape as
    ``Question.to_dict``.
    """

    __tablename__ = "quizzes"
    __table_args__ = (
        Index("ix_quizzes_section", "module_id", "section_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    module_id: Mapped[str] = mapped_column(String(64), nullable=False)
    section_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    questions: Mapped[list[dict]] = mapped_column(JSONB, nullable=False, default=list)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("NOW()"),
    )

    def to_entity(self) -> Quiz:
        return Quiz(
            id=self.id,
            module_id=self.module_id,
            section_id=self.section_id,
            title=self.title,
            questions=[Question.from_dict(q) for q in self.questions or []],
            is_published=self.is_published,
            created_at=ensure_utc(self.created_at),
        )

    @classmethod
    def from_entity(cls, quiz: Quiz) -> "QuizModel":
        return cls(
            id=quiz.id,
            module_id=quiz.module_id,
            section_id=quiz.section_id,
            title=quiz.title,
            questions=[q.to_dict() for q in quiz.questions],
            is_published=quiz.is_published,
            created_at=quiz.created_at,
        )
