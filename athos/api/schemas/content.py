"""Content API schemas."""

from datetime import datetime

from pydantic import Field

from athos.shared.models import BaseSchema, ContentType, Difficulty, LearningStyle


class ContentItemResponse(BaseSchema):
    """A lesson content item."""

    id: str = Field(..., description="Content identifier")
    module_id: str = Field(..., description="Module the item belongs to")
    section_id: str = Field(..., description="Section the item belongs to")
    title: str = Field(..., description="Display title")
    type: ContentType = Field(..., description="Kind of content")
    order: int = Field(..., description="Position within the section")
    difficulty: Difficulty = Field(..., description="Difficulty level")
    learning_styles: list[LearningStyle] = Field(
        default_factory=list,
        description="Learning styles the item suits",
    )
    description: str = Field(default="", description="Short summary")
    views: int = Field(default=0, description="View counter")
    created_at: datetime = Field(..., description="When the item was authored")


class SectionContentResponse(BaseSchema):
    """Content of one section for a learner."""

    module_id: str
    section_id: str
    learning_style: LearningStyle | None = Field(
        default=None,
        description="Style filter that produced the items, None when the fallback was used",
    )
    items: list[ContentItemResponse] = Field(default_factory=list)
