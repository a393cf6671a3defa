"""Progress API schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from athos.shared.models import BaseSchema


class ActivityUpdateRequest(BaseModel):
    """Learner activity report.

    Fields are optional at the schema level so that every problem is
    reported together by the activity validator.
    """

    module_id: str | None = Field(default=None, description="Module of the activity")
    section_id: str | None = Field(default=None, description="Section of the activity")
    activity_type: str | None = Field(
        default=None,
        description="content, quiz, interactive or video",
    )
    content_id: str | None = Field(default=None, description="Content item, for content activities")
    quiz_id: str | None = Field(default=None, description="Quiz, for quiz activities")
    progress: int | None = Field(default=None, description="Content progress reached, 0-100")
    completed: bool = Field(default=False, description="Mark the content item as finished")
    time_spent: int = Field(default=0, description="Seconds spent in this activity")


class SectionProgressResponse(BaseSchema):
    completion: int
    last_accessed: datetime | None = None


class ModuleProgressResponse(BaseSchema):
    completion: int
    last_accessed: datetime | None = None
    sections: dict[str, SectionProgressResponse] = Field(default_factory=dict)


class ContentProgressResponse(BaseSchema):
    content_id: str
    module_id: str
    section_id: str
    progress: int
    completed: bool
    time_spent: int = Field(..., description="Seconds")
    last_accessed: datetime


class QuizProgressResponse(BaseSchema):
    quiz_id: str
    module_id: str
    section_id: str
    score: int = Field(..., description="Best percentage across attempts")
    attempts: int
    completed: bool
    last_attempt: datetime | None = None


class AchievementResponse(BaseSchema):
    id: str
    title: str
    description: str = ""
    module_id: str | None = None
    earned_at: datetime


class ProgressResponse(BaseSchema):
    """A learner's full progress snapshot."""

    user_id: UUID
    modules: dict[str, ModuleProgressResponse]
    content_progress: list[ContentProgressResponse]
    quiz_progress: list[QuizProgressResponse]
    achievements: list[AchievementResponse]
    total_time_spent: int = Field(..., description="Seconds across all content")
    overall_completion: int = Field(..., description="Mean module completion, 0-100")
    last_updated: datetime


class ModuleProgressDetailResponse(BaseSchema):
    module_id: str
    module: ModuleProgressResponse
    content_progress: list[ContentProgressResponse]
    quiz_progress: list[QuizProgressResponse]


class AwardAchievementRequest(BaseModel):
    """Achievement to award."""

    id: str = Field(..., min_length=1, description="Unique achievement id")
    title: str = Field(..., min_length=1, description="Display title")
    description: str = Field(default="", description="What the learner did")
    module_id: str | None = Field(default=None, description="Related module")


class AwardAchievementResponse(BaseModel):
    achievement: AchievementResponse
    is_new: bool = Field(..., description="False when the learner already had it")


class SectionStatusResponse(BaseSchema):
    module_id: str
    section_id: str
    completion: int
    last_accessed: datetime | None = None


class ProgressStatusResponse(BaseSchema):
    """Sections grouped by completion."""

    completed_sections: list[SectionStatusResponse]
    in_progress_sections: list[SectionStatusResponse]
    not_started_sections: list[SectionStatusResponse]
    module_completion: dict[str, int]
    overall_completion: int
    total_time_spent: int
    current_module: str | None = None
    current_section: str | None = None


class SectionRefResponse(BaseSchema):
    module_id: str
    section_id: str


class ProgressOverviewResponse(BaseSchema):
    """Status plus the learner's next section and achievements."""

    status: ProgressStatusResponse
    next_section: SectionRefResponse | None = None
    achievements: list[AchievementResponse]
