"""Learning path API schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from athos.api.schemas.content import ContentItemResponse
from athos.api.schemas.progress import SectionRefResponse
from athos.shared.models import BaseSchema, CompletionStatus, Difficulty, LearningStyle, MilestoneType, QuizStatus


class AdaptiveSuggestionResponse(BaseSchema):
    id: str
    content_id: str
    reason: str
    priority: int = Field(..., description="1 (lowest) to 5 (highest)")
    suggested_at: datetime
    clicked_at: datetime | None = None
    completed: bool = False


class MilestoneResponse(BaseSchema):
    type: MilestoneType
    module_id: str
    section_id: str
    item_id: str = Field(..., description="Content id, or quiz id for quiz milestones")
    title: str
    priority: int


class LearningPathResponse(BaseSchema):
    """A learner's position and cached recommendations."""

    user_id: UUID
    current_module: str
    current_section: str
    learning_style: LearningStyle
    difficulty: Difficulty
    recommended_content: list[str]
    adaptive_suggestions: list[AdaptiveSuggestionResponse]
    completed_sections: list[SectionRefResponse]
    completed_modules: list[str]
    next_milestones: list[MilestoneResponse]
    created_at: datetime
    last_updated: datetime
    last_generated: datetime | None = None


class UpdateLearningPathRequest(BaseModel):
    """Pointer and/or preference change."""

    current_module: str | None = Field(default=None, description="New current module")
    current_section: str | None = Field(
        default=None,
        description="New current section; defaults to the module's first section",
    )
    learning_style: str | None = Field(default=None, description="visual, textual, interactive or balanced")
    difficulty: str | None = Field(default=None, description="beginner, intermediate or advanced")


class UpdatePreferencesRequest(BaseModel):
    learning_style: str | None = Field(default=None, description="visual, textual, interactive or balanced")
    difficulty: str | None = Field(default=None, description="beginner, intermediate or advanced")


class SuggestionResponse(BaseModel):
    content_id: str
    reason: str
    priority: int
    content: ContentItemResponse | None = None


class RecommendationsResponse(BaseModel):
    """Engine output resolved to content details."""

    content: list[ContentItemResponse]
    suggestions: list[SuggestionResponse]


class NextStepsResponse(BaseSchema):
    module_id: str
    section_id: str
    completion_status: CompletionStatus
    module_completion: int
    section_completion: int
    incomplete_content: list[str]
    quiz_id: str | None = None
    quiz_title: str | None = None
    quiz_status: QuizStatus | None = None
    quiz_attempts: int = 0
    quiz_score: int = 0
    next_section: SectionRefResponse | None = None


class SuggestionCandidateResponse(BaseSchema):
    content_id: str
    reason: str
    priority: int


class LearningEvaluationResponse(BaseSchema):
    module_id: str
    section_id: str
    average_score: int | None = Field(default=None, description="Best quiz score, None if never attempted")
    recommended_difficulty: Difficulty
    suggestions: list[SuggestionCandidateResponse]


class StyleWeightsResponse(BaseModel):
    weights: dict[LearningStyle, float]
    dominant: LearningStyle


class PruneSuggestionsRequest(BaseModel):
    max_days: int | None = Field(
        default=None,
        ge=0,
        description="Age limit in days; defaults to the configured retention",
    )
