"""Base models and common types used across modules."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


# Common enums and types


class LearningStyle(str, Enum):
    """Learner's preferred way of consuming content."""

    VISUAL = "visual"
    TEXTUAL = "textual"
    INTERACTIVE = "interactive"
    BALANCED = "balanced"


class Difficulty(str, Enum):
    """Content difficulty and learner level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ContentType(str, Enum):
    """Kinds of lesson content in the catalog."""

    LESSON = "lesson"
    ARTICLE = "article"
    VIDEO = "video"
    INTERACTIVE = "interactive"
    MODEL_3D = "3d"


class QuestionType(str, Enum):
    """Quiz question types."""

    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    MULTIPLE_SELECT = "multiple-select"
    IMAGE_MATCH = "image-match"


class ActivityType(str, Enum):
    """Kinds of learner activity reported to the progress store."""

    CONTENT = "content"
    QUIZ = "quiz"
    INTERACTIVE = "interactive"
    VIDEO = "video"


class CompletionStatus(str, Enum):
    """Coarse completion state of a section."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class QuizStatus(str, Enum):
    """Learner's standing on a section quiz."""

    NOT_STARTED = "not_started"
    ATTEMPTED = "attempted"
    COMPLETED = "completed"


class MilestoneType(str, Enum):
    """Kinds of milestones shown on the learning path."""

    START_MODULE = "start_module"
    CONTINUE_SECTION = "continue_section"
    COMPLETE_QUIZ = "complete_quiz"


class AnalyticsEventType(str, Enum):
    """Activity events emitted to the analytics sink."""

    CONTENT_VIEW = "content_view"
    QUIZ_VIEW = "quiz_view"
    QUIZ_SUBMIT = "quiz_submit"
    PROGRESS_UPDATE = "progress_update"
    PROGRESS_RESET = "progress_reset"
    ACHIEVEMENT_EARNED = "achievement_earned"
    LEARNING_PATH_UPDATE = "learning_path_update"
    RECOMMENDATION_CLICK = "recommendation_click"
    SUGGESTION_COMPLETE = "suggestion_complete"
