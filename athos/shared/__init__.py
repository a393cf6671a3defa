"""Shared utilities and common code."""

from athos.shared.config import Settings, get_settings
from athos.shared.curriculum import Curriculum, SectionRef, get_curriculum
from athos.shared.database import (
    Base,
    close_db,
    close_redis,
    get_db_session,
    get_redis,
    init_db,
    shutdown,
    startup,
)
from athos.shared.models import (
    ActivityType,
    AnalyticsEventType,
    BaseSchema,
    CompletionStatus,
    ContentType,
    Difficulty,
    LearningStyle,
    MilestoneType,
    QuestionType,
    QuizStatus,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Curriculum
    "Curriculum",
    "SectionRef",
    "get_curriculum",
    # Database
    "Base",
    "get_db_session",
    "get_redis",
    "init_db",
    "close_db",
    "close_redis",
    "startup",
    "shutdown",
    # Models
    "BaseSchema",
    # Enums
    "ActivityType",
    "AnalyticsEventType",
    "CompletionStatus",
    "ContentType",
    "Difficulty",
    "LearningStyle",
    "MilestoneType",
    "QuestionType",
    "QuizStatus",
]
