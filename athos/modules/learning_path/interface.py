"""Learning Path Module - Current pointer and cached recommendations."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID, uuid4

from athos.modules.recommendation.interface import Milestone
from athos.shared.curriculum import SectionRef
from athos.shared.datetime_utils import datetime_to_iso, iso_to_datetime, utc_now
from athos.shared.models import Difficulty, LearningStyle


@dataclass
class AdaptiveSuggestion:
    """A reasoned recommendation shown to the learner."""

    content_id: str
    reason: str
    priority: int  # 1 (lowest) to 5 (highest)
    id: str = field(default_factory=lambda: uuid4().hex)
    suggested_at: datetime = field(default_factory=utc_now)
    clicked_at: datetime | None = None
    completed: bool = False

    @property
    def interacted(self) -> bool:
        """Whether the learner clicked or finished this suggestion."""
        return self.clicked_at is not None or self.completed

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content_id": self.content_id,
            "reason": self.reason,
            "priority": self.priority,
            "suggested_at": datetime_to_iso(self.suggested_at),
            "clicked_at": datetime_to_iso(self.clicked_at),
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AdaptiveSuggestion":
        return cls(
            id=data["id"],
            content_id=data["content_id"],
            reason=data["reason"],
            priority=data["priority"],
            suggested_at=iso_to_datetime(data.get("suggested_at")) or utc_now(),
            clicked_at=iso_to_datetime(data.get("clicked_at")),
            completed=data.get("completed", False),
        )


@dataclass
class LearningPath:
    """One per learner: where they are and what to do next."""

    user_id: UUID
    current_module: str
    current_section: str
    learning_style: LearningStyle = LearningStyle.BALANCED
    difficulty: Difficulty = Difficulty.BEGINNER
    recommended_content: list[str] = field(default_factory=list)
    adaptive_suggestions: list[AdaptiveSuggestion] = field(default_factory=list)
    completed_sections: list[SectionRef] = field(default_factory=list)
    completed_modules: list[str] = field(default_factory=list)
    next_milestones: list[Milestone] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    last_updated: datetime = field(default_factory=utc_now)
    last_generated: datetime | None = None

    def find_suggestion(self, suggestion_id: str) -> AdaptiveSuggestion | None:
        return next((s for s in self.adaptive_suggestions if s.id == suggestion_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": str(self.user_id),
            "current_module": self.current_module,
            "current_section": self.current_section,
            "learning_style": self.learning_style.value,
            "difficulty": self.difficulty.value,
            "recommended_content": list(self.recommended_content),
            "adaptive_suggestions": [s.to_dict() for s in self.adaptive_suggestions],
            "completed_sections": [ref.to_dict() for ref in self.completed_sections],
            "completed_modules": list(self.completed_modules),
            "next_milestones": [m.to_dict() for m in self.next_milestones],
            "created_at": datetime_to_iso(self.created_at),
            "last_updated": datetime_to_iso(self.last_updated),
            "last_generated": datetime_to_iso(self.last_generated),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LearningPath":
        return cls(
            user_id=UUID(data["user_id"]),
            current_module=data["current_module"],
            current_section=data["current_section"],
            learning_style=LearningStyle(data.get("learning_style", LearningStyle.BALANCED.value)),
            difficulty=Difficulty(data.get("difficulty", Difficulty.BEGINNER.value)),
            recommended_content=list(data.get("recommended_content", [])),
            adaptive_suggestions=[
                AdaptiveSuggestion.from_dict(s) for s in data.get("adaptive_suggestions", [])
            ],
            completed_sections=[
                SectionRef(ref["module_id"], ref["section_id"])
                for ref in data.get("completed_sections", [])
            ],
            completed_modules=list(data.get("completed_modules", [])),
            next_milestones=[Milestone.from_dict(m) for m in data.get("next_milestones", [])],
            created_at=iso_to_datetime(data.get("created_at")) or utc_now(),
            last_updated=iso_to_datetime(data.get("last_updated")) or utc_now(),
            last_generated=iso_to_datetime(data.get("last_generated")),
        )


class ILearningPathTracker(Protocol):
    """Interface for the learning path tracker.

    Keeps one LearningPath per learner and regenerates its cached
    recommendations whenever progress or preferences change.
    """

    async def get_learning_path(self, user_id: UUID) -> LearningPath:
        """Get the learner's path, creating and persisting a default one."""
        ...

    async def refresh(
        self,
        user_id: UUID,
        module_id: str | None = None,
        section_id: str | None = None,
    ) -> LearningPath:
        """Move the pointer and regenerate recommendations from fresh progress.

        Args:
            user_id: Learner
            module_id: New current module, or keep the stored one
            section_id: New current section, or keep the stored one

        Returns:
            The persisted path
        """
        ...

    async def new_path(self, user_id: UUID) -> LearningPath:
        """Build an unsaved default path from the learner's stored preferences."""
        ...

    async def prune_suggestions(self, user_id: UUID, max_days: int | None = None) -> int:
        """Remove old suggestions the learner never clicked or completed.

        Returns:
            Number of suggestions removed
        """
        ...
