"""Progress Module - Per-learner progress aggregate and activity types."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from athos.shared.curriculum import SectionRef
from athos.shared.datetime_utils import datetime_to_iso, iso_to_datetime, utc_now
from athos.shared.models import ActivityType


@dataclass
class SectionProgress:
    """Completion of one section, 0-100."""

    completion: int = 0
    last_accessed: datetime | None = None


@dataclass
class ModuleProgress:
    """Completion of one module and its sections."""

    completion: int = 0
    last_accessed: datetime | None = None
    sections: dict[str, SectionProgress] = field(default_factory=dict)


@dataclass
class ContentProgress:
    """A learner's interaction with one content item."""

    content_id: str
    module_id: str
    section_id: str
    progress: int = 0
    completed: bool = False
    time_spent: int = 0  # seconds
    last_accessed: datetime = field(default_factory=utc_now)


@dataclass
class QuizProgress:
    """A learner's best result on one quiz."""

    quiz_id: str
    module_id: str
    section_id: str
    score: int = 0  # best percentage across attempts
    attempts: int = 0
    completed: bool = False
    last_attempt: datetime | None = None
    answers: dict[str, Any] = field(default_factory=dict)  # most recent submission


@dataclass
class Achievement:
    """An earned badge, unique per id."""

    id: str
    title: str
    description: str = ""
    module_id: str | None = None
    earned_at: datetime = field(default_factory=utc_now)


@dataclass
class Progress:
    """The central mutable per-user aggregate.

    Invariants: one section entry per (module, section), one content entry
    per content id, one quiz entry per quiz id, achievements unique by id.
    """

    user_id: UUID
    modules: dict[str, ModuleProgress] = field(default_factory=dict)
    content_progress: list[ContentProgress] = field(default_factory=list)
    quiz_progress: list[QuizProgress] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)
    total_time_spent: int = 0
    overall_completion: int = 0
    last_updated: datetime = field(default_factory=utc_now)

    @classmethod
    def new(cls, user_id: UUID, module_ids: list[str]) -> "Progress":
        """Fresh progress with every curriculum module at 0%."""
        return cls(
            user_id=user_id,
            modules={module_id: ModuleProgress() for module_id in module_ids},
        )

    def find_content(self, content_id: str) -> ContentProgress | None:
        return next((cp for cp in self.content_progress if cp.content_id == content_id), None)

    def find_quiz(self, quiz_id: str) -> QuizProgress | None:
        return next((qp for qp in self.quiz_progress if qp.quiz_id == quiz_id), None)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(a.id == achievement_id for a in self.achievements)

    def completed_content_ids(self) -> set[str]:
        return {cp.content_id for cp in self.content_progress if cp.completed}

    def touch_section(self, module_id: str, section_id: str, now: datetime) -> SectionProgress:
        """Get or create a section entry and mark it accessed.

        Creates the module entry as well when it does not exist yet.
        """
        module = self.modules.setdefault(module_id, ModuleProgress())
        module.last_accessed = now
        section = module.sections.setdefault(section_id, SectionProgress())
        section.last_accessed = now
        return section

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON document shape."""
        return {
            "user_id": str(self.user_id),
            "modules": {
                module_id: {
                    "completion": module.completion,
                    "last_accessed": datetime_to_iso(module.last_accessed),
                    "sections": {
                        section_id: {
                            "completion": section.completion,
                            "last_accessed": datetime_to_iso(section.last_accessed),
                        }
                        for section_id, section in module.sections.items()
                    },
                }
                for module_id, module in self.modules.items()
            },
            "content_progress": [
                {
                    "content_id": cp.content_id,
                    "module_id": cp.module_id,
                    "section_id": cp.section_id,
                    "progress": cp.progress,
                    "completed": cp.completed,
                    "time_spent": cp.time_spent,
                    "last_accessed": datetime_to_iso(cp.last_accessed),
                }
                for cp in self.content_progress
            ],
            "quiz_progress": [
                {
                    "quiz_id": qp.quiz_id,
                    "module_id": qp.module_id,
                    "section_id": qp.section_id,
                    "score": qp.score,
                    "attempts": qp.attempts,
                    "completed": qp.completed,
                    "last_attempt": datetime_to_iso(qp.last_attempt),
                    "answers": qp.answers,
                }
                for qp in self.quiz_progress
            ],
            "achievements": [
                {
                    "id": a.id,
                    "title": a.title,
                    "description": a.description,
                    "module_id": a.module_id,
                    "earned_at": datetime_to_iso(a.earned_at),
                }
                for a in self.achievements
            ],
            "total_time_spent": self.total_time_spent,
            "overall_completion": self.overall_completion,
            "last_updated": datetime_to_iso(self.last_updated),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Progress":
        """Rebuild from the persisted JSON document shape."""
        return cls(
            user_id=UUID(data["user_id"]),
            modules={
                module_id: ModuleProgress(
                    completion=module.get("completion", 0),
                    last_accessed=iso_to_datetime(module.get("last_accessed")),
                    sections={
                        section_id: SectionProgress(
                            completion=section.get("completion", 0),
                            last_accessed=iso_to_datetime(section.get("last_accessed")),
                        )
                        for section_id, section in module.get("sections", {}).items()
                    },
                )
                for module_id, module in data.get("modules", {}).items()
            },
            content_progress=[
                ContentProgress(
                    content_id=cp["content_id"],
                    module_id=cp["module_id"],
                    section_id=cp["section_id"],
                    progress=cp.get("progress", 0),
                    completed=cp.get("completed", False),
                    time_spent=cp.get("time_spent", 0),
                    last_accessed=iso_to_datetime(cp.get("last_accessed")) or utc_now(),
                )
                for cp in data.get("content_progress", [])
            ],
            quiz_progress=[
                QuizProgress(
                    quiz_id=qp["quiz_id"],
                    module_id=qp["module_id"],
                    section_id=qp["section_id"],
                    score=qp.get("score", 0),
                    attempts=qp.get("attempts", 0),
                    completed=qp.get("completed", False),
                    last_attempt=iso_to_datetime(qp.get("last_attempt")),
                    answers=qp.get("answers", {}),
                )
                for qp in data.get("quiz_progress", [])
            ],
            achievements=[
                Achievement(
                    id=a["id"],
                    title=a["title"],
                    description=a.get("description", ""),
                    module_id=a.get("module_id"),
                    earned_at=iso_to_datetime(a.get("earned_at")) or utc_now(),
                )
                for a in data.get("achievements", [])
            ],
            total_time_spent=data.get("total_time_spent", 0),
            overall_completion=data.get("overall_completion", 0),
            last_updated=iso_to_datetime(data.get("last_updated")) or utc_now(),
        )


@dataclass
class ActivityUpdate:
    """A learner activity reported by the client.

    Fields are kept loose here; ProgressService validates them and reports
    every problem at once.
    """

    module_id: str | None
    section_id: str | None
    activity_type: ActivityType | str | None
    content_id: str | None = None
    quiz_id: str | None = None
    progress: int | None = None
    completed: bool = False
    time_spent: int = 0


@dataclass
class SectionStatus:
    """A section's place in the learner's overview."""

    module_id: str
    section_id: str
    completion: int
    last_accessed: datetime | None = None


@dataclass
class ProgressStatus:
    """Sections grouped by completion, plus per-module totals."""

    completed_sections: list[SectionStatus]
    in_progress_sections: list[SectionStatus]
    not_started_sections: list[SectionStatus]
    module_completion: dict[str, int]
    overall_completion: int
    total_time_spent: int
    current_module: str | None = None
    current_section: str | None = None


@dataclass
class ModuleProgressDetail:
    """One module's entry with the content and quiz records inside it."""

    module_id: str
    module: ModuleProgress
    content_progress: list[ContentProgress]
    quiz_progress: list[QuizProgress]


@dataclass
class ProgressOverview:
    """Status plus where the learner is heading next."""

    status: ProgressStatus
    next_section: SectionRef | None
    achievements: list[Achievement]

class IProgressService(Protocol):
    """Interface for the progress service."""

    async def get_progress(self, user_id: UUID) -> Progress:
        """Get the learner's progress, or a fresh default when none exists.

        The default is not persisted until the first activity.
        """
        ...

    async def update_progress(self, user_id: UUID, activity: ActivityUpdate) -> Progress:
        """Record a learner activity.

        Validates the activity, updates content or quiz progress, recomputes
        the section and its module, commits, then refreshes the learning
        path on a best-effort basis.

        Args:
            user_id: Learner
            activity: What the learner did

        Returns:
            The committed progress snapshot

        Raises:
            ActivityValidationError: If any field is invalid (nothing is written)
            SectionNotFoundError: If the module/section is not in the curriculum
            ContentNotFoundError: If the content id is unknown
            QuizNotFoundError: If the quiz id is unknown
        """
        ...

    async def award_achievement(
        self,
        user_id: UUID,
        achievement: Achievement,
    ) -> tuple[Achievement, bool]:
        """Add an achievement unless one with the same id exists.

        Returns:
            The stored achievement and whether it was newly added
        """
        ...

    async def reset_progress(self, user_id: UUID) -> Progress:
        """Recreate progress and learning path as fresh defaults."""
        ...
