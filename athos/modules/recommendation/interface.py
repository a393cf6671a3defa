"""Recommendation Module - Ranked content and reasoned suggestions."""

from dataclasses import dataclass, field
from typing import Any

from athos.modules.catalog.interface import ContentItem
from athos.shared.curriculum import SectionRef
from athos.shared.models import CompletionStatus, Difficulty, LearningStyle, MilestoneType, QuizStatus


@dataclass(frozen=True)
class SuggestionCandidate:
    """A suggestion produced by one recommendation pass."""

    content_id: str
    reason: str
    priority: int


@dataclass
class RecommendationResult:
    """Output of a recommendation run."""

    recommended_content: list[str] = field(default_factory=list)
    adaptive_suggestions: list[SuggestionCandidate] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "RecommendationResult":
        return cls()


@dataclass
class NextSteps:
    """What the learner should do in a section."""

    module_id: str
    section_id: str
    completion_status: CompletionStatus
    module_completion: int = 0
    section_completion: int = 0
    incomplete_content: list[str] = field(default_factory=list)
    quiz_id: str | None = None
    quiz_title: str | None = None
    quiz_status: QuizStatus | None = None
    quiz_attempts: int = 0
    quiz_score: int = 0
    next_section: SectionRef | None = None


@dataclass
class LearningEvaluation:
    """Performance-based difficulty advice for one section."""

    module_id: str
    section_id: str
    average_score: int | None
    recommended_difficulty: Difficulty
    suggestions: list[SuggestionCandidate] = field(default_factory=list)


@dataclass
class StyleWeights:
    """Relative affinity for each learning style."""

    weights: dict[LearningStyle, float]

    @property
    def dominant(self) -> LearningStyle:
        return max(self.weights, key=lambda style: (self.weights[style], style.value))


@dataclass
class Milestone:
    """Next goal within a curriculum module."""

    type: MilestoneType
    module_id: str
    section_id: str
    item_id: str  # content id, or quiz id for quiz milestones
    title: str
    priority: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "module_id": self.module_id,
            "section_id": self.section_id,
            "item_id": self.item_id,
            "title": self.title,
            "priority": self.priority,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Milestone":
        return cls(
            type=MilestoneType(data["type"]),
            module_id=data["module_id"],
            section_id=data["section_id"],
            item_id=data["item_id"],
            title=data["title"],
            priority=data["priority"],
        )


@dataclass
class ResolvedRecommendations:
    """Recommendations with content details attached."""

    content: list[ContentItem]
    suggestions: list[SuggestionCandidate]
    content_by_id: dict[str, ContentItem] = field(default_factory=dict)
