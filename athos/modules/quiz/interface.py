"""Quiz Module - Submission grading and quiz progress."""

from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import UUID

from athos.modules.catalog.interface import Quiz
from athos.modules.progress.interface import QuizProgress


@dataclass
class QuestionFeedback:
    """Grading result for one question."""

    question_id: str
    correct: bool
    points_earned: int
    points_possible: int
    user_answer: Any = None
    correct_answer: Any = None
    explanation: str = ""


@dataclass
class QuizEvaluation:
    """Grading result for a whole submission."""

    earned_points: int
    total_points: int
    percentage_score: int
    passed: bool
    feedback: list[QuestionFeedback] = field(default_factory=list)

    @property
    def correct_count(self) -> int:
        return sum(1 for item in self.feedback if item.correct)


@dataclass
class QuizSubmissionResult:
    """What a learner gets back after submitting a quiz."""

    quiz_id: str
    module_id: str
    section_id: str
    title: str
    evaluation: QuizEvaluation
    attempts: int
    best_score: int
    section_completion: int


class IQuizService(Protocol):
    """Interface for the quiz service."""

    async def get_quiz(self, user_id: UUID, quiz_id: str) -> Quiz:
        """Get a published quiz for taking (answers are stripped by the caller)."""
        ...

    async def submit(self, user_id: UUID, quiz_id: str, answers: dict[str, Any]) -> QuizSubmissionResult:
        """Grade a submission and record it.

        The attempt count, best score and section completion are written in
        one transaction: either all of them change or none does.

        Raises:
            QuizNotFoundError: If the quiz is unknown or unpublished
            TransactionAbortedError: If recording failed; nothing was written
        """
        ...

    async def get_quiz_progress(self, user_id: UUID, quiz_id: str) -> QuizProgress | None:
        """Get the learner's best result on a quiz, None if never attempted."""
        ...
