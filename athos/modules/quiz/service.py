"""Quiz Service - Grades submissions and records them atomically."""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from athos.modules.analytics.service import AnalyticsService
from athos.modules.catalog.interface import ICatalog, Quiz
from athos.modules.learning_path.interface import ILearningPathTracker
from athos.modules.progress.completion import recalculate
from athos.modules.progress.interface import Progress, QuizProgress
from athos.modules.progress.service import refresh_section_completion
from athos.modules.progress.store import ILearnerStateStore
from athos.modules.quiz.interface import QuizEvaluation, QuizSubmissionResult
from athos.modules.quiz.scoring import grade_quiz
from athos.shared.constants import DEFAULT_PASSING_SCORE
from athos.shared.curriculum import Curriculum
from athos.shared.datetime_utils import utc_now
from athos.shared.exceptions import AthosError, QuizNotFoundError, SectionNotFoundError, TransactionAbortedError
from athos.shared.models import AnalyticsEventType

logger = logging.getLogger(__name__)


class QuizService:
    """Service for taking and submitting quizzes."""

    def __init__(
        self,
        store: ILearnerStateStore,
        catalog: ICatalog,
        curriculum: Curriculum,
        learning_paths: ILearningPathTracker,
        analytics: AnalyticsService,
        passing_score: int = DEFAULT_PASSING_SCORE,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._curriculum = curriculum
        self._learning_paths = learning_paths
        self._analytics = analytics
        self._passing_score = passing_score

    @property
    def passing_score(self) -> int:
        """Percentage at or above which an attempt completes its quiz."""
        return self._passing_score

    async def get_quiz(self, user_id: UUID, quiz_id: str) -> Quiz:
        """Get a published quiz.

        Raises:
            QuizNotFoundError: If the quiz is unknown or unpublished
        """
        quiz = await self._published_quiz(quiz_id)
        await self._track_view(user_id, quiz)
        return quiz

    async def get_section_quiz(self, user_id: UUID, module_id: str, section_id: str) -> Quiz:
        """Get the published quiz of a section.

        Raises:
            SectionNotFoundError: If the section is not in the curriculum
            QuizNotFoundError: If the section has no published quiz
        """
        if not self._curriculum.has_section(module_id, section_id):
            raise SectionNotFoundError(module_id, section_id)
        quiz = await self._catalog.find_section_quiz(module_id, section_id)
        if quiz is None:
            raise QuizNotFoundError(f"{module_id}/{section_id}")
        await self._track_view(user_id, quiz)
        return quiz

    async def submit(self, user_id: UUID, quiz_id: str, answers: dict[str, Any]) -> QuizSubmissionResult:
        """Grade a submission and record it.

        Grading happens before the transaction. Inside it the quiz entry is
        upserted (attempts always grow, score and completion only improve)
        and the quiz's section is recomputed from the same state. Any
        failure there rolls everything back.

        Args:
            user_id: Learner
            quiz_id: Quiz being submitted
            answers: Answers keyed by question id

        Returns:
            The evaluation plus the recorded attempt and section state

        Raises:
            QuizNotFoundError: If the quiz is unknown or unpublished
            TransactionAbortedError: If recording failed; nothing was written
        """
        quiz = await self._published_quiz(quiz_id)
        evaluation = grade_quiz(quiz, answers, self._passing_score)

        try:
            async with self._store.transaction(user_id) as state:
                progress = state.progress or Progress.new(user_id, self._curriculum.modules)
                now = utc_now()
                progress.touch_section(quiz.module_id, quiz.section_id, now)
                entry = self._record_attempt(progress, quiz, evaluation, answers, now)
                section_completion = await refresh_section_completion(
                    progress, self._catalog, quiz.module_id, quiz.section_id,
                )
                state.progress = recalculate(progress, now)
        except AthosError:
            raise
        except Exception as e:
            logger.error(
                f"Quiz submission for {quiz_id} rolled back: {e}",
                extra={"user_id": str(user_id), "quiz_id": quiz_id},
            )
            raise TransactionAbortedError("Quiz submission", str(e)) from e

        logger.info(
            f"Quiz {quiz_id} submitted: {evaluation.percentage_score}% "
            f"({'passed' if evaluation.passed else 'failed'})",
            extra={"user_id": str(user_id), "attempts": entry.attempts},
        )

        await self._refresh_learning_path(user_id, quiz)
        await self._analytics.track(user_id, AnalyticsEventType.QUIZ_SUBMIT, {
            "quiz_id": quiz.id,
            "module_id": quiz.module_id,
            "section_id": quiz.section_id,
            "score": evaluation.percentage_score,
            "passed": evaluation.passed,
            "attempts": entry.attempts,
        })

        return QuizSubmissionResult(
            quiz_id=quiz.id,
            module_id=quiz.module_id,
            section_id=quiz.section_id,
            title=quiz.title,
            evaluation=evaluation,
            attempts=entry.attempts,
            best_score=entry.score,
            section_completion=section_completion,
        )

    async def get_quiz_progress(self, user_id: UUID, quiz_id: str) -> QuizProgress | None:
        progress = await self._store.load_progress(user_id)
        return progress.find_quiz(quiz_id) if progress else None

    async def _published_quiz(self, quiz_id: str) -> Quiz:
        quiz = await self._catalog.get_quiz(quiz_id)
        if quiz is None or not quiz.is_published:
            raise QuizNotFoundError(quiz_id)
        return quiz

    @staticmethod
    def _record_attempt(
        progress: Progress,
        quiz: Quiz,
        evaluation: QuizEvaluation,
        answers: dict[str, Any],
        now: datetime,
    ) -> QuizProgress:
        entry = progress.find_quiz(quiz.id)
        if entry is None:
            entry = QuizProgress(quiz_id=quiz.id, module_id=quiz.module_id, section_id=quiz.section_id)
            progress.quiz_progress.append(entry)

        entry.attempts += 1
        entry.last_attempt = now
        entry.answers = dict(answers)
        if evaluation.percentage_score > entry.score:
            entry.score = evaluation.percentage_score
        entry.completed = entry.completed or evaluation.passed
        return entry

    async def _refresh_learning_path(self, user_id: UUID, quiz: Quiz) -> None:
        try:
            await self._learning_paths.refresh(user_id, quiz.module_id, quiz.section_id)
        except Exception as e:
            logger.warning(f"Learning path refresh failed after quiz {quiz.id}: {e}")

    async def _track_view(self, user_id: UUID, quiz: Quiz) -> None:
        await self._analytics.track(user_id, AnalyticsEventType.QUIZ_VIEW, {
            "quiz_id": quiz.id,
            "module_id": quiz.module_id,
            "section_id": quiz.section_id,
        })
