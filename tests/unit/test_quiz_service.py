"""Unit tests for the quiz service."""

from unittest.mock import AsyncMock, patch

import pytest

from athos.modules.catalog.interface import Question, Quiz
from athos.shared.config import Settings
from athos.shared.exceptions import QuizNotFoundError, SectionNotFoundError, TransactionAbortedError
from athos.shared.models import AnalyticsEventType, QuestionType
from athos.shared.service_registry import build_services


class TestQuizService:
    """Tests for QuizService."""

    @pytest.fixture
    def service(self, services):
        return services.quizzes

    @pytest.mark.asyncio
    async def test_get_section_quiz(self, service, user_id):
        """Test looking up the quiz attached to a section."""
        quiz = await service.get_section_quiz(user_id, "module1", "origins")
        assert quiz.id == "quiz-origins"

    @pytest.mark.asyncio
    async def test_get_section_quiz_errors(self, service, user_id):
        """Test unknown sections and sections without a quiz."""
        with pytest.raises(SectionNotFoundError):
            await service.get_section_quiz(user_id, "module1", "nowhere")
        with pytest.raises(QuizNotFoundError):
            await service.get_section_quiz(user_id, "module2", "overview")

    @pytest.mark.asyncio
    async def test_unpublished_quiz_hidden(self, service, catalog, user_id):
        """Test that unpublished quizzes cannot be fetched or submitted."""
        await catalog.add_quiz(Quiz(
            id="quiz-hidden", module_id="module2", section_id="overview", title="Hidden",
            questions=[Question("q1", QuestionType.TRUE_FALSE, "?", "true")], is_published=False,
        ))
        with pytest.raises(QuizNotFoundError):
            await service.get_quiz(user_id, "quiz-hidden")
        with pytest.raises(QuizNotFoundError):
            await service.submit(user_id, "quiz-hidden", {"q1": True})

    @pytest.mark.asyncio
    async def test_submit_passing(self, service, user_id, all_correct_answers):
        """Test that a passing submission records a completed attempt."""
        result = await service.submit(user_id, "quiz-origins", all_correct_answers)

        assert result.evaluation.percentage_score == 100
        assert result.evaluation.passed is True
        assert result.attempts == 1
        assert result.best_score == 100
        assert result.section_completion == 50

        entry = await service.get_quiz_progress(user_id, "quiz-origins")
        assert entry.completed is True
        assert entry.answers == all_correct_answers

    @pytest.mark.asyncio
    async def test_best_score_kept(self, service, user_id, all_correct_answers):
        """Test that attempts grow while the best score and completion stick."""
        await service.submit(user_id, "quiz-origins", all_correct_answers)
        result = await service.submit(user_id, "quiz-origins", {"q1": "Aegean"})

        assert result.evaluation.percentage_score == 15
        assert result.attempts == 2
        assert result.best_score == 100
        entry = await service.get_quiz_progress(user_id, "quiz-origins")
        assert entry.completed is True
        assert entry.answers == {"q1": "Aegean"}

    @pytest.mark.asyncio
    async def test_failed_attempt_counts_toward_section(self, service, services, user_id):
        """Test that a failing score still contributes to the section."""
        result = await service.submit(user_id, "quiz-origins", {"q5": "Karyes"})

        assert result.evaluation.percentage_score == 31
        assert result.evaluation.passed is False
        assert result.section_completion == 16
        progress = await services.store.load_progress(user_id)
        assert progress.modules["module1"].sections["origins"].completion == 16

    @pytest.mark.asyncio
    async def test_submission_is_atomic(self, service, services, catalog, user_id, all_correct_answers):
        """Test that a failure after grading leaves no partial attempt."""
        with patch.object(catalog, "find_content", AsyncMock(side_effect=RuntimeError("db down"))):
            with pytest.raises(TransactionAbortedError) as exc_info:
                await service.submit(user_id, "quiz-origins", all_correct_answers)

        assert exc_info.value.retryable is True
        assert await services.store.load_progress(user_id) is None
        assert await service.get_quiz_progress(user_id, "quiz-origins") is None

    @pytest.mark.asyncio
    async def test_submit_moves_learning_path(self, service, services, user_id, all_correct_answers):
        """Test that submitting refreshes the path at the quiz's section."""
        await service.submit(user_id, "quiz-republic", {"q1": "Karyes"})

        path = await services.store.load_learning_path(user_id)
        assert path.current_section == "monastic-republic"

    @pytest.mark.asyncio
    async def test_tracks_view_and_submit(self, service, services, user_id, all_correct_answers):
        """Test analytics for viewing and submitting."""
        await service.get_quiz(user_id, "quiz-origins")
        await service.submit(user_id, "quiz-origins", all_correct_answers)
        await services.analytics.flush_all()

        event_types = [e.event_type for e in services.analytics.sink.events]
        assert AnalyticsEventType.QUIZ_VIEW in event_types
        assert AnalyticsEventType.QUIZ_SUBMIT in event_types


class TestPassingScore:
    """Tests for the pass mark applied to submissions."""

    @pytest.fixture
    async def weighted_quiz(self, catalog):
        quiz = Quiz(
            id="quiz-overview",
            module_id="module2",
            section_id="overview",
            title="Overview",
            questions=[
                Question("major", QuestionType.MULTIPLE_CHOICE, "Major?", "Karyes", points=65),
                Question("minor", QuestionType.MULTIPLE_CHOICE, "Minor?", "Dafni", points=35),
            ],
        )
        await catalog.add_quiz(quiz)
        return quiz

    @pytest.mark.asyncio
    async def test_sixty_five_percent_completes_quiz(self, services, weighted_quiz, user_id):
        """Test that 65% passes at the default mark and fills the quiz half."""
        result = await services.quizzes.submit(user_id, weighted_quiz.id, {"major": "Karyes"})

        assert services.quizzes.passing_score == 60
        assert result.evaluation.percentage_score == 65
        assert result.evaluation.passed is True
        assert result.section_completion == 50

        entry = await services.quizzes.get_quiz_progress(user_id, weighted_quiz.id)
        assert entry.score == 65
        assert entry.completed is True

    @pytest.mark.asyncio
    async def test_threshold_from_settings(self, flags, catalog, learners, weighted_quiz, user_id):
        """Test that the configured passing score reaches the quiz service."""
        services = build_services(
            settings=Settings(analytics_batch_size=100, catalog_path=None, passing_score=70),
            flags=flags,
            catalog=catalog,
            learners=learners,
        )

        result = await services.quizzes.submit(user_id, weighted_quiz.id, {"major": "Karyes"})

        assert services.quizzes.passing_score == 70
        assert result.evaluation.passed is False
        assert result.section_completion == 33
        entry = await services.quizzes.get_quiz_progress(user_id, weighted_quiz.id)
        assert entry.completed is False
