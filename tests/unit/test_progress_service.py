"""Unit tests for the progress service."""

from unittest.mock import AsyncMock, patch

import pytest

from athos.modules.catalog.interface import ContentItem
from athos.modules.progress.interface import Achievement, ActivityUpdate
from athos.shared.curriculum import SectionRef
from athos.shared.exceptions import (
    ActivityValidationError,
    ContentNotFoundError,
    QuizNotFoundError,
    SectionNotFoundError,
    TransactionAbortedError,
)
from athos.shared.models import ActivityType, AnalyticsEventType


def content_activity(content_id="o1", section_id="origins", module_id="module1", **kwargs) -> ActivityUpdate:
    return ActivityUpdate(
        module_id=module_id,
        section_id=section_id,
        activity_type=ActivityType.CONTENT,
        content_id=content_id,
        **kwargs,
    )


class TestActivityValidation:
    """Tests for activity validation."""

    @pytest.fixture
    def service(self, services):
        return services.progress

    @pytest.mark.asyncio
    async def test_collects_every_error(self, service, services, user_id):
        """Test that all invalid fields are reported together and nothing is written."""
        activity = ActivityUpdate(
            module_id=None,
            section_id="",
            activity_type="dance",
            progress=150,
            time_spent=-1,
        )

        with pytest.raises(ActivityValidationError) as exc_info:
            await service.update_progress(user_id, activity)

        fields = [error["field"] for error in exc_info.value.errors]
        assert fields == ["module_id", "section_id", "activity_type", "progress", "time_spent"]
        assert await services.store.load_progress(user_id) is None

    @pytest.mark.asyncio
    async def test_content_id_required(self, service, user_id):
        """Test that content activities need a content id."""
        activity = ActivityUpdate(module_id="module1", section_id="origins", activity_type="video")
        with pytest.raises(ActivityValidationError) as exc_info:
            await service.update_progress(user_id, activity)
        assert [error["field"] for error in exc_info.value.errors] == ["content_id"]

    @pytest.mark.asyncio
    async def test_quiz_id_required(self, service, user_id):
        """Test that quiz activities need a quiz id."""
        activity = ActivityUpdate(module_id="module1", section_id="origins", activity_type="quiz")
        with pytest.raises(ActivityValidationError) as exc_info:
            await service.update_progress(user_id, activity)
        assert [error["field"] for error in exc_info.value.errors] == ["quiz_id"]

    @pytest.mark.asyncio
    async def test_unknown_section(self, service, user_id):
        """Test that a section outside the curriculum is rejected."""
        with pytest.raises(SectionNotFoundError):
            await service.update_progress(user_id, content_activity(section_id="nowhere"))

    @pytest.mark.asyncio
    async def test_unknown_content(self, service, user_id):
        """Test that an unknown content id is rejected."""
        with pytest.raises(ContentNotFoundError):
            await service.update_progress(user_id, content_activity(content_id="missing"))

    @pytest.mark.asyncio
    async def test_unknown_quiz(self, service, user_id):
        """Test that an unknown quiz id is rejected."""
        activity = ActivityUpdate(
            module_id="module1", section_id="origins", activity_type="quiz", quiz_id="missing",
        )
        with pytest.raises(QuizNotFoundError):
            await service.update_progress(user_id, activity)

    @pytest.mark.asyncio
    async def test_content_from_other_section(self, service, services, user_id):
        """Test that content must belong to the reported section."""
        with pytest.raises(ActivityValidationError) as exc_info:
            await service.update_progress(user_id, content_activity("r1", "origins", completed=True))

        assert [error["field"] for error in exc_info.value.errors] == ["content_id"]
        assert "module1/monastic-republic" in exc_info.value.errors[0]["message"]
        assert await services.store.load_progress(user_id) is None

    @pytest.mark.asyncio
    async def test_quiz_from_other_section(self, service, user_id):
        """Test that a quiz must belong to the reported section."""
        activity = ActivityUpdate(
            module_id="module1", section_id="origins", activity_type="quiz", quiz_id="quiz-republic",
        )
        with pytest.raises(ActivityValidationError) as exc_info:
            await service.update_progress(user_id, activity)

        assert [error["field"] for error in exc_info.value.errors] == ["quiz_id"]


class TestProgressService:
    """Tests for recording progress."""

    @pytest.fixture
    def service(self, services):
        return services.progress

    @pytest.mark.asyncio
    async def test_default_progress_not_persisted(self, service, services, user_id):
        """Test that reading progress for a new learner writes nothing."""
        progress = await service.get_progress(user_id)

        assert progress.overall_completion == 0
        assert set(progress.modules) == {"module1", "module2", "module3"}
        assert await services.store.load_progress(user_id) is None

    @pytest.mark.asyncio
    async def test_content_progress_only_moves_forward(self, service, user_id):
        """Test that progress keeps its maximum while time accumulates."""
        await service.update_progress(user_id, content_activity(progress=50, time_spent=30))
        progress = await service.update_progress(user_id, content_activity(progress=30, time_spent=30))

        entry = progress.find_content("o1")
        assert entry.progress == 50
        assert entry.completed is False
        assert entry.time_spent == 60
        assert progress.total_time_spent == 60
        assert len(progress.content_progress) == 1

    @pytest.mark.asyncio
    async def test_completion_is_sticky(self, service, user_id):
        """Test that completed content stays completed."""
        await service.update_progress(user_id, content_activity(completed=True))
        progress = await service.update_progress(user_id, content_activity(progress=10))

        entry = progress.find_content("o1")
        assert entry.progress == 100
        assert entry.completed is True

    @pytest.mark.asyncio
    async def test_section_module_and_overall_recomputed(self, service, user_id):
        """Test completion rolls up after a completed item."""
        progress = await service.update_progress(user_id, content_activity(progress=100))

        module = progress.modules["module1"]
        assert module.sections["origins"].completion == 17
        assert module.completion == 17
        assert progress.overall_completion == 6
        assert module.sections["origins"].last_accessed is not None

    @pytest.mark.asyncio
    async def test_quiz_activity_registers_entry(self, service, user_id):
        """Test that a quiz activity creates an entry without scoring it."""
        activity = ActivityUpdate(
            module_id="module1", section_id="origins", activity_type="quiz", quiz_id="quiz-origins",
        )
        progress = await service.update_progress(user_id, activity)

        entry = progress.find_quiz("quiz-origins")
        assert entry.attempts == 0
        assert entry.score == 0
        assert progress.modules["module1"].sections["origins"].completion == 0

    @pytest.mark.asyncio
    async def test_refreshes_learning_path(self, service, services, user_id):
        """Test that a committed activity moves the learning path."""
        await service.update_progress(user_id, content_activity("r1", "monastic-republic", completed=True))

        path = await services.store.load_learning_path(user_id)
        assert (path.current_module, path.current_section) == ("module1", "monastic-republic")
        assert "r1" not in path.recommended_content

    @pytest.mark.asyncio
    async def test_path_refresh_failure_keeps_write(self, service, services, user_id):
        """Test that a failing path refresh does not undo the progress write."""
        with patch.object(services.learning_paths, "refresh", AsyncMock(side_effect=RuntimeError("boom"))):
            progress = await service.update_progress(user_id, content_activity(completed=True))

        assert progress.find_content("o1").completed is True
        stored = await services.store.load_progress(user_id)
        assert stored.find_content("o1").completed is True

    @pytest.mark.asyncio
    async def test_recommendation_query_failure_keeps_write(self, service, services, user_id):
        """Test that failing recommendation queries leave the progress write intact."""
        failing_catalog = AsyncMock()
        failing_catalog.find_content.side_effect = RuntimeError("catalog unavailable")
        failing_catalog.find_section_quiz.side_effect = RuntimeError("catalog unavailable")

        with patch.object(services.engine, "_catalog", failing_catalog):
            progress = await service.update_progress(user_id, content_activity(completed=True))

        assert progress.modules["module1"].sections["origins"].completion == 17
        stored = await services.store.load_progress(user_id)
        assert stored.find_content("o1").completed is True
        assert stored.modules["module1"].sections["origins"].completion == 17
        path = await services.store.load_learning_path(user_id)
        assert path.recommended_content == []
        assert failing_catalog.find_content.await_count >= 1

    @pytest.mark.asyncio
    async def test_failure_inside_transaction_rolls_back(self, service, services, catalog, user_id):
        """Test that an error while recomputing leaves nothing behind."""
        with patch.object(catalog, "find_content", AsyncMock(side_effect=RuntimeError("db down"))):
            with pytest.raises(TransactionAbortedError):
                await service.update_progress(user_id, content_activity(completed=True))

        assert await services.store.load_progress(user_id) is None

    @pytest.mark.asyncio
    async def test_module_achievement_awarded_once(self, service, services, catalog, user_id):
        """Test that finishing every section of a module earns its badge."""
        for section_id in services.curriculum.sections("module3"):
            await catalog.add_content(ContentItem(f"m3-{section_id}", "module3", section_id, section_id.title()))

        for section_id in services.curriculum.sections("module3"):
            await service.update_progress(
                user_id, content_activity(f"m3-{section_id}", section_id, "module3", completed=True),
            )
        progress = await service.update_progress(
            user_id, content_activity("m3-geography", "geography", "module3", completed=True),
        )

        assert progress.modules["module3"].completion == 100
        assert [a.id for a in progress.achievements] == ["complete-module3"]

    @pytest.mark.asyncio
    async def test_tracks_progress_event(self, service, services, user_id):
        """Test that an activity emits a progress event."""
        await service.update_progress(user_id, content_activity(progress=40))
        await services.analytics.flush_all()

        events = [e for e in services.analytics.sink.events if e.event_type == AnalyticsEventType.PROGRESS_UPDATE]
        assert len(events) == 1
        assert events[0].data["content_id"] == "o1"


class TestProgressReads:
    """Tests for achievements, reset, status and overview."""

    @pytest.fixture
    def service(self, services):
        return services.progress

    @pytest.mark.asyncio
    async def test_award_achievement_dedups(self, service, user_id):
        """Test that the same achievement id is only stored once."""
        badge = Achievement(id="first-steps", title="First Steps")

        stored, is_new = await service.award_achievement(user_id, badge)
        again, is_new_again = await service.award_achievement(
            user_id, Achievement(id="first-steps", title="Renamed"),
        )

        assert is_new is True
        assert is_new_again is False
        assert again.title == "First Steps"
        assert [a.id for a in await service.get_achievements(user_id)] == ["first-steps"]

    @pytest.mark.asyncio
    async def test_reset(self, service, services, user_id):
        """Test that reset restores defaults for progress and path."""
        await service.update_progress(user_id, content_activity("r1", "monastic-republic", completed=True))

        progress = await service.reset_progress(user_id)

        assert progress.content_progress == []
        assert progress.overall_completion == 0
        path = await services.store.load_learning_path(user_id)
        assert (path.current_module, path.current_section) == ("module1", "origins")

    @pytest.mark.asyncio
    async def test_module_progress(self, service, user_id):
        """Test the per-module view and unknown modules."""
        await service.update_progress(user_id, content_activity(progress=20))

        detail = await service.get_module_progress(user_id, "module1")
        assert [cp.content_id for cp in detail.content_progress] == ["o1"]
        with pytest.raises(SectionNotFoundError):
            await service.get_module_progress(user_id, "module9")

    @pytest.mark.asyncio
    async def test_overview_points_to_next_section(self, service, user_id):
        """Test that the overview follows the most recent section."""
        overview = await service.get_overview(user_id)
        assert overview.next_section == SectionRef("module1", "origins")

        await service.update_progress(user_id, content_activity(progress=20))
        overview = await service.get_overview(user_id)

        assert overview.status.current_section == "origins"
        assert overview.next_section == SectionRef("module1", "monastic-republic")
        assert [s.section_id for s in overview.status.in_progress_sections] == ["origins"]
