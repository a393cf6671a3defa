"""Unit tests for completion calculation."""

from datetime import datetime, timezone

import pytest

from athos.modules.progress.completion import (
    content_completion,
    module_completion,
    progress_status,
    quiz_completion,
    recalculate,
    recalculate_section,
)
from athos.modules.progress.interface import (
    ContentProgress,
    ModuleProgress,
    Progress,
    QuizProgress,
    SectionProgress,
)


def _complete(progress: Progress, *content_ids: str) -> None:
    for content_id in content_ids:
        progress.content_progress.append(ContentProgress(
            content_id=content_id, module_id="module1", section_id="origins", progress=100, completed=True,
        ))


class TestSectionCompletion:
    """Tests for content and quiz halves of a section."""

    @pytest.fixture
    def progress(self, user_id):
        return Progress.new(user_id, ["module1", "module2", "module3"])

    def test_one_of_three_rounds_half_up(self, progress, origins_content):
        """Test that 1 of 3 items gives 17 on the content half."""
        _complete(progress, "o1")
        assert content_completion(progress, origins_content) == 17

    def test_empty_section_content(self, progress):
        """Test that a section without content contributes 0."""
        assert content_completion(progress, []) == 0

    def test_section_without_quiz_reaches_100(self, progress, origins_content):
        """Test that the quiz half mirrors content when there is no quiz."""
        _complete(progress, "o1", "o2", "o3")
        assert recalculate_section(progress, "module1", "origins", origins_content, None) == 100

    def test_quiz_half_from_score(self, progress, origins_quiz):
        """Test that an unpassed quiz contributes half its score."""
        progress.quiz_progress.append(QuizProgress(
            quiz_id=origins_quiz.id, module_id="module1", section_id="origins", score=75, attempts=1,
        ))
        assert quiz_completion(progress, origins_quiz, 0) == 38

    def test_passed_quiz_gives_full_half(self, progress, origins_quiz, origins_content):
        """Test that a completed quiz contributes 50."""
        progress.quiz_progress.append(QuizProgress(
            quiz_id=origins_quiz.id, module_id="module1", section_id="origins",
            score=60, attempts=1, completed=True,
        ))
        _complete(progress, "o1", "o2", "o3")
        assert recalculate_section(progress, "module1", "origins", origins_content, origins_quiz) == 100

    def test_unattempted_quiz(self, progress, origins_quiz, origins_content):
        """Test that a section with content done but no quiz attempt is at 50."""
        _complete(progress, "o1", "o2", "o3")
        assert recalculate_section(progress, "module1", "origins", origins_content, origins_quiz) == 50

    def test_recalculate_section_rolls_up_to_module(self, progress, origins_content):
        """Test that the module becomes the mean of its touched sections."""
        progress.modules["module1"].sections["monastic-republic"] = SectionProgress(completion=0)
        _complete(progress, "o1", "o2", "o3")
        recalculate_section(progress, "module1", "origins", origins_content, None)
        assert progress.modules["module1"].completion == 50


class TestAggregateCompletion:
    """Tests for module and overall completion."""

    def test_module_without_sections(self):
        """Test that a module with no sections is at 0."""
        assert module_completion(ModuleProgress()) == 0

    def test_recalculate_is_idempotent(self, user_id):
        """Test that recalculating twice gives the same numbers."""
        progress = Progress.new(user_id, ["module1", "module2", "module3"])
        progress.modules["module1"].sections["origins"] = SectionProgress(completion=100)
        progress.modules["module1"].sections["monastic-republic"] = SectionProgress(completion=25)
        progress.content_progress.append(ContentProgress("o1", "module1", "origins", time_spent=40))
        progress.content_progress.append(ContentProgress("o2", "module1", "origins", time_spent=20))

        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        first = recalculate(progress, now)
        snapshot = (first.modules["module1"].completion, first.overall_completion, first.total_time_spent)
        second = recalculate(progress, now)

        assert snapshot == (63, 21, 60)
        assert (second.modules["module1"].completion, second.overall_completion, second.total_time_spent) == snapshot
        assert second.last_updated == now

    def test_completion_bounds(self, user_id, origins_content):
        """Test that every completion stays within 0-100."""
        progress = Progress.new(user_id, ["module1"])
        _complete(progress, "o1", "o2", "o3", "o1")
        value = recalculate_section(progress, "module1", "origins", origins_content, None)
        assert 0 <= value <= 100


class TestProgressStatus:
    """Tests for progress_status."""

    def test_groups_sections(self, user_id, curriculum):
        """Test that sections are grouped and the latest one is current."""
        progress = Progress.new(user_id, curriculum.modules)
        early = datetime(2024, 1, 1, tzinfo=timezone.utc)
        late = datetime(2024, 2, 1, tzinfo=timezone.utc)
        progress.modules["module1"].sections["origins"] = SectionProgress(completion=100, last_accessed=early)
        progress.modules["module1"].sections["monastic-republic"] = SectionProgress(completion=40, last_accessed=late)

        status = progress_status(progress, curriculum)

        assert [s.section_id for s in status.completed_sections] == ["origins"]
        assert [s.section_id for s in status.in_progress_sections] == ["monastic-republic"]
        assert len(status.not_started_sections) == len(curriculum.all_sections()) - 2
        assert status.current_module == "module1"
        assert status.current_section == "monastic-republic"
        assert set(status.module_completion) == set(curriculum.modules)
