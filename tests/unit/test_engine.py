"""Unit tests for the recommendation engine."""

from unittest.mock import AsyncMock

import pytest

from athos.modules.progress.interface import ContentProgress, Progress, QuizProgress
from athos.modules.recommendation.engine import RecommendationEngine
from athos.shared.models import Difficulty, LearningStyle


def _pairs(result):
    return [(s.content_id, s.priority) for s in result.adaptive_suggestions]


class TestRecommendationEngine:
    """Tests for RecommendationEngine.generate."""

    @pytest.fixture
    def engine(self, catalog, curriculum):
        return RecommendationEngine(catalog, curriculum, max_recommendations=10)

    @pytest.mark.asyncio
    async def test_balanced_new_learner(self, engine, user_id):
        """Test the pass order for a balanced beginner with no progress."""
        result = await engine.generate(
            user_id, None, LearningStyle.BALANCED, Difficulty.BEGINNER, "module1", "origins",
        )

        assert result.recommended_content == ["o1", "o2", "o3", "r1", "r2", "a1", "a2"]
        assert _pairs(result) == [("o1", 5), ("o2", 5), ("o1", 4), ("r1", 3), ("a1", 1)]
        assert result.adaptive_suggestions[2].reason == "Take the quiz for this section"
        assert result.adaptive_suggestions[3].reason == "Continue to next section: monastic-republic"

    @pytest.mark.asyncio
    async def test_visual_style_filters_every_pass(self, engine, user_id):
        """Test that a non-balanced style filters all passes and adds the style pass."""
        result = await engine.generate(
            user_id, None, LearningStyle.VISUAL, Difficulty.BEGINNER, "module1", "origins",
        )

        assert result.recommended_content == ["o2", "o3", "r2", "a2", "a1"]
        assert _pairs(result) == [("o2", 5), ("o3", 5), ("o2", 4), ("r2", 3), ("a2", 2)]
        assert result.adaptive_suggestions[4].reason == "Matches your visual learning style"

    @pytest.mark.asyncio
    async def test_overlapping_passes_deduplicated(self, engine, user_id):
        """Test that an item surfaced by two passes is recommended once."""
        result = await engine.generate(
            user_id, None, LearningStyle.VISUAL, Difficulty.BEGINNER, "module1", "religious-life",
        )

        assert result.recommended_content == ["a1", "a2", "o2", "r2"]
        assert len(result.recommended_content) == len(set(result.recommended_content))
        assert result.recommended_content.count("a1") == 1
        assert _pairs(result) == [("a1", 3), ("a2", 2), ("o2", 1)]

    @pytest.mark.asyncio
    async def test_unpublished_and_other_difficulty_excluded(self, engine, user_id):
        """Test that drafts and other difficulty levels never appear."""
        result = await engine.generate(
            user_id, None, LearningStyle.BALANCED, Difficulty.BEGINNER, "module1", "origins",
        )
        assert "draft" not in result.recommended_content
        assert "adv1" not in result.recommended_content

    @pytest.mark.asyncio
    async def test_completed_content_skipped(self, engine, user_id):
        """Test that completed items leave the current section pass."""
        progress = Progress(user_id=user_id)
        progress.content_progress.append(ContentProgress(
            "o1", "module1", "origins", progress=100, completed=True,
        ))

        result = await engine.generate(
            user_id, progress, LearningStyle.BALANCED, Difficulty.BEGINNER, "module1", "origins",
        )

        assert result.recommended_content[:2] == ["o2", "o3"]
        assert _pairs(result)[:2] == [("o2", 5), ("o3", 5)]

    @pytest.mark.asyncio
    async def test_passed_quiz_not_suggested(self, engine, user_id):
        """Test that a completed quiz yields no quiz suggestion."""
        progress = Progress(user_id=user_id)
        progress.quiz_progress.append(QuizProgress(
            "quiz-origins", "module1", "origins", score=80, attempts=1, completed=True,
        ))

        result = await engine.generate(
            user_id, progress, LearningStyle.BALANCED, Difficulty.BEGINNER, "module1", "origins",
        )
        assert all(s.priority != 4 for s in result.adaptive_suggestions)

    @pytest.mark.asyncio
    async def test_section_without_quiz(self, engine, user_id):
        """Test that sections with no quiz skip the quiz pass."""
        result = await engine.generate(
            user_id, None, LearningStyle.BALANCED, Difficulty.BEGINNER, "module2", "overview",
        )
        assert all(s.priority != 4 for s in result.adaptive_suggestions)
        assert result.recommended_content[:2] == ["a1", "a2"]

    @pytest.mark.asyncio
    async def test_truncates_to_maximum(self, catalog, curriculum, user_id):
        """Test that the deduplicated list is cut to max_recommendations."""
        engine = RecommendationEngine(catalog, curriculum, max_recommendations=3)
        result = await engine.generate(
            user_id, None, LearningStyle.BALANCED, Difficulty.BEGINNER, "module1", "origins",
        )
        assert result.recommended_content == ["o1", "o2", "o3"]
        assert len(result.adaptive_suggestions) == 5

    @pytest.mark.asyncio
    async def test_deterministic(self, engine, user_id):
        """Test that the same inputs give the same output."""
        args = (user_id, None, LearningStyle.VISUAL, Difficulty.BEGINNER, "module1", "origins")
        first = await engine.generate(*args)
        second = await engine.generate(*args)
        assert first == second

    @pytest.mark.asyncio
    async def test_catalog_failure_returns_empty(self, curriculum, user_id):
        """Test that a failing catalog yields an empty result instead of raising."""
        catalog = AsyncMock()
        catalog.find_content.side_effect = RuntimeError("catalog offline")
        engine = RecommendationEngine(catalog, curriculum)

        result = await engine.generate(
            user_id, None, LearningStyle.BALANCED, Difficulty.BEGINNER, "module1", "origins",
        )

        assert result.recommended_content == []
        assert result.adaptive_suggestions == []
