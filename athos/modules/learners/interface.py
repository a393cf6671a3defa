"""Learners Module - Learning preferences owned by the auth service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from athos.shared.models import Difficulty, LearningStyle


@dataclass
class LearnerPreferences:
    """A learner's stored learning style and level."""

    user_id: UUID
    learning_style: LearningStyle = LearningStyle.BALANCED
    difficulty: Difficulty = Difficulty.BEGINNER


class ILearnerDirectory(Protocol):
    """Interface for reading and updating learner preferences.

    The auth service owns learner accounts. This service only reads the two
    preference fields and writes them back when the learner changes them.
    """

    async def get_preferences(self, user_id: UUID) -> LearnerPreferences | None:
        """Get stored preferences, or None for an unknown learner."""
        ...

    async def update_preferences(
        self,
        user_id: UUID,
        learning_style: LearningStyle | None = None,
        difficulty: Difficulty | None = None,
    ) -> LearnerPreferences:
        """Change one or both preferences and return the stored values."""
        ...
