"""In-process learner directory."""

import logging
from uuid import UUID

from athos.modules.learners.interface import LearnerPreferences
from athos.shared.models import Difficulty, LearningStyle

logger = logging.getLogger(__name__)


class InMemoryLearnerDirectory:
    """Learner preferences kept in a dictionary.

    Unknown learners are created with default preferences on first update.
    """

    def __init__(self, preferences: list[LearnerPreferences] | None = None) -> None:
        self._preferences: dict[UUID, LearnerPreferences] = {
            prefs.user_id: prefs for prefs in preferences or []
        }

    async def get_preferences(self, user_id: UUID) -> LearnerPreferences | None:
        prefs = self._preferences.get(user_id)
        if prefs is None:
            return None
        return LearnerPreferences(prefs.user_id, prefs.learning_style, prefs.difficulty)

    async def update_preferences(
        self,
        user_id: UUID,
        learning_style: LearningStyle | None = None,
        difficulty: Difficulty | None = None,
    ) -> LearnerPreferences:
        prefs = self._preferences.setdefault(user_id, LearnerPreferences(user_id))
        if learning_style is not None:
            prefs.learning_style = learning_style
        if difficulty is not None:
            prefs.difficulty = difficulty
        logger.info(
            f"Updated preferences for {user_id}",
            extra={"learning_style": prefs.learning_style.value, "difficulty": prefs.difficulty.value},
        )
        return LearnerPreferences(prefs.user_id, prefs.learning_style, prefs.difficulty)
