"""Database-backed learner directory."""

import logging
from uuid import UUID

from athos.modules.learners.interface import LearnerPreferences
from athos.modules.learners.models import LearnerPreferencesModel
from athos.shared.database import get_db_session
from athos.shared.exceptions import UserNotFoundError
from athos.shared.models import Difficulty, LearningStyle

logger = logging.getLogger(__name__)


def _to_entity(row: LearnerPreferencesModel) -> LearnerPreferences:
    return LearnerPreferences(
        user_id=row.user_id,
        learning_style=LearningStyle(row.learning_style),
        difficulty=Difficulty(row.difficulty),
    )


class DatabaseLearnerDirectory:
    """Reads and updates the learner_preferences table."""

    async def get_preferences(self, user_id: UUID) -> LearnerPreferences | None:
        async with get_db_session() as db:
            row = await db.get(LearnerPreferencesModel, user_id)
            return _to_entity(row) if row else None

    async def update_preferences(
        self,
        user_id: UUID,
        learning_style: LearningStyle | None = None,
        difficulty: Difficulty | None = None,
    ) -> LearnerPreferences:
        """Update stored preferences.

        Raises:
            UserNotFoundError: If the auth service has no row for the learner
        """
        async with get_db_session() as db:
            row = await db.get(LearnerPreferencesModel, user_id, with_for_update=True)
            if row is None:
                raise UserNotFoundError(user_id)
            if learning_style is not None:
                row.learning_style = learning_style.value
            if difficulty is not None:
                row.difficulty = difficulty.value
            logger.info(f"Updated preferences for {user_id}")
            return _to_entity(row)
