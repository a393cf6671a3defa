"""Progress repository for data access operations."""

from uuid import UUID

from sqlalchemy import select

from athos.modules.progress.models import LearningPathModel, ProgressModel
from athos.shared.repository import BaseRepository


class ProgressRepository(BaseRepository[ProgressModel]):
    """Repository for Progress documents."""

    @property
    def _model_class(self) -> type[ProgressModel]:
        return ProgressModel

    async def get_for_update(self, user_id: UUID) -> ProgressModel | None:
        """Load a learner's progress row and lock it until commit."""
        result = await self._session.execute(
            select(ProgressModel)
            .where(ProgressModel.user_id == user_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()


class LearningPathRepository(BaseRepository[LearningPathModel]):
    """Repository for LearningPath documents."""

    @property
    def _model_class(self) -> type[LearningPathModel]:
        return LearningPathModel

    async def get_for_update(self, user_id: UUID) -> LearningPathModel | None:
        """Load a learner's path row and lock it until commit."""
        result = await self._session.execute(
            select(LearningPathModel)
            .where(LearningPathModel.user_id == user_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()
