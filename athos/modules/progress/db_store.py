"""PostgreSQL-backed learner state store."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import UUID

from athos.modules.learning_path.interface import LearningPath
from athos.modules.progress.interface import Progress
from athos.modules.progress.models import LearningPathModel, ProgressModel
from athos.modules.progress.repository import LearningPathRepository, ProgressRepository
from athos.modules.progress.store import LearnerState
from athos.shared.database import get_db_session

logger = logging.getLogger(__name__)


class DatabaseLearnerStateStore:
    """Learner state stored as JSONB documents.

    A transaction locks the learner's rows with SELECT ... FOR UPDATE and
    writes both documents back in the same database transaction.
    """

    async def load_progress(self, user_id: UUID) -> Progress | None:
        async with get_db_session() as db:
            row = await ProgressRepository(db).get_by_id(user_id)
            return Progress.from_dict(row.document) if row else None

    async def load_learning_path(self, user_id: UUID) -> LearningPath | None:
        async with get_db_session() as db:
            row = await LearningPathRepository(db).get_by_id(user_id)
            return LearningPath.from_dict(row.document) if row else None

    @asynccontextmanager
    async def transaction(self, user_id: UUID) -> AsyncGenerator[LearnerState, None]:
        async with get_db_session() as db:
            progress_repo = ProgressRepository(db)
            path_repo = LearningPathRepository(db)

            progress_row = await progress_repo.get_for_update(user_id)
            path_row = await path_repo.get_for_update(user_id)

            state = LearnerState(
                user_id=user_id,
                progress=Progress.from_dict(progress_row.document) if progress_row else None,
                learning_path=LearningPath.from_dict(path_row.document) if path_row else None,
            )
            yield state

            if state.progress is not None:
                document = state.progress.to_dict()
                if progress_row is None:
                    await progress_repo.add(ProgressModel(
                        user_id=user_id,
                        document=document,
                        overall_completion=state.progress.overall_completion,
                    ))
                else:
                    progress_row.document = document
                    progress_row.overall_completion = state.progress.overall_completion

            if state.learning_path is not None:
                path = state.learning_path
                if path_row is None:
                    await path_repo.add(LearningPathModel(
                        user_id=user_id,
                        document=path.to_dict(),
                        current_module=path.current_module,
                        current_section=path.current_section,
                    ))
                else:
                    path_row.document = path.to_dict()
                    path_row.current_module = path.current_module
                    path_row.current_section = path.current_section

            logger.debug(f"Flushed learner state for {user_id}")
