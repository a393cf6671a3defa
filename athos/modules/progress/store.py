"""Per-learner state store with a unit-of-work transaction.

A learner's Progress and LearningPath are read and written together inside
``transaction(user_id)``. The block sees the latest committed state, works
on private copies, and its changes become visible only if it exits
cleanly. Concurrent transactions for the same learner are serialized.
"""

import asyncio
import copy
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncContextManager, AsyncGenerator, Protocol
from uuid import UUID

from athos.modules.learning_path.interface import LearningPath
from athos.modules.progress.interface import Progress

logger = logging.getLogger(__name__)


@dataclass
class LearnerState:
    """Mutable view of one learner's documents inside a transaction.

    Either document is None when it has never been created. Assign a new
    object to create or replace it.
    """

    user_id: UUID
    progress: Progress | None = None
    learning_path: LearningPath | None = None


class ILearnerStateStore(Protocol):
    """Interface for learner state persistence."""

    async def load_progress(self, user_id: UUID) -> Progress | None:
        """Read the committed progress outside any transaction."""
        ...

    async def load_learning_path(self, user_id: UUID) -> LearningPath | None:
        """Read the committed learning path outside any transaction."""
        ...

    def transaction(self, user_id: UUID) -> AsyncContextManager[LearnerState]:
        """Open an all-or-nothing unit of work for one learner.

        Usage:
            async with store.transaction(user_id) as state:
                state.progress.touch_section(...)

        Any exception raised inside the block discards every change.
        """
        ...


class InMemoryLearnerStateStore:
    """Learner state kept in process memory.

    Each learner gets an asyncio.Lock; transactions work on deep copies and
    swap them in on success.
    """

    def __init__(self) -> None:
        self._progress: dict[UUID, Progress] = {}
        self._paths: dict[UUID, LearningPath] = {}
        self._locks: defaultdict[UUID, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def load_progress(self, user_id: UUID) -> Progress | None:
        progress = self._progress.get(user_id)
        return copy.deepcopy(progress) if progress else None

    async def load_learning_path(self, user_id: UUID) -> LearningPath | None:
        path = self._paths.get(user_id)
        return copy.deepcopy(path) if path else None

    @asynccontextmanager
    async def transaction(self, user_id: UUID) -> AsyncGenerator[LearnerState, None]:
        async with self._locks[user_id]:
            state = LearnerState(
                user_id=user_id,
                progress=copy.deepcopy(self._progress.get(user_id)),
                learning_path=copy.deepcopy(self._paths.get(user_id)),
            )
            yield state

            if state.progress is not None:
                self._progress[user_id] = state.progress
            if state.learning_path is not None:
                self._paths[user_id] = state.learning_path
            logger.debug(f"Committed learner state for {user_id}")
