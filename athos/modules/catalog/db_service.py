"""Database-backed catalog implementation."""

import logging

from athos.modules.catalog.interface import ContentItem, ContentQuery, Quiz
from athos.modules.catalog.models import ContentItemModel, QuizModel
from athos.modules.catalog.repository import ContentItemRepository, QuizRepository
from athos.shared.database import get_db_session

logger = logging.getLogger(__name__)


class DatabaseCatalog:
    """Catalog that reads content and quizzes from PostgreSQL."""

    async def find_content(self, query: ContentQuery) -> list[ContentItem]:
        async with get_db_session() as db:
            rows = await ContentItemRepository(db).find(query)
            return [row.to_entity() for row in rows]

    async def get_content(self, content_id: str) -> ContentItem | None:
        async with get_db_session() as db:
            row = await ContentItemRepository(db).get_by_id(content_id)
            return row.to_entity() if row else None

    async def increment_views(self, content_id: str) -> None:
        async with get_db_session() as db:
            await ContentItemRepository(db).increment_views(content_id)

    async def get_quiz(self, quiz_id: str) -> Quiz | None:
        async with get_db_session() as db:
            row = await QuizRepository(db).get_by_id(quiz_id)
            return row.to_entity() if row else None

    async def find_section_quiz(self, module_id: str, section_id: str) -> Quiz | None:
        async with get_db_session() as db:
            row = await QuizRepository(db).get_published_for_section(module_id, section_id)
            return row.to_entity() if row else None

    async def add_content(self, item: ContentItem) -> None:
        async with get_db_session() as db:
            await ContentItemRepository(db).merge(ContentItemModel.from_entity(item))
        logger.debug(f"Upserted content item {item.id}")

    async def add_quiz(self, quiz: Quiz) -> None:
        async with get_db_session() as db:
            await QuizRepository(db).merge(QuizModel.from_entity(quiz))
        logger.debug(f"Upserted quiz {quiz.id}")
