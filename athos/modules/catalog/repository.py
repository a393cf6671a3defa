"""Catalog repository for data access operations."""

from typing import Sequence

from sqlalchemy import asc, desc, select, update

from athos.modules.catalog.interface import ContentOrder, ContentQuery
from athos.modules.catalog.models import ContentItemModel, QuizModel
from athos.shared.repository import BaseRepository


class ContentItemRepository(BaseRepository[ContentItemModel]):
    """Repository for ContentItem entities."""

    @property
    def _model_class(self) -> type[ContentItemModel]:
        return ContentItemModel

    async def find(self, query: ContentQuery) -> Sequence[ContentItemModel]:
        """Run a catalog query.

        Args:
            query: Filters, ordering and limit

        Returns:
            Matching rows, ties broken by id
        """
        stmt = select(ContentItemModel)

        if query.published_only:
            stmt = stmt.where(ContentItemModel.is_published.is_(True))
        if query.module_id is not None:
            stmt = stmt.where(ContentItemModel.module_id == query.module_id)
        if query.section_id is not None:
            stmt = stmt.where(ContentItemModel.section_id == query.section_id)
        if query.learning_style is not None:
            stmt = stmt.where(ContentItemModel.learning_styles.contains([query.learning_style.value]))
        if query.difficulty is not None:
            stmt = stmt.where(ContentItemModel.difficulty == query.difficulty.value)
        if query.exclude_module_id is not None:
            stmt = stmt.where(ContentItemModel.module_id != query.exclude_module_id)
        if query.exclude_ids:
            stmt = stmt.where(ContentItemModel.id.not_in(sorted(query.exclude_ids)))

        if query.order_by == ContentOrder.RECENT:
            stmt = stmt.order_by(desc(ContentItemModel.created_at), asc(ContentItemModel.id))
        elif query.order_by == ContentOrder.VIEWS:
            stmt = stmt.order_by(desc(ContentItemModel.views), asc(ContentItemModel.id))
        else:
            stmt = stmt.order_by(asc(ContentItemModel.sort_order), asc(ContentItemModel.id))

        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def increment_views(self, content_id: str) -> None:
        await self._session.execute(
            update(ContentItemModel)
            .where(ContentItemModel.id == content_id)
            .values(views=ContentItemModel.views + 1)
        )


class QuizRepository(BaseRepository[QuizModel]):
    """Repository for Quiz entities."""

    @property
    def _model_class(self) -> type[QuizModel]:
        return QuizModel

    async def get_published_for_section(
        self,
        module_id: str,
        section_id: str,
    ) -> QuizModel | None:
        """Get the first published quiz of a section by id."""
        result = await self._session.execute(
            select(QuizModel)
            .where(
                QuizModel.module_id == module_id,
                QuizModel.section_id == section_id,
                QuizModel.is_published.is_(True),
            )
            .order_by(asc(QuizModel.id))
            .limit(1)
        )
        return result.scalar_one_or_none()
