"""Content API routes."""

from fastapi import APIRouter

from athos.api.dependencies import CurrentUserId, Services
from athos.api.schemas.content import ContentItemResponse, SectionContentResponse
from athos.modules.catalog.interface import ContentOrder, ContentQuery
from athos.shared.exceptions import ContentNotFoundError, SectionNotFoundError
from athos.shared.models import AnalyticsEventType, LearningStyle

router = APIRouter()


@router.get(
    "/section/{module_id}/{section_id}",
    response_model=SectionContentResponse,
    summary="Get section content",
    description=(
        "Published content of a section filtered by the learner's style. "
        "Falls back to all styles when nothing matches."
    ),
)
async def get_section_content(
    module_id: str,
    section_id: str,
    user_id: CurrentUserId,
    services: Services,
) -> SectionContentResponse:
    if not services.curriculum.has_section(module_id, section_id):
        raise SectionNotFoundError(module_id, section_id)

    path = await services.store.load_learning_path(user_id) or await services.learning_paths.new_path(user_id)
    style = None if path.learning_style == LearningStyle.BALANCED else path.learning_style

    items = await services.catalog.find_content(ContentQuery(
        module_id=module_id,
        section_id=section_id,
        learning_style=style,
        order_by=ContentOrder.ORDER,
    ))
    if not items and style is not None:
        style = None
        items = await services.catalog.find_content(ContentQuery(
            module_id=module_id,
            section_id=section_id,
            order_by=ContentOrder.ORDER,
        ))

    return SectionContentResponse(
        module_id=module_id,
        section_id=section_id,
        learning_style=style,
        items=[ContentItemResponse.model_validate(item) for item in items],
    )


@router.get(
    "/{content_id}",
    response_model=ContentItemResponse,
    summary="Get content item",
    description="Get a published content item and count the view.",
)
async def get_content(
    content_id: str,
    user_id: CurrentUserId,
    services: Services,
) -> ContentItemResponse:
    item = await services.catalog.get_content(content_id)
    if item is None or not item.is_published:
        raise ContentNotFoundError(content_id)

    await services.catalog.increment_views(content_id)
    await services.analytics.track(user_id, AnalyticsEventType.CONTENT_VIEW, {
        "content_id": item.id,
        "module_id": item.module_id,
        "section_id": item.section_id,
    })
    return ContentItemResponse.model_validate(item)
