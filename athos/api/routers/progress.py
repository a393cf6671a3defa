"""Progress API routes."""

from fastapi import APIRouter, status

from athos.api.dependencies import CurrentUserId, ProgressServiceDep
from athos.api.schemas.progress import (
    AchievementResponse,
    ActivityUpdateRequest,
    AwardAchievementRequest,
    AwardAchievementResponse,
    ModuleProgressDetailResponse,
    ProgressOverviewResponse,
    ProgressResponse,
    ProgressStatusResponse,
)
from athos.modules.progress.interface import Achievement, ActivityUpdate

router = APIRouter()


@router.get(
    "",
    response_model=ProgressResponse,
    summary="Get progress",
    description="Get the learner's progress; a learner with no activity gets a fresh default.",
)
async def get_progress(
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> ProgressResponse:
    progress = await progress_service.get_progress(user_id)
    return ProgressResponse.model_validate(progress)


@router.post(
    "",
    response_model=ProgressResponse,
    summary="Record activity",
    description="Record content or quiz activity and recompute completion.",
)
async def update_progress(
    request: ActivityUpdateRequest,
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> ProgressResponse:
    """Record a learner activity.

    Args:
        request: Activity details
        user_id: Authenticated learner
        progress_service: Progress service instance

    Returns:
        The committed progress snapshot
    """
    progress = await progress_service.update_progress(
        user_id,
        ActivityUpdate(**request.model_dump()),
    )
    return ProgressResponse.model_validate(progress)


@router.get(
    "/modules/{module_id}",
    response_model=ModuleProgressDetailResponse,
    summary="Get module progress",
)
async def get_module_progress(
    module_id: str,
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> ModuleProgressDetailResponse:
    detail = await progress_service.get_module_progress(user_id, module_id)
    return ModuleProgressDetailResponse.model_validate(detail)


@router.get(
    "/achievements",
    response_model=list[AchievementResponse],
    summary="List achievements",
)
async def get_achievements(
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> list[AchievementResponse]:
    achievements = await progress_service.get_achievements(user_id)
    return [AchievementResponse.model_validate(a) for a in achievements]


@router.post(
    "/achievements",
    response_model=AwardAchievementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Award achievement",
    description="Award an achievement; awarding one the learner already has is a no-op.",
)
async def award_achievement(
    request: AwardAchievementRequest,
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> AwardAchievementResponse:
    achievement, is_new = await progress_service.award_achievement(
        user_id,
        Achievement(
            id=request.id,
            title=request.title,
            description=request.description,
            module_id=request.module_id,
        ),
    )
    return AwardAchievementResponse(
        achievement=AchievementResponse.model_validate(achievement),
        is_new=is_new,
    )


@router.post(
    "/reset",
    response_model=ProgressResponse,
    summary="Reset progress",
    description="Recreate progress and learning path as fresh defaults.",
)
async def reset_progress(
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> ProgressResponse:
    progress = await progress_service.reset_progress(user_id)
    return ProgressResponse.model_validate(progress)


@router.get(
    "/status",
    response_model=ProgressStatusResponse,
    summary="Get progress status",
)
async def get_status(
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> ProgressStatusResponse:
    return ProgressStatusResponse.model_validate(await progress_service.get_status(user_id))


@router.get(
    "/overview",
    response_model=ProgressOverviewResponse,
    summary="Get progress overview",
)
async def get_overview(
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> ProgressOverviewResponse:
    return ProgressOverviewResponse.model_validate(await progress_service.get_overview(user_id))
