"""Learning path API routes."""

from fastapi import APIRouter, Query

from athos.api.dependencies import CurrentUserId, LearningPathDep
from athos.api.schemas.common import CountResponse
from athos.api.schemas.content import ContentItemResponse
from athos.api.schemas.learning_path import (
    AdaptiveSuggestionResponse,
    LearningEvaluationResponse,
    LearningPathResponse,
    MilestoneResponse,
    NextStepsResponse,
    PruneSuggestionsRequest,
    RecommendationsResponse,
    StyleWeightsResponse,
    SuggestionResponse,
    UpdateLearningPathRequest,
    UpdatePreferencesRequest,
)

router = APIRouter()


@router.get(
    "",
    response_model=LearningPathResponse,
    summary="Get learning path",
    description="Get the learner's path, creating a default one on first access.",
)
async def get_learning_path(
    user_id: CurrentUserId,
    tracker: LearningPathDep,
) -> LearningPathResponse:
    return LearningPathResponse.model_validate(await tracker.get_learning_path(user_id))


@router.put(
    "",
    response_model=LearningPathResponse,
    summary="Update learning path",
    description="Move the current pointer and/or change preferences, then regenerate recommendations.",
)
async def update_learning_path(
    request: UpdateLearningPathRequest,
    user_id: CurrentUserId,
    tracker: LearningPathDep,
) -> LearningPathResponse:
    path = await tracker.update_path(
        user_id,
        current_module=request.current_module,
        current_section=request.current_section,
        learning_style=request.learning_style,
        difficulty=request.difficulty,
    )
    return LearningPathResponse.model_validate(path)


@router.put(
    "/preferences",
    response_model=LearningPathResponse,
    summary="Update preferences",
)
async def update_preferences(
    request: UpdatePreferencesRequest,
    user_id: CurrentUserId,
    tracker: LearningPathDep,
) -> LearningPathResponse:
    path = await tracker.update_preferences(
        user_id,
        learning_style=request.learning_style,
        difficulty=request.difficulty,
    )
    return LearningPathResponse.model_validate(path)


@router.get(
    "/recommendations",
    response_model=RecommendationsResponse,
    summary="Get recommendations",
    description="Run the recommendation engine with optional overrides. Nothing is saved.",
)
async def get_recommendations(
    user_id: CurrentUserId,
    tracker: LearningPathDep,
    module_id: str | None = Query(default=None),
    section_id: str | None = Query(default=None),
    learning_style: str | None = Query(default=None),
    difficulty: str | None = Query(default=None),
) -> RecommendationsResponse:
    resolved = await tracker.get_recommendations(
        user_id,
        module_id=module_id,
        section_id=section_id,
        learning_style=learning_style,
        difficulty=difficulty,
    )
    return RecommendationsResponse(
        content=[ContentItemResponse.model_validate(item) for item in resolved.content],
        suggestions=[
            SuggestionResponse(
                content_id=s.content_id,
                reason=s.reason,
                priority=s.priority,
                content=(
                    ContentItemResponse.model_validate(resolved.content_by_id[s.content_id])
                    if s.content_id in resolved.content_by_id else None
                ),
            )
            for s in resolved.suggestions
        ],
    )


@router.get(
    "/next-steps",
    response_model=NextStepsResponse,
    summary="Get next steps",
    description="Summarize a section (the current one by default) and what follows it.",
)
async def get_next_steps(
    user_id: CurrentUserId,
    tracker: LearningPathDep,
    module_id: str | None = Query(default=None),
    section_id: str | None = Query(default=None),
) -> NextStepsResponse:
    return NextStepsResponse.model_validate(await tracker.next_steps(user_id, module_id, section_id))


@router.get(
    "/evaluation",
    response_model=LearningEvaluationResponse,
    summary="Evaluate section performance",
)
async def get_evaluation(
    user_id: CurrentUserId,
    tracker: LearningPathDep,
    module_id: str | None = Query(default=None),
    section_id: str | None = Query(default=None),
) -> LearningEvaluationResponse:
    return LearningEvaluationResponse.model_validate(await tracker.evaluate(user_id, module_id, section_id))


@router.get(
    "/style-weights",
    response_model=StyleWeightsResponse,
    summary="Get learning style weights",
)
async def get_style_weights(
    user_id: CurrentUserId,
    tracker: LearningPathDep,
) -> StyleWeightsResponse:
    weights = await tracker.style_weights(user_id)
    return StyleWeightsResponse(weights=weights.weights, dominant=weights.dominant)


@router.get(
    "/milestones",
    response_model=list[MilestoneResponse],
    summary="Get milestones",
)
async def get_milestones(
    user_id: CurrentUserId,
    tracker: LearningPathDep,
) -> list[MilestoneResponse]:
    return [MilestoneResponse.model_validate(m) for m in await tracker.milestones(user_id)]


@router.post(
    "/suggestions/prune",
    response_model=CountResponse,
    summary="Prune old suggestions",
    description="Remove suggestions older than the age limit that were never clicked or completed.",
)
async def prune_suggestions(
    request: PruneSuggestionsRequest,
    user_id: CurrentUserId,
    tracker: LearningPathDep,
) -> CountResponse:
    return CountResponse(count=await tracker.prune_suggestions(user_id, request.max_days))


@router.post(
    "/suggestions/{suggestion_id}/click",
    response_model=AdaptiveSuggestionResponse,
    summary="Record suggestion click",
)
async def click_suggestion(
    suggestion_id: str,
    user_id: CurrentUserId,
    tracker: LearningPathDep,
) -> AdaptiveSuggestionResponse:
    suggestion = await tracker.mark_suggestion_clicked(user_id, suggestion_id)
    return AdaptiveSuggestionResponse.model_validate(suggestion)


@router.post(
    "/suggestions/{suggestion_id}/complete",
    response_model=AdaptiveSuggestionResponse,
    summary="Record suggestion completion",
)
async def complete_suggestion(
    suggestion_id: str,
    user_id: CurrentUserId,
    tracker: LearningPathDep,
) -> AdaptiveSuggestionResponse:
    suggestion = await tracker.mark_suggestion_completed(user_id, suggestion_id)
    return AdaptiveSuggestionResponse.model_validate(suggestion)
