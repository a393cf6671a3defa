"""Quiz API routes."""

from fastapi import APIRouter

from athos.api.dependencies import CurrentUserId, QuizServiceDep
from athos.api.schemas.progress import QuizProgressResponse
from athos.api.schemas.quizzes import (
    QuestionFeedbackResponse,
    QuizResponse,
    QuizSubmissionResponse,
    SubmitQuizRequest,
)
from athos.modules.catalog.interface import Quiz

router = APIRouter()


def _quiz_response(quiz: Quiz, passing_score: int) -> QuizResponse:
    return QuizResponse.model_validate({**quiz.to_dict(include_answers=False), "passing_score": passing_score})


@router.get(
    "/section/{module_id}/{section_id}",
    response_model=QuizResponse,
    summary="Get section quiz",
    description="Get the published quiz of a section, without answers.",
)
async def get_section_quiz(
    module_id: str,
    section_id: str,
    user_id: CurrentUserId,
    quiz_service: QuizServiceDep,
) -> QuizResponse:
    quiz = await quiz_service.get_section_quiz(user_id, module_id, section_id)
    return _quiz_response(quiz, quiz_service.passing_score)


@router.get(
    "/{quiz_id}",
    response_model=QuizResponse,
    summary="Get quiz",
    description="Get a published quiz, without answers.",
)
async def get_quiz(
    quiz_id: str,
    user_id: CurrentUserId,
    quiz_service: QuizServiceDep,
) -> QuizResponse:
    quiz = await quiz_service.get_quiz(user_id, quiz_id)
    return _quiz_response(quiz, quiz_service.passing_score)


@router.post(
    "/{quiz_id}/submit",
    response_model=QuizSubmissionResponse,
    summary="Submit quiz",
    description="Grade answers and record the attempt. A 503 means nothing was recorded and the submission can be retried.",
)
async def submit_quiz(
    quiz_id: str,
    request: SubmitQuizRequest,
    user_id: CurrentUserId,
    quiz_service: QuizServiceDep,
) -> QuizSubmissionResponse:
    """Submit quiz answers.

    Args:
        quiz_id: Quiz being submitted
        request: Answers keyed by question id
        user_id: Authenticated learner
        quiz_service: Quiz service instance

    Returns:
        Score, per-question feedback and the recorded attempt
    """
    result = await quiz_service.submit(user_id, quiz_id, request.answers)
    evaluation = result.evaluation
    return QuizSubmissionResponse(
        quiz_id=result.quiz_id,
        module_id=result.module_id,
        section_id=result.section_id,
        title=result.title,
        earned_points=evaluation.earned_points,
        total_points=evaluation.total_points,
        percentage_score=evaluation.percentage_score,
        passed=evaluation.passed,
        feedback=[QuestionFeedbackResponse.model_validate(item) for item in evaluation.feedback],
        attempts=result.attempts,
        best_score=result.best_score,
        section_completion=result.section_completion,
    )


@router.get(
    "/{quiz_id}/progress",
    response_model=QuizProgressResponse | None,
    summary="Get quiz progress",
    description="Get the learner's best result on a quiz; null if never attempted.",
)
async def get_quiz_progress(
    quiz_id: str,
    user_id: CurrentUserId,
    quiz_service: QuizServiceDep,
) -> QuizProgressResponse | None:
    entry = await quiz_service.get_quiz_progress(user_id, quiz_id)
    return QuizProgressResponse.model_validate(entry) if entry else None
