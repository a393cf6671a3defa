"""Quiz API schemas."""

from typing import Any

from pydantic import BaseModel, Field

from athos.shared.models import BaseSchema, QuestionType


class QuestionResponse(BaseSchema):
    """A question as shown to the learner, without its answer."""

    id: str
    type: QuestionType
    prompt: str
    options: list[str] = Field(default_factory=list)
    points: int


class QuizResponse(BaseSchema):
    """A quiz as shown to the learner."""

    id: str
    module_id: str
    section_id: str
    title: str
    questions: list[QuestionResponse]
    passing_score: int = Field(..., description="Percentage needed to pass")
    total_points: int


class SubmitQuizRequest(BaseModel):
    """Quiz answers keyed by question id."""

    answers: dict[str, Any] = Field(
        ...,
        description="Answer per question id; a list for multiple-select questions",
        examples=[{"q1": "Byzantine", "q2": True, "q3": ["icons", "manuscripts"]}],
    )


class QuestionFeedbackResponse(BaseSchema):
    question_id: str
    correct: bool
    points_earned: int
    points_possible: int
    user_answer: Any = None
    correct_answer: Any = None
    explanation: str = ""


class QuizSubmissionResponse(BaseModel):
    """Graded submission and the recorded attempt."""

    quiz_id: str
    module_id: str
    section_id: str
    title: str
    earned_points: int
    total_points: int
    percentage_score: int
    passed: bool
    feedback: list[QuestionFeedbackResponse]
    attempts: int = Field(..., description="Attempts including this one")
    best_score: int = Field(..., description="Best percentage so far")
    section_completion: int = Field(..., description="Section completion after this attempt")
