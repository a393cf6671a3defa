"""Quiz Module - Submission grading and quiz progress."""

from athos.modules.quiz.interface import (
    IQuizService,
    QuestionFeedback,
    QuizEvaluation,
    QuizSubmissionResult,
)
from athos.modules.quiz.scoring import grade_quiz

__all__ = [
    "IQuizService",
    "QuestionFeedback",
    "QuizEvaluation",
    "QuizSubmissionResult",
    "grade_quiz",
]
