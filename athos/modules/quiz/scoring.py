"""Quiz grading.

Pure functions: a quiz definition and the learner's answers in, a
QuizEvaluation out. Single-answer questions compare normalized strings,
multiple-select questions compare sets of options.
"""

from typing import Any

from athos.modules.catalog.interface import Question, Quiz, normalize_answer
from athos.modules.quiz.interface import QuestionFeedback, QuizEvaluation
from athos.shared.constants import DEFAULT_PASSING_SCORE
from athos.shared.math_utils import round_half_up

NO_ANSWER_FEEDBACK = "No answer provided"


def _as_selection(answer: Any) -> frozenset[str]:
    if isinstance(answer, (list, tuple, set, frozenset)):
        return frozenset(normalize_answer(a) for a in answer)
    return frozenset({normalize_answer(answer)})


def is_correct(question: Question, answer: Any) -> bool:
    """Check one answer against a question's correct answer."""
    if isinstance(question.correct_answer, frozenset):
        return _as_selection(answer) == question.correct_answer
    if isinstance(answer, (list, tuple, set, frozenset)):
        return False
    return normalize_answer(answer) == question.correct_answer


def grade_question(question: Question, answer: Any) -> QuestionFeedback:
    correct_answer = (
        sorted(question.correct_answer)
        if isinstance(question.correct_answer, frozenset)
        else question.correct_answer
    )
    if answer is None:
        return QuestionFeedback(
            question_id=question.id,
            correct=False,
            points_earned=0,
            points_possible=question.points,
            correct_answer=correct_answer,
            explanation=NO_ANSWER_FEEDBACK,
        )

    correct = is_correct(question, answer)
    return QuestionFeedback(
        question_id=question.id,
        correct=correct,
        points_earned=question.points if correct else 0,
        points_possible=question.points,
        user_answer=answer,
        correct_answer=correct_answer,
        explanation=question.explanation,
    )


def grade_quiz(
    quiz: Quiz,
    answers: dict[str, Any],
    passing_score: int = DEFAULT_PASSING_SCORE,
) -> QuizEvaluation:
    """Grade a submission.

    Args:
        quiz: Quiz definition with correct answers
        answers: Learner answers keyed by question id; missing keys count
            as unanswered
        passing_score: Percentage at or above which the attempt passes

    Returns:
        Points, rounded percentage, pass/fail and per-question feedback in
        question order
    """
    feedback = [grade_question(question, answers.get(question.id)) for question in quiz.questions]
    earned = sum(item.points_earned for item in feedback)
    total = quiz.total_points
    percentage = round_half_up(100 * earned / total) if total > 0 else 0

    return QuizEvaluation(
        earned_points=earned,
        total_points=total,
        percentage_score=percentage,
        passed=percentage >= passing_score,
        feedback=feedback,
    )
