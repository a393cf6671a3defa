"""Unit tests for quiz grading."""

from athos.modules.catalog.interface import Question, Quiz
from athos.modules.quiz.scoring import NO_ANSWER_FEEDBACK, grade_question, grade_quiz, is_correct
from athos.shared.models import QuestionType


class TestGradeQuiz:
    """Tests for grade_quiz."""

    def test_all_correct(self, origins_quiz, all_correct_answers):
        """Test that a perfect submission scores 100 and passes."""
        result = grade_quiz(origins_quiz, all_correct_answers)

        assert result.earned_points == 65
        assert result.total_points == 65
        assert result.percentage_score == 100
        assert result.passed is True
        assert result.correct_count == 5

    def test_no_answers(self, origins_quiz):
        """Test that an empty submission scores 0 with no-answer feedback."""
        result = grade_quiz(origins_quiz, {})

        assert result.percentage_score == 0
        assert result.passed is False
        assert all(item.explanation == NO_ANSWER_FEEDBACK for item in result.feedback)
        assert all(item.points_earned == 0 for item in result.feedback)

    def test_partial_rounds_and_fails(self, origins_quiz, all_correct_answers):
        """Test that 30 of 65 points rounds to 46 and does not pass."""
        answers = {key: all_correct_answers[key] for key in ("q1", "q2", "q3")}
        result = grade_quiz(origins_quiz, answers)

        assert result.earned_points == 30
        assert result.percentage_score == 46
        assert result.passed is False

    def test_feedback_in_question_order(self, origins_quiz):
        """Test that feedback follows the quiz's question order."""
        result = grade_quiz(origins_quiz, {"q5": "Karyes"})
        assert [item.question_id for item in result.feedback] == ["q1", "q2", "q3", "q4", "q5"]
        assert result.feedback[4].correct is True
        assert result.feedback[4].explanation == "Karyes is the capital."

    def test_half_percentage_rounds_up(self):
        """Test that 12.5% is reported as 13."""
        quiz = Quiz(
            id="quiz-half",
            module_id="module1",
            section_id="origins",
            title="Half",
            questions=[
                Question("a", QuestionType.TRUE_FALSE, "A?", "true", points=1),
                Question("b", QuestionType.TRUE_FALSE, "B?", "true", points=7),
            ],
        )
        assert grade_quiz(quiz, {"a": True, "b": False}).percentage_score == 13

    def test_passing_score_boundary(self):
        """Test that reaching the passing score exactly passes."""
        quiz = Quiz(
            id="quiz-boundary",
            module_id="module1",
            section_id="origins",
            title="Boundary",
            questions=[
                Question("a", QuestionType.TRUE_FALSE, "A?", "true", points=60),
                Question("b", QuestionType.TRUE_FALSE, "B?", "true", points=40),
            ],
        )
        assert grade_quiz(quiz, {"a": "true"}).passed is True

    def test_custom_passing_score(self, origins_quiz, all_correct_answers):
        """Test that the pass mark comes from the caller, not the quiz."""
        answers = {key: all_correct_answers[key] for key in ("q1", "q2", "q3", "q4")}

        assert grade_quiz(origins_quiz, answers).percentage_score == 69
        assert grade_quiz(origins_quiz, answers).passed is True
        assert grade_quiz(origins_quiz, answers, passing_score=70).passed is False

    def test_quiz_without_points(self):
        """Test that a quiz without questions scores 0."""
        quiz = Quiz(id="empty", module_id="module1", section_id="origins", title="Empty")
        result = grade_quiz(quiz, {})
        assert result.total_points == 0
        assert result.percentage_score == 0

class TestIsCorrect:
    """Tests for single answer checks."""

    def test_multiple_select_ignores_order(self, origins_quiz):
        """Test that multiple-select answers compare as sets."""
        question = origins_quiz.questions[3]
        assert is_correct(question, ["Vatopedi", "Great Lavra"]) is True
        assert is_correct(question, ["Great Lavra"]) is False
        assert is_correct(question, ["Great Lavra", "Vatopedi", "Meteora"]) is False

    def test_boolean_matches_string(self, origins_quiz):
        """Test that true-false answers accept JSON booleans and strings."""
        question = origins_quiz.questions[1]
        assert is_correct(question, True) is True
        assert is_correct(question, "true") is True
        assert is_correct(question, False) is False

    def test_list_for_single_answer_is_wrong(self, origins_quiz):
        """Test that a list answer never matches a single-answer question."""
        assert is_correct(origins_quiz.questions[0], ["Aegean"]) is False

    def test_surrounding_whitespace_ignored(self, origins_quiz):
        """Test that answers are stripped before comparing."""
        assert is_correct(origins_quiz.questions[0], "  Aegean ") is True

    def test_grade_question_reports_sorted_correct_answer(self, origins_quiz):
        """Test that multiple-select feedback lists the correct options sorted."""
        feedback = grade_question(origins_quiz.questions[3], ["Meteora"])
        assert feedback.correct is False
        assert feedback.correct_answer == ["Great Lavra", "Vatopedi"]
        assert feedback.user_answer == ["Meteora"]
