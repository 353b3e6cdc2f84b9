from typing import Dict, Mapping, Sequence, Tuple

from studyquiz.errors import AnswerSelectionError
from studyquiz.models.quiz_models import Level, QuizQuestion, ScoreResult

# level -> (points for a correct answer, points for a wrong one)
POINTS: Dict[Level, Tuple[int, int]] = {
    Level.BEGINNER: (1, 0),
    Level.INTERMEDIATE: (2, 0),
    Level.ADVANCED: (3, -1),
}


def _percent(correct: int, total: int) -> int:
    if total == 0:
        return 0
    # round half up, in integers
    return (200 * correct + total) // (2 * total)


def score_answers(
    questions: Sequence[QuizQuestion],
    selected_answers: Mapping[int, str],
    level: Level,
) -> ScoreResult:
    """Recompute the score of a quiz attempt from its selected answers alone."""
    correct_points, wrong_points = POINTS[Level(level)]

    correct = 0
    points = 0
    for index, selected in selected_answers.items():
        if not 0 <= index < len(questions):
            raise AnswerSelectionError(f"No question at index {index}")
        if selected == questions[index].answer:
            correct += 1
            points += correct_points
        else:
            points += wrong_points

    total = len(selected_answers)
    return ScoreResult(
        correct=correct,
        total=total,
        percentage=_percent(correct, total),
        points=points,
    )


def score_badge(percentage: int) -> str:
    if percentage >= 90:
        return "🏆"
    if percentage >= 70:
        return "🌟"
    if percentage >= 50:
        return "👍"
    return "🔄"
