import pytest

from studyquiz.errors import AnswerSelectionError
from studyquiz.models.quiz_models import Level
from studyquiz.utils.scoring import score_answers, score_badge


def answers(questions, n_correct, n_wrong):
    selected = {}
    for i in range(n_correct):
        selected[i] = questions[i].answer
    for i in range(n_correct, n_correct + n_wrong):
        selected[i] = next(o for o in questions[i].options if o != questions[i].answer)
    return selected


def test_beginner_six_of_ten(questions):
    result = score_answers(questions, answers(questions, 6, 4), Level.BEGINNER)
    assert (result.correct, result.total, result.percentage, result.points) == (6, 10, 60, 6)


def test_intermediate_doubles_points(questions):
    result = score_answers(questions, answers(questions, 6, 4), Level.INTERMEDIATE)
    assert result.points == 12
    assert result.percentage == 60


def test_advanced_has_negative_marking(questions):
    result = score_answers(questions, answers(questions, 6, 4), Level.ADVANCED)
    assert result.points == 6 * 3 - 4 * 1


def test_advanced_points_can_go_negative(questions):
    result = score_answers(questions, answers(questions, 0, 3), Level.ADVANCED)
    assert result.points == -3
    assert result.percentage == 0


@pytest.mark.parametrize("level", list(Level))
def test_no_answers_scores_zero(questions, level):
    result = score_answers(questions, {}, level)
    assert (result.correct, result.total, result.percentage, result.points) == (0, 0, 0, 0)


def test_total_counts_answered_questions_only(questions):
    result = score_answers(questions, answers(questions, 2, 1), Level.BEGINNER)
    assert result.total == 3
    assert result.percentage == 67


def test_percentage_rounds_half_up(questions):
    # 1 of 8 is 12.5%
    result = score_answers(questions, answers(questions, 1, 7), Level.BEGINNER)
    assert result.percentage == 13


def test_score_is_reproducible_from_answers(questions):
    selected = answers(questions, 5, 3)
    assert score_answers(questions, selected, Level.ADVANCED) == score_answers(questions, dict(selected), Level.ADVANCED)


@pytest.mark.parametrize("percentage, badge", [(100, "🏆"), (90, "🏆"), (75, "🌟"), (50, "👍"), (49, "🔄"), (0, "🔄")])
def test_score_badge(percentage, badge):
    assert score_badge(percentage) == badge


@pytest.mark.parametrize("index", [-1, 10])
def test_out_of_range_answers_are_rejected(questions, index):
    with pytest.raises(AnswerSelectionError):
        score_answers(questions, {index: questions[0].answer}, Level.BEGINNER)
