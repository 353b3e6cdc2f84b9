import logging
from typing import Any, List

from pydantic import ValidationError as PydanticValidationError

from studyquiz.errors import InvalidQuestionError
from studyquiz.models.quiz_models import QuizQuestion, QuizRequest
from studyquiz.utils.prompt_templates import build_default_explanation

logger = logging.getLogger(__name__)

OPTIONS_PER_QUESTION = 4


def normalize_question(item: Any, index: int, request: QuizRequest) -> QuizQuestion:
    if not isinstance(item, dict):
        raise InvalidQuestionError(index, f"Question at index {index} is not an object")

    question = item.get("question")
    options = item.get("options")
    answer = item.get("answer")

    if not isinstance(question, str) or not question.strip():
        raise InvalidQuestionError(index)
    if not isinstance(options, list):
        raise InvalidQuestionError(index)
    if answer is None or answer == "":
        raise InvalidQuestionError(index)

    # ── Enforce exactly 4 string options with the answer among them
    if len(options) != OPTIONS_PER_QUESTION or not all(isinstance(o, str) for o in options):
        raise InvalidQuestionError(
            index, f"Question at index {index} must have exactly {OPTIONS_PER_QUESTION} text options"
        )
    if answer not in options:
        raise InvalidQuestionError(index, f"Answer of question at index {index} is not one of its options")

    explanation = item.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        explanation = build_default_explanation(answer, request)

    try:
        return QuizQuestion(question=question, options=options, answer=answer, explanation=explanation)
    except PydanticValidationError as e:
        raise InvalidQuestionError(index, f"Question at index {index} has invalid format: {e}") from e


def normalize_questions(items: List[Any], request: QuizRequest) -> List[QuizQuestion]:
    """Validate parsed items and fill in missing explanations."""
    questions = []
    for index, item in enumerate(items):
        try:
            questions.append(normalize_question(item, index, request))
        except InvalidQuestionError:
            logger.error("Invalid question at index %d: %r", index, item)
            raise
    return questions
