import logging
from datetime import datetime
from typing import List, Optional

from studyquiz.errors import ResponseFormatError
from studyquiz.models.quiz_models import QuizQuestion, QuizRequest
from studyquiz.storage.base import DocumentStore
from studyquiz.utils.prompt_templates import QUIZ_LENGTH, build_quiz_prompt
from studyquiz.utils.question_normalizer import normalize_questions
from studyquiz.utils.response_parsing import extract_json_array

logger = logging.getLogger(__name__)

QUIZZES_COLLECTION = "quizzes"


class QuizGenerator:
    """
    Turns a QuizRequest into validated questions.

    `service` is any object with `generate(prompt) -> str`; `store`, when
    given, receives one metadata record per generated quiz.
    """

    def __init__(self, service, store: Optional[DocumentStore] = None, num_questions: int = QUIZ_LENGTH):
        self.service = service
        self.store = store
        self.num_questions = num_questions

    def generate(self, request: QuizRequest) -> List[QuizQuestion]:
        prompt = build_quiz_prompt(request.course, request.topic, request.level, self.num_questions)
        raw = self.service.generate(prompt)
        items = extract_json_array(raw)
        if not items:
            raise ResponseFormatError(raw, "Model response contains no questions.")
        questions = normalize_questions(items, request)
        logger.info(
            "Generated %d questions for course=%r topic=%r level=%s",
            len(questions), request.course, request.topic, request.level.value,
        )
        self._record_quiz(request)
        return questions

    def _record_quiz(self, request: QuizRequest) -> None:
        if self.store is None:
            return
        try:
            self.store.create(QUIZZES_COLLECTION, {
                "course": request.course,
                "topic": request.topic,
                "level": request.level.value,
                "timestamp": datetime.now().isoformat(),
            })
        except Exception:
            # Metadata is optional; the quiz is still shown
            logger.exception("Failed to save quiz metadata for course=%r topic=%r", request.course, request.topic)
