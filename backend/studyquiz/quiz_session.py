"""In-memory quiz attempts and the per-client owner of the visible one."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from uuid import uuid4

from fastapi.concurrency import run_in_threadpool

from studyquiz.errors import AnswerSelectionError, NoActiveQuizError, SupersededGenerationError
from studyquiz.models.quiz_models import Level, QuizQuestion, QuizRequest, ScoreResult
from studyquiz.utils.prompt_templates import make_quiz_request
from studyquiz.utils.scoring import score_answers

logger = logging.getLogger(__name__)


class QuizSession:
    """One attempt at a generated quiz. Each question locks on its first answer."""

    def __init__(self, request: QuizRequest, questions: Sequence[QuizQuestion]):
        self.id = str(uuid4())
        self.request = request
        self.questions = tuple(questions)
        self.created_at = datetime.now()
        self._selected: Dict[int, str] = {}

    @property
    def level(self) -> Level:
        return self.request.level

    @property
    def selected_answers(self) -> Dict[int, str]:
        return dict(self._selected)

    def is_answered(self, index: int) -> bool:
        return index in self._selected

    @property
    def is_complete(self) -> bool:
        return len(self._selected) == len(self.questions)

    def select_answer(self, index: int, option: str) -> bool:
        """Record the answer to question `index`. Returns False if it was already answered."""
        if not 0 <= index < len(self.questions):
            raise AnswerSelectionError(f"No question at index {index}")
        if option not in self.questions[index].options:
            raise AnswerSelectionError(f"{option!r} is not an option of question {index}")
        if index in self._selected:
            return False
        self._selected[index] = option
        return True

    def is_correct(self, index: int) -> Optional[bool]:
        if index not in self._selected:
            return None
        return self._selected[index] == self.questions[index].answer

    def reset(self) -> None:
        self._selected.clear()

    def score(self) -> ScoreResult:
        return score_answers(self.questions, self._selected, self.level)

    def missed_questions(self) -> List[dict]:
        missed = []
        for index in sorted(self._selected):
            question = self.questions[index]
            if self._selected[index] != question.answer:
                missed.append({
                    "index": index,
                    "question": question.question,
                    "options": list(question.options),
                    "selected_option": self._selected[index],
                    "answer": question.answer,
                    "explanation": question.explanation,
                })
        return missed


class QuizController:
    """
    Owns the visible quiz of one client.

    Every start takes a new generation token; a generation that finishes after
    a newer one was started is discarded, so the newest request always wins.
    A failed generation leaves the previous session in place.
    """

    def __init__(self, generator):
        self.generator = generator
        self.session: Optional[QuizSession] = None
        self.last_request: Optional[QuizRequest] = None
        self._generation = 0
        self._pending = 0

    @property
    def is_idle(self) -> bool:
        """True when nothing is generating and no session is shown."""
        return self.session is None and self._pending == 0

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def commit(self, token: int, request: QuizRequest, questions: Sequence[QuizQuestion]) -> QuizSession:
        if not self.is_current(token):
            logger.info("Discarding superseded quiz generation %d (current is %d)", token, self._generation)
            raise SupersededGenerationError()
        self.session = QuizSession(request, questions)
        return self.session

    async def start_quiz(self, course: str, topic: str, level) -> QuizSession:
        request = make_quiz_request(course, topic, level)
        return await self.run_request(request)

    async def regenerate(self) -> QuizSession:
        if self.last_request is None:
            raise NoActiveQuizError()
        return await self.run_request(self.last_request)

    async def run_request(self, request: QuizRequest) -> QuizSession:
        token = self.begin()
        self.last_request = request
        self._pending += 1
        try:
            questions = await run_in_threadpool(self.generator.generate, request)
        finally:
            self._pending -= 1
        return self.commit(token, request, questions)

    def require_session(self) -> QuizSession:
        if self.session is None:
            raise NoActiveQuizError()
        return self.session

    def reset_answers(self) -> QuizSession:
        session = self.require_session()
        session.reset()
        return session

    def clear(self) -> None:
        # also invalidates anything still generating
        self._generation += 1
        self.session = None
        self.last_request = None
