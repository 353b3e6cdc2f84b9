import logging
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from studyquiz.account_state import USERS_COLLECTION
from studyquiz.config import CORS_ORIGINS, DATABASE_URL, STORE_BACKEND
from studyquiz.errors import (
    AnswerSelectionError,
    GenerationServiceError,
    InvalidQuestionError,
    NoActiveQuizError,
    ResponseFormatError,
    SupersededGenerationError,
    ValidationError,
)
from studyquiz.leaderboard import friends_leaderboard, rank_users
from studyquiz.models.quiz_models import Level, ScoreResult
from studyquiz.quiz_pipeline import QUIZZES_COLLECTION, QuizGenerator
from studyquiz.quiz_session import QuizController, QuizSession
from studyquiz.schemas.quiz_models import (
    AnswerResult,
    AnswerSubmission,
    LevelInfo,
    QuestionView,
    QuizRecordOut,
    QuizSessionCreateRequest,
    QuizSessionOut,
    QuizSummaryOut,
)
from studyquiz.schemas.user_models import LeaderboardOut, UserProfileIn, UserProfileOut
from studyquiz.storage.base import DocumentStore
from studyquiz.storage.memory import MemoryDocumentStore
from studyquiz.utils.logging_config import configure_logging
from studyquiz.utils.prompt_templates import make_quiz_request, scoring_info
from studyquiz.utils.question_generation import OpenAITextService
from studyquiz.utils.scoring import score_badge

logger = logging.getLogger(__name__)


def make_store(backend: str = STORE_BACKEND) -> DocumentStore:
    if backend == "sql":
        from studyquiz.db.session import make_session_factory
        from studyquiz.storage.sql import SqlDocumentStore
        return SqlDocumentStore(make_session_factory(DATABASE_URL))
    if backend == "memory":
        return MemoryDocumentStore()
    raise ValueError(f"Unknown STORE_BACKEND: {backend}")


STORE: DocumentStore = make_store()
GENERATOR = QuizGenerator(OpenAITextService(), store=STORE)

# client_id -> controller of that client's visible quiz
QUIZ_CONTROLLERS: Dict[str, QuizController] = {}


def get_store() -> DocumentStore:
    return STORE


def get_generator() -> QuizGenerator:
    return GENERATOR


app = FastAPI(title="study-quiz")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def setup_logging():
    configure_logging()
    logger.info("study-quiz started with %s store", STORE_BACKEND)


# Routes
@app.get("/", include_in_schema=False)
def root_get():
    return {"ok": True, "service": "study-quiz", "docs": "/docs"}

@app.get("/healthz", include_in_schema=False)
def health_get():
    return {"ok": True}

@app.head("/healthz", include_in_schema=False)
def health_head():
    return Response(status_code=200)


@app.get("/levels", response_model=List[LevelInfo])
def list_levels():
    return [{"level": level.value, "scoring_info": scoring_info(level)} for level in Level]


# ── helpers
def _controller(client_id: str, generator: QuizGenerator) -> QuizController:
    controller = QUIZ_CONTROLLERS.get(client_id)
    if controller is None:
        controller = QuizController(generator)
        QUIZ_CONTROLLERS[client_id] = controller
    return controller


def _existing_session(client_id: str) -> QuizSession:
    controller = QUIZ_CONTROLLERS.get(client_id)
    if controller is None or controller.session is None:
        raise HTTPException(status_code=404, detail="Quiz session not found")
    return controller.session


def _session_view(client_id: str, session: QuizSession) -> dict:
    questions = []
    for index, q in enumerate(session.questions):
        view = {"index": index, "question": q.question, "options": list(q.options)}
        if session.is_answered(index):
            view.update(
                selected_option=session.selected_answers[index],
                correct=session.is_correct(index),
                answer=q.answer,
                explanation=q.explanation,
            )
        questions.append(QuestionView(**view))

    return {
        "session_id": session.id,
        "client_id": client_id,
        "course": session.request.course,
        "topic": session.request.topic,
        "level": session.level.value,
        "scoring_info": scoring_info(session.level),
        "questions": questions,
        "score": session.score(),
        "completed": session.is_complete,
    }


async def _generate(run) -> QuizSession:
    try:
        return await run()
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except (ResponseFormatError, InvalidQuestionError) as e:
        logger.warning("Unusable quiz from model: %s", e.message)
        raise HTTPException(status_code=502, detail="No questions generated, please retry.")
    except GenerationServiceError as e:
        raise HTTPException(status_code=502, detail=e.message)
    except SupersededGenerationError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except NoActiveQuizError as e:
        raise HTTPException(status_code=404, detail=e.message)


# ── quiz sessions
# All handlers touching a QuizSession are async so they run on the event loop only
@app.post("/quiz-sessions/", response_model=QuizSessionOut)
async def create_quiz_session(req: QuizSessionCreateRequest, generator: QuizGenerator = Depends(get_generator)):
    try:
        request = make_quiz_request(req.course, req.topic, req.level)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)

    controller = _controller(req.client_id, generator)
    try:
        session = await _generate(lambda: controller.run_request(request))
    except HTTPException:
        # a client whose first quiz never arrived keeps no state behind
        if controller.is_idle and QUIZ_CONTROLLERS.get(req.client_id) is controller:
            del QUIZ_CONTROLLERS[req.client_id]
        raise
    return _session_view(req.client_id, session)


@app.get("/quiz-sessions/{client_id}", response_model=QuizSessionOut)
async def get_quiz_session(client_id: str):
    return _session_view(client_id, _existing_session(client_id))


@app.post("/quiz-sessions/{client_id}/answer", response_model=AnswerResult)
async def submit_answer(client_id: str, submission: AnswerSubmission):
    session = _existing_session(client_id)
    try:
        accepted = session.select_answer(submission.question_index, submission.selected_option)
    except AnswerSelectionError as e:
        raise HTTPException(status_code=400, detail=e.message)

    question = session.questions[submission.question_index]
    return {
        "accepted": accepted,
        "correct": session.is_correct(submission.question_index),
        "answer": question.answer,
        "explanation": question.explanation,
        "score": session.score(),
        "completed": session.is_complete,
    }


@app.get("/quiz-sessions/{client_id}/score", response_model=ScoreResult)
async def get_score(client_id: str):
    return _existing_session(client_id).score()


@app.get("/quiz-sessions/{client_id}/summary", response_model=QuizSummaryOut)
async def get_quiz_summary(client_id: str):
    session = _existing_session(client_id)
    score = session.score()
    return {
        "session_id": session.id,
        "level": session.level.value,
        "total_questions": len(session.questions),
        "score": score,
        "badge": score_badge(score.percentage),
        "missed_questions": session.missed_questions(),
        "finished": session.is_complete,
    }


@app.post("/quiz-sessions/{client_id}/reset", response_model=QuizSessionOut)
async def reset_quiz_session(client_id: str):
    _existing_session(client_id)
    session = QUIZ_CONTROLLERS[client_id].reset_answers()
    return _session_view(client_id, session)


@app.post("/quiz-sessions/{client_id}/regenerate", response_model=QuizSessionOut)
async def regenerate_quiz_session(client_id: str):
    controller = QUIZ_CONTROLLERS.get(client_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Quiz session not found")
    session = await _generate(controller.regenerate)
    return _session_view(client_id, session)


@app.delete("/quiz-sessions/{client_id}")
async def delete_quiz_session(client_id: str):
    controller = QUIZ_CONTROLLERS.pop(client_id, None)
    if controller is None:
        raise HTTPException(status_code=404, detail="Quiz session not found")
    controller.clear()
    return {"ok": True}


@app.get("/quizzes", response_model=List[QuizRecordOut])
def list_quizzes(store: DocumentStore = Depends(get_store)):
    return store.list(QUIZZES_COLLECTION)


# ── users & leaderboard
def _profile(record: dict) -> UserProfileOut:
    return UserProfileOut(
        id=record["id"],
        display_name=record.get("display_name"),
        email=record.get("email"),
        credits=record.get("credits") or 0,
        friends=record.get("friends") or [],
    )


@app.put("/users/{user_id}", response_model=UserProfileOut)
def upsert_user(user_id: str, profile: UserProfileIn, store: DocumentStore = Depends(get_store)):
    fields = profile.model_dump(exclude_none=True)
    record = store.set(USERS_COLLECTION, user_id, fields, merge=True)
    return _profile(record)


@app.get("/leaderboard", response_model=LeaderboardOut)
def get_leaderboard(user_id: Optional[str] = Query(None), store: DocumentStore = Depends(get_store)):
    users = store.list(USERS_COLLECTION)
    return {
        "all_users": [_profile(u) for u in rank_users(users)],
        "friends": [_profile(u) for u in friends_leaderboard(users, user_id)] if user_id else [],
    }
