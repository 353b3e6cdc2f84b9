from pydantic import BaseModel, Field
from typing import Optional, List

from studyquiz.models.quiz_models import ScoreResult


class QuizSessionCreateRequest(BaseModel):
    client_id: str = "anonymous"
    course: str = ""
    topic: str = ""
    level: str = ""

class AnswerSubmission(BaseModel):
    question_index: int = Field(..., ge=0)
    selected_option: str

class LevelInfo(BaseModel):
    level: str
    scoring_info: str

class QuestionView(BaseModel):
    index: int
    question: str
    options: List[str]
    selected_option: Optional[str] = None
    # only revealed once the question is answered
    correct: Optional[bool] = None
    answer: Optional[str] = None
    explanation: Optional[str] = None

class QuizSessionOut(BaseModel):
    session_id: str
    client_id: str
    course: str
    topic: str
    level: str
    scoring_info: str
    questions: List[QuestionView]
    score: ScoreResult
    completed: bool

class AnswerResult(BaseModel):
    accepted: bool
    correct: bool
    answer: str
    explanation: str
    score: ScoreResult
    completed: bool

class MissedQuestion(BaseModel):
    index: int
    question: str
    options: List[str]
    selected_option: str
    answer: str
    explanation: str

class QuizSummaryOut(BaseModel):
    session_id: str
    level: str
    total_questions: int
    score: ScoreResult
    badge: str
    missed_questions: List[MissedQuestion]
    finished: bool

class QuizRecordOut(BaseModel):
    id: str
    course: str
    topic: str
    level: str
    timestamp: str
