from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Level(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class QuizRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    course: str
    topic: str
    level: Level


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str = Field(..., min_length=1, description="The question prompt")
    options: List[str] = Field(
        ...,
        min_length=4,
        max_length=4,
        description="Exactly four answer choices"
    )
    answer: str = Field(..., description="The correct option, verbatim")
    explanation: str = Field(..., min_length=1, description="Why the answer is correct")

    @model_validator(mode="after")
    def _answer_is_an_option(self):
        if self.answer not in self.options:
            raise ValueError("answer must be one of the options")
        return self


class ScoreResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    correct: int = 0
    total: int = 0
    percentage: int = Field(0, ge=0, le=100)
    points: int = 0
