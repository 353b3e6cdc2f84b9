from studyquiz.errors import ValidationError
from studyquiz.models.quiz_models import Level, QuizRequest

QUIZ_LENGTH = 10

SCORING_INFO = {
    Level.BEGINNER: "Scoring: +1 point for each correct answer",
    Level.INTERMEDIATE: "Scoring: +2 points for each correct answer",
    Level.ADVANCED: "Scoring: +3 points for each correct answer, -1 point for wrong answers",
}


def _require(value, field):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field)
    return value


def parse_level(level) -> Level:
    if isinstance(level, Level):
        return level
    _require(level, "level")
    try:
        return Level(level.strip())
    except ValueError:
        allowed = ", ".join(l.value for l in Level)
        raise ValidationError("level", f"Unknown level {level!r}; expected one of: {allowed}")


def make_quiz_request(course: str, topic: str, level) -> QuizRequest:
    """Validate the quiz form and freeze it into a QuizRequest."""
    _require(course, "course")
    _require(topic, "topic")
    return QuizRequest(course=course, topic=topic, level=parse_level(level))


def build_quiz_prompt(course: str, topic: str, level, num_questions: int = QUIZ_LENGTH) -> str:
    request = make_quiz_request(course, topic, level)

    return f"""
        Generate exactly {num_questions} multiple-choice questions (MCQs) on "{request.topic}" related to "{request.course}"
        for the "{request.level.value}" level. Each question should have exactly 4 options, one correct answer,
        and a brief explanation of why that answer is correct.

        Requirements for each question object:
        - question: The question prompt (string).
        - options: Exactly 4 distinct answer choices (array of strings).
        - answer: The correct choice, copied exactly from options (string).
        - explanation: A short, educational rationale for the correct answer (string).

        Output format must be **exactly** a JSON array of objects that looks like this:

        [
        {{
            "question": "What is the primary key in RDBMS?",
            "options": ["Unique identifier", "Foreign key", "Primary storage", "Database schema"],
            "answer": "Unique identifier",
            "explanation": "A primary key is a unique identifier that distinguishes each record in a database table."
        }},
        … {num_questions} total …
        ]

        Ensure the explanation helps the student understand why the answer is correct.
        Ensure the response contains only valid JSON without any extra text or explanations outside the JSON structure.
        """


def build_default_explanation(answer: str, request: QuizRequest) -> str:
    return (
        f'The correct answer is "{answer}". This is an important concept in '
        f"{request.topic} for {request.level.value} level {request.course}."
    )


def scoring_info(level) -> str:
    return SCORING_INFO[parse_level(level)]
