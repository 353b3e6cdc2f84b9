"""Recoverable errors raised by the quiz pipeline and session layer."""


class QuizError(Exception):
    """Base class for every error the quiz service reports to callers."""
    def __init__(self, message):
        self.message = message
        super().__init__(self.message)


class ValidationError(QuizError):
    """Raised when a required quiz field is empty or invalid before generation."""
    def __init__(self, field, message=None):
        self.field = field
        super().__init__(message or f"Please fill in the '{field}' field before starting the quiz.")


class ResponseFormatError(QuizError):
    """Raised when the model reply holds no parsable JSON array."""
    def __init__(self, raw_text, message=None):
        self.raw_text = raw_text
        super().__init__(message or "Failed to parse a JSON array from the model response.")


class InvalidQuestionError(QuizError):
    """Raised when one generated question has the wrong shape."""
    def __init__(self, index, message=None):
        self.index = index
        super().__init__(message or f"Question at index {index} has invalid format")


class GenerationServiceError(QuizError):
    """Raised when the generative-text call cannot complete."""


class AnswerSelectionError(QuizError):
    """Raised when an answer names an unknown question or option."""


class NoActiveQuizError(QuizError):
    """Raised when an operation needs a quiz session and there is none."""
    def __init__(self, message=None):
        super().__init__(message or "No active quiz. Start a quiz first.")


class SupersededGenerationError(QuizError):
    """Raised when a newer quiz request replaced this one while it was generating."""
    def __init__(self, message=None):
        super().__init__(message or "Quiz generation was superseded by a newer request.")
