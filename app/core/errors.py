"""
Application errors.

Every error carries the HTTP status it is surfaced with. The handlers in
app.main render them as {"status": "error", "message": ...}.

Backend-side failures are 500; bad input and unusable model output are 400.
"""

from typing import Optional


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


# ============================================================
# CALLER INPUT
# ============================================================

class InvalidInput(AppError):
    status_code = 400
    default_message = "Bad Request"


# ============================================================
# TEXT-GENERATION BACKEND
# ============================================================

class BackendUnavailable(AppError):
    default_message = "Cannot connect to the AI service"


class ModelNotFound(AppError):
    default_message = "AI model not found"


class BackendError(AppError):
    default_message = "AI service error"


class EmptyBackendResponse(AppError):
    default_message = "Empty response from AI service"


# ============================================================
# MODEL OUTPUT
# ============================================================

class MalformedAIResponse(AppError):
    status_code = 400
    default_message = "Failed to parse AI response. The AI did not return valid JSON format."


class InvalidRecord(AppError):
    status_code = 400


class AnswerMismatch(AppError):
    status_code = 400


class EmptyResult(AppError):
    status_code = 400
    default_message = "No questions generated"


class InsufficientResults(AppError):
    status_code = 400

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Not enough questions generated. Expected {expected}, got {actual}. Please try again."
        )


class ContentTooShort(AppError):
    status_code = 400
    default_message = "Generated cover letter is empty or too short. Please try again."


class ContentTooLong(AppError):
    status_code = 400
    default_message = "Generated cover letter is too long. Please try again."
