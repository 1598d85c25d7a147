"""
Schemas module - Request/Response schemas for API endpoints.

- Request schemas (what API accepts)
- Response schemas (what API returns)
- MCQQuestion, the validated question the AI pipeline produces
"""

from app.schemas.schemas import (
    ErrorResponse,
    GenerateCoverLetterRequest,
    GenerateCoverLetterResponse,
    GenerateQuestionsRequest,
    GenerateQuestionsResponse,
    MCQQuestion,
)

__all__ = [
    "ErrorResponse",
    "GenerateCoverLetterRequest",
    "GenerateCoverLetterResponse",
    "GenerateQuestionsRequest",
    "GenerateQuestionsResponse",
    "MCQQuestion",
]
