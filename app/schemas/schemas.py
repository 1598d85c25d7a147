"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON keys are camelCase on the wire; attributes are snake_case in Python.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Tuple, Union
from datetime import datetime


class CamelModel(BaseModel):
    """Accepts both the camelCase alias and the field name."""
    model_config = ConfigDict(populate_by_name=True)


def _require_text(value, message: str):
    if not isinstance(value, str) or not value.strip():
        raise ValueError(message)
    return value.strip()


# ============================================================
# INTERVIEW QUESTION SCHEMAS
# ============================================================

class MCQQuestion(BaseModel):
    """A reconciled multiple-choice question. Immutable once built."""
    model_config = ConfigDict(frozen=True)

    question: str
    options: Tuple[str, str, str, str]
    answer: str


class GenerateQuestionsRequest(CamelModel):
    tech_stack: List[str] = Field(None, alias="techStack", validate_default=True)

    @field_validator("tech_stack", mode="before")
    @classmethod
    def check_tech_stack(cls, value):
        if not isinstance(value, list) or len(value) == 0:
            raise ValueError("Tech stack must be a non-empty array")
        if any(not isinstance(tech, str) or not tech.strip() for tech in value):
            raise ValueError("All tech stack items must be non-empty strings")
        return value


class GenerateQuestionsData(CamelModel):
    questions: List[MCQQuestion]
    count: int
    tech_stack: List[str] = Field(..., alias="techStack")


class GenerateQuestionsResponse(BaseModel):
    status: str = "success"
    message: str
    data: GenerateQuestionsData


# ============================================================
# COVER LETTER SCHEMAS
# ============================================================

class UserDetails(CamelModel):
    name: str = Field(None, validate_default=True)
    email: Optional[str] = None
    experience: Optional[Union[str, int, float]] = None
    skills: Optional[Union[List[str], str]] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = Field(None, alias="linkedinUrl")
    github_url: Optional[str] = Field(None, alias="githubUrl")

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value):
        return _require_text(value, "User name is required")


class JobDescriptionDetails(CamelModel):
    title: str = Field(None, validate_default=True)
    company_name: str = Field(None, alias="companyName", validate_default=True)
    description: Optional[str] = None
    required_skills: Optional[Union[List[str], str]] = Field(None, alias="requiredSkills")
    location: Optional[str] = None
    job_type: Optional[str] = Field(None, alias="jobType")

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, value):
        return _require_text(value, "Job title is required")

    @field_validator("company_name", mode="before")
    @classmethod
    def check_company_name(cls, value):
        return _require_text(value, "Company name is required")


class GenerateCoverLetterRequest(CamelModel):
    user_details: UserDetails = Field(..., alias="userDetails")
    job_description: JobDescriptionDetails = Field(..., alias="jobDescription")


class CoverLetterUserEcho(BaseModel):
    name: str
    email: Optional[str] = None


class CoverLetterJobEcho(CamelModel):
    title: str
    company_name: str = Field(..., alias="companyName")


class CoverLetterData(CamelModel):
    cover_letter: str = Field(..., alias="coverLetter")
    generated_at: datetime = Field(..., alias="generatedAt")
    user_details: CoverLetterUserEcho = Field(..., alias="userDetails")
    job_details: CoverLetterJobEcho = Field(..., alias="jobDetails")


class GenerateCoverLetterResponse(BaseModel):
    status: str = "success"
    message: str
    data: CoverLetterData


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class HealthResponse(BaseModel):
    status: str
    ai_service: str
    model: str


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str
