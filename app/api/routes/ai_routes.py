"""
AI Routes

POST /ai/generate-questions - Generate interview MCQs for a tech stack
POST /ai/generate-cover-letter - Generate a cover letter for a job

Handlers are plain functions: FastAPI runs them in its thread pool, so the
blocking backend call only holds up its own request.
"""

from fastapi import APIRouter, Depends

from app.services.ai_generation_service import (
    CoverLetterGenerationService,
    QuestionGenerationService,
    get_cover_letter_generator,
    get_question_generator,
)
from app.schemas.schemas import (
    CoverLetterData, CoverLetterJobEcho, CoverLetterUserEcho,
    GenerateCoverLetterRequest, GenerateCoverLetterResponse,
    GenerateQuestionsData, GenerateQuestionsRequest, GenerateQuestionsResponse,
)

router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/generate-questions", response_model=GenerateQuestionsResponse)
def generate_questions(
    request: GenerateQuestionsRequest,
    generator: QuestionGenerationService = Depends(get_question_generator),
):
    """
    Generate multiple choice interview questions.

    Body: { "techStack": ["React", "Node.js", "TypeScript"] }
    """
    questions = generator.generate(request.tech_stack)

    return GenerateQuestionsResponse(
        message="Interview questions generated successfully",
        data=GenerateQuestionsData(
            questions=questions,
            count=len(questions),
            tech_stack=request.tech_stack,
        ),
    )


@router.post("/generate-cover-letter", response_model=GenerateCoverLetterResponse)
def generate_cover_letter(
    request: GenerateCoverLetterRequest,
    generator: CoverLetterGenerationService = Depends(get_cover_letter_generator),
):
    """
    Generate a cover letter from candidate and job details.

    Only userDetails.name, jobDescription.title and jobDescription.companyName
    are required.
    """
    user, job = request.user_details, request.job_description
    result = generator.generate(user, job)

    return GenerateCoverLetterResponse(
        message="Cover letter generated successfully",
        data=CoverLetterData(
            cover_letter=result["cover_letter"],
            generated_at=result["generated_at"],
            user_details=CoverLetterUserEcho(name=user.name, email=user.email),
            job_details=CoverLetterJobEcho(title=job.title, company_name=job.company_name),
        ),
    )
