#!/usr/bin/env python3
"""
AI Generation Smoke Script

Runs both generators against the live backend:
1. Interview questions for a sample tech stack
2. Cover letter for a sample candidate/job

IMPORTANT: This script requires a running backend (see .env.example).

Run: python scripts/smoke_generation.py
"""
import sys
sys.path.insert(0, '.')

from app.core.errors import AppError
from app.schemas.schemas import JobDescriptionDetails, UserDetails
from app.services.ai_generation_service import (
    get_cover_letter_generator,
    get_question_generator,
)


SAMPLE_TECH_STACK = ["React", "Node.js", "TypeScript"]

SAMPLE_USER = UserDetails(
    name="Priya Sharma",
    email="priya.sharma@gmail.com",
    experience="2 years of full-stack development",
    skills=["Python", "React", "FastAPI", "PostgreSQL", "AWS"],
    github_url="github.com/priyasharma",
)

SAMPLE_JOB = JobDescriptionDetails(
    title="Senior Software Engineer - Backend",
    company_name="InnovateTech Solutions",
    description="Design and build scalable microservices for a fintech payments platform.",
    required_skills=["Python", "PostgreSQL", "Docker", "Kafka"],
    location="Bangalore, India (Hybrid)",
    job_type="full-time",
)


def smoke_questions():
    print("\n" + "=" * 60)
    print("[1] INTERVIEW QUESTIONS")
    print("=" * 60)
    print(f"\n📝 Tech stack: {SAMPLE_TECH_STACK}")

    questions = get_question_generator().generate(SAMPLE_TECH_STACK)

    print(f"\n✅ {len(questions)} questions")
    for i, q in enumerate(questions, 1):
        print(f"   {i:2}. {q.question}")
        print(f"       → {q.answer}")
    return questions


def smoke_cover_letter():
    print("\n" + "=" * 60)
    print("[2] COVER LETTER")
    print("=" * 60)
    print(f"\n📝 {SAMPLE_USER.name} → {SAMPLE_JOB.title} at {SAMPLE_JOB.company_name}")

    result = get_cover_letter_generator().generate(SAMPLE_USER, SAMPLE_JOB)

    print(f"\n✅ {len(result['cover_letter'])} characters\n")
    print(result["cover_letter"])
    return result


def main():
    try:
        smoke_questions()
        smoke_cover_letter()
    except AppError as e:
        print(f"\n❌ {type(e).__name__} ({e.status_code}): {e.message}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("✅ SMOKE RUN COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
