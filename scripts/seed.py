#!/usr/bin/env python3
"""
Seed Script

Creates a demo employer with sample job postings and a demo student,
going through the same services the API uses.

Credentials:
    employer@example.com / employer123 (employer)
    student@example.com  / student123  (student)

Run: python scripts/seed.py
"""
import sys
sys.path.insert(0, '.')

from jobboard.core.errors import ConflictError
from jobboard.db.postgres import engine, get_db_session
from jobboard.db.schema import create_tables
from jobboard.services import account_service, job_service
from jobboard.schemas.schemas import SignUpRequest, JobCreate, EmployerProfileUpdate, StudentProfileUpdate
from jobboard.core.auth import verify_token


SAMPLE_JOBS = [
    {
        "title": "Junior Software Engineer",
        "description": "We are looking for a junior software engineer to join our growing team. "
                       "You will work on full-stack applications using modern technologies.",
        "requirements": ["JavaScript/TypeScript", "React or Vue", "Node.js", "SQL basics", "Git"],
        "location": "San Francisco, CA",
        "type": "entry-level",
        "work_mode": "hybrid",
        "salary": "$80,000 - $100,000",
    },
    {
        "title": "Frontend Internship",
        "description": "Join our design team for a summer internship building beautiful user interfaces.",
        "requirements": ["HTML/CSS", "JavaScript", "Basic React knowledge", "Design sense"],
        "location": "New York, NY",
        "type": "internship",
        "work_mode": "onsite",
        "salary": "$20/hour",
    },
    {
        "title": "Data Science Internship",
        "description": "Work with our data team on real-world machine learning projects.",
        "requirements": ["Python", "SQL", "Statistics", "Machine Learning basics"],
        "location": "Remote",
        "type": "internship",
        "work_mode": "remote",
        "salary": "$22/hour",
    },
    {
        "title": "Backend Developer",
        "description": "Build scalable backend systems for our SaaS platform.",
        "requirements": ["Node.js/Python/Go", "PostgreSQL/MongoDB", "Docker", "AWS/GCP", "REST APIs"],
        "location": "Seattle, WA",
        "type": "entry-level",
        "work_mode": "remote",
        "salary": "$90,000 - $120,000",
    },
    {
        "title": "Product Designer Internship",
        "description": "Design user experiences for our mobile app.",
        "requirements": ["Figma", "Design principles", "Prototyping", "UI/UX basics"],
        "location": "Austin, TX",
        "type": "internship",
        "work_mode": "hybrid",
        "salary": "$18/hour",
    },
]


def sign_up_and_in(request: SignUpRequest):
    """Register (if needed) and return session claims for the account."""
    with get_db_session() as db:
        try:
            account_service.sign_up(db, request)
            print(f"    ✅ Created {request.role.value}: {request.email}")
        except ConflictError:
            print(f"    ⚠️  {request.email} already exists, reusing it")

    with get_db_session() as db:
        token = account_service.sign_in(db, request.email, request.password, request.role)
    return verify_token(token.access_token)


def main():
    print("🌱 Starting database seed...")
    create_tables(engine)

    print("\n[1] Employer")
    employer = sign_up_and_in(SignUpRequest(
        email="employer@example.com", password="employer123", role="employer",
        company_name="TechCorp", industry="Technology"
    ))
    with get_db_session() as db:
        account_service.update_employer_profile(db, employer, EmployerProfileUpdate(
            company_size="100-500",
            website="https://techcorp.example.com",
            description="Leading technology company building innovative solutions for the future.",
            logo_url="https://via.placeholder.com/150?text=TechCorp"
        ))

    print("\n[2] Jobs")
    with get_db_session() as db:
        existing = job_service.list_employer_jobs(db, employer)
    if existing:
        print(f"    ⚠️  {len(existing)} job(s) already posted, skipping")
    else:
        for job in SAMPLE_JOBS:
            with get_db_session() as db:
                created = job_service.create_job(db, employer, JobCreate(**job))
            print(f"    ✅ {created.title}")

    print("\n[3] Student")
    student = sign_up_and_in(SignUpRequest(
        email="student@example.com", password="student123", role="student",
        full_name="Alex Student", university="State University"
    ))
    with get_db_session() as db:
        account_service.update_student_profile(db, student, StudentProfileUpdate(
            major="Computer Science", graduation_year=2026, gpa="3.7"
        ))

    print("\n✅ Seed complete!")
    print("   employer@example.com / employer123")
    print("   student@example.com  / student123")


if __name__ == "__main__":
    main()
