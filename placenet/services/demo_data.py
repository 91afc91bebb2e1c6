"""
Demo catalog - synthetic candidates and jobs used to populate an empty
pipeline and job board.

Nothing here is ever written to PostgreSQL. Every id carries a reserved
prefix so the pipeline engine and the job routes can recognise it:
- applications: "mock-app-"
- jobs:         "550e8400-e29b-41d4-a716-44665544"
"""

from datetime import datetime, timedelta
from typing import List

SYNTHETIC_APPLICATION_PREFIX = "mock-app-"
SYNTHETIC_JOB_PREFIX = "550e8400-e29b-41d4-a716-44665544"


def is_synthetic_application(application_id: str) -> bool:
    return application_id.startswith(SYNTHETIC_APPLICATION_PREFIX)


def is_synthetic_job(job_id: str) -> bool:
    return job_id.startswith(SYNTHETIC_JOB_PREFIX)


# (id suffix, first, last, job title, company, city, default status, days ago, salary, cover letter)
_CANDIDATES = [
    ("001", "Arjun", "Sharma", "Frontend Developer", "Tech Solutions", "Bangalore",
     "screening", 2, 800000, "I am excited to apply for the Frontend Developer position..."),
    ("002", "Priya", "Patel", "Backend Developer", "InnovateTech", "Pune",
     "interview", 5, 950000, "With 3 years of experience in Node.js and Python..."),
    ("003", "Rahul", "Kumar", "Full Stack Developer", "StartupHub", "Hyderabad",
     "hired", 10, 1200000, "I am passionate about building scalable applications..."),
    ("004", "Sneha", "Reddy", "DevOps Engineer", "CloudTech", "Chennai",
     "rejected", 7, 1100000, "I have extensive experience with AWS and Kubernetes..."),
    ("005", "Vikram", "Singh", "Data Scientist", "AI Innovations", "Mumbai",
     "screening", 1, 1300000, "As a data science enthusiast with expertise in machine learning..."),
    ("006", "Ananya", "Mehta", "UI/UX Designer", "Design Studio", "Delhi",
     "interview", 3, 750000, "I am a creative designer with a passion for user experience..."),
]


def synthetic_applications(epoch: datetime) -> List[dict]:
    """
    The fixed synthetic candidate set, dated relative to epoch.

    Returned dicts have the same shape as ApplicationRepository.list_for_recruiter
    rows; "status" holds the catalog default before any overlay is applied.
    """
    records = []
    for suffix, first, last, title, company, city, status, days, salary, cover in _CANDIDATES:
        applied_at = epoch - timedelta(days=days)
        records.append({
            "id": f"{SYNTHETIC_APPLICATION_PREFIX}{suffix}",
            "student_id": f"mock-student-{suffix}",
            "job_id": f"mock-job-{suffix}",
            "status": status,
            "cover_letter": cover,
            "expected_salary": salary,
            "applied_at": applied_at,
            "updated_at": applied_at,
            "version": None,
            "is_demo": True,
            "student": {
                "id": f"mock-student-{suffix}",
                "first_name": first,
                "last_name": last,
                "email": f"{first.lower()}.{last.lower()}@example.com",
                "profile_image_url": None,
                "skills": [],
            },
            "job": {
                "id": f"mock-job-{suffix}",
                "title": title,
                "company": company,
                "location": city,
            },
        })
    return records


def synthetic_application_defaults() -> dict:
    """Catalog id -> default status."""
    return {f"{SYNTHETIC_APPLICATION_PREFIX}{c[0]}": c[6] for c in _CANDIDATES}


_JOBS = [
    ("0001", "Full Stack Developer", "Google", "Mountain View, CA", 120000, 180000,
     "Join our innovative team to build scalable web applications using React, Node.js, and cloud technologies.",
     ["5+ years experience", "React expertise", "Node.js proficiency", "Cloud platforms"],
     ["React", "Node.js", "TypeScript", "AWS", "MongoDB", "GraphQL"], 1, 23),
    ("0002", "Frontend React Developer", "Microsoft", "Redmond, WA", 100000, 140000,
     "Build next-generation user interfaces for Microsoft products using React and modern frontend technologies.",
     ["3+ years React", "UI/UX understanding", "Testing frameworks"],
     ["React", "TypeScript", "CSS", "Jest", "Azure", "Redux"], 3, 67),
    ("0003", "AI/ML Engineer", "Apple", "Cupertino, CA", 150000, 220000,
     "Develop cutting-edge machine learning models for Apple products and services.",
     ["PhD or MS in ML/AI", "Python expertise", "Deep learning frameworks"],
     ["Python", "TensorFlow", "PyTorch", "MLOps", "Statistics", "Computer Vision"], 2, 89),
    ("0004", "DevOps Engineer", "Amazon", "Seattle, WA", 130000, 170000,
     "Scale and automate infrastructure for millions of users on AWS platform.",
     ["AWS certification", "Kubernetes experience", "CI/CD pipelines"],
     ["AWS", "Kubernetes", "Docker", "Terraform", "Jenkins", "Linux"], 5, 45),
    ("0005", "Backend Node.js Developer", "Meta", "Remote", 110000, 160000,
     "Build high-performance backend services for social media platforms at global scale.",
     ["4+ years Node.js", "Microservices architecture", "Database optimization"],
     ["Node.js", "Express", "PostgreSQL", "Redis", "GraphQL", "Docker"], 1, 34),
    ("0006", "Product Manager", "Infosys", "Bangalore, India", 150000, 220000,
     "Lead product strategy and development for enterprise digital transformation solutions.",
     ["MBA preferred", "Product management experience", "Agile methodologies"],
     ["Product Strategy", "Agile", "Stakeholder Management", "Analytics", "Roadmapping"], 4, 78),
    ("0007", "Software Engineer", "TCS", "Mumbai, India", 120000, 180000,
     "Develop enterprise software solutions for global clients across various industries.",
     ["2+ years experience", "Java or C# proficiency", "SDLC knowledge"],
     ["Java", "Spring Boot", "SQL", "REST APIs", "Git", "Agile"], 6, 156),
    ("0008", "UX Designer", "Netflix", "Los Gatos, CA", 95000, 135000,
     "Design intuitive user experiences for streaming entertainment platform.",
     ["Design portfolio", "Figma expertise", "User research skills"],
     ["Figma", "User Research", "Prototyping", "Design Systems", "A/B Testing"], 2, 41),
    ("0009", "Data Scientist", "Spotify", "New York, NY", 125000, 175000,
     "Analyze user behavior and build recommendation systems for music streaming.",
     ["Statistics background", "Python/R proficiency", "ML experience"],
     ["Python", "R", "SQL", "Machine Learning", "Statistics", "Spark"], 1, 28),
    ("0010", "Cybersecurity Analyst", "IBM", "Austin, TX", 85000, 125000,
     "Protect enterprise systems and investigate security incidents.",
     ["Security certifications", "Incident response", "Network security"],
     ["SIEM", "Penetration Testing", "Incident Response", "Network Security", "Python"], 8, 92),
]


def synthetic_jobs(epoch: datetime) -> List[dict]:
    """The fixed demo job catalog, shaped like JobListing."""
    return [
        {
            "id": f"{SYNTHETIC_JOB_PREFIX}{suffix}",
            "recruiter_id": None,
            "title": title,
            "company": company,
            "location": location,
            "type": "full-time",
            "salary_min": salary_min,
            "salary_max": salary_max,
            "description": description,
            "requirements": requirements,
            "skills": skills,
            "is_active": True,
            "created_at": epoch - timedelta(days=days),
            "updated_at": epoch - timedelta(days=days),
            "applicants": applicants,
            "is_demo": True,
        }
        for (suffix, title, company, location, salary_min, salary_max,
             description, requirements, skills, days, applicants) in _JOBS
    ]


# ------------------------------------------------------------
# Starter records for POST /demo/initialize. Unlike the catalog above these
# are real rows, owned by the caller.
# ------------------------------------------------------------

DEMO_RECRUITER_PROFILE = {
    "company": "Netflix",
    "position": "Senior Recruiter",
    "department": "Human Resources",
    "verified": True,
}

DEMO_JOB = {
    "title": "Full Stack Developer",
    "company": "Netflix",
    "location": "Remote",
    "type": "full-time",
    "salary_min": 80000,
    "salary_max": 120000,
    "description": "We are looking for a skilled Full Stack Developer to join our team.",
    "requirements": ["3+ years experience", "React/Node.js proficiency", "Database knowledge"],
    "skills": ["JavaScript", "React", "Node.js", "PostgreSQL"],
    "is_active": True,
}

DEMO_STUDENT_PROFILE = {
    "college": "Indian Institute of Technology",
    "degree": "Bachelor of Technology",
    "branch": "Computer Science",
    "graduation_year": 2024,
    "cgpa": 8.5,
    "skills": ["JavaScript", "React", "Python", "SQL"],
    "resume_score": 85,
    "interview_score": 78,
    "learning_streak": 15,
}
