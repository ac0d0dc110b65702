"""
Heuristic resume rating and feedback generation.

The `*_from_fields` helpers take already-extracted values so a profile build
runs each extractor once; the text-level wrappers extract on their own.
"""
from typing import List, Optional

from .extractors import (
    DEFAULT_NAME, extract_education, extract_email, extract_linkedin, extract_phone,
    extract_skills
)

MIN_RATING = 1
MAX_RATING = 10
BASE_RATING = 5
MAX_UPSKILL_SUGGESTIONS = 5

GENERIC_IMPROVEMENT = "Consider adding more quantifiable achievements and specific project outcomes."
GENERIC_UPSKILL = [
    "Practice system design concepts",
    "Learn about microservices architecture",
]


def clamp_rating(value) -> int:
    return max(MIN_RATING, min(MAX_RATING, int(round(value))))


def rating_from_fields(skills: List[str], email: Optional[str], phone: Optional[str], education: list) -> int:
    rating = BASE_RATING
    if len(skills) > 5:
        rating += 1
    if len(skills) > 10:
        rating += 1
    if email:
        rating += 1
    if phone:
        rating += 1
    if education:
        rating += 1
    return clamp_rating(rating)


def compute_rating(text: str) -> int:
    return rating_from_fields(
        extract_skills(text), extract_email(text), extract_phone(text), extract_education(text)
    )


def improvement_areas_from_fields(
    skills: List[str],
    email: Optional[str],
    phone: Optional[str],
    linkedin: Optional[str],
    text_length: int,
) -> str:
    areas = []
    if len(skills) < 5:
        areas.append("Consider adding more technical skills to your resume")
    if not email or not phone:
        areas.append("Ensure contact information is clearly visible")
    if not linkedin:
        areas.append("Add a link to your LinkedIn profile")
    if text_length < 500:
        areas.append("Provide more detailed descriptions of your experience and projects")

    if not areas:
        return GENERIC_IMPROVEMENT
    return ". ".join(areas) + "."


def generate_improvement_areas(text: str) -> str:
    return improvement_areas_from_fields(
        extract_skills(text),
        extract_email(text),
        extract_phone(text),
        extract_linkedin(text),
        len((text or "").strip()),
    )


def generate_upskill_suggestions(skills: List[str]) -> List[str]:
    skills = set(skills or [])
    suggestions = []
    if not skills & {"AWS", "Azure", "Google Cloud"}:
        suggestions.append("Learn cloud technologies (AWS, Azure, or Google Cloud)")
    if not skills & {"Docker", "Kubernetes"}:
        suggestions.append("Explore containerization and orchestration tools")
    if "JavaScript" in skills and "TypeScript" not in skills:
        suggestions.append("Learn TypeScript for better code quality")
    suggestions.extend(GENERIC_UPSKILL)
    return suggestions[:MAX_UPSKILL_SUGGESTIONS]


def summary_from_fields(name: Optional[str], skills: List[str]) -> str:
    subject = name if name and name != DEFAULT_NAME else "Experienced professional"
    if skills:
        return f"{subject} with strong skills in {', '.join(skills[:3])}."
    return f"{subject} with strong technical skills."


def generate_summary(text: str, name: Optional[str] = None) -> str:
    return summary_from_fields(name, extract_skills(text))
