"""
Build complete ResumeProfile records, either purely from heuristics or by
filling the holes of a validated model payload with heuristic values.
"""
import math
from typing import List, Optional

from pydantic import ValidationError

from ..exceptions import ModelResponseError
from ..schemas.resume import (
    EducationEntry, ModelResumePayload, ProjectEntry, ResumeProfile, WorkExperienceEntry
)
from . import extractors
from .scoring import (
    MAX_UPSKILL_SUGGESTIONS, clamp_rating, compute_rating, generate_improvement_areas,
    generate_summary, generate_upskill_suggestions, improvement_areas_from_fields,
    rating_from_fields, summary_from_fields
)


def validate_model_payload(data: dict) -> ModelResumePayload:
    """Schema validation step: typed partial result or ModelResponseError."""
    if not isinstance(data, dict):
        raise ModelResponseError("Model payload is not a JSON object")
    try:
        return ModelResumePayload.model_validate(data)
    except ValidationError as e:
        raise ModelResponseError(f"Model payload failed validation: {e}") from e


def _text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _unique(values: List[str]) -> List[str]:
    seen = []
    for value in values:
        value = (value or "").strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def build_heuristic_profile(text: str) -> ResumeProfile:
    """Complete analysis without the model. Each extractor runs once."""
    name = extractors.extract_name(text)
    email = extractors.extract_email(text)
    phone = extractors.extract_phone(text)
    linkedin = extractors.extract_linkedin(text)
    skills = extractors.extract_skills(text)
    education = extractors.extract_education(text)
    return ResumeProfile(
        name=name,
        email=email,
        phone=phone,
        linkedin_url=linkedin,
        portfolio_url=extractors.extract_portfolio(text),
        summary=summary_from_fields(name, skills),
        work_experience=extractors.extract_work_experience(text),
        education=education,
        technical_skills=skills,
        soft_skills=extractors.extract_soft_skills(text),
        projects=extractors.extract_projects(text),
        certifications=extractors.extract_certifications(text),
        resume_rating=rating_from_fields(skills, email, phone, education),
        improvement_areas=improvement_areas_from_fields(
            skills, email, phone, linkedin, len((text or "").strip())
        ),
        upskill_suggestions=generate_upskill_suggestions(skills),
    )


def merge_with_heuristics(payload: ModelResumePayload, text: str) -> ResumeProfile:
    """
    Prefer each model value when present and well-typed, else the heuristic one.

    Scalars fall back when null or blank; collections fall back only when the
    model omitted them or sent something that is not a list.
    """
    name = _text(payload.name) or extractors.extract_name(text)

    if payload.work_experience is not None:
        work_experience = [
            WorkExperienceEntry(
                role=_text(job.role) or "Role not specified",
                company=_text(job.company) or extractors.DEFAULT_COMPANY,
                duration=_text(job.duration) or extractors.DEFAULT_DURATION,
                description=_unique(job.description or []),
            )
            for job in payload.work_experience
        ]
    else:
        work_experience = extractors.extract_work_experience(text)

    if payload.education is not None:
        education = [
            EducationEntry(
                degree=_text(edu.degree) or extractors.DEFAULT_DEGREE,
                institution=_text(edu.institution) or extractors.DEFAULT_INSTITUTION,
                graduation_year=_text(edu.graduation_year),
            )
            for edu in payload.education
        ]
    else:
        education = extractors.extract_education(text)

    if payload.projects is not None:
        projects = [
            ProjectEntry(
                name=_text(project.name) or "Untitled project",
                description=_text(project.description) or _text(project.name) or "",
                technologies=_unique(project.technologies or []),
            )
            for project in payload.projects
        ]
    else:
        projects = extractors.extract_projects(text)

    if payload.technical_skills is not None:
        skills = _unique(payload.technical_skills)
    else:
        skills = extractors.extract_skills(text)

    if payload.soft_skills is not None:
        soft_skills = _unique(payload.soft_skills)
    else:
        soft_skills = extractors.extract_soft_skills(text)

    if payload.certifications is not None:
        certifications = _unique(payload.certifications)
    else:
        certifications = extractors.extract_certifications(text)

    if payload.resume_rating is not None and math.isfinite(payload.resume_rating):
        rating = clamp_rating(payload.resume_rating)
    else:
        rating = compute_rating(text)

    if payload.upskill_suggestions is not None:
        upskill = _unique(payload.upskill_suggestions)[:MAX_UPSKILL_SUGGESTIONS]
    else:
        upskill = generate_upskill_suggestions(skills)

    return ResumeProfile(
        name=name,
        email=_text(payload.email) or extractors.extract_email(text),
        phone=_text(payload.phone) or extractors.extract_phone(text),
        linkedin_url=_text(payload.linkedin_url) or extractors.extract_linkedin(text),
        portfolio_url=_text(payload.portfolio_url) or extractors.extract_portfolio(text),
        summary=_text(payload.summary) or generate_summary(text, name),
        work_experience=work_experience,
        education=education,
        technical_skills=skills,
        soft_skills=soft_skills,
        projects=projects,
        certifications=certifications,
        resume_rating=rating,
        improvement_areas=_text(payload.improvement_areas) or generate_improvement_areas(text),
        upskill_suggestions=upskill,
    )
