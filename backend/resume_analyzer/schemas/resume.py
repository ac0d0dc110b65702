"""
Resume schemas: the analyzed profile, the model payload, and API envelopes
"""
from typing import Any, List, Optional
from datetime import datetime
from pydantic import (
    AliasChoices, BaseModel, Field, ValidationError, field_validator
)


# ============================================================================
# Analyzed Profile (produced by the pipeline, persisted whole)
# ============================================================================

class WorkExperienceEntry(BaseModel):
    role: str
    company: str
    duration: str
    description: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class EducationEntry(BaseModel):
    degree: str
    institution: str
    graduation_year: Optional[str] = None

    class Config:
        frozen = True


class ProjectEntry(BaseModel):
    name: str
    description: str
    technologies: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class ResumeProfile(BaseModel):
    """Complete analysis record. Every key is always present."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    summary: str
    work_experience: List[WorkExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    technical_skills: List[str] = Field(default_factory=list)
    soft_skills: List[str] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    resume_rating: int = Field(ge=1, le=10)
    improvement_areas: str
    upskill_suggestions: List[str] = Field(default_factory=list, max_length=5)

    class Config:
        frozen = True


# ============================================================================
# Model Payload (typed partial result of the model's JSON)
# ============================================================================

def _as_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    return value


class _LenientModel(BaseModel):
    """Drops a field to None when its value has the wrong shape."""

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value, handler):
        try:
            return handler(value)
        except ValidationError:
            return None

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True
        extra = "ignore"


class ModelWorkExperience(_LenientModel):
    role: Optional[str] = None
    company: Optional[str] = None
    duration: Optional[str] = None
    description: Optional[List[str]] = None

    @field_validator("description", mode="before")
    @classmethod
    def _description_list(cls, value):
        return _as_list(value)


class ModelEducation(_LenientModel):
    degree: Optional[str] = None
    institution: Optional[str] = None
    graduation_year: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("graduation_year", "graduationYear")
    )


class ModelProject(_LenientModel):
    name: Optional[str] = None
    description: Optional[str] = None
    technologies: Optional[List[str]] = None

    @field_validator("technologies", mode="before")
    @classmethod
    def _technologies_list(cls, value):
        return _as_list(value)


class ModelResumePayload(_LenientModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("linkedin_url", "linkedinUrl")
    )
    portfolio_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("portfolio_url", "portfolioUrl")
    )
    summary: Optional[str] = None
    work_experience: Optional[List[ModelWorkExperience]] = Field(
        default=None, validation_alias=AliasChoices("work_experience", "workExperience")
    )
    education: Optional[List[ModelEducation]] = None
    technical_skills: Optional[List[str]] = Field(
        default=None, validation_alias=AliasChoices("technical_skills", "technicalSkills")
    )
    soft_skills: Optional[List[str]] = Field(
        default=None, validation_alias=AliasChoices("soft_skills", "softSkills")
    )
    projects: Optional[List[ModelProject]] = None
    certifications: Optional[List[str]] = None
    resume_rating: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("resume_rating", "resumeRating")
    )
    improvement_areas: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("improvement_areas", "improvementAreas")
    )
    upskill_suggestions: Optional[List[str]] = Field(
        default=None, validation_alias=AliasChoices("upskill_suggestions", "upskillSuggestions")
    )

    @field_validator("resume_rating", mode="before")
    @classmethod
    def _reject_bool_rating(cls, value):
        # bool is an int subclass; "true" is not a rating
        if isinstance(value, bool):
            return None
        return value


# ============================================================================
# API Schemas
# ============================================================================

class ResumeResponse(ResumeProfile):
    """Full persisted record"""
    id: int
    file_name: str
    original_name: str
    file_size: int
    file_mimetype: str
    file_url: Optional[str] = None
    analysis_model: Optional[str] = None
    analysis_date: Optional[datetime] = None
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ResumeListItem(BaseModel):
    id: int
    file_name: str
    original_name: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    resume_rating: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ResumeUpdate(BaseModel):
    """User-editable fields"""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    summary: Optional[str] = None
    technical_skills: Optional[List[str]] = None
    soft_skills: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    resume_rating: Optional[int] = Field(default=None, ge=1, le=10)
    improvement_areas: Optional[str] = None
    upskill_suggestions: Optional[List[str]] = Field(default=None, max_length=5)
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ResumeEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: ResumeResponse


class ResumeListEnvelope(BaseModel):
    success: bool = True
    data: List[ResumeListItem] = Field(default_factory=list)
    pagination: Pagination


class SkillCount(BaseModel):
    skill: str
    count: int


class MonthlyUploads(BaseModel):
    year: int
    month: int
    count: int


class ResumeStats(BaseModel):
    total_resumes: int
    average_rating: float
    top_skills: List[SkillCount] = Field(default_factory=list)
    monthly_uploads: List[MonthlyUploads] = Field(default_factory=list)


class ResumeStatsEnvelope(BaseModel):
    success: bool = True
    data: ResumeStats


class MessageResponse(BaseModel):
    success: bool = True
    message: str
