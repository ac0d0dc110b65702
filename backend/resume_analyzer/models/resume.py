"""
Resume model - one analyzed upload with its passthrough file metadata
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, JSON
from sqlalchemy.sql import func
from ..database import Base


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(Integer, primary_key=True, index=True)

    # File info (not interpreted by the analysis pipeline)
    file_name = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_mimetype = Column(String(100), nullable=False)
    file_url = Column(String(500), nullable=True)

    # Identity
    name = Column(String(255), nullable=True, index=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    portfolio_url = Column(String(500), nullable=True)

    summary = Column(Text, nullable=False, default="No summary available")

    # Structured sections stored as JSON lists of dicts/strings
    work_experience = Column(JSON, default=list)
    education = Column(JSON, default=list)
    technical_skills = Column(JSON, default=list)
    soft_skills = Column(JSON, default=list)
    projects = Column(JSON, default=list)
    certifications = Column(JSON, default=list)

    resume_rating = Column(Integer, nullable=False, default=5)
    improvement_areas = Column(Text, nullable=False, default="No specific improvement areas identified")
    upskill_suggestions = Column(JSON, default=list)

    # Which candidate model produced the analysis; null for heuristic extraction
    analysis_model = Column(String(100), nullable=True)
    analysis_date = Column(DateTime(timezone=True), server_default=func.now())

    is_public = Column(Boolean, default=False)
    tags = Column(JSON, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
