"""
Resumes Router - PDF upload and analysis, plus CRUD and statistics over stored analyses
"""
import logging
import os
import re
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Optional

import aiofiles
import aiofiles.os
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..database import get_db
from ..exceptions import DocumentError, EmptyDocumentError
from ..models import Resume
from ..schemas.resume import (
    MessageResponse, MonthlyUploads, Pagination, ResumeEnvelope, ResumeListEnvelope,
    ResumeListItem, ResumeResponse, ResumeStats, ResumeStatsEnvelope, ResumeUpdate, SkillCount
)
from ..services.pdf_parser import parse_pdf
from ..services.resume_analyzer import AnalysisOutcome, ResumeAnalyzer, get_resume_analyzer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resumes", tags=["Resumes"])
settings = get_settings()

# Columns that must never be nulled by an edit
_NON_NULLABLE_FIELDS = {
    "summary", "resume_rating", "improvement_areas", "technical_skills", "soft_skills",
    "certifications", "upskill_suggestions", "is_public", "tags",
}


# ============================================================================
# Helper Functions
# ============================================================================

def _resume_dir() -> str:
    return os.path.join(settings.uploads_dir, "resumes")


def _safe_filename(filename: str) -> str:
    safe = filename.replace(" ", "_").replace("/", "_").replace("\\", "_")
    safe = re.sub(r"[^\w\-_\.]", "", safe)
    return re.sub(r"_+", "_", safe) or "resume.pdf"


def _unreadable(error: DocumentError) -> HTTPException:
    if isinstance(error, EmptyDocumentError):
        detail = "PDF appears to be empty or contains very little text."
    else:
        detail = "Failed to parse PDF file. The file may be corrupted or not a valid PDF."
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def _analyze_pdf(pdf_bytes: bytes, analyzer: ResumeAnalyzer) -> AnalysisOutcome:
    try:
        document = parse_pdf(pdf_bytes, min_length=settings.min_text_length)
    except DocumentError as e:
        logger.warning(f"PDF parsing failed: {e}")
        raise _unreadable(e) from e

    logger.info(f"PDF parsed successfully. Text length: {len(document.content)} characters")
    return await analyzer.analyze_document(document)


async def _remove_stored_file(path: str) -> None:
    if await aiofiles.os.path.exists(path):
        await aiofiles.os.remove(path)


async def _get_resume_or_404(db: AsyncSession, resume_id: int) -> Resume:
    result = await db.execute(select(Resume).where(Resume.id == resume_id))
    resume = result.scalar_one_or_none()
    if not resume:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resume not found"
        )
    return resume


# ============================================================================
# Upload & Analysis
# ============================================================================

@router.post("/upload", response_model=ResumeEnvelope, status_code=status.HTTP_201_CREATED)
async def upload_resume(
    resume: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    analyzer: ResumeAnalyzer = Depends(get_resume_analyzer)
):
    """
    Upload a PDF resume, analyze it and store the result.

    1. Validate file → 400 if not a PDF or too large
    2. Extract text → 400 if the PDF has no usable text
    3. Analyze (Gemini, falling back to heuristics) → always yields a profile
    4. Save the file and the analysis
    """
    filename = resume.filename or ""
    if not filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are supported"
        )

    pdf_bytes = await resume.read()
    if len(pdf_bytes) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size is {settings.max_upload_mb}MB."
        )

    logger.info(f"Processing resume {filename} ({len(pdf_bytes)} bytes)")
    outcome = await _analyze_pdf(pdf_bytes, analyzer)
    logger.info(
        f"Resume analysis completed via {outcome.model or 'heuristic extraction'}: "
        f"{len(outcome.profile.technical_skills)} skills, rating {outcome.profile.resume_rating}"
    )

    stored_name = f"{uuid.uuid4().hex[:12]}_{_safe_filename(filename)}"
    stored_path = os.path.join(_resume_dir(), stored_name)
    try:
        os.makedirs(_resume_dir(), exist_ok=True)
        async with aiofiles.open(stored_path, "wb") as f:
            await f.write(pdf_bytes)
    except OSError as e:
        logger.error(f"Failed to store resume file {stored_name}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save resume file. Please try again."
        )

    record = Resume(
        file_name=stored_name,
        original_name=filename,
        file_size=len(pdf_bytes),
        file_mimetype=resume.content_type or "application/pdf",
        file_url=f"/uploads/resumes/{stored_name}",
        analysis_model=outcome.model,
        **outcome.profile.model_dump(),
    )
    db.add(record)
    try:
        await db.commit()
    except BaseException:
        logger.error(f"Failed to save resume record; removing stored file {stored_name}")
        await _remove_stored_file(stored_path)
        raise
    await db.refresh(record)
    logger.info(f"✅ Resume saved to database with ID: {record.id}")

    return ResumeEnvelope(
        message="Resume analyzed successfully",
        data=ResumeResponse.model_validate(record),
    )


# ============================================================================
# Listing & Statistics
# ============================================================================

@router.get("", response_model=ResumeListEnvelope)
async def list_resumes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """List analyzed resumes, newest first, optionally filtered by name/email/skill."""
    query = select(Resume)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Resume.name.ilike(pattern),
            Resume.email.ilike(pattern),
            cast(Resume.technical_skills, String).ilike(pattern),
        ))

    total = (await db.execute(
        select(func.count()).select_from(query.subquery())
    )).scalar_one()

    result = await db.execute(
        query.order_by(Resume.created_at.desc(), Resume.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    resumes = result.scalars().all()

    total_pages = (total + limit - 1) // limit
    return ResumeListEnvelope(
        data=[ResumeListItem.model_validate(r) for r in resumes],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


@router.get("/stats/overview", response_model=ResumeStatsEnvelope)
async def get_resume_stats(db: AsyncSession = Depends(get_db)):
    """Totals, average rating, top 10 skills and uploads for the last 6 months."""
    total = (await db.execute(select(func.count(Resume.id)))).scalar_one()
    average = (await db.execute(select(func.avg(Resume.resume_rating)))).scalar()

    skill_counts = Counter()
    for skills in (await db.execute(select(Resume.technical_skills))).scalars():
        skill_counts.update(skills or [])

    monthly = Counter()
    for created_at in (await db.execute(select(Resume.created_at))).scalars():
        if created_at:
            monthly[(created_at.year, created_at.month)] += 1

    return ResumeStatsEnvelope(data=ResumeStats(
        total_resumes=total,
        average_rating=round(float(average or 0), 2),
        top_skills=[
            SkillCount(skill=skill, count=count)
            for skill, count in skill_counts.most_common(10)
        ],
        monthly_uploads=[
            MonthlyUploads(year=year, month=month, count=monthly[(year, month)])
            for year, month in sorted(monthly, reverse=True)[:6]
        ],
    ))


# ============================================================================
# Single Resume CRUD
# ============================================================================

@router.get("/{resume_id}", response_model=ResumeEnvelope)
async def get_resume(resume_id: int, db: AsyncSession = Depends(get_db)):
    resume = await _get_resume_or_404(db, resume_id)
    return ResumeEnvelope(data=ResumeResponse.model_validate(resume))


@router.patch("/{resume_id}", response_model=ResumeEnvelope)
async def update_resume(
    resume_id: int,
    update_data: ResumeUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Edit analysis fields, tags or visibility."""
    resume = await _get_resume_or_404(db, resume_id)

    update_dict = update_data.model_dump(exclude_unset=True)
    for field, value in update_dict.items():
        if value is None and field in _NON_NULLABLE_FIELDS:
            continue
        if field == "technical_skills":
            value = list(dict.fromkeys(value))
        setattr(resume, field, value)

    await db.commit()
    await db.refresh(resume)

    return ResumeEnvelope(
        message="Resume updated successfully",
        data=ResumeResponse.model_validate(resume),
    )


@router.delete("/{resume_id}", response_model=MessageResponse)
async def delete_resume(resume_id: int, db: AsyncSession = Depends(get_db)):
    resume = await _get_resume_or_404(db, resume_id)

    file_path = os.path.join(_resume_dir(), resume.file_name)
    await db.delete(resume)
    await db.commit()

    await _remove_stored_file(file_path)
    return MessageResponse(message="Resume deleted successfully")


@router.post("/{resume_id}/reanalyze", response_model=ResumeEnvelope)
async def reanalyze_resume(
    resume_id: int,
    db: AsyncSession = Depends(get_db),
    analyzer: ResumeAnalyzer = Depends(get_resume_analyzer)
):
    """Re-run the analysis on the stored PDF without re-uploading it."""
    resume = await _get_resume_or_404(db, resume_id)

    file_path = os.path.join(_resume_dir(), resume.file_name)
    if not await aiofiles.os.path.exists(file_path):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stored resume file not found. Please upload it again."
        )

    async with aiofiles.open(file_path, "rb") as f:
        pdf_bytes = await f.read()

    outcome = await _analyze_pdf(pdf_bytes, analyzer)
    for field, value in outcome.profile.model_dump().items():
        setattr(resume, field, value)
    resume.analysis_model = outcome.model
    resume.analysis_date = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(resume)
    logger.info(f"✅ Resume {resume_id} re-analyzed via {outcome.model or 'heuristic extraction'}")

    return ResumeEnvelope(
        message="Resume re-analyzed successfully",
        data=ResumeResponse.model_validate(resume),
    )
