"""
Resume Analyzer Service - Gemini analysis with ordered model fallback.

Candidate models are tried strictly in order. A "model not found" failure
advances to the next candidate; any other failure stops the sequence and the
profile is built from heuristics instead. The user always gets a complete
profile once the document text is usable.
"""
import asyncio
import enum
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Sequence, Tuple, Union

from ..config import get_settings
from ..exceptions import (
    ConfigurationError, ModelError, ModelTerminalError, ModelUnavailableError
)
from ..schemas.resume import ModelResumePayload, ResumeProfile
from .gemini_client import ModelClient, build_gemini_client
from .json_recovery import parse_model_json
from .merger import build_heuristic_profile, merge_with_heuristics, validate_model_payload
from .pdf_parser import NormalizedText, normalize_text

logger = logging.getLogger(__name__)


RESUME_ANALYSIS_PROMPT = """Analyze the following resume text and extract information into a structured JSON format. Be thorough and extract as much real information as possible.

RESUME TEXT:
{resume_text}

Return a single valid JSON object with this structure:
{{
  "name": "string or null",
  "email": "string or null",
  "phone": "string or null",
  "linkedin_url": "string or null",
  "portfolio_url": "string or null",
  "summary": "string describing the candidate's profile and experience",
  "work_experience": [
    {{"role": "string", "company": "string", "duration": "string", "description": ["string"]}}
  ],
  "education": [
    {{"degree": "string", "institution": "string", "graduation_year": "string"}}
  ],
  "technical_skills": ["string"],
  "soft_skills": ["string"],
  "projects": [
    {{"name": "string", "description": "string", "technologies": ["string"]}}
  ],
  "certifications": ["string"],
  "resume_rating": integer from 1 to 10,
  "improvement_areas": "string with specific suggestions",
  "upskill_suggestions": ["string", at most 5 items]
}}

Extract real information from the resume text. Use null for missing scalar values and [] for missing lists.
Respond with the JSON object only."""


class FailureAction(str, enum.Enum):
    ADVANCE = "advance"
    TERMINAL = "terminal"


_MODEL_NOT_FOUND_RE = re.compile(
    r"not found|not supported for (?:this )?api version|model.*not.*found|\b404\b",
    re.I,
)


def classify_model_error(error: BaseException) -> FailureAction:
    """Decide whether a candidate failure lets us try the next model."""
    if isinstance(error, ModelUnavailableError):
        return FailureAction.ADVANCE
    if isinstance(error, (ModelTerminalError, asyncio.TimeoutError)):
        return FailureAction.TERMINAL

    code = getattr(error, "code", None) or getattr(error, "status_code", None)
    if code == 404:
        return FailureAction.ADVANCE
    if _MODEL_NOT_FOUND_RE.search(str(error)):
        return FailureAction.ADVANCE
    return FailureAction.TERMINAL


@dataclass(frozen=True)
class AnalysisOutcome:
    profile: ResumeProfile
    model: Optional[str] = None  # None when heuristics produced the profile


class ResumeAnalyzer:
    """
    Orchestrates the model attempts and the heuristic fallback.

    Args:
        client: Generation client, or None when no credential is configured
        models: Candidate model names, best first
        timeout_seconds: Per-call timeout; a timeout is terminal
        max_prompt_chars: How much normalized text goes into the prompt
    """

    def __init__(
        self,
        client: Optional[ModelClient],
        models: Sequence[str],
        timeout_seconds: float = 45.0,
        max_prompt_chars: int = 15000,
    ):
        self._client = client
        self._models = list(models)
        self._timeout = timeout_seconds
        self._max_prompt_chars = max_prompt_chars

    @property
    def is_configured(self) -> bool:
        return self._client is not None and bool(self._models)

    def build_prompt(self, text: str) -> str:
        return RESUME_ANALYSIS_PROMPT.format(resume_text=text[:self._max_prompt_chars])

    async def analyze_with_model(self, document: NormalizedText) -> Tuple[ModelResumePayload, str]:
        """
        Try each candidate model in order.

        Returns:
            (payload, model_name) for the first candidate that answers with a
            recoverable JSON object

        Raises:
            ConfigurationError: no client or no candidate models
            ModelTerminalError: a non-advance failure, or every candidate unavailable
        """
        if not self.is_configured:
            raise ConfigurationError("Gemini API not configured. Please set GEMINI_API_KEY.")

        prompt = self.build_prompt(document.content)
        last_error: Optional[BaseException] = None

        for model in self._models:
            logger.info(f"Trying model: {model} (prompt length {len(prompt)})")
            try:
                raw = await asyncio.wait_for(
                    self._client.generate(model, prompt), timeout=self._timeout
                )
                payload = validate_model_payload(parse_model_json(raw))
            except Exception as e:
                last_error = e
                if classify_model_error(e) is FailureAction.ADVANCE:
                    logger.warning(f"Model {model} unavailable, trying next candidate: {e}")
                    continue
                if isinstance(e, ModelError):
                    e.model = e.model or model
                    raise
                raise ModelTerminalError(f"{type(e).__name__}: {e}", model=model) from e

            logger.info(f"Model {model} succeeded")
            return payload, model

        raise ModelTerminalError(f"No candidate model available (last error: {last_error})")

    async def analyze_document(self, document: Union[NormalizedText, str]) -> AnalysisOutcome:
        if isinstance(document, str):
            document = normalize_text(document)

        try:
            payload, model = await self.analyze_with_model(document)
        except ConfigurationError as e:
            logger.warning(f"{e} Using heuristic extraction.")
            return AnalysisOutcome(profile=build_heuristic_profile(document.lines))
        except ModelTerminalError as e:
            logger.error(
                f"Model analysis failed ({e.model or 'all candidates'}): {e}. "
                "Falling back to heuristic extraction."
            )
            return AnalysisOutcome(profile=build_heuristic_profile(document.lines))

        return AnalysisOutcome(profile=merge_with_heuristics(payload, document.lines), model=model)

    async def analyze(self, document: Union[NormalizedText, str]) -> ResumeProfile:
        outcome = await self.analyze_document(document)
        return outcome.profile


@lru_cache()
def get_resume_analyzer() -> ResumeAnalyzer:
    """Process-wide analyzer built from settings; override in tests."""
    settings = get_settings()
    client = build_gemini_client(
        settings.gemini_api_key,
        temperature=settings.gemini_temperature,
        max_output_tokens=settings.gemini_max_output_tokens,
    )
    if client is None:
        logger.warning("GEMINI_API_KEY not set - resume analysis will use heuristic extraction")
    return ResumeAnalyzer(
        client=client,
        models=settings.get_gemini_models(),
        timeout_seconds=settings.gemini_timeout_seconds,
        max_prompt_chars=settings.prompt_max_chars,
    )
