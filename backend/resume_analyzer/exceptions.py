"""
Error taxonomy for the resume analysis pipeline.

Only DocumentError subclasses are meant to reach the end user. Model errors are
recovered inside the analyzer by advancing to the next candidate model or by
switching to heuristic extraction.
"""
from typing import Optional


class ResumeAnalysisError(Exception):
    """Base class for every pipeline error."""


# ============================================================================
# Document errors (user-facing)
# ============================================================================

class DocumentError(ResumeAnalysisError):
    """The uploaded document did not yield usable text."""


class EmptyDocumentError(DocumentError):
    """Extracted text is missing or shorter than the usable minimum."""


class DocumentParsingError(DocumentError):
    """The buffer could not be opened as a PDF."""


# ============================================================================
# Model errors (recovered internally)
# ============================================================================

class ConfigurationError(ResumeAnalysisError):
    """No credential is configured for the generation service."""


class ModelError(ResumeAnalysisError):
    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.model = model


class ModelUnavailableError(ModelError):
    """A single candidate model is unknown or unsupported; try the next one."""


class ModelTerminalError(ModelError):
    """Quota, auth, network or timeout failure; stop trying candidates."""


class ModelResponseError(ModelTerminalError):
    """The model answered but no JSON object could be recovered from it."""
