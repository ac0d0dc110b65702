from .pdf_parser import (
    NormalizedText,
    extract_pdf_text,
    normalize_text,
    parse_pdf
)
from .merger import (
    build_heuristic_profile,
    merge_with_heuristics,
    validate_model_payload
)
from .resume_analyzer import (
    AnalysisOutcome,
    FailureAction,
    ResumeAnalyzer,
    classify_model_error,
    get_resume_analyzer
)

__all__ = [
    # PDF text
    "NormalizedText",
    "extract_pdf_text",
    "normalize_text",
    "parse_pdf",
    # Profile building
    "build_heuristic_profile",
    "merge_with_heuristics",
    "validate_model_payload",
    # Analyzer
    "AnalysisOutcome",
    "FailureAction",
    "ResumeAnalyzer",
    "classify_model_error",
    "get_resume_analyzer"
]
