"""Resume Analyzer - PDF resume analysis with Gemini and heuristic fallback."""

__version__ = "2.0.0"
