from pydantic_settings import BaseSettings
from functools import lru_cache
import os


DEFAULT_GEMINI_MODELS = (
    "gemini-2.5-pro,"
    "gemini-2.5-flash,"
    "gemini-2.0-flash,"
    "gemini-1.5-pro,"
    "gemini-1.5-flash"
)


class Settings(BaseSettings):
    app_name: str = "Resume Analyzer API"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = "INFO"

    # Database - supports both SQLite (local) and PostgreSQL (production)
    database_url: str = "sqlite+aiosqlite:///./resume_analyzer.db"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:3001"

    # AI/LLM Configuration
    gemini_api_key: str = ""
    # Candidate models, best first
    gemini_models: str = DEFAULT_GEMINI_MODELS
    gemini_timeout_seconds: float = 45.0
    gemini_temperature: float = 0.1
    gemini_max_output_tokens: int = 8192

    # Text pipeline
    prompt_max_chars: int = 15000
    min_text_length: int = 50

    # Uploads
    max_upload_mb: int = 5
    uploads_dir: str = os.path.join(
        os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "uploads"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"
        # Make field names case-insensitive for environment variables
        case_sensitive = False

    def get_cors_origins(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def get_gemini_models(self) -> list:
        """Parse candidate model names, keeping their order"""
        return [model.strip() for model in self.gemini_models.split(",") if model.strip()]

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    return Settings()
