"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from project root
# config.py is at: backend/vocalis/core/config.py
_current_file = Path(__file__).resolve()
_backend_dir = _current_file.parent.parent.parent
_project_root = _backend_dir.parent
ENV_FILE = _project_root / ".env"
# Fallback: try in backend/ directory if not found in project root
if not ENV_FILE.exists():
    ENV_FILE = _backend_dir / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Vocalis"
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Logging level")
    secret_key: str = Field(
        default="dev-secret-change-me",
        min_length=8,
        description="Secret key used to sign session tokens"
    )
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )
    cookie_secure: bool = Field(default=True, description="Send the session cookie with the Secure flag")

    # Logging
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/vocalis.log",
        description="Path to log file (relative to project root)"
    )
    log_file_retention: int = Field(
        default=14,
        ge=1,
        description="Number of days to keep log files"
    )
    log_sensitive_data: bool = Field(
        default=False,
        description="Enable logging of sensitive data (passwords, tokens) - NOT RECOMMENDED"
    )
    log_sqlalchemy: bool = Field(default=False, description="Enable SQLAlchemy query logging")

    # Database
    database_url: str = Field(
        default="sqlite:///./vocalis.db",
        description="SQLAlchemy database URL"
    )

    # Reasoning endpoint (Gemini generateContent compatible)
    gemini_api_url: Optional[str] = Field(
        default=None,
        description="Full URL of the generateContent endpoint"
    )
    gemini_api_key: Optional[str] = Field(
        default=None,
        description="API key sent as x-goog-api-key (omit if embedded in the URL)"
    )
    llm_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=300,
        description="Timeout for a single reasoning request (seconds)"
    )

    # Command throttling
    command_min_interval_ms: int = Field(
        default=2000,
        ge=0,
        description="Minimum interval between two accepted commands of one session (ms)"
    )

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only json and text formats are supported"""
        if v.lower() not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v.lower()

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
