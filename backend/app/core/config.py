from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


def parse_extensions(v: Any) -> List[str]:
    """Parse allowed extensions from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        return [ext.strip().lower().lstrip('.') for ext in v.split(',') if ext.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Admin Panel API"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 5000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./admin_panel.db"
    # Activity logs may live in a separate database; empty means DATABASE_URL
    ACTIVITY_LOG_DATABASE_URL: str = ""
    DB_ECHO: bool = False

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    BCRYPT_ROUNDS: int = 10

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:5173,http://127.0.0.1:5173"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    LOGIN_RATE_LIMIT: str = "10/minute"

    # ==========================================
    # File Upload
    # ==========================================
    UPLOAD_DIR: str = "uploads"
    MAX_AVATAR_SIZE: int = 5 * 1024 * 1024  # 5MB
    MAX_STUDENT_FILE_SIZE: int = 10 * 1024 * 1024  # 10MB
    MAX_STUDENT_DOCUMENTS: int = 10
    MAX_REQUEST_SIZE: int = 120 * 1024 * 1024
    ALLOWED_IMAGE_TYPES_STR: str = "image/jpeg,image/png,image/webp"
    ALLOWED_EXTENSIONS_STR: str = "pdf,doc,docx,txt,png,jpg,jpeg"

    @property
    def ALLOWED_EXTENSIONS(self) -> List[str]:
        """Parse allowed extensions from comma-separated string"""
        return parse_extensions(self.ALLOWED_EXTENSIONS_STR)

    @property
    def ALLOWED_IMAGE_TYPES(self) -> List[str]:
        return parse_cors_origins(self.ALLOWED_IMAGE_TYPES_STR)

    @property
    def upload_path(self) -> Path:
        return Path(self.UPLOAD_DIR)

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    # ==========================================
    # Application Settings defaults
    # ==========================================
    DEFAULT_APP_NAME: str = "Admin Panel"
    DEFAULT_SUPPORT_EMAIL: str = "support@example.com"

    # ==========================================
    # Reporting
    # ==========================================
    REPORT_WINDOW_DAYS: int = 30
    DASHBOARD_SERIES_DAYS: int = 7
    RECENT_ACTIVITY_LIMIT: int = 5
    TOP_ACTORS_LIMIT: int = 5

    @property
    def activity_database_url(self) -> str:
        """Database URL for the activity log store"""
        return self.ACTIVITY_LOG_DATABASE_URL or self.DATABASE_URL

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Create settings instance
settings = Settings()
