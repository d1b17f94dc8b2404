import json
from pydantic_settings import BaseSettings, SettingsConfigDict, NoDecode
from pydantic import Field, field_validator
from typing import Annotated, Optional, List, Dict, Set, Any
from datetime import timedelta

DEFAULT_RESERVED_SEGMENTS = {
    "auth",
    "api",
    "dashboard",
    "docs",
    "redoc",
    "openapi.json",
    "static",
    "_next",
    "favicon.ico",
}


class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = "SchoolDesk"
    VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False)

    # Database Settings
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./schooldesk.db")
    DB_ECHO: bool = Field(default=False)

    # Authentication Settings
    SECRET_KEY: str = Field(...)
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60)
    PASSWORD_RESET_EXPIRE_MINUTES: int = Field(default=60)
    BCRYPT_ROUNDS: int = Field(default=12)
    TOKEN_ISSUER: str = Field(default="schooldesk")

    # CORS Settings
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000"
        ]
    )

    # Tenant routing: first path segments that never name a school
    RESERVED_SEGMENTS: Annotated[Set[str], NoDecode] = Field(default_factory=lambda: set(DEFAULT_RESERVED_SEGMENTS))

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)

    # Mail Settings
    MAIL_USERNAME: Optional[str] = Field(default=None)
    MAIL_PASSWORD: Optional[str] = Field(default=None)
    MAIL_FROM: Optional[str] = Field(default=None)
    MAIL_SERVER: str = Field(default="smtp.gmail.com")
    MAIL_PORT: int = Field(default=465)
    MAIL_FROM_NAME: str = Field(default="SchoolDesk")
    PASSWORD_RESET_URL: str = Field(default="http://localhost:3000/auth/reset-password")

    @field_validator('ALLOWED_ORIGINS', mode='before')
    @classmethod
    def parse_allowed_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator('RESERVED_SEGMENTS', mode='before')
    @classmethod
    def parse_reserved_segments(cls, v):
        if isinstance(v, str):
            return set(segment.strip().lower() for segment in v.split(",") if segment.strip())
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )

    @property
    def mail_configured(self) -> bool:
        return all([self.MAIL_USERNAME, self.MAIL_PASSWORD, self.MAIL_FROM])


# Initialize settings
settings = Settings()


# Helper Functions
def get_token_expires_delta(minutes: Optional[int] = None) -> timedelta:
    if minutes is None:
        minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    return timedelta(minutes=minutes)

def get_database_url() -> str:
    return settings.DATABASE_URL

def get_jwt_settings() -> Dict[str, Any]:
    return {
        "secret_key": settings.SECRET_KEY,
        "algorithm": settings.ALGORITHM,
        "access_token_expire_minutes": settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        "password_reset_expire_minutes": settings.PASSWORD_RESET_EXPIRE_MINUTES,
        "token_issuer": settings.TOKEN_ISSUER
    }

def get_logging_config() -> Dict[str, Optional[str]]:
    return {
        "log_level": settings.LOG_LEVEL,
        "log_dir": settings.LOG_DIR
    }

def get_mail_settings() -> Dict[str, Any]:
    return {
        "username": settings.MAIL_USERNAME,
        "password": settings.MAIL_PASSWORD,
        "from_email": settings.MAIL_FROM,
        "server": settings.MAIL_SERVER,
        "port": settings.MAIL_PORT,
        "from_name": settings.MAIL_FROM_NAME
    }
