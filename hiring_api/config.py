# 🔹 FILE: hiring_api/config.py
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # read from .env and ignore unknown keys instead of failing
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
    )

    # --- APP ---
    APP_NAME: str = "Hiring API"
    APP_ENV: str = "dev"
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    # --- LOGGING ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # text | json

    # --- SECURITY ---
    SIGN_IN_TOKEN_SECRET: str
    RESET_TOKEN_SECRET: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 720
    RESET_TOKEN_EXPIRE_MINUTES: int = 60
    SALT_ROUNDS: int = 8

    # --- DATABASE ---
    DATABASE_URL: str = "sqlite:///./hiring.db"

    # --- ATTACHMENT STORE (ImageKit) ---
    IMAGEKIT_PRIVATE_KEY: str
    IMAGEKIT_UPLOAD_URL: str = "https://upload.imagekit.io/api/v1/files/upload"
    IMAGEKIT_API_URL: str = "https://api.imagekit.io/v1"
    PROJECT_FOLDER: str = "hiring"
    ATTACHMENT_TIMEOUT_SECONDS: float = 30.0

    # --- UPLOADS ---
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # --- APPLICATIONS ---
    STRICT_STATUS_TRANSITIONS: bool = False

    # --- ORPHAN SWEEP ---
    ENABLE_ORPHAN_SWEEP: bool = False
    ORPHAN_SWEEP_INTERVAL_HOURS: float = 24.0
    ORPHAN_SWEEP_GRACE_MINUTES: int = 60


settings = Settings()
