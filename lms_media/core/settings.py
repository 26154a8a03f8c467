# lms_media/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    # --- Object store (MinIO / S3-compatible) ---
    MINIO_ENDPOINT: str = "localhost"
    MINIO_PORT: int = 9000
    MINIO_USE_SSL: bool = False
    MINIO_ACCESS_KEY: Optional[str] = None
    MINIO_SECRET_KEY: Optional[str] = None
    MINIO_BUCKET: str = "lms-uploads"
    MINIO_REGION: str = "us-east-1"

    # --- Multipart ---
    presign_expiry_sec: int = 3600
    default_content_type: str = "application/octet-stream"

    # --- Auth ---
    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXP_HOURS: int = 24

    # --- Web ---
    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:5173",
        "https://instructor.lms.trizenventures.com",
    ]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def endpoint_url(self) -> str:
        scheme = "https" if self.MINIO_USE_SSL else "http"
        return f"{scheme}://{self.MINIO_ENDPOINT}:{self.MINIO_PORT}"


settings = Settings()  # leest .env
