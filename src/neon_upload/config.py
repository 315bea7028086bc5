from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


# ──────────────────────────────────────────────
# Settings (from environment variables / .env)
# ──────────────────────────────────────────────
class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # CORS settings
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000"
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "GET,POST,OPTIONS"
    cors_allow_headers: str = "*"

    # Upload limits (bytes)
    max_upload_size: int = 10 * 1024 * 1024  # 10 MB – images & audio
    max_video_upload_size: int = 50 * 1024 * 1024  # 50 MB – videos
    preview_max_size: int = 5 * 1024 * 1024  # 5 MB – inline base64 preview

    # Mock storage
    public_base_url: str = "https://your-app.vercel.app"
    upload_delay_min: float = 0.0
    upload_delay_max: float = 0.0

    # Application settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def cors_methods_list(self) -> list[str]:
        """Parse CORS methods from comma-separated string."""
        if self.cors_allow_methods == "*":
            return ["*"]
        return [method.strip() for method in self.cors_allow_methods.split(",")]

    @property
    def cors_headers_list(self) -> list[str]:
        """Parse CORS headers from comma-separated string."""
        if self.cors_allow_headers == "*":
            return ["*"]
        return [header.strip() for header in self.cors_allow_headers.split(",")]

    @property
    def max_sizes(self) -> dict[str, int]:
        """Size ceiling per media kind."""
        return {
            "image": self.max_upload_size,
            "video": self.max_video_upload_size,
            "audio": self.max_upload_size,
        }


# Global settings instance
settings = Settings()

# ──────────────────────────────────────────────
# Paths
# ──────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent           # src/neon_upload/
STATIC_DIR = BASE_DIR / "static"

UPLOAD_ENDPOINT = "/api/upload"
STORAGE_PREFIX = "/uploads"

# ──────────────────────────────────────────────
# MIME allow-list
#   key   → media kind reported as ``fileType``
#   value → accepted content types for that kind
# ──────────────────────────────────────────────
MEDIA_TYPES: dict[str, list[str]] = {
    "image": [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/svg+xml",
        "image/bmp",
        "image/tiff",
    ],
    "video": [
        "video/mp4",
        "video/mpeg",
        "video/quicktime",
        "video/x-msvideo",
    ],
    "audio": [
        "audio/mp3",
        "audio/mpeg",
        "audio/wav",
        "audio/ogg",
    ],
}

SUPPORTED_MIME_TYPES: list[str] = [
    mime for mimes in MEDIA_TYPES.values() for mime in mimes
]
