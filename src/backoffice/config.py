"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_DEFAULT_IMAGE_TYPES = "image/jpeg,image/jpg,image/png"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    firebase_api_key: str
    firebase_database_url: str
    identity_base_url: str = "https://identitytoolkit.googleapis.com/v1"
    supabase_url: str
    supabase_key: str
    storage_bucket: str = "backoffice"
    session_file: str = "~/.backoffice/session.json"
    max_upload_bytes: int = 5 * 1024 * 1024
    allowed_image_types: str = _DEFAULT_IMAGE_TYPES
    revalidate_restored_session: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_image_types(raw: str | None) -> frozenset[str]:
    """Parse the accepted upload MIME types from env."""
    if raw is None or not raw.strip():
        raw = _DEFAULT_IMAGE_TYPES
    types = {chunk.strip().lower() for chunk in raw.split(",") if chunk.strip()}
    return frozenset(types)
