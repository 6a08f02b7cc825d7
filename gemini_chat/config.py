import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env file
load_dotenv()


def _optional_float(value: Optional[str]) -> Optional[float]:
    return float(value) if value else None


class Settings(BaseModel):
    gemini_api_key: Optional[str] = os.getenv("GEMINI_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    gemini_base_url: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )

    supabase_url: Optional[str] = os.getenv("SUPABASE_URL")
    supabase_service_role_key: Optional[str] = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    supabase_anon_key: Optional[str] = os.getenv("SUPABASE_ANON_KEY")

    image_bucket: str = os.getenv("IMAGE_BUCKET", "chat_images")
    max_image_bytes: int = int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))

    # None means wait for the upstream indefinitely
    http_timeout_seconds: Optional[float] = _optional_float(os.getenv("HTTP_TIMEOUT_SECONDS"))

    debug: bool = os.getenv("DEBUG_LOGGING", "false").lower() == "true"

    @property
    def supabase_api_key(self) -> Optional[str]:
        """Key sent as the `apikey` header; the service role key wins when both are set"""
        return self.supabase_service_role_key or self.supabase_anon_key


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
