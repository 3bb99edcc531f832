import os
from pydantic import BaseModel
from functools import lru_cache
from dotenv import load_dotenv
load_dotenv()


def _csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings(BaseModel):
    APP_NAME: str = os.getenv("APP_NAME", "3amal Career Platform")
    ENV: str = os.getenv("ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    SQLITE_PATH: str = os.getenv("SQLITE_PATH", "app.sqlite3")
    STORAGE_DIR: str = os.getenv("STORAGE_DIR", "storage")
    CORS_ORIGINS: list[str] = _csv(os.getenv("CORS_ORIGINS", "*"))

    AI_GATEWAY_URL: str = os.getenv(
        "AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions")
    AI_GATEWAY_API_KEY: str | None = os.getenv("AI_GATEWAY_API_KEY") or None
    AI_MODEL: str = os.getenv("AI_MODEL", "google/gemini-2.5-flash")
    AI_VISION_MODEL: str = os.getenv("AI_VISION_MODEL", "google/gemini-2.5-pro")
    AI_TIMEOUT_SECONDS: float = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

    GROQ_API_KEY: str | None = os.getenv("GROQ_API_KEY") or None
    GROQ_TRANSCRIBE_URL: str = os.getenv(
        "GROQ_TRANSCRIBE_URL", "https://api.groq.com/openai/v1/audio/transcriptions")
    TRANSCRIBE_MODEL: str = os.getenv("TRANSCRIBE_MODEL", "whisper-large-v3")

    RAPIDAPI_KEY: str | None = os.getenv("RAPIDAPI_KEY") or None
    JSEARCH_URL: str = os.getenv("JSEARCH_URL", "https://jsearch.p.rapidapi.com/search")
    JSEARCH_COUNTRIES: list[str] = _csv(os.getenv("JSEARCH_COUNTRIES", "ae,sa,eg"))
    JSEARCH_PER_COUNTRY: int = int(os.getenv("JSEARCH_PER_COUNTRY", "20"))

    RESEND_API_KEY: str | None = os.getenv("RESEND_API_KEY") or None
    RESEND_URL: str = os.getenv("RESEND_URL", "https://api.resend.com/emails")
    CONTACT_FROM: str = os.getenv(
        "CONTACT_FROM", "3amal Recruitment <no-reply@3amal.app>")

    GITHUB_API_URL: str = os.getenv("GITHUB_API_URL", "https://api.github.com")
    STACKEXCHANGE_API_URL: str = os.getenv(
        "STACKEXCHANGE_API_URL", "https://api.stackexchange.com/2.3")

    MATCH_THRESHOLD: float = float(os.getenv("MATCH_THRESHOLD", "70"))
    MATCH_CONCURRENCY: int = int(os.getenv("MATCH_CONCURRENCY", "4"))
    MAX_CV_CHARS: int = int(os.getenv("MAX_CV_CHARS", "4000"))
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
