import logging

import httpx

from app.settings import settings
from domain.errors import ExternalServiceError, GatewayError

logger = logging.getLogger(__name__)


async def transcribe_audio(audio: bytes, filename: str = "audio.webm") -> str:
    if not settings.GROQ_API_KEY:
        raise GatewayError("GROQ_API_KEY is not configured")
    files = {"file": (filename, audio, "audio/webm")}
    data = {"model": settings.TRANSCRIBE_MODEL}
    headers = {"Authorization": f"Bearer {settings.GROQ_API_KEY}"}
    try:
        async with httpx.AsyncClient(timeout=60) as client:
            r = await client.post(settings.GROQ_TRANSCRIBE_URL, headers=headers,
                                  files=files, data=data)
    except httpx.RequestError as exc:
        raise ExternalServiceError("Failed to transcribe audio") from exc
    if r.status_code != 200:
        logger.error("Groq API error %s: %s", r.status_code, r.text[:500])
        raise ExternalServiceError("Failed to transcribe audio")
    return r.json().get("text", "")
