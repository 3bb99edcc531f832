import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from interview.sse import SSEDecoder, delta_content

logger = logging.getLogger(__name__)


class InterviewApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class RateLimitedError(InterviewApiError):
    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(429, message)
        self.retry_after = retry_after


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body)
    return str(body)


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("retry-after")
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def _raise_for_status(response: httpx.Response) -> None:
    if response.status_code == 429:
        raise RateLimitedError(_error_message(response), _retry_after(response))
    if response.status_code >= 400:
        raise InterviewApiError(response.status_code, _error_message(response))


class InterviewApiClient:
    """Async client for the interview routes of the career service."""

    def __init__(self, base_url: str, token: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None, timeout: float = 60.0):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url, headers=headers, timeout=httpx.Timeout(timeout, read=None))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def stream_chat(self, messages: List[Dict[str, str]], job_title: str) -> AsyncIterator[str]:
        """Yield assistant content deltas as they arrive."""
        payload = {"messages": messages, "jobTitle": job_title}
        async with self._client.stream("POST", "/interview-chat", json=payload) as response:
            if response.status_code != 200:
                await response.aread()
                _raise_for_status(response)
                raise InterviewApiError(response.status_code, "Unexpected response")
            decoder = SSEDecoder()
            async for text in response.aiter_text():
                for event in decoder.feed(text):
                    content = delta_content(event)
                    if content:
                        yield content
                if decoder.done:
                    return
            for event in decoder.flush():
                content = delta_content(event)
                if content:
                    yield content

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.post(path, json=payload)
        _raise_for_status(response)
        return response.json()

    async def analyze_frame(self, image_b64: str, job_title: Optional[str] = None) -> str:
        data = await self._post("/analyze-behavior", {"image": image_b64, "jobTitle": job_title})
        return data.get("feedback") or ""

    async def transcribe(self, audio_b64: str) -> str:
        data = await self._post("/transcribe-audio", {"audio": audio_b64})
        return data.get("text") or ""

    async def generate_profile(self, messages: List[Dict[str, str]],
                               behavioral_feedback: List[str], job_title: str) -> str:
        data = await self._post("/generate-profile", {
            "messages": messages,
            "behavioralFeedback": behavioral_feedback,
            "jobTitle": job_title,
        })
        return data.get("profileAnalysis") or ""

    async def save_session(self, job_title: str, transcript: List[Dict[str, str]],
                           ai_feedback: Optional[Dict[str, Any]], score: Optional[float],
                           duration_seconds: int, behavioral_consent: bool) -> str:
        data = await self._post("/interview-sessions", {
            "jobTitle": job_title,
            "transcript": transcript,
            "aiFeedback": ai_feedback,
            "score": score,
            "durationSeconds": duration_seconds,
            "behavioralConsent": behavioral_consent,
        })
        logger.info("Saved interview session %s", data.get("id"))
        return data.get("id") or ""
