import base64
import binascii
import logging
from typing import AsyncIterator, Dict, List, Optional

from app.settings import settings
from domain.errors import ValidationFailed
from infra.external.transcription import transcribe_audio
from infra.llm.client import complete_text, open_chat_stream
from infra.llm.prompts import (
    BEHAVIOR_PROMPT,
    INTERVIEW_KICKOFF,
    INTERVIEW_PROFILE_PROMPT,
    INTERVIEWER_PROMPT,
)
from infra.repositories.interviews_repository import InterviewsRepository

logger = logging.getLogger(__name__)
interviews_repo = InterviewsRepository()

DEFAULT_JOB_TITLE = "general"


def interviewer_messages(messages: List[Dict], job_title: Optional[str]) -> List[Dict]:
    """Conversation sent upstream: interviewer persona first, caller system turns dropped."""
    convo = [m for m in messages if m.get("role") != "system"]
    if not convo:
        convo = [{"role": "user", "content": INTERVIEW_KICKOFF}]
    system = INTERVIEWER_PROMPT.format(job_title=job_title or DEFAULT_JOB_TITLE)
    return [{"role": "system", "content": system}] + convo


async def stream_interview_reply(messages: List[Dict], job_title: Optional[str]) -> AsyncIterator[bytes]:
    logger.info("Interview chat turn for %s (%d messages)", job_title, len(messages))
    return await open_chat_stream(interviewer_messages(messages, job_title))


def as_data_url(image: str) -> str:
    if image.startswith("data:"):
        return image
    return f"data:image/jpeg;base64,{image}"


async def analyze_behavior(image: Optional[str], job_title: Optional[str]) -> str:
    if not image:
        raise ValidationFailed("No image provided")
    role = f" for a {job_title} position" if job_title else ""
    feedback = await complete_text(
        BEHAVIOR_PROMPT.format(role=role),
        [
            {"type": "text", "text": "Analyze the candidate's body language in this frame."},
            {"type": "image_url", "image_url": {"url": as_data_url(image)}},
        ],
        model=settings.AI_VISION_MODEL,
        max_tokens=150,
    )
    return feedback.strip()


def decode_audio(audio: Optional[str]) -> bytes:
    if not audio:
        raise ValidationFailed("No audio data provided")
    if audio.startswith("data:") and "," in audio:
        audio = audio.split(",", 1)[1]
    try:
        return base64.b64decode(audio, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationFailed("Invalid audio encoding") from exc


async def transcribe(audio: Optional[str]) -> str:
    text = await transcribe_audio(decode_audio(audio))
    logger.info("Transcribed %d characters", len(text))
    return text


def _transcript_text(messages: List[Dict]) -> str:
    speaker = {"user": "Candidate", "assistant": "Interviewer"}
    return "\n\n".join(
        f"{speaker.get(m.get('role'), m.get('role'))}: {m.get('content')}"
        for m in messages if m.get("role") != "system"
    )


async def generate_profile(messages: List[Dict], behavioral_feedback: List[str],
                           job_title: Optional[str]) -> str:
    if not messages:
        raise ValidationFailed("No interview messages provided")
    feedback = "\n".join(f"- {f}" for f in behavioral_feedback) or "No behavioral analysis available."
    user = (
        f"Position: {job_title or DEFAULT_JOB_TITLE}\n\n"
        f"Interview Transcript:\n{_transcript_text(messages)}\n\n"
        f"Behavioral Observations:\n{feedback}"
    )
    return await complete_text(INTERVIEW_PROFILE_PROMPT, user)


def save_session(user_id: str, job_title: str, transcript: List[Dict],
                 ai_feedback: Optional[Dict], score: Optional[float],
                 duration_seconds: Optional[int], behavioral_consent: bool) -> str:
    session_id = interviews_repo.save(
        user_id=user_id,
        job_title=job_title,
        transcript=transcript,
        ai_feedback=ai_feedback,
        score=score,
        duration_seconds=duration_seconds,
        behavioral_consent=behavioral_consent,
    )
    logger.info("Saved interview session %s for user %s", session_id, user_id)
    return session_id
