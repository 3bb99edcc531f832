from typing import Dict

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from api.deps import get_current_user
from domain.schemas import (
    AnalyzeBehaviorRequest,
    GenerateProfileRequest,
    InterviewChatRequest,
    SaveInterviewRequest,
    TranscribeRequest,
)
from domain.services import interview

router = APIRouter()

SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


@router.post("/interview-chat")
async def chat(body: InterviewChatRequest):
    # opened before the response so gateway errors still come back as JSON
    stream = await interview.stream_interview_reply(
        [m.model_dump() for m in body.messages], body.jobTitle)
    return StreamingResponse(stream, media_type="text/event-stream", headers=SSE_HEADERS)


@router.post("/analyze-behavior")
async def behavior(body: AnalyzeBehaviorRequest):
    return {"feedback": await interview.analyze_behavior(body.image, body.jobTitle)}


@router.post("/transcribe-audio")
async def transcribe(body: TranscribeRequest):
    return {"text": await interview.transcribe(body.audio)}


@router.post("/generate-profile")
async def profile(body: GenerateProfileRequest):
    report = await interview.generate_profile(
        [m.model_dump() for m in body.messages], body.behavioralFeedback, body.jobTitle)
    return {"profileAnalysis": report}


@router.post("/interview-sessions")
def save(body: SaveInterviewRequest, user: Dict = Depends(get_current_user)):
    session_id = interview.save_session(
        user_id=user["id"],
        job_title=body.jobTitle,
        transcript=[m.model_dump() for m in body.transcript],
        ai_feedback=body.aiFeedback,
        score=body.score,
        duration_seconds=body.durationSeconds,
        behavioral_consent=body.behavioralConsent,
    )
    return {"id": session_id}
