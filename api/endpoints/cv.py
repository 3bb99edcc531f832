from typing import Dict

from fastapi import APIRouter, Depends, File, UploadFile

from api.deps import get_current_user
from domain.errors import ValidationFailed
from domain.schemas import (
    AnalyzeCVRequest,
    AnalyzeCVResponse,
    RewriteResumeRequest,
    UploadCVResponse,
)
from domain.services.cv_analysis import analyze_cv, rewrite_resume, upload_and_analyze

router = APIRouter()


@router.post("/analyze-cv", response_model=AnalyzeCVResponse)
async def analyze(body: AnalyzeCVRequest, user: Dict = Depends(get_current_user)) -> AnalyzeCVResponse:
    return AnalyzeCVResponse(analysis=await analyze_cv(body.cvText))


@router.post("/cvs", response_model=UploadCVResponse)
async def upload(cv: UploadFile = File(default=None),
                 user: Dict = Depends(get_current_user)) -> UploadCVResponse:
    if cv is None:
        raise ValidationFailed("No CV file uploaded")
    content = await cv.read()
    result = await upload_and_analyze(
        user_id=user["id"],
        file_name=cv.filename or "cv.pdf",
        content_type=cv.content_type or "",
        content=content,
    )
    return UploadCVResponse(**result)


@router.post("/rewrite-resume")
async def rewrite(body: RewriteResumeRequest, user: Dict = Depends(get_current_user)):
    text = await rewrite_resume(body.cvText, body.analysis, body.targetRole)
    return {"rewrittenResume": text}
