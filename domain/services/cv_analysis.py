import logging
import os
import time
from typing import Dict, List, Optional

from pydantic import ValidationError

from app.settings import settings
from domain.errors import ValidationFailed
from domain.schemas import CVAnalysis, FALLBACK_CV_ANALYSIS
from domain.services.job_matching import match_jobs
from infra.llm.client import complete_text, extract_json_object
from infra.llm.prompts import CV_ANALYSIS_PROMPT, REWRITE_RESUME_PROMPT
from infra.pdf.parser import parse_pdf_text
from infra.repositories.cvs_repository import CVsRepository

logger = logging.getLogger(__name__)
cvs_repo = CVsRepository()

PDF_TYPES = {"application/pdf"}
TEXT_TYPES = {"text/plain"}
WORD_TYPES = {
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def parse_analysis(raw_text: str) -> CVAnalysis:
    try:
        return CVAnalysis.model_validate(extract_json_object(raw_text))
    except (ValueError, ValidationError) as exc:
        logger.error("Failed to parse AI response as JSON: %s", exc)
        return FALLBACK_CV_ANALYSIS.model_copy(deep=True)


async def analyze_cv(cv_text: Optional[str]) -> CVAnalysis:
    if not cv_text or not cv_text.strip():
        raise ValidationFailed("No CV text provided")
    raw = await complete_text(
        CV_ANALYSIS_PROMPT,
        f"Please analyze this CV:\n\n{cv_text}",
        temperature=0.7,
        max_tokens=2000,
    )
    logger.info("AI analysis received: %s", raw[:200])
    return parse_analysis(raw)


def _bullets(values) -> str:
    if not values:
        return "N/A"
    if isinstance(values, str):
        return values
    return ", ".join(str(v) for v in values)


async def rewrite_resume(cv_text: Optional[str], analysis: Optional[Dict],
                         target_role: Optional[str] = None) -> str:
    if not cv_text or not cv_text.strip():
        raise ValidationFailed("No CV text provided")
    analysis = analysis or {}
    system = REWRITE_RESUME_PROMPT.format(
        target_role_line=f"8. Tailor the content for the role: {target_role}\n" if target_role else "")
    user = (
        f"Original Resume:\n{cv_text}\n\n"
        f"Analysis:\nScore: {analysis.get('score') or 'N/A'}\n"
        f"Strengths: {_bullets(analysis.get('strengths'))}\n"
        f"Improvements Needed: {_bullets(analysis.get('improvements'))}\n"
        f"Missing Skills: {_bullets(analysis.get('missing_skills'))}\n\n"
        "Please rewrite this resume to address the identified weaknesses and make it more impactful."
    )
    return await complete_text(system, user, temperature=0.8, max_tokens=3000)


def extract_upload_text(content: bytes, content_type: str) -> str:
    if content_type in PDF_TYPES:
        return parse_pdf_text(content)
    if content_type in TEXT_TYPES:
        return content.decode("utf-8", errors="replace")
    if content_type in WORD_TYPES:
        raise ValidationFailed("Word documents cannot be read yet, please upload a PDF or TXT file")
    raise ValidationFailed("Please upload a PDF, DOC, DOCX, or TXT file")


def _safe_file_name(file_name: str) -> str:
    # stored files stay flat inside the user's directory
    name = os.path.basename((file_name or "").replace("\\", "/")).lstrip(".")
    return name.replace(" ", "_") or "upload"


async def upload_and_analyze(user_id: str, file_name: str, content_type: str,
                             content: bytes) -> Dict:
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise ValidationFailed("Please upload a file smaller than 5MB", status_code=413)
    text = extract_upload_text(content, content_type)

    user_dir = os.path.join(settings.STORAGE_DIR, user_id)
    os.makedirs(user_dir, exist_ok=True)
    stored_name = f"{int(time.time() * 1000)}_{_safe_file_name(file_name)}"
    path = os.path.join(user_dir, stored_name)
    with open(path, "wb") as out:
        out.write(content)

    analysis = await analyze_cv(text[:settings.MAX_CV_CHARS])
    cv_id = cvs_repo.save(user_id=user_id, file_name=file_name, file_path=path,
                          file_size=len(content), analysis=analysis.model_dump())
    logger.info("Stored CV %s for user %s (score=%s)", cv_id, user_id, analysis.score)

    matches: List[Dict] = []
    try:
        result = await match_jobs(user_id, analysis.model_dump())
        matches = result["matches"]
    except Exception:
        logger.exception("Job matching after CV upload failed for user %s", user_id)
    return {"cv_id": cv_id, "analysis": analysis, "matches": matches}
