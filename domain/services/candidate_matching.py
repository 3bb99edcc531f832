import json
import logging
from typing import Dict, List, Optional

from domain.errors import NotFoundError, ValidationFailed
from infra.llm.client import call_tool
from infra.llm.prompts import CANDIDATE_MATCH_PROMPT, CANDIDATE_MATCH_SYSTEM
from infra.llm.tools import RANK_CANDIDATES_TOOL
from infra.repositories.cvs_repository import CVsRepository
from infra.repositories.jobs_repository import JobsRepository
from infra.repositories.profiles_repository import ProfilesRepository

logger = logging.getLogger(__name__)
jobs_repo = JobsRepository()
profiles_repo = ProfilesRepository()
cvs_repo = CVsRepository()


def build_candidates(seekers: List[Dict], latest_cvs: Dict[str, Dict]) -> List[Dict]:
    candidates = []
    for seeker in seekers:
        cv = latest_cvs.get(seeker["user_id"]) or {}
        account = seeker.get("profile") or {}
        candidates.append({
            "id": seeker["user_id"],
            "name": account.get("full_name") or "Unknown",
            "email": account.get("email") or "",
            "skills": seeker.get("skills") or [],
            "experience_years": seeker.get("experience_years") or 0,
            "location": seeker.get("location") or "Not specified",
            "bio": seeker.get("bio") or "",
            "cv_analysis": cv.get("ai_analysis"),
            "cv_score": cv.get("ai_score") or 0,
        })
    return candidates


def rank(candidates: List[Dict], matches: List[Dict]) -> List[Dict]:
    """Attach candidate records to the model's matches, dropping unknown ids."""
    by_id = {c["id"]: c for c in candidates}
    enriched = []
    for match in matches:
        candidate = by_id.get(str(match.get("candidate_id")))
        if candidate is None:
            logger.warning("Model returned unknown candidate id %s", match.get("candidate_id"))
            continue
        enriched.append({**match, "candidate": candidate})
    enriched.sort(key=lambda m: float(m.get("match_score") or 0), reverse=True)
    return enriched


async def match_candidates(company_id: str, job_id: Optional[str]) -> List[Dict]:
    if not job_id:
        raise ValidationFailed("Job ID is required")
    job = jobs_repo.get_owned(job_id, company_id)
    if not job:
        raise NotFoundError("Job not found or access denied")

    seekers = profiles_repo.list_seekers()
    if not seekers:
        return []
    candidates = build_candidates(seekers, cvs_repo.latest_by_user())
    logger.info("Found %d seekers for job %s, ranking with AI", len(candidates), job_id)

    prompt = CANDIDATE_MATCH_PROMPT.format(
        title=job["title"],
        location=job["location"],
        requirements=job["requirements"],
        description=job["description"],
        skills=", ".join(job.get("skills_required") or []) or "Not specified",
        candidates=json.dumps(candidates, indent=2, default=str),
    )
    result = await call_tool(CANDIDATE_MATCH_SYSTEM, prompt, RANK_CANDIDATES_TOOL)
    ranked = rank(candidates, result.get("matches") or [])
    logger.info("Matched %d candidates", len(ranked))
    return ranked
