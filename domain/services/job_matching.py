import asyncio
import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from app.settings import settings
from domain.errors import AppError, ValidationFailed
from domain.schemas import JobMatchScore
from domain.services.footprint import collect_footprint
from infra.external.jsearch import search_external_jobs
from infra.llm.client import complete_text, extract_json_object
from infra.llm.prompts import (
    JOB_MATCH_PROMPT,
    JOB_MATCH_SYSTEM,
    LOCATION_BOOST,
    LOCATION_PENALTY,
)
from infra.repositories.applications_repository import ApplicationsRepository
from infra.repositories.jobs_repository import JobsRepository
from infra.repositories.profiles_repository import ProfilesRepository

logger = logging.getLogger(__name__)
jobs_repo = JobsRepository()
profiles_repo = ProfilesRepository()
applications_repo = ApplicationsRepository()

MAX_AUTO_APPLICATIONS = 10


def _join(values, default: str) -> str:
    return ", ".join(str(v) for v in values) if values else default


def is_location_match(seeker_location: str, job_location: str) -> bool:
    if not seeker_location or not job_location:
        return False
    seeker = seeker_location.lower()
    job = job_location.lower()
    return seeker in job or job in seeker or job == "remote"


def location_directive(seeker_location: str, job_location: str) -> str:
    if is_location_match(seeker_location, job_location):
        return LOCATION_BOOST
    if seeker_location and (job_location or "").lower() != "remote":
        return LOCATION_PENALTY
    return ""


def build_candidate_profile(cv_analysis: Dict, location: str,
                            footprint: Optional[Dict]) -> str:
    strengths = _join(cv_analysis.get("strengths"), "None listed")
    lines = [
        "CV Analysis:",
        f"- Score: {cv_analysis.get('score') or 0}/100",
        f"- Strengths: {strengths}",
        f"- Skills: {_join(cv_analysis.get('strengths'), '')}",
        f"- Missing Skills: {_join(cv_analysis.get('missing_skills'), 'None')}",
        f"- Location: {location or 'Not specified'}",
    ]
    github = (footprint or {}).get("githubData")
    if github:
        lines += [
            "",
            "GitHub Profile:",
            f"- Public Repos: {(github.get('profile') or {}).get('publicRepos') or 0}",
            f"- Languages: {_join((github.get('stats') or {}).get('languages'), 'N/A')}",
            f"- Recent Commits: {(github.get('stats') or {}).get('totalCommits') or 0}",
        ]
    so = (footprint or {}).get("stackoverflowData")
    if so:
        tags = [t.get("name") for t in (so.get("topTags") or [])[:5]]
        lines += [
            "",
            "StackOverflow Profile:",
            f"- Reputation: {(so.get('profile') or {}).get('reputation') or 0}",
            f"- Top Tags: {_join(tags, 'N/A')}",
        ]
    return "\n".join(lines)


async def score_job(job: Dict, candidate_profile: str, location: str) -> Optional[JobMatchScore]:
    prompt = JOB_MATCH_PROMPT.format(
        candidate_profile=candidate_profile,
        title=job.get("title"),
        location=job.get("location"),
        description=job.get("description"),
        requirements=job.get("requirements"),
        skills=_join(job.get("skills_required"), "Not specified"),
        location_directive=location_directive(location, job.get("location") or ""),
    )
    try:
        raw = await complete_text(JOB_MATCH_SYSTEM, prompt, temperature=0.3, max_tokens=500)
        return JobMatchScore.model_validate(extract_json_object(raw))
    except AppError as exc:
        logger.error("AI scoring failed for job %s: %s", job.get("id"), exc.message)
    except (ValueError, ValidationError):
        logger.error("Failed to parse match response for job %s", job.get("id"))
    return None


def _to_match(job: Dict, score: JobMatchScore) -> Dict:
    return {
        "job_id": job["id"],
        "job_title": job.get("title"),
        "job_location": job.get("location"),
        "company_id": job.get("company_id"),
        "match_score": score.match_score,
        "matching_skills": score.matching_skills,
        "missing_skills": score.missing_skills,
        "recommendation": score.recommendation,
        "job_details": job,
        "external_url": job.get("external_url"),
        "external_source": job.get("external_source"),
        "is_external": not job.get("company_id"),
    }


async def match_jobs(user_id: Optional[str], cv_analysis: Optional[Dict]) -> Dict:
    if not cv_analysis or not user_id:
        raise ValidationFailed("CV analysis and userId are required")
    logger.info("Matching jobs for user %s", user_id)

    seeker = profiles_repo.get_seeker_profile(user_id)
    location = (seeker or {}).get("location") or ""
    footprint = await collect_footprint(seeker)

    jobs: List[Dict] = list(jobs_repo.list_active())
    query = " ".join(cv_analysis.get("strengths") or []) or "jobs"
    jobs.extend(await search_external_jobs(query))
    if not jobs:
        return {"matches": [], "total": 0, "message": "No jobs available for matching"}
    logger.info("Found %d jobs to match (internal + external)", len(jobs))

    candidate_profile = build_candidate_profile(cv_analysis, location, footprint)
    semaphore = asyncio.Semaphore(max(1, settings.MATCH_CONCURRENCY))

    async def _score(job: Dict):
        async with semaphore:
            return job, await score_job(job, candidate_profile, location)

    results = await asyncio.gather(*[_score(job) for job in jobs])
    matches = [
        _to_match(job, score) for job, score in results
        if score is not None and score.match_score >= settings.MATCH_THRESHOLD
    ]
    matches.sort(key=lambda m: m["match_score"], reverse=True)
    logger.info("Found %d matches at or above %.0f%%", len(matches), settings.MATCH_THRESHOLD)

    internal = [m for m in matches if not m["is_external"]][:MAX_AUTO_APPLICATIONS]
    for match in internal:
        try:
            applications_repo.create_if_absent(user_id, match["job_id"], match["match_score"])
        except Exception:
            logger.exception("Error creating application for job %s", match["job_id"])

    return {"matches": matches, "total": len(matches)}
