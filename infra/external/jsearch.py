import logging
from typing import Dict, List

import httpx

from app.settings import settings

logger = logging.getLogger(__name__)

CURRENCY_BY_COUNTRY = {
    "ae": "AED", "sa": "SAR", "eg": "EGP", "ma": "MAD",
    "qa": "QAR", "kw": "KWD", "om": "OMR", "bh": "BHD",
    "jo": "JOD", "lb": "LBP", "za": "ZAR", "ng": "NGN",
    "ke": "KES", "tn": "TND",
}


def to_internal_job(raw: Dict, country: str) -> Dict:
    qualifications = (raw.get("job_highlights") or {}).get("Qualifications") or []
    return {
        "id": f"external_{raw.get('job_id')}",
        "title": raw.get("job_title") or "N/A",
        "description": raw.get("job_description") or ". ".join(qualifications)
        or "No description available",
        "location": raw.get("job_city") or raw.get("job_country") or "Remote",
        "requirements": ", ".join(qualifications) or "Not specified",
        "salary_min": raw.get("job_min_salary"),
        "salary_max": raw.get("job_max_salary"),
        "currency": CURRENCY_BY_COUNTRY.get(country, "USD"),
        "skills_required": raw.get("job_required_skills") or [],
        "company_id": None,
        "status": "active",
        "job_type": raw.get("job_employment_type") or "Full-time",
        "external_url": raw.get("job_apply_link") or raw.get("job_google_link"),
        "external_source": "jsearch",
    }


async def search_external_jobs(query: str) -> List[Dict]:
    """Recent JSearch postings for each configured country; empty when no key is set."""
    if not settings.RAPIDAPI_KEY:
        return []
    headers = {
        "x-rapidapi-host": httpx.URL(settings.JSEARCH_URL).host,
        "x-rapidapi-key": settings.RAPIDAPI_KEY,
    }
    jobs: List[Dict] = []
    async with httpx.AsyncClient(timeout=30) as client:
        for country in settings.JSEARCH_COUNTRIES:
            params = {"query": query or "jobs", "page": 1, "num_pages": 1,
                      "country": country, "date_posted": "month"}
            try:
                r = await client.get(settings.JSEARCH_URL, params=params, headers=headers)
                r.raise_for_status()
                found = r.json().get("data") or []
            except (httpx.HTTPError, ValueError) as exc:
                logger.error("JSearch lookup for %s failed: %s", country, exc)
                continue
            jobs.extend(to_internal_job(raw, country) for raw in found[:settings.JSEARCH_PER_COUNTRY])
            logger.info("Fetched %d jobs from %s", len(found), country.upper())
    return jobs
