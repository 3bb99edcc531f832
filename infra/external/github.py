import logging
from typing import Dict, List
from urllib.parse import quote

import httpx

from app.settings import settings
from domain.errors import ExternalServiceError

logger = logging.getLogger(__name__)

HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": "3amal-Career-App",
}


def summarize_github(profile: Dict, repos: List[Dict], events: List[Dict]) -> Dict:
    total_commits = sum(
        len((e.get("payload") or {}).get("commits") or [])
        for e in events if e.get("type") == "PushEvent"
    )
    languages: List[str] = []
    for repo in repos:
        lang = repo.get("language")
        if lang and lang not in languages:
            languages.append(lang)
    return {
        "profile": {
            "name": profile.get("name"),
            "bio": profile.get("bio"),
            "location": profile.get("location"),
            "company": profile.get("company"),
            "blog": profile.get("blog"),
            "followers": profile.get("followers"),
            "following": profile.get("following"),
            "publicRepos": profile.get("public_repos"),
            "createdAt": profile.get("created_at"),
        },
        "topRepos": [{
            "name": r.get("name"),
            "description": r.get("description"),
            "language": r.get("language"),
            "stars": r.get("stargazers_count"),
            "forks": r.get("forks_count"),
            "url": r.get("html_url"),
        } for r in repos[:5]],
        "stats": {
            "totalCommits": total_commits,
            "languages": languages,
            "recentActivity": len(events),
        },
    }


async def fetch_github_footprint(username: str, client: httpx.AsyncClient | None = None) -> Dict:
    user_url = f"{settings.GITHUB_API_URL.rstrip('/')}/users/{quote(username, safe='')}"
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=20, headers=HEADERS)
    try:
        r = await client.get(user_url, headers=HEADERS)
        if r.status_code != 200:
            raise ExternalServiceError(f"GitHub API error: {r.status_code}")
        profile = r.json()

        repos: List[Dict] = []
        events: List[Dict] = []
        rr = await client.get(f"{user_url}/repos",
                              params={"sort": "updated", "per_page": 10}, headers=HEADERS)
        if rr.status_code == 200 and isinstance(rr.json(), list):
            repos = rr.json()
        else:
            logger.warning("GitHub repos lookup for %s returned %s", username, rr.status_code)
        er = await client.get(f"{user_url}/events/public",
                              params={"per_page": 30}, headers=HEADERS)
        if er.status_code == 200 and isinstance(er.json(), list):
            events = er.json()
        else:
            logger.warning("GitHub events lookup for %s returned %s", username, er.status_code)
    except httpx.RequestError as exc:
        raise ExternalServiceError(f"GitHub API unreachable: {exc}") from exc
    finally:
        if owns_client:
            await client.aclose()
    return summarize_github(profile, repos, events)
