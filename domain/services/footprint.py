import logging
import re
from typing import Dict, Optional

from domain.errors import AppError, ForbiddenError
from infra.external.github import fetch_github_footprint
from infra.external.stackoverflow import fetch_stackoverflow_footprint
from infra.llm.client import complete_text
from infra.llm.prompts import FOOTPRINT_INSTRUCTIONS, FOOTPRINT_SYSTEM
from infra.repositories.profiles_repository import ProfilesRepository

logger = logging.getLogger(__name__)
profiles_repo = ProfilesRepository()

GITHUB_USER_RE = re.compile(r"github\.com/([^/\s?#]+)")
STACKOVERFLOW_USER_RE = re.compile(r"stackoverflow\.com/users/(\d+)")


def ensure_footprint_consent(user_id: str) -> None:
    prefs = profiles_repo.get_privacy_preferences(user_id)
    if prefs is not None and not prefs.get("footprint_scanning_consent"):
        raise ForbiddenError("Footprint scanning consent has not been given")


async def collect_footprint(seeker_profile: Optional[Dict]) -> Optional[Dict]:
    """GitHub/StackOverflow data for the links on a seeker profile, None without links."""
    if not seeker_profile:
        return None
    github_url = seeker_profile.get("github_url") or ""
    so_url = seeker_profile.get("twitter_url") or ""
    if not github_url and not so_url:
        return None

    github_data = None
    stackoverflow_data = None
    gh = GITHUB_USER_RE.search(github_url)
    if gh:
        try:
            github_data = await fetch_github_footprint(gh.group(1))
        except AppError as exc:
            logger.error("Error fetching GitHub footprint for %s: %s", gh.group(1), exc.message)
    so = STACKOVERFLOW_USER_RE.search(so_url)
    if so:
        try:
            stackoverflow_data = await fetch_stackoverflow_footprint(so.group(1))
        except AppError as exc:
            logger.error("Error fetching StackOverflow footprint for %s: %s", so.group(1), exc.message)
    return {"githubData": github_data, "stackoverflowData": stackoverflow_data}


def _join(values, default: str = "N/A") -> str:
    return ", ".join(str(v) for v in values) if values else default


def build_footprint_prompt(github: Optional[Dict], stackoverflow: Optional[Dict],
                           profile: Optional[Dict]) -> str:
    parts = ["Analyze this developer's public footprint:\n"]
    if github:
        p = github.get("profile") or {}
        stats = github.get("stats") or {}
        repos = "\n".join(
            f"- {r.get('name')}: {r.get('description') or 'No description'} "
            f"({r.get('language') or 'N/A'}, stars {r.get('stars') or 0})"
            for r in github.get("topRepos") or []
        ) or "None"
        parts.append(
            "**GitHub Profile:**\n"
            f"- Name: {p.get('name') or 'N/A'}\n"
            f"- Location: {p.get('location') or 'N/A'}\n"
            f"- Bio: {p.get('bio') or 'N/A'}\n"
            f"- Public Repos: {p.get('publicRepos') or 0}\n"
            f"- Followers: {p.get('followers') or 0}\n"
            f"- Recent Commits: {stats.get('totalCommits') or 0}\n"
            f"- Languages: {_join(stats.get('languages'))}\n\n"
            f"**Top Repositories:**\n{repos}\n"
        )
    if stackoverflow:
        p = stackoverflow.get("profile") or {}
        stats = stackoverflow.get("stats") or {}
        badges = p.get("badges") or {}
        tags = "\n".join(
            f"- {t.get('name')} ({t.get('count')} posts)" for t in stackoverflow.get("topTags") or []
        ) or "None"
        parts.append(
            "**StackOverflow Profile:**\n"
            f"- Reputation: {p.get('reputation') or 0}\n"
            f"- Questions: {stats.get('questionCount') or 0}\n"
            f"- Answers: {stats.get('answerCount') or 0}\n"
            f"- Badges: gold {badges.get('gold') or 0}, silver {badges.get('silver') or 0}, "
            f"bronze {badges.get('bronze') or 0}\n\n"
            f"**Top Expertise Tags:**\n{tags}\n"
        )
    if profile:
        parts.append(
            "**Profile Information:**\n"
            f"- Skills: {_join(profile.get('skills'))}\n"
            f"- Experience: {profile.get('experience_years') or 0} years\n"
            f"- Location: {profile.get('location') or 'N/A'}\n"
        )
    parts.append(FOOTPRINT_INSTRUCTIONS)
    return "\n".join(parts)


async def analyze_footprint(github: Optional[Dict], stackoverflow: Optional[Dict],
                            profile: Optional[Dict]) -> str:
    return await complete_text(FOOTPRINT_SYSTEM, build_footprint_prompt(github, stackoverflow, profile))
