from typing import Dict

from fastapi import APIRouter, Depends

from api.deps import get_current_user
from domain.errors import ValidationFailed
from domain.schemas import FootprintRequest, GithubProfileRequest, StackOverflowProfileRequest
from domain.services.footprint import analyze_footprint, ensure_footprint_consent
from infra.external.github import fetch_github_footprint
from infra.external.stackoverflow import fetch_stackoverflow_footprint

router = APIRouter()


@router.post("/fetch-github-profile")
async def github_profile(body: GithubProfileRequest, user: Dict = Depends(get_current_user)):
    if not body.username:
        raise ValidationFailed("GitHub username is required")
    ensure_footprint_consent(user["id"])
    return await fetch_github_footprint(body.username)


@router.post("/fetch-stackoverflow-profile")
async def stackoverflow_profile(body: StackOverflowProfileRequest,
                                user: Dict = Depends(get_current_user)):
    if body.userId in (None, ""):
        raise ValidationFailed("StackOverflow user ID is required")
    ensure_footprint_consent(user["id"])
    return await fetch_stackoverflow_footprint(str(body.userId))


@router.post("/analyze-footprint")
async def footprint_report(body: FootprintRequest, user: Dict = Depends(get_current_user)):
    ensure_footprint_consent(user["id"])
    analysis = await analyze_footprint(body.githubData, body.stackoverflowData, body.profileData)
    return {"analysis": analysis}
