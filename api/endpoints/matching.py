from typing import Dict

from fastapi import APIRouter, Depends

from api.deps import get_current_user, require_company
from domain.errors import ForbiddenError
from domain.schemas import MatchCandidatesRequest, MatchJobsRequest
from domain.services.candidate_matching import match_candidates
from domain.services.job_matching import match_jobs

router = APIRouter()


@router.post("/match-jobs")
async def jobs_for_seeker(body: MatchJobsRequest, user: Dict = Depends(get_current_user)):
    if body.userId and body.userId != user["id"]:
        raise ForbiddenError("You can only match jobs for your own profile")
    return await match_jobs(body.userId, body.cvAnalysis)


@router.post("/match-candidates")
async def candidates_for_job(body: MatchCandidatesRequest, user: Dict = Depends(require_company)):
    return {"candidates": await match_candidates(user["id"], body.jobId)}
