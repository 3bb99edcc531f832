from fastapi import APIRouter

from domain.schemas import ParseJobRequest
from domain.services.job_parsing import parse_job_description

router = APIRouter()


@router.post("/parse-job-description")
async def parse_description(body: ParseJobRequest):
    return {"jobData": await parse_job_description(body.description)}
