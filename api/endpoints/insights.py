from fastapi import APIRouter

from domain.schemas import CareerInsightsRequest
from domain.services.career_insights import career_insights

router = APIRouter()


@router.post("/career-insights")
async def insights(body: CareerInsightsRequest):
    text = await career_insights(body.cvAnalysis, body.applications, body.profile, body.footprintData)
    return {"insights": text}
