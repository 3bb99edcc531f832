from fastapi import APIRouter
from api.endpoints.cv import router as cv_router
from api.endpoints.matching import router as matching_router
from api.endpoints.jobs import router as jobs_router
from api.endpoints.footprint import router as footprint_router
from api.endpoints.insights import router as insights_router
from api.endpoints.interview import router as interview_router
from api.endpoints.privacy import router as privacy_router
from api.endpoints.contact import router as contact_router
from api.endpoints.seed import router as seed_router
from api.endpoints.health import router as health_router

api_router = APIRouter()
api_router.include_router(cv_router, tags=["cv"])
api_router.include_router(matching_router, tags=["matching"])
api_router.include_router(jobs_router, tags=["jobs"])
api_router.include_router(footprint_router, tags=["footprint"])
api_router.include_router(insights_router, tags=["insights"])
api_router.include_router(interview_router, tags=["interview"])
api_router.include_router(privacy_router, tags=["privacy"])
api_router.include_router(contact_router, tags=["contact"])
api_router.include_router(seed_router, tags=["seed"])
api_router.include_router(health_router, tags=["health"])
