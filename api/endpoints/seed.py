from fastapi import APIRouter

from domain.services.seeding import seed_test_candidates

router = APIRouter()


@router.post("/seed-test-candidates")
def seed():
    return seed_test_candidates()
