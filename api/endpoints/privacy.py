from typing import Dict

from fastapi import APIRouter, Depends, Request

from api.deps import get_current_user
from domain.services.data_export import export_user_data

router = APIRouter()


@router.get("/export-user-data")
def export(request: Request, user: Dict = Depends(get_current_user)):
    return export_user_data(
        user,
        ip_address=request.headers.get("x-forwarded-for") or "unknown",
        user_agent=request.headers.get("user-agent") or "unknown",
    )
