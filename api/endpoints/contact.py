from typing import Dict

from fastapi import APIRouter, Depends

from api.deps import get_current_user
from domain.schemas import ContactEmailRequest
from domain.services.contact import contact_candidate

router = APIRouter()


@router.post("/send-contact-email")
async def send_contact_email(body: ContactEmailRequest, user: Dict = Depends(get_current_user)):
    return await contact_candidate(
        user,
        candidate_email=body.candidateEmail,
        candidate_name=body.candidateName,
        subject=body.subject,
        message=body.message,
        company_name=body.companyName,
        job_title=body.jobTitle,
    )
