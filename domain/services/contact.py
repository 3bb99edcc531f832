import logging
from typing import Dict, Optional

from infra.external.resend import render_contact_email, send_email
from infra.repositories.audit_repository import NotificationsRepository
from infra.repositories.profiles_repository import ProfilesRepository

logger = logging.getLogger(__name__)
profiles_repo = ProfilesRepository()
notifications_repo = NotificationsRepository()


async def contact_candidate(sender: Dict, candidate_email: str, candidate_name: str,
                            subject: str, message: str, company_name: str,
                            job_title: Optional[str] = None) -> Dict:
    logger.info("Sending contact email to %s from %s", candidate_email, company_name)
    data = await send_email(
        to=candidate_email,
        subject=subject,
        html_body=render_contact_email(company_name, message, job_title),
        reply_to=sender.get("email"),
    )

    candidate = profiles_repo.get_by_email(candidate_email)
    if candidate:
        notifications_repo.add(
            candidate["id"],
            "contact",
            f"New message from {company_name}",
            f"{company_name} contacted you: {subject}",
        )
    else:
        logger.info("No profile for %s (%s), skipping notification", candidate_email, candidate_name)
    return {"success": True, "data": data}
