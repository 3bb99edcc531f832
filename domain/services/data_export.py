import logging
from datetime import datetime, timezone
from typing import Dict

from infra.repositories.applications_repository import ApplicationsRepository
from infra.repositories.audit_repository import AuditRepository
from infra.repositories.cvs_repository import CVsRepository
from infra.repositories.interviews_repository import InterviewsRepository
from infra.repositories.profiles_repository import ProfilesRepository

logger = logging.getLogger(__name__)
profiles_repo = ProfilesRepository()
cvs_repo = CVsRepository()
applications_repo = ApplicationsRepository()
interviews_repo = InterviewsRepository()
audit_repo = AuditRepository()


def export_user_data(user: Dict, ip_address: str = "unknown", user_agent: str = "unknown") -> Dict:
    """Everything stored about a user, with the export itself recorded in the audit log."""
    user_id = user["id"]
    logger.info("Exporting data for user %s", user_id)
    bundle = {
        "profile": profiles_repo.get(user_id),
        "seeker_profile": profiles_repo.get_seeker_profile(user_id),
        "company_profile": profiles_repo.get_company_profile(user_id),
        "cvs": cvs_repo.list_for_user(user_id),
        "applications": applications_repo.list_for_seeker(user_id),
        "interview_sessions": interviews_repo.list_for_user(user_id),
        "privacy_preferences": profiles_repo.get_privacy_preferences(user_id),
        "audit_logs": audit_repo.list_for_user(user_id),
    }
    audit_repo.log(user_id, "EXPORT", "ALL_DATA", ip_address=ip_address, user_agent=user_agent)

    logger.info("Data export completed for user %s", user_id)
    return {
        "export_date": datetime.now(timezone.utc).isoformat(),
        "user": {"id": user_id, "email": user.get("email"), "created_at": user.get("created_at")},
        **bundle,
    }
