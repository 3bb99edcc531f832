from typing import Dict, List, Optional
from sqlalchemy import select
from infra.db.session import SessionLocal
from infra.db.models import DataAccessLog, Notification
from infra.repositories.rows import row_to_dict


class AuditRepository:
    def log(self, user_id: str, action_type: str, resource_type: str,
            ip_address: str = "unknown", user_agent: str = "unknown",
            resource_id: Optional[str] = None) -> None:
        with SessionLocal() as s:
            s.add(DataAccessLog(user_id=user_id, action_type=action_type,
                                resource_type=resource_type, resource_id=resource_id,
                                ip_address=ip_address, user_agent=user_agent))
            s.commit()

    def list_for_user(self, user_id: str) -> List[Dict]:
        with SessionLocal() as s:
            recs = s.scalars(select(DataAccessLog).where(DataAccessLog.user_id == user_id)).all()
            return [row_to_dict(r) for r in recs]


class NotificationsRepository:
    def add(self, user_id: str, type: str, title: str, message: str) -> None:
        with SessionLocal() as s:
            s.add(Notification(user_id=user_id, type=type, title=title, message=message))
            s.commit()

    def list_for_user(self, user_id: str) -> List[Dict]:
        with SessionLocal() as s:
            recs = s.scalars(select(Notification).where(Notification.user_id == user_id)).all()
            return [row_to_dict(r) for r in recs]
