from typing import Dict, List
from sqlalchemy import select
from infra.db.session import SessionLocal
from infra.db.models import Application
from infra.repositories.rows import row_to_dict


class ApplicationsRepository:
    def create_if_absent(self, seeker_id: str, job_id: str, match_score: float) -> bool:
        """Returns False when the seeker already has an application for the job."""
        with SessionLocal() as s:
            existing = s.scalar(select(Application).where(
                Application.seeker_id == seeker_id, Application.job_id == job_id))
            if existing:
                return False
            s.add(Application(seeker_id=seeker_id, job_id=job_id,
                              match_score=match_score, status="pending"))
            s.commit()
            return True

    def list_for_seeker(self, seeker_id: str) -> List[Dict]:
        with SessionLocal() as s:
            recs = s.scalars(select(Application).where(Application.seeker_id == seeker_id)).all()
            return [row_to_dict(r) for r in recs]
