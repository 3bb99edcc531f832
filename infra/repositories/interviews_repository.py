from datetime import datetime, timezone
from typing import Dict, List, Optional
from sqlalchemy import select
from infra.db.session import SessionLocal
from infra.db.models import InterviewSessionRecord
from infra.repositories.rows import row_to_dict


class InterviewsRepository:
    def save(self, user_id: str, job_title: str, transcript: List[Dict],
             ai_feedback: Optional[Dict], score: Optional[float],
             duration_seconds: Optional[int], behavioral_consent: bool) -> str:
        with SessionLocal() as s:
            rec = InterviewSessionRecord(
                user_id=user_id, job_title=job_title, transcript=transcript,
                ai_feedback=ai_feedback, score=score,
                duration_seconds=duration_seconds,
                behavioral_consent_given=behavioral_consent,
                consent_timestamp=datetime.now(timezone.utc) if behavioral_consent else None,
            )
            s.add(rec)
            s.commit()
            return rec.id

    def list_for_user(self, user_id: str) -> List[Dict]:
        with SessionLocal() as s:
            recs = s.scalars(select(InterviewSessionRecord)
                             .where(InterviewSessionRecord.user_id == user_id)).all()
            return [row_to_dict(r) for r in recs]
