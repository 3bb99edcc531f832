from typing import Dict, List, Optional
from sqlalchemy import select
from infra.db.session import SessionLocal
from infra.db.models import CV
from infra.repositories.rows import row_to_dict


class CVsRepository:
    def save(self, user_id: str, file_name: str, file_path: str,
             file_size: Optional[int], analysis: Dict) -> str:
        with SessionLocal() as s:
            rec = CV(user_id=user_id, file_name=file_name, file_path=file_path,
                     file_size=file_size, ai_analysis=analysis,
                     ai_score=analysis.get("score"))
            s.add(rec)
            s.commit()
            return rec.id

    def list_for_user(self, user_id: str) -> List[Dict]:
        with SessionLocal() as s:
            recs = s.scalars(
                select(CV).where(CV.user_id == user_id).order_by(CV.created_at.desc())
            ).all()
            return [row_to_dict(r) for r in recs]

    def latest_by_user(self) -> Dict[str, Dict]:
        """Newest CV per user id."""
        out: Dict[str, Dict] = {}
        with SessionLocal() as s:
            recs = s.scalars(select(CV).order_by(CV.created_at.desc())).all()
            for r in recs:
                out.setdefault(r.user_id, row_to_dict(r))
        return out
