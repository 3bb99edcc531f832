from typing import Dict, List, Optional
from sqlalchemy import select
from infra.db.session import SessionLocal
from infra.db.models import Job
from infra.repositories.rows import row_to_dict


class JobsRepository:
    def create(self, company_id: str, title: str, description: str,
               requirements: str, location: str, **fields) -> str:
        with SessionLocal() as s:
            job = Job(company_id=company_id, title=title, description=description,
                      requirements=requirements, location=location, **fields)
            s.add(job)
            s.commit()
            return job.id

    def list_active(self) -> List[Dict]:
        with SessionLocal() as s:
            jobs = s.scalars(select(Job).where(Job.status == "active")).all()
            return [row_to_dict(j) for j in jobs]

    def get_owned(self, job_id: str, company_id: str) -> Optional[Dict]:
        with SessionLocal() as s:
            job = s.get(Job, job_id)
            if not job or job.company_id != company_id:
                return None
            return row_to_dict(job)
