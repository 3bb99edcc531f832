import secrets
from typing import Dict, List, Optional
from sqlalchemy import select
from infra.db.session import SessionLocal
from infra.db.models import (ApiToken, CompanyProfile, PrivacyPreference, Profile,
                             SeekerProfile)
from infra.repositories.rows import row_to_dict


class ProfilesRepository:
    def create(self, email: str, full_name: str, user_type: str) -> str:
        with SessionLocal() as s:
            profile = Profile(email=email, full_name=full_name, user_type=user_type)
            s.add(profile)
            s.commit()
            return profile.id

    def get(self, user_id: str) -> Optional[Dict]:
        with SessionLocal() as s:
            rec = s.get(Profile, user_id)
            return row_to_dict(rec) if rec else None

    def get_by_email(self, email: str) -> Optional[Dict]:
        with SessionLocal() as s:
            rec = s.scalar(select(Profile).where(Profile.email == email))
            return row_to_dict(rec) if rec else None

    def issue_token(self, user_id: str) -> str:
        token = secrets.token_urlsafe(32)
        with SessionLocal() as s:
            s.add(ApiToken(token=token, user_id=user_id))
            s.commit()
        return token

    def get_by_token(self, token: str) -> Optional[Dict]:
        with SessionLocal() as s:
            rec = s.get(ApiToken, token)
            if not rec:
                return None
            profile = s.get(Profile, rec.user_id)
            return row_to_dict(profile) if profile else None

    def create_seeker_profile(self, user_id: str, **fields) -> str:
        with SessionLocal() as s:
            rec = SeekerProfile(user_id=user_id, **fields)
            s.add(rec)
            s.commit()
            return rec.id

    def get_seeker_profile(self, user_id: str) -> Optional[Dict]:
        with SessionLocal() as s:
            rec = s.scalar(select(SeekerProfile).where(SeekerProfile.user_id == user_id))
            return row_to_dict(rec) if rec else None

    def list_seekers(self) -> List[Dict]:
        """Seeker profiles joined with their account row under 'profile'."""
        with SessionLocal() as s:
            rows = s.execute(
                select(SeekerProfile, Profile).join(Profile, Profile.id == SeekerProfile.user_id)
            ).all()
            out = []
            for seeker, profile in rows:
                d = row_to_dict(seeker)
                d["profile"] = {"id": profile.id, "full_name": profile.full_name,
                                "email": profile.email}
                out.append(d)
            return out

    def create_company_profile(self, user_id: str, company_name: str, **fields) -> str:
        with SessionLocal() as s:
            rec = CompanyProfile(user_id=user_id, company_name=company_name, **fields)
            s.add(rec)
            s.commit()
            return rec.id

    def get_company_profile(self, user_id: str) -> Optional[Dict]:
        with SessionLocal() as s:
            rec = s.scalar(select(CompanyProfile).where(CompanyProfile.user_id == user_id))
            return row_to_dict(rec) if rec else None

    def set_privacy_preferences(self, user_id: str, **consents) -> None:
        with SessionLocal() as s:
            rec = s.scalar(select(PrivacyPreference).where(PrivacyPreference.user_id == user_id))
            if not rec:
                rec = PrivacyPreference(user_id=user_id)
                s.add(rec)
            for key, value in consents.items():
                setattr(rec, key, value)
            s.commit()

    def get_privacy_preferences(self, user_id: str) -> Optional[Dict]:
        with SessionLocal() as s:
            rec = s.scalar(select(PrivacyPreference).where(PrivacyPreference.user_id == user_id))
            return row_to_dict(rec) if rec else None
