import uuid
from sqlalchemy import (Boolean, Column, String, Float, Integer, Text, DateTime,
                        ForeignKey, JSON, UniqueConstraint)
from sqlalchemy.sql import func
from infra.db.session import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Profile(Base):
    __tablename__ = "profiles"
    id = Column(String, primary_key=True, default=_uuid)
    email = Column(String, nullable=False, unique=True)
    full_name = Column(String, nullable=False)
    user_type = Column(String, nullable=False)   # 'seeker' | 'company'
    avatar_url = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

class ApiToken(Base):
    __tablename__ = "api_tokens"
    token = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

class SeekerProfile(Base):
    __tablename__ = "seeker_profiles"
    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, unique=True)
    bio = Column(Text, nullable=True)
    skills = Column(JSON, nullable=True)
    experience_years = Column(Integer, nullable=True)
    location = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    education = Column(Text, nullable=True)
    certifications = Column(Text, nullable=True)
    job_preferences = Column(Text, nullable=True)
    github_url = Column(String, nullable=True)
    linkedin_url = Column(String, nullable=True)
    twitter_url = Column(String, nullable=True)   # also holds StackOverflow links
    portfolio_url = Column(String, nullable=True)
    desired_salary_min = Column(Integer, nullable=True)
    desired_salary_max = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

class CompanyProfile(Base):
    __tablename__ = "company_profiles"
    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, unique=True)
    company_name = Column(String, nullable=False)
    company_size = Column(String, nullable=True)
    industry = Column(String, nullable=True)
    location = Column(String, nullable=True)
    website = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

class Job(Base):
    __tablename__ = "jobs"
    id = Column(String, primary_key=True, default=_uuid)
    company_id = Column(String, ForeignKey("profiles.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)
    location = Column(String, nullable=False)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    currency = Column(String, nullable=True, default="USD")
    skills_required = Column(JSON, nullable=True)
    job_type = Column(String, nullable=True)
    status = Column(String, nullable=False, default="active")   # active | closed | draft
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

class CV(Base):
    __tablename__ = "cvs"
    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False)
    file_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=True)
    ai_analysis = Column(JSON, nullable=True)
    ai_score = Column(Float, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("seeker_id", "job_id"),)
    id = Column(String, primary_key=True, default=_uuid)
    seeker_id = Column(String, ForeignKey("profiles.id"), nullable=False)
    job_id = Column(String, ForeignKey("jobs.id"), nullable=False)
    cv_id = Column(String, ForeignKey("cvs.id"), nullable=True)
    match_score = Column(Float, nullable=True)
    status = Column(String, nullable=False, default="pending")
    cover_letter = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

class InterviewSessionRecord(Base):
    __tablename__ = "interview_sessions"
    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False)
    job_title = Column(String, nullable=True)
    transcript = Column(JSON, nullable=True)
    ai_feedback = Column(JSON, nullable=True)
    score = Column(Float, nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    behavioral_consent_given = Column(Boolean, nullable=True, default=False)
    consent_timestamp = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

class PrivacyPreference(Base):
    __tablename__ = "privacy_preferences"
    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, unique=True)
    ai_job_matching_consent = Column(Boolean, nullable=True, default=True)
    behavioral_analysis_consent = Column(Boolean, nullable=True, default=False)
    footprint_scanning_consent = Column(Boolean, nullable=True, default=False)
    marketing_consent = Column(Boolean, nullable=True, default=False)
    data_retention_days = Column(Integer, nullable=True, default=365)
    consent_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

class DataAccessLog(Base):
    __tablename__ = "data_access_logs"
    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False)
    action_type = Column(String, nullable=False)
    resource_type = Column(String, nullable=False)
    resource_id = Column(String, nullable=True)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

class Notification(Base):
    __tablename__ = "notifications"
    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False)
    application_id = Column(String, ForeignKey("applications.id"), nullable=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
