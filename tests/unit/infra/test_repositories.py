"""Tests for the SQLite repositories."""

import pytest

from infra.repositories.applications_repository import ApplicationsRepository
from infra.repositories.audit_repository import AuditRepository
from infra.repositories.cvs_repository import CVsRepository
from infra.repositories.interviews_repository import InterviewsRepository
from infra.repositories.jobs_repository import JobsRepository


@pytest.mark.unit
class TestProfiles:
    """Accounts, tokens and preferences."""

    def test_token_lookup(self, profiles, seeker) -> None:
        user = profiles.get_by_token(seeker["token"])
        assert user["id"] == seeker["id"]
        assert user["user_type"] == "seeker"
        assert profiles.get_by_token("nope") is None

    def test_list_seekers_includes_account(self, profiles, seeker, company) -> None:
        seekers = profiles.list_seekers()
        assert len(seekers) == 1
        assert seekers[0]["profile"]["full_name"] == "Amine Ben Salem"
        assert seekers[0]["skills"] == ["Python", "FastAPI"]

    def test_privacy_preferences_upsert(self, profiles, seeker) -> None:
        assert profiles.get_privacy_preferences(seeker["id"]) is None
        profiles.set_privacy_preferences(seeker["id"], footprint_scanning_consent=True)
        profiles.set_privacy_preferences(seeker["id"], marketing_consent=True)
        prefs = profiles.get_privacy_preferences(seeker["id"])
        assert prefs["footprint_scanning_consent"] is True
        assert prefs["marketing_consent"] is True


@pytest.mark.unit
class TestJobsAndApplications:
    """Job ownership and application dedupe."""

    def test_get_owned(self, company, seeker) -> None:
        repo = JobsRepository()
        job_id = repo.create(company["id"], "Dev", "Build", "Python", "Tunis")
        assert repo.get_owned(job_id, company["id"])["title"] == "Dev"
        assert repo.get_owned(job_id, seeker["id"]) is None

    def test_list_active_skips_closed(self, company) -> None:
        repo = JobsRepository()
        repo.create(company["id"], "Open", "d", "r", "Tunis")
        repo.create(company["id"], "Closed", "d", "r", "Tunis", status="closed")
        assert [j["title"] for j in repo.list_active()] == ["Open"]

    def test_application_created_once(self, company, seeker) -> None:
        job_id = JobsRepository().create(company["id"], "Dev", "d", "r", "Tunis")
        repo = ApplicationsRepository()
        assert repo.create_if_absent(seeker["id"], job_id, 88) is True
        assert repo.create_if_absent(seeker["id"], job_id, 90) is False
        apps = repo.list_for_seeker(seeker["id"])
        assert len(apps) == 1
        assert apps[0]["status"] == "pending"
        assert apps[0]["match_score"] == 88


@pytest.mark.unit
class TestRecords:
    """CVs, interview sessions and audit rows."""

    def test_cv_score_is_stored(self, seeker) -> None:
        repo = CVsRepository()
        repo.save(seeker["id"], "cv.pdf", "/tmp/cv.pdf", 10, {"score": 77})
        latest = repo.latest_by_user()[seeker["id"]]
        assert latest["ai_score"] == 77
        assert latest["ai_analysis"] == {"score": 77}

    def test_interview_consent_timestamp(self, seeker) -> None:
        repo = InterviewsRepository()
        repo.save(seeker["id"], "QA", [], None, 70, 300, True)
        repo.save(seeker["id"], "QA", [], None, 60, 200, False)
        sessions = sorted(repo.list_for_user(seeker["id"]), key=lambda s: s["score"])
        assert sessions[0]["consent_timestamp"] is None
        assert sessions[1]["consent_timestamp"] is not None

    def test_audit_defaults(self, seeker) -> None:
        repo = AuditRepository()
        repo.log(seeker["id"], "EXPORT", "ALL_DATA")
        [row] = repo.list_for_user(seeker["id"])
        assert row["ip_address"] == "unknown"
        assert row["user_agent"] == "unknown"
