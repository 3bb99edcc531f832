"""Tests for seeker job matching."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from domain.errors import GatewayError, ValidationFailed
from domain.services import job_matching
from infra.llm.prompts import LOCATION_BOOST, LOCATION_PENALTY
from infra.repositories.applications_repository import ApplicationsRepository
from infra.repositories.jobs_repository import JobsRepository
from tests.mocks.factories import CV_ANALYSIS


def _score(value: float) -> str:
    return json.dumps({"match_score": value, "matching_skills": ["Python"],
                       "missing_skills": [], "recommendation": "Apply"})


@pytest.mark.unit
class TestLocation:
    """Location directive rules."""

    def test_containment_is_a_match(self) -> None:
        assert job_matching.is_location_match("Tunis, Tunisia", "Tunis")
        assert job_matching.location_directive("Tunis", "tunis, tunisia") == LOCATION_BOOST

    def test_remote_is_a_match(self) -> None:
        assert job_matching.location_directive("Sfax", "Remote") == LOCATION_BOOST

    def test_mismatch_penalised(self) -> None:
        assert job_matching.location_directive("Sfax", "Dubai") == LOCATION_PENALTY

    def test_unknown_seeker_location_is_neutral(self) -> None:
        assert job_matching.location_directive("", "Dubai") == ""


@pytest.mark.unit
class TestCandidateProfile:
    """Prompt profile text."""

    def test_includes_footprint_sections(self) -> None:
        footprint = {
            "githubData": {"profile": {"publicRepos": 9},
                           "stats": {"languages": ["Go"], "totalCommits": 14}},
            "stackoverflowData": {"profile": {"reputation": 500},
                                  "topTags": [{"name": "go", "count": 3}]},
        }
        text = job_matching.build_candidate_profile(CV_ANALYSIS, "Tunis", footprint)
        assert "- Score: 82/100" in text
        assert "- Public Repos: 9" in text
        assert "- Top Tags: go" in text

    def test_without_footprint(self) -> None:
        text = job_matching.build_candidate_profile(CV_ANALYSIS, "", None)
        assert "GitHub" not in text
        assert "- Location: Not specified" in text


@pytest.mark.unit
class TestMatchJobs:
    """End-to-end matching with the model and job sources mocked."""

    @pytest.mark.asyncio
    async def test_missing_input(self) -> None:
        with pytest.raises(ValidationFailed, match="CV analysis and userId are required"):
            await job_matching.match_jobs(None, CV_ANALYSIS)

    @pytest.mark.asyncio
    async def test_empty_pool(self, seeker) -> None:
        with patch.object(job_matching, "search_external_jobs", new=AsyncMock(return_value=[])):
            result = await job_matching.match_jobs(seeker["id"], CV_ANALYSIS)
        assert result == {"matches": [], "total": 0, "message": "No jobs available for matching"}

    @pytest.mark.asyncio
    async def test_threshold_sorting_and_applications(self, seeker, company) -> None:
        jobs = JobsRepository()
        strong = jobs.create(company["id"], "Strong", "d", "r", "Tunis")
        weak = jobs.create(company["id"], "Weak", "d", "r", "Dubai")
        broken = jobs.create(company["id"], "Broken", "d", "r", "Tunis")
        external = {"id": "external_1", "title": "Ext", "description": "d", "requirements": "r",
                    "location": "Remote", "company_id": None, "external_url": "https://x",
                    "external_source": "jsearch"}

        async def fake_complete(system, prompt, **opts):
            assert opts == {"temperature": 0.3, "max_tokens": 500}
            if "Title: Strong" in prompt:
                return _score(91)
            if "Title: Weak" in prompt:
                return _score(40)
            if "Title: Ext" in prompt:
                return _score(75)
            raise GatewayError("AI gateway error: 500")

        with patch.object(job_matching, "search_external_jobs", new=AsyncMock(return_value=[external])), \
                patch.object(job_matching, "complete_text", new=fake_complete):
            result = await job_matching.match_jobs(seeker["id"], CV_ANALYSIS)

        assert [m["job_id"] for m in result["matches"]] == [strong, "external_1"]
        assert result["total"] == 2
        assert result["matches"][1]["is_external"] is True
        assert result["matches"][1]["external_url"] == "https://x"
        apps = ApplicationsRepository().list_for_seeker(seeker["id"])
        assert [a["job_id"] for a in apps] == [strong]
        assert weak not in [m["job_id"] for m in result["matches"]]
        assert broken not in [m["job_id"] for m in result["matches"]]

    @pytest.mark.asyncio
    async def test_unparseable_score_is_skipped(self, seeker, company) -> None:
        JobsRepository().create(company["id"], "Dev", "d", "r", "Tunis")
        with patch.object(job_matching, "search_external_jobs", new=AsyncMock(return_value=[])), \
                patch.object(job_matching, "complete_text", new=AsyncMock(return_value="no json")):
            result = await job_matching.match_jobs(seeker["id"], CV_ANALYSIS)
        assert result == {"matches": [], "total": 0}

    @pytest.mark.asyncio
    async def test_footprint_links_are_fetched(self, profiles) -> None:
        user_id = profiles.create("dev@test.tn", "Dev", "seeker")
        profiles.create_seeker_profile(
            user_id, location="Tunis",
            github_url="https://github.com/octo",
            twitter_url="https://stackoverflow.com/users/42/sam")
        github = AsyncMock(return_value={"profile": {}, "stats": {}})
        stackoverflow = AsyncMock(return_value={"profile": {}, "topTags": []})
        with patch("domain.services.footprint.fetch_github_footprint", new=github), \
                patch("domain.services.footprint.fetch_stackoverflow_footprint", new=stackoverflow), \
                patch.object(job_matching, "search_external_jobs", new=AsyncMock(return_value=[])):
            await job_matching.match_jobs(user_id, CV_ANALYSIS)
        github.assert_awaited_once_with("octo")
        stackoverflow.assert_awaited_once_with("42")
