"""Shared pytest fixtures.

Environment is pinned before any application module is imported, since
settings are read once at import time.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="amal-tests-")
os.environ["SQLITE_PATH"] = os.path.join(_TMP_DIR, "test.sqlite3")
os.environ["STORAGE_DIR"] = os.path.join(_TMP_DIR, "storage")
os.environ["ENV"] = "test"
os.environ["AI_GATEWAY_API_KEY"] = "test-gateway-key"
os.environ["GROQ_API_KEY"] = "test-groq-key"
os.environ["RESEND_API_KEY"] = "test-resend-key"
os.environ["RAPIDAPI_KEY"] = ""

from typing import Callable, Dict  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402

from infra.db.session import Base, engine, init_db  # noqa: E402
from infra.repositories.profiles_repository import ProfilesRepository  # noqa: E402


@pytest.fixture(autouse=True)
def clean_db():
    """Fresh tables for every test."""
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mock_http(monkeypatch) -> Callable:
    """Route every httpx.AsyncClient created by application code through a handler."""
    real_client = httpx.AsyncClient

    def install(handler: Callable[[httpx.Request], httpx.Response]) -> None:
        def factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(handler)
            return real_client(*args, **kwargs)
        monkeypatch.setattr(httpx, "AsyncClient", factory)

    return install


@pytest.fixture
def profiles() -> ProfilesRepository:
    return ProfilesRepository()


@pytest.fixture
def seeker(profiles: ProfilesRepository) -> Dict:
    """A seeker account with profile and API token."""
    user_id = profiles.create("amine@test.tn", "Amine Ben Salem", "seeker")
    profiles.create_seeker_profile(user_id, skills=["Python", "FastAPI"],
                                   experience_years=5, location="Tunis, Tunisia")
    return {"id": user_id, "email": "amine@test.tn", "token": profiles.issue_token(user_id)}


@pytest.fixture
def company(profiles: ProfilesRepository) -> Dict:
    """A company account with API token."""
    user_id = profiles.create("hr@acme.tn", "Acme HR", "company")
    profiles.create_company_profile(user_id, "Acme")
    return {"id": user_id, "email": "hr@acme.tn", "token": profiles.issue_token(user_id)}

