"""Tests for the interview HTTP client."""

import json

import httpx
import pytest

from interview.api_client import InterviewApiClient, InterviewApiError, RateLimitedError
from tests.mocks.factories import sse_body


def _client(handler) -> InterviewApiClient:
    http = httpx.AsyncClient(base_url="http://test", transport=httpx.MockTransport(handler))
    return InterviewApiClient("http://test", client=http)


async def _collect(api: InterviewApiClient, messages=None):
    return [d async for d in api.stream_chat(messages or [], "Backend Engineer")]


@pytest.mark.unit
class TestStreamChat:
    """Streaming chat turns."""

    @pytest.mark.asyncio
    async def test_yields_deltas_in_order(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=sse_body(["Hello", ", ", "welcome"]),
                                  headers={"content-type": "text/event-stream"})

        api = _client(handler)
        deltas = await _collect(api, [{"role": "user", "content": "hi"}])
        assert deltas == ["Hello", ", ", "welcome"]
        assert seen["body"]["jobTitle"] == "Backend Engineer"
        assert seen["body"]["messages"] == [{"role": "user", "content": "hi"}]

    @pytest.mark.asyncio
    async def test_stream_without_done_is_flushed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=sse_body(["a", "b"], done=False))

        assert await _collect(_client(handler)) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_rate_limit_carries_retry_after(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"error": "Rate limits exceeded"},
                                  headers={"Retry-After": "7"})

        with pytest.raises(RateLimitedError) as info:
            await _collect(_client(handler))
        assert info.value.retry_after == 7.0
        assert info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_other_errors_raise_api_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(402, json={"error": "Payment required"})

        with pytest.raises(InterviewApiError) as info:
            await _collect(_client(handler))
        assert not isinstance(info.value, RateLimitedError)
        assert info.value.message == "Payment required"


@pytest.mark.unit
class TestJsonRoutes:
    """Non-streaming interview routes."""

    @pytest.mark.asyncio
    async def test_analyze_frame_and_profile(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/analyze-behavior":
                assert json.loads(request.content)["image"] == "aW1n"
                return httpx.Response(200, json={"feedback": "Good posture"})
            if request.url.path == "/generate-profile":
                return httpx.Response(200, json={"profileAnalysis": "Report"})
            return httpx.Response(404)

        api = _client(handler)
        assert await api.analyze_frame("aW1n", "QA") == "Good posture"
        assert await api.generate_profile([{"role": "user", "content": "x"}], [], "QA") == "Report"

    @pytest.mark.asyncio
    async def test_save_session_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "Unauthorized"})

        with pytest.raises(InterviewApiError) as info:
            await _client(handler).save_session("QA", [], None, None, 10, False)
        assert info.value.status_code == 401
