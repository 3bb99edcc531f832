"""Tests for interview session orchestration."""

import asyncio
from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from interview.api_client import InterviewApiError, RateLimitedError
from interview.session import InterviewSession, parse_score


class FakeApi:
    """Scripted stand-in for InterviewApiClient.

    Each entry of `turns` is either a list of deltas or an exception raised
    after the deltas given in `partial`.
    """

    def __init__(self, turns: List, partial: Optional[List[str]] = None,
                 clock: Optional["FakeClock"] = None):
        self.turns = list(turns)
        self.partial = partial or []
        self.requests: List[List[Dict[str, str]]] = []
        self.clock = clock
        self.sent_at: List[float] = []
        self.analyze_frame = AsyncMock(return_value="Maintains eye contact")
        self.transcribe = AsyncMock(return_value="I like Python")
        self.generate_profile = AsyncMock(
            return_value="1. **Overall Performance Score**: 78/100\nSolid answers.")
        self.save_session = AsyncMock(return_value="session-1")
        self.aclose = AsyncMock()

    async def stream_chat(self, messages, job_title):
        self.requests.append([dict(m) for m in messages])
        if self.clock is not None:
            self.sent_at.append(self.clock.now)
        turn = self.turns.pop(0)
        if isinstance(turn, BaseException):
            for delta in self.partial:
                yield delta
            raise turn
        for delta in turn:
            yield delta


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class RecordingSleep:
    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.clock.now += seconds


class FakeCapture:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.started = False
        self.stopped = 0

    async def start(self) -> None:
        if self.fail:
            raise RuntimeError("camera busy")
        self.started = True

    async def grab_frame(self) -> Optional[bytes]:
        return b"frame-bytes"

    async def stop(self) -> None:
        self.stopped += 1


def _session(api: FakeApi, **kwargs) -> InterviewSession:
    clock = kwargs.pop("clock", FakeClock())
    kwargs.setdefault("sleep", RecordingSleep(clock))
    kwargs.setdefault("min_request_interval", 0)
    return InterviewSession(api, "Backend Engineer", clock=clock, **kwargs)


@pytest.mark.unit
class TestConversation:
    """Streaming turns and transcript assembly."""

    @pytest.mark.asyncio
    async def test_start_requests_opening_turn(self) -> None:
        api = FakeApi([["Hello", "! Tell me ", "about yourself."]])
        session = _session(api)
        reply = await session.start()
        assert reply == "Hello! Tell me about yourself."
        assert api.requests == [[]]
        assert session.messages == [{"role": "assistant", "content": reply}]
        assert session.is_active and not session.is_streaming
        await session.aclose()

    @pytest.mark.asyncio
    async def test_deltas_build_a_single_assistant_message(self) -> None:
        seen: List[str] = []
        api = FakeApi([["Hi."], ["Great", " answer", "."]])
        session = _session(api, on_delta=seen.append)
        await session.start()
        reply = await session.send("  I build APIs  ")
        assert reply == "Great answer."
        assert seen == ["Hi.", "Great", " answer", "."]
        assert session.messages == [
            {"role": "assistant", "content": "Hi."},
            {"role": "user", "content": "I build APIs"},
            {"role": "assistant", "content": "Great answer."},
        ]
        assert api.requests[1][-1] == {"role": "user", "content": "I build APIs"}
        await session.aclose()

    @pytest.mark.asyncio
    async def test_empty_job_title_is_rejected(self) -> None:
        session = InterviewSession(FakeApi([]), "   ")
        with pytest.raises(ValueError):
            await session.start()

    @pytest.mark.asyncio
    async def test_send_requires_active_session(self) -> None:
        session = _session(FakeApi([]))
        with pytest.raises(RuntimeError):
            await session.send("hello")

    @pytest.mark.asyncio
    async def test_concurrent_sends_are_serialised(self) -> None:
        api = FakeApi([["Hi."], ["one"], ["two"]])
        session = _session(api)
        await session.start()
        await asyncio.gather(session.send("first"), session.send("second"))
        roles = [m["role"] for m in session.messages]
        assert roles == ["assistant", "user", "assistant", "user", "assistant"]
        await session.aclose()

    @pytest.mark.asyncio
    async def test_send_audio_transcribes_then_sends(self) -> None:
        api = FakeApi([["Hi."], ["Nice."]])
        session = _session(api)
        await session.start()
        assert await session.send_audio(b"webm") == "Nice."
        assert session.messages[1] == {"role": "user", "content": "I like Python"}
        await session.aclose()

    @pytest.mark.asyncio
    async def test_silent_audio_is_ignored(self) -> None:
        api = FakeApi([["Hi."]])
        api.transcribe.return_value = "   "
        session = _session(api)
        await session.start()
        assert await session.send_audio(b"webm") is None
        assert len(session.messages) == 1
        await session.aclose()


@pytest.mark.unit
class TestThrottleAndRetry:
    """Request spacing and rate-limit handling."""

    @pytest.mark.asyncio
    async def test_requests_are_spaced_by_min_interval(self) -> None:
        clock = FakeClock()
        sleep = RecordingSleep(clock)
        api = FakeApi([["Hi."], ["Ok."]])
        session = _session(api, clock=clock, sleep=sleep, min_request_interval=2.0)
        await session.start()
        clock.now += 0.5
        await session.send("answer")
        assert sleep.calls == [pytest.approx(1.5)]
        await session.aclose()

    @pytest.mark.asyncio
    async def test_rate_limit_is_retried_with_backoff(self) -> None:
        clock = FakeClock()
        sleep = RecordingSleep(clock)
        api = FakeApi([RateLimitedError("slow down"), RateLimitedError("slow down"), ["Hi."]])
        session = _session(api, clock=clock, sleep=sleep, backoff_base=1.0)
        assert await session.start() == "Hi."
        assert sleep.calls == [1.0, 2.0]
        await session.aclose()

    @pytest.mark.asyncio
    async def test_retry_after_wins_when_larger(self) -> None:
        clock = FakeClock()
        sleep = RecordingSleep(clock)
        api = FakeApi([RateLimitedError("slow down", retry_after=5), ["Hi."]])
        session = _session(api, clock=clock, sleep=sleep, backoff_base=1.0)
        await session.start()
        assert sleep.calls == [5]
        await session.aclose()

    @pytest.mark.asyncio
    async def test_retries_keep_min_interval(self) -> None:
        clock = FakeClock()
        sleep = RecordingSleep(clock)
        api = FakeApi([RateLimitedError("slow down"), ["Hi."]], clock=clock)
        session = _session(api, clock=clock, sleep=sleep,
                           min_request_interval=2.0, backoff_base=1.0)
        await session.start()
        assert api.sent_at == [100.0, 102.0]
        await session.aclose()

    @pytest.mark.asyncio
    async def test_partial_reply_is_discarded_before_retry(self) -> None:
        api = FakeApi([RateLimitedError("slow down"), ["Full reply."]], partial=["Par", "tial"])
        session = _session(api)
        await session.start()
        assert session.messages == [{"role": "assistant", "content": "Full reply."}]
        assert api.requests[1] == []
        await session.aclose()

    @pytest.mark.asyncio
    async def test_exhausted_retries_reraise_and_close(self) -> None:
        api = FakeApi([RateLimitedError("slow down")] * 3)
        session = _session(api, max_retries=2)
        with pytest.raises(RateLimitedError):
            await session.start()
        assert session.is_closed
        assert session.messages == []

    @pytest.mark.asyncio
    async def test_send_error_keeps_session_usable(self) -> None:
        api = FakeApi([["Hi."], InterviewApiError(500, "boom"), ["Back."]], partial=["x"])
        session = _session(api)
        await session.start()
        with pytest.raises(InterviewApiError):
            await session.send("first")
        assert session.messages[-1] == {"role": "user", "content": "first"}
        assert await session.send("again") == "Back."
        await session.aclose()


@pytest.mark.unit
class TestBehavioralAnalysis:
    """Frame sampling and media handling."""

    @pytest.mark.asyncio
    async def test_sample_frame_appends_feedback(self) -> None:
        api = FakeApi([])
        session = _session(api, capture=FakeCapture())
        assert await session.sample_frame() == "Maintains eye contact"
        assert session.behavioral_feedback == ["Maintains eye contact"]
        sent_image = api.analyze_frame.await_args.args[0]
        assert sent_image == "ZnJhbWUtYnl0ZXM="
        assert not session.is_analyzing

    @pytest.mark.asyncio
    async def test_sample_skipped_while_analyzing(self) -> None:
        api = FakeApi([])
        session = _session(api, capture=FakeCapture())
        session.is_analyzing = True
        assert await session.sample_frame() is None
        api.analyze_frame.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_analysis_errors_are_swallowed(self) -> None:
        api = FakeApi([])
        api.analyze_frame.side_effect = InterviewApiError(500, "vision down")
        session = _session(api, capture=FakeCapture())
        assert await session.sample_frame() is None
        assert session.behavioral_feedback == []
        assert not session.is_analyzing

    @pytest.mark.asyncio
    async def test_frame_loop_runs_with_consent(self) -> None:
        api = FakeApi([["Hi."]])
        capture = FakeCapture()
        session = _session(api, capture=capture, behavioral_consent=True, frame_interval=0.01)
        await session.start()
        for _ in range(50):
            if session.behavioral_feedback:
                break
            await asyncio.sleep(0.01)
        assert session.behavioral_feedback
        await session.aclose()
        assert capture.stopped == 1

    @pytest.mark.asyncio
    async def test_no_capture_without_consent(self) -> None:
        capture = FakeCapture()
        session = _session(FakeApi([["Hi."]]), capture=capture)
        await session.start()
        assert not capture.started
        await session.aclose()
        assert capture.stopped == 0

    @pytest.mark.asyncio
    async def test_camera_failure_does_not_abort(self) -> None:
        session = _session(FakeApi([["Hi."]]), capture=FakeCapture(fail=True),
                           behavioral_consent=True)
        assert await session.start() == "Hi."
        assert session.is_active
        await session.aclose()


@pytest.mark.unit
class TestEndAndCleanup:
    """Final report and resource release."""

    @pytest.mark.asyncio
    async def test_end_builds_report_and_saves(self) -> None:
        clock = FakeClock()
        api = FakeApi([["Hi."], ["Thanks."]])
        session = _session(api, clock=clock, behavioral_consent=False)
        await session.start()
        await session.send("My answer")
        session.behavioral_feedback.append("Calm")
        clock.now += 125
        report = await session.end()

        assert report.score == 78.0
        assert report.duration_seconds == 125
        assert report.session_id == "session-1"
        assert report.behavioral_feedback == ["Calm"]
        assert len(report.transcript) == 3
        api.generate_profile.assert_awaited_once()
        kwargs = api.save_session.await_args.kwargs
        assert kwargs["score"] == 78.0
        assert kwargs["behavioral_consent"] is False
        assert session.is_closed and not session.is_active

    @pytest.mark.asyncio
    async def test_save_failure_still_returns_report(self) -> None:
        api = FakeApi([["Hi."]])
        api.save_session.side_effect = InterviewApiError(401, "Unauthorized")
        session = _session(api)
        await session.start()
        report = await session.end()
        assert report.session_id is None
        assert report.profile_analysis

    @pytest.mark.asyncio
    async def test_aclose_is_idempotent(self) -> None:
        api = FakeApi([["Hi."]])
        capture = FakeCapture()
        session = _session(api, capture=capture, behavioral_consent=True, owns_api=True)
        await session.start()
        await session.aclose()
        await session.aclose()
        assert capture.stopped == 1
        api.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_context_manager_closes(self) -> None:
        api = FakeApi([["Hi."]])
        async with _session(api, owns_api=True) as session:
            await session.start()
        assert session.is_closed
        api.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_end_cancels_inflight_stream(self) -> None:
        release = asyncio.Event()

        class SlowApi(FakeApi):
            async def stream_chat(self, messages, job_title):
                if not self.requests:
                    self.requests.append(messages)
                    yield "Hi."
                    return
                yield "partial"
                await release.wait()
                yield "never"

        api = SlowApi([])
        session = _session(api)
        await session.start()
        sending = asyncio.create_task(session.send("answer"))
        await asyncio.sleep(0.01)
        await session.end()
        with pytest.raises(asyncio.CancelledError):
            await sending
        assert all(m["content"] != "partial" for m in session.messages)


@pytest.mark.unit
class TestParseScore:
    """Score extraction from the profile report."""

    def test_markdown_heading(self) -> None:
        assert parse_score("**Overall Performance Score**: 85/100") == 85.0

    def test_missing(self) -> None:
        assert parse_score("No score here") is None

    def test_clamped(self) -> None:
        assert parse_score("Overall Performance Score: 250") == 100.0

    def test_heading_with_range_hint(self) -> None:
        assert parse_score("1. **Overall Performance Score** (0-100): 78\n") == 78.0
        assert parse_score("Overall Performance Score (0 - 100) - 64/100") == 64.0
