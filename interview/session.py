import asyncio
import base64
import logging
import re
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from interview.api_client import InterviewApiClient, InterviewApiError, RateLimitedError
from interview.media import MediaCapture, NullCapture, NullSpeaker, Speaker

logger = logging.getLogger(__name__)

_SCORE_RE = re.compile(
    r"Overall Performance Score\**\s*(?:\(\s*0\s*-\s*100\s*\))?\D{0,40}?(\d{1,3})",
    re.IGNORECASE,
)

DeltaCallback = Callable[[str], None]


def parse_score(report: str) -> Optional[float]:
    """Score from the report's "Overall Performance Score" line, None when absent."""
    match = _SCORE_RE.search(report or "")
    if not match:
        return None
    return float(min(100, int(match.group(1))))


@dataclass
class InterviewReport:
    job_title: str
    transcript: List[Dict[str, str]]
    behavioral_feedback: List[str]
    profile_analysis: str
    duration_seconds: int
    score: Optional[float] = None
    session_id: Optional[str] = None


@dataclass
class _Stream:
    text: str = ""
    index: Optional[int] = None


class InterviewSession:
    """One mock interview: streamed interviewer turns, periodic frame analysis and a final report.

    A session is started once, driven through `send`/`send_audio`, and finished
    with `end`. `aclose` releases everything and is safe to call any number of
    times; `async with` calls it on exit.
    """

    def __init__(
        self,
        api: InterviewApiClient,
        job_title: str,
        *,
        capture: Optional[MediaCapture] = None,
        speaker: Optional[Speaker] = None,
        behavioral_consent: bool = False,
        frame_interval: float = 30.0,
        min_request_interval: float = 2.0,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        save: bool = True,
        owns_api: bool = False,
        on_delta: Optional[DeltaCallback] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.api = api
        self.job_title = (job_title or "").strip()
        self.capture: MediaCapture = capture or NullCapture()
        self.speaker: Speaker = speaker or NullSpeaker()
        self.behavioral_consent = behavioral_consent
        self.frame_interval = frame_interval
        self.min_request_interval = min_request_interval
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.save = save
        self.on_delta: List[DeltaCallback] = [on_delta] if on_delta else []

        self.messages: List[Dict[str, str]] = []
        self.behavioral_feedback: List[str] = []
        self.is_active = False
        self.is_streaming = False
        self.is_analyzing = False
        self.is_closed = False

        self._owns_api = owns_api
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._started_at: Optional[float] = None
        self._last_request_at: Optional[float] = None
        self._capturing = False
        self._frame_task: Optional[asyncio.Task] = None
        self._analysis_task: Optional[asyncio.Task] = None
        self._stream_task: Optional[asyncio.Task] = None
        self._stream: Optional[_Stream] = None

    @classmethod
    def connect(cls, base_url: str, job_title: str, token: Optional[str] = None, **kwargs) -> "InterviewSession":
        return cls(InterviewApiClient(base_url, token=token), job_title, owns_api=True, **kwargs)

    async def __aenter__(self) -> "InterviewSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def duration_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return int(self._clock() - self._started_at)

    # lifecycle

    async def start(self) -> str:
        """Begin the interview and return the interviewer's opening turn."""
        if not self.job_title:
            raise ValueError("Job title is required")
        if self.is_closed:
            raise RuntimeError("Interview session is closed")
        if self.is_active:
            raise RuntimeError("Interview already started")

        self._started_at = self._clock()
        self.is_active = True
        logger.info("Starting %s interview (behavioral analysis %s)", self.job_title,
                    "on" if self.behavioral_consent else "off")
        if self.behavioral_consent:
            await self._start_capture()
        try:
            async with self._lock:
                return await self._request_reply()
        except BaseException:
            await self.aclose()
            raise

    async def _start_capture(self) -> None:
        try:
            await self.capture.start()
        except Exception:
            logger.exception("Camera unavailable, continuing without video analysis")
            return
        self._capturing = True
        self._frame_task = asyncio.create_task(self._frame_loop())

    async def end(self) -> InterviewReport:
        """Stop the interview, request the profile report and persist the session."""
        if self._started_at is None or self.is_closed:
            raise RuntimeError("Interview is not running")
        duration = self.duration_seconds
        self.is_active = False
        await self._stop_activity()
        try:
            transcript = [dict(m) for m in self.messages]
            feedback = list(self.behavioral_feedback)
            profile = ""
            if transcript:
                profile = await self.api.generate_profile(transcript, feedback, self.job_title)
            report = InterviewReport(
                job_title=self.job_title,
                transcript=transcript,
                behavioral_feedback=feedback,
                profile_analysis=profile,
                duration_seconds=duration,
                score=parse_score(profile),
            )
            if self.save:
                report.session_id = await self._save(report)
            return report
        finally:
            await self.aclose()

    async def _save(self, report: InterviewReport) -> Optional[str]:
        try:
            return await self.api.save_session(
                job_title=report.job_title,
                transcript=report.transcript,
                ai_feedback={"profileAnalysis": report.profile_analysis,
                             "behavioralFeedback": report.behavioral_feedback},
                score=report.score,
                duration_seconds=report.duration_seconds,
                behavioral_consent=self.behavioral_consent,
            )
        except InterviewApiError as exc:
            logger.error("Failed to save interview session: %s", exc)
            return None

    async def aclose(self) -> None:
        if self.is_closed:
            return
        self.is_closed = True
        self.is_active = False
        await self._stop_activity()
        if self._owns_api:
            try:
                await self.api.aclose()
            except Exception:
                logger.exception("Error closing interview API client")
        logger.info("Interview session closed")

    async def _stop_activity(self) -> None:
        current = asyncio.current_task()
        tasks = [t for t in (self._frame_task, self._analysis_task, self._stream_task)
                 if t is not None and t is not current and not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error("Background task failed during cleanup: %s", result)
        self._frame_task = self._analysis_task = None

        try:
            self.speaker.cancel()
        except Exception:
            logger.exception("Error cancelling speech")
        if self._capturing:
            self._capturing = False
            try:
                await self.capture.stop()
            except Exception:
                logger.exception("Error stopping media capture")

    # conversation

    async def send(self, text: str) -> str:
        """Send a candidate answer and return the interviewer's full reply."""
        if not self.is_active:
            raise RuntimeError("Interview is not active")
        text = (text or "").strip()
        if not text:
            raise ValueError("Message is empty")
        async with self._lock:
            if not self.is_active:
                raise RuntimeError("Interview is not active")
            self._cancel_speech()
            self.messages.append({"role": "user", "content": text})
            return await self._request_reply()

    async def send_audio(self, audio: bytes) -> Optional[str]:
        """Transcribe a recorded answer and send it; silence yields None."""
        if not self.is_active:
            raise RuntimeError("Interview is not active")
        text = await self.api.transcribe(base64.b64encode(audio).decode("ascii"))
        if not text.strip():
            logger.info("Empty transcription, nothing sent")
            return None
        return await self.send(text)

    async def _throttle(self) -> None:
        if self._last_request_at is None:
            return
        wait = self.min_request_interval - (self._clock() - self._last_request_at)
        if wait > 0:
            logger.debug("Throttling chat request for %.2fs", wait)
            await self._sleep(wait)

    async def _request_reply(self) -> str:
        attempt = 0
        while True:
            # retries too must respect min_request_interval
            await self._throttle()
            self._last_request_at = self._clock()
            self._stream_task = asyncio.create_task(self._stream_once())
            try:
                reply = await self._stream_task
                break
            except RateLimitedError as exc:
                self._discard_partial()
                if attempt >= self.max_retries:
                    logger.error("Rate limited after %d retries", attempt)
                    raise
                delay = self.backoff_base * 2 ** attempt
                if exc.retry_after is not None and exc.retry_after > delay:
                    delay = exc.retry_after
                attempt += 1
                logger.warning("Rate limited, retry %d/%d in %.1fs",
                               attempt, self.max_retries, delay)
                await self._sleep(delay)
            except BaseException:
                self._discard_partial()
                raise
            finally:
                self._stream_task = None

        self._stream = None
        if reply:
            await self._speak(reply)
        return reply

    async def _stream_once(self) -> str:
        history = [dict(m) for m in self.messages]
        self._stream = _Stream()
        self.is_streaming = True
        deltas = self.api.stream_chat(history, self.job_title)
        try:
            async for delta in deltas:
                self._append_delta(delta)
        finally:
            self.is_streaming = False
            await deltas.aclose()
        return self._stream.text

    def _append_delta(self, delta: str) -> None:
        stream = self._stream
        stream.text += delta
        if stream.index is None:
            self.messages.append({"role": "assistant", "content": stream.text})
            stream.index = len(self.messages) - 1
        else:
            self.messages[stream.index]["content"] = stream.text
        for callback in self.on_delta:
            try:
                callback(delta)
            except Exception:
                logger.exception("on_delta callback failed")

    def _discard_partial(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None and stream.index is not None:
            del self.messages[stream.index]

    async def _speak(self, text: str) -> None:
        try:
            await self.speaker.speak(text)
        except Exception:
            logger.exception("Speech output failed")

    def _cancel_speech(self) -> None:
        try:
            self.speaker.cancel()
        except Exception:
            logger.exception("Error cancelling speech")

    # behavioral analysis

    async def _frame_loop(self) -> None:
        while self.is_active:
            await asyncio.sleep(self.frame_interval)
            if not self.is_active:
                break
            if self.is_analyzing:
                logger.debug("Previous frame analysis still running, skipping sample")
                continue
            self._analysis_task = asyncio.create_task(self.sample_frame())

    async def sample_frame(self) -> Optional[str]:
        """Grab one frame and append its feedback; skipped while an analysis runs."""
        if self.is_analyzing:
            return None
        self.is_analyzing = True
        try:
            frame = await self.capture.grab_frame()
            if not frame:
                return None
            feedback = await self.api.analyze_frame(
                base64.b64encode(frame).decode("ascii"), self.job_title)
            feedback = (feedback or "").strip()
            if feedback:
                self.behavioral_feedback.append(feedback)
            return feedback or None
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Frame analysis failed")
            return None
        finally:
            self.is_analyzing = False
