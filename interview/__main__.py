import argparse
import asyncio
import logging
import os
import sys

from app.logging import configure_logging
from interview.api_client import InterviewApiError
from interview.media import ImageDirectoryCapture, NullCapture, NullSpeaker, PrintSpeaker
from interview.session import InterviewSession

logger = logging.getLogger("interview")

END_COMMAND = "/end"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="python -m interview",
                                     description="Run a text-mode mock interview.")
    parser.add_argument("job_title", help="Position to interview for")
    parser.add_argument("--base-url", default=os.getenv("INTERVIEW_API_URL", "http://localhost:8000"))
    parser.add_argument("--token", default=os.getenv("INTERVIEW_API_TOKEN"),
                        help="API token used to save the session")
    parser.add_argument("--frames", metavar="DIR",
                        help="Directory of JPEG/PNG frames standing in for the webcam")
    parser.add_argument("--consent", action="store_true",
                        help="Consent to behavioral analysis of the frames")
    parser.add_argument("--frame-interval", type=float, default=30.0)
    parser.add_argument("--no-save", action="store_true", help="Do not persist the session")
    parser.add_argument("--no-stream", action="store_true",
                        help="Print each reply once complete instead of as it streams")
    return parser.parse_args(argv)


def _print_delta(delta: str) -> None:
    sys.stdout.write(delta)
    sys.stdout.flush()


async def run(args: argparse.Namespace) -> int:
    capture = ImageDirectoryCapture(args.frames) if args.frames else NullCapture()
    session = InterviewSession.connect(
        args.base_url,
        args.job_title,
        token=args.token,
        capture=capture,
        speaker=PrintSpeaker() if args.no_stream else NullSpeaker(),
        behavioral_consent=args.consent and bool(args.frames),
        frame_interval=args.frame_interval,
        save=not args.no_save and bool(args.token),
        on_delta=None if args.no_stream else _print_delta,
    )
    async with session:
        print(f"Interview for {args.job_title}. Type {END_COMMAND} to finish.\n")
        await session.start()
        print()
        while session.is_active:
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line or line.strip() == END_COMMAND:
                break
            if not line.strip():
                continue
            try:
                await session.send(line)
                print()
            except InterviewApiError as exc:
                print(f"\n[error] {exc.message}")
        report = await session.end()

    print("\n" + "=" * 60)
    print(report.profile_analysis or "No report generated.")
    if report.score is not None:
        print(f"\nScore: {report.score:.0f}/100")
    print(f"Duration: {report.duration_seconds}s, behavioral notes: {len(report.behavioral_feedback)}")
    return 0


def main(argv=None) -> int:
    configure_logging()
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130
    except InterviewApiError as exc:
        logger.error("Interview failed: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
