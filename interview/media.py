import logging
from pathlib import Path
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)

FRAME_SUFFIXES = {".jpg", ".jpeg", ".png"}


class MediaCapture(Protocol):
    async def start(self) -> None: ...

    async def grab_frame(self) -> Optional[bytes]: ...

    async def stop(self) -> None: ...


class Speaker(Protocol):
    async def speak(self, text: str) -> None: ...

    def cancel(self) -> None: ...


class NullCapture:
    async def start(self) -> None:
        pass

    async def grab_frame(self) -> Optional[bytes]:
        return None

    async def stop(self) -> None:
        pass


class ImageDirectoryCapture:
    """Cycles through the images of a directory, one per grab, in name order."""

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self._frames: List[Path] = []
        self._index = 0
        self.running = False

    async def start(self) -> None:
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Frame directory not found: {self.directory}")
        self._frames = sorted(p for p in self.directory.iterdir()
                              if p.suffix.lower() in FRAME_SUFFIXES)
        if not self._frames:
            raise FileNotFoundError(f"No JPEG/PNG frames in {self.directory}")
        self._index = 0
        self.running = True
        logger.info("Capturing %d frames from %s", len(self._frames), self.directory)

    async def grab_frame(self) -> Optional[bytes]:
        if not self.running:
            return None
        path = self._frames[self._index % len(self._frames)]
        self._index += 1
        return path.read_bytes()

    async def stop(self) -> None:
        self.running = False


class NullSpeaker:
    async def speak(self, text: str) -> None:
        pass

    def cancel(self) -> None:
        pass


class PrintSpeaker:
    def __init__(self, prefix: str = "Interviewer: "):
        self.prefix = prefix
        self.cancelled = False

    async def speak(self, text: str) -> None:
        self.cancelled = False
        print(f"{self.prefix}{text}", flush=True)

    def cancel(self) -> None:
        self.cancelled = True
