import json
from typing import Any, Dict, List, Optional

DONE = "[DONE]"


class SSEDecoder:
    """Incremental decoder for OpenAI-style `data:` event streams.

    Text is fed in arbitrary chunks. Only complete lines are processed; the
    trailing partial line waits for the next chunk. A `data:` line whose JSON
    does not parse yet is pushed back, since a chunk boundary may have split it.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self.done = False

    def feed(self, text: str) -> List[Dict[str, Any]]:
        if self.done:
            return []
        self._buffer += text
        events: List[Dict[str, Any]] = []
        while not self.done:
            newline = self._buffer.find("\n")
            if newline == -1:
                break
            line = self._buffer[:newline]
            rest = self._buffer[newline + 1:]
            if line.endswith("\r"):
                line = line[:-1]
            if not line.strip() or line.startswith(":"):
                self._buffer = rest
                continue
            if not line.startswith("data: "):
                self._buffer = rest
                continue
            payload = line[6:].strip()
            if payload == DONE:
                self._buffer = rest
                self.done = True
                break
            try:
                event = json.loads(payload)
            except json.JSONDecodeError:
                # incomplete JSON: keep the line, wait for more bytes
                break
            self._buffer = rest
            events.append(event)
        return events

    def flush(self) -> List[Dict[str, Any]]:
        """Process what is left once the transport has ended."""
        if self.done or not self._buffer:
            self._buffer = ""
            return []
        events: List[Dict[str, Any]] = []
        for raw in self._buffer.split("\n"):
            line = raw.rstrip("\r")
            if not line.startswith("data: "):
                continue
            payload = line[6:].strip()
            if payload == DONE:
                self.done = True
                break
            try:
                events.append(json.loads(payload))
            except json.JSONDecodeError:
                continue
        self._buffer = ""
        return events


def delta_content(event: Dict[str, Any]) -> Optional[str]:
    """`choices[0].delta.content` of a chunk, None when absent."""
    try:
        content = event["choices"][0]["delta"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    return content if isinstance(content, str) else None
