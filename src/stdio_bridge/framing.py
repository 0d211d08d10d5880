"""Line-oriented JSON framing for the stdio bridge."""

import json
from typing import Any


class FramingError(ValueError):
    """Raised when the buffered input can never become valid JSON."""


def _is_incomplete(error: json.JSONDecodeError, text: str) -> bool:
    if error.msg.startswith("Unterminated string"):
        return True
    return error.pos >= len(text.rstrip())


class MessageFramer:
    """Accumulates input lines until they form one complete JSON value.

    Single-line messages decode immediately. A message spread over several
    lines stays buffered until its closing line arrives. Input that fails
    before the end of the buffer is malformed: the buffer is dropped and
    FramingError raised.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []

    @property
    def pending(self) -> bool:
        return bool(self._lines)

    def feed(self, line: str) -> Any | None:
        """Add one line and return the decoded message once complete.

        Args:
            line: One input line, with or without its newline.

        Returns:
            The decoded JSON value, or None while more lines are needed.

        Raises:
            FramingError: If the buffer is not a prefix of any valid JSON value.
        """
        line = line.rstrip("\r\n")
        if not self._lines and not line.strip():
            return None

        self._lines.append(line)
        text = "\n".join(self._lines)
        try:
            # strict=False lets a string value continue across lines
            message = json.loads(text, strict=False)
        except json.JSONDecodeError as e:
            if _is_incomplete(e, text):
                return None
            self._lines.clear()
            raise FramingError(f"Parse error: {e.msg}") from None

        self._lines.clear()
        return message
