"""Timestamp parsing for clip trims and subtitle cues.

Accepted forms:
  "HH:MM:SS"       e.g. "00:01:05"   (hours may have any number of digits)
  "HH:MM:SS.fff"   e.g. "0:01:05.25"
  "SS[.fff]"       bare seconds, e.g. "65.25"

Values are kept as integer milliseconds so trims never drift.
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from functools import total_ordering

from .errors import InvalidTimestamp

_CLOCK_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})(\.\d+)?$")
_SECONDS_RE = re.compile(r"^(\d+)(\.\d+)?$")


def _fraction_ms(fraction: str | None) -> int:
    """Convert a '.fff...' suffix to milliseconds, rounding half-up."""
    if not fraction:
        return 0
    return int((Decimal(fraction) * 1000).quantize(Decimal(1), rounding=ROUND_HALF_UP))


@total_ordering
class Timestamp:
    """A non-negative point in time with millisecond resolution."""

    def __init__(self, milliseconds: int):
        if milliseconds < 0:
            raise InvalidTimestamp(f"Timestamp must be >= 0, got {milliseconds}ms")
        self.milliseconds = milliseconds

    @classmethod
    def parse(cls, text: str) -> "Timestamp":
        """Parse 'HH:MM:SS[.fff]' or bare seconds.

        Raises:
            InvalidTimestamp: Grammar mismatch, or minutes/seconds >= 60.
        """
        s = str(text).strip()

        m = _CLOCK_RE.match(s)
        if m:
            hours, minutes, seconds = int(m.group(1)), int(m.group(2)), int(m.group(3))
            if minutes >= 60:
                raise InvalidTimestamp(f"Invalid timestamp '{text}': minutes must be < 60")
            if seconds >= 60:
                raise InvalidTimestamp(f"Invalid timestamp '{text}': seconds must be < 60")
            whole = hours * 3600 + minutes * 60 + seconds
            return cls(whole * 1000 + _fraction_ms(m.group(4)))

        m = _SECONDS_RE.match(s)
        if m:
            return cls(int(m.group(1)) * 1000 + _fraction_ms(m.group(2)))

        raise InvalidTimestamp(
            f"Invalid timestamp '{text}'. Expected HH:MM:SS[.fff] or seconds"
        )

    @classmethod
    def from_seconds(cls, seconds: float) -> "Timestamp":
        return cls(int(Decimal(str(seconds)).scaleb(3).quantize(Decimal(1), rounding=ROUND_HALF_UP)))

    @property
    def seconds(self) -> float:
        return self.milliseconds / 1000

    def seconds_str(self) -> str:
        """Canonical decimal seconds for filter expressions, e.g. '5.000'."""
        whole, ms = divmod(self.milliseconds, 1000)
        return f"{whole}.{ms:03d}"

    def srt_str(self) -> str:
        """SubRip cue time, e.g. '00:01:05,250'."""
        whole, ms = divmod(self.milliseconds, 1000)
        hours, rest = divmod(whole, 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d},{ms:03d}"

    def __sub__(self, other: "Timestamp") -> "Timestamp":
        return Timestamp(self.milliseconds - other.milliseconds)

    def __eq__(self, other):
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self.milliseconds == other.milliseconds

    def __lt__(self, other):
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self.milliseconds < other.milliseconds

    def __hash__(self):
        return hash(self.milliseconds)

    def __repr__(self):
        return f"Timestamp({self.seconds_str()})"

    def __str__(self):
        return self.seconds_str()
