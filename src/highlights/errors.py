"""Exception taxonomy for highlights.

Input problems (bad timestamps, bad references, bad segments) subclass
ValueError, matching how manifest validation reports errors. Process-level
failures (subtitle files, the ffmpeg run) subclass RuntimeError.
"""


class HighlightsError(Exception):
    """Base class for all highlights errors."""


class InvalidTimestamp(HighlightsError, ValueError):
    """Malformed or out-of-range time string."""


class InvalidReference(HighlightsError, ValueError):
    """A pad or mapping refers to an undeclared input or a missing chain output."""


class DanglingReference(HighlightsError, ValueError):
    """Graph-wide reference check failed at serialization time."""


class InvalidSegment(HighlightsError, ValueError):
    """A segment's configuration cannot produce a valid pipeline."""


class SubtitleFileError(HighlightsError, RuntimeError):
    """Creating or removing a temporary subtitle file failed."""


class RendererExecutionError(HighlightsError, RuntimeError):
    """ffmpeg could not be started or exited non-zero."""
