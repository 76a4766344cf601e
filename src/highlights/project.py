"""Highlights manifest loader and project model.

Manifests are YAML or JSON (JSON parses as YAML). Schema:

  op:                         # optional opening image (null to skip)
    file: "op.jpg"
    duration: 4               # seconds, must exceed fade_out_duration
    fade_out_duration: 1
    subtitle: "Summer 2024"   # optional
    font_size: 24             # optional, default 24
  ed:                         # optional closing image, same fields as op
    ...
  clips:
    - file: "01.mp4"
      start: "00:00:05"       # optional, "" = from the beginning
      end: "00:00:10.5"       # optional, "" = to the end
      subtitle: "First swim"  # optional
      font_size: 24
  bgm: "music.mp3"            # optional
  output:
    file: "highlights.mp4"
    w: 1280
    h: 720
    fps: 30
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import InvalidSegment, InvalidTimestamp
from .timestamp import Timestamp

DEFAULT_FONT_SIZE = 24


# ── Model ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ImageSegment:
    file: str
    duration: float
    fade_out_duration: float = 0
    subtitle: str = ""
    font_size: int = DEFAULT_FONT_SIZE

    def validate(self, where: str) -> None:
        if self.duration <= 0:
            raise InvalidSegment(f"{where}: duration must be > 0, got {self.duration}")
        if self.fade_out_duration < 0:
            raise InvalidSegment(
                f"{where}: fade_out_duration must be >= 0, got {self.fade_out_duration}"
            )
        if self.duration <= self.fade_out_duration:
            raise InvalidSegment(
                f"{where}: duration ({self.duration}) must exceed "
                f"fade_out_duration ({self.fade_out_duration})"
            )
        _check_font_size(self.font_size, where)


@dataclass(frozen=True)
class ClipSegment:
    file: str
    start: str = ""
    end: str = ""
    subtitle: str = ""
    font_size: int = DEFAULT_FONT_SIZE

    @property
    def trimmed(self) -> bool:
        """Exact string comparison: identical bounds mean no trim."""
        return self.start != self.end

    def bounds(self, where: str) -> tuple[Timestamp | None, Timestamp | None]:
        """Parse start/end. Empty bounds come back as None.

        Raises:
            InvalidTimestamp: Either bound fails to parse (message names it).
            InvalidSegment: start is after end.
        """
        try:
            start = Timestamp.parse(self.start) if self.start else None
        except InvalidTimestamp as e:
            raise InvalidTimestamp(f"{where}: start: {e}") from e
        try:
            end = Timestamp.parse(self.end) if self.end else None
        except InvalidTimestamp as e:
            raise InvalidTimestamp(f"{where}: end: {e}") from e
        if start is not None and end is not None and start > end:
            raise InvalidSegment(f"{where}: start ({self.start}) is after end ({self.end})")
        return start, end

    def validate(self, where: str) -> None:
        self.bounds(where)
        _check_font_size(self.font_size, where)


@dataclass(frozen=True)
class OutputSpec:
    file: str
    w: int
    h: int
    fps: int

    def validate(self) -> None:
        for name in ("w", "h", "fps"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidSegment(f"output.{name} must be a positive integer, got {value!r}")
        if not self.file:
            raise InvalidSegment("output.file is required")


@dataclass(frozen=True)
class VideoProject:
    output: OutputSpec
    opening: ImageSegment | None = None
    closing: ImageSegment | None = None
    clips: tuple[ClipSegment, ...] = field(default_factory=tuple)
    bgm: str | None = None

    def segments(self) -> list[tuple[str, ImageSegment | ClipSegment]]:
        """Timeline order with label prefixes: op, clip_00, clip_01, ..., ed."""
        timeline = []
        if self.opening is not None:
            timeline.append(("op", self.opening))
        for i, clip in enumerate(self.clips):
            timeline.append((f"clip_{i:02d}", clip))
        if self.closing is not None:
            timeline.append(("ed", self.closing))
        return timeline

    def validate(self) -> None:
        """Check every invariant. Raises the first failure found."""
        self.output.validate()
        if self.opening is not None:
            self.opening.validate("Opening (op)")
        if self.closing is not None:
            self.closing.validate("Closing (ed)")
        for i, clip in enumerate(self.clips):
            clip.validate(f"Clip {i}")
        if not self.segments():
            raise InvalidSegment("Project has no segments: add op, ed, or at least one clip")


def _check_font_size(font_size, where: str) -> None:
    if isinstance(font_size, bool) or not isinstance(font_size, int) or font_size <= 0:
        raise InvalidSegment(f"{where}: font_size must be a positive integer, got {font_size!r}")


# ── Manifest loading ──────────────────────────────────────────────


def load_manifest(manifest_path: str | Path) -> VideoProject:
    """Load, validate, and normalize a highlights manifest.

    Processing pipeline:
      1. Parse YAML (JSON manifests parse the same way).
      2. Build ImageSegment / ClipSegment / OutputSpec from raw dicts.
      3. Validate all invariants (durations, timestamps, geometry).

    Media paths are kept as written; relative paths resolve against the
    render working directory (the manifest's directory by default).

    Raises:
        ValueError: Missing/invalid fields.
        FileNotFoundError: Missing manifest file.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Manifest {manifest_path}: expected a mapping at top level")
    return project_from_dict(raw)


def project_from_dict(raw: dict) -> VideoProject:
    if "output" not in raw or not isinstance(raw["output"], dict):
        raise ValueError("Manifest: missing required 'output' section")

    out = raw["output"]
    for key in ("file", "w", "h", "fps"):
        if key not in out:
            raise ValueError(f"Manifest: output.{key} is required")
    output = OutputSpec(file=str(out["file"]), w=out["w"], h=out["h"], fps=out["fps"])

    clips_raw = raw.get("clips") or []
    if not isinstance(clips_raw, list):
        raise ValueError("Manifest: 'clips' must be a list")

    clips = []
    for i, c in enumerate(clips_raw):
        if not isinstance(c, dict) or "file" not in c:
            raise ValueError(f"Clip {i}: missing required field 'file'")
        clips.append(ClipSegment(
            file=str(c["file"]),
            start=_str_field(c, "start"),
            end=_str_field(c, "end"),
            subtitle=_str_field(c, "subtitle"),
            font_size=c.get("font_size", DEFAULT_FONT_SIZE),
        ))

    bgm = raw.get("bgm") or None

    project = VideoProject(
        output=output,
        opening=_image_segment(raw.get("op"), "Opening (op)"),
        closing=_image_segment(raw.get("ed"), "Closing (ed)"),
        clips=tuple(clips),
        bgm=str(bgm) if bgm else None,
    )
    project.validate()
    return project


def _image_segment(raw, where: str) -> ImageSegment | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: expected a mapping or null")
    for key in ("file", "duration"):
        if key not in raw:
            raise ValueError(f"{where}: missing required field '{key}'")
    for key in ("duration", "fade_out_duration"):
        value = raw.get(key, 0)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{where}: {key} must be a number, got {value!r}")
    return ImageSegment(
        file=str(raw["file"]),
        duration=raw["duration"],
        fade_out_duration=raw.get("fade_out_duration", 0),
        subtitle=_str_field(raw, "subtitle"),
        font_size=raw.get("font_size", DEFAULT_FONT_SIZE),
    )


def _str_field(raw: dict, key: str) -> str:
    """Optional string field; None/missing become ''. YAML may give numbers."""
    value = raw.get(key)
    if value is None:
        return ""
    return str(value)


def validate_paths(project: VideoProject, work_dir: str | Path) -> None:
    """Check that every media file the project reads exists on disk.

    Relative paths resolve against `work_dir`, the render's working
    directory. Reports all missing paths at once.

    Raises:
        FileNotFoundError: Lists all missing files.
    """
    files = [seg.file for _, seg in project.segments()]
    if project.bgm:
        files.append(project.bgm)

    missing = []
    for f in files:
        if not (Path(work_dir) / f).exists() and f not in missing:
            missing.append(f)

    if missing:
        msg = f"Missing {len(missing)} media file(s) under {work_dir}:\n"
        for p in missing:
            msg += f"  - {p}\n"
        raise FileNotFoundError(msg)
