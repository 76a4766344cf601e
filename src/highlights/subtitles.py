"""Temporary one-cue SRT files for burned-in subtitles.

Each subtitle-bearing segment gets an SRT file next to its media file
(op.jpg -> op.srt) holding a single cue from 0 to the segment's length.
The file is written by a pre-command and deleted by a post-command; both
run `python -m highlights.subtitles_cli` so they are ordinary processes
in the render's command lists.
"""

import sys
from pathlib import Path

import imageio_ffmpeg

from .errors import InvalidTimestamp, SubtitleFileError
from .graph import Command, TempArtifact
from .timestamp import Timestamp


def srt_path_for(media_file: str, claimed: set[str] | None = None) -> str:
    """SRT path for a media file: same name, '.srt' suffix.

    If `claimed` already holds that path (the same file used twice in one
    project), an index is inserted: 'a.srt', 'a.1.srt', 'a.2.srt', ...
    The returned path is added to `claimed`.
    """
    base = Path(media_file).with_suffix("")
    path = str(base.with_name(base.name + ".srt"))
    if claimed is not None:
        n = 1
        while path in claimed:
            path = str(base.with_name(f"{base.name}.{n}.srt"))
            n += 1
        claimed.add(path)
    return path


def srt_text(text: str, duration: Timestamp) -> str:
    """One-cue SubRip document spanning [0, duration]."""
    return f"1\n{Timestamp(0).srt_str()} --> {duration.srt_str()}\n{text}\n"


def probe_duration(media_file: str) -> Timestamp:
    """Media duration via the bundled ffmpeg.

    Raises:
        SubtitleFileError: File missing or not decodable.
    """
    try:
        _, secs = imageio_ffmpeg.count_frames_and_secs(media_file)
    except (OSError, RuntimeError) as e:
        raise SubtitleFileError(f"Cannot probe duration of {media_file}: {e}") from e
    return Timestamp.from_seconds(secs)


def clip_duration(media_file: str, start: str = "", end: str = "") -> Timestamp:
    """Length of the trimmed span [start, end] of a clip.

    An empty start means 0. An empty end means the clip's full length,
    which requires probing the file.
    """
    try:
        start_ts = Timestamp.parse(start) if start else Timestamp(0)
        end_ts = Timestamp.parse(end) if end else None
    except InvalidTimestamp as e:
        raise SubtitleFileError(f"Cannot time subtitle for {media_file}: {e}") from e

    if end_ts is None:
        end_ts = probe_duration(media_file)
    if end_ts < start_ts:
        raise SubtitleFileError(
            f"Cannot time subtitle for {media_file}: start {start_ts} is after end {end_ts}"
        )
    return end_ts - start_ts


def write_srt(path: str, text: str, duration: Timestamp) -> None:
    """Write the one-cue SRT file.

    Raises:
        SubtitleFileError: Write failed.
    """
    try:
        Path(path).write_text(srt_text(text, duration), encoding="utf-8")
    except OSError as e:
        raise SubtitleFileError(f"Cannot create subtitle file {path}: {e}") from e


def remove_srt(path: str) -> None:
    """Delete an SRT file. A file that is already gone is not an error."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        raise SubtitleFileError(f"Cannot remove subtitle file {path}: {e}") from e


# ── Command pairs ─────────────────────────────────────────────────


def _cli_command(*args: str) -> Command:
    return Command(sys.executable, ("-m", "highlights.subtitles_cli", *args))


def image_subtitle_artifact(srt_file: str, text: str, duration: float) -> TempArtifact:
    """Create/remove pair for an image segment shown for `duration` seconds."""
    return TempArtifact(
        path=srt_file,
        create=_cli_command(
            "create", srt_file, f"--text={text}",
            f"--duration={Timestamp.from_seconds(duration).seconds_str()}",
        ),
        remove=_cli_command("remove", srt_file),
    )


def clip_subtitle_artifact(
    srt_file: str, text: str, source: str, start: str = "", end: str = "",
) -> TempArtifact:
    """Create/remove pair for a clip; the cue spans the clip's own trim range."""
    # --opt=value keeps text that starts with '-' from parsing as a flag.
    create_args = ["create", srt_file, f"--text={text}", f"--source={source}"]
    if start:
        create_args.append(f"--start={start}")
    if end:
        create_args.append(f"--end={end}")
    return TempArtifact(
        path=srt_file,
        create=_cli_command(*create_args),
        remove=_cli_command("remove", srt_file),
    )
