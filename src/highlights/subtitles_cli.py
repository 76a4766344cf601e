"""CLI for temporary subtitle files — run as render pre/post commands.

Usage:
    # Image segment: cue covers a fixed duration
    python -m highlights.subtitles_cli create op.srt --text "Hello" --duration 4

    # Clip: cue covers the clip's trim range (end defaults to clip length)
    python -m highlights.subtitles_cli create a.srt --text "Hi" \
        --source a.mp4 --start 00:00:05 --end 00:00:10

    python -m highlights.subtitles_cli remove a.srt
"""

import argparse
import sys

from .errors import HighlightsError
from .subtitles import clip_duration, remove_srt, write_srt
from .timestamp import Timestamp


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        prog="highlights srt",
        description="Create or remove a one-cue SRT file.",
    )
    sub = parser.add_subparsers(dest="action", required=True)

    create = sub.add_parser("create", help="Write a one-cue SRT file")
    create.add_argument("path", help="SRT file to write")
    create.add_argument("--text", required=True, help="Subtitle text")
    create.add_argument(
        "--duration", default=None,
        help="Cue length (seconds or HH:MM:SS) for image segments",
    )
    create.add_argument(
        "--source", default=None,
        help="Clip file whose trim range sets the cue length",
    )
    create.add_argument("--start", default="", help="Clip trim start")
    create.add_argument("--end", default="", help="Clip trim end")

    remove = sub.add_parser("remove", help="Delete an SRT file")
    remove.add_argument("path", help="SRT file to delete")

    parsed = parser.parse_args(args)
    if parsed.action == "create" and (parsed.duration is None) == (parsed.source is None):
        parser.error("create requires exactly one of --duration or --source")
    return parsed


def main(args=None):
    parsed = _parse_args(args)

    try:
        if parsed.action == "create":
            if parsed.source is not None:
                duration = clip_duration(parsed.source, parsed.start, parsed.end)
            else:
                duration = Timestamp.parse(parsed.duration)
            write_srt(parsed.path, parsed.text, duration)
            print(f"  SRT    {parsed.path}  0 — {duration.seconds_str()}s")
        else:
            remove_srt(parsed.path)
            print(f"  RM     {parsed.path}")
    except HighlightsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
