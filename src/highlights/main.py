"""Subcommand dispatcher for highlights.

Usage:
    highlights make    manifest.json [--validate] [--dry-run]
    highlights srt     create op.srt --text "Hello" --duration 4
    highlights srt     remove op.srt
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="highlights",
        description="Compile a highlights manifest into an ffmpeg filter graph and render it.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("make", help="Render a reel from a YAML/JSON manifest")
    subparsers.add_parser("srt", help="Create or remove a temporary subtitle file")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "make":
        from .make_cli import main as make_main
        make_main(remaining)
    elif parsed.command == "srt":
        from .subtitles_cli import main as srt_main
        srt_main(remaining)


if __name__ == "__main__":
    main()
