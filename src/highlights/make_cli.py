"""CLI for rendering a highlights reel from a manifest.

Usage:
    # Render (media paths resolve against the manifest's directory)
    highlights make examples/data.json

    # Validate only: manifest, graph and media paths (no rendering)
    highlights make examples/data.yaml --validate

    # Print the ffmpeg command and pre/post commands without running them
    highlights make examples/data.json --dry-run
"""

import argparse
import subprocess
import sys
from pathlib import Path

from .builder import build_graph
from .errors import HighlightsError
from .project import load_manifest, validate_paths
from .runner import render_command, run_graph


def make(
    manifest_path: str,
    work_dir: str | None = None,
    ffmpeg: str | None = None,
    stdout=None,
    stderr=None,
):
    """Load a manifest, build the filter graph, and render it.

    Args:
        manifest_path: YAML/JSON manifest.
        work_dir: Working directory for ffmpeg and the subtitle commands.
            Defaults to the manifest's directory.
        ffmpeg: ffmpeg executable override.

    Returns:
        RunResult from the runner.
    """
    project = load_manifest(manifest_path)
    graph = build_graph(project)
    cwd = work_dir or str(Path(manifest_path).parent)

    print(f"Rendering {len(project.segments())} segments -> {project.output.file}")
    print(f"Working directory: {cwd}")
    result = run_graph(graph, cwd=cwd, ffmpeg=ffmpeg, stdout=stdout, stderr=stderr)
    print(f"\nDone: {project.output.file}")
    return result


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="highlights make",
        description="Render a highlights reel described by a YAML/JSON manifest.",
    )
    parser.add_argument("manifest", help="Path to the manifest (YAML or JSON)")
    parser.add_argument(
        "--dir", default=None,
        help="Working directory for media paths (default: manifest's directory)",
    )
    parser.add_argument(
        "--ffmpeg", default=None,
        help="ffmpeg executable (default: imageio-ffmpeg's bundled binary)",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest, graph and media paths only, don't render",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the commands that would run, don't render",
    )
    parsed = parser.parse_args(args)

    try:
        if parsed.validate or parsed.dry_run:
            project = load_manifest(parsed.manifest)
            graph = build_graph(project)
            if parsed.validate:
                validate_paths(project, parsed.dir or Path(parsed.manifest).parent)
                print(f"Manifest valid: {len(project.segments())} segments, "
                      f"{len(graph.inputs)} inputs, {len(graph.chains)} filter chains")
                for i, (prefix, seg) in enumerate(project.segments()):
                    print(f"  {i}: {prefix:8s} {seg.file}")
                print("All paths verified.")
                return
            for cmd in graph.pre_commands:
                print(f"PRE   {cmd}")
            print(f"RUN   {subprocess.list2cmdline(render_command(graph, parsed.ffmpeg))}")
            for cmd in graph.post_commands:
                print(f"POST  {cmd}")
            return

        result = make(parsed.manifest, work_dir=parsed.dir, ffmpeg=parsed.ffmpeg)
    except (HighlightsError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if result.cleanup_errors:
        print(f"Warning: {len(result.cleanup_errors)} cleanup command(s) failed", file=sys.stderr)


if __name__ == "__main__":
    main()
