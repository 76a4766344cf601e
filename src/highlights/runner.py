"""Render a FilterGraph: pre-commands, ffmpeg, post-commands.

Post-commands (temp subtitle removal) run in a `finally` block, so they
execute after a failed render and on Ctrl-C too. Their own failures are
reported and collected on the RunResult; they never replace the outcome
of the ffmpeg run.
"""

import subprocess
from typing import NamedTuple

import imageio_ffmpeg

from .errors import RendererExecutionError, SubtitleFileError
from .graph import Command, FilterGraph


def default_ffmpeg() -> str:
    """Path to the ffmpeg binary bundled with imageio-ffmpeg."""
    return imageio_ffmpeg.get_ffmpeg_exe()


class RunResult(NamedTuple):
    argv: list[str]
    cleanup_errors: list[str]


def render_command(graph: FilterGraph, ffmpeg: str | None = None) -> list[str]:
    """The full ffmpeg argv (program first). Validates the graph."""
    return [ffmpeg or default_ffmpeg(), *graph.serialize()]


def _run_aux(command: Command, cwd, stdout, stderr) -> str | None:
    """Run one auxiliary command. Returns an error message or None."""
    try:
        result = subprocess.run(command.argv(), cwd=cwd, stdout=stdout, stderr=stderr)
    except OSError as e:
        return f"{command}: {e}"
    if result.returncode != 0:
        return f"{command}: exit status {result.returncode}"
    return None


def run_graph(
    graph: FilterGraph,
    cwd: str | None = None,
    ffmpeg: str | None = None,
    stdout=None,
    stderr=None,
) -> RunResult:
    """Run pre-commands, ffmpeg, then post-commands, all in `cwd`.

    Args:
        graph: A built FilterGraph.
        cwd: Working directory for every process (relative media paths
            resolve against it). None = current directory.
        ffmpeg: ffmpeg executable. None = bundled imageio-ffmpeg binary.
        stdout, stderr: Passed through to subprocess (None = inherit).

    Returns:
        RunResult with the ffmpeg argv and any cleanup failures.

    Raises:
        DanglingReference: Graph failed validation (nothing is run).
        SubtitleFileError: A pre-command failed (ffmpeg is not started).
        RendererExecutionError: ffmpeg failed to start or exited non-zero.
    """
    argv = render_command(graph, ffmpeg)
    cleanup_errors = []

    try:
        for cmd in graph.pre_commands:
            print(f"  PRE    {cmd}")
            error = _run_aux(cmd, cwd, stdout, stderr)
            if error:
                raise SubtitleFileError(f"Pre-command failed: {error}")

        print(f"  RUN    {subprocess.list2cmdline(argv)}")
        try:
            result = subprocess.run(argv, cwd=cwd, stdout=stdout, stderr=stderr)
        except OSError as e:
            raise RendererExecutionError(f"Cannot start ffmpeg ({argv[0]}): {e}") from e
        if result.returncode != 0:
            raise RendererExecutionError(
                f"ffmpeg exited with status {result.returncode} writing {graph.output_file}"
            )
    finally:
        for cmd in graph.post_commands:
            print(f"  POST   {cmd}")
            error = _run_aux(cmd, cwd, stdout, stderr)
            if error:
                print(f"  WARN   cleanup failed: {error}")
                cleanup_errors.append(error)

    return RunResult(argv=argv, cleanup_errors=cleanup_errors)
