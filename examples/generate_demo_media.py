#!/usr/bin/env python3
"""Generate synthetic media for the highlights demo manifest.

Creates an opening and closing still, three short clips with a test tone,
and a stereo background track in examples/demo-media/.

Usage:
    python examples/generate_demo_media.py
    # Then render (paths resolve against the manifest's directory):
    highlights make examples/demo-media/demo.json
"""

import shutil
import subprocess
from pathlib import Path

import imageio_ffmpeg

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()

OUTPUT_DIR = Path(__file__).resolve().parent / "demo-media"
SIZE = "640x480"

STILLS = [
    ("op.png", "0x2a4d69"),
    ("ed.png", "0x4b86b4"),
]

# Clips with distinct colors, tones and lengths. Portrait clip-02 shows
# the letterboxing done by scale+pad.
CLIPS = [
    ("clip-01.mp4", "red", "640x480", 440, 8),
    ("clip-02.mp4", "green", "360x640", 550, 6),
    ("clip-03.mp4", "purple", "800x450", 660, 10),
]


def _ffmpeg(*args):
    subprocess.run([_FFMPEG, "-y", *args], check=True, capture_output=True)


def main():
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    for name, color in STILLS:
        out = OUTPUT_DIR / name
        if out.exists():
            print(f"  skip {name} (exists)")
            continue
        _ffmpeg("-f", "lavfi", "-i", f"color=c={color}:s={SIZE}:d=1", "-frames:v", "1", str(out))
        print(f"  made {name}")

    for name, color, size, freq, duration in CLIPS:
        out = OUTPUT_DIR / name
        if out.exists():
            print(f"  skip {name} (exists)")
            continue
        _ffmpeg(
            "-f", "lavfi", "-i", f"testsrc2=s={size}:d={duration}:r=30",
            "-f", "lavfi", "-i", f"sine=f={freq}:d={duration}",
            "-vf", f"drawbox=c={color}@0.4:t=fill",
            "-ac", "2",
            "-c:v", "libx264", "-pix_fmt", "yuv420p", "-c:a", "aac",
            str(out),
        )
        print(f"  made {name}  ({duration}s, {size})")

    bgm = OUTPUT_DIR / "bgm.m4a"
    if not bgm.exists():
        _ffmpeg(
            "-f", "lavfi", "-i", "sine=f=220:d=40",
            "-ac", "2", "-c:a", "aac", str(bgm),
        )
        print("  made bgm.m4a")

    manifest = Path(__file__).resolve().parent / "demo.json"
    shutil.copy(manifest, OUTPUT_DIR / "demo.json")
    print(f"\nDone. Render with: highlights make {OUTPUT_DIR / 'demo.json'}")


if __name__ == "__main__":
    main()
