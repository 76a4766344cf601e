"""highlights — manifest-driven highlight reels.

Compile an opening image, trimmed clips, a closing image and background
music into a single ffmpeg filter graph, then render it with ffmpeg.
All content and geometry is declared in a YAML/JSON manifest.
"""
