"""Pipeline builder — compile a VideoProject into a FilterGraph.

Graph layout for a project with an opening, two clips, a closing and BGM:

    inputs:  0 op.jpg   1 ed.jpg   2 a.mp4   3 b.mp4   4 bgm.mp3

    [0:v:0]fps,loop,scale,pad,setsar,format,[subtitles,]fade      [op_v]
    aevalsrc=0:c=stereo                                           [op_a]
    [1:v:0]...                                                    [ed_v]
    aevalsrc=0:c=stereo                                           [ed_a]
    [2:v:0]scale,pad,setsar[,trim,setpts][,subtitles]             [clip_00_v]
    [2:a:0][atrim,asetpts,]aformat                                [clip_00_a]
    ... clip_01 ...
    [op_v][op_a][clip_00_v][clip_00_a]...[ed_v][ed_a]concat       [outv][outa]
    [4:a:0]aformat                                                [bgm_a]
    [bgm_a][outa]amerge,pan                                       [outa_merged_bgm]

    -map [outv] -map [outa_merged_bgm]

Every audio chain ends in stereo so the BGM downmix always sees four
channels. Chain and input order is fixed: opening, closing, clips,
concat, BGM.
The concat inputs follow the timeline instead: opening, clips, closing.
"""

from .errors import InvalidSegment
from .filters import filter_op, quote
from .graph import FilterGraph
from .project import ClipSegment, ImageSegment, VideoProject
from .subtitles import clip_subtitle_artifact, image_subtitle_artifact, srt_path_for

# Sums the two stereo pairs produced by amerge (BGM c0/c1, track c2/c3).
# Both amerge inputs are forced to STEREO first.
STEREO_DOWNMIX = "stereo|c0<c0+c2|c1<c1+c3"
STEREO = filter_op("aformat", channel_layouts="stereo")


def _seconds(value: float) -> float:
    return round(value, 3)


def _scale_pad_ops(w: int, h: int) -> list[str]:
    """Fit inside w x h keeping aspect ratio, then letterbox to exactly w x h."""
    return [
        filter_op("scale", w, h, force_original_aspect_ratio="decrease"),
        filter_op("pad", w, h, "(ow-iw)/2", "(oh-ih)/2"),
        filter_op("setsar", "1:1"),
    ]


def _subtitles_op(srt_file: str, font_size: int) -> str:
    return filter_op("subtitles", quote(srt_file), force_style=quote(f"Fontsize={font_size}"))


def _trim_op(name: str, start, end) -> str:
    """trim/atrim with only the bounds that are set."""
    bounds = {}
    if start is not None:
        bounds["start"] = start.seconds_str()
    if end is not None:
        bounds["end"] = end.seconds_str()
    return filter_op(name, **bounds)


class _Builder:
    def __init__(self, project: VideoProject):
        self.project = project
        self.out = project.output
        self.graph = FilterGraph(project.output.file)
        self.srt_claimed: set[str] = set()
        # prefix -> (video chain, audio chain)
        self.segment_chains = {}

    def build(self) -> FilterGraph:
        if self.project.opening is not None:
            self._image_segment("op", self.project.opening, "Opening (op)")
        if self.project.closing is not None:
            self._image_segment("ed", self.project.closing, "Closing (ed)")

        for i, clip in enumerate(self.project.clips):
            self._clip_segment(f"clip_{i:02d}", clip, f"Clip {i}")

        concat = self._concat()

        audio_out = (concat, 1)
        if self.project.bgm:
            audio_out = (self._bgm_merge(concat), 0)

        self.graph.map_output(concat, 0)
        self.graph.map_output(*audio_out)
        return self.graph

    # ── Segments ──────────────────────────────────────────────────

    def _image_segment(self, prefix: str, seg: ImageSegment, where: str) -> None:
        seg.validate(where)
        graph, out = self.graph, self.out

        video = graph.new_chain(f"{prefix}_v")
        video.add_source_input(graph.declare_input(seg.file), "v", 0)

        video.chain(filter_op("fps", out.fps))
        video.chain(filter_op("loop", loop=round(seg.duration * out.fps), size=1))
        for op in _scale_pad_ops(out.w, out.h):
            video.chain(op)
        video.chain(filter_op("format", pix_fmts="yuv420p"))

        if seg.subtitle:
            srt_file = srt_path_for(seg.file, self.srt_claimed)
            graph.add_artifact(image_subtitle_artifact(srt_file, seg.subtitle, seg.duration))
            video.chain(_subtitles_op(srt_file, seg.font_size))

        video.chain(filter_op(
            "fade", t="out",
            st=_seconds(seg.duration - seg.fade_out_duration),
            d=_seconds(seg.fade_out_duration),
        ))

        # Silent track so the image segment has audio to concat.
        audio = graph.new_chain(f"{prefix}_a")
        audio.chain(filter_op("aevalsrc", 0, c="stereo", d=_seconds(seg.duration)))

        graph.add_chain(video)
        graph.add_chain(audio)
        self.segment_chains[prefix] = (video, audio)

    def _clip_segment(self, prefix: str, clip: ClipSegment, where: str) -> None:
        clip.validate(where)
        start, end = clip.bounds(where)
        graph, out = self.graph, self.out

        video = graph.new_chain(f"{prefix}_v")
        audio = graph.new_chain(f"{prefix}_a")

        index = graph.declare_input(clip.file)
        video.add_source_input(index, "v", 0)
        audio.add_source_input(index, "a", 0)

        for op in _scale_pad_ops(out.w, out.h):
            video.chain(op)

        if clip.trimmed:
            video.chain(_trim_op("trim", start, end)).chain("setpts=PTS-STARTPTS")
            audio.chain(_trim_op("atrim", start, end)).chain("asetpts=PTS-STARTPTS")
        audio.chain(STEREO)

        if clip.subtitle:
            srt_file = srt_path_for(clip.file, self.srt_claimed)
            # Untrimmed clips play in full, so the cue must too.
            bounds = (clip.start, clip.end) if clip.trimmed else ("", "")
            graph.add_artifact(clip_subtitle_artifact(
                srt_file, clip.subtitle, clip.file, *bounds,
            ))
            video.chain(_subtitles_op(srt_file, clip.font_size))

        graph.add_chain(video)
        graph.add_chain(audio)
        self.segment_chains[prefix] = (video, audio)

    # ── Concat & BGM ──────────────────────────────────────────────

    def _concat(self):
        timeline = self.project.segments()
        if not timeline:
            raise InvalidSegment("Project has no segments: add op, ed, or at least one clip")

        concat = self.graph.new_chain("outv", "outa")
        for prefix, _ in timeline:
            video, audio = self.segment_chains[prefix]
            concat.add_upstream_input(video, 0)
            concat.add_upstream_input(audio, 0)

        concat.chain(filter_op("concat", n=len(timeline), v=1, a=1))
        return self.graph.add_chain(concat)

    def _bgm_merge(self, concat):
        index = self.graph.declare_input(self.project.bgm)

        bgm = self.graph.new_chain("bgm_a")
        bgm.add_source_input(index, "a", 0)
        bgm.chain(STEREO)
        self.graph.add_chain(bgm)

        merge = self.graph.new_chain("outa_merged_bgm")
        merge.add_upstream_input(bgm, 0)
        merge.add_upstream_input(concat, 1)
        merge.chain(filter_op("amerge", inputs=2)).chain(filter_op("pan", STEREO_DOWNMIX))
        return self.graph.add_chain(merge)


def build_graph(project: VideoProject) -> FilterGraph:
    """Compile a project into a wired, validated FilterGraph.

    Order of inputs and chains:
      1. Opening image (video chain + silent audio chain), if present.
      2. Closing image, if present.
      3. Each clip: input, video chain (scale/pad[/trim][/subtitles]),
         audio chain ([/atrim]/aformat stereo).
      4. Concat over the timeline: op, clips in order, ed.
      5. BGM forced to stereo, then amerge + stereo downmix, if a BGM
         file is set.
      6. Output maps: concat video, then merged (or concat) audio.

    Raises:
        InvalidTimestamp: A clip bound fails to parse.
        InvalidSegment: Bad durations, start after end, no segments.
        ValueError: A subtitle path cannot be quoted for the filter.
    """
    project.output.validate()
    graph = _Builder(project).build()
    graph.validate()
    return graph
