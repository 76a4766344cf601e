"""Tests for the manifest loader and project model."""

import json

import pytest
import yaml

from highlights.errors import InvalidSegment, InvalidTimestamp


def _write_manifest(tmp_path, content: dict, suffix=".yaml") -> str:
    """Write a manifest dict to a YAML (or JSON) file, return path."""
    path = tmp_path / f"manifest{suffix}"
    if suffix == ".json":
        path.write_text(json.dumps(content))
    else:
        path.write_text(yaml.dump(content))
    return str(path)


def _minimal(**overrides):
    """Return a minimal valid manifest dict: one untrimmed clip."""
    m = {
        "clips": [{"file": "a.mp4"}],
        "output": {"file": "out.mp4", "w": 1280, "h": 720, "fps": 30},
    }
    m.update(overrides)
    return m


def _image(**overrides):
    i = {"file": "op.jpg", "duration": 4, "fade_out_duration": 1}
    i.update(overrides)
    return i


class TestLoadManifest:
    def test_parses_output(self, tmp_path):
        from highlights.project import load_manifest

        project = load_manifest(_write_manifest(tmp_path, _minimal()))
        assert project.output.file == "out.mp4"
        assert (project.output.w, project.output.h, project.output.fps) == (1280, 720, 30)

    def test_parses_json(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(bgm="music.mp3", op=_image(), ed=None)
        project = load_manifest(_write_manifest(tmp_path, m, suffix=".json"))
        assert project.bgm == "music.mp3"
        assert project.opening.file == "op.jpg"
        assert project.closing is None

    def test_clip_defaults(self, tmp_path):
        from highlights.project import DEFAULT_FONT_SIZE, load_manifest

        project = load_manifest(_write_manifest(tmp_path, _minimal()))
        clip = project.clips[0]
        assert clip.start == "" and clip.end == ""
        assert clip.subtitle == ""
        assert clip.font_size == DEFAULT_FONT_SIZE
        assert not clip.trimmed

    def test_quoted_timestamps_kept_verbatim(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(clips=[{"file": "a.mp4", "start": "00:00:05", "end": "00:00:10.5"}])
        path = tmp_path / "m.yaml"
        path.write_text(json.dumps(m))
        clip = load_manifest(str(path)).clips[0]
        assert clip.start == "00:00:05"
        assert clip.end == "00:00:10.5"
        assert clip.trimmed

    def test_null_fields_become_empty(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(
            clips=[{"file": "a.mp4", "start": None, "end": None, "subtitle": None}],
            op=None, ed=None, bgm=None,
        )
        project = load_manifest(_write_manifest(tmp_path, m))
        assert project.clips[0].start == ""
        assert project.bgm is None

    def test_project_is_immutable(self, tmp_path):
        from dataclasses import FrozenInstanceError
        from highlights.project import load_manifest

        project = load_manifest(_write_manifest(tmp_path, _minimal()))
        with pytest.raises(FrozenInstanceError):
            project.bgm = "x.mp3"


class TestSegments:
    def test_timeline_order_and_prefixes(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(
            op=_image(), ed=_image(file="ed.jpg"),
            clips=[{"file": "a.mp4"}, {"file": "b.mp4"}],
        )
        project = load_manifest(_write_manifest(tmp_path, m))
        assert [p for p, _ in project.segments()] == ["op", "clip_00", "clip_01", "ed"]
        assert [s.file for _, s in project.segments()] == ["op.jpg", "a.mp4", "b.mp4", "ed.jpg"]

    def test_absent_images_skipped(self, tmp_path):
        from highlights.project import load_manifest

        project = load_manifest(_write_manifest(tmp_path, _minimal()))
        assert [p for p, _ in project.segments()] == ["clip_00"]


class TestManifestValidation:
    def test_missing_output_raises(self, tmp_path):
        from highlights.project import load_manifest

        with pytest.raises(ValueError, match="output"):
            load_manifest(_write_manifest(tmp_path, {"clips": []}))

    def test_missing_output_field_raises(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(output={"file": "out.mp4", "w": 1280, "h": 720})
        with pytest.raises(ValueError, match="fps"):
            load_manifest(_write_manifest(tmp_path, m))

    @pytest.mark.parametrize("field,value", [("w", 0), ("h", -1), ("fps", 29.97), ("w", "1280")])
    def test_bad_geometry_raises(self, tmp_path, field, value):
        from highlights.project import load_manifest

        m = _minimal()
        m["output"][field] = value
        with pytest.raises(InvalidSegment, match=f"output.{field}"):
            load_manifest(_write_manifest(tmp_path, m))

    def test_clip_missing_file_raises(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(clips=[{"start": "00:00:01"}])
        with pytest.raises(ValueError, match="Clip 0.*file"):
            load_manifest(_write_manifest(tmp_path, m))

    def test_fade_not_shorter_than_duration_raises(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(op=_image(duration=2, fade_out_duration=2))
        with pytest.raises(InvalidSegment, match="Opening.*exceed"):
            load_manifest(_write_manifest(tmp_path, m))

    def test_negative_fade_raises(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(ed=_image(fade_out_duration=-1))
        with pytest.raises(InvalidSegment, match="Closing"):
            load_manifest(_write_manifest(tmp_path, m))

    def test_image_missing_duration_raises(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(op={"file": "op.jpg"})
        with pytest.raises(ValueError, match="duration"):
            load_manifest(_write_manifest(tmp_path, m))

    def test_bad_timestamp_raises_with_clip_index(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(clips=[{"file": "a.mp4"}, {"file": "b.mp4", "start": "xx"}])
        with pytest.raises(InvalidTimestamp, match="Clip 1: start"):
            load_manifest(_write_manifest(tmp_path, m))

    def test_start_after_end_raises(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(clips=[{"file": "a.mp4", "start": "00:00:10", "end": "00:00:05"}])
        with pytest.raises(InvalidSegment, match="after end"):
            load_manifest(_write_manifest(tmp_path, m))

    def test_bad_font_size_raises(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(clips=[{"file": "a.mp4", "subtitle": "hi", "font_size": -3}])
        with pytest.raises(InvalidSegment, match="font_size"):
            load_manifest(_write_manifest(tmp_path, m))

    def test_zero_font_size_raises(self, tmp_path):
        from highlights.project import load_manifest

        m = _minimal(clips=[{"file": "a.mp4", "subtitle": "hi", "font_size": 0}])
        with pytest.raises(InvalidSegment, match="Clip 0: font_size"):
            load_manifest(_write_manifest(tmp_path, m))

        m = _minimal(op=_image(subtitle="hi", font_size=0))
        with pytest.raises(InvalidSegment, match=r"Opening \(op\): font_size"):
            load_manifest(_write_manifest(tmp_path, m))

    def test_no_segments_raises(self, tmp_path):
        from highlights.project import load_manifest

        with pytest.raises(InvalidSegment, match="no segments"):
            load_manifest(_write_manifest(tmp_path, _minimal(clips=[])))

    def test_missing_manifest_raises(self, tmp_path):
        from highlights.project import load_manifest

        with pytest.raises(FileNotFoundError):
            load_manifest(str(tmp_path / "nope.yaml"))


class TestValidatePaths:
    def test_all_present(self, tmp_path):
        from highlights.project import load_manifest, validate_paths

        for name in ("op.jpg", "a.mp4", "bgm.mp3"):
            (tmp_path / name).touch()
        project = load_manifest(_write_manifest(tmp_path, _minimal(op=_image(), bgm="bgm.mp3")))
        validate_paths(project, tmp_path)

    def test_lists_every_missing_file_once(self, tmp_path):
        from highlights.project import load_manifest, validate_paths

        m = _minimal(clips=[{"file": "a.mp4"}, {"file": "a.mp4"}], op=_image(), bgm="bgm.mp3")
        project = load_manifest(_write_manifest(tmp_path, m))
        (tmp_path / "op.jpg").touch()
        with pytest.raises(FileNotFoundError, match="Missing 2 media file") as exc_info:
            validate_paths(project, tmp_path)
        assert str(exc_info.value).count("  - a.mp4") == 1
        assert "  - bgm.mp3" in str(exc_info.value)
        assert "op.jpg" not in str(exc_info.value)

    def test_resolves_against_work_dir(self, tmp_path):
        from highlights.project import load_manifest, validate_paths

        project = load_manifest(_write_manifest(tmp_path, _minimal()))
        (tmp_path / "a.mp4").touch()
        with pytest.raises(FileNotFoundError, match="a.mp4"):
            validate_paths(project, tmp_path / "elsewhere")
