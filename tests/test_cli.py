"""Tests for the render and preview CLIs."""

import pytest
import yaml
from PIL import Image

from wavecompose.cli import main as render_main
from wavecompose.cli import render_manifest
from wavecompose.preview_cli import main as preview_main


@pytest.fixture
def manifest(tmp_path, background_png, tone_wav):
    """Write a manifest over the fixture media; returns a writer for variants."""
    def _write(inputs=None, **video):
        content = {
            "video": {"resolution": "1080p", "aspect_ratio": "16:9", **video},
            "paths": {"media": str(tmp_path)},
            "colors": {"accent": "#22c55e"},
            "inputs": inputs or {
                "image": "${media}/" + background_png.name,
                "audio_a": "${media}/" + tone_wav.name,
            },
            "visualizers": {
                "A": {"x": 5, "y": 60, "width": 90, "height": 30, "color": "accent"},
            },
        }
        path = tmp_path / "layout.yaml"
        path.write_text(yaml.dump(content))
        return str(path)
    return _write


class TestRenderCli:
    def test_validate(self, manifest, capsys):
        render_main(["--manifest", manifest(), "--validate"])
        out = capsys.readouterr().out
        assert "Canvas: 1920x1080" in out
        assert "A: x=5 y=60 w=90 h=30 #22c55e" in out
        assert "B: x=55" in out
        assert "(no audio)" in out
        assert "Manifest valid" in out

    def test_validate_missing_file(self, manifest):
        path = manifest(inputs={"image": "/no/such/cover.png", "audio_a": "/no/such/a.wav"})
        with pytest.raises(FileNotFoundError, match="inputs.image"):
            render_main(["--manifest", path, "--validate"])

    def test_print_plan(self, manifest, capsys):
        render_main(["--manifest", manifest(fps=25), "--print-plan"])
        out = capsys.readouterr().out
        assert "Plan:" in out
        assert "[1:a]showwaves=s=1728x324:colors=0x22c55e:mode=line:rate=25" in out
        assert "[1:a]anull[a]" in out
        assert "video -> [v]" in out

    def test_output_required(self, manifest):
        with pytest.raises(SystemExit) as exc_info:
            render_main(["--manifest", manifest()])
        assert exc_info.value.code == 2

    def test_no_audio_rejected(self, manifest, background_png):
        path = manifest(inputs={"image": str(background_png)})
        with pytest.raises(ValueError, match="no audio"):
            render_manifest(path, "/tmp/never.mp4")

    def test_renders_mp4(self, manifest, tmp_path, capsys):
        out = tmp_path / "renders" / "out.mp4"
        render_main(["--manifest", manifest(), "--output", str(out)])
        assert out.stat().st_size > 1000
        printed = capsys.readouterr().out
        assert "100%" in printed
        assert "Done:" in printed


class TestPreviewCli:
    def test_writes_png(self, manifest, tmp_path, capsys):
        out = tmp_path / "preview.png"
        preview_main(["--manifest", manifest(), "--output", str(out), "--scale", "0.25"])
        with Image.open(out) as img:
            assert img.size == (480, 270)
            assert img.format == "PNG"
        assert "Preview 480x270" in capsys.readouterr().out

    def test_rejects_non_positive_scale(self, manifest, tmp_path):
        with pytest.raises(SystemExit):
            preview_main([
                "--manifest", manifest(), "--output", str(tmp_path / "p.png"),
                "--scale", "0",
            ])

    def test_dispatch_through_main(self, manifest, tmp_path):
        from wavecompose.main import main

        out = tmp_path / "dispatched.png"
        main(["preview", "--manifest", manifest(), "--output", str(out)])
        assert out.exists()
