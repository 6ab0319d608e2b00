"""Tests for the ffmpeg renderer handle.

Uses the ffmpeg binary bundled with imageio-ffmpeg.
"""

from unittest.mock import patch

import pytest

from wavecompose.renderer import FFmpegRenderer, shared_renderer


class TestLoad:
    def test_starts_unloaded(self, renderer):
        assert not renderer.loaded

    def test_load_is_idempotent(self, renderer):
        renderer.load()
        exe, work_dir = renderer.exe, renderer.work_dir
        with patch("wavecompose.renderer.imageio_ffmpeg.get_ffmpeg_exe") as get_exe:
            renderer.load()
            get_exe.assert_not_called()
        assert (renderer.exe, renderer.work_dir) == (exe, work_dir)
        assert work_dir.is_dir()

    def test_failed_bootstrap_leaves_unloaded_and_retries(self, renderer):
        with patch(
            "wavecompose.renderer.imageio_ffmpeg.get_ffmpeg_exe",
            side_effect=RuntimeError("no ffmpeg"),
        ):
            with pytest.raises(RuntimeError, match="no ffmpeg"):
                renderer.load()
        assert not renderer.loaded
        renderer.load()
        assert renderer.loaded

    def test_shared_renderer_is_single_instance(self):
        assert shared_renderer() is shared_renderer()
        assert isinstance(shared_renderer(), FFmpegRenderer)


class TestWorkingStorage:
    def test_requires_load(self, renderer):
        with pytest.raises(RuntimeError, match="not loaded"):
            renderer.write_file("x.bin", b"x")

    def test_write_read_delete(self, renderer):
        renderer.load()
        assert renderer.write_file("blob.bin", b"\x00\x01") == "blob.bin"
        assert renderer.read_file("blob.bin") == b"\x00\x01"
        renderer.delete_file("blob.bin")
        renderer.delete_file("blob.bin")  # missing is fine
        assert not (renderer.work_dir / "blob.bin").exists()

    def test_clear(self, renderer):
        renderer.load()
        renderer.write_file("a.bin", b"a")
        renderer.write_file("b.bin", b"b")
        renderer.clear()
        assert list(renderer.work_dir.iterdir()) == []
        assert renderer.loaded

    def test_probe_duration(self, renderer, long_tone_wav):
        renderer.load()
        renderer.write_file("audioA.wav", long_tone_wav.read_bytes())
        assert renderer.probe_duration("audioA.wav") == pytest.approx(2.0, abs=0.1)


class TestExec:
    def test_reports_progress_and_writes_output(self, renderer):
        renderer.load()
        fractions = []
        renderer.exec(
            ["-f", "lavfi", "-i", "sine=frequency=440:duration=1", "out.wav"],
            on_progress=fractions.append, duration=1.0,
        )
        assert (renderer.work_dir / "out.wav").stat().st_size > 1000
        assert fractions
        assert fractions[-1] == 1.0
        assert all(0.0 <= f <= 1.0 for f in fractions)

    def test_failure_raises_with_log(self, renderer):
        renderer.load()
        with pytest.raises(RuntimeError, match="ffmpeg exited with code"):
            renderer.exec(["-i", "does-not-exist.wav", "out.wav"])

    def test_usable_after_failure(self, renderer):
        renderer.load()
        with pytest.raises(RuntimeError):
            renderer.exec(["-i", "does-not-exist.wav", "out.wav"])
        renderer.exec(["-f", "lavfi", "-i", "sine=duration=0.2", "ok.wav"])
        assert (renderer.work_dir / "ok.wav").exists()

    def test_callback_error_stops_ffmpeg(self, renderer):
        renderer.load()

        def _boom(fraction):
            raise KeyError("callback failed")

        with pytest.raises(KeyError):
            renderer.exec(
                ["-f", "lavfi", "-i", "sine=duration=5", "long.wav"],
                on_progress=_boom, duration=5.0,
            )
        # Handle still works.
        renderer.exec(["-f", "lavfi", "-i", "sine=duration=0.2", "ok.wav"])
