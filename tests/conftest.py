"""Shared test fixtures for wavecompose tests."""

import subprocess

import pytest
import imageio_ffmpeg
from PIL import Image

from wavecompose.renderer import FFmpegRenderer

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


def _sine_wav(path, frequency, duration):
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", f"sine=frequency={frequency}:duration={duration}",
            "-ac", "1", "-ar", "22050",
            "-c:a", "pcm_s16le",
            str(path),
        ],
        check=True,
        capture_output=True,
    )
    return path


@pytest.fixture
def background_png(tmp_path):
    """A 320x240 solid-color PNG background."""
    out = tmp_path / "cover.png"
    Image.new("RGB", (320, 240), (200, 40, 40)).save(out, format="PNG")
    return out


@pytest.fixture
def background_jpeg(tmp_path):
    out = tmp_path / "cover.jpg"
    Image.new("RGB", (240, 320), (40, 40, 200)).save(out, format="JPEG")
    return out


@pytest.fixture
def tone_wav(tmp_path):
    """1-second 440 Hz mono WAV."""
    return _sine_wav(tmp_path / "tone.wav", 440, 1)


@pytest.fixture
def long_tone_wav(tmp_path):
    """2-second 220 Hz mono WAV."""
    return _sine_wav(tmp_path / "long-tone.wav", 220, 2)


@pytest.fixture
def renderer():
    """A private renderer handle, so tests don't share working storage."""
    return FFmpegRenderer()
