"""Media ingestion — accept only the formats the renderer is fed.

A media input is a plain dict:
  {"name": "cover.png", "mime": "image/png", "data": b"..."}

Unsupported files are rejected here, before anything reaches the plan
compiler or the renderer. Images are additionally opened with Pillow so
a mislabeled file fails at ingestion rather than mid-render.
"""

import io
import mimetypes
from pathlib import Path

from PIL import Image, UnidentifiedImageError


IMAGE_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
}

AUDIO_TYPES = {
    "audio/mpeg": ".mp3",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/wave": ".wav",
    "audio/vnd.wave": ".wav",
}

# Pillow format name -> mime.
PIL_FORMATS = {"PNG": "image/png", "JPEG": "image/jpeg"}


class UnsupportedFormatError(ValueError):
    """A file of a type the renderer is not fed."""


def guess_mime(name: str) -> str | None:
    mime, _ = mimetypes.guess_type(name)
    return mime


def image_input(name: str, data: bytes, mime: str | None = None) -> dict:
    """Validate a background image and wrap it as a media input.

    Raises:
        UnsupportedFormatError: Not a PNG or JPEG.
    """
    mime = mime or guess_mime(name)
    if mime not in IMAGE_TYPES:
        raise UnsupportedFormatError(
            f"{name}: unsupported image type {mime!r}. Valid: {sorted(IMAGE_TYPES)}"
        )
    try:
        with Image.open(io.BytesIO(data)) as img:
            actual = PIL_FORMATS.get(img.format)
    except UnidentifiedImageError as e:
        raise UnsupportedFormatError(f"{name}: not a readable image") from e
    if actual is None:
        raise UnsupportedFormatError(f"{name}: image data is not PNG or JPEG")
    return {"name": name, "mime": actual, "data": data}


def audio_input(name: str, data: bytes, mime: str | None = None) -> dict:
    """Validate an audio track and wrap it as a media input.

    Raises:
        UnsupportedFormatError: Not MP3 or WAV.
    """
    mime = mime or guess_mime(name)
    if mime not in AUDIO_TYPES:
        raise UnsupportedFormatError(
            f"{name}: unsupported audio type {mime!r}. Valid: {sorted(AUDIO_TYPES)}"
        )
    return {"name": name, "mime": mime, "data": data}


def load_image(path: str | Path) -> dict:
    path = Path(path)
    return image_input(path.name, path.read_bytes())


def load_audio(path: str | Path) -> dict:
    path = Path(path)
    return audio_input(path.name, path.read_bytes())


def staged_name(stem: str, media: dict) -> str:
    """Fixed working-storage name for an input, e.g. 'audioA.mp3'."""
    ext = IMAGE_TYPES.get(media["mime"]) or AUDIO_TYPES[media["mime"]]
    return stem + ext
