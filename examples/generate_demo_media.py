#!/usr/bin/env python3
"""Generate synthetic media for the wavecompose demo manifest.

Creates a gradient cover image and two tones of different lengths in
examples/demo-media/. The tones differ in pitch and duration, so the
two visualizers look different and the mixed audio runs to the longer
track.

Usage:
    python examples/generate_demo_media.py
    # Then render:
    wavecompose render --manifest examples/demo-layout.yaml \
        --output examples/demo-renders/demo.mp4
"""

import numpy as np
from moviepy.audio.AudioClip import AudioArrayClip
from pathlib import Path
from PIL import Image, ImageDraw, ImageFont

OUTPUT_DIR = Path(__file__).resolve().parent / "demo-media"
COVER_SIZE = (1280, 960)
SAMPLE_RATE = 44100

# (name, frequency Hz, duration s, tremolo Hz)
# Tremolo gives the waveform visible movement.
TONES = [
    ("voice", 220.0, 4.0, 3.0),
    ("music", 440.0, 6.0, 0.5),
]


def _make_cover() -> Image.Image:
    """Diagonal gradient with a title, so scale/pad is easy to eyeball."""
    w, h = COVER_SIZE
    xs = np.linspace(0, 1, w)[None, :]
    ys = np.linspace(0, 1, h)[:, None]
    rgb = np.stack(
        [
            40 + 120 * xs * np.ones_like(ys),
            30 + 60 * ys * np.ones_like(xs),
            90 + 100 * (1 - xs) * np.ones_like(ys),
        ],
        axis=-1,
    ).astype(np.uint8)
    img = Image.fromarray(rgb)
    draw = ImageDraw.Draw(img)
    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 72
        )
    except OSError:
        font = ImageFont.load_default()
    draw.text((60, 60), "wavecompose", fill=(255, 255, 255), font=font)
    return img


def _make_tone(frequency: float, duration: float, tremolo: float) -> np.ndarray:
    t = np.arange(int(duration * SAMPLE_RATE)) / SAMPLE_RATE
    envelope = 0.55 + 0.45 * np.sin(2 * np.pi * tremolo * t)
    mono = 0.6 * envelope * np.sin(2 * np.pi * frequency * t)
    return np.column_stack([mono, mono])


def main():
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    cover = OUTPUT_DIR / "cover.png"
    if cover.exists():
        print("  skip cover (exists)")
    else:
        _make_cover().save(cover, format="PNG")
        print(f"  wrote cover ({COVER_SIZE[0]}x{COVER_SIZE[1]})")

    for name, frequency, duration, tremolo in TONES:
        out = OUTPUT_DIR / f"{name}.wav"
        if out.exists():
            print(f"  skip {name} (exists)")
            continue
        clip = AudioArrayClip(_make_tone(frequency, duration, tremolo), fps=SAMPLE_RATE)
        clip.write_audiofile(str(out), fps=SAMPLE_RATE, codec="pcm_s16le", logger=None)
        print(f"  wrote {name} ({duration}s)")

    print(f"\nDone. Media in {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
