"""Layout manifest loader.

Parses a YAML manifest describing one render: output settings, input
media, and the placement of the two visualizers. Resolves ${path}
variables and palette color names, and clamps visualizer geometry into
a valid layout.

Manifest schema:
  video:
    resolution: 1080p          # or 4K
    aspect_ratio: "16:9"       # 9:16, 16:9, 1:1, 4:5, 2:3, 3:4
    fps: 30                    # optional, waveform frame rate
    preset: ultrafast          # optional, libx264 preset
  paths:
    media: /data/media
  colors:
    accent: "#3b82f6"
  inputs:
    image: "${media}/cover.png"
    audio_a: "${media}/voice.mp3"   # optional
    audio_b: "${media}/music.wav"   # optional
  visualizers:
    A: {x: 10, y: 30, width: 35, height: 40, color: accent}
    B: {x: 55, y: 30, width: 35, height: 40, color: "#6b7280"}
"""

from pathlib import Path

import yaml

from .canvas import ASPECT_RATIOS, RESOLUTIONS
from .common import normalize_hex_color, resolve_color, resolve_path_vars
from .plan import DEFAULT_FPS
from .region import GEOMETRY_FIELDS, SLOTS, make_region
from .render import DEFAULT_PRESET


VIDEO_KEYS = {"resolution", "aspect_ratio", "fps", "preset"}

INPUT_KEYS = {"image", "audio_a", "audio_b"}

VISUALIZER_KEYS = {*GEOMETRY_FIELDS, "color"}


# ── Manifest loading ──────────────────────────────────────────────


def load_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a layout manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Validate video settings against the known ratios and tiers.
      3. Validate the colors palette.
      4. Resolve ${path} variables in inputs.
      5. Build both visualizer regions (clamped, palette colors resolved).

    Args:
        manifest_path: Path to the YAML manifest file.

    Returns:
        Normalized config dict with "video", "inputs", "visualizers".

    Raises:
        ValueError: Missing or invalid fields.
        FileNotFoundError: Missing manifest file.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f) or {}

    config = {"video": _load_video(raw.get("video"))}

    palette = {}
    for key, value in (raw.get("colors") or {}).items():
        try:
            palette[key] = normalize_hex_color(value)
        except ValueError as e:
            raise ValueError(f"colors.{key}: {e}") from e

    paths = raw.get("paths") or {}
    config["inputs"] = _load_inputs(raw.get("inputs"), paths)
    config["visualizers"] = _load_visualizers(raw.get("visualizers") or {}, palette)
    return config


def _load_video(video) -> dict:
    """Validate the video block and apply defaults."""
    if not isinstance(video, dict):
        raise ValueError("Manifest: missing required 'video' section")

    unknown = set(video) - VIDEO_KEYS
    if unknown:
        raise ValueError(
            f"video: unknown key(s) {sorted(unknown)}. Valid: {sorted(VIDEO_KEYS)}"
        )

    resolution = video.get("resolution")
    if resolution not in RESOLUTIONS:
        raise ValueError(
            f"video.resolution: invalid value {resolution!r}. Valid: {list(RESOLUTIONS)}"
        )
    aspect_ratio = video.get("aspect_ratio")
    if aspect_ratio not in ASPECT_RATIOS:
        raise ValueError(
            f"video.aspect_ratio: invalid value {aspect_ratio!r}. "
            f"Valid: {list(ASPECT_RATIOS)}"
        )

    fps = video.get("fps", DEFAULT_FPS)
    if isinstance(fps, bool) or not isinstance(fps, int) or fps <= 0:
        raise ValueError(f"video.fps must be a positive integer, got {fps!r}")

    preset = video.get("preset", DEFAULT_PRESET)
    if not isinstance(preset, str) or not preset:
        raise ValueError(f"video.preset must be a non-empty string, got {preset!r}")

    return {
        "resolution": resolution,
        "aspect_ratio": aspect_ratio,
        "fps": fps,
        "preset": preset,
    }


def _load_inputs(inputs, paths: dict) -> dict:
    """Resolve input paths. The image is required, audio is optional."""
    if not isinstance(inputs, dict):
        raise ValueError("Manifest: missing required 'inputs' section")

    unknown = set(inputs) - INPUT_KEYS
    if unknown:
        raise ValueError(
            f"inputs: unknown key(s) {sorted(unknown)}. Valid: {sorted(INPUT_KEYS)}"
        )
    if not inputs.get("image"):
        raise ValueError("inputs.image is required")

    resolved = {}
    for key in sorted(INPUT_KEYS):
        value = inputs.get(key)
        resolved[key] = resolve_path_vars(str(value), paths) if value else None
    return resolved


def _load_visualizers(raw: dict, palette: dict) -> dict:
    """Build both regions; a missing slot keeps its default layout."""
    if not isinstance(raw, dict):
        raise ValueError("visualizers must be a mapping of slot -> region")

    unknown = set(raw) - set(SLOTS)
    if unknown:
        raise ValueError(
            f"visualizers: unknown slot(s) {sorted(unknown)}. Valid: {list(SLOTS)}"
        )

    regions = {}
    for slot in SLOTS:
        entry = raw.get(slot) or {}
        prefix = f"Visualizer {slot}"
        if not isinstance(entry, dict):
            raise ValueError(f"{prefix}: must be a mapping")

        unknown = set(entry) - VISUALIZER_KEYS
        if unknown:
            raise ValueError(
                f"{prefix}: unknown key(s) {sorted(unknown)}. "
                f"Valid: {sorted(VISUALIZER_KEYS)}"
            )

        fields = {}
        for key in GEOMETRY_FIELDS:
            if key not in entry:
                continue
            value = entry[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{prefix}: '{key}' must be a number, got {value!r}")
            fields[key] = value

        if "color" in entry:
            color = entry["color"]
            if not isinstance(color, str):
                raise ValueError(f"{prefix}: 'color' must be a string, got {color!r}")
            try:
                fields["color"] = resolve_color(color, palette)
            except ValueError as e:
                raise ValueError(f"{prefix}: {e}") from e

        regions[slot] = make_region(slot, **fields)
    return regions


# ── Helpers for callers ───────────────────────────────────────────


def manifest_settings(config: dict) -> dict:
    """Render settings dict (as taken by render.render) from a config."""
    return {
        **config["video"],
        "visualizer_a": config["visualizers"]["A"],
        "visualizer_b": config["visualizers"]["B"],
    }


def validate_paths(config: dict) -> None:
    """Check that every referenced input file exists.

    Raises:
        FileNotFoundError: Lists every missing file.
    """
    missing = [
        f"inputs.{key}: {path}"
        for key, path in sorted(config["inputs"].items())
        if path is not None and not Path(path).exists()
    ]
    if missing:
        raise FileNotFoundError(
            "Missing input file(s):\n  " + "\n  ".join(missing)
        )
