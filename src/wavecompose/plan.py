"""Composition plan compiler — layout + audio presence to an ffmpeg graph.

The plan is an ordered list of filter_complex stages chained through
named nodes:

  [0:v] -> scale/pad/format ---------------------------------> [bg]
  [1:a] -> showwaves (region A size/color) --> [vA]
  [bg][vA] overlay at A's top-left -------------------------> [tmpA]
  [2:a] -> showwaves (region B size/color) --> [vB]
  [tmpA][vB] overlay at B's top-left -----------------------> [v]
  [1:a][2:a] amix ------------------------------------------> [a]

Only the final nodes ([v] and, when any audio is present, [a]) are
mapped to the output; intermediate names never leave the plan.

Input indices follow presence order: the image is always input 0, and
audio tracks take the next indices in A, B order. With only B present,
B's audio is input 1.
"""

import math
from typing import NamedTuple

from .common import renderer_color


BG_NODE = "[bg]"
VIDEO_OUT = "[v]"
AUDIO_OUT = "[a]"

WAVEFORM_MODE = "line"
DEFAULT_FPS = 30

# Black is keyed out of the showwaves frame so only the trace remains.
COLORKEY = "colorkey=0x000000:0.1"

MIN_PIXEL_SIZE = 2


class CompositionPlan(NamedTuple):
    """Compiled filter graph. Immutable once built."""

    stages: tuple[str, ...]
    video_out: str
    audio_out: str | None
    audio_inputs: tuple[str, ...]


# ── Geometry ─────────────────────────────────────────────────────


def _even_size(value: int) -> int:
    return max(MIN_PIXEL_SIZE, value - value % 2)


def region_pixel_rect(region: dict, canvas: tuple[int, int]) -> dict:
    """Map a percentage region onto the canvas in whole pixels.

    Position is floored; width and height are floored, then rounded
    down to even with a 2px minimum (yuv420p needs even sizes).
    """
    cw, ch = canvas
    return {
        "x": math.floor(region["x"] * cw / 100),
        "y": math.floor(region["y"] * ch / 100),
        "width": _even_size(math.floor(region["width"] * cw / 100)),
        "height": _even_size(math.floor(region["height"] * ch / 100)),
    }


# ── Compiler ─────────────────────────────────────────────────────


def _background_stage(canvas: tuple[int, int]) -> str:
    """Fit the image inside the canvas, pad to fill it, centered."""
    w, h = canvas
    return (
        f"[0:v]scale={w}:{h}:force_original_aspect_ratio=decrease,"
        f"pad={w}:{h}:(ow-iw)/2:(oh-ih)/2,format=yuv420p{BG_NODE}"
    )


def _waveform_stage(input_idx: int, slot: str, rect: dict, color: str, fps: int) -> str:
    return (
        f"[{input_idx}:a]showwaves=s={rect['width']}x{rect['height']}"
        f":colors={renderer_color(color)}:mode={WAVEFORM_MODE}:rate={fps},"
        f"format=rgba,{COLORKEY}[v{slot}]"
    )


def compile_plan(
    canvas: tuple[int, int],
    region_a: dict,
    region_b: dict,
    has_audio_a: bool,
    has_audio_b: bool,
    fps: int = DEFAULT_FPS,
) -> CompositionPlan:
    """Compile the filter graph for one render.

    Deterministic: the same inputs always give the same stages and node
    names.

    Args:
        canvas: Resolved (width, height) output size.
        region_a: Region for slot A.
        region_b: Region for slot B.
        has_audio_a: Whether a track is supplied for A.
        has_audio_b: Whether a track is supplied for B.
        fps: Waveform frame rate.

    Returns:
        CompositionPlan with stages in execution order.
    """
    stages = [_background_stage(canvas)]

    present = [
        (slot, region)
        for slot, region, has_audio in (
            ("A", region_a, has_audio_a),
            ("B", region_b, has_audio_b),
        )
        if has_audio
    ]

    # Each overlay chains onto the previous one; the last writes [v].
    last_label = BG_NODE
    for i, (slot, region) in enumerate(present):
        input_idx = i + 1
        rect = region_pixel_rect(region, canvas)
        stages.append(_waveform_stage(input_idx, slot, rect, region["color"], fps))

        out_label = VIDEO_OUT if i == len(present) - 1 else f"[tmp{slot}]"
        stages.append(f"{last_label}[v{slot}]overlay={rect['x']}:{rect['y']}{out_label}")
        last_label = out_label

    if not present:
        stages.append(f"{BG_NODE}null{VIDEO_OUT}")

    # ── Audio routing ────────────────────────────────────────────
    audio_out = None
    if len(present) == 2:
        stages.append(
            f"[1:a][2:a]amix=inputs=2:duration=longest:dropout_transition=0{AUDIO_OUT}"
        )
        audio_out = AUDIO_OUT
    elif len(present) == 1:
        stages.append(f"[1:a]anull{AUDIO_OUT}")
        audio_out = AUDIO_OUT

    return CompositionPlan(
        stages=tuple(stages),
        video_out=VIDEO_OUT,
        audio_out=audio_out,
        audio_inputs=tuple(slot for slot, _ in present),
    )


# ── Translation to ffmpeg arguments ──────────────────────────────


def filter_graph(plan: CompositionPlan) -> str:
    """Serialize the stages into a -filter_complex string."""
    return "; ".join(plan.stages)


def command_args(
    plan: CompositionPlan,
    image_path: str,
    audio_paths: dict[str, str],
    output_path: str,
    preset: str = "ultrafast",
) -> list[str]:
    """Build the ffmpeg argument list (without the executable) for a plan.

    Args:
        plan: Compiled plan.
        image_path: Background image, becomes input 0.
        audio_paths: {slot: path} for every slot in plan.audio_inputs.
        output_path: mp4 to write.
        preset: libx264 preset.

    Raises:
        ValueError: A slot in plan.audio_inputs has no path.
    """
    # With audio the still image is looped and -shortest ends the output
    # with the audio. Without audio the single frame bounds the output.
    inputs = ["-i", image_path]
    if plan.audio_inputs:
        inputs = ["-loop", "1", *inputs]
    for slot in plan.audio_inputs:
        if slot not in audio_paths:
            raise ValueError(f"Plan expects audio for visualizer {slot}, none staged")
        inputs.extend(["-i", audio_paths[slot]])

    maps = ["-map", plan.video_out]
    codec_args = ["-c:v", "libx264", "-preset", preset, "-pix_fmt", "yuv420p"]
    if plan.audio_out is not None:
        maps.extend(["-map", plan.audio_out])
        codec_args.extend(["-c:a", "aac"])

    return [
        *inputs,
        "-filter_complex", filter_graph(plan),
        *maps,
        *codec_args,
        "-shortest",
        output_path,
    ]


def describe_plan(plan: CompositionPlan) -> list[str]:
    """Human-readable plan summary, one line per stage."""
    lines = [f"  {i}: {stage}" for i, stage in enumerate(plan.stages)]
    lines.append(f"  video -> {plan.video_out}")
    lines.append(f"  audio -> {plan.audio_out or '(none)'}")
    return lines