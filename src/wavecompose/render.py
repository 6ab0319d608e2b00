"""Render orchestration — stage inputs, compile, run ffmpeg, collect output.

Sequence for one render:
  1. Acquire the renderer (one-time ffmpeg bootstrap, then reused).
  2. Write the image and any audio tracks into working storage under
     fixed names (input.*, audioA.*, audioB.*).
  3. Resolve the canvas and compile the plan.
  4. Translate the plan into ffmpeg arguments and run it, forwarding
     ffmpeg's progress through the progress mapper.
  5. Read output.mp4 back as bytes.

Any failure after the preconditions abandons the job and raises a single
RenderError chained to the cause. Staged files are removed either way;
the renderer handle itself stays loaded for the next render.
"""

from .canvas import resolve_canvas
from .media import staged_name
from .plan import DEFAULT_FPS, command_args, compile_plan
from .progress import ProgressReporter
from .renderer import shared_renderer


IMAGE_STEM = "input"
AUDIO_STEMS = {"A": "audioA", "B": "audioB"}
OUTPUT_NAME = "output.mp4"

DEFAULT_PRESET = "ultrafast"


class RenderError(RuntimeError):
    """A render attempt failed; __cause__ holds the underlying error."""


def render(
    image: dict,
    audio_a: dict | None,
    audio_b: dict | None,
    settings: dict,
    on_progress=None,
    renderer=None,
) -> bytes:
    """Render the layout to an mp4 and return its bytes.

    Args:
        image: Background image media input (see media.py).
        audio_a: Audio for visualizer A, or None.
        audio_b: Audio for visualizer B, or None.
        settings: {"resolution", "aspect_ratio", "visualizer_a",
            "visualizer_b"} plus optional "fps" and "preset".
        on_progress: Called with non-decreasing ints, ending at 100 on
            success. Never called again after the render returns/raises.
        renderer: Renderer handle; defaults to the process-wide one.

    Returns:
        The encoded mp4 as bytes.

    Raises:
        ValueError: No image supplied.
        RenderError: Anything failed from bootstrap to reading the output,
            including on_progress raising on the final 100.
    """
    if image is None:
        raise ValueError("A background image is required to render")

    reporter = ProgressReporter(on_progress)
    renderer = renderer or shared_renderer()
    staged = []

    reporter.staging()
    try:
        renderer.load()

        image_name = renderer.write_file(staged_name(IMAGE_STEM, image), image["data"])
        staged.append(image_name)

        audio_paths = {}
        for slot, media in (("A", audio_a), ("B", audio_b)):
            if media is None:
                continue
            name = renderer.write_file(staged_name(AUDIO_STEMS[slot], media), media["data"])
            staged.append(name)
            audio_paths[slot] = name

        canvas = resolve_canvas(settings["aspect_ratio"], settings["resolution"])
        plan = compile_plan(
            canvas,
            settings["visualizer_a"],
            settings["visualizer_b"],
            has_audio_a=audio_a is not None,
            has_audio_b=audio_b is not None,
            fps=settings.get("fps", DEFAULT_FPS),
        )
        args = command_args(
            plan, image_name, audio_paths, OUTPUT_NAME,
            preset=settings.get("preset", DEFAULT_PRESET),
        )

        # amix runs to the longest track, so that is the output length.
        duration = max(
            (renderer.probe_duration(name) for name in audio_paths.values()),
            default=None,
        )

        reporter.renderer_fraction(0.0)
        renderer.exec(args, on_progress=reporter.renderer_fraction, duration=duration)
        data = renderer.read_file(OUTPUT_NAME)
        reporter.finish()
    except Exception as e:
        reporter.fail()
        raise RenderError(f"Render failed: {e}") from e
    finally:
        if renderer.loaded:
            for name in (*staged, OUTPUT_NAME):
                renderer.delete_file(name)

    return data
