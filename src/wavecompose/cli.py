"""CLI for rendering a layout manifest to mp4.

Reads a YAML manifest, validates input media, compiles the filter graph,
and runs it through ffmpeg.

Usage:
    # Render
    wavecompose render --manifest layout.yaml --output out.mp4

    # Validate only (no rendering)
    wavecompose render --manifest layout.yaml --validate

    # Show the compiled filter graph without rendering
    wavecompose render --manifest layout.yaml --print-plan
"""

import argparse
import time
from pathlib import Path

from .canvas import resolve_canvas
from .manifest import load_manifest, manifest_settings, validate_paths
from .media import load_audio, load_image
from .plan import compile_plan, describe_plan
from .render import render


def _print_layout(config):
    video = config["video"]
    w, h = resolve_canvas(video["aspect_ratio"], video["resolution"])
    print(f"Canvas: {w}x{h} ({video['aspect_ratio']}, {video['resolution']})")
    for slot, region in config["visualizers"].items():
        audio = config["inputs"][f"audio_{slot.lower()}"] or "(no audio)"
        print(
            f"  {slot}: x={region['x']:g} y={region['y']:g} "
            f"w={region['width']:g} h={region['height']:g} "
            f"{region['color']} <- {audio}"
        )


def _progress_printer():
    """Print each progress value once, on one line per 10%."""
    state = {"next": 0}

    def _on_progress(value):
        if value >= state["next"] or value == 100:
            print(f"  {value:3d}%", flush=True)
            state["next"] = (value // 10 + 1) * 10

    return _on_progress


def render_manifest(manifest_path: str, output_path: str, preset: str | None = None) -> None:
    """Load manifest, validate, render, write the mp4."""
    config = load_manifest(manifest_path)
    validate_paths(config)
    if preset:
        config["video"]["preset"] = preset

    inputs = config["inputs"]
    if not (inputs["audio_a"] or inputs["audio_b"]):
        raise ValueError("Manifest has no audio: set inputs.audio_a and/or inputs.audio_b")

    image = load_image(inputs["image"])
    audio_a = load_audio(inputs["audio_a"]) if inputs["audio_a"] else None
    audio_b = load_audio(inputs["audio_b"]) if inputs["audio_b"] else None

    _print_layout(config)
    print(f"Writing to: {output_path}")

    t0 = time.monotonic()
    data = render(image, audio_a, audio_b, manifest_settings(config), on_progress=_progress_printer())
    elapsed = time.monotonic() - t0

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    Path(output_path).write_bytes(data)
    print(f"\nDone: {output_path} ({len(data) / 1_000_000:.1f} MB, {elapsed:.1f}s wall)")


# ── CLI entry point ───────────────────────────────────────────────


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Render a waveform layout manifest to mp4.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML layout manifest",
    )
    parser.add_argument(
        "--output",
        help="Output mp4 path",
    )
    parser.add_argument(
        "--preset", default=None,
        help="Override the libx264 preset from the manifest",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest only — check paths, don't render",
    )
    parser.add_argument(
        "--print-plan", action="store_true",
        help="Print the compiled filter graph and exit",
    )
    args = parser.parse_args(args)

    if args.validate or args.print_plan:
        config = load_manifest(args.manifest)
        validate_paths(config)
        _print_layout(config)
        if args.print_plan:
            video = config["video"]
            plan = compile_plan(
                resolve_canvas(video["aspect_ratio"], video["resolution"]),
                config["visualizers"]["A"],
                config["visualizers"]["B"],
                has_audio_a=config["inputs"]["audio_a"] is not None,
                has_audio_b=config["inputs"]["audio_b"] is not None,
                fps=video["fps"],
            )
            print("Plan:")
            for line in describe_plan(plan):
                print(line)
        else:
            print("Manifest valid. All paths verified.")
        return

    if not args.output:
        parser.error("--output is required (unless using --validate or --print-plan)")

    render_manifest(args.manifest, args.output, preset=args.preset)


if __name__ == "__main__":
    main()
