"""CLI for still layout previews.

Usage:
    wavecompose preview --manifest layout.yaml --output layout.png
    wavecompose preview --manifest layout.yaml --output layout.png --scale 0.25
"""

import argparse
from pathlib import Path

from .manifest import load_manifest, manifest_settings, validate_paths
from .media import load_image
from .preview import render_layout_preview


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Draw the visualizer layout over the background image.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML layout manifest",
    )
    parser.add_argument(
        "--output", required=True,
        help="Output PNG path",
    )
    parser.add_argument(
        "--scale", type=float, default=0.5,
        help="Preview size relative to the output canvas (default: 0.5)",
    )
    parsed = parser.parse_args(args)

    if parsed.scale <= 0:
        parser.error("--scale must be positive")

    config = load_manifest(parsed.manifest)
    validate_paths(config)
    image = load_image(config["inputs"]["image"])

    preview = render_layout_preview(image["data"], manifest_settings(config), scale=parsed.scale)
    Path(parsed.output).parent.mkdir(parents=True, exist_ok=True)
    preview.save(parsed.output, format="PNG")
    print(f"Preview {preview.width}x{preview.height} written to {parsed.output}")


if __name__ == "__main__":
    main()
