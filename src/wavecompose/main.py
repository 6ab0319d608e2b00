"""Subcommand dispatcher for wavecompose.

Usage:
    wavecompose render   --manifest layout.yaml --output out.mp4
    wavecompose preview  --manifest layout.yaml --output layout.png
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="wavecompose",
        description="Audio waveform visualizers over a still image, rendered with ffmpeg.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("render", help="Render a layout manifest to mp4")
    subparsers.add_parser("preview", help="Draw the layout over the background as a PNG")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "render":
        from .cli import main as render_main
        render_main(remaining)
    elif parsed.command == "preview":
        from .preview_cli import main as preview_main
        preview_main(remaining)


if __name__ == "__main__":
    main()
