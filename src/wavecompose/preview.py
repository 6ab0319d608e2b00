"""Still layout preview — the visualizer boxes drawn over the background.

Mirrors what the render does to the background (fit inside the canvas,
pad to fill it, centered) and draws each region as a half-transparent
box in its color, so a layout can be checked without running ffmpeg.
"""

import io
import math

from PIL import Image, ImageDraw, ImageFont, ImageOps

from .canvas import resolve_canvas
from .common import parse_hex_color


# ── Constants ────────────────────────────────────────────────────

REGION_FILL_ALPHA = 128          # 50% opacity
REGION_OUTLINE = (255, 255, 255, 77)
LABEL_MARGIN = 6
PAD_COLOR = (0, 0, 0)


def preview_size(settings: dict, scale: float) -> tuple[int, int]:
    cw, ch = resolve_canvas(settings["aspect_ratio"], settings["resolution"])
    return max(1, round(cw * scale)), max(1, round(ch * scale))


def fit_background(image_bytes: bytes, size: tuple[int, int]) -> Image.Image:
    """Scale the image to fit inside size, then pad it to exactly size."""
    with Image.open(io.BytesIO(image_bytes)) as src:
        fitted = ImageOps.contain(src.convert("RGB"), size)
    canvas = Image.new("RGB", size, PAD_COLOR)
    offset = ((size[0] - fitted.width) // 2, (size[1] - fitted.height) // 2)
    canvas.paste(fitted, offset)
    return canvas


def _box(region: dict, size: tuple[int, int]) -> tuple[int, int, int, int]:
    w, h = size
    x0 = math.floor(region["x"] * w / 100)
    y0 = math.floor(region["y"] * h / 100)
    x1 = math.floor((region["x"] + region["width"]) * w / 100)
    y1 = math.floor((region["y"] + region["height"]) * h / 100)
    return x0, y0, max(x0, x1 - 1), max(y0, y1 - 1)


def render_layout_preview(
    image_bytes: bytes, settings: dict, scale: float = 0.5,
) -> Image.Image:
    """Draw both visualizer regions over the fitted background.

    Args:
        image_bytes: Encoded background image (PNG or JPEG).
        settings: Render settings (resolution, aspect_ratio,
            visualizer_a, visualizer_b).
        scale: Preview size relative to the output canvas.

    Returns:
        RGB Pillow image of the preview.
    """
    size = preview_size(settings, scale)
    base = fit_background(image_bytes, size).convert("RGBA")

    layer = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    font = ImageFont.load_default()

    for region in (settings["visualizer_a"], settings["visualizer_b"]):
        box = _box(region, size)
        fill = (*parse_hex_color(region["color"]), REGION_FILL_ALPHA)
        draw.rectangle(box, fill=fill, outline=REGION_OUTLINE, width=1)
        draw.text(
            (box[0] + LABEL_MARGIN, box[1] + LABEL_MARGIN),
            region["id"], fill=(255, 255, 255, 255), font=font,
        )

    return Image.alpha_composite(base, layer).convert("RGB")
