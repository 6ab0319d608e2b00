"""Canvas resolution — aspect ratio + quality tier to output pixels."""


# (width, height) terms. Kept as integers so the floor is exact.
ASPECT_RATIOS = {
    "9:16": (9, 16),
    "16:9": (16, 9),
    "1:1": (1, 1),
    "4:5": (4, 5),
    "2:3": (2, 3),
    "3:4": (3, 4),
}

# Base dimension: the short side of the output frame.
RESOLUTIONS = {
    "1080p": 1080,
    "4K": 2160,
}


def _even(value: int) -> int:
    """Round down to an even number (yuv420p needs even dimensions)."""
    return value - value % 2


def _ratio_terms(aspect_ratio: str) -> tuple[int, int]:
    if aspect_ratio not in ASPECT_RATIOS:
        raise ValueError(
            f"Unknown aspect ratio '{aspect_ratio}'. Valid: {list(ASPECT_RATIOS)}"
        )
    return ASPECT_RATIOS[aspect_ratio]


def aspect_value(aspect_ratio: str) -> float:
    """Width / height of a named ratio."""
    num, den = _ratio_terms(aspect_ratio)
    return num / den


def resolve_canvas(aspect_ratio: str, resolution: str) -> tuple[int, int]:
    """Resolve the output frame size in pixels.

    Landscape and square frames keep the base dimension as height;
    portrait frames keep it as width. Both sides are floored to even.

    Args:
        aspect_ratio: One of ASPECT_RATIOS, e.g. "16:9".
        resolution: One of RESOLUTIONS, "1080p" or "4K".

    Returns:
        (width, height), both even.

    Raises:
        ValueError: Unknown aspect ratio or resolution.
    """
    num, den = _ratio_terms(aspect_ratio)
    if resolution not in RESOLUTIONS:
        raise ValueError(
            f"Unknown resolution '{resolution}'. Valid: {list(RESOLUTIONS)}"
        )
    base = RESOLUTIONS[resolution]

    if num >= den:
        width, height = base * num // den, base
    else:
        width, height = base, base * den // num
    return _even(width), _even(height)


def fit_display_size(
    container_w: float, container_h: float, aspect_ratio: str,
) -> tuple[float, float]:
    """Largest on-screen preview of the given ratio inside a container.

    The geometry engine divides pointer movement by this size, so it is
    the preview's pixel size, not the output canvas.
    """
    ratio = aspect_value(aspect_ratio)
    width = container_w
    height = width / ratio
    if height > container_h:
        height = container_h
        width = height * ratio
    return width, height
