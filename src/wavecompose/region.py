"""Visualizer regions — percentage rectangles with clamping invariants.

A region is a plain dict:
  {"id": "A", "x": 10.0, "y": 30.0, "width": 35.0, "height": 40.0,
   "color": "#3b82f6"}

Geometry is in percent of the canvas (0-100). After any mutation:
  width >= MIN_SIZE, height >= MIN_SIZE,
  x >= 0, y >= 0, x + width <= 100, y + height <= 100.

There are always exactly two regions, one per slot. Slots are never
created or destroyed; edits mutate the existing dict in place.
"""

from .common import normalize_hex_color


# ── Constants ────────────────────────────────────────────────────

MIN_SIZE = 5

SLOTS = ("A", "B")

GEOMETRY_FIELDS = ("x", "y", "width", "height")

DEFAULT_REGIONS = {
    "A": {"x": 10.0, "y": 30.0, "width": 35.0, "height": 40.0, "color": "#3b82f6"},
    "B": {"x": 55.0, "y": 30.0, "width": 35.0, "height": 40.0, "color": "#6b7280"},
}


# ── Clamps ───────────────────────────────────────────────────────
# Shared by drags (against the drag-start snapshot) and by direct
# numeric edits (against the region's current values).


def clamp(low: float, high: float, value: float) -> float:
    """Clamp value into [low, high]. The lower bound wins if they cross."""
    return max(low, min(high, value))


def clamp_position(value: float, size: float) -> float:
    """Clamp an x (or y) so the far edge stays inside the canvas."""
    return clamp(0, 100 - size, value)


def clamp_size(value: float, position: float) -> float:
    """Clamp a width (or height) anchored at a fixed near edge."""
    return clamp(MIN_SIZE, 100 - position, value)


def clamp_size_far_anchor(value: float, start_position: float, start_size: float) -> float:
    """Clamp a width (or height) whose far edge is anchored.

    The near edge may move left/up as far as 0, so the upper bound is
    the far edge's coordinate (start_position + start_size).
    """
    return clamp(MIN_SIZE, start_position + start_size, value)


# ── Construction ─────────────────────────────────────────────────


def make_region(slot: str, **fields) -> dict:
    """Build a region for slot, starting from the slot's default layout.

    Geometry goes through set_region_property, so the result always
    satisfies the invariants. Sizes are applied with the region parked
    at the origin, then positions, so any valid combination of values
    is kept exactly.
    """
    if slot not in SLOTS:
        raise ValueError(f"Unknown visualizer slot: {slot!r}. Valid: {list(SLOTS)}")
    defaults = DEFAULT_REGIONS[slot]
    region = {"id": slot, **defaults, "x": 0.0, "y": 0.0}
    for key in ("width", "height", "x", "y", "color"):
        set_region_property(region, key, fields.pop(key, defaults[key]))
    if fields:
        raise ValueError(
            f"Visualizer {slot}: unknown field(s) {sorted(fields)}"
        )
    return region


def default_regions() -> dict[str, dict]:
    """Fresh {slot: region} mapping with the default layout."""
    return {slot: make_region(slot) for slot in SLOTS}


# ── Direct edits ─────────────────────────────────────────────────


def set_region_property(region: dict, prop: str, value) -> dict:
    """Apply a typed-in edit to one property of a region, in place.

    x/width are coupled, as are y/height; the two axes are independent.
    Position clamps against the current size, size clamps against the
    current position. Returns the region for convenience.
    """
    if prop == "color":
        region["color"] = normalize_hex_color(value)
        return region
    if prop not in GEOMETRY_FIELDS:
        raise ValueError(f"Unknown region property: {prop!r}")

    number = float(value)
    if prop == "x":
        region["x"] = clamp_position(number, region["width"])
    elif prop == "y":
        region["y"] = clamp_position(number, region["height"])
    elif prop == "width":
        region["width"] = clamp_size(number, region["x"])
    else:
        region["height"] = clamp_size(number, region["y"])
    return region


def region_is_valid(region: dict, tolerance: float = 1e-9) -> bool:
    """Check the geometry invariants, allowing for float rounding."""
    x, y = region["x"], region["y"]
    w, h = region["width"], region["height"]
    return (
        w >= MIN_SIZE - tolerance and h >= MIN_SIZE - tolerance
        and x >= -tolerance and y >= -tolerance
        and x + w <= 100 + tolerance and y + h <= 100 + tolerance
    )
