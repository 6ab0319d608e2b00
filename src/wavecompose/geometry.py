"""Interactive geometry engine — pointer drags over visualizer regions.

A drag session is opened on pointer-down (begin), fed pointer positions
on every move (update), and closed on pointer-up (end). Every update is
computed from the snapshot taken at begin, never from the current region,
so clamping on one move cannot compound into drift on the next.

Misuse (update without a session, begin while a render is running) is a
silent no-op: these are ordinary event-ordering races in pointer input.
"""

from .region import (
    SLOTS,
    clamp, clamp_position, clamp_size, clamp_size_far_anchor,
)


# ── Drag modes ───────────────────────────────────────────────────
# Each resize mode names the edges it drags. Corners are the union of
# two single-edge rules with no interaction between axes.

DRAG_MODES = {
    "move": "",
    "resize-n": "n",
    "resize-s": "s",
    "resize-e": "e",
    "resize-w": "w",
    "resize-ne": "ne",
    "resize-nw": "nw",
    "resize-se": "se",
    "resize-sw": "sw",
}

ZOOM_MIN = 0.5
ZOOM_MAX = 1.5


# ── Pure drag math ───────────────────────────────────────────────


def _drag_axis(edges: str, near: str, far: str, start_pos: float, start_size: float, delta: float):
    """Resolve one axis of a resize. Returns (position, size)."""
    if far in edges:
        return start_pos, clamp_size(start_size + delta, start_pos)
    if near in edges:
        size = clamp_size_far_anchor(start_size - delta, start_pos, start_size)
        return max(0.0, start_pos + start_size - size), size
    return start_pos, start_size


def drag_geometry(mode: str, start: dict, delta_x: float, delta_y: float) -> dict:
    """Compute new {x, y, width, height} for a drag.

    Args:
        mode: One of DRAG_MODES.
        start: Region geometry snapshot taken when the drag began.
        delta_x: Pointer movement in percent of canvas width.
        delta_y: Pointer movement in percent of canvas height.

    Returns:
        New geometry dict. The edge(s) not being dragged keep their
        start coordinates.
    """
    if mode == "move":
        return {
            "x": clamp_position(start["x"] + delta_x, start["width"]),
            "y": clamp_position(start["y"] + delta_y, start["height"]),
            "width": start["width"],
            "height": start["height"],
        }

    edges = DRAG_MODES[mode]
    x, width = _drag_axis(edges, "w", "e", start["x"], start["width"], delta_x)
    y, height = _drag_axis(edges, "n", "s", start["y"], start["height"], delta_y)
    return {"x": x, "y": y, "width": width, "height": height}


def pointer_delta(origin, pointer, canvas_size, zoom=1.0):
    """Convert a screen-pixel pointer movement to percent of the canvas.

    canvas_size is the on-screen preview size before zoom is applied.
    """
    w, h = canvas_size
    return (
        (pointer[0] - origin[0]) / (w * zoom) * 100,
        (pointer[1] - origin[1]) / (h * zoom) * 100,
    )


# ── Engine ───────────────────────────────────────────────────────


class GeometryEngine:
    """Owns the two regions' drag state.

    Args:
        regions: {slot: region} mapping; regions are mutated in place.
        is_busy: Callable returning True while a render is in flight.
            begin() refuses to open a session when it does.
        canvas_size: On-screen preview size in pixels (width, height).
        zoom: Preview zoom factor.
    """

    def __init__(self, regions, is_busy=None, canvas_size=(0, 0), zoom=1.0):
        self.regions = regions
        self.is_busy = is_busy or (lambda: False)
        self.canvas_size = canvas_size
        self.zoom = 1.0
        self.set_zoom(zoom)
        self.session = None

    def set_zoom(self, zoom: float) -> float:
        self.zoom = clamp(ZOOM_MIN, ZOOM_MAX, float(zoom))
        return self.zoom

    def reset_zoom(self) -> float:
        return self.set_zoom(1.0)

    def begin(self, slot, mode, pointer) -> bool:
        """Open a drag session on slot. Returns True if one was opened."""
        if self.is_busy():
            return False
        if slot not in SLOTS or (mode is not None and mode not in DRAG_MODES):
            return False
        region = self.regions[slot]
        self.session = {
            "slot": slot,
            "mode": mode,
            "origin": (pointer[0], pointer[1]),
            "start": {
                "x": region["x"],
                "y": region["y"],
                "width": region["width"],
                "height": region["height"],
            },
        }
        return True

    def update(self, pointer):
        """Move the active drag to pointer. Returns the region, or None."""
        session = self.session
        if session is None or session["mode"] is None:
            return None
        w, h = self.canvas_size
        if not w or not h:
            return None

        dx, dy = pointer_delta(session["origin"], pointer, self.canvas_size, self.zoom)
        region = self.regions[session["slot"]]
        region.update(drag_geometry(session["mode"], session["start"], dx, dy))
        return region

    def end(self) -> None:
        self.session = None

    # Abandoning a drag keeps whatever the last update produced.
    cancel = end

    @property
    def active(self) -> bool:
        return self.session is not None
