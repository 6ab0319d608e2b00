"""Editing session — the state behind one layout-editing window.

Holds the two regions, the geometry engine, output settings and the
ingested media, and gates rendering:
  - rendering needs a background image and at least one audio track;
  - only one render runs at a time, and while it does the geometry
    engine refuses new drags and inputs/settings cannot change.
"""

from .canvas import ASPECT_RATIOS, RESOLUTIONS, fit_display_size, resolve_canvas
from .geometry import GeometryEngine
from .media import audio_input, image_input
from .plan import DEFAULT_FPS
from .region import SLOTS, default_regions, set_region_property
from .render import DEFAULT_PRESET, render


class EditorSession:
    def __init__(
        self,
        aspect_ratio: str = "16:9",
        resolution: str = "1080p",
        regions: dict | None = None,
        fps: int = DEFAULT_FPS,
        preset: str = DEFAULT_PRESET,
        renderer=None,
    ):
        self.is_rendering = False
        self.aspect_ratio = None
        self.resolution = None
        self.set_aspect_ratio(aspect_ratio)
        self.set_resolution(resolution)
        self.fps = fps
        self.preset = preset
        self.renderer = renderer

        self.regions = regions if regions is not None else default_regions()
        self.engine = GeometryEngine(self.regions, is_busy=lambda: self.is_rendering)

        self.image = None
        self.audio = {slot: None for slot in SLOTS}

    def _check_idle(self, what: str) -> None:
        if self.is_rendering:
            raise RuntimeError(f"Cannot change {what} while a render is running")

    # ── Settings ─────────────────────────────────────────────────

    def set_aspect_ratio(self, aspect_ratio: str) -> None:
        self._check_idle("aspect ratio")
        if aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(
                f"Unknown aspect ratio '{aspect_ratio}'. Valid: {list(ASPECT_RATIOS)}"
            )
        self.aspect_ratio = aspect_ratio

    def set_resolution(self, resolution: str) -> None:
        self._check_idle("resolution")
        if resolution not in RESOLUTIONS:
            raise ValueError(
                f"Unknown resolution '{resolution}'. Valid: {list(RESOLUTIONS)}"
            )
        self.resolution = resolution

    @property
    def canvas(self) -> tuple[int, int]:
        """Output size in pixels for the current ratio and resolution."""
        return resolve_canvas(self.aspect_ratio, self.resolution)

    def set_container_size(self, width: float, height: float) -> tuple[float, float]:
        """Fit the on-screen preview into a container and tell the engine."""
        self.engine.canvas_size = fit_display_size(width, height, self.aspect_ratio)
        return self.engine.canvas_size

    def edit_region(self, slot: str, prop: str, value) -> dict:
        """Typed-in edit of one region property (clamped)."""
        self._check_idle("visualizer layout")
        if slot not in SLOTS:
            raise ValueError(f"Unknown visualizer slot: {slot!r}")
        return set_region_property(self.regions[slot], prop, value)

    # ── Media ────────────────────────────────────────────────────

    def set_image(self, name: str, data: bytes, mime: str | None = None) -> None:
        """Ingest a background image. Unsupported files leave the old one."""
        self._check_idle("the background image")
        self.image = image_input(name, data, mime)

    def set_audio(self, slot: str, name: str, data: bytes, mime: str | None = None) -> None:
        self._check_idle("audio")
        if slot not in SLOTS:
            raise ValueError(f"Unknown visualizer slot: {slot!r}")
        self.audio[slot] = audio_input(name, data, mime)

    def clear_audio(self, slot: str) -> None:
        self._check_idle("audio")
        self.audio[slot] = None

    # ── Rendering ────────────────────────────────────────────────

    def settings(self) -> dict:
        """Snapshot of the render settings (regions copied)."""
        return {
            "resolution": self.resolution,
            "aspect_ratio": self.aspect_ratio,
            "fps": self.fps,
            "preset": self.preset,
            "visualizer_a": dict(self.regions["A"]),
            "visualizer_b": dict(self.regions["B"]),
        }

    def is_ready_to_render(self) -> bool:
        return self.image is not None and any(self.audio[s] is not None for s in SLOTS)

    def render(self, on_progress=None) -> bytes:
        """Render the current layout. Blocks until ffmpeg finishes.

        Raises:
            ValueError: No image, or no audio track.
            RuntimeError: A render is already running.
            RenderError: The render itself failed.
        """
        if self.is_rendering:
            raise RuntimeError("A render is already running")
        if not self.is_ready_to_render():
            raise ValueError(
                "Rendering needs a background image and at least one audio track"
            )

        self.engine.end()
        self.is_rendering = True
        try:
            return render(
                self.image, self.audio["A"], self.audio["B"], self.settings(),
                on_progress=on_progress, renderer=self.renderer,
            )
        finally:
            self.is_rendering = False
