"""Render progress — renderer fraction to a user-facing percentage.

The first RESERVED_PREFIX points cover staging (renderer bootstrap,
writing inputs) that happens before ffmpeg reports anything; the rest
scales linearly with ffmpeg's own 0.0-1.0 progress.
"""

import math


RESERVED_PREFIX = 20
STAGING_PROGRESS = 5
COMPLETE = 100


def map_progress(fraction: float) -> int:
    """Map a renderer fraction (0.0-1.0) to an integer percent in [20, 100].

    Out-of-range fractions are clamped first.
    """
    fraction = max(0.0, min(1.0, fraction))
    return math.floor(RESERVED_PREFIX + fraction * (COMPLETE - RESERVED_PREFIX))


class ProgressReporter:
    """Forward progress to a callback with the render contract applied.

    - values never decrease;
    - while the job runs, values stay at or below 99, even if the
      renderer reports 1.0;
    - finish() emits exactly one terminal 100;
    - nothing is emitted after finish() or fail().
    """

    def __init__(self, callback=None):
        self.callback = callback
        self.last = None
        self.closed = False

    def _emit(self, value: int) -> None:
        if self.closed:
            return
        if self.last is not None and value <= self.last:
            return
        self.last = value
        if self.callback is not None:
            self.callback(value)

    def staging(self) -> None:
        self._emit(STAGING_PROGRESS)

    def renderer_fraction(self, fraction: float) -> None:
        self._emit(min(COMPLETE - 1, map_progress(fraction)))

    def finish(self) -> None:
        self._emit(COMPLETE)
        self.closed = True

    def fail(self) -> None:
        self.closed = True
