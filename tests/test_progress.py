"""Tests for progress mapping and reporting."""

import pytest

from wavecompose.progress import ProgressReporter, map_progress


class TestMapProgress:
    def test_zero_is_reserved_prefix(self):
        assert map_progress(0.0) == 20

    def test_one_is_complete(self):
        assert map_progress(1.0) == 100

    def test_halfway(self):
        assert map_progress(0.5) == 60

    def test_floors(self):
        assert map_progress(0.126) == 30  # 20 + 10.08

    def test_out_of_range_clamped(self):
        assert map_progress(-0.5) == 20
        assert map_progress(1.7) == 100

    def test_monotonic_and_bounded(self):
        fractions = [i / 997 for i in range(998)]
        values = [map_progress(f) for f in fractions]
        assert values == sorted(values)
        assert all(20 <= v <= 100 for v in values)


class TestProgressReporter:
    def _collect(self):
        seen = []
        return seen, ProgressReporter(seen.append)

    def test_staging_then_fractions(self):
        seen, reporter = self._collect()
        reporter.staging()
        reporter.renderer_fraction(0.0)
        reporter.renderer_fraction(0.5)
        assert seen == [5, 20, 60]

    def test_drops_decreasing_and_repeated_values(self):
        seen, reporter = self._collect()
        reporter.renderer_fraction(0.5)
        reporter.renderer_fraction(0.25)
        reporter.renderer_fraction(0.5)
        reporter.renderer_fraction(0.75)
        assert seen == [60, 80]

    def test_holds_below_100_until_finish(self):
        seen, reporter = self._collect()
        reporter.renderer_fraction(1.0)
        assert seen == [99]
        reporter.finish()
        assert seen == [99, 100]

    def test_finish_once_and_silent_after(self):
        seen, reporter = self._collect()
        reporter.finish()
        reporter.finish()
        reporter.renderer_fraction(0.9)
        assert seen == [100]

    def test_finish_even_if_renderer_stopped_short(self):
        seen, reporter = self._collect()
        reporter.renderer_fraction(0.4)
        reporter.finish()
        assert seen[-1] == 100

    def test_silent_after_fail(self):
        seen, reporter = self._collect()
        reporter.renderer_fraction(0.4)
        reporter.fail()
        reporter.renderer_fraction(0.9)
        reporter.finish()
        assert seen == [52]

    def test_no_callback(self):
        reporter = ProgressReporter()
        reporter.staging()
        reporter.finish()
        assert reporter.last == 100

    @pytest.mark.parametrize("fractions", [
        [0.0, 0.1, 0.1, 0.3, 0.99, 1.0],
        [0.2, 0.2, 0.2],
        [],
    ])
    def test_sequence_ends_at_100(self, fractions):
        seen, reporter = self._collect()
        reporter.staging()
        for f in fractions:
            reporter.renderer_fraction(f)
        reporter.finish()
        assert seen == sorted(set(seen))
        assert seen[-1] == 100
        assert seen.count(100) == 1
