"""Unit tests for the duplicate notification tracker."""

from __future__ import annotations

import pytest

from hookrelay.dedup import DEFAULT_WINDOW_MS, DedupTracker, WindowPolicy
from tests.helpers import FakeClock


class TestAnchoredWindow:
    """Tests for the default anchored window policy."""

    def test_first_occurrence_is_not_suppressed(
        self, tracker: DedupTracker, clock: FakeClock
    ) -> None:
        """A key seen for the first time passes and is recorded."""
        assert tracker.should_suppress("article") is False
        assert tracker.last_seen("article") == clock.now_ms

    def test_repeat_inside_window_is_suppressed(
        self, tracker: DedupTracker, clock: FakeClock
    ) -> None:
        """A repeat within 5000 ms is suppressed."""
        tracker.should_suppress("article")
        clock.advance(4999)
        assert tracker.should_suppress("article") is True

    def test_repeat_at_window_boundary_passes(
        self, tracker: DedupTracker, clock: FakeClock
    ) -> None:
        """Elapsed time equal to the window opens a new window."""
        tracker.should_suppress("article")
        clock.advance(DEFAULT_WINDOW_MS)
        assert tracker.should_suppress("article") is False
        assert tracker.last_seen("article") == DEFAULT_WINDOW_MS

    def test_suppressed_hit_does_not_refresh_timestamp(
        self, tracker: DedupTracker, clock: FakeClock
    ) -> None:
        """Duplicates leave the anchor of the window untouched."""
        tracker.should_suppress("article")
        clock.set(3000)
        tracker.should_suppress("article")
        assert tracker.last_seen("article") == 0

    def test_window_rearms_relative_to_first_dispatch(
        self, tracker: DedupTracker, clock: FakeClock
    ) -> None:
        """t=0 passes, t=3000 is suppressed, t=6000 passes again."""
        results = []
        for now in (0, 3000, 6000):
            clock.set(now)
            results.append(tracker.should_suppress("article"))
        assert results == [False, True, False]

    def test_keys_are_tracked_independently(
        self, tracker: DedupTracker, clock: FakeClock
    ) -> None:
        """A different key is never suppressed by another key's window."""
        tracker.should_suppress("article")
        clock.advance(100)
        assert tracker.should_suppress("author") is False
        assert len(tracker) == 2


def test_sliding_policy_renews_on_every_hit(clock: FakeClock) -> None:
    """SLIDING keeps suppressing a stream with gaps shorter than the window."""
    tracker = DedupTracker(policy=WindowPolicy.SLIDING, clock=clock)
    results = []
    for now in (0, 3000, 6000, 12000):
        clock.set(now)
        results.append(tracker.should_suppress("article"))
    assert results == [False, True, True, False]


def test_custom_window(clock: FakeClock) -> None:
    """The window length is configurable."""
    tracker = DedupTracker(100, clock=clock)
    tracker.should_suppress("article")
    clock.advance(100)
    assert tracker.should_suppress("article") is False
    assert tracker.window_ms == 100


def test_defaults() -> None:
    """The tracker defaults to a 5000 ms anchored window."""
    tracker = DedupTracker()
    assert tracker.window_ms == 5000
    assert tracker.policy is WindowPolicy.ANCHORED


@pytest.mark.parametrize("window_ms", [0, -1])
def test_rejects_non_positive_window(window_ms: int) -> None:
    """A window must be positive."""
    with pytest.raises(ValueError, match="window_ms"):
        DedupTracker(window_ms)
