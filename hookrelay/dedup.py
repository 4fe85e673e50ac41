"""Duplicate suppression for inbound notifications.

Strapi fires one webhook per lifecycle hook, so a single publish in the
admin panel often produces a burst of near-identical notifications.  The
tracker remembers when each entity key was last dispatched and tells the
caller to drop repeats that arrive inside the window.

The tracker is plain process state.  It is safe on a single event loop
because :meth:`DedupTracker.should_suppress` reads and writes the map
without awaiting in between; moving the lookup and the write apart across
an ``await`` would let two concurrent requests both see an empty slot.

Usage
-----
>>> tracker = DedupTracker()
>>> tracker.should_suppress("article")
False
>>> tracker.should_suppress("article")
True

"""

from __future__ import annotations

import enum
import time
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

__all__ = ["DEFAULT_WINDOW_MS", "DedupTracker", "WindowPolicy", "monotonic_ms"]

DEFAULT_WINDOW_MS = 5000


def monotonic_ms() -> float:
    """Return the monotonic clock reading in milliseconds."""
    return time.monotonic() * 1000


class WindowPolicy(enum.StrEnum):
    """How a suppressed duplicate affects the stored timestamp.

    ``ANCHORED`` keeps the timestamp of the first dispatched notification,
    so a steady stream of duplicates is let through once per window.
    ``SLIDING`` renews the timestamp on every duplicate, so the stream is
    suppressed until it goes quiet for a full window.

    ANCHORED is the production behaviour; whether SLIDING is wanted
    instead is pending product confirmation.
    """

    ANCHORED = "anchored"
    SLIDING = "sliding"


class DedupTracker:
    """In-memory record of the last dispatch time per entity key.

    Parameters
    ----------
    window_ms
        Length of the suppression window in milliseconds.
    policy
        Window renewal policy; defaults to :attr:`WindowPolicy.ANCHORED`.
    clock
        Zero-argument callable returning the current time in milliseconds.
        Tests inject a fake clock here.

    """

    def __init__(
        self,
        window_ms: int = DEFAULT_WINDOW_MS,
        *,
        policy: WindowPolicy = WindowPolicy.ANCHORED,
        clock: cabc.Callable[[], float] = monotonic_ms,
    ) -> None:
        """Initialise an empty tracker."""
        if window_ms <= 0:
            msg = f"window_ms must be positive, got {window_ms}"
            raise ValueError(msg)
        self._window_ms = window_ms
        self._policy = policy
        self._clock = clock
        self._last_seen: dict[str, float] = {}

    @property
    def window_ms(self) -> int:
        """Return the suppression window in milliseconds."""
        return self._window_ms

    @property
    def policy(self) -> WindowPolicy:
        """Return the configured window policy."""
        return self._policy

    def __len__(self) -> int:
        """Return the number of keys ever recorded."""
        return len(self._last_seen)

    def last_seen(self, key: str) -> float | None:
        """Return the stored timestamp for ``key``, if any."""
        return self._last_seen.get(key)

    def should_suppress(self, key: str) -> bool:
        """Return ``True`` when ``key`` was dispatched inside the window.

        A key seen for the first time, or whose window has elapsed, is
        recorded with the current time and reported as not suppressed.
        """
        now = self._clock()
        stored = self._last_seen.get(key)
        if stored is not None and now - stored < self._window_ms:
            if self._policy is WindowPolicy.SLIDING:
                self._last_seen[key] = now
            return True
        self._last_seen[key] = now
        return False
