"""Scheduling capabilities a CountdownTimer runs on.

A scheduler hands out two things: ``now()`` as epoch milliseconds, and
``arm_after(ms, callback)`` which runs ``callback`` once after ``ms`` and returns
a handle whose ``cancel()`` stops it from firing.

``QtScheduler`` rides the Qt event loop and is what a real app uses.
``ManualScheduler`` is a fake clock that only moves when told to, for tests and
for replaying a timer's behavior without waiting on the wall clock.
"""

import heapq
import itertools
import time
from PySide6.QtCore import QObject, Qt, QTimer


def _wall_ms():
    return int(time.time() * 1000)


class QtHandle:
    def __init__(self, qtimer, owner):
        self._qtimer = qtimer
        self._owner = owner

    @property
    def active(self):
        return self._qtimer is not None and self._qtimer.isActive()

    def cancel(self):
        if self._qtimer is not None:
            self._qtimer.stop()
            self._owner._release(self._qtimer)
            self._qtimer = None


# Qt-backed scheduler. Each arm_after gets its own precise single-shot QTimer, kept referenced here until it fires
# or gets cancelled so Qt doesn't garbage collect it out from under us.
class QtScheduler:

    def __init__(self, parent: QObject | None = None):
        self._parent = parent
        self._live = set()

    def now(self):
        return _wall_ms()

    def arm_after(self, ms, callback):
        qtimer = QTimer(self._parent)
        qtimer.setSingleShot(True)
        qtimer.setTimerType(Qt.TimerType.PreciseTimer)
        handle = QtHandle(qtimer, self)

        def fire():
            handle._qtimer = None
            self._release(qtimer)
            callback()

        qtimer.timeout.connect(fire)
        self._live.add(qtimer)
        qtimer.start(max(0, int(ms)))
        return handle

    def _release(self, qtimer):
        if qtimer in self._live:
            self._live.discard(qtimer)
            qtimer.deleteLater()

    @property
    def pending(self):
        return len(self._live)


class ManualHandle:
    def __init__(self, due):
        self.due = due
        self.cancelled = False
        self.fired = False

    @property
    def active(self):
        return not (self.cancelled or self.fired)

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler driven by an explicit clock.

    Nothing fires on its own. ``advance(ms)`` walks the clock forward, firing
    every callback that comes due along the way in due order (callbacks armed
    while advancing fire too, if they fall inside the window). ``step(ms)``
    moves the clock by an arbitrary amount and fires the single earliest pending
    callback regardless of when it was due, which is how late or early host
    timer delivery is simulated.
    """

    def __init__(self, start_ms=0):
        self._now = int(start_ms)
        self._queue = []
        self._seq = itertools.count()

    def now(self):
        return self._now

    def arm_after(self, ms, callback):
        handle = ManualHandle(self._now + max(0, int(ms)))
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self):
        return sum(1 for _, _, handle, _ in self._queue if handle.active)

    def next_due(self):
        self._drop_cancelled()
        return self._queue[0][0] if self._queue else None

    def advance(self, ms):
        if ms < 0:
            raise ValueError("Cannot advance a ManualScheduler backwards")
        target = self._now + ms
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            _, _, handle, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            handle.fired = True
            callback()
        self._now = target

    # Moves the clock by `ms` then fires the earliest live callback, early or late. Returns False if nothing was
    # pending to fire.
    def step(self, ms):
        self._now += ms
        if self.next_due() is None:
            return False
        _, _, handle, callback = heapq.heappop(self._queue)
        handle.fired = True
        callback()
        return True

    def _drop_cancelled(self):
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)
