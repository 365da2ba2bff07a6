"""The countdown/elapsed timer engine, pure logic, no UI.

A CountdownTimer owns one clock value (milliseconds, signed) and ticks it along
on whatever scheduler it's given. Every visible change goes through
``format_time`` and out to ``display_function``; lifecycle events go to the
start/stop/reset/countdown callbacks, each called with the timer itself.
"""

from dataclasses import dataclass, fields
from countdown.common.logger import log
from countdown.core.actions import schedule_action
from countdown.core.config import TimerConfig
from countdown.core.scheduler import QtScheduler


# Read-only picture of a timer at one moment, as returned by CountdownTimer.info().
@dataclass(frozen=True)
class TimerInfo:
    running: bool
    time: int
    start_at: int
    count_down: bool
    decreasing: bool
    last_event_time: int | None

    def as_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Keys set() understands, with the camelCase spellings folded onto them.
_SET_KEYS = {
    "time": "time",
    "start_at": "start_at",
    "startAt": "start_at",
    "count_down": "count_down",
    "countDown": "count_down",
    "running": "running",
    "last_event_time": "last_event_time",
    "lastEventTime": "last_event_time",
    "action": "action",
    "delay_action": "delay_action",
    "delayAction": "delay_action",
    "compensate": "compensate",
}


class CountdownTimer:

    def __init__(self, config=None, scheduler=None, **params):
        # Always goes back through from_dict, so a hand-built TimerConfig gets the same defaulting as a params dict.
        if isinstance(config, TimerConfig):
            config = config.as_params()
        config = TimerConfig.from_dict({**(config or {}), **params})

        if scheduler is None:
            scheduler = QtScheduler()
        self._scheduler = scheduler

        # Callback slots, swappable at any time.
        self.format_time = config.format_time
        self.display_function = config.display_function
        self.countdown_callback = config.countdown_callback
        self.start_callback = config.start_callback
        self.stop_callback = config.stop_callback
        self.reset_callback = config.reset_callback

        self._start_at = config.start_at
        self._count_down = config.count_down
        self._update_interval_ms = config.update_interval_ms
        self._time = config.start_at
        self._handle = None
        self._last_tick = None
        self._last_event_time = scheduler.now()

        log.debug(f"Initialized new timer with start_at {self._start_at}, count_down {self._count_down}, interval {self._update_interval_ms}ms")
        self._display()

    #region === State ===

    @property
    def scheduler(self):
        return self._scheduler

    @property
    def time(self):
        return self._time

    @property
    def start_at(self):
        return self._start_at

    @property
    def count_down(self):
        return self._count_down

    @property
    def update_interval_ms(self):
        return self._update_interval_ms

    @property
    def last_event_time(self):
        return self._last_event_time

    @property
    def running(self):
        return self._handle is not None

    # Counting down towards zero from a positive start. A negative start with count_down counts *up* to zero.
    @property
    def decreasing(self):
        return self._start_at > 0 and self._count_down

    def _reached_zero(self):
        if not self._count_down:
            return False
        return self._time <= 0 if self.decreasing else self._time >= 0

    def info(self):
        return TimerInfo(
            running=self.running,
            time=self._time,
            start_at=self._start_at,
            count_down=self._count_down,
            decreasing=self.decreasing,
            last_event_time=self._last_event_time,
        )

    #endregion === State ===

    #region === Ticking ===

    def _display(self):
        self.display_function(self.format_time(self._time, self.decreasing))

    def _arm(self):
        self._handle = self._scheduler.arm_after(self._update_interval_ms, self._tick)

    # One wakeup. The clock moves by however long it has really been since the last tick, not by the nominal
    # interval, so late or early host timers don't add up to drift.
    def _tick(self):
        fired = self._handle
        if self._reached_zero():
            self._finish_countdown()
            return
        now = self._scheduler.now()
        delta = now - self._last_tick
        self._time += -delta if self.decreasing else delta
        self._last_tick = now
        self._display()
        # If the display callback stopped or restarted the timer, whatever it left armed stands.
        if self._handle is fired:
            self._arm()

    # Stop, show an exact zero once, then put the clock back at start_at before telling anyone, so the countdown
    # callback sees a timer that's ready to go again.
    def _finish_countdown(self):
        self.stop()
        self._time = 0
        self._display()
        self._time = self._start_at
        log.debug(f"Timer reached zero, reset back to {self._start_at}")
        self.countdown_callback(self)

    #endregion === Ticking ===

    #region === Operations ===

    def start(self, fast_forward_ms=0):
        if self.running:
            return
        self._time += int(fast_forward_ms or 0)
        now = self._scheduler.now()
        self._last_tick = now
        self._last_event_time = now
        self._arm()
        log.debug(f"Started timer at {now} with time {self._time} (fast-forward {fast_forward_ms})")
        self.start_callback(self)

    def stop(self):
        if not self.running:
            return
        self._handle.cancel()
        self._handle = None
        now = self._scheduler.now()
        self._last_event_time = now
        self._last_tick = None
        log.debug(f"Stopped timer at {now} with time {self._time}")
        self.stop_callback(self)
        self._display()

    def reset(self, prevent_callback=False):
        self._time = self._start_at
        # A running timer picks this up on its next tick.
        if not self.running:
            self._display()
        log.debug(f"Reset timer to {self._start_at}")
        if not prevent_callback:
            self.reset_callback(self)

    def reset_and_start(self, fast_forward_ms=0):
        self.reset(True)
        self.start(fast_forward_ms)

    # Applies any of time/start_at/count_down straight onto the timer, then hands action/delay_action/compensate/
    # last_event_time off to schedule_action. Never starts or stops the timer by itself. Without an explicit action,
    # `running` stands in for one (True -> start, False -> stop). Returns the armed action handle, if any.
    def set(self, params=None, **kwargs):
        params = {**(params or {}), **kwargs}
        values = {}
        for key, value in params.items():
            # None counts as not given
            if value is None:
                continue
            if key in _SET_KEYS:
                values[_SET_KEYS[key]] = value
            else:
                log.debug(f"Ignoring unrecognized set() field '{key}'")

        if "time" in values:
            self._time = int(values["time"])
        if "start_at" in values:
            self._start_at = int(values["start_at"])
        if "count_down" in values:
            self._count_down = bool(values["count_down"])
        if not self.running and values.keys() & {"time", "start_at", "count_down"}:
            self._display()

        action = values.get("action")
        if action is None and "running" in values:
            action = "start" if values["running"] else "stop"
        if action is None:
            return None

        return schedule_action(
            self,
            action,
            last_event_time=values.get("last_event_time"),
            delay_action=values.get("delay_action", 0),
            compensate=bool(values.get("compensate", False)),
        )

    # Cancels any pending tick without firing callbacks. Call before dropping a timer so no wakeup lands on it later.
    def dispose(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            self._last_tick = None
            log.debug("Disposed timer, pending tick cancelled")

    #endregion === Operations ===
