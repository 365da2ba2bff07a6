from countdown.common.logger import log

# Operation names an action may name, mapped onto CountdownTimer methods. Both spellings of reset-and-start are
# accepted since persisted payloads tend to carry the camelCase form.
_OPERATIONS = {
    "start": "start",
    "stop": "stop",
    "reset": "reset",
    "reset_and_start": "reset_and_start",
    "resetAndStart": "reset_and_start",
}
# Only these take a fast-forward argument, the rest get called bare.
_FAST_FORWARD_OPERATIONS = {"start", "reset_and_start"}


# Arms a one-shot call of the named timer operation, working out how far the timer should be fast-forwarded given
# when the triggering event happened. This is how a timer gets picked back up after its process went away: the
# caller only needs the persisted last_event_time.
#
# If the delayed moment (last_event_time + delay_action) is already behind us, the call fires right away and is
# fast-forwarded by how late it is. With `compensate`, the fast-forward falls back to the full time since
# last_event_time, and is negated when the timer counts down so it eats into the remaining time instead.
#
# Returns the scheduler handle, or None when the action doesn't name a known operation. The timer itself does not
# track this handle, so once armed it will fire.
def schedule_action(timer, action, last_event_time=None, delay_action=0, compensate=False):
    method_name = _OPERATIONS.get(action)
    if method_name is None:
        log.warning(f"Ignoring set() action '{action}', it doesn't name a timer operation")
        return None

    scheduler = timer.scheduler
    now = scheduler.now()
    if last_event_time is None:
        last_event_time = now
    delay_action = delay_action or 0

    remaining_delay = (last_event_time + delay_action) - now
    fast_forward_ms = None

    if remaining_delay < 0:
        fast_forward_ms = -remaining_delay
        remaining_delay = 0

    if compensate:
        if fast_forward_ms is None:
            fast_forward_ms = now - last_event_time
        if timer.decreasing:
            fast_forward_ms = -fast_forward_ms

    operation = getattr(timer, method_name)
    if method_name in _FAST_FORWARD_OPERATIONS:
        fast_forward_ms = fast_forward_ms or 0

        def invoke():
            operation(fast_forward_ms)
    else:
        def invoke():
            operation()

    log.debug(f"Armed '{method_name}' in {remaining_delay}ms with fast-forward {fast_forward_ms} (last event {last_event_time}, delay {delay_action}, compensate {compensate})")
    return scheduler.arm_after(remaining_delay, invoke)
