"""Millisecond -> (sign, hours, minutes, seconds) display tuples."""

import math

# Unit sizes in ms for hours, minutes, seconds, and the base each unit rolls over at. Hours never roll over.
_STEPS = (3_600_000, 60_000, 1_000)
_BASES = (None, 60, 60)


def format_time(ms, decreasing=False):
    """Split a signed millisecond value into ``(sign, hours, minutes, seconds)``.

    Hours and minutes are floored. Seconds are rounded up whenever the value is
    negative or the timer is counting down, so a decrementing display never shows
    a value a tick ahead of what is actually left. Rounding up can land seconds on
    60, which then carries into minutes (and minutes into hours).
    """
    remaining = abs(ms)
    result = ["-" if ms < 0 else ""]

    for step in _STEPS[:-1]:
        value = int(remaining // step)
        remaining -= value * step
        result.append(value)

    if ms < 0 or decreasing:
        result.append(math.ceil(remaining / _STEPS[-1]))
    else:
        result.append(int(remaining // _STEPS[-1]))

    # result[0] is the sign, so unit i of _STEPS lives at result[i + 1]
    i = len(_STEPS) - 1
    while _BASES[i] is not None and result[i + 1] == _BASES[i]:
        result[i + 1] = 0
        result[i] += 1
        i -= 1

    return tuple(result)


# Renders a format_time tuple as [-]HH:MM:SS, for console output and log lines.
def format_clock(parts):
    sign, hours, minutes, seconds = parts
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
