"""Timer record — the on-disk format and the countdown arithmetic, no I/O."""

from dataclasses import dataclass
from enum import Enum

from rtimer.common.errors import CorruptRecordError, UnreadableRecordError


class TimerState(Enum):
    ACTIVE = "a"
    PAUSED = "p"


# Parses one of the integer fields. Only plain non-negative decimal digits are accepted, so "+5", "-1", "1.0" and
# " 7" are all corrupt.
def _parse_count(field, raw, path=None):
    if not raw.isascii() or not raw.isdigit():
        raise CorruptRecordError(field, raw, path)
    return int(raw)


def _parse_state(raw, path=None):
    try:
        return TimerState(raw)
    except ValueError:
        raise CorruptRecordError("state", raw, path) from None


# Splits the first line into its four positional fields. Fewer than four means the record can't be read at all.
# Anything past the third field stays glued to the duration, which then fails validation as a whole.
def _split_fields(text, path=None):
    first_line = text.split("\n", 1)[0]
    fields = first_line.split(None, 3)
    if len(fields) < 4:
        raise UnreadableRecordError(path)
    fields[3] = fields[3].strip()
    return fields


# Seconds left on a running countdown, never below zero. `now` must be sampled by the caller at the moment of the
# query.
def time_left(ts, elapsed, duration, now):
    left = ts + duration - elapsed - now
    return left if left > 0 else 0


@dataclass(frozen=True)
class TimerRecord:
    """One timer, as stored in its ``<name>.timer`` file.

    ``ts`` is when the timer last went active, ``elapsed`` is how much of the
    countdown was used up before that, and ``duration`` is the full budget.
    ``reserved`` is the second line of the file. It is written back untouched
    and never interpreted.
    """

    ts: int
    state: TimerState
    elapsed: int
    duration: int
    reserved: str = ""

    @property
    def active(self):
        return self.state is TimerState.ACTIVE

    # Remaining seconds. A paused timer is frozen at whatever budget it had left, which isn't clamped.
    def left(self, now):
        if self.active:
            return time_left(self.ts, self.elapsed, self.duration, now)
        return self.duration - self.elapsed

    # Active means running AND with time on the clock. Hitting exactly zero counts as expired.
    def is_active(self, now):
        return self.active and time_left(self.ts, self.elapsed, self.duration, now) > 0


# Builds the record `start` writes: running, nothing elapsed, timestamp duplicated into the reserved line.
def new_record(now, duration):
    return TimerRecord(ts=now, state=TimerState.ACTIVE, elapsed=0, duration=duration, reserved=str(now))


def encode_record(record):
    return f"{record.ts} {record.state.value} {record.elapsed} {record.duration}\n{record.reserved}\n"


def decode_record(text, path=None):
    """Parse and fully validate a record.

    Fields are checked in order (timestamp, state, elapsed, duration) and the
    first bad one raises :class:`CorruptRecordError` naming it.
    """
    raw_ts, raw_state, raw_elapsed, raw_duration = _split_fields(text, path)
    ts = _parse_count("timestamp", raw_ts, path)
    state = _parse_state(raw_state, path)
    elapsed = _parse_count("elapsed", raw_elapsed, path)
    duration = _parse_count("duration", raw_duration, path)

    lines = text.split("\n")
    reserved = lines[1].strip() if len(lines) > 1 else ""
    return TimerRecord(ts=ts, state=state, elapsed=elapsed, duration=duration, reserved=reserved)


# Pulls out just the duration. The other fields still have to be present but aren't validated.
def decode_duration(text, path=None):
    fields = _split_fields(text, path)
    return _parse_count("duration", fields[3], path)
