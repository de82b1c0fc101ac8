"""Tests for the timer record format and countdown arithmetic.

Covers: rtimer.core.record
"""

import unittest

from rtimer.common.errors import CorruptRecordError, UnreadableRecordError
from rtimer.core.record import (
    TimerRecord,
    TimerState,
    decode_duration,
    decode_record,
    encode_record,
    new_record,
    time_left,
)


# ──────────────────────────────────────────────────────────────────────────
# Encoding / decoding
# ──────────────────────────────────────────────────────────────────────────

class TestEncode(unittest.TestCase):

    def test_new_record_layout(self):
        """A fresh record is active, has nothing elapsed and repeats ts on line two."""
        record = new_record(1700000000, 90)
        self.assertEqual(encode_record(record), "1700000000 a 0 90\n1700000000\n")

    def test_new_record_fields(self):
        record = new_record(5, 0)
        self.assertEqual(record.ts, 5)
        self.assertIs(record.state, TimerState.ACTIVE)
        self.assertEqual(record.elapsed, 0)
        self.assertEqual(record.duration, 0)
        self.assertEqual(record.reserved, "5")

    def test_paused_record_encodes_state_code(self):
        record = TimerRecord(ts=10, state=TimerState.PAUSED, elapsed=3, duration=20, reserved="10")
        self.assertEqual(encode_record(record), "10 p 3 20\n10\n")


class TestDecode(unittest.TestCase):

    def test_decode_valid_record(self):
        record = decode_record("1700000000 a 0 90\n1700000000\n")
        self.assertEqual(record, TimerRecord(1700000000, TimerState.ACTIVE, 0, 90, "1700000000"))

    def test_decode_accepts_extra_whitespace(self):
        """Fields are whitespace separated, so tabs and runs of spaces are fine."""
        record = decode_record("  12\tp   4 30 \n12\n")
        self.assertIs(record.state, TimerState.PAUSED)
        self.assertEqual((record.ts, record.elapsed, record.duration), (12, 4, 30))

    def test_decode_without_second_line(self):
        """The reserved line is never interpreted, so it may be missing."""
        record = decode_record("1 a 0 5")
        self.assertEqual(record.reserved, "")
        self.assertEqual(record.duration, 5)

    def test_decode_preserves_reserved_line(self):
        record = decode_record("1 a 0 5\nwhatever\n")
        self.assertEqual(record.reserved, "whatever")
        self.assertEqual(encode_record(record), "1 a 0 5\nwhatever\n")

    def test_too_few_fields_is_unreadable(self):
        for text in ("", "\n", "1 a 0", "1 a 0\n5\n"):
            with self.subTest(text=text):
                with self.assertRaises(UnreadableRecordError) as cm:
                    decode_record(text)
                self.assertIn("can not read timer file", str(cm.exception))

    def test_unreadable_is_a_corrupt_record(self):
        with self.assertRaises(CorruptRecordError):
            decode_record("nope")

    def test_bad_state(self):
        """A state other than a/p names the field and the raw text."""
        with self.assertRaises(CorruptRecordError) as cm:
            decode_record("1 x 0 5\n1\n")
        self.assertEqual(cm.exception.field, "state")
        self.assertEqual(cm.exception.raw, "x")
        self.assertIn("state", str(cm.exception))
        self.assertIn("'x'", str(cm.exception))

    def test_bad_timestamp(self):
        with self.assertRaises(CorruptRecordError) as cm:
            decode_record("abc a 0 5\n")
        self.assertEqual(cm.exception.field, "timestamp")
        self.assertEqual(cm.exception.raw, "abc")

    def test_negative_values_rejected(self):
        cases = {
            "-1 a 0 5": "timestamp",
            "1 a -2 5": "elapsed",
            "1 a 0 -5": "duration",
        }
        for text, field in cases.items():
            with self.subTest(text=text):
                with self.assertRaises(CorruptRecordError) as cm:
                    decode_record(text)
                self.assertEqual(cm.exception.field, field)

    def test_non_integer_values_rejected(self):
        for text in ("1.5 a 0 5", "1 a 0x1 5", "1 a 0 5s", "1 a 0 +5"):
            with self.subTest(text=text):
                with self.assertRaises(CorruptRecordError):
                    decode_record(text)

    def test_validation_order_first_failure_wins(self):
        """Timestamp, then state, then elapsed, then duration."""
        cases = {
            "x y z w": "timestamp",
            "1 y z w": "state",
            "1 a z w": "elapsed",
            "1 a 0 w": "duration",
        }
        for text, field in cases.items():
            with self.subTest(text=text):
                with self.assertRaises(CorruptRecordError) as cm:
                    decode_record(text)
                self.assertEqual(cm.exception.field, field)

    def test_trailing_tokens_fail_as_duration(self):
        with self.assertRaises(CorruptRecordError) as cm:
            decode_record("1 a 0 5 6\n")
        self.assertEqual(cm.exception.field, "duration")
        self.assertEqual(cm.exception.raw, "5 6")

    def test_error_mentions_path(self):
        with self.assertRaises(CorruptRecordError) as cm:
            decode_record("1 q 0 5", path="/tmp/x.timer")
        self.assertIn("/tmp/x.timer", str(cm.exception))


class TestDecodeDuration(unittest.TestCase):

    def test_only_duration_validated(self):
        """Garbage in the other fields doesn't matter to `duration`."""
        self.assertEqual(decode_duration("junk x -3 42\n"), 42)

    def test_bad_duration(self):
        with self.assertRaises(CorruptRecordError) as cm:
            decode_duration("1 a 0 forever\n")
        self.assertEqual(cm.exception.field, "duration")
        self.assertEqual(cm.exception.raw, "forever")

    def test_short_line_unreadable(self):
        with self.assertRaises(UnreadableRecordError):
            decode_duration("1 a\n")


# ──────────────────────────────────────────────────────────────────────────
# Countdown arithmetic
# ──────────────────────────────────────────────────────────────────────────

class TestTimeLeft(unittest.TestCase):

    def test_counts_down(self):
        self.assertEqual(time_left(100, 0, 60, 100), 60)
        self.assertEqual(time_left(100, 0, 60, 130), 30)

    def test_elapsed_is_subtracted(self):
        self.assertEqual(time_left(100, 20, 60, 110), 30)

    def test_clamps_to_zero(self):
        self.assertEqual(time_left(100, 0, 60, 160), 0)
        self.assertEqual(time_left(100, 0, 60, 1000), 0)

    def test_strictly_decreasing_until_zero(self):
        values = [time_left(0, 0, 5, now) for now in range(0, 5)]
        self.assertEqual(values, [5, 4, 3, 2, 1])


class TestTimerRecordState(unittest.TestCase):

    def test_active_timer_is_active_with_time_left(self):
        record = new_record(100, 10)
        self.assertTrue(record.is_active(100))
        self.assertTrue(record.is_active(109))

    def test_boundary_is_exclusive(self):
        """Exactly zero seconds left is not active."""
        record = new_record(100, 10)
        self.assertFalse(record.is_active(110))
        self.assertFalse(new_record(100, 0).is_active(100))

    def test_active_left(self):
        record = new_record(100, 10)
        self.assertEqual(record.left(104), 6)
        self.assertEqual(record.left(500), 0)

    def test_paused_is_never_active(self):
        record = TimerRecord(ts=100, state=TimerState.PAUSED, elapsed=2, duration=10)
        self.assertFalse(record.is_active(100))

    def test_paused_left_is_frozen(self):
        record = TimerRecord(ts=100, state=TimerState.PAUSED, elapsed=2, duration=10)
        self.assertEqual(record.left(100), 8)
        self.assertEqual(record.left(10_000), 8)

    def test_paused_left_not_clamped(self):
        record = TimerRecord(ts=100, state=TimerState.PAUSED, elapsed=15, duration=10)
        self.assertEqual(record.left(100), -5)


if __name__ == "__main__":
    unittest.main()
