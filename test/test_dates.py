"""Tests for date normalization."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from Mdq.core.errors import DateParseError
from Mdq.document.dates import format_date, normalize_date, parse_date_bound

EPOCH = 1624380496  # 2021-06-22T16:48:16Z


class TestNormalizeDate(unittest.TestCase):
    def test_accepted_forms_agree(self) -> None:
        for value in (
            "2021-06-22T12:48:16-04:00",
            "2021-06-22T12:48:16-0400",
            "2021-06-22T16:48:16Z",
            "2021-06-22t16:48:16z",
            "1624380496",
            EPOCH,
        ):
            with self.subTest(value=value):
                self.assertEqual(normalize_date(value), EPOCH)

    def test_fractional_seconds_are_truncated(self) -> None:
        self.assertEqual(normalize_date("2021-06-22T16:48:16.75Z"), EPOCH)

    def test_rejects_other_values(self) -> None:
        for value in ("yesterday", "2021-06-22", "2021-06-22T12:48:16", True, 1.5, None, [EPOCH]):
            with self.subTest(value=value):
                with self.assertRaises(DateParseError) as ctx:
                    normalize_date(value)
                self.assertEqual(ctx.exception.value, value)

    def test_rejects_epochs_out_of_range(self) -> None:
        for value in (99999999999999, "99999999999999", -99999999999999):
            with self.subTest(value=value):
                with self.assertRaises(DateParseError) as ctx:
                    normalize_date(value)
                self.assertEqual(ctx.exception.value, value)

    def test_format_date_is_utc(self) -> None:
        self.assertEqual(format_date(EPOCH), "2021-06-22T16:48:16+00:00")
        self.assertEqual(normalize_date(format_date(EPOCH)), EPOCH)


class TestDateBounds(unittest.TestCase):
    def test_bare_day(self) -> None:
        self.assertEqual(parse_date_bound("2021-01-01"), 1609459200)

    def test_bare_day_end_of_day(self) -> None:
        self.assertEqual(parse_date_bound("2021-01-01", end_of_day=True), 1609545599)

    def test_full_timestamp_ignores_end_of_day(self) -> None:
        self.assertEqual(parse_date_bound("2021-06-22T16:48:16Z", end_of_day=True), EPOCH)

    def test_invalid_day(self) -> None:
        with self.assertRaises(DateParseError):
            parse_date_bound("2021-13-40")


if __name__ == "__main__":
    unittest.main()
