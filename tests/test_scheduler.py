import unittest
from datetime import date, datetime, timedelta, timezone

from studynotes.scheduling import (
    REDO_INTERVALS,
    WEEKEND,
    DueStatus,
    add_days,
    calendar_date,
    classify,
    days_until,
    get_interval,
    next_weekend,
    resolve_interval,
)

WED = date(2024, 1, 10)


class AddDaysTests(unittest.TestCase):
    def test_crosses_month_and_year(self) -> None:
        self.assertEqual(add_days(date(2024, 1, 31), 1), date(2024, 2, 1))
        self.assertEqual(add_days(date(2023, 12, 31), 1), date(2024, 1, 1))
        self.assertEqual(add_days(date(2024, 2, 28), 1), date(2024, 2, 29))

    def test_negative_offsets(self) -> None:
        self.assertEqual(add_days(date(2024, 1, 1), -1), date(2023, 12, 31))

    def test_round_trip(self) -> None:
        for n in (-400, -31, -1, 0, 1, 7, 30, 365):
            self.assertEqual(add_days(add_days(WED, n), -n), WED)

    def test_datetime_input_reduces_to_date(self) -> None:
        self.assertEqual(add_days(datetime(2024, 1, 10, 23, 59), 1), date(2024, 1, 11))


class NextWeekendTests(unittest.TestCase):
    def test_weekdays_advance_to_saturday(self) -> None:
        self.assertEqual(next_weekend(date(2024, 1, 8)), date(2024, 1, 13))  # Monday, 5 days
        self.assertEqual(next_weekend(WED), date(2024, 1, 13))
        self.assertEqual(next_weekend(date(2024, 1, 12)), date(2024, 1, 13))  # Friday, 1 day

    def test_weekend_days_map_to_themselves(self) -> None:
        self.assertEqual(next_weekend(date(2024, 1, 13)), date(2024, 1, 13))
        self.assertEqual(next_weekend(date(2024, 1, 14)), date(2024, 1, 14))

    def test_result_is_always_saturday_or_same_weekend_day(self) -> None:
        start = date(2024, 3, 1)
        for i in range(21):
            d = start + timedelta(days=i)
            out = next_weekend(d)
            if d.weekday() in (5, 6):
                self.assertEqual(out, d)
            else:
                self.assertEqual(out.weekday(), 5)
                self.assertTrue(0 < (out - d).days <= 5)


class ClassifyTests(unittest.TestCase):
    def test_none_when_unset(self) -> None:
        self.assertIs(classify(None, WED), DueStatus.NONE)
        self.assertIs(classify("not a date", WED), DueStatus.NONE)

    def test_buckets(self) -> None:
        self.assertIs(classify(date(2024, 1, 9), WED), DueStatus.OVERDUE)
        self.assertIs(classify(WED, WED), DueStatus.DUE_TODAY)
        self.assertIs(classify(date(2024, 1, 11), WED), DueStatus.DUE_SOON)
        self.assertIs(classify(date(2024, 1, 13), WED), DueStatus.DUE_SOON)
        self.assertIs(classify(date(2024, 1, 14), WED), DueStatus.UPCOMING)

    def test_time_of_day_is_ignored(self) -> None:
        now = datetime(2024, 1, 10, 23, 0)
        self.assertIs(classify(datetime(2024, 1, 10, 1, 0), now), DueStatus.DUE_TODAY)
        self.assertIs(classify("2024-01-09T23:59:00", now), DueStatus.OVERDUE)

    def test_custom_due_soon_window(self) -> None:
        self.assertIs(classify(date(2024, 1, 11), WED, due_soon_days=0), DueStatus.UPCOMING)
        self.assertIs(classify(date(2024, 1, 17), WED, due_soon_days=7), DueStatus.DUE_SOON)

    def test_today_is_judged_in_callers_timezone(self) -> None:
        plus9 = timezone(timedelta(hours=9))
        now = datetime(2024, 1, 10, 20, 0, tzinfo=timezone.utc)  # 11 Jan in UTC+9
        self.assertIs(classify(date(2024, 1, 11), now, tz=plus9), DueStatus.DUE_TODAY)
        self.assertIs(classify(date(2024, 1, 11), now), DueStatus.DUE_SOON)

    def test_redo_date_is_not_shifted_across_offsets(self) -> None:
        stored = datetime(2024, 11, 5, tzinfo=timezone.utc)
        winter = timezone(timedelta(hours=1))
        west = timezone(timedelta(hours=-5))
        self.assertIs(classify(stored, datetime(2024, 11, 5, 9, 0, tzinfo=winter), tz=winter), DueStatus.DUE_TODAY)
        self.assertIs(classify(stored, datetime(2024, 11, 5, 8, 0, tzinfo=west), tz=west), DueStatus.DUE_TODAY)
        self.assertEqual(days_until(stored, datetime(2024, 11, 4, 23, 0, tzinfo=west)), 1)

    def test_aware_today_without_tz_uses_its_own_zone(self) -> None:
        plus9 = timezone(timedelta(hours=9))
        stored = datetime(2024, 1, 11, tzinfo=timezone.utc)
        now = datetime(2024, 1, 11, 7, 0, tzinfo=plus9)  # still 10 Jan in UTC
        self.assertIs(classify(stored, now), DueStatus.DUE_TODAY)
        self.assertEqual(days_until(stored, now), 0)

    def test_total_over_every_input(self) -> None:
        for value in (None, "", "2024-01-05", date(2030, 1, 1), datetime(2000, 1, 1), 42):
            self.assertIn(classify(value, WED), list(DueStatus))

    def test_scenario_overdue(self) -> None:
        self.assertIs(classify("2024-01-05", date(2024, 1, 6)), DueStatus.OVERDUE)


class IntervalCatalogTests(unittest.TestCase):
    def test_catalog_order(self) -> None:
        self.assertEqual([iv.offset for iv in REDO_INTERVALS], [1, 3, 7, 14, 30, WEEKEND])

    def test_resolve_by_key_and_label(self) -> None:
        self.assertEqual(resolve_interval("1w", WED), date(2024, 1, 17))
        self.assertEqual(resolve_interval("In 1 month", WED), date(2024, 2, 9))
        self.assertEqual(resolve_interval("weekend", WED), date(2024, 1, 13))

    def test_unknown_interval(self) -> None:
        with self.assertRaises(KeyError):
            get_interval("fortnight-ish")


class HelperTests(unittest.TestCase):
    def test_calendar_date(self) -> None:
        self.assertIsNone(calendar_date(None))
        self.assertEqual(calendar_date("2024-01-05"), date(2024, 1, 5))
        self.assertEqual(calendar_date(datetime(2024, 1, 5, 12)), date(2024, 1, 5))

    def test_days_until(self) -> None:
        self.assertIsNone(days_until(None, WED))
        self.assertEqual(days_until(date(2024, 1, 8), WED), -2)
        self.assertEqual(days_until(date(2024, 1, 13), WED), 3)


if __name__ == "__main__":
    unittest.main()
