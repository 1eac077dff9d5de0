from datetime import datetime, timedelta, timezone

from classhub.services.lateness import LATE, ON_TIME, as_utc, classify_submission, minutes_late

DUE = datetime(2025, 1, 10, 23, 59, tzinfo=timezone.utc)


def test_no_due_date_is_always_on_time():
    assert classify_submission(None, datetime(2030, 1, 1, tzinfo=timezone.utc)) == ON_TIME


def test_submitting_at_the_due_instant_is_on_time():
    assert classify_submission(DUE, DUE) == ON_TIME


def test_submitting_after_due_is_late():
    submitted = datetime(2025, 1, 11, 0, 5, tzinfo=timezone.utc)
    assert classify_submission(DUE, submitted) == LATE
    assert minutes_late(DUE, submitted) == 6


def test_classification_is_stable_across_reads():
    submitted = DUE + timedelta(seconds=1)
    results = {classify_submission(DUE, submitted) for _ in range(5)}
    assert results == {LATE}


def test_naive_values_are_read_as_utc():
    naive_due = datetime(2025, 1, 10, 23, 59)
    assert classify_submission(naive_due, DUE - timedelta(minutes=1)) == ON_TIME
    assert classify_submission(naive_due, datetime(2025, 1, 11, 0, 0)) == LATE


def test_other_timezones_are_compared_in_utc():
    plus_two = timezone(timedelta(hours=2))
    # 01:30 at +02:00 is 23:30 UTC, before the deadline
    submitted = datetime(2025, 1, 11, 1, 30, tzinfo=plus_two)
    assert classify_submission(DUE, submitted) == ON_TIME
    assert as_utc(submitted).hour == 23


def test_minutes_late_is_none_when_on_time_or_no_deadline():
    assert minutes_late(None, DUE) is None
    assert minutes_late(DUE, DUE - timedelta(hours=1)) is None
