"""Daily "due tomorrow" reminder sweep.

Once a day, every published assignment that collects submissions and is due
on the next calendar day (UTC) gets an e-mail to each enrolled student who
has not turned anything in yet. ``Assignment.reminder_sent_on`` marks the
day a reminder went out so a second run on the same day sends nothing.
"""

import asyncio
import logging
from datetime import datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from classhub.core import config
from classhub.db.session import SessionLocal
from classhub.models.assignment import Assignment
from classhub.services import classrooms, notifier

logger = logging.getLogger(__name__)


def _tomorrow_window(now: datetime) -> tuple[datetime, datetime]:
    today = now.astimezone(timezone.utc).date()
    start = datetime.combine(today + timedelta(days=1), time.min, tzinfo=timezone.utc)
    end = datetime.combine(today + timedelta(days=1), time.max, tzinfo=timezone.utc)
    return start, end


def assignments_due_tomorrow(db: Session, now: datetime) -> list[Assignment]:
    start, end = _tomorrow_window(now)
    return (
        db.query(Assignment)
        .filter(
            Assignment.due_date.is_not(None),
            Assignment.due_date >= start,
            Assignment.due_date <= end,
            Assignment.is_published.is_(True),
            Assignment.collect_submissions.is_(True),
        )
        .order_by(Assignment.due_date.asc(), Assignment.id.asc())
        .all()
    )


def pending_recipients(db: Session, assignment: Assignment) -> list[str]:
    submitted = {sub.student_id for sub in assignment.submissions}
    return [
        s.email
        for s in classrooms.enrolled_students(db, assignment.classroom_id)
        if s.id not in submitted and s.email
    ]


def send_due_reminders(db: Session, now: Optional[datetime] = None) -> int:
    """Run one sweep. Returns the number of assignments reminded about."""
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).date()
    sent = 0

    for a in assignments_due_tomorrow(db, now):
        if a.reminder_sent_on == today:
            continue

        to = pending_recipients(db, a)
        if not to:
            continue

        try:
            delivered = notifier.notify_due_tomorrow(
                to, a.classroom.name, a.title, a.description, a.due_date
            )
        except Exception:
            logger.exception("reminder for assignment %s failed", a.id)
            continue
        # a failed send is retried on the next sweep
        if not delivered:
            logger.warning("reminder for assignment %s not delivered", a.id)
            continue

        a.reminder_sent_on = today
        db.commit()
        sent += 1
        logger.info("reminder for assignment %s sent to %d student(s)", a.id, len(to))

    return sent


def _sweep() -> int:
    db = SessionLocal()
    try:
        return send_due_reminders(db)
    finally:
        db.close()


def seconds_until_next_run(now: datetime, hour: int = config.REMINDER_HOUR) -> float:
    now = now.astimezone(timezone.utc)
    target = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


async def run_reminder_loop() -> None:
    """Sleep until the configured hour, sweep, repeat. Never raises."""
    while True:
        delay = seconds_until_next_run(datetime.now(timezone.utc))
        logger.info("next reminder sweep in %.0fs", delay)
        await asyncio.sleep(delay)

        try:
            count = await asyncio.to_thread(_sweep)
            logger.info("reminder sweep done: %d assignment(s)", count)
        except Exception:
            logger.exception("reminder sweep failed")
