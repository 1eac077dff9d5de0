"""Outbound e-mail notifications.

Every public function here is fire-and-forget: it is queued with FastAPI's
``BackgroundTasks`` (or run by the reminder sweep), logs its own failures
and returns nothing the caller depends on.
"""

import logging
import smtplib
from datetime import datetime
from email.message import EmailMessage
from typing import Iterable, Optional

from classhub.core import config

logger = logging.getLogger(__name__)

SIGNATURE = "ClassHub"


def email_enabled() -> bool:
    return bool(config.SMTP_USER and config.SMTP_PASSWORD)


def send_email(to: Iterable[str], subject: str, text: str, html: Optional[str] = None) -> bool:
    recipients = [addr for addr in to if addr]
    if not recipients:
        return False
    if not email_enabled():
        logger.warning("email disabled, skipping '%s' to %d recipient(s)", subject, len(recipients))
        return False

    msg = EmailMessage()
    msg["Subject"] = _one_line(subject)
    msg["From"] = config.MAIL_FROM
    # several recipients go in BCC so addresses are not shared between students
    if len(recipients) > 1:
        msg["To"] = config.SMTP_USER
        msg["Bcc"] = ", ".join(recipients)
    else:
        msg["To"] = recipients[0]
    msg.set_content(text)
    if html:
        msg.add_alternative(html, subtype="html")

    logger.info("sending '%s' to %d recipient(s)", subject, len(recipients))
    with smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT) as smtp:
        smtp.login(config.SMTP_USER, config.SMTP_PASSWORD)
        smtp.send_message(msg)
    return True


def _one_line(value: str) -> str:
    # header values may not contain line breaks
    return " ".join(value.splitlines())


def _format_due(due_date: Optional[datetime], fallback: str) -> str:
    if due_date is None:
        return fallback
    return due_date.strftime("%Y-%m-%d %H:%M UTC")


def notify_new_assignment(
    recipients: list[str],
    classroom_name: str,
    title: str,
    description: Optional[str],
    due_date: Optional[datetime],
) -> None:
    due = _format_due(due_date, "No due date")
    lines = ["New assignment posted", f"Class: {classroom_name}", f"Assignment: {title}"]
    if description:
        lines.append(description)
    lines += [f"Due: {due}", "", SIGNATURE]
    try:
        send_email(recipients, f'New assignment posted: "{title}"', "\n".join(lines))
    except Exception:
        logger.exception("new assignment notification failed for '%s'", title)


def notify_due_tomorrow(
    recipients: list[str],
    classroom_name: str,
    title: str,
    description: Optional[str],
    due_date: Optional[datetime],
) -> bool:
    due = _format_due(due_date, "tomorrow")
    lines = ["Assignment due tomorrow", f"Class: {classroom_name}", f"Assignment: {title}"]
    if description:
        lines.append(description)
    lines += [f"Due: {due}", "", SIGNATURE]
    try:
        return send_email(recipients, f'Reminder: "{title}" due tomorrow', "\n".join(lines))
    except Exception:
        logger.exception("due reminder failed for '%s'", title)
        return False
