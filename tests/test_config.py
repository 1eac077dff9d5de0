from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from classhub.core import config
from classhub.core.config import Settings


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("CLASSHUB_DEBUG", "true")
    monkeypatch.setenv("CLASSHUB_REMINDER_HOUR", "6")
    monkeypatch.setenv("CLASSHUB_UPLOAD_DIR", "/srv/classhub/uploads")
    monkeypatch.setenv("CLASSHUB_SMTP_PORT", "2465")

    s = Settings()
    assert s.DEBUG is True
    assert s.REMINDER_HOUR == 6
    assert s.UPLOAD_DIR == Path("/srv/classhub/uploads")
    assert s.SMTP_PORT == 2465


@pytest.mark.parametrize(
    "name, value",
    [
        ("CLASSHUB_REMINDER_HOUR", "abc"),
        ("CLASSHUB_REMINDER_HOUR", "24"),
        ("CLASSHUB_DEBUG", "True1"),
        ("CLASSHUB_TOKEN_MINUTES", "0"),
    ],
)
def test_bad_values_name_the_setting(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError) as exc:
        Settings()
    assert name.removeprefix("CLASSHUB_") in str(exc.value)


def test_module_aliases_follow_settings():
    assert config.ACCESS_TOKEN_EXPIRE == timedelta(minutes=config.settings.TOKEN_MINUTES)
    assert config.DATABASE_URL == config.settings.DATABASE_URL
    assert 0 <= config.REMINDER_HOUR <= 23
