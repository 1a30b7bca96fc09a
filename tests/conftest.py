"""Shared fixtures for local_file_emailer tests."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

SAMPLE_EMAIL = (
    "Server: smtp.example.com\n"
    "User: sender@example.com\n"
    "Password: s3cret:with:colons\n"
    "To: friend@example.com\n"
    "CC: a@x.com, b@y.com\n"
    "BCC: hidden@z.com\n"
    "Subject: Weekly report\n"
    "Body: line1\n"
    "line2\n"
)


@pytest.fixture
def write_file(tmp_path: Path):
    """Factory fixture: write text to a file under tmp_path and return its path as str."""

    def _write(name: str, text: str) -> str:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return str(p)

    return _write


@pytest.fixture
def sample_email_file(write_file) -> str:
    return write_file("email.txt", SAMPLE_EMAIL)


@pytest.fixture
def mock_smtp():
    """Patch smtplib.SMTP_SSL; yields (class mock, session mock)."""
    with patch("local_file_emailer.src.emailer.smtplib.SMTP_SSL") as cls:
        session = MagicMock()
        session.sendmail.return_value = {}
        cls.return_value.__enter__.return_value = session
        cls.return_value.__exit__.return_value = False
        yield cls, session


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("EMAILER_CONFIG", "EMAILER_LOG_LEVEL", "EMAILER_LOG_FILE", "EMAILER_SMTP_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
