"""Shared fixtures for Nagios Notify tests."""

import logging
from pathlib import Path

import pytest

from nagios_notify.config.models import AppConfig, SMTPConfig
from nagios_notify.domain.models import NotificationEvent
from nagios_notify.logging.context import clear_log_context

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SAMPLE_DATE = "Wed Sep 20 10:43:55 JST 2023"
SAMPLE_CONTACT = "ryo@aquahill.net"
JAPANESE_OUTPUT = "これはテストメールです"

ENV_VARS = ["SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS", "LOG_LEVEL", "NAGIOS_NOTIFY_CONFIG"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep environment overrides from leaking into tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    """Restore root logger handlers and level after tests that configure logging."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    clear_log_context()
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)
    clear_log_context()


@pytest.fixture
def smtp_config():
    """SMTP settings with authentication over STARTTLS."""
    return SMTPConfig(
        host="smtp.example.com",
        port=587,
        user_name="nagios@example.com",
        password="secret123",
        sender="Nagios <nagios@example.com>",
        use_tls=True,
    )


@pytest.fixture
def app_config(smtp_config):
    return AppConfig(smtp=smtp_config)


@pytest.fixture
def host_problem_event():
    return NotificationEvent.from_values(
        contact=SAMPLE_CONTACT,
        alert_type="host",
        notification_type="PROBLEM",
        host_name="example.com",
        host_address="192.168.0.1",
        state="CRITICAL",
        date=SAMPLE_DATE,
        output="",
        service_name="",
    )


@pytest.fixture
def host_recovery_event():
    return NotificationEvent.from_values(
        contact=SAMPLE_CONTACT,
        alert_type="host",
        notification_type="RECOVERY",
        host_name="example.com",
        host_address="192.168.0.1",
        state="OK",
        date=SAMPLE_DATE,
        output="",
        service_name="",
    )


@pytest.fixture
def service_problem_event():
    return NotificationEvent.from_values(
        contact=SAMPLE_CONTACT,
        alert_type="service",
        notification_type="PROBLEM",
        host_name="example.com",
        host_address="192.168.0.1",
        state="CRITICAL",
        date=SAMPLE_DATE,
        output=JAPANESE_OUTPUT,
        service_name="HTTP",
    )
