"""Tests for the command-line entry point."""

import argparse
import smtplib
from pathlib import Path
from unittest.mock import patch

import pytest

from nagios_notify.config.models import AppConfig, LoggingConfig, SMTPConfig, TemplateConfig
from nagios_notify.main import build_event, build_parser, main, resolve_log_level
from tests.helpers import FakeSMTPFactory

HOST_ARGS = [
    "-a", "ryo@aquahill.net",
    "-t", "host",
    "-n", "PROBLEM",
    "-s", "",
    "-H", "example.com",
    "-A", "192.168.0.1",
    "-S", "CRITICAL",
    "-d", "Wed Sep 20 10:43:55 JST 2023",
    "-o", "",
]


@pytest.fixture
def smtp_factory():
    factory = FakeSMTPFactory()
    with patch("smtplib.SMTP", new=factory), patch("smtplib.SMTP_SSL", new=factory):
        yield factory


@pytest.fixture
def loaded_config(app_config):
    with patch("nagios_notify.main.load_config", return_value=app_config) as mock_load:
        yield mock_load


class TestParser:
    def test_parses_all_flags(self):
        args = build_parser().parse_args(["-v"] + HOST_ARGS)

        assert args.verbose is True
        assert args.contact == "ryo@aquahill.net"
        assert args.alert_type == "host"
        assert args.notification_type == "PROBLEM"
        assert args.service_name == ""
        assert args.host_name == "example.com"
        assert args.host_address == "192.168.0.1"
        assert args.state == "CRITICAL"
        assert args.date == "Wed Sep 20 10:43:55 JST 2023"
        assert args.output == ""
        assert args.config is None
        assert args.dry_run is False

    def test_alert_type_is_case_insensitive(self):
        args = build_parser().parse_args(["-a", "a@example.com", "-t", "SERVICE", "-n", "PROBLEM", "-H", "h"])
        assert args.alert_type == "service"

    def test_invalid_alert_type_exits_2(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["-a", "a@example.com", "-t", "router", "-n", "PROBLEM", "-H", "h"])

        assert exc_info.value.code == 2

    def test_missing_required_flag_exits_2(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["-t", "host", "-n", "PROBLEM", "-H", "h"])

        assert exc_info.value.code == 2

    def test_build_event_from_args(self):
        event = build_event(build_parser().parse_args(HOST_ARGS))

        assert event.host_name == "example.com"
        assert event.service_name == ""
        assert event.is_host


class TestResolveLogLevel:
    def _args(self, log_level=None, verbose=False):
        return argparse.Namespace(log_level=log_level, verbose=verbose)

    def test_cli_flag_wins(self, smtp_config):
        config = AppConfig(smtp=smtp_config, logging=LoggingConfig(level="WARNING"))
        assert resolve_log_level(config, self._args("ERROR", verbose=True)) == "ERROR"

    def test_verbose_means_debug(self, smtp_config):
        config = AppConfig(smtp=smtp_config, logging=LoggingConfig(level="WARNING"))
        assert resolve_log_level(config, self._args(verbose=True)) == "DEBUG"

    def test_config_level_used_by_default(self, smtp_config):
        config = AppConfig(smtp=smtp_config, logging=LoggingConfig(level="WARNING"))
        assert resolve_log_level(config, self._args()) == "WARNING"


class TestMain:
    def test_success_returns_zero(self, loaded_config, smtp_factory):
        assert main(HOST_ARGS) == 0
        assert len(smtp_factory.messages) == 1
        assert smtp_factory.messages[0]["To"] == "ryo@aquahill.net"

    def test_verbose_prints_body(self, loaded_config, smtp_factory, capsys):
        assert main(["-v"] + HOST_ARGS) == 0

        captured = capsys.readouterr()
        assert "ホストに問題が発生" in captured.out

    def test_dry_run_does_not_send(self, loaded_config, smtp_factory, capsys):
        assert main(HOST_ARGS + ["--dry-run"]) == 0

        assert smtp_factory.connections == []
        assert "example.com" in capsys.readouterr().out

    def test_empty_contact_returns_2_without_connecting(self, loaded_config, smtp_factory, capsys):
        args = list(HOST_ARGS)
        args[1] = ""

        assert main(args) == 2
        assert smtp_factory.connections == []
        assert "Invalid Argument" in capsys.readouterr().err

    def test_malformed_contact_returns_2(self, loaded_config, smtp_factory):
        args = list(HOST_ARGS)
        args[1] = "not-an-address"

        assert main(args) == 2
        assert smtp_factory.connections == []

    def test_missing_config_returns_3(self, capsys):
        assert main(HOST_ARGS + ["--config", "/nonexistent/config.yml"]) == 3
        assert "Configuration Error" in capsys.readouterr().err

    def test_missing_template_returns_4(self, smtp_config, smtp_factory, tmp_path, capsys):
        config = AppConfig(smtp=smtp_config, templates=TemplateConfig(directory=tmp_path))

        with patch("nagios_notify.main.load_config", return_value=config):
            assert main(HOST_ARGS) == 4

        assert smtp_factory.connections == []
        assert "TemplateNotFound" in capsys.readouterr().err

    def test_delivery_failure_returns_6(self, loaded_config):
        factory = FakeSMTPFactory(send_error=smtplib.SMTPDataError(554, b"rejected"))

        with patch("smtplib.SMTP", new=factory):
            assert main(HOST_ARGS) == 6

    def test_unexpected_error_returns_1(self, loaded_config, capsys):
        with patch("nagios_notify.main.build_service", side_effect=RuntimeError("boom")):
            assert main(HOST_ARGS) == 1

        assert "Fatal error: boom" in capsys.readouterr().err

    def test_config_file_end_to_end(self, tmp_path, smtp_factory):
        log_file = tmp_path / "log" / "notify.log"
        config_file = tmp_path / "config.yml"
        config_file.write_text(
            "smtp:\n"
            "  host: smtp.example.com\n"
            "  port: 587\n"
            "  from: nagios@example.com\n"
            "logging:\n"
            f"  file: {log_file}\n",
            encoding="utf-8",
        )

        assert main(HOST_ARGS + ["--config", str(config_file)]) == 0

        log_text = Path(log_file).read_text(encoding="utf-8")
        assert "mail.send.success" in log_text
        assert "host=example.com" in log_text

    def test_minimal_config_file_returns_zero(self, smtp_factory):
        config_file = Path(__file__).parent / "fixtures" / "minimal_config.yml"

        assert main(HOST_ARGS + ["--config", str(config_file)]) == 0

        assert len(smtp_factory.messages) == 1
        assert smtp_factory.connections[0].port == 465

    def test_minimal_config_dry_run_returns_zero(self, smtp_factory, capsys):
        config_file = Path(__file__).parent / "fixtures" / "minimal_config.yml"

        assert main(HOST_ARGS + ["--config", str(config_file), "--dry-run"]) == 0

        assert smtp_factory.connections == []
        assert "ホストに問題が発生" in capsys.readouterr().out

    def test_non_mapping_smtp_section_returns_3(self, tmp_path, smtp_factory, capsys):
        config_file = tmp_path / "config.yml"
        config_file.write_text("smtp: relay.example.com\n", encoding="utf-8")

        assert main(HOST_ARGS + ["--config", str(config_file)]) == 3

        assert smtp_factory.connections == []
        assert "Configuration Error" in capsys.readouterr().err

    def test_unwritable_log_file_returns_3(self, tmp_path, smtp_factory, capsys):
        blocker = tmp_path / "log"
        blocker.write_text("not a directory", encoding="utf-8")
        config_file = tmp_path / "config.yml"
        config_file.write_text(
            "smtp:\n"
            "  host: smtp.example.com\n"
            "  from: nagios@example.com\n"
            "logging:\n"
            f"  file: {blocker / 'notify.log'}\n",
            encoding="utf-8",
        )

        assert main(HOST_ARGS + ["--config", str(config_file)]) == 3

        assert smtp_factory.connections == []
        assert "Cannot open log file" in capsys.readouterr().err
