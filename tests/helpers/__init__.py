"""Test doubles for the mail transport."""

from .fake_mail import FakeSMTP, FakeSMTPFactory, RecordingMailer

__all__ = ["FakeSMTP", "FakeSMTPFactory", "RecordingMailer"]
