"""Nagios Notify - email notifications for monitoring alerts."""

__version__ = "0.1.0"
