"""Warden — file threat scanning, payload-driven penetration tests, and audit logging."""

__version__ = "0.1.0"
