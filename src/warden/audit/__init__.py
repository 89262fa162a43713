"""Append-only audit logs, statistics and reports."""

from warden.audit.logger import AuditLogger
from warden.audit.models import SecurityEvent, SecurityStatistics

__all__ = ["AuditLogger", "SecurityEvent", "SecurityStatistics"]
