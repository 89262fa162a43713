"""Audit data models — free-text security events and aggregate statistics."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from warden.severity import ThreatLevel, level_for_counts

# Worst non-empty bucket → coarse status string
_STATUS_BY_LEVEL = {
    None: "SECURE",
    ThreatLevel.LOW: "LOW_RISK",
    ThreatLevel.MEDIUM: "MEDIUM_RISK",
    ThreatLevel.HIGH: "HIGH_RISK",
    ThreatLevel.CRITICAL: "CRITICAL",
}

# Penalty points per finding, by severity
_SCORE_WEIGHTS = {
    ThreatLevel.CRITICAL: 25,
    ThreatLevel.HIGH: 15,
    ThreatLevel.MEDIUM: 10,
    ThreatLevel.LOW: 5,
}


@dataclass
class SecurityEvent:
    """A notable occurrence for the audit trail.

    ``level`` is a free-text label such as ``"INFO"`` or ``"ERROR"``; it is
    deliberately not a ThreatLevel.
    """

    event_type: str
    description: str
    level: str = "INFO"
    timestamp: float = field(default_factory=time.time)
    user_id: str | None = None
    session_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value

    def __str__(self) -> str:
        return f"[{self.level}] {self.event_type}: {self.description}"


@dataclass(frozen=True)
class SecurityStatistics:
    """Snapshot of what the audit logs currently contain."""

    total_events: int = 0
    total_threats: int = 0
    total_vulnerabilities: int = 0
    critical_threats: int = 0
    high_threats: int = 0
    medium_threats: int = 0
    low_threats: int = 0
    last_updated: float = field(default_factory=time.time, compare=False)

    def count(self, level: ThreatLevel) -> int:
        return {
            ThreatLevel.CRITICAL: self.critical_threats,
            ThreatLevel.HIGH: self.high_threats,
            ThreatLevel.MEDIUM: self.medium_threats,
            ThreatLevel.LOW: self.low_threats,
        }[level]

    @property
    def worst_level(self) -> ThreatLevel | None:
        return level_for_counts(
            self.critical_threats, self.high_threats, self.medium_threats, self.low_threats
        )

    @property
    def security_score(self) -> int:
        """100 minus a weighted severity penalty, never below 0."""
        penalty = sum(weight * self.count(level) for level, weight in _SCORE_WEIGHTS.items())
        return max(0, 100 - penalty)

    @property
    def security_status(self) -> str:
        return _STATUS_BY_LEVEL[self.worst_level]

    def summary(self) -> str:
        updated = datetime.fromtimestamp(self.last_updated).strftime("%Y-%m-%d %H:%M:%S")
        lines = [
            "Security Statistics Summary",
            "==========================",
            f"Total Events: {self.total_events}",
            f"Total Threats: {self.total_threats}",
            f"Total Vulnerabilities: {self.total_vulnerabilities}",
            f"Critical: {self.critical_threats}",
            f"High: {self.high_threats}",
            f"Medium: {self.medium_threats}",
            f"Low: {self.low_threats}",
            f"Security Score: {self.security_score}/100",
            f"Status: {self.security_status}",
            f"Last Updated: {updated}",
        ]
        return "\n".join(lines) + "\n"
