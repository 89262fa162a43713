"""Severity levels, derived statuses, and the shared worst-case precedence rule."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar


class _Severity(enum.Enum):
    """Ordinal severity. Priority is for ranking only."""

    def __init__(self, display_name: str, description: str, priority: int) -> None:
        self.display_name = display_name
        self.description = description
        self.priority = priority

    @property
    def color_code(self) -> str:
        return _SEVERITY_COLORS[self.priority]


class ThreatLevel(_Severity):
    """Severity of a threat found in a scanned file."""

    LOW = ("Low", "Minor security concern", 1)
    MEDIUM = ("Medium", "Moderate security risk", 2)
    HIGH = ("High", "Significant security risk", 3)
    CRITICAL = ("Critical", "Immediate security threat", 4)


class VulnerabilityLevel(_Severity):
    """Severity of a vulnerability found by a penetration test."""

    LOW = ("Low", "Minor vulnerability", 1)
    MEDIUM = ("Medium", "Moderate vulnerability", 2)
    HIGH = ("High", "Serious vulnerability", 3)
    CRITICAL = ("Critical", "Exploitable vulnerability", 4)


_SEVERITY_COLORS = {
    1: "#FFA500",
    2: "#FF8C00",
    3: "#FF4500",
    4: "#FF0000",
}


class SecurityStatus(enum.Enum):
    """Overall status of a file scan."""

    SAFE = ("Safe", "No security threats detected", "#00FF00")
    LOW_RISK = ("Low Risk", "Minor security concerns detected", "#FFA500")
    MEDIUM_RISK = ("Medium Risk", "Moderate security risks detected", "#FF8C00")
    HIGH_RISK = ("High Risk", "Significant security risks detected", "#FF4500")
    CRITICAL = ("Critical", "Immediate security threats detected", "#FF0000")
    UNKNOWN = ("Unknown", "Security status not determined", "#808080")

    def __init__(self, display_name: str, description: str, color_code: str) -> None:
        self.display_name = display_name
        self.description = description
        self.color_code = color_code

    @property
    def is_processable(self) -> bool:
        """Whether the file is safe enough to hand to downstream processing."""
        return self in (SecurityStatus.SAFE, SecurityStatus.LOW_RISK)

    @property
    def should_block(self) -> bool:
        return self in (SecurityStatus.HIGH_RISK, SecurityStatus.CRITICAL)


class TestStatus(enum.Enum):
    """Overall status of a penetration test."""

    __test__ = False  # not a pytest test class

    SECURE = ("Secure", "No vulnerabilities found", "#00FF00")
    LOW_RISK = ("Low Risk", "Low severity vulnerabilities found", "#FFA500")
    MEDIUM_RISK = ("Medium Risk", "Medium severity vulnerabilities found", "#FF8C00")
    HIGH_RISK = ("High Risk", "High severity vulnerabilities found", "#FF4500")
    CRITICAL_VULNERABILITIES = ("Critical", "Critical vulnerabilities found", "#FF0000")
    UNKNOWN = ("Unknown", "Test status not determined", "#808080")

    def __init__(self, display_name: str, description: str, color_code: str) -> None:
        self.display_name = display_name
        self.description = description
        self.color_code = color_code

    @property
    def is_secure(self) -> bool:
        return self in (TestStatus.SECURE, TestStatus.LOW_RISK)

    @property
    def requires_immediate_action(self) -> bool:
        return self in (TestStatus.HIGH_RISK, TestStatus.CRITICAL_VULNERABILITIES)


S = TypeVar("S")


@dataclass(frozen=True)
class StatusTable(Generic[S]):
    """Maps a worst-case severity priority (1-4) to a status value."""

    by_priority: Mapping[int, S]
    all_clear: S

    def lookup(self, level: _Severity | None) -> S:
        if level is None:
            return self.all_clear
        return self.by_priority[level.priority]


SCAN_STATUS_TABLE: StatusTable[SecurityStatus] = StatusTable(
    by_priority={
        4: SecurityStatus.CRITICAL,
        3: SecurityStatus.HIGH_RISK,
        2: SecurityStatus.MEDIUM_RISK,
        1: SecurityStatus.LOW_RISK,
    },
    all_clear=SecurityStatus.SAFE,
)

TEST_STATUS_TABLE: StatusTable[TestStatus] = StatusTable(
    by_priority={
        4: TestStatus.CRITICAL_VULNERABILITIES,
        3: TestStatus.HIGH_RISK,
        2: TestStatus.MEDIUM_RISK,
        1: TestStatus.LOW_RISK,
    },
    all_clear=TestStatus.SECURE,
)


def worst_level(levels: Iterable[_Severity]) -> _Severity | None:
    """Return the highest-priority level, or None when there are none."""
    worst: _Severity | None = None
    for level in levels:
        if worst is None or level.priority > worst.priority:
            worst = level
    return worst


def derive_status(levels: Iterable[_Severity], table: StatusTable[S]) -> S:
    """Collapse a set of finding severities into a status by worst-case precedence.

    CRITICAL > HIGH > MEDIUM > LOW > none. A single CRITICAL finding
    dominates any number of lesser ones.
    """
    return table.lookup(worst_level(levels))


def level_for_counts(
    critical: int, high: int, medium: int, low: int
) -> ThreatLevel | None:
    """Worst non-empty severity bucket for a set of aggregate counters."""
    levels = []
    if critical > 0:
        levels.append(ThreatLevel.CRITICAL)
    if high > 0:
        levels.append(ThreatLevel.HIGH)
    if medium > 0:
        levels.append(ThreatLevel.MEDIUM)
    if low > 0:
        levels.append(ThreatLevel.LOW)
    return worst_level(levels)
