"""Penetration test data models — test types, vulnerabilities, results."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Any

from warden.errors import ResultFinalizedError
from warden.severity import (
    TEST_STATUS_TABLE,
    TestStatus,
    VulnerabilityLevel,
    derive_status,
)


class PenetrationTestType(enum.Enum):
    """Which battery of payload checks to run."""

    SQL_INJECTION = ("SQL Injection", "Test for SQL injection vulnerabilities")
    XSS = ("Cross-Site Scripting", "Test for XSS vulnerabilities")
    COMMAND_INJECTION = ("Command Injection", "Test for command injection vulnerabilities")
    FILE_UPLOAD = ("File Upload", "Test file upload security")
    AUTHENTICATION = ("Authentication", "Test authentication security")
    COMPREHENSIVE = ("Comprehensive", "Perform all security tests")

    def __init__(self, display_name: str, description: str) -> None:
        self.display_name = display_name
        self.description = description

    @classmethod
    def parse(cls, value: PenetrationTestType | str) -> PenetrationTestType:
        """Accept a member or its name in any case, e.g. ``"sql-injection"``."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Unknown penetration test type: {value!r}")
        key = value.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown penetration test type: {value!r}") from None


@dataclass(frozen=True)
class SecurityVulnerability:
    """A single vulnerability indicator raised by a payload check."""

    type: str
    description: str
    level: VulnerabilityLevel
    detected_at: float = field(default_factory=time.time)

    def __str__(self) -> str:
        return f"[{self.level.name}] {self.type}: {self.description}"


@dataclass
class PenetrationTestResult:
    """Outcome of one penetration test run against a target string."""

    target: Any
    test_type: PenetrationTestType | None
    test_timestamp: float = field(default_factory=time.time)
    vulnerabilities: list[SecurityVulnerability] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    test_status: TestStatus = TestStatus.UNKNOWN
    _finalized: bool = field(default=False, repr=False, compare=False)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add_vulnerability(
        self, vuln_type: str, description: str, level: VulnerabilityLevel
    ) -> SecurityVulnerability:
        if self._finalized:
            raise ResultFinalizedError("Penetration test result is finalized")
        vuln = SecurityVulnerability(type=vuln_type, description=description, level=level)
        self.vulnerabilities.append(vuln)
        return vuln

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value

    def finalize(self) -> TestStatus:
        if self._finalized:
            return self.test_status
        self.test_status = derive_status(
            (v.level for v in self.vulnerabilities), TEST_STATUS_TABLE
        )
        self.vulnerabilities = tuple(self.vulnerabilities)  # type: ignore[assignment]
        self._finalized = True
        return self.test_status

    def vulnerability_count(self, level: VulnerabilityLevel) -> int:
        return sum(1 for v in self.vulnerabilities if v.level == level)

    @property
    def is_secure(self) -> bool:
        return self.test_status.is_secure

    @property
    def requires_immediate_action(self) -> bool:
        return self.test_status.requires_immediate_action

    @property
    def test_type_name(self) -> str:
        return self.test_type.name if self.test_type else "UNKNOWN"

    def summary(self) -> str:
        lines = [
            "Penetration Test Results",
            "=======================",
            f"Target: {self.target}",
            f"Test Type: {self.test_type_name}",
            f"Test Status: {self.test_status.name}",
            f"Total Vulnerabilities: {len(self.vulnerabilities)}",
        ]
        for level in reversed(VulnerabilityLevel):
            lines.append(f"{level.display_name}: {self.vulnerability_count(level)}")
        if self.vulnerabilities:
            lines.append("")
            lines.append("Vulnerabilities Found:")
            for vuln in self.vulnerabilities:
                lines.append(f"- {vuln.type}: {vuln.description}")
        return "\n".join(lines) + "\n"
