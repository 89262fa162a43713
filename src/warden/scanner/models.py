"""Scanner data models — threats and scan results."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from warden.errors import ResultFinalizedError
from warden.scanner.patterns import recommendation_for
from warden.severity import (
    SCAN_STATUS_TABLE,
    SecurityStatus,
    ThreatLevel,
    derive_status,
)


@dataclass(frozen=True)
class SecurityThreat:
    """A single threat detected while scanning a file."""

    type: str
    description: str
    level: ThreatLevel
    detected_at: float = field(default_factory=time.time)
    recommendation: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "recommendation", recommendation_for(self.type))

    def __str__(self) -> str:
        return f"[{self.level.name}] {self.type}: {self.description}"


@dataclass
class ScanResult:
    """Outcome of scanning one file.

    Threats accumulate while the scan runs. ``finalize()`` derives
    ``security_status`` exactly once; after that the threat list is frozen
    and further ``add_threat`` calls raise ``ResultFinalizedError``.
    """

    filename: str
    file_size: int = 0
    file_hash: str = ""
    scan_timestamp: float = field(default_factory=time.time)
    threats: list[SecurityThreat] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    security_status: SecurityStatus = SecurityStatus.UNKNOWN
    _finalized: bool = field(default=False, repr=False, compare=False)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add_threat(
        self, threat_type: str, description: str, level: ThreatLevel
    ) -> SecurityThreat:
        if self._finalized:
            raise ResultFinalizedError(
                f"Scan result for {self.filename!r} is finalized"
            )
        threat = SecurityThreat(type=threat_type, description=description, level=level)
        self.threats.append(threat)
        return threat

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value

    def finalize(self) -> SecurityStatus:
        """Derive the status from the threats gathered so far and freeze them."""
        if self._finalized:
            return self.security_status
        self.security_status = derive_status(
            (t.level for t in self.threats), SCAN_STATUS_TABLE
        )
        self.threats = tuple(self.threats)  # type: ignore[assignment]
        self._finalized = True
        return self.security_status

    def threat_count(self, level: ThreatLevel) -> int:
        return sum(1 for t in self.threats if t.level == level)

    @property
    def is_safe(self) -> bool:
        return self.security_status.is_processable

    @property
    def should_block(self) -> bool:
        return self.security_status.should_block

    def summary(self) -> str:
        lines = [
            f"Security Status: {self.security_status.name}",
            f"Total Threats: {len(self.threats)}",
        ]
        for level in reversed(ThreatLevel):
            lines.append(f"{level.display_name}: {self.threat_count(level)}")
        if self.threats:
            lines.append("")
            lines.append("Threats Detected:")
            for threat in self.threats:
                lines.append(f"- {threat.type}: {threat.description}")
        return "\n".join(lines) + "\n"
