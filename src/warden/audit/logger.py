"""Append-only audit logs and on-demand statistics.

Three flat log files live under one directory:

- ``security_audit.log``: security events and file upload scans
- ``threat_detection.log``: one line per detected threat
- ``vulnerability_scan.log``: one line per penetration test

Each file starts with a ``#`` header block written the first time it is
needed. Records are single ``[timestamp] [level] [type] description``
lines and are only ever appended. Statistics re-read the files from the
top on every call, so they survive restarts and never drift from disk.

Logging is best effort: I/O errors are reported through :mod:`logging`
and never raised to the caller.
"""

from __future__ import annotations

import logging
import os
import re
import threading
from datetime import datetime
from pathlib import Path

from warden.audit.models import SecurityEvent, SecurityStatistics
from warden.pentest.models import PenetrationTestResult
from warden.scanner.models import ScanResult, SecurityThreat
from warden.severity import ThreatLevel, VulnerabilityLevel

logger = logging.getLogger(__name__)

AUDIT_LOG_FILE = "security_audit.log"
THREAT_LOG_FILE = "threat_detection.log"
VULNERABILITY_LOG_FILE = "vulnerability_scan.log"

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_HEADERS = {
    AUDIT_LOG_FILE: (
        "Security Audit Log",
        "[TIMESTAMP] [LEVEL] [EVENT_TYPE] [DESCRIPTION]",
    ),
    THREAT_LOG_FILE: (
        "Threat Detection Log",
        "[TIMESTAMP] [THREAT_LEVEL] [THREAT_TYPE] [DESCRIPTION]",
    ),
    VULNERABILITY_LOG_FILE: (
        "Vulnerability Scan Log",
        "[TIMESTAMP] [TEST_TYPE] [STATUS] [VULNERABILITIES]",
    ),
}

_REPORT_STATUS = {
    None: "SECURE - No threats detected",
    ThreatLevel.LOW: "LOW RISK - Minor concerns",
    ThreatLevel.MEDIUM: "MEDIUM RISK - Monitor closely",
    ThreatLevel.HIGH: "HIGH RISK - Urgent attention needed",
    ThreatLevel.CRITICAL: "CRITICAL - Immediate action required",
}

_LINE_BREAKS = re.compile(r"[\r\n]+")

# Free text may not contain bracketed fields; statistics count "[LEVEL]" tags.
_FIELD_DELIMITERS = str.maketrans("[]", "()")

# One lock per log file, shared by every AuditLogger in the process.
_file_locks: dict[Path, threading.Lock] = {}
_file_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _file_locks_guard:
        lock = _file_locks.get(key)
        if lock is None:
            lock = _file_locks[key] = threading.Lock()
        return lock


def _fmt_time(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime(_TIMESTAMP_FORMAT)


def _one_line(text: object) -> str:
    return _LINE_BREAKS.sub(" ", str(text)).translate(_FIELD_DELIMITERS)


class AuditLogger:
    """Records events, threats, scans and tests; answers statistics queries."""

    def __init__(self, log_dir: str | Path) -> None:
        self.log_dir = Path(log_dir)
        self.audit_log_path = self.log_dir / AUDIT_LOG_FILE
        self.threat_log_path = self.log_dir / THREAT_LOG_FILE
        self.vulnerability_log_path = self.log_dir / VULNERABILITY_LOG_FILE

    # -- recording --------------------------------------------------------

    def record_event(self, event: SecurityEvent) -> None:
        line = "[{}] [{}] [{}] {}".format(
            _fmt_time(event.timestamp),
            _one_line(event.level),
            _one_line(event.event_type),
            _one_line(event.description),
        )
        if self._append(self.audit_log_path, line):
            logger.info("SECURITY EVENT: %s - %s", event.event_type, event.description)

    def record_threat(self, threat: SecurityThreat, context: str) -> None:
        line = "[{}] [{}] [{}] {} (Context: {})".format(
            _fmt_time(threat.detected_at),
            threat.level.name,
            _one_line(threat.type),
            _one_line(threat.description),
            _one_line(context),
        )
        self._append(self.threat_log_path, line)
        if threat.level in (ThreatLevel.CRITICAL, ThreatLevel.HIGH):
            logger.warning("THREAT DETECTED: %s - %s", threat.type, threat.description)

    def record_scan(self, result: ScanResult) -> None:
        """Log the scan outcome, then each of its threats with the filename as context."""
        line = "[{}] [FILE_UPLOAD] [{}] {} (Size: {} bytes, Hash: {})".format(
            _fmt_time(result.scan_timestamp),
            result.security_status.name,
            _one_line(result.filename),
            result.file_size,
            result.file_hash,
        )
        self._append(self.audit_log_path, line)
        for threat in result.threats:
            self.record_threat(threat, result.filename)
        if result.should_block:
            logger.warning(
                "FILE BLOCKED: %s - %s", result.filename, result.security_status.name
            )

    def record_test(self, result: PenetrationTestResult) -> None:
        line = (
            "[{}] [{}] [{}] Vulnerabilities: {} "
            "(Critical: {}, High: {}, Medium: {}, Low: {})"
        ).format(
            _fmt_time(result.test_timestamp),
            result.test_type_name,
            result.test_status.name,
            len(result.vulnerabilities),
            result.vulnerability_count(VulnerabilityLevel.CRITICAL),
            result.vulnerability_count(VulnerabilityLevel.HIGH),
            result.vulnerability_count(VulnerabilityLevel.MEDIUM),
            result.vulnerability_count(VulnerabilityLevel.LOW),
        )
        self._append(self.vulnerability_log_path, line)
        if result.requires_immediate_action:
            logger.warning(
                "VULNERABILITY FOUND: %s - %s",
                result.test_type_name,
                result.test_status.name,
            )

    # -- queries ----------------------------------------------------------

    def compute_statistics(self) -> SecurityStatistics:
        """Re-derive all counters by reading the logs from the beginning."""
        threat_lines = self._records(self.threat_log_path)
        severity = {
            level: sum(1 for line in threat_lines if f"[{level.name}]" in line)
            for level in ThreatLevel
        }
        return SecurityStatistics(
            total_events=len(self._records(self.audit_log_path)),
            total_threats=len(threat_lines),
            total_vulnerabilities=len(self._records(self.vulnerability_log_path)),
            critical_threats=severity[ThreatLevel.CRITICAL],
            high_threats=severity[ThreatLevel.HIGH],
            medium_threats=severity[ThreatLevel.MEDIUM],
            low_threats=severity[ThreatLevel.LOW],
        )

    def generate_report(self) -> str:
        stats = self.compute_statistics()
        generated = datetime.now().strftime(_TIMESTAMP_FORMAT)
        lines = [
            "SECURITY AUDIT REPORT",
            "====================",
            f"Generated: {generated}",
            "",
            "OVERALL STATISTICS",
            "------------------",
            f"Total Security Events: {stats.total_events}",
            f"Total Threats Detected: {stats.total_threats}",
            f"Total Vulnerabilities Found: {stats.total_vulnerabilities}",
            "",
            "THREAT BREAKDOWN",
            "----------------",
            f"Critical: {stats.critical_threats}",
            f"High: {stats.high_threats}",
            f"Medium: {stats.medium_threats}",
            f"Low: {stats.low_threats}",
            "",
            "SECURITY STATUS",
            "---------------",
            f"Status: {_REPORT_STATUS[stats.worst_level]}",
        ]
        return "\n".join(lines) + "\n"

    # -- file handling ----------------------------------------------------

    def _append(self, path: Path, line: str) -> bool:
        """Append one record under the file's lock. Returns False on I/O failure."""
        try:
            with _lock_for(path):
                self._ensure_initialized(path)
                with path.open("a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except OSError as e:
            logger.error("Failed to write audit record to %s: %s", path, e)
            return False
        return True

    def _ensure_initialized(self, path: Path) -> None:
        if path.exists():
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        title, fmt = _HEADERS[path.name]
        header = (
            f"# {title}\n"
            f"# Started: {datetime.now().strftime(_TIMESTAMP_FORMAT)}\n"
            f"# Format: {fmt}\n\n"
        )
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL | os.O_APPEND)
        except FileExistsError:
            # Another process created it first; its header stands.
            return
        with os.fdopen(fd, "a", encoding="utf-8") as f:
            f.write(header)

    def _records(self, path: Path) -> list[str]:
        """Non-comment, non-blank lines of a log; empty if it cannot be read."""
        if not path.exists():
            return []
        try:
            with path.open(encoding="utf-8", errors="replace") as f:
                return [
                    line
                    for line in (raw.rstrip("\n") for raw in f)
                    if line.strip() and not line.startswith("#")
                ]
        except OSError as e:
            logger.warning("Failed to read %s for statistics: %s", path, e)
            return []
