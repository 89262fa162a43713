"""Scan engine — runs the staged security pipeline over one uploaded file."""

from __future__ import annotations

import hashlib
import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import BinaryIO

from warden.scanner.containers import STREAM_ANALYZERS, TEXT_ANALYZERS
from warden.scanner.models import ScanResult
from warden.scanner.patterns import (
    ALLOWED_EXTENSIONS,
    CONTENT_PATTERNS,
    FILE_SIGNATURES,
    SUSPICIOUS_EXTENSION_PATTERN,
    URL_PATTERN,
    is_suspicious_url,
)
from warden.severity import ThreatLevel

logger = logging.getLogger(__name__)

# Policy limit on accepted uploads (50 MiB)
MAX_FILE_SIZE = 50 * 1024 * 1024

# Only this much of the file is decoded for pattern matching (1 MiB)
CONTENT_READ_LIMIT = 1024 * 1024

_HEADER_SIZE = 8
_HASH_CHUNK_SIZE = 8192

HASH_ERROR = "HASH_ERROR"


class FileScanner:
    """Inspects an uploaded file and reports the threats it carries.

    ``scan`` never raises for expected conditions: I/O problems and
    malformed content become low/high severity ``*_ERROR`` threats so the
    caller always gets a finalized ``ScanResult``.
    """

    def __init__(
        self,
        max_file_size: int = MAX_FILE_SIZE,
        content_read_limit: int = CONTENT_READ_LIMIT,
        allowed_extensions: Iterable[str] | None = None,
    ) -> None:
        self._max_file_size = max_file_size
        self._content_read_limit = content_read_limit
        self._allowed = (
            frozenset(e.lower().lstrip(".") for e in allowed_extensions)
            if allowed_extensions is not None
            else ALLOWED_EXTENSIONS
        )

    def scan_path(self, path: str | Path) -> ScanResult:
        """Open a file on disk and scan it."""
        path = Path(path)
        try:
            with path.open("rb") as stream:
                return self.scan(stream, path.name, path.stat().st_size)
        except OSError as e:
            logger.error("Could not open %s for scanning: %s", path, e)
            result = ScanResult(filename=path.name)
            result.add_threat(
                "SCAN_ERROR", f"Security scan failed: {e}", ThreatLevel.HIGH
            )
            result.file_hash = HASH_ERROR
            result.finalize()
            return result

    def scan(
        self,
        stream: BinaryIO,
        filename: str,
        size: int | None = None,
    ) -> ScanResult:
        """Scan a readable, seekable binary stream."""
        result = ScanResult(filename=str(filename))

        try:
            if stream is None:
                raise ValueError("no file stream supplied")
            if not isinstance(filename, str):
                raise TypeError(f"filename must be a string, not {type(filename).__name__}")
            result.file_size = size if size is not None else _stream_size(stream)
        except Exception as e:
            logger.exception("Error during security scan of %r", filename)
            result.add_threat(
                "SCAN_ERROR", f"Security scan failed: {e}", ThreatLevel.HIGH
            )
            result.file_hash = HASH_ERROR
            result.finalize()
            return result

        extension = _extension(filename)
        result.add_metadata("extension", extension)

        self._run_stage("type validation", result, self._validate_type, filename, extension)
        self._run_stage("signature validation", result, self._validate_signature, stream)
        content = self._run_stage("content analysis", result, self._analyze_content, stream)
        self._run_stage(
            "container analysis", result, self._analyze_container, stream, extension, content
        )
        result.file_hash = self._run_stage("hashing", result, self._hash, stream) or HASH_ERROR

        status = result.finalize()
        logger.info(
            "Scanned %s: %s (%d threat(s))", filename, status.name, len(result.threats)
        )
        return result

    def _run_stage(self, stage: str, result: ScanResult, func: Callable, *args):
        """Run one pipeline stage; an unexpected failure does not stop later stages."""
        try:
            return func(result, *args)
        except Exception as e:
            logger.exception("Security scan stage '%s' failed for %s", stage, result.filename)
            result.add_threat(
                "SCAN_ERROR",
                f"Security scan stage '{stage}' failed: {e}",
                ThreatLevel.HIGH,
            )
            return None

    def _validate_type(self, result: ScanResult, filename: str, extension: str) -> None:
        if SUSPICIOUS_EXTENSION_PATTERN.search(filename.lower()):
            result.add_threat(
                "SUSPICIOUS_EXTENSION",
                f"File has potentially dangerous extension: {extension}",
                ThreatLevel.HIGH,
            )

        if result.file_size > self._max_file_size:
            result.add_threat(
                "FILE_TOO_LARGE",
                "File size exceeds maximum allowed size: "
                f"{result.file_size // 1024 // 1024}MB",
                ThreatLevel.MEDIUM,
            )

        if extension not in self._allowed:
            result.add_threat(
                "UNSUPPORTED_FORMAT",
                f"File format not supported: {extension}",
                ThreatLevel.MEDIUM,
            )

    def _validate_signature(self, result: ScanResult, stream: BinaryIO) -> None:
        try:
            stream.seek(0)
            header = stream.read(_HEADER_SIZE)
        except OSError as e:
            result.add_threat(
                "SIGNATURE_SCAN_ERROR",
                f"Could not read file signature: {e}",
                ThreatLevel.LOW,
            )
            return

        if len(header) < 4:
            return

        signature = header[:4].hex().upper()
        result.add_metadata("signature", signature)
        for magic, label in FILE_SIGNATURES.items():
            if not signature.startswith(magic):
                continue
            if "Executable" in label:
                result.add_threat(
                    "EXECUTABLE_DETECTED",
                    f"File appears to be an executable: {label}",
                    ThreatLevel.CRITICAL,
                )
            else:
                result.add_threat(
                    "SUSPICIOUS_SIGNATURE",
                    f"File has suspicious signature: {label}",
                    ThreatLevel.MEDIUM,
                )

    def _hash(self, result: ScanResult, stream: BinaryIO) -> str:
        return _hash_stream(stream)

    def _analyze_content(self, result: ScanResult, stream: BinaryIO) -> str | None:
        try:
            stream.seek(0)
            raw = stream.read(self._content_read_limit)
        except OSError as e:
            result.add_threat(
                "CONTENT_ANALYSIS_ERROR",
                f"Could not analyze file content: {e}",
                ThreatLevel.LOW,
            )
            return None

        result.add_metadata("content_bytes_inspected", len(raw))
        content = raw.decode("utf-8", errors="replace")

        for pattern in CONTENT_PATTERNS:
            if pattern.regex.search(content):
                result.add_threat(pattern.threat_type, pattern.description, pattern.level)

        for match in URL_PATTERN.finditer(content):
            url = match.group(0)
            if is_suspicious_url(url):
                result.add_threat(
                    "SUSPICIOUS_URL",
                    f"Suspicious URL detected: {url}",
                    ThreatLevel.MEDIUM,
                )

        return content

    def _analyze_container(
        self,
        result: ScanResult,
        stream: BinaryIO,
        extension: str,
        content: str | None,
    ) -> None:
        detections = []
        stream_analyzer = STREAM_ANALYZERS.get(extension)
        if stream_analyzer:
            detections.extend(stream_analyzer(stream))

        text_analyzer = TEXT_ANALYZERS.get(extension)
        if text_analyzer and content is not None:
            detections.extend(text_analyzer(content))

        for threat_type, description, level in detections:
            result.add_threat(threat_type, description, level)


def _extension(filename: str) -> str:
    """Lowercased text after the last dot; empty for dotfiles or a trailing dot."""
    name = os.path.basename(filename).lower()
    dot = name.rfind(".")
    if 0 < dot < len(name) - 1:
        return name[dot + 1 :]
    return ""


def _stream_size(stream: BinaryIO) -> int:
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def _hash_stream(stream: BinaryIO) -> str:
    """SHA-256 of the whole stream, read in fixed-size chunks."""
    digest = hashlib.sha256()
    try:
        stream.seek(0)
        for chunk in iter(lambda: stream.read(_HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    except (OSError, ValueError) as e:
        logger.warning("Error calculating file hash: %s", e)
        return HASH_ERROR
    return digest.hexdigest()
