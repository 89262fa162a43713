"""Structural checks for container formats (DOCX archives, PDF documents)."""

from __future__ import annotations

import logging
import zipfile
from typing import BinaryIO

from warden.scanner.patterns import (
    EMBEDDED_EXECUTABLE_SUFFIXES,
    EMBEDDED_SCRIPT_MARKERS,
    PDF_RULES,
)
from warden.severity import ThreatLevel

logger = logging.getLogger(__name__)

# (threat type, description, level)
Detection = tuple[str, str, ThreatLevel]


def scan_docx(stream: BinaryIO) -> list[Detection]:
    """Flag executables and script/macro parts embedded in a DOCX archive."""
    detections: list[Detection] = []
    stream.seek(0)
    try:
        with zipfile.ZipFile(stream) as archive:
            names = archive.namelist()
    except (zipfile.BadZipFile, OSError) as e:
        logger.warning("Could not read DOCX structure: %s", e)
        return [
            (
                "DOCX_STRUCTURE_ERROR",
                f"Could not read document archive: {e}",
                ThreatLevel.LOW,
            )
        ]

    for name in names:
        entry = name.lower()
        if entry.endswith(EMBEDDED_EXECUTABLE_SUFFIXES):
            detections.append(
                (
                    "EMBEDDED_EXECUTABLE",
                    f"Embedded executable detected: {entry}",
                    ThreatLevel.CRITICAL,
                )
            )
        if any(marker in entry for marker in EMBEDDED_SCRIPT_MARKERS):
            detections.append(
                (
                    "EMBEDDED_SCRIPT",
                    f"Embedded script/macro detected: {entry}",
                    ThreatLevel.MEDIUM,
                )
            )
    return detections


def scan_pdf(content: str) -> list[Detection]:
    """Look for active-content name tokens in the decoded PDF window."""
    detections: list[Detection] = []
    for markers, threat_type, level, description in PDF_RULES:
        if any(marker in content for marker in markers):
            detections.append((threat_type, description, level))
    return detections


# Extension → structural analyzer. DOCX needs the archive, PDF the text window.
STREAM_ANALYZERS = {"docx": scan_docx}
TEXT_ANALYZERS = {"pdf": scan_pdf}
