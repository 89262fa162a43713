"""Detection tables for the file scanner — patterns, signatures, recommendations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from warden.severity import ThreatLevel


@dataclass(frozen=True)
class ContentPattern:
    """A content rule: one threat is emitted if the regex matches anywhere."""

    threat_type: str
    regex: re.Pattern[str]
    level: ThreatLevel
    description: str


CONTENT_PATTERNS: tuple[ContentPattern, ...] = (
    ContentPattern(
        threat_type="SQL_INJECTION",
        regex=re.compile(
            r"(union|select|insert|update|delete|drop|create|alter|exec|execute"
            r"|script|javascript|vbscript|onload|onerror|onclick)",
            re.IGNORECASE,
        ),
        level=ThreatLevel.HIGH,
        description="Potential SQL injection pattern detected in content",
    ),
    ContentPattern(
        threat_type="XSS_VULNERABILITY",
        regex=re.compile(
            r"(<script|</script|javascript:|vbscript:|onload=|onerror=|onclick="
            r"|<iframe|</iframe|alert\s*\(|document\.cookie)",
            re.IGNORECASE,
        ),
        level=ThreatLevel.HIGH,
        description="Potential XSS vulnerability detected in content",
    ),
    ContentPattern(
        threat_type="MALICIOUS_CODE",
        regex=re.compile(
            r"(eval\s*\(|system\s*\(|exec\s*\(|shell_exec|passthru"
            r"|file_get_contents|fopen|fwrite|base64_decode|gzinflate|str_rot13)",
            re.IGNORECASE,
        ),
        level=ThreatLevel.CRITICAL,
        description="Potential malicious code pattern detected",
    ),
    ContentPattern(
        threat_type="EMBEDDED_SCRIPT",
        regex=re.compile(r"<script|javascript:", re.IGNORECASE),
        level=ThreatLevel.MEDIUM,
        description="Embedded script detected in content",
    ),
)

URL_PATTERN = re.compile(r"https?://\S+", re.IGNORECASE)

SUSPICIOUS_URL_MARKERS: tuple[str, ...] = (
    "bit.ly",
    "tinyurl.com",
    "goo.gl",
    "t.co",
    "shortened",
    "malware",
    "virus",
    "phishing",
    "suspicious",
    "javascript:",
    "data:",
    "vbscript:",
)

SUSPICIOUS_EXTENSION_PATTERN = re.compile(
    r"\.(exe|bat|cmd|com|scr|pif|vbs|js|jar|war|sh|ps1|php|asp|jsp)$",
    re.IGNORECASE,
)

ALLOWED_EXTENSIONS: frozenset[str] = frozenset(
    {"txt", "pdf", "docx", "png", "jpg", "jpeg", "gif", "bmp", "tiff"}
)

# Magic numbers keyed by the upper-case hex of the leading bytes.
FILE_SIGNATURES: MappingProxyType[str, str] = MappingProxyType(
    {
        "4D5A": "PE Executable",
        "7F454C46": "ELF Executable",
        "CAFEBABE": "Java Class File",
        "504B0304": "ZIP/Office Document",
    }
)

EMBEDDED_EXECUTABLE_SUFFIXES: tuple[str, ...] = (".exe", ".bat", ".cmd", ".vbs")
EMBEDDED_SCRIPT_MARKERS: tuple[str, ...] = ("script", "macro")

# (markers, threat type, level, description); any marker fires the rule.
PDF_RULES: tuple[tuple[tuple[str, ...], str, ThreatLevel, str], ...] = (
    (
        ("/JavaScript", "/JS"),
        "PDF_JAVASCRIPT",
        ThreatLevel.MEDIUM,
        "PDF contains JavaScript which may be malicious",
    ),
    (
        ("/EmbeddedFile", "/FileAttachment"),
        "PDF_EMBEDDED_FILE",
        ThreatLevel.MEDIUM,
        "PDF contains embedded files which may be malicious",
    ),
    (
        ("/SubmitForm", "/ResetForm"),
        "PDF_FORM_ACTION",
        ThreatLevel.LOW,
        "PDF contains form actions which may be used for data exfiltration",
    ),
)

DEFAULT_RECOMMENDATION = "Review file content and apply appropriate security measures"

RECOMMENDATIONS: MappingProxyType[str, str] = MappingProxyType(
    {
        "SQL_INJECTION": "Sanitize input data and use parameterized queries",
        "XSS_VULNERABILITY": "Escape HTML/JavaScript content and validate user input",
        "MALICIOUS_CODE": "Block file processing and investigate source",
        "EXECUTABLE_DETECTED": "Reject file - executables are not allowed",
        "EMBEDDED_EXECUTABLE": "Extract and scan embedded files separately",
        "SUSPICIOUS_EXTENSION": "Verify file type and scan for malware",
        "FILE_TOO_LARGE": "Compress file or split into smaller chunks",
        "UNSUPPORTED_FORMAT": "Convert to supported format or reject",
        "PDF_JAVASCRIPT": "Disable JavaScript execution in PDF viewer",
        "PDF_EMBEDDED_FILE": "Extract and scan embedded files",
        "SUSPICIOUS_URL": "Verify URL safety before accessing",
        "EMBEDDED_SCRIPT": "Review script content for malicious code",
    }
)


def recommendation_for(threat_type: str) -> str:
    """Fixed remediation advice for a threat type."""
    return RECOMMENDATIONS.get(threat_type, DEFAULT_RECOMMENDATION)


def is_suspicious_url(url: str) -> bool:
    lowered = url.lower()
    return any(marker in lowered for marker in SUSPICIOUS_URL_MARKERS)
