"""File security scanner: type, signature, content and container checks."""

from warden.scanner.engine import FileScanner
from warden.scanner.models import ScanResult, SecurityThreat

__all__ = ["FileScanner", "ScanResult", "SecurityThreat"]
