"""Static payload-driven penetration tests."""

from warden.pentest.engine import PenetrationTestEngine
from warden.pentest.models import (
    PenetrationTestResult,
    PenetrationTestType,
    SecurityVulnerability,
)

__all__ = [
    "PenetrationTestEngine",
    "PenetrationTestResult",
    "PenetrationTestType",
    "SecurityVulnerability",
]
