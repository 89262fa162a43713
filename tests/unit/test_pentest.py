"""Tests for the static penetration test engine."""

from __future__ import annotations

import pytest

from warden.errors import ResultFinalizedError
from warden.pentest import engine as engine_mod
from warden.pentest.engine import PenetrationTestEngine
from warden.pentest.models import PenetrationTestResult, PenetrationTestType
from warden.severity import TestStatus, VulnerabilityLevel


@pytest.fixture
def engine() -> PenetrationTestEngine:
    return PenetrationTestEngine()


def _count(result: PenetrationTestResult, vuln_type: str) -> int:
    return sum(1 for v in result.vulnerabilities if v.type == vuln_type)


class TestSqlInjection:
    def test_plain_value_only_hits_union_payload(self, engine):
        result = engine.run("hello", PenetrationTestType.SQL_INJECTION)
        assert len(result.vulnerabilities) == 1
        vuln = result.vulnerabilities[0]
        assert vuln.type == "SQL_INJECTION"
        assert vuln.level is VulnerabilityLevel.CRITICAL
        assert "UNION SELECT" in vuln.description

    def test_error_signature_in_target(self, engine):
        result = engine.run("ORA-00933", PenetrationTestType.SQL_INJECTION)
        # every payload trips the error signature, one also trips the success one
        assert _count(result, "SQL_INJECTION") == 11
        assert result.test_status is TestStatus.CRITICAL_VULNERABILITIES
        assert result.metadata["sql_injection_hits"] == {
            "error_signature": 10,
            "success_signature": 1,
        }

    def test_comprehensive_on_login_bypass(self, engine):
        result = engine.run("admin' OR '1'='1'--")
        assert any(
            v.type == "SQL_INJECTION" and v.level is VulnerabilityLevel.CRITICAL
            for v in result.vulnerabilities
        )
        assert result.test_status is TestStatus.CRITICAL_VULNERABILITIES
        assert result.requires_immediate_action


class TestXss:
    def test_marker_and_execution_counts(self, engine):
        result = engine.run("name", PenetrationTestType.XSS)
        assert _count(result, "XSS") == 6
        assert _count(result, "XSS_EXECUTION") == 10
        assert result.vulnerability_count(VulnerabilityLevel.HIGH) == 6
        assert result.vulnerability_count(VulnerabilityLevel.CRITICAL) == 10


def test_command_injection(engine):
    result = engine.run("file.txt", PenetrationTestType.COMMAND_INJECTION)
    assert _count(result, "COMMAND_INJECTION") == 10
    assert result.metadata["payloads_evaluated"] == 10


class TestFileUpload:
    def test_clean_filename(self, engine):
        result = engine.run("holiday.png", PenetrationTestType.FILE_UPLOAD)
        assert result.vulnerabilities == ()
        assert result.test_status is TestStatus.SECURE
        assert result.is_secure

    def test_malicious_filename(self, engine):
        result = engine.run("uploads/shell.php", PenetrationTestType.FILE_UPLOAD)
        assert _count(result, "MALICIOUS_FILE_UPLOAD") == 1
        assert result.test_status is TestStatus.CRITICAL_VULNERABILITIES

    def test_path_traversal(self, engine):
        result = engine.run("../../../etc/passwd", PenetrationTestType.FILE_UPLOAD)
        assert _count(result, "PATH_TRAVERSAL") == 1
        assert result.test_status is TestStatus.HIGH_RISK


class TestAuthentication:
    def test_default_credentials(self, engine):
        result = engine.run("admin:admin", PenetrationTestType.AUTHENTICATION)
        assert _count(result, "WEAK_PASSWORD") == 1
        assert _count(result, "DEFAULT_CREDENTIALS") == 1
        assert result.test_status is TestStatus.HIGH_RISK

    def test_weak_password_only(self, engine):
        result = engine.run("hunter2 123456", PenetrationTestType.AUTHENTICATION)
        assert _count(result, "WEAK_PASSWORD") == 1
        assert result.test_status is TestStatus.MEDIUM_RISK
        assert not result.requires_immediate_action


class TestSupplementaryChecks:
    """Checks that only run as part of the comprehensive battery."""

    def test_information_disclosure(self):
        result = PenetrationTestResult(target="api_key=abc", test_type=None)
        engine_mod.check_information_disclosure("API_KEY=abc", result)
        # "key" and "api_key" both match
        assert _count(result, "INFORMATION_DISCLOSURE") == 2

    def test_session_exposure_reported_once(self):
        result = PenetrationTestResult(target="", test_type=None)
        engine_mod.check_session_management("jsessionid=1", result)
        assert _count(result, "SESSION_EXPOSURE") == 1

    def test_long_input(self):
        result = PenetrationTestResult(target="", test_type=None)
        engine_mod.check_input_validation("a" * 1001, result)
        assert _count(result, "INPUT_VALIDATION_BYPASS") == 1

    def test_special_characters_need_whole_sequence(self):
        result = PenetrationTestResult(target="", test_type=None)
        engine_mod.check_input_validation("<>", result)
        assert result.vulnerabilities == []
        engine_mod.check_input_validation("x<>\"'&y", result)
        assert _count(result, "SPECIAL_CHARACTERS") == 1

    def test_not_run_for_single_batteries(self, engine):
        result = engine.run("secret sessionid", PenetrationTestType.SQL_INJECTION)
        assert _count(result, "INFORMATION_DISCLOSURE") == 0
        assert _count(result, "SESSION_EXPOSURE") == 0


class TestEngine:
    def test_default_is_comprehensive(self, engine):
        result = engine.run("hello")
        assert result.test_type is PenetrationTestType.COMPREHENSIVE
        assert result.metadata["payloads_evaluated"] == 30

    def test_type_by_name(self, engine):
        result = engine.run("hello", "sql-injection")
        assert result.test_type is PenetrationTestType.SQL_INJECTION
        assert len(result.vulnerabilities) == 1

    def test_unknown_type(self, engine):
        result = engine.run("hello", "fuzzing")
        assert [v.type for v in result.vulnerabilities] == ["TEST_ERROR"]
        assert result.test_status is TestStatus.HIGH_RISK
        assert result.test_type_name == "UNKNOWN"

    def test_missing_target(self, engine):
        result = engine.run(None)
        assert [v.type for v in result.vulnerabilities] == ["TEST_ERROR"]
        assert result.vulnerabilities[0].level is VulnerabilityLevel.HIGH
        assert result.finalized

    def test_bad_payload_is_skipped(self, engine, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(
            engine_mod.p, "SQL_INJECTION_PAYLOADS", (None, "' UNION SELECT 1--")
        )
        result = engine.run("hello", PenetrationTestType.SQL_INJECTION)
        assert [v.type for v in result.vulnerabilities] == ["SQL_INJECTION"]

    def test_result_is_frozen(self, engine):
        result = engine.run("hello", PenetrationTestType.FILE_UPLOAD)
        with pytest.raises(ResultFinalizedError):
            result.add_vulnerability("LATE", "late", VulnerabilityLevel.CRITICAL)
        assert result.test_status is TestStatus.SECURE

    def test_summary(self, engine):
        result = engine.run("admin:admin", PenetrationTestType.AUTHENTICATION)
        summary = result.summary()
        assert "Test Type: AUTHENTICATION" in summary
        assert "Test Status: HIGH_RISK" in summary
        assert "Total Vulnerabilities: 2" in summary
        assert "- DEFAULT_CREDENTIALS: Default credentials detected: admin:admin" in summary


class TestTypeParsing:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("xss", PenetrationTestType.XSS),
            ("COMMAND_INJECTION", PenetrationTestType.COMMAND_INJECTION),
            ("file-upload", PenetrationTestType.FILE_UPLOAD),
            (PenetrationTestType.AUTHENTICATION, PenetrationTestType.AUTHENTICATION),
        ],
    )
    def test_parse(self, raw, expected):
        assert PenetrationTestType.parse(raw) is expected

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            PenetrationTestType.parse("nope")
        with pytest.raises(TypeError):
            PenetrationTestType.parse(3)
