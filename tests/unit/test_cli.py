"""Tests for CLI commands using Click's CliRunner."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from warden.audit.logger import AUDIT_LOG_FILE, THREAT_LOG_FILE, VULNERABILITY_LOG_FILE
from warden.cli import main


def test_main_help():
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Warden" in result.output
    for command in ("scan", "pentest", "report", "stats"):
        assert command in result.output


def test_main_version():
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_pentest_help():
    runner = CliRunner()
    result = runner.invoke(main, ["pentest", "--help"])
    assert result.exit_code == 0
    assert "TARGET" in result.output
    assert "sql-injection" in result.output


class TestScanCommand:
    def test_clean_file(self, make_file, log_dir: Path):
        path = make_file("notes.txt", "hello world")
        runner = CliRunner()
        result = runner.invoke(main, ["--log-dir", str(log_dir), "scan", str(path)])

        assert result.exit_code == 0
        audit_text = (log_dir / AUDIT_LOG_FILE).read_text(encoding="utf-8")
        assert "[FILE_UPLOAD] [SAFE] notes.txt" in audit_text
        assert "[INFO] [FILE_UPLOAD] File accepted: notes.txt" in audit_text
        assert not (log_dir / THREAT_LOG_FILE).exists()

    def test_executable_is_blocked(self, make_file, log_dir: Path):
        path = make_file("setup.exe", b"MZ\x90\x00" + b"\x00" * 60)
        runner = CliRunner()
        result = runner.invoke(
            main, ["--log-dir", str(log_dir), "scan", "--user", "alice", str(path)]
        )

        assert result.exit_code == 1
        audit_text = (log_dir / AUDIT_LOG_FILE).read_text(encoding="utf-8")
        assert "[WARNING] [FILE_BLOCKED] File blocked: setup.exe (CRITICAL)" in audit_text
        threat_text = (log_dir / THREAT_LOG_FILE).read_text(encoding="utf-8")
        assert "[CRITICAL] [EXECUTABLE_DETECTED]" in threat_text

    def test_bracketed_content_is_printed_literally(self, make_file, log_dir: Path):
        odd = make_file("links.txt", "see http://bit.ly/[/x] now")
        clean = make_file("notes.txt", "hello world")
        runner = CliRunner()
        result = runner.invoke(
            main, ["--log-dir", str(log_dir), "scan", str(odd), str(clean)]
        )

        assert result.exception is None
        assert result.exit_code == 0
        audit_text = (log_dir / AUDIT_LOG_FILE).read_text(encoding="utf-8")
        assert "File accepted: links.txt" in audit_text
        assert "File accepted: notes.txt" in audit_text

    def test_missing_file_is_usage_error(self, log_dir: Path, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(
            main, ["--log-dir", str(log_dir), "scan", str(tmp_path / "gone.txt")]
        )
        assert result.exit_code == 2

    def test_max_size_from_env(self, make_file, log_dir: Path, monkeypatch):
        monkeypatch.setenv("WARDEN_MAX_FILE_SIZE", "4")
        path = make_file("notes.txt", "hello world")
        runner = CliRunner()
        result = runner.invoke(main, ["--log-dir", str(log_dir), "scan", str(path)])
        assert result.exit_code == 0
        threat_text = (log_dir / THREAT_LOG_FILE).read_text(encoding="utf-8")
        assert "[FILE_TOO_LARGE]" in threat_text


class TestPentestCommand:
    def test_secure_target(self, log_dir: Path):
        runner = CliRunner()
        result = runner.invoke(
            main, ["--log-dir", str(log_dir), "pentest", "--type", "file-upload", "photo.png"]
        )
        assert result.exit_code == 0
        vuln_text = (log_dir / VULNERABILITY_LOG_FILE).read_text(encoding="utf-8")
        assert "[FILE_UPLOAD] [SECURE] Vulnerabilities: 0" in vuln_text
        audit_text = (log_dir / AUDIT_LOG_FILE).read_text(encoding="utf-8")
        assert "[PENETRATION_TEST] Penetration test initiated: file-upload" in audit_text

    def test_vulnerable_target_exits_nonzero(self, log_dir: Path):
        runner = CliRunner()
        result = runner.invoke(
            main, ["--log-dir", str(log_dir), "pentest", "admin' OR '1'='1'--"]
        )
        assert result.exit_code == 1
        vuln_text = (log_dir / VULNERABILITY_LOG_FILE).read_text(encoding="utf-8")
        assert "[COMPREHENSIVE] [CRITICAL_VULNERABILITIES]" in vuln_text

    def test_target_from_stdin(self, log_dir: Path):
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--log-dir", str(log_dir), "pentest", "-t", "authentication", "-"],
            input="admin:admin\n",
        )
        assert result.exit_code == 1
        vuln_text = (log_dir / VULNERABILITY_LOG_FILE).read_text(encoding="utf-8")
        assert "[AUTHENTICATION] [HIGH_RISK] Vulnerabilities: 2" in vuln_text

    def test_empty_target(self, log_dir: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["--log-dir", str(log_dir), "pentest", "   "])
        assert result.exit_code == 2


class TestReportCommands:
    def test_stats_on_empty_logs(self, log_dir: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["--log-dir", str(log_dir), "stats"])
        assert result.exit_code == 0
        assert "Security Score: 100/100" in result.output
        assert "Status: SECURE" in result.output

    def test_report_after_scan(self, make_file, log_dir: Path):
        path = make_file("page.txt", "<script>alert(1)</script>")
        runner = CliRunner()
        runner.invoke(main, ["--log-dir", str(log_dir), "scan", str(path)])

        result = runner.invoke(main, ["--log-dir", str(log_dir), "report"])
        assert result.exit_code == 0
        assert "SECURITY AUDIT REPORT" in result.output
        assert "Total Security Events: 2" in result.output
        assert "Status: HIGH RISK - Urgent attention needed" in result.output
