"""CLI command: warden scan <file>... — security scan of uploaded files."""

from __future__ import annotations

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from warden.audit.logger import AuditLogger
from warden.audit.models import SecurityEvent
from warden.config import WardenConfig
from warden.scanner.engine import FileScanner
from warden.scanner.models import ScanResult
from warden.severity import ThreatLevel

console = Console(stderr=True)

SEVERITY_COLORS = {
    ThreatLevel.LOW: "blue",
    ThreatLevel.MEDIUM: "yellow",
    ThreatLevel.HIGH: "red",
    ThreatLevel.CRITICAL: "bold red",
}


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--user", "user_id", default=None, help="User to attribute the upload to.")
@click.pass_context
def scan(ctx: click.Context, files: tuple[str, ...], user_id: str | None) -> None:
    """Scan files for dangerous types, signatures, and embedded content."""
    config: WardenConfig = ctx.obj["config"]
    audit: AuditLogger = ctx.obj["audit"]

    scanner = FileScanner(
        max_file_size=config.max_file_size,
        content_read_limit=config.content_read_limit,
        allowed_extensions=config.allowed_extensions,
    )

    blocked = 0
    for path in files:
        result = scanner.scan_path(path)
        audit.record_scan(result)
        if result.should_block:
            blocked += 1
            audit.record_event(
                SecurityEvent(
                    "FILE_BLOCKED",
                    f"File blocked: {result.filename} ({result.security_status.name})",
                    "WARNING",
                    user_id=user_id,
                )
            )
        else:
            audit.record_event(
                SecurityEvent(
                    "FILE_UPLOAD",
                    f"File accepted: {result.filename}",
                    "INFO",
                    user_id=user_id,
                )
            )
        _print_result(result)

    if blocked:
        console.print(f"\n[red]{blocked} file(s) blocked[/red]")
        sys.exit(1)


def _print_result(result: ScanResult) -> None:
    status = result.security_status
    color = "green" if result.is_safe else ("red" if result.should_block else "yellow")
    console.print(
        f"\n[bold]{escape(result.filename)}[/bold]  "
        f"[{color}]{status.display_name}[/{color}]  "
        f"[dim]{result.file_size} bytes  sha256 {result.file_hash[:16]}[/dim]"
    )

    if not result.threats:
        console.print("[green]No threats detected.[/green]")
        return

    table = Table(show_lines=False)
    table.add_column("Level", style="bold", width=10)
    table.add_column("Type", style="cyan")
    table.add_column("Description", max_width=60)
    table.add_column("Recommendation", max_width=50)

    for threat in sorted(result.threats, key=lambda t: -t.level.priority):
        level_color = SEVERITY_COLORS.get(threat.level, "white")
        table.add_row(
            f"[{level_color}]{threat.level.name}[/{level_color}]",
            escape(threat.type),
            escape(threat.description),
            escape(threat.recommendation),
        )

    console.print(table)
