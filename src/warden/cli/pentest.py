"""CLI command: warden pentest <target> — static penetration test of an input value."""

from __future__ import annotations

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from warden.audit.logger import AuditLogger
from warden.audit.models import SecurityEvent
from warden.pentest.engine import PenetrationTestEngine
from warden.pentest.models import PenetrationTestResult, PenetrationTestType
from warden.severity import VulnerabilityLevel

console = Console(stderr=True)

_SEVERITY_COLORS = {
    VulnerabilityLevel.LOW: "blue",
    VulnerabilityLevel.MEDIUM: "yellow",
    VulnerabilityLevel.HIGH: "red",
    VulnerabilityLevel.CRITICAL: "bold red",
}

_TYPE_CHOICES = [t.name.lower().replace("_", "-") for t in PenetrationTestType]


@click.command()
@click.argument("target")
@click.option(
    "--type",
    "-t",
    "test_type",
    type=click.Choice(_TYPE_CHOICES),
    default="comprehensive",
    show_default=True,
    help="Which battery of checks to run.",
)
@click.pass_context
def pentest(ctx: click.Context, target: str, test_type: str) -> None:
    """Probe TARGET (a field, URL, or path value) with injection payloads.

    Pass "-" to read the target from stdin.
    """
    audit: AuditLogger = ctx.obj["audit"]

    if target == "-":
        target = click.get_text_stream("stdin").read()
        if target.endswith("\n"):
            target = target[:-1]

    if not target.strip():
        raise click.UsageError("Target must not be empty.")

    audit.record_event(
        SecurityEvent(
            "PENETRATION_TEST",
            f"Penetration test initiated: {test_type}",
            "INFO",
        )
    )

    result = PenetrationTestEngine().run(target, test_type)
    audit.record_test(result)
    _print_result(result)

    if result.requires_immediate_action:
        sys.exit(1)


def _print_result(result: PenetrationTestResult) -> None:
    status = result.test_status
    color = "green" if result.is_secure else ("red" if result.requires_immediate_action else "yellow")
    console.print(
        f"[bold]Warden[/bold] {result.test_type_name} test: "
        f"[{color}]{status.display_name}[/{color}] "
        f"({len(result.vulnerabilities)} finding(s))"
    )

    if not result.vulnerabilities:
        return

    table = Table(title="Vulnerabilities", show_lines=False)
    table.add_column("Level", style="bold", width=10)
    table.add_column("Type", style="cyan")
    table.add_column("Description", max_width=70)

    for vuln in sorted(result.vulnerabilities, key=lambda v: -v.level.priority):
        level_color = _SEVERITY_COLORS.get(vuln.level, "white")
        table.add_row(
            f"[{level_color}]{vuln.level.name}[/{level_color}]",
            escape(vuln.type),
            escape(vuln.description),
        )

    console.print(table)
