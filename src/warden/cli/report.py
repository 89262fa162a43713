"""CLI commands: warden report / warden stats — summaries of the audit logs."""

from __future__ import annotations

import click

from warden.audit.logger import AuditLogger


@click.command()
@click.pass_context
def report(ctx: click.Context) -> None:
    """Print the security audit report."""
    audit: AuditLogger = ctx.obj["audit"]
    click.echo(audit.generate_report(), nl=False)


@click.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Print aggregate statistics and the security score."""
    audit: AuditLogger = ctx.obj["audit"]
    click.echo(audit.compute_statistics().summary(), nl=False)
