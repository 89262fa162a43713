"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from warden import __version__
from warden.audit.logger import AuditLogger
from warden.config import WardenConfig


@click.group()
@click.version_option(version=__version__, prog_name="warden")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML config file.",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    help="Directory holding the audit logs.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(
    ctx: click.Context,
    config_file: str | None,
    log_dir: str | None,
    verbose: bool,
) -> None:
    """Warden — file threat scanning, penetration tests, and security audit logs."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = WardenConfig.load(config_file)
    if log_dir:
        config.log_dir = Path(log_dir)
    config.verbose = verbose

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["audit"] = AuditLogger(config.log_dir)


def _register_commands() -> None:
    from warden.cli.pentest import pentest  # noqa: F811
    from warden.cli.report import report, stats  # noqa: F811
    from warden.cli.scan import scan  # noqa: F811

    main.add_command(scan)
    main.add_command(pentest)
    main.add_command(report)
    main.add_command(stats)


_register_commands()
