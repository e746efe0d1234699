"""
shellstrap — CLI entrypoint.

Usage:
    shellstrap
    shellstrap --config ~/dotfiles/shellstrap.yml --verbose
    python -m shellstrap.main --json
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from shellstrap import __version__
from shellstrap.core.models.outcome import Outcome, RunResult
from shellstrap.core.observability.logging_config import resolve_level, setup_logging

_ICONS = {
    Outcome.INSTALLED: ("✓", "green"),
    Outcome.APPLIED: ("✓", "green"),
    Outcome.SWITCHED: ("✓", "green"),
    Outcome.ALREADY_PRESENT: ("•", "white"),
    Outcome.FAILED_NON_FATAL: ("⚠", "yellow"),
    Outcome.FAILED_FATAL: ("✗", "red"),
}


@click.command()
@click.version_option(version=__version__, prog_name="shellstrap")
@click.option("--verbose", "-v", is_flag=True, help="Show per-step progress.")
@click.option("--quiet", "-q", is_flag=True, help="Only report errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to shellstrap.yml (default: $SHELLSTRAP_CONFIG or ~/.config/shellstrap/).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the run result as JSON.")
@click.option("--no-network-check", is_flag=True, help="Skip the connectivity probe.")
@click.option("--no-shell-switch", is_flag=True, help="Leave the login shell unchanged.")
def cli(
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    as_json: bool,
    no_network_check: bool,
    no_shell_switch: bool,
) -> None:
    """Install zsh, oh-my-zsh and plugins, and configure ~/.zshrc.

    Every step is idempotent: running shellstrap again only does
    whatever is still missing.
    """
    from shellstrap.core.config.loader import ConfigError, build_context
    from shellstrap.core.use_cases.bootstrap import run_bootstrap

    # ── Logging setup (once, at process start) ──────────────────
    log_file = os.environ.get("SHELLSTRAP_LOG_FILE")
    try:
        setup_logging(
            level=resolve_level(debug, verbose, quiet or as_json, env=os.environ),
            log_file=log_file,
            log_file_level=os.environ.get("SHELLSTRAP_LOG_FILE_LEVEL"),
        )
    except OSError as e:
        click.secho(f"❌ Cannot open log file {log_file}: {e.strerror or e}", fg="red", err=True)
        sys.exit(1)

    overrides: dict[str, bool] = {}
    if no_network_check:
        overrides["check_network"] = False
    if no_shell_switch:
        overrides["switch_shell"] = False

    try:
        context = build_context(
            config_path=Path(config_path).expanduser() if config_path else None,
            **overrides,
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    result = run_bootstrap(context)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    _print_summary(result, quiet=quiet)
    sys.exit(result.exit_code)


def _print_summary(result: RunResult, quiet: bool) -> None:
    if not quiet:
        click.echo()
        click.secho("🐚 shellstrap", fg="cyan", bold=True)
        if result.package_manager:
            click.echo(f"   Package manager: {result.package_manager}")
        click.echo()
        for name, step in result.steps.items():
            icon, color = _ICONS[step.outcome]
            click.secho(f"   {icon} {name}", fg=color, nl=False)
            click.echo(f"  {step.outcome.value}")
        if result.backup_path:
            click.echo()
            click.secho(f"   💾 Backup: {result.backup_path}", fg="cyan")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for step in result.warnings:
            click.echo(f"   • {step.step}: {step.message}")
            if step.remediation:
                click.echo(f"     run: {step.remediation}")

    click.echo()
    if not result.ok:
        click.secho(f"❌ Bootstrap halted: {result.halted}", fg="red", bold=True)
        click.echo()
        return

    click.secho("✅ Bootstrap complete", fg="green", bold=True)
    if not quiet:
        click.echo("   To start using the new environment:")
        click.echo("     1. run 'zsh' to open a zsh session")
        click.echo("     2. or log out and back in to use zsh as your login shell")
    click.echo()


if __name__ == "__main__":
    cli()
