"""CLI commands for ledger checks."""

from __future__ import annotations

import click

from yard.application.audit_ledger import AuditLedgerHandler
from yard.infrastructure.bootstrap import coordinator


@click.command("audit")
def ledger_audit() -> None:
    """Recompute reserved / in-use figures and report any drift."""
    drifts = AuditLedgerHandler(coordinator()).handle()

    if not drifts:
        click.echo("Ledger is consistent.")
        return

    click.echo(f"{'Structure':<24} {'Figure':<24} {'Recorded':>9} {'Expected':>9}")
    click.echo("-" * 69)
    for drift in drifts:
        click.echo(
            f"{drift.structure_name:<24} {drift.figure:<24} "
            f"{drift.recorded:>9} {drift.expected:>9}"
        )
    raise click.ClickException(f"{len(drifts)} inconsistencies found")
