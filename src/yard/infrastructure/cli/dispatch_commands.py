"""CLI commands for the Dispatch aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from yard.application.create_dispatch import CreateDispatchHandler
from yard.application.delete_dispatch import DeleteDispatchHandler
from yard.application.dto import CarrierSpec, DispatchItemSpec
from yard.application.list_dispatches import DispatchFilters, ListDispatchesHandler
from yard.application.update_dispatch import UpdateDispatchHandler
from yard.domain.exceptions import DomainException
from yard.infrastructure.bootstrap import coordinator


def _parse_items(raw: str) -> list[DispatchItemSpec]:
    """Parse '12:3,13:5' (line ID : quantity) into DispatchItemSpec list."""
    specs: list[DispatchItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'LineID:Quantity'."
            )
        line_str, qty_str = pair.split(":", 1)
        try:
            line_id = int(line_str)
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid item '{pair}'. Line ID and quantity must be integers."
            )
        specs.append(DispatchItemSpec(line_id=line_id, quantity=qty))
    return specs


@click.command("create")
@click.option("--project", "project_id", required=True, type=int, help="Project ID.")
@click.option("--first-name", required=True, help="Driver first name.")
@click.option("--last-name", required=True, help="Driver last name.")
@click.option("--tax-id", default=None, help="Driver tax ID (CUIT).")
@click.option("--plate", "license_plate", default=None, help="Vehicle license plate.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.option("--items", required=True, help="Items as 'LineID:Qty,LineID:Qty'.")
def dispatch_create(
    project_id: int,
    first_name: str,
    last_name: str,
    tax_id: str | None,
    license_plate: str | None,
    notes: str | None,
    items: str,
) -> None:
    """Record material handed to a driver."""
    specs = _parse_items(items)
    carrier = CarrierSpec(
        first_name=first_name,
        last_name=last_name,
        tax_id=tax_id,
        license_plate=license_plate,
        notes=notes,
    )

    try:
        dto = CreateDispatchHandler(coordinator()).handle(project_id, carrier, specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Dispatch #{dto.id} created for project #{dto.project_id}")
    click.echo(f"Driver: {dto.driver}  Tax ID: {dto.tax_id or '-'}  Plate: {dto.license_plate or '-'}")
    for item in dto.items:
        click.echo(f"  line #{item.line_id:<6} {item.quantity:>5}")


@click.command("update")
@click.option("--id", "dispatch_id", required=True, type=int, help="Dispatch ID.")
@click.option("--first-name", default=None, help="Driver first name.")
@click.option("--last-name", default=None, help="Driver last name.")
@click.option("--tax-id", default=None, help="Driver tax ID (CUIT).")
@click.option("--plate", "license_plate", default=None, help="Vehicle license plate.")
@click.option("--notes", default=None, help="Free-text notes.")
def dispatch_update(
    dispatch_id: int,
    first_name: str | None,
    last_name: str | None,
    tax_id: str | None,
    license_plate: str | None,
    notes: str | None,
) -> None:
    """Correct the carrier details of a dispatch."""
    try:
        UpdateDispatchHandler(coordinator()).handle(
            dispatch_id,
            first_name=first_name,
            last_name=last_name,
            tax_id=tax_id,
            license_plate=license_plate,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Dispatch #{dispatch_id} updated.")


@click.command("delete")
@click.option("--id", "dispatch_id", required=True, type=int, help="Dispatch ID.")
def dispatch_delete(dispatch_id: int) -> None:
    """Delete a dispatch (its units become remaining again)."""
    try:
        DeleteDispatchHandler(coordinator()).handle(dispatch_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Dispatch #{dispatch_id} deleted.")


@click.command("list")
@click.option("--project", "project_id", default=None, type=int, help="Only this project.")
@click.option("--from", "date_from", default=None, type=click.DateTime(["%Y-%m-%d"]))
@click.option("--to", "date_to", default=None, type=click.DateTime(["%Y-%m-%d"]))
@click.option("--tax-id", default=None, help="Driver tax ID.")
@click.option("--plate", "license_plate", default=None, help="License plate.")
def dispatch_list(
    project_id: int | None,
    date_from: datetime | None,
    date_to: datetime | None,
    tax_id: str | None,
    license_plate: str | None,
) -> None:
    """Show dispatch history, newest first."""
    filters = DispatchFilters(
        project_id=project_id,
        date_from=date_from.date() if date_from else None,
        date_to=date_to.date() if date_to else None,
        tax_id=tax_id,
        license_plate=license_plate,
    )
    rows = ListDispatchesHandler(coordinator()).handle(filters)

    if not rows:
        click.echo("No dispatches found.")
        return

    click.echo(
        f"{'ID':>4} {'Project':>8} {'Driver':<24} {'Plate':<10} {'Units':>6}  {'Created'}"
    )
    click.echo("-" * 76)
    for row in rows:
        click.echo(
            f"{row.id:>4} {row.project_id:>8} {row.driver:<24} "
            f"{row.license_plate or '-':<10} {row.total_quantity:>6}  {row.created_at}"
        )
