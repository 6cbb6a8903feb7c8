"""CLI commands for structures and their stock counts."""

from __future__ import annotations

import click

from yard.application.create_structure import CreateStructureHandler
from yard.application.get_structure import GetStructureHandler, ListStructuresHandler
from yard.application.set_stock import SetStockHandler
from yard.application.update_structure import UpdateStructureHandler
from yard.domain.exceptions import DomainException
from yard.infrastructure.bootstrap import coordinator


@click.command("add")
@click.option("--name", required=True, help="Structure name.")
@click.option("--stock", required=True, type=int, help="Units owned.")
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--measure", default=None, help="Size, e.g. '2m x 1m'.")
@click.option("--description", default=None, help="Free-text description.")
def structure_add(
    name: str,
    stock: int,
    category_id: str | None,
    measure: str | None,
    description: str | None,
) -> None:
    """Register a new structure type."""
    handler = CreateStructureHandler(coordinator())

    try:
        dto = handler.handle(
            name=name,
            stock=stock,
            category_id=category_id,
            measure=measure,
            description=description,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Structure #{dto.id} '{dto.name}' created with stock {dto.stock}")


@click.command("list")
@click.option("--category", "category_id", default=None, help="Only this category.")
def structure_list(category_id: str | None) -> None:
    """Show stock, reserved, available and in-use units per structure."""
    rows = ListStructuresHandler(coordinator()).handle(category_id=category_id)

    if not rows:
        click.echo("No structures found.")
        return

    click.echo(
        f"{'ID':>4} {'Structure':<24} {'Stock':>7} {'Reserved':>9} {'Available':>10} {'In use':>7}"
    )
    click.echo("-" * 66)
    for row in rows:
        click.echo(
            f"{row.id:>4} {row.name:<24} {row.stock:>7} {row.reserved:>9} "
            f"{row.available:>10} {row.in_use:>7}"
        )


@click.command("show")
@click.option("--id", "structure_id", required=True, type=int, help="Structure ID.")
def structure_show(structure_id: int) -> None:
    """Show one structure's figures."""
    try:
        dto = GetStructureHandler(coordinator()).handle(structure_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Structure #{dto.id}  {dto.name}")
    click.echo(f"Category:  {dto.category_id or '-'}")
    click.echo(f"Measure:   {dto.measure or '-'}")
    if dto.description:
        click.echo(f"About:     {dto.description}")
    click.echo(f"Stock:     {dto.stock}")
    click.echo(f"Reserved:  {dto.reserved}")
    click.echo(f"Available: {dto.available}")
    click.echo(f"In use:    {dto.in_use}")


@click.command("set-stock")
@click.option("--id", "structure_id", required=True, type=int, help="Structure ID.")
@click.option("--stock", required=True, type=int, help="New total units owned.")
def structure_set_stock(structure_id: int, stock: int) -> None:
    """Replace the stock count after a physical count."""
    try:
        dto = SetStockHandler(coordinator()).handle(structure_id, stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock of '{dto.name}' set to {dto.stock} ({dto.available} available)")


@click.command("update")
@click.option("--id", "structure_id", required=True, type=int, help="Structure ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--category", "category_id", default=None, help="New category ID ('' clears it).")
@click.option("--measure", default=None, help="New measure ('' clears it).")
@click.option("--description", default=None, help="New description ('' clears it).")
def structure_update(
    structure_id: int,
    name: str | None,
    category_id: str | None,
    measure: str | None,
    description: str | None,
) -> None:
    """Correct the name, category, measure or description of a structure."""
    try:
        dto = UpdateStructureHandler(coordinator()).handle(
            structure_id,
            name=name,
            category_id=category_id,
            measure=measure,
            description=description,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Structure #{dto.id} '{dto.name}' updated.")
