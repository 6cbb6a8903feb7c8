"""CLI commands for the Project aggregate and its allocation lines."""

from __future__ import annotations

import click

from yard.application.add_allocation_line import AddAllocationLineHandler
from yard.application.change_project_status import (
    ActivateProjectHandler,
    FinishProjectHandler,
    StartProjectHandler,
)
from yard.application.create_project import CreateProjectHandler
from yard.application.delete_project import DeleteProjectHandler
from yard.application.get_allocation_ceiling import GetAllocationCeilingHandler
from yard.application.remove_allocation_line import RemoveAllocationLineHandler
from yard.application.set_allocation_quantity import SetAllocationQuantityHandler
from yard.application.show_project import ShowProjectHandler
from yard.domain.exceptions import DomainException
from yard.infrastructure.bootstrap import coordinator


@click.command("create")
@click.option("--name", required=True, help="Project name.")
def project_create(name: str) -> None:
    """Create a new DRAFT project."""
    try:
        project_id = CreateProjectHandler(coordinator()).handle(name)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Project #{project_id} created  (status=DRAFT)")


@click.command("show")
@click.option("--id", "project_id", required=True, type=int, help="Project ID to display.")
def project_show(project_id: int) -> None:
    """Show a project with its allocation lines."""
    try:
        dto = ShowProjectHandler(coordinator()).handle(project_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Project #{dto.id}  {dto.name}  (status={dto.status})")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()

    if not dto.lines:
        click.echo("  No structures allocated.")
        return

    click.echo(
        f"  {'Line':>5} {'Structure':<24} {'Qty':>5} {'Dispatched':>11} {'Remaining':>10}"
    )
    click.echo(f"  {'-'*58}")
    for line in dto.lines:
        click.echo(
            f"  {line.id:>5} {line.structure_name:<24} {line.quantity:>5} "
            f"{line.dispatched_quantity:>11} {line.remaining:>10}"
        )

    if dto.has_dispatches:
        click.echo()
        click.echo("  Lines with dispatched units can only be removed with --cascade.")


@click.command("add-line")
@click.option("--id", "project_id", required=True, type=int, help="Project ID.")
@click.option("--structure", "structure_id", required=True, type=int, help="Structure ID.")
@click.option("--quantity", required=True, type=int, help="Units to allocate.")
def project_add_line(project_id: int, structure_id: int, quantity: int) -> None:
    """Allocate a structure to a project."""
    try:
        line_id = AddAllocationLineHandler(coordinator()).handle(
            project_id, structure_id, quantity
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Line #{line_id} added to project #{project_id}")


@click.command("set-quantity")
@click.option("--line", "line_id", required=True, type=int, help="Allocation line ID.")
@click.option("--quantity", required=True, type=int, help="New quantity.")
def project_set_quantity(line_id: int, quantity: int) -> None:
    """Change the quantity of an allocation line."""
    try:
        SetAllocationQuantityHandler(coordinator()).handle(line_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Line #{line_id} set to {quantity}")


@click.command("remove-line")
@click.option("--line", "line_id", required=True, type=int, help="Allocation line ID.")
@click.option(
    "--cascade",
    is_flag=True,
    default=False,
    help="Also void the dispatch items recorded against this line.",
)
def project_remove_line(line_id: int, cascade: bool) -> None:
    """Remove an allocation line from its project."""
    try:
        RemoveAllocationLineHandler(coordinator()).handle(line_id, cascade=cascade)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Line #{line_id} removed.")


@click.command("ceiling")
@click.option("--id", "project_id", required=True, type=int, help="Project ID.")
@click.option("--structure", "structure_id", required=True, type=int, help="Structure ID.")
def project_ceiling(project_id: int, structure_id: int) -> None:
    """Show the largest quantity the project may hold of a structure."""
    try:
        ceiling = GetAllocationCeilingHandler(coordinator()).handle(project_id, structure_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(str(ceiling))


@click.command("activate")
@click.option("--id", "project_id", required=True, type=int, help="Project ID to activate.")
def project_activate(project_id: int) -> None:
    """Activate a draft project (locks its stock)."""
    try:
        ActivateProjectHandler(coordinator()).handle(project_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Project #{project_id} activated — stock reserved.")


@click.command("start")
@click.option("--id", "project_id", required=True, type=int, help="Project ID.")
def project_start(project_id: int) -> None:
    """Mark an active project as in progress."""
    try:
        StartProjectHandler(coordinator()).handle(project_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Project #{project_id} in progress.")


@click.command("finish")
@click.option("--id", "project_id", required=True, type=int, help="Project ID.")
def project_finish(project_id: int) -> None:
    """Mark a project in progress as finished."""
    try:
        FinishProjectHandler(coordinator()).handle(project_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Project #{project_id} finished.")


@click.command("delete")
@click.option("--id", "project_id", required=True, type=int, help="Project ID to delete.")
def project_delete(project_id: int) -> None:
    """Delete a project (releases stock, voids its dispatches)."""
    try:
        DeleteProjectHandler(coordinator()).handle(project_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Project #{project_id} deleted.")
