import click

from yard.infrastructure.bootstrap import configure_logging
from yard.infrastructure.cli.dispatch_commands import (
    dispatch_create,
    dispatch_delete,
    dispatch_list,
    dispatch_update,
)
from yard.infrastructure.cli.ledger_commands import ledger_audit
from yard.infrastructure.cli.project_commands import (
    project_activate,
    project_add_line,
    project_ceiling,
    project_create,
    project_delete,
    project_finish,
    project_remove_line,
    project_set_quantity,
    project_show,
    project_start,
)
from yard.infrastructure.cli.structure_commands import (
    structure_add,
    structure_list,
    structure_set_stock,
    structure_show,
    structure_update,
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every state change.")
def cli(verbose: bool) -> None:
    """Yard — structure stock, project reservations and dispatches"""
    configure_logging(verbose)


@cli.group()
def structure() -> None:
    """Manage structures and stock counts."""


@cli.group()
def project() -> None:
    """Manage projects and their allocations."""


@cli.group()
def dispatch() -> None:
    """Record material handed to drivers."""


@cli.group()
def ledger() -> None:
    """Check the stock ledger."""


# Register subcommands
structure.add_command(structure_add)
structure.add_command(structure_list)
structure.add_command(structure_set_stock)
structure.add_command(structure_show)
structure.add_command(structure_update)
project.add_command(project_activate)
project.add_command(project_add_line)
project.add_command(project_ceiling)
project.add_command(project_create)
project.add_command(project_delete)
project.add_command(project_finish)
project.add_command(project_remove_line)
project.add_command(project_set_quantity)
project.add_command(project_show)
project.add_command(project_start)
dispatch.add_command(dispatch_create)
dispatch.add_command(dispatch_delete)
dispatch.add_command(dispatch_list)
dispatch.add_command(dispatch_update)
ledger.add_command(ledger_audit)
