"""Supplier advance commands."""

import click
from eventbudget.cli.display import short_id
from eventbudget.cli.project_resolution import (
    edit_project_or_exit,
    resolve_entry_or_exit,
    resolve_project_or_exit,
)
from eventbudget.domain import editing
from eventbudget.domain.entities import AdvanceStatus
from eventbudget.domain.financials import pending_advances, total_advances
from eventbudget.domain.formatting import format_currency

STATUS_CHOICES = click.Choice([s.value for s in AdvanceStatus], case_sensitive=False)


@click.group()
def advance_group():
    """Track advances paid to suppliers."""
    pass


@advance_group.command("add")
@click.argument("project", metavar="PROJECT")
@click.option("--amount", default="0", help="Amount in the project currency")
@click.option("--supplier", default="", help="Supplier receiving the advance")
@click.option("--date", "advance_date", default="today", help="Date (YYYY-MM-DD or 'today')")
@click.option("--description", default="", help="Description")
@click.pass_context
def add_advance(ctx, project: str, amount: str, supplier: str, advance_date: str, description: str):
    """Add a pending advance.

    Examples:
        eventbudget advance add "ECC 2025" --amount 3000 --supplier "Hilton"
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    updated = edit_project_or_exit(
        ctx,
        project_obj,
        editing.add_advance,
        date=advance_date,
        description=description,
        amount=amount,
        supplier=supplier,
    )
    advance = updated.advances[-1]
    click.echo(f"Added advance {short_id(advance.id)}: {format_currency(updated, advance.amount)} (pending)")


@advance_group.command("list")
@click.argument("project", metavar="PROJECT")
@click.option("--pending", "pending_only", is_flag=True, help="Only show pending advances")
@click.pass_context
def list_advances(ctx, project: str, pending_only: bool):
    """List advances in the order they were recorded."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    advances = [
        a for a in project_obj.advances if not pending_only or a.status == AdvanceStatus.PENDING
    ]
    if not advances:
        click.echo("No advances found.")
        return

    click.echo("\nAdvances:")
    click.echo("-" * 90)
    for advance in advances:
        click.echo(
            f"{short_id(advance.id)} | {advance.date.isoformat()} | {advance.status.value:7s} | "
            f"{advance.supplier or '-':20s} | {advance.description or '-':20s} | "
            f"{format_currency(project_obj, advance.amount)}"
        )
    click.echo("-" * 90)
    click.echo(f"Total:   {format_currency(project_obj, total_advances(project_obj), show_reference=True)}")
    click.echo(f"Pending: {format_currency(project_obj, pending_advances(project_obj), show_reference=True)}")


@advance_group.command("update")
@click.argument("project", metavar="PROJECT")
@click.argument("advance_id", metavar="ADVANCE_ID")
@click.option("--amount", help="New amount")
@click.option("--supplier", help="New supplier")
@click.option("--date", "advance_date", help="New date")
@click.option("--description", help="New description")
@click.option("--status", type=STATUS_CHOICES, help="New status")
@click.pass_context
def update_advance(
    ctx,
    project: str,
    advance_id: str,
    amount: str | None,
    supplier: str | None,
    advance_date: str | None,
    description: str | None,
    status: str | None,
):
    """Update an advance."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.advances, advance_id, "advance")

    changes = {
        key: value
        for key, value in (
            ("amount", amount),
            ("supplier", supplier),
            ("date", advance_date),
            ("description", description),
            ("status", status),
        )
        if value is not None
    }
    if not changes:
        click.echo("Nothing to update.")
        return

    edit_project_or_exit(ctx, project_obj, editing.update_advance, full_id, **changes)
    click.echo(f"Updated advance {short_id(full_id)}")


@advance_group.command("close")
@click.argument("project", metavar="PROJECT")
@click.argument("advance_id", metavar="ADVANCE_ID")
@click.pass_context
def close_advance(ctx, project: str, advance_id: str):
    """Mark an advance as closed."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.advances, advance_id, "advance")
    edit_project_or_exit(ctx, project_obj, editing.close_advance, full_id)
    click.echo(f"Closed advance {short_id(full_id)}")


@advance_group.command("reopen")
@click.argument("project", metavar="PROJECT")
@click.argument("advance_id", metavar="ADVANCE_ID")
@click.pass_context
def reopen_advance(ctx, project: str, advance_id: str):
    """Move a closed advance back to pending."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.advances, advance_id, "advance")
    edit_project_or_exit(ctx, project_obj, editing.reopen_advance, full_id)
    click.echo(f"Reopened advance {short_id(full_id)}")


@advance_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.argument("advance_id", metavar="ADVANCE_ID")
@click.pass_context
def delete_advance(ctx, project: str, advance_id: str):
    """Delete an advance."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.advances, advance_id, "advance")
    edit_project_or_exit(ctx, project_obj, editing.delete_advance, full_id)
    click.echo(f"Deleted advance {short_id(full_id)}")


def register_commands(cli):
    """Register advance commands with main CLI."""
    cli.add_command(advance_group, name="advance")
