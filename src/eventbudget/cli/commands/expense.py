"""Agency expense commands."""

import click
from eventbudget.cli.display import short_id
from eventbudget.cli.project_resolution import (
    edit_project_or_exit,
    resolve_entry_or_exit,
    resolve_project_or_exit,
)
from eventbudget.domain import editing
from eventbudget.domain.entities import DEFAULT_EXPENSE_CATEGORY
from eventbudget.domain.financials import total_expenses
from eventbudget.domain.formatting import format_currency


@click.group()
def expense_group():
    """Record the agency's own expenses."""
    pass


@expense_group.command("add")
@click.argument("project", metavar="PROJECT")
@click.option("--amount", default="0", help="Amount in the project currency")
@click.option(
    "--category",
    default=DEFAULT_EXPENSE_CATEGORY,
    help="Expense category, usually a budget category (default: other)",
)
@click.option("--date", "expense_date", default="today", help="Date (YYYY-MM-DD or 'today')")
@click.option("--description", default="", help="Description")
@click.pass_context
def add_expense(ctx, project: str, amount: str, category: str, expense_date: str, description: str):
    """Add an expense.

    Examples:
        eventbudget expense add "ECC 2025" --amount 250 --description "Courier"
        eventbudget expense add "ECC 2025" --amount 90 --category transfer
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    updated = edit_project_or_exit(
        ctx,
        project_obj,
        editing.add_expense,
        date=expense_date,
        description=description,
        amount=amount,
        category=category,
    )
    expense = updated.expenses[-1]
    click.echo(f"Added expense {short_id(expense.id)}: {format_currency(updated, expense.amount)}")


@expense_group.command("list")
@click.argument("project", metavar="PROJECT")
@click.pass_context
def list_expenses(ctx, project: str):
    """List expenses in the order they were recorded."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    if not project_obj.expenses:
        click.echo("No expenses found.")
        return

    click.echo("\nExpenses:")
    click.echo("-" * 80)
    for expense in project_obj.expenses:
        click.echo(
            f"{short_id(expense.id)} | {expense.date.isoformat()} | {expense.category:14s} | "
            f"{expense.description or '-':25s} | {format_currency(project_obj, expense.amount)}"
        )
    click.echo("-" * 80)
    click.echo(f"Total: {format_currency(project_obj, total_expenses(project_obj), show_reference=True)}")


@expense_group.command("update")
@click.argument("project", metavar="PROJECT")
@click.argument("expense_id", metavar="EXPENSE_ID")
@click.option("--amount", help="New amount")
@click.option("--category", help="New category")
@click.option("--date", "expense_date", help="New date")
@click.option("--description", help="New description")
@click.pass_context
def update_expense(
    ctx,
    project: str,
    expense_id: str,
    amount: str | None,
    category: str | None,
    expense_date: str | None,
    description: str | None,
):
    """Update an expense."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.expenses, expense_id, "expense")

    changes = {
        key: value
        for key, value in (
            ("amount", amount),
            ("category", category),
            ("date", expense_date),
            ("description", description),
        )
        if value is not None
    }
    if not changes:
        click.echo("Nothing to update.")
        return

    edit_project_or_exit(ctx, project_obj, editing.update_expense, full_id, **changes)
    click.echo(f"Updated expense {short_id(full_id)}")


@expense_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.argument("expense_id", metavar="EXPENSE_ID")
@click.pass_context
def delete_expense(ctx, project: str, expense_id: str):
    """Delete an expense."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.expenses, expense_id, "expense")
    edit_project_or_exit(ctx, project_obj, editing.delete_expense, full_id)
    click.echo(f"Deleted expense {short_id(full_id)}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
