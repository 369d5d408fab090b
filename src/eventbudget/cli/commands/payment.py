"""Payment commands."""

import click
from eventbudget.cli.display import short_id
from eventbudget.cli.project_resolution import (
    edit_project_or_exit,
    resolve_entry_or_exit,
    resolve_project_or_exit,
)
from eventbudget.domain import editing
from eventbudget.domain.entities import PaymentType
from eventbudget.domain.financials import total_incoming_payments, total_outgoing_payments
from eventbudget.domain.formatting import format_currency

TYPE_CHOICES = click.Choice([t.value for t in PaymentType], case_sensitive=False)


@click.group()
def payment_group():
    """Record incoming and outgoing payments."""
    pass


@payment_group.command("add")
@click.argument("project", metavar="PROJECT")
@click.argument("payment_type", metavar="TYPE", type=TYPE_CHOICES)
@click.option("--amount", default="0", help="Amount in the project currency")
@click.option("--date", "payment_date", default="today", help="Payment date (YYYY-MM-DD or 'today')")
@click.option("--description", default="", help="Description")
@click.pass_context
def add_payment(ctx, project: str, payment_type: str, amount: str, payment_date: str, description: str):
    """Add a payment. TYPE is 'incoming' or 'outgoing'.

    Examples:
        eventbudget payment add "ECC 2025" incoming --amount 5000 --description "Deposit"
        eventbudget payment add "ECC 2025" outgoing --amount 1200 --date 2025-03-01
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    updated = edit_project_or_exit(
        ctx,
        project_obj,
        editing.add_payment,
        payment_type,
        date=payment_date,
        description=description,
        amount=amount,
    )
    payment = updated.payments[-1]
    click.echo(
        f"Added {payment.type.value} payment {short_id(payment.id)}: {format_currency(updated, payment.amount)}"
    )


@payment_group.command("list")
@click.argument("project", metavar="PROJECT")
@click.pass_context
def list_payments(ctx, project: str):
    """List payments in the order they were recorded."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    if not project_obj.payments:
        click.echo("No payments found.")
        return

    click.echo("\nPayments:")
    click.echo("-" * 80)
    for payment in project_obj.payments:
        sign = "+" if payment.type == PaymentType.INCOMING else "-"
        click.echo(
            f"{short_id(payment.id)} | {payment.date.isoformat()} | {payment.type.value:8s} | "
            f"{payment.description or '-':25s} | {sign}{format_currency(project_obj, payment.amount)}"
        )
    click.echo("-" * 80)
    click.echo(f"Incoming: {format_currency(project_obj, total_incoming_payments(project_obj), show_reference=True)}")
    click.echo(f"Outgoing: {format_currency(project_obj, total_outgoing_payments(project_obj), show_reference=True)}")


@payment_group.command("update")
@click.argument("project", metavar="PROJECT")
@click.argument("payment_id", metavar="PAYMENT_ID")
@click.option("--amount", help="New amount")
@click.option("--date", "payment_date", help="New date")
@click.option("--description", help="New description")
@click.option("--type", "payment_type", type=TYPE_CHOICES, help="New type")
@click.pass_context
def update_payment(
    ctx,
    project: str,
    payment_id: str,
    amount: str | None,
    payment_date: str | None,
    description: str | None,
    payment_type: str | None,
):
    """Update a payment."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.payments, payment_id, "payment")

    changes = {
        key: value
        for key, value in (
            ("amount", amount),
            ("date", payment_date),
            ("description", description),
            ("type", payment_type),
        )
        if value is not None
    }
    if not changes:
        click.echo("Nothing to update.")
        return

    edit_project_or_exit(ctx, project_obj, editing.update_payment, full_id, **changes)
    click.echo(f"Updated payment {short_id(full_id)}")


@payment_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.argument("payment_id", metavar="PAYMENT_ID")
@click.pass_context
def delete_payment(ctx, project: str, payment_id: str):
    """Delete a payment."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.payments, payment_id, "payment")
    edit_project_or_exit(ctx, project_obj, editing.delete_payment, full_id)
    click.echo(f"Deleted payment {short_id(full_id)}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
