"""Summary command."""

import click
from eventbudget.cli.display import echo_amount_row, short_id
from eventbudget.cli.project_resolution import resolve_project_or_exit
from eventbudget.domain.entities import REFERENCE_CURRENCY
from eventbudget.domain.financials import pending_advance_items, summarize
from eventbudget.domain.formatting import CURRENCY_SYMBOLS, format_currency, format_number

WIDTH = 58


def _display_budget(project, figures):
    """Category totals down to the grand total."""
    click.echo("\nBudget")
    click.echo("*" * WIDTH)
    for line in figures.categories:
        label = f"    {line.category.value.capitalize()} (VAT {line.vat_rate}%)"
        echo_amount_row(label, format_currency(project, line.total))
    click.echo("-" * WIDTH)
    echo_amount_row("Subtotal", format_currency(project, figures.subtotal))
    echo_amount_row(f"Service fee ({project.service_fee_percent}%)", format_currency(project, figures.service_fee))
    echo_amount_row("Total before VAT", format_currency(project, figures.total_before_vat))

    click.echo("\nVAT")
    click.echo("*" * WIDTH)
    for line in figures.categories:
        if line.vat:
            echo_amount_row(f"    {line.category.value.capitalize()}", format_currency(project, line.vat))
    echo_amount_row("    Service fee (20%)", format_currency(project, figures.service_fee_vat))
    click.echo("-" * WIDTH)
    echo_amount_row("Total VAT", format_currency(project, figures.total_vat))
    click.echo("=" * WIDTH)
    echo_amount_row("GRAND TOTAL", format_currency(project, figures.grand_total))
    if project.currency != REFERENCE_CURRENCY:
        reference = f"{CURRENCY_SYMBOLS[REFERENCE_CURRENCY]}{format_number(figures.grand_total_reference)}"
        echo_amount_row(f"GRAND TOTAL ({REFERENCE_CURRENCY.value})", reference)


def _echo_with_reference(label, project, amount):
    echo_amount_row(label, format_currency(project, amount, show_reference=True))


def _display_analysis(project, figures):
    """Agency-side figures: profit, payments, advances and cash flow."""
    click.echo("\nAnalysis")
    click.echo("*" * WIDTH)
    _echo_with_reference("Service fee", project, figures.service_fee)
    _echo_with_reference("Agency expenses", project, figures.total_expenses)
    _echo_with_reference("Net profit", project, figures.net_profit)
    click.echo("-" * WIDTH)
    _echo_with_reference("Incoming payments", project, figures.total_incoming_payments)
    _echo_with_reference("Outgoing payments", project, figures.total_outgoing_payments)
    _echo_with_reference("Advances", project, figures.total_advances)
    _echo_with_reference("Cash flow", project, figures.cash_flow)
    click.echo("-" * WIDTH)
    _echo_with_reference("Pending advances", project, figures.pending_advances)

    for advance in pending_advance_items(project):
        click.echo(
            f"    {short_id(advance.id)} {advance.supplier or '-':20s} "
            f"{format_currency(project, advance.amount):>24}"
        )


@click.command("summary")
@click.argument("project", metavar="PROJECT")
@click.option("--budget-only", is_flag=True, help="Skip the profit and cash flow analysis")
@click.pass_context
def summary(ctx, project: str, budget_only: bool):
    """Show the budget totals, VAT and financial analysis of a project.

    Examples:
        eventbudget summary "ECC 2025"
        eventbudget summary 3f2a --budget-only
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    figures = summarize(project_obj)

    click.echo(f"\n{project_obj.name or '(unnamed)'} ({project_obj.currency.value})")
    if project_obj.is_international:
        click.echo("International project: budget categories are VAT exempt.")

    _display_budget(project_obj, figures)
    if not budget_only:
        _display_analysis(project_obj, figures)


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
