"""Project management commands."""

import click
from eventbudget.cli.display import describe_vat_setting, echo_project_line, short_id
from eventbudget.cli.error_handling import handle_domain_error
from eventbudget.cli.project_resolution import edit_project_or_exit, resolve_project_or_exit
from eventbudget.domain import editing
from eventbudget.domain.entities import BudgetCategory, Currency
from eventbudget.domain.errors import DomainError
from eventbudget.domain.financials import get_category_total
from eventbudget.domain.formatting import format_currency

CURRENCY_CHOICES = click.Choice([c.value for c in Currency], case_sensitive=False)


@click.group()
def project_group():
    """Manage projects."""
    pass


@project_group.command("create")
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--client", help="Client name (defaults to Novartis)")
@click.option("--date", "project_date", help="Project date (YYYY-MM-DD or 'today')")
@click.option("--currency", type=CURRENCY_CHOICES, help="Budget currency (defaults to EUR)")
@click.option("--exchange-rate", help="TRY per one unit of the project currency")
@click.option("--international/--domestic", default=None, help="International projects are VAT exempt")
@click.option("--service-fee", help="Service fee percentage (0-100)")
@click.pass_context
def create_project(
    ctx,
    name: str,
    client: str | None,
    project_date: str | None,
    currency: str | None,
    exchange_rate: str | None,
    international: bool | None,
    service_fee: str | None,
):
    """Create a new project.

    Examples:
        eventbudget project create "ECC 2025"
        eventbudget project create "Oncology Summit" --currency USD --exchange-rate 34.2
        eventbudget project create "Vienna Congress" --international --service-fee 12
    """
    workspace = ctx.obj["workspace"]
    fields = {"name": name}
    for key, value in (
        ("client", client),
        ("date", project_date),
        ("currency", currency),
        ("exchange_rate", exchange_rate),
        ("is_international", international),
        ("service_fee_percent", service_fee),
    ):
        if value is not None:
            fields[key] = value

    try:
        project = workspace.create_project(**fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
    workspace.flush()
    click.echo(f"Created project '{project.name}' (ID: {project.id})")


@project_group.command("list")
@click.pass_context
def list_projects(ctx):
    """List all projects, newest first."""
    workspace = ctx.obj["workspace"]
    projects = workspace.projects
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 90)
    for project in projects:
        echo_project_line(project)


@project_group.command("show")
@click.argument("project", metavar="PROJECT")
@click.pass_context
def show_project(ctx, project: str):
    """Show project details and budget items.

    PROJECT can be a project name, ID or ID prefix.
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)

    click.echo(f"\n{project_obj.name or '(unnamed)'}")
    click.echo("=" * 60)
    click.echo(f"ID:            {project_obj.id}")
    click.echo(f"Client:        {project_obj.client}")
    click.echo(f"Date:          {project_obj.date.isoformat()}")
    rate_info = "" if project_obj.currency == Currency.TRY else f" (rate {project_obj.exchange_rate})"
    click.echo(f"Currency:      {project_obj.currency.value}{rate_info}")
    click.echo(f"International: {'yes (VAT exempt)' if project_obj.is_international else 'no'}")
    click.echo(f"Service fee:   {project_obj.service_fee_percent}%")

    for category in BudgetCategory:
        items = project_obj.categories.items(category)
        total = format_currency(project_obj, get_category_total(project_obj, category), show_reference=True)
        vat = describe_vat_setting(project_obj, category)
        click.echo(f"\n{category.value.capitalize()} (VAT {vat}): {total}")
        if not items:
            click.echo("  (no items)")
            continue
        for budget_item in items:
            click.echo(
                f"  {short_id(budget_item.id)} | {budget_item.description or '-':30s} | "
                f"{budget_item.quantity:>4} x {format_currency(project_obj, budget_item.unit_price)}"
                f" = {format_currency(project_obj, budget_item.total)}"
            )

    click.echo(
        f"\nPayments: {len(project_obj.payments)} | Advances: {len(project_obj.advances)} | "
        f"Expenses: {len(project_obj.expenses)}"
    )


@project_group.command("update")
@click.argument("project", metavar="PROJECT")
@click.option("--name", help="New project name")
@click.option("--client", help="Client name")
@click.option("--date", "project_date", help="Project date (YYYY-MM-DD or 'today')")
@click.option("--currency", type=CURRENCY_CHOICES, help="Budget currency")
@click.option("--exchange-rate", help="TRY per one unit of the project currency")
@click.option("--international/--domestic", default=None, help="International projects are VAT exempt")
@click.option("--service-fee", help="Service fee percentage (0-100)")
@click.pass_context
def update_project(
    ctx,
    project: str,
    name: str | None,
    client: str | None,
    project_date: str | None,
    currency: str | None,
    exchange_rate: str | None,
    international: bool | None,
    service_fee: str | None,
):
    """Update project details.

    Examples:
        eventbudget project update "ECC 2025" --service-fee 12
        eventbudget project update 3f2a --currency GBP --exchange-rate 44.1
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)

    changes = {}
    for key, value in (
        ("name", name),
        ("client", client),
        ("date", project_date),
        ("currency", currency),
        ("exchange_rate", exchange_rate),
        ("is_international", international),
        ("service_fee_percent", service_fee),
    ):
        if value is not None:
            changes[key] = value

    if not changes:
        click.echo("Nothing to update.")
        return

    updated = edit_project_or_exit(ctx, project_obj, editing.update_project, **changes)
    click.echo(f"Updated project '{updated.name}'")


@project_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_project(ctx, project: str, yes: bool):
    """Delete a project and everything recorded under it.

    Examples:
        eventbudget project delete "ECC 2025"
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    label = project_obj.name or short_id(project_obj.id)

    if not yes and not click.confirm(f"Are you sure you want to delete project '{label}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        workspace.delete_project(project_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted project '{label}'")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
