"""VAT rate commands."""

import click
from eventbudget.cli.display import describe_vat_setting
from eventbudget.cli.project_resolution import edit_project_or_exit, resolve_project_or_exit
from eventbudget.domain import editing
from eventbudget.domain.entities import BudgetCategory, VAT_RATE_OPTIONS
from eventbudget.domain.financials import get_vat_rate

CATEGORY_CHOICES = click.Choice([c.value for c in BudgetCategory], case_sensitive=False)
RATE_CHOICES = click.Choice([str(rate) for rate in VAT_RATE_OPTIONS] + ["custom"], case_sensitive=False)


@click.group()
def vat_group():
    """Manage VAT rates per budget category."""
    pass


@vat_group.command("list")
@click.argument("project", metavar="PROJECT")
@click.pass_context
def list_vat(ctx, project: str):
    """Show configured and effective VAT rates."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)

    if project_obj.is_international:
        click.echo("International project: budget categories are VAT exempt.")
    click.echo(f"\n{'Category':<16} {'Configured':<14} {'Effective':>10}")
    click.echo("-" * 42)
    for category in BudgetCategory:
        configured = describe_vat_setting(project_obj, category)
        effective = get_vat_rate(project_obj, category)
        click.echo(f"{category.value:<16} {configured:<14} {str(effective) + '%':>10}")
    click.echo("Service fee VAT is always 20%.")


@vat_group.command("set")
@click.argument("project", metavar="PROJECT")
@click.argument("category", type=CATEGORY_CHOICES)
@click.argument("rate", type=RATE_CHOICES)
@click.option("--custom-rate", help="Percentage to use with RATE 'custom' (0-100)")
@click.pass_context
def set_vat(ctx, project: str, category: str, rate: str, custom_rate: str | None):
    """Set the VAT rate of a category.

    RATE is one of the standard rates or 'custom' together with --custom-rate.

    Examples:
        eventbudget vat set "ECC 2025" accommodation 12
        eventbudget vat set "ECC 2025" other custom --custom-rate 5
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    updated = edit_project_or_exit(ctx, project_obj, editing.set_vat_rate, category, rate, custom_rate)
    click.echo(f"VAT for {category} set to {describe_vat_setting(updated, category)}")


def register_commands(cli):
    """Register VAT commands with main CLI."""
    cli.add_command(vat_group, name="vat")
