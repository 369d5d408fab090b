"""Budget item commands."""

import click
from eventbudget.cli.display import short_id
from eventbudget.cli.project_resolution import (
    edit_project_or_exit,
    resolve_entry_or_exit,
    resolve_project_or_exit,
)
from eventbudget.domain import editing
from eventbudget.domain.entities import BudgetCategory
from eventbudget.domain.financials import get_category_total
from eventbudget.domain.formatting import format_currency

CATEGORY_CHOICES = click.Choice([c.value for c in BudgetCategory], case_sensitive=False)


@click.group()
def item_group():
    """Manage budget items."""
    pass


@item_group.command("add")
@click.argument("project", metavar="PROJECT")
@click.argument("category", type=CATEGORY_CHOICES)
@click.option("--description", default="", help="Item description")
@click.option("--quantity", default="1", help="Quantity (whole number)")
@click.option("--unit-price", default="0", help="Unit price in the project currency")
@click.pass_context
def add_item(ctx, project: str, category: str, description: str, quantity: str, unit_price: str):
    """Add a budget item to a category.

    Non-numeric quantities or prices are recorded as 0.

    Examples:
        eventbudget item add "ECC 2025" registration --description "Delegate fee" --quantity 2 --unit-price 100
        eventbudget item add 3f2a accommodation --description "Hotel, 3 nights" --quantity 6 --unit-price 180
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    updated = edit_project_or_exit(
        ctx,
        project_obj,
        editing.add_budget_item,
        category,
        description=description,
        quantity=quantity,
        unit_price=unit_price,
    )
    new_item = updated.categories.items(category)[-1]
    click.echo(
        f"Added item {short_id(new_item.id)} to {category}: "
        f"{new_item.quantity} x {format_currency(updated, new_item.unit_price)} = "
        f"{format_currency(updated, new_item.total)}"
    )


@item_group.command("list")
@click.argument("project", metavar="PROJECT")
@click.option("--category", type=CATEGORY_CHOICES, help="Only show one category")
@click.pass_context
def list_items(ctx, project: str, category: str | None):
    """List budget items by category."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    categories = [BudgetCategory(category)] if category else list(BudgetCategory)

    for cat in categories:
        items = project_obj.categories.items(cat)
        total = format_currency(project_obj, get_category_total(project_obj, cat), show_reference=True)
        click.echo(f"\n{cat.value.capitalize()}: {total}")
        click.echo("-" * 80)
        if not items:
            click.echo("No items.")
            continue
        for budget_item in items:
            click.echo(
                f"{short_id(budget_item.id)} | {budget_item.description or '-':30s} | "
                f"{budget_item.quantity:>4} x {format_currency(project_obj, budget_item.unit_price):>14} | "
                f"{format_currency(project_obj, budget_item.total):>14}"
            )


@item_group.command("update")
@click.argument("project", metavar="PROJECT")
@click.argument("category", type=CATEGORY_CHOICES)
@click.argument("item_id", metavar="ITEM_ID")
@click.option("--description", help="New description")
@click.option("--quantity", help="New quantity")
@click.option("--unit-price", help="New unit price")
@click.pass_context
def update_item(
    ctx,
    project: str,
    category: str,
    item_id: str,
    description: str | None,
    quantity: str | None,
    unit_price: str | None,
):
    """Update a budget item. The total is recomputed.

    ITEM_ID can be the full ID or the short ID shown by 'item list'.
    """
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.categories.items(category), item_id, "budget item")

    changes = {}
    if description is not None:
        changes["description"] = description
    if quantity is not None:
        changes["quantity"] = quantity
    if unit_price is not None:
        changes["unit_price"] = unit_price
    if not changes:
        click.echo("Nothing to update.")
        return

    updated = edit_project_or_exit(ctx, project_obj, editing.update_budget_item, category, full_id, **changes)
    budget_item = next(i for i in updated.categories.items(category) if i.id == full_id)
    click.echo(
        f"Updated item {short_id(full_id)}: {budget_item.quantity} x "
        f"{format_currency(updated, budget_item.unit_price)} = {format_currency(updated, budget_item.total)}"
    )


@item_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.argument("category", type=CATEGORY_CHOICES)
@click.argument("item_id", metavar="ITEM_ID")
@click.pass_context
def delete_item(ctx, project: str, category: str, item_id: str):
    """Delete a budget item."""
    workspace = ctx.obj["workspace"]
    project_obj = resolve_project_or_exit(ctx, workspace, project)
    full_id = resolve_entry_or_exit(ctx, project_obj.categories.items(category), item_id, "budget item")
    edit_project_or_exit(ctx, project_obj, editing.delete_budget_item, category, full_id)
    click.echo(f"Deleted item {short_id(full_id)} from {category}")


def register_commands(cli):
    """Register budget item commands with main CLI."""
    cli.add_command(item_group, name="item")
