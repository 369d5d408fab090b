"""Shared display helpers for CLI output."""

import click

from eventbudget.domain.entities import CustomRate, Project
from eventbudget.domain.financials import find_vat_entry, project_budget_total
from eventbudget.domain.formatting import format_currency

SHORT_ID_LENGTH = 8


def short_id(entry_id: str) -> str:
    """First characters of an ID, enough to pass back as a prefix."""
    return entry_id[:SHORT_ID_LENGTH]


def describe_vat_setting(project: Project, category) -> str:
    """Configured VAT setting of a category, e.g. '12%' or 'custom 5%'."""
    entry = find_vat_entry(project, category)
    if entry is None:
        return "default"
    if isinstance(entry.rate, CustomRate):
        if entry.rate.percent is None:
            return "custom (unset)"
        return f"custom {entry.rate.percent}%"
    return f"{entry.rate.percent}%"


def echo_project_line(project: Project) -> None:
    """One-line project listing with its budget total."""
    name = project.name or "(unnamed)"
    total = format_currency(project, project_budget_total(project))
    click.echo(
        f"{short_id(project.id)} | {name:30s} | {project.client:15s} | "
        f"{project.date.isoformat()} | {total}"
    )


def echo_amount_row(label: str, value: str, width: int = 32) -> None:
    click.echo(f"{label:<{width}} {value:>24}")
