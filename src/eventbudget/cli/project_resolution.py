"""CLI helpers for project resolution, editing and error handling."""

from __future__ import annotations

from typing import Callable

import click

from eventbudget.app.workspace import ProjectWorkspace, SaveState
from eventbudget.cli.error_handling import handle_domain_error
from eventbudget.domain.entities import Project
from eventbudget.domain.errors import DomainError
from eventbudget.utils.project_resolver import resolve_entry_id, resolve_project


def resolve_project_or_exit(ctx: click.Context, workspace: ProjectWorkspace, project: str) -> Project:
    """Resolve project ID, prefix or name, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_project(workspace.projects, project)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_entry_or_exit(ctx: click.Context, entries, reference: str, kind: str) -> str:
    """Resolve an entry ID or prefix, or exit with a CLI error."""
    try:
        return resolve_entry_id(entries, reference, kind)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def edit_project_or_exit(
    ctx: click.Context, project: Project, fn: Callable[..., Project], *args, **kwargs
) -> Project:
    """Open ``project``, apply an editing function and save the result.

    The edit goes through the workspace autosave, which is flushed right
    away because the process ends after the command.
    """
    workspace: ProjectWorkspace = ctx.obj["workspace"]
    workspace.open(project.id)
    try:
        updated = workspace.edit(fn, *args, **kwargs)
    except DomainError as exc:
        workspace.close()
        handle_domain_error(ctx, exc)
    workspace.flush()
    if workspace.status.state == SaveState.FAILED:
        click.echo("Warning: changes could not be saved", err=True)
    return workspace.current or updated
