"""Utility for resolving project and entry references to IDs."""

from typing import Iterable

from eventbudget.domain.entities import Project
from eventbudget.domain.errors import (
    ConflictError,
    NotFoundError,
    ambiguous_project,
    entry_not_found,
    project_not_found,
)


def resolve_project(projects: Iterable[Project], reference: str) -> Project:
    """Resolve a project by full ID, unique ID prefix or exact name.

    Args:
        projects: Projects to search
        reference: Project ID, ID prefix or name

    Returns:
        The matching project

    Raises:
        NotFoundError: If nothing matches
        ConflictError: If an ID prefix or name matches more than one project
    """
    projects = list(projects)
    reference = reference.strip()

    for project in projects:
        if project.id == reference:
            return project

    by_prefix = [p for p in projects if reference and p.id.startswith(reference)]
    if len(by_prefix) == 1:
        return by_prefix[0]
    if len(by_prefix) > 1:
        raise ConflictError(ambiguous_project(reference, len(by_prefix)))

    by_name = [p for p in projects if p.name == reference]
    if len(by_name) == 1:
        return by_name[0]
    if len(by_name) > 1:
        raise ConflictError(ambiguous_project(reference, len(by_name)))

    raise NotFoundError(project_not_found(reference))


def resolve_entry_id(entries: Iterable, reference: str, kind: str) -> str:
    """Resolve a line item, payment, advance or expense by ID or unique prefix.

    Raises:
        NotFoundError: If no entry matches
        ConflictError: If the prefix matches several entries
    """
    reference = reference.strip()
    ids = [entry.id for entry in entries]
    if reference in ids:
        return reference
    matches = [entry_id for entry_id in ids if reference and entry_id.startswith(reference)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise ConflictError(f"{kind.capitalize()} reference '{reference}' matches {len(matches)} entries")
    raise NotFoundError(entry_not_found(kind, reference))
