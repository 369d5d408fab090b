"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as an ambiguous project reference."""


def project_not_found(project_ref: str) -> str:
    """Return message for missing project."""
    return f"Project '{project_ref}' not found"


def ambiguous_project(project_ref: str, count: int) -> str:
    """Return message when a project reference matches several projects."""
    return f"Project reference '{project_ref}' matches {count} projects; use a longer id"


def budget_item_not_found(category: str, item_id: str) -> str:
    """Return message for missing budget item."""
    return f"Budget item '{item_id}' not found in category '{category}'"


def entry_not_found(kind: str, entry_id: str) -> str:
    """Return message for a missing payment, advance or expense."""
    return f"{kind.capitalize()} '{entry_id}' not found"


def percent_out_of_range(field: str, value) -> str:
    """Return message for a percentage outside 0-100."""
    return f"{field} must be between 0 and 100, got {value}"


def unknown_category(category: str) -> str:
    """Return message for a budget category outside the fixed set."""
    return (
        f"Unknown budget category '{category}'. "
        "Expected one of: registration, accommodation, transfer, sponsorship, other"
    )
