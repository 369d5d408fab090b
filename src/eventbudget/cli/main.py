"""Main CLI entry point."""

import click
from eventbudget.app.workspace import ProjectWorkspace
from eventbudget.database.factories import open_project_store
from eventbudget.logging_config import configure_logging

# Import and register all commands at module level
from eventbudget.cli.commands import (
    project,
    item,
    vat,
    payment,
    advance,
    expense,
    summary,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides EVENTBUDGET_DB_PATH environment variable)",
    envvar="EVENTBUDGET_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL of a shared database (overrides --db-path)",
    envvar="EVENTBUDGET_DATABASE_URL",
)
@click.option(
    "--json-path",
    type=click.Path(),
    help="Path to the local project file used with --local or when the database is unavailable",
    envvar="EVENTBUDGET_JSON_PATH",
)
@click.option("--local", is_flag=True, help="Keep projects in the local JSON file only")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    database_url: str | None,
    json_path: str | None,
    local: bool,
    verbose: bool,
):
    """Eventbudget - Budget and expense tracking for event projects.

    Itemize conference and sponsorship budgets, record payments, supplier
    advances and expenses, and review service fee, VAT, profit and cash flow.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Open the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = open_project_store(
            database_url=database_url,
            database_path=db_path,
            json_path=json_path,
            prefer_local=local,
        )
        workspace = ProjectWorkspace(store)
        workspace.load()
        ctx.obj["store"] = store
        ctx.obj["workspace"] = workspace

        def _shutdown():
            workspace.close()
            store.disconnect()

        ctx.call_on_close(_shutdown)


# Register all commands
project.register_commands(cli)
item.register_commands(cli)
vat.register_commands(cli)
payment.register_commands(cli)
advance.register_commands(cli)
expense.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
