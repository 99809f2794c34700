"""Main CLI entry point."""

import logging

import click
from bankrecon.database.factories import create_sqlite_database

# Import and register all commands at module level
from bankrecon.cli.commands import account, entry, statement


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BANKRECON_DB_PATH environment variable)",
    envvar="BANKRECON_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Bankrecon - Bank statement reconciliation.

    Import OFX or PDF bank statements, match their movements against the
    ledger, review what is left and confirm or reverse the import.
    """
    ctx.ensure_object(dict)
    logging.getLogger("bankrecon").setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
entry.register_commands(cli)
statement.register_commands(cli)


def main():
    """Main entry point for CLI."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cli()


if __name__ == "__main__":
    main()
