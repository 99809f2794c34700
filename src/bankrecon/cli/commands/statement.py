"""Statement import and review commands."""

from pathlib import Path

import click
from bankrecon.cli.account_resolution import resolve_account_or_exit
from bankrecon.cli.error_handling import handle_domain_error
from bankrecon.domain.account import AccountService
from bankrecon.domain.entities import Direction, FileType, ImportSession, StatementLine
from bankrecon.domain.errors import DomainError, LinkError, OrphanedEntryError
from bankrecon.domain.lifecycle import ImportLifecycleService
from bankrecon.domain.pdf_extractor import create_pdf_extractor

MAX_CANDIDATES = 9


@click.group("statement")
def statement_group():
    """Import, review and reverse bank statements."""
    pass


def _format_line(line: StatementLine) -> str:
    sign = "+" if line.direction == Direction.CREDIT else "-"
    link = f"entry {line.linked_entry_id}" if line.reconciled else "unreconciled"
    return (
        f"{line.id:4d} | {line.date.isoformat()} | {sign}{line.amount:11.2f} | "
        f"{link:14s} | {line.description}"
    )


def _echo_session(session: ImportSession) -> None:
    statement_import = session.statement_import
    period = ""
    if statement_import.period_start and statement_import.period_end:
        period = f" | {statement_import.period_start} to {statement_import.period_end}"
    click.echo(f"\nImport {statement_import.id} ({statement_import.file_name})")
    click.echo(
        f"Status: {statement_import.status.value} | "
        f"Reconciled: {statement_import.reconciled_count}/{statement_import.total_movements}{period}"
    )
    click.echo("-" * 80)
    for line in session.lines:
        click.echo(_format_line(line))


def _review_line(lifecycle: ImportLifecycleService, session: ImportSession, line: StatementLine) -> None:
    """Ask the operator what to do with one unreconciled line."""
    candidates = lifecycle.candidates(session.id, line.id)[:MAX_CANDIDATES]

    click.echo(f"\nLine {_format_line(line)}")
    if candidates:
        for number, entry in enumerate(candidates, start=1):
            click.echo(
                f"  [{number}] entry {entry.id}: {entry.transaction_date.isoformat()} "
                f"{entry.amount:.2f} {entry.description}"
            )
    else:
        click.echo("  No candidate ledger entries.")

    while True:
        choice = click.prompt(
            "Link [number], (c)reate entry or (s)kip",
            default="s",
            show_default=True,
        ).strip().lower()

        if choice == "s":
            return
        try:
            if choice == "c":
                lifecycle.create_and_link(session.id, line.id)
                click.echo(f"  Created entry {line.linked_entry_id} and linked it")
                return
            if choice.isdigit() and 1 <= int(choice) <= len(candidates):
                entry = candidates[int(choice) - 1]
                lifecycle.link_existing(session.id, line.id, entry.id)
                click.echo(f"  Linked to entry {entry.id}")
                return
        except OrphanedEntryError as e:
            click.echo(f"  Warning: {e}", err=True)
            return
        except LinkError as e:
            click.echo(f"  Error: {e}", err=True)
            continue
        click.echo("  Invalid choice.")


@statement_group.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID the statement belongs to")
@click.option("--month", required=True, type=click.IntRange(1, 12), help="Reporting month (1-12)")
@click.option("--year", required=True, type=int, help="Reporting year")
@click.option(
    "--type",
    "file_type",
    type=click.Choice([file_type.value for file_type in FileType]),
    help="Statement file type (inferred from the extension if omitted)",
)
@click.option("--yes", "-y", is_flag=True, help="Skip the review and confirm right away")
@click.option("--pdf-url", envvar="BANKRECON_PDF_EXTRACTOR_URL", help="PDF extraction endpoint")
@click.option("--pdf-token", envvar="BANKRECON_PDF_EXTRACTOR_TOKEN", help="PDF extraction bearer token")
@click.option(
    "--pdf-timeout",
    envvar="BANKRECON_PDF_EXTRACTOR_TIMEOUT",
    type=float,
    help="PDF extraction timeout in seconds",
)
@click.pass_context
def import_statement(
    ctx,
    statement_file: str,
    account: str,
    month: int,
    year: int,
    file_type: str | None,
    yes: bool,
    pdf_url: str | None,
    pdf_token: str | None,
    pdf_timeout: float | None,
):
    """Import a bank statement and reconcile it against the ledger.

    Movements outside MONTH/YEAR are ignored. Matching ledger entries are
    reconciled automatically; the rest can be linked or created during the
    review. Declining the final confirmation reverses every reconciliation.

    Examples:
        bankrecon statement import extrato.ofx --account "Itau PJ" --month 2 --year 2024
        bankrecon statement import extrato.pdf --account 1 --month 2 --year 2024 --yes
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, account_service, account)

    lifecycle = ImportLifecycleService(
        db,
        pdf_extractor=create_pdf_extractor(url=pdf_url, token=pdf_token, timeout=pdf_timeout),
    )

    raw_bytes = Path(statement_file).read_bytes()
    try:
        session = lifecycle.start_import(
            raw_bytes,
            file_name=Path(statement_file).name,
            account_id=account_id,
            month=month,
            year=year,
            file_type=file_type,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_session(session)

    if not yes:
        for line in session.unreconciled_lines():
            _review_line(lifecycle, session, line)
        _echo_session(session)

        if not click.confirm("\nConfirm this import?", default=True):
            result = lifecycle.delete(session.id)
            click.echo(
                f"Import discarded: {result.unreconciled} of {result.requested} "
                f"ledger entries unreconciled"
            )
            return

    try:
        result = lifecycle.confirm(session.id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    statement_import = result.statement_import
    click.echo(f"\nImport {statement_import.id} confirmed:")
    click.echo(f"  Matched: {statement_import.reconciled_count - result.created}")
    click.echo(f"  Created: {result.created} entries")
    if result.errors:
        click.echo(f"  Failed: {result.failed}")
        for error in result.errors:
            click.echo(f"    {error}", err=True)


@statement_group.command("list")
@click.option("--account", help="Account name or ID")
@click.pass_context
def list_imports(ctx, account: str | None):
    """List confirmed statement imports."""
    db = ctx.obj["db"]
    account_service = AccountService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    imports = ImportLifecycleService(db).list_imports(account_id=account_id)
    if not imports:
        click.echo("No statement imports found.")
        return

    click.echo("\nStatement imports:")
    click.echo("-" * 80)
    for statement_import in imports:
        click.echo(
            f"{statement_import.id} | {statement_import.file_type.value:3s} | "
            f"{statement_import.period_start} to {statement_import.period_end} | "
            f"{statement_import.reconciled_count}/{statement_import.total_movements} | "
            f"{statement_import.file_name}"
        )


@statement_group.command("show")
@click.argument("import_id")
@click.pass_context
def show_import(ctx, import_id: str):
    """Show a confirmed statement import and its lines."""
    db = ctx.obj["db"]
    lifecycle = ImportLifecycleService(db)

    try:
        session = lifecycle.load(import_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_session(session)


@statement_group.command("delete")
@click.argument("import_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_import(ctx, import_id: str, yes: bool):
    """Delete a statement import, unreconciling the entries it linked."""
    db = ctx.obj["db"]
    lifecycle = ImportLifecycleService(db)

    try:
        session = lifecycle.load(import_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete import {import_id} ({session.statement_import.file_name})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        result = lifecycle.delete(import_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Deleted import {import_id}: {result.unreconciled} of {result.requested} "
        f"ledger entries unreconciled"
    )


def register_commands(cli):
    """Register statement commands with main CLI."""
    cli.add_command(statement_group)
