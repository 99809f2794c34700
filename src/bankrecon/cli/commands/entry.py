"""Ledger entry commands."""

import click
from bankrecon.cli.account_resolution import resolve_account_or_exit
from bankrecon.cli.error_handling import handle_domain_error
from bankrecon.domain.account import AccountService
from bankrecon.domain.entities import EntryKind
from bankrecon.domain.errors import DomainError
from bankrecon.domain.ledger import LedgerService
from bankrecon.utils.amount_parser import parse_amount
from bankrecon.utils.date_parser import parse_date


@click.group("entry")
def entry_group():
    """Manage ledger entries (income and expenses)."""
    pass


@entry_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--date", "date_str", required=True, help="Entry date (YYYY-MM-DD, DD/MM/YYYY, 'today', 'yesterday')")
@click.option("--amount", required=True, help="Unsigned amount (e.g., 123.45 or 'R$ 1.234,56')")
@click.option(
    "--kind",
    required=True,
    type=click.Choice([kind.value for kind in EntryKind]),
    help="Entry kind",
)
@click.option("--description", default="", help="Entry description")
@click.pass_context
def add_entry(ctx, account: str, date_str: str, amount: str, kind: str, description: str):
    """Add a ledger entry.

    Examples:
        bankrecon entry add --account "Itau PJ" --date 2024-02-10 --amount 1500 --kind income
        bankrecon entry add --account 1 --date 15/02/2024 --amount "R$ 89,90" --kind expense --description "Internet"
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    ledger_service = LedgerService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)

    try:
        entry_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        entry_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        entry_id = ledger_service.create_entry(
            description=description,
            amount=entry_amount,
            kind=kind,
            transaction_date=entry_date,
            account_id=account_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {kind} entry {entry_id}: {entry_date} {entry_amount:.2f} {description}")


@entry_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--unreconciled", is_flag=True, help="Show only entries not yet reconciled")
@click.pass_context
def list_entries(ctx, account: str | None, unreconciled: bool):
    """List ledger entries."""
    db = ctx.obj["db"]
    account_service = AccountService(db)
    ledger_service = LedgerService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    entries = ledger_service.list_entries(account_id=account_id, unreconciled_only=unreconciled)
    if not entries:
        click.echo("No ledger entries found.")
        return

    click.echo(f"\n{'ID':>5} | {'Date':10} | {'Kind':7} | {'Amount':>12} | {'Rec':3} | Description")
    click.echo("-" * 80)
    for entry in entries:
        mark = "yes" if entry.reconciled else "no"
        click.echo(
            f"{entry.id:5d} | {entry.transaction_date.isoformat()} | {entry.kind.value:7} | "
            f"{entry.amount:12.2f} | {mark:3} | {entry.description}"
        )


def register_commands(cli):
    """Register ledger entry commands with main CLI."""
    cli.add_command(entry_group)
