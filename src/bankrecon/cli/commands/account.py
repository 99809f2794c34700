"""Account management commands."""

import click
from bankrecon.cli.error_handling import handle_domain_error
from bankrecon.domain.account import AccountService
from bankrecon.domain.errors import DomainError


@click.group("account")
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--bank", help="Bank name (defaults to account name if not provided)")
@click.option("--number", "account_number", help="Account number, as printed by the bank")
@click.option("--branch", "branch_number", help="Branch (agency) number")
@click.option("--tax-id", help="Holder's tax id (CNPJ/CPF)")
@click.pass_context
def create_account(
    ctx,
    name: str,
    bank: str | None,
    account_number: str | None,
    branch_number: str | None,
    tax_id: str | None,
):
    """Create a new account.

    Account number, branch and tax id are compared with the identifiers
    found in imported statements; leave them out to skip that check.

    Examples:
        bankrecon account create "Itau PJ" --number 12345-6 --branch 0001
        bankrecon account create "Caixa" --bank "Caixa Economica" --tax-id 12.345.678/0001-90
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    bank_name = bank if bank is not None else name

    try:
        account_id = service.create_account(
            name=name,
            bank_name=bank_name,
            account_number=account_number,
            branch_number=branch_number,
            tax_id=tax_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account '{name}' (ID: {account_id})")
    if bank is None:
        click.echo(f"Bank name set to '{bank_name}'")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | Bank: {acc.bank_name:15s} | "
            f"Branch: {acc.branch_number or '-':8s} | Number: {acc.account_number or '-'}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group)
