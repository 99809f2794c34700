"""Shared pytest fixtures for bankrecon tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from bankrecon.database.factories import create_sqlite_database
from bankrecon.domain.account import AccountService
from bankrecon.domain.entities import Direction, EntryKind, StatementMovement
from bankrecon.domain.ledger import LedgerService
from bankrecon.domain.lifecycle import ImportLifecycleService
from bankrecon.domain.pdf_extractor import PdfExtractor


OFX_HEADER = """OFXHEADER:100
DATA:OFXSGML
VERSION:102
SECURITY:NONE
ENCODING:USASCII
CHARSET:1252
COMPRESSION:NONE
OLDFILEUID:NONE
NEWFILEUID:NONE

"""


def build_ofx(transactions, acct_id="12345-6", branch_id="0001", bank_id="341"):
    """Build an OFX bank statement.

    Args:
        transactions: List of (YYYYMMDD, signed amount string, memo) tuples
    """
    body = []
    for index, (posted, amount, memo) in enumerate(transactions, start=1):
        trntype = "DEBIT" if amount.startswith("-") else "CREDIT"
        body.append(
            "<STMTTRN>"
            f"<TRNTYPE>{trntype}</TRNTYPE>"
            f"<DTPOSTED>{posted}</DTPOSTED>"
            f"<TRNAMT>{amount}</TRNAMT>"
            f"<FITID>{index:06d}</FITID>"
            f"<MEMO>{memo}</MEMO>"
            "</STMTTRN>\n"
        )

    dates = sorted(posted for posted, _, _ in transactions) or ["20240101"]
    return (
        OFX_HEADER
        + "<OFX>\n"
        "<SIGNONMSGSRSV1><SONRS>"
        "<STATUS><CODE>0</CODE><SEVERITY>INFO</SEVERITY></STATUS>"
        "<DTSERVER>20240301</DTSERVER><LANGUAGE>POR</LANGUAGE>"
        "</SONRS></SIGNONMSGSRSV1>\n"
        "<BANKMSGSRSV1><STMTTRNRS><TRNUID>1</TRNUID>"
        "<STATUS><CODE>0</CODE><SEVERITY>INFO</SEVERITY></STATUS>\n"
        "<STMTRS><CURDEF>BRL</CURDEF>\n"
        "<BANKACCTFROM>"
        f"<BANKID>{bank_id}</BANKID>"
        f"<BRANCHID>{branch_id}</BRANCHID>"
        f"<ACCTID>{acct_id}</ACCTID>"
        "<ACCTTYPE>CHECKING</ACCTTYPE>"
        "</BANKACCTFROM>\n"
        f"<BANKTRANLIST><DTSTART>{dates[0]}</DTSTART><DTEND>{dates[-1]}</DTEND>\n"
        + "".join(body)
        + "</BANKTRANLIST>\n"
        f"<LEDGERBAL><BALAMT>1000.00</BALAMT><DTASOF>{dates[-1]}</DTASOF></LEDGERBAL>\n"
        "</STMTRS></STMTTRNRS></BANKMSGSRSV1>\n"
        "</OFX>\n"
    ).encode("ascii")


def movement(day, amount, direction=Direction.DEBIT, description="Movement", month=2, year=2024):
    """Build a StatementMovement dated in the given month."""
    return StatementMovement(
        date=date(year, month, day),
        description=description,
        amount=Decimal(amount),
        direction=direction,
    )


class FakePdfExtractor(PdfExtractor):
    """PdfExtractor returning a canned payload."""

    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def extract(self, file_bytes, file_name="statement.pdf"):
        self.calls.append((file_bytes, file_name))
        return self.payload


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def lifecycle(temp_db):
    """Create an ImportLifecycleService with a temporary database."""
    return ImportLifecycleService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account matching the identifiers of build_ofx()."""
    account_id = account_service.create_account(
        name="Itau PJ",
        bank_name="Itau",
        account_number="12345-6",
        branch_number="0001",
        tax_id="12.345.678/0001-90",
    )
    return account_service.get_account(account_id)


@pytest.fixture
def add_entry(ledger_service, sample_account):
    """Return a helper creating ledger entries on the sample account."""

    def _add(day, amount, kind=EntryKind.EXPENSE, description="Entry", month=2, year=2024, **kwargs):
        kwargs.setdefault("account_id", sample_account.id)
        return ledger_service.create_entry(
            description=description,
            amount=Decimal(amount),
            kind=kind,
            transaction_date=date(year, month, day),
            **kwargs,
        )

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
