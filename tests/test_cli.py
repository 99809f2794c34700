"""Tests for CLI commands."""

import pytest
from bankrecon.cli.main import cli
from bankrecon.domain.entities import ImportStatus

from conftest import build_ofx


FEBRUARY = [
    ("20240205", "-150.00", "Energy bill"),
    ("20240210", "-89.90", "Internet"),
    ("20240215", "2500.00", "Customer payment"),
]


def _invoke(cli_runner, temp_db, args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


@pytest.fixture
def ofx_file(tmp_path):
    path = tmp_path / "feb.ofx"
    path.write_bytes(build_ofx(FEBRUARY))
    return path


@pytest.fixture
def cli_account(cli_runner, temp_db):
    result = _invoke(
        cli_runner,
        temp_db,
        ["account", "create", "Itau PJ", "--bank", "Itau", "--number", "12345-6", "--branch", "0001"],
    )
    assert result.exit_code == 0
    return "Itau PJ"


def _add_entry(cli_runner, temp_db, date_str, amount, kind, description):
    result = _invoke(
        cli_runner,
        temp_db,
        [
            "entry", "add",
            "--account", "Itau PJ",
            "--date", date_str,
            "--amount", amount,
            "--kind", kind,
            "--description", description,
        ],
    )
    assert result.exit_code == 0, result.output
    return result


class TestAccountCommands:
    """Tests for account commands."""

    def test_account_create_without_bank(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, ["account", "create", "Caixa"])

        assert result.exit_code == 0
        assert "Created account 'Caixa'" in result.output
        assert "Bank name set to 'Caixa'" in result.output

    def test_account_create_duplicate(self, cli_runner, temp_db, cli_account):
        result = _invoke(cli_runner, temp_db, ["account", "create", "Itau PJ"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_account_list(self, cli_runner, temp_db, cli_account):
        result = _invoke(cli_runner, temp_db, ["account", "list"])

        assert result.exit_code == 0
        assert "Itau PJ" in result.output
        assert "12345-6" in result.output

    def test_account_list_empty(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, ["account", "list"])

        assert result.exit_code == 0
        assert "No accounts found" in result.output


class TestEntryCommands:
    """Tests for ledger entry commands."""

    def test_entry_add_and_list(self, cli_runner, temp_db, cli_account):
        result = _add_entry(cli_runner, temp_db, "05/02/2024", "R$ 150,00", "expense", "Energy")
        assert "Created expense entry" in result.output

        result = _invoke(cli_runner, temp_db, ["entry", "list", "--account", "Itau PJ"])

        assert result.exit_code == 0
        assert "2024-02-05" in result.output
        assert "150.00" in result.output
        assert "Energy" in result.output

    def test_entry_add_negative_amount(self, cli_runner, temp_db, cli_account):
        result = _invoke(
            cli_runner,
            temp_db,
            ["entry", "add", "--account", "Itau PJ", "--date", "2024-02-05", "--amount", "-10", "--kind", "expense"],
        )

        assert result.exit_code == 1
        assert "must not be negative" in result.output

    def test_entry_add_unknown_account(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner,
            temp_db,
            ["entry", "add", "--account", "Nope", "--date", "2024-02-05", "--amount", "10", "--kind", "income"],
        )

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_entry_list_empty(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, ["entry", "list", "--unreconciled"])

        assert result.exit_code == 0
        assert "No ledger entries found" in result.output


class TestStatementCommands:
    """Tests for statement commands."""

    def test_import_with_yes_confirms(self, cli_runner, temp_db, cli_account, ofx_file):
        _add_entry(cli_runner, temp_db, "2024-02-06", "150.00", "expense", "Energy")

        result = _invoke(
            cli_runner,
            temp_db,
            ["statement", "import", str(ofx_file), "--account", "Itau PJ", "--month", "2", "--year", "2024", "--yes"],
        )

        assert result.exit_code == 0, result.output
        assert "Status: pending | Reconciled: 1/3" in result.output
        assert "Matched: 1" in result.output
        assert "Created: 2 entries" in result.output

        [record] = temp_db.list_import_records()
        assert record.status == ImportStatus.CONFIRMED
        assert record.reconciled_count == 3
        assert all(entry.reconciled for entry in temp_db.list_ledger_entries())

    def test_import_interactive_review(self, cli_runner, temp_db, cli_account, ofx_file):
        _add_entry(cli_runner, temp_db, "2024-02-05", "150.00", "expense", "Energy")
        _add_entry(cli_runner, temp_db, "2024-02-25", "89.90", "expense", "Internet")

        # Line 2: link candidate 1; line 3: create an entry; then confirm
        result = _invoke(
            cli_runner,
            temp_db,
            ["statement", "import", str(ofx_file), "--account", "Itau PJ", "--month", "2", "--year", "2024"],
            input="1\nc\ny\n",
        )

        assert result.exit_code == 0, result.output
        assert "Linked to entry 2" in result.output
        assert "Status: concluded | Reconciled: 3/3" in result.output
        assert "Created: 0 entries" in result.output
        assert len(temp_db.list_ledger_entries()) == 3

    def test_import_declined_reverses_matches(self, cli_runner, temp_db, cli_account, ofx_file):
        _add_entry(cli_runner, temp_db, "2024-02-05", "150.00", "expense", "Energy")

        result = _invoke(
            cli_runner,
            temp_db,
            ["statement", "import", str(ofx_file), "--account", "Itau PJ", "--month", "2", "--year", "2024"],
            input="s\ns\nn\n",
        )

        assert result.exit_code == 0, result.output
        assert "Import discarded: 1 of 1 ledger entries unreconciled" in result.output
        assert temp_db.list_import_records() == []
        assert not any(entry.reconciled for entry in temp_db.list_ledger_entries())

    def test_import_mismatch(self, cli_runner, temp_db, cli_account, tmp_path):
        path = tmp_path / "other.ofx"
        path.write_bytes(build_ofx(FEBRUARY, acct_id="99999-9"))

        result = _invoke(
            cli_runner,
            temp_db,
            ["statement", "import", str(path), "--account", "Itau PJ", "--month", "2", "--year", "2024", "--yes"],
        )

        assert result.exit_code == 1
        assert "does not match selected account" in result.output

    def test_import_empty_period(self, cli_runner, temp_db, cli_account, ofx_file):
        result = _invoke(
            cli_runner,
            temp_db,
            ["statement", "import", str(ofx_file), "--account", "Itau PJ", "--month", "3", "--year", "2024", "--yes"],
        )

        assert result.exit_code == 1
        assert "no movements for 03/2024" in result.output

    def test_import_pdf_without_extractor(self, cli_runner, temp_db, cli_account, tmp_path, monkeypatch):
        monkeypatch.delenv("BANKRECON_PDF_EXTRACTOR_URL", raising=False)
        path = tmp_path / "feb.pdf"
        path.write_bytes(b"%PDF-1.4")

        result = _invoke(
            cli_runner,
            temp_db,
            ["statement", "import", str(path), "--account", "Itau PJ", "--month", "2", "--year", "2024", "--yes"],
        )

        assert result.exit_code == 1
        assert "BANKRECON_PDF_EXTRACTOR_URL" in result.output

    def test_list_show_delete(self, cli_runner, temp_db, cli_account, ofx_file):
        _invoke(
            cli_runner,
            temp_db,
            ["statement", "import", str(ofx_file), "--account", "Itau PJ", "--month", "2", "--year", "2024", "--yes"],
        )
        [record] = temp_db.list_import_records()

        result = _invoke(cli_runner, temp_db, ["statement", "list", "--account", "Itau PJ"])
        assert result.exit_code == 0
        assert record.id in result.output

        result = _invoke(cli_runner, temp_db, ["statement", "show", record.id])
        assert result.exit_code == 0
        assert "Status: confirmed | Reconciled: 3/3" in result.output
        assert "Customer payment" in result.output

        result = _invoke(cli_runner, temp_db, ["statement", "delete", record.id], input="y\n")
        assert result.exit_code == 0
        assert "3 of 3 ledger entries unreconciled" in result.output

        result = _invoke(cli_runner, temp_db, ["statement", "list"])
        assert "No statement imports found" in result.output

    def test_show_unknown_import(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, ["statement", "show", "missing"])

        assert result.exit_code == 1
        assert "not found" in result.output
