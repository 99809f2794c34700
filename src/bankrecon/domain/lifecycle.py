"""Statement import lifecycle.

Owns the statement import aggregates (import record + lines) from the moment
a file is decoded until the import is confirmed or deleted:

    processing -> error | pending | concluded
    pending <-> concluded          (manual link / unlink)
    pending | concluded -> confirmed
    any -> deleted                 (reverses every reconciliation)

Unconfirmed imports live only in memory. Confirmed imports are persisted
with their lines and are rebuilt from the store on demand.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, datetime, UTC
from typing import Optional

from bankrecon.database.base import Database
from bankrecon.domain.account import AccountService
from bankrecon.domain.decoder import StatementDecoder, detect_file_type
from bankrecon.domain.entities import (
    FileType,
    ImportSession,
    ImportStatus,
    LedgerEntry,
    StatementImport,
    StatementLine,
)
from bankrecon.domain.errors import (
    ConflictError,
    DecodeError,
    DomainError,
    EmptyPeriodError,
    MismatchError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    account_not_found,
    import_not_found,
    import_not_under_review,
)
from bankrecon.domain.ledger import LedgerService
from bankrecon.domain.linker import ManualLinker
from bankrecon.domain.matcher import match_movements
from bankrecon.domain.pdf_extractor import PdfExtractor
from bankrecon.domain.period import filter_movements
from bankrecon.domain.validator import validate_account_identity

logger = logging.getLogger(__name__)


@dataclass
class ConfirmResult:
    """Outcome of confirming an import."""

    statement_import: StatementImport
    created: int
    failed: int
    errors: list[str] = field(default_factory=list)


@dataclass
class DeleteResult:
    """Outcome of deleting an import."""

    import_id: str
    requested: int
    unreconciled: int
    record_deleted: bool


class ImportLifecycleService:
    """Service running statement imports from upload to confirm or delete."""

    def __init__(
        self,
        db: Database,
        pdf_extractor: Optional[PdfExtractor] = None,
        decoder: Optional[StatementDecoder] = None,
    ):
        """Initialize lifecycle service.

        Args:
            db: Database instance (the ledger store)
            pdf_extractor: Collaborator for PDF statements
            decoder: Decoder to use instead of one built around pdf_extractor
        """
        self.db = db
        self.decoder = decoder or StatementDecoder(pdf_extractor)
        self.account_service = AccountService(db)
        self.ledger_service = LedgerService(db)
        self.linker = ManualLinker(db)
        self._sessions: dict[str, ImportSession] = {}

    def start_import(
        self,
        raw_bytes: bytes,
        file_name: str,
        account_id: int,
        month: int,
        year: int,
        file_type: Optional[FileType | str] = None,
    ) -> ImportSession:
        """Decode, validate, filter and auto-match a statement file.

        Args:
            raw_bytes: Statement file content
            file_name: Original file name
            account_id: Account the statement should belong to
            month: Reporting month (1-12)
            year: Reporting year
            file_type: "ofx" or "pdf"; inferred from file_name when omitted

        Returns:
            The new session, in pending or concluded status

        Raises:
            NotFoundError: If the account does not exist (no import is created)
            ValidationError: If month or year is out of range (no import is created)
            DecodeError, MismatchError, EmptyPeriodError: The import is kept
                in error status with the message recorded

        Any failure after the import is created leaves it in error status.
        Error sessions stay available through get_session() and
        list_sessions() so the message can be shown; call delete() to
        release them.
        """
        account = self.account_service.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month {month} (use 1-12)")
        if not MINYEAR <= year <= MAXYEAR:
            raise ValidationError(f"Invalid year {year} (use {MINYEAR}-{MAXYEAR})")

        if file_type is None:
            file_type = detect_file_type(file_name)
        else:
            try:
                file_type = FileType(file_type)
            except ValueError:
                raise DecodeError(f"Unsupported statement file type '{file_type}'")

        statement_import = StatementImport(
            id=uuid.uuid4().hex,
            account_id=account_id,
            file_name=file_name,
            file_type=file_type,
            created_at=datetime.now(UTC),
        )
        session = ImportSession(statement_import=statement_import)
        self._sessions[session.id] = session
        logger.info(f"Import {session.id}: processing {file_name} for account {account_id}")

        try:
            decoded = self.decoder.decode(raw_bytes, file_type, file_name)
            validate_account_identity(decoded.bank_meta, account)
            movements = filter_movements(decoded.movements, month, year)
            if not movements:
                raise EmptyPeriodError(month, year)
        except (DecodeError, MismatchError, EmptyPeriodError) as e:
            statement_import.status = ImportStatus.ERROR
            statement_import.error_message = str(e)
            logger.warning(f"Import {session.id}: {e}")
            raise
        except Exception as e:
            statement_import.status = ImportStatus.ERROR
            statement_import.error_message = f"Unexpected error while reading statement: {e}"
            logger.exception(f"Import {session.id}: unexpected failure")
            raise

        # Deterministic order regardless of how the file lists movements
        movements = sorted(movements, key=lambda m: m.date)
        pool = self.db.list_unreconciled(account_id)
        result = match_movements(movements, pool, session.id)
        session.lines = result.lines
        self._commit_auto_matches(session)

        statement_import.total_movements = len(session.lines)
        statement_import.reconciled_count = sum(1 for line in session.lines if line.reconciled)
        statement_import.period_start = session.lines[0].date
        statement_import.period_end = session.lines[-1].date
        statement_import.refresh_status()

        logger.info(
            f"Import {session.id}: {statement_import.total_movements} movements, "
            f"{statement_import.reconciled_count} matched automatically "
            f"({statement_import.status.value})"
        )
        return session

    def _commit_auto_matches(self, session: ImportSession) -> None:
        """Reconcile matched entries on the store; revert lines it rejects."""
        matched = session.linked_entry_ids()
        if not matched:
            return

        try:
            flipped = set(self.db.reconcile_entries(matched))
        except PersistenceError as e:
            logger.error(f"Import {session.id}: could not reconcile auto-matches: {e}")
            flipped = set()

        for line in session.lines:
            if line.reconciled and line.linked_entry_id not in flipped:
                logger.warning(
                    f"Import {session.id}: entry {line.linked_entry_id} was reconciled "
                    f"elsewhere, line {line.id} left for review"
                )
                line.unlink()

    def get_session(self, import_id: str) -> ImportSession:
        """Return the session of an import, loading confirmed ones from the store.

        Raises:
            NotFoundError: If the import is neither active nor persisted
        """
        session = self._sessions.get(import_id)
        if session is None:
            session = self.load(import_id)
        return session

    def load(self, import_id: str) -> ImportSession:
        """Rebuild the session of a persisted import from the store.

        Raises:
            NotFoundError: If no such import was persisted
        """
        record = self.db.get_import_record(import_id)
        if record is None:
            raise NotFoundError(import_not_found(import_id))
        session = ImportSession(
            statement_import=record,
            lines=self.db.list_import_lines(import_id),
            persisted=True,
        )
        self._sessions[import_id] = session
        return session

    def list_sessions(self) -> list[ImportSession]:
        """Return the sessions currently held in memory, oldest first."""
        return list(self._sessions.values())

    def list_imports(self, account_id: Optional[int] = None) -> list[StatementImport]:
        """Return persisted (confirmed) imports, newest first."""
        return self.db.list_import_records(account_id=account_id)

    def candidates(self, import_id: str, line_id: int) -> list[LedgerEntry]:
        """Ledger entries that can be linked to a line."""
        return self.linker.candidates(self.get_session(import_id), line_id)

    def link_existing(self, import_id: str, line_id: int, entry_id: int) -> StatementLine:
        """Link a line to an existing ledger entry."""
        return self.linker.link_existing(self.get_session(import_id), line_id, entry_id)

    def create_and_link(self, import_id: str, line_id: int) -> StatementLine:
        """Create a ledger entry for a line and link it."""
        return self.linker.create_and_link(self.get_session(import_id), line_id)

    def unlink(self, import_id: str, line_id: int) -> StatementLine:
        """Undo a line's link."""
        return self.linker.unlink(self.get_session(import_id), line_id)

    def confirm(self, import_id: str) -> ConfirmResult:
        """Commit an import.

        Every line still unreconciled gets a ledger entry created already
        reconciled. Lines are processed independently: a failure is recorded
        and the pass continues. The import is then persisted as confirmed.

        reconciled_count is recounted from the lines, so a line whose entry
        could not be created stays unreconciled and unlinked, and the count
        stays below total_movements. The failures are listed in the result.

        Raises:
            NotFoundError: If the import does not exist
            ValidationError: If the import has no account
            ConflictError: If the import is not pending or concluded
            PersistenceError: If the import record could not be saved
        """
        session = self.get_session(import_id)
        statement_import = session.statement_import

        if statement_import.account_id is None:
            raise ValidationError(f"Statement import '{import_id}' has no bank account selected")
        if not statement_import.is_under_review:
            raise ConflictError(import_not_under_review(import_id, statement_import.status.value))

        created = 0
        errors = []
        for line in session.unreconciled_lines():
            try:
                entry_id = self.ledger_service.create_entry(
                    description=line.description,
                    amount=line.amount,
                    kind=line.kind,
                    transaction_date=line.date,
                    account_id=statement_import.account_id,
                    reconciled=True,
                )
            except DomainError as e:
                errors.append(f"Line {line.id}: {e}")
                logger.warning(f"Import {import_id}: could not create entry for line {line.id}: {e}")
                continue
            line.link(entry_id)
            created += 1

        dates = [line.date for line in session.lines]
        statement_import.period_start = min(dates)
        statement_import.period_end = max(dates)
        statement_import.reconciled_count = sum(1 for line in session.lines if line.reconciled)
        statement_import.status = ImportStatus.CONFIRMED

        try:
            self.db.create_import_record(statement_import, session.lines)
        except PersistenceError:
            statement_import.refresh_status()
            logger.error(f"Import {import_id}: confirmation could not be saved")
            raise

        session.persisted = True
        logger.info(
            f"Import {import_id}: confirmed, {created} entries created, {len(errors)} failed"
        )
        return ConfirmResult(
            statement_import=statement_import,
            created=created,
            failed=len(errors),
            errors=errors,
        )

    def delete(self, import_id: str) -> DeleteResult:
        """Delete an import, unreconciling every ledger entry its lines point to.

        Entries that are already unreconciled are left alone.

        Raises:
            NotFoundError: If the import does not exist
            PersistenceError: If the store rejects the unreconcile; the
                import is kept so the operation can be retried
        """
        session = self.get_session(import_id)
        linked = session.linked_entry_ids()
        unreconciled = self.db.unreconcile_entries(linked) if linked else 0

        record_deleted = False
        if session.persisted:
            record_deleted = self.db.delete_import_record(import_id)

        self._sessions.pop(import_id, None)
        logger.info(
            f"Import {import_id}: deleted, {unreconciled} of {len(linked)} entries unreconciled"
        )
        return DeleteResult(
            import_id=import_id,
            requested=len(linked),
            unreconciled=unreconciled,
            record_deleted=record_deleted,
        )
