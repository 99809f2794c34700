"""Manual linking of statement lines to ledger entries."""

import logging

from bankrecon.database.base import Database
from bankrecon.domain.entities import ImportSession, LedgerEntry, StatementLine
from bankrecon.domain.errors import (
    ConflictError,
    DomainError,
    LinkError,
    NotFoundError,
    OrphanedEntryError,
    PersistenceError,
    entry_not_found,
    import_not_under_review,
    line_not_found,
)
from bankrecon.domain.ledger import LedgerService

logger = logging.getLogger(__name__)


class ManualLinker:
    """Service for the operator's review actions on an import session."""

    def __init__(self, db: Database):
        """Initialize manual linker.

        Args:
            db: Database instance
        """
        self.db = db
        self.ledger_service = LedgerService(db)

    def candidates(self, session: ImportSession, line_id: int) -> list[LedgerEntry]:
        """List ledger entries the operator may link to a line.

        Entries are re-read from the store and restricted to the line's kind.
        Entries already linked by other lines of the session are left out.
        Closest amount comes first, then closest date.

        Raises:
            NotFoundError: If the line does not exist
        """
        line = self._get_line(session, line_id)
        already_linked = set(session.linked_entry_ids())
        pool = self.db.list_unreconciled(session.statement_import.account_id)
        candidates = [
            entry
            for entry in pool
            if entry.kind == line.kind and entry.id not in already_linked
        ]
        return sorted(
            candidates,
            key=lambda entry: (
                abs(entry.amount - line.amount),
                abs((entry.transaction_date - line.date).days),
            ),
        )

    def link_existing(self, session: ImportSession, line_id: int, entry_id: int) -> StatementLine:
        """Link a line to an existing ledger entry.

        Returns:
            The updated line

        Raises:
            NotFoundError: If the line does not exist
            ConflictError: If the import is not under review
            LinkError: If the store rejects the reconcile; nothing changes
        """
        line = self._get_reviewable_line(session, line_id)
        if line.reconciled:
            raise LinkError(f"Line {line.id} is already reconciled")
        if entry_id in session.linked_entry_ids():
            raise LinkError(f"Ledger entry {entry_id} is already linked to another line")

        entry = self.db.get_ledger_entry(entry_id)
        if entry is None:
            raise LinkError(entry_not_found(entry_id))
        if entry.kind != line.kind:
            raise LinkError(
                f"Ledger entry {entry_id} is {entry.kind.value}, line {line.id} needs {line.kind.value}"
            )

        try:
            reconciled = self.db.reconcile_entry(entry_id)
        except PersistenceError as e:
            raise LinkError(f"Could not reconcile ledger entry {entry_id}: {e}") from e
        if not reconciled:
            raise LinkError(f"Ledger entry {entry_id} is already reconciled")

        self._mark_linked(session, line, entry_id)
        return line

    def create_and_link(self, session: ImportSession, line_id: int) -> StatementLine:
        """Create a ledger entry from a line and link the two.

        Returns:
            The updated line

        Raises:
            NotFoundError: If the line does not exist
            ConflictError: If the import is not under review
            LinkError: If the entry could not be created
            OrphanedEntryError: If the entry was created but not reconciled
        """
        line = self._get_reviewable_line(session, line_id)
        if line.reconciled:
            raise LinkError(f"Line {line.id} is already reconciled")

        try:
            entry_id = self.ledger_service.create_entry(
                description=line.description,
                amount=line.amount,
                kind=line.kind,
                transaction_date=line.date,
                account_id=session.statement_import.account_id,
            )
        except DomainError as e:
            raise LinkError(f"Could not create ledger entry for line {line.id}: {e}") from e

        try:
            reconciled = self.db.reconcile_entry(entry_id)
        except PersistenceError as e:
            logger.error(f"Ledger entry {entry_id} created for line {line.id} but left unreconciled")
            raise OrphanedEntryError(entry_id, str(e)) from e
        if not reconciled:
            logger.error(f"Ledger entry {entry_id} created for line {line.id} but reconcile was rejected")
            raise OrphanedEntryError(entry_id, "reconcile was rejected")

        self._mark_linked(session, line, entry_id)
        return line

    def unlink(self, session: ImportSession, line_id: int) -> StatementLine:
        """Undo the link of a line, unreconciling its ledger entry.

        Raises:
            NotFoundError: If the line does not exist
            ConflictError: If the import is not under review
            LinkError: If the line is not linked or the store rejects the write
        """
        line = self._get_reviewable_line(session, line_id)
        if not line.reconciled:
            raise LinkError(f"Line {line.id} is not reconciled")

        entry_id = line.linked_entry_id
        try:
            self.db.unreconcile_entries([entry_id])
        except PersistenceError as e:
            raise LinkError(f"Could not unreconcile ledger entry {entry_id}: {e}") from e

        statement_import = session.statement_import
        line.unlink()
        statement_import.reconciled_count -= 1
        statement_import.refresh_status()
        logger.info(
            f"Import {statement_import.id}: line {line.id} unlinked from entry {entry_id} "
            f"({statement_import.reconciled_count}/{statement_import.total_movements})"
        )
        return line

    def _mark_linked(self, session: ImportSession, line: StatementLine, entry_id: int) -> None:
        statement_import = session.statement_import
        line.link(entry_id)
        statement_import.reconciled_count += 1
        statement_import.refresh_status()
        logger.info(
            f"Import {statement_import.id}: line {line.id} linked to entry {entry_id} "
            f"({statement_import.reconciled_count}/{statement_import.total_movements}, "
            f"{statement_import.status.value})"
        )

    def _get_line(self, session: ImportSession, line_id: int) -> StatementLine:
        line = session.get_line(line_id)
        if line is None:
            raise NotFoundError(line_not_found(session.id, line_id))
        return line

    def _get_reviewable_line(self, session: ImportSession, line_id: int) -> StatementLine:
        statement_import = session.statement_import
        if not statement_import.is_under_review:
            raise ConflictError(
                import_not_under_review(statement_import.id, statement_import.status.value)
            )
        return self._get_line(session, line_id)
