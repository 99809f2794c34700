"""Statement decoder.

Turns a raw statement file into a DecodedStatement: a list of unsigned
movements with an explicit direction, plus whatever bank identifiers the
file exposes.

- OFX is parsed locally with ofxparse.
- PDF is delegated to a PdfExtractor and its payload normalized into the
  same shape.
"""

import io
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from ofxparse import OfxParser

from bankrecon.domain.entities import (
    BankMeta,
    DecodedStatement,
    Direction,
    FileType,
    StatementMovement,
)
from bankrecon.domain.errors import DecodeError
from bankrecon.domain.pdf_extractor import PdfExtractor
from bankrecon.utils.amount_parser import parse_amount
from bankrecon.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "(no description)"

_CREDIT_TYPES = {"credit", "c", "credito", "crédito", "cr"}
_DEBIT_TYPES = {"debit", "d", "debito", "débito", "db"}


def detect_file_type(file_name: str) -> FileType:
    """Infer the statement file type from its extension."""
    extension = Path(file_name).suffix.lower().lstrip(".")
    try:
        return FileType(extension)
    except ValueError:
        raise DecodeError(f"Unsupported statement file '{file_name}': use a PDF or OFX file")


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class StatementDecoder:
    """Decodes OFX and PDF statements into movements."""

    def __init__(self, pdf_extractor: Optional[PdfExtractor] = None):
        """Initialize decoder.

        Args:
            pdf_extractor: Collaborator used for PDF files. PDF decoding fails
                with DecodeError when none is configured.
        """
        self.pdf_extractor = pdf_extractor

    def decode(
        self,
        raw_bytes: bytes,
        file_type: FileType | str,
        file_name: Optional[str] = None,
    ) -> DecodedStatement:
        """Decode a statement file.

        Args:
            raw_bytes: File content
            file_type: "ofx" or "pdf"
            file_name: Original file name, forwarded to the PDF extractor

        Returns:
            DecodedStatement with movements in file order

        Raises:
            DecodeError: If the content cannot be read as the declared format
        """
        try:
            file_type = FileType(file_type)
        except ValueError:
            raise DecodeError(f"Unsupported statement file type '{file_type}'")

        if isinstance(raw_bytes, str):
            try:
                raw_bytes = raw_bytes.encode("latin-1")
            except UnicodeEncodeError as e:
                raise DecodeError(f"Statement text is not valid latin-1: {e}") from e

        if file_type == FileType.OFX:
            return self._decode_ofx(raw_bytes)
        return self._decode_pdf(raw_bytes, file_name or "statement.pdf")

    def _decode_ofx(self, raw_bytes: bytes) -> DecodedStatement:
        try:
            ofx = OfxParser.parse(io.BytesIO(raw_bytes))
        except Exception as e:
            # ofxparse raises a mix of its own and builtin exceptions
            raise DecodeError(f"Could not parse OFX file: {e}") from e

        accounts = [
            account
            for account in (getattr(ofx, "accounts", None) or [])
            if getattr(account, "statement", None) is not None
        ]
        if not accounts:
            raise DecodeError("OFX file does not contain a bank statement")

        movements = []
        for account in accounts:
            for txn in account.statement.transactions:
                movement = self._ofx_movement(txn)
                if movement is not None:
                    movements.append(movement)

        first = accounts[0]
        bank_meta = BankMeta(
            account_id=_clean(getattr(first, "account_id", None)),
            branch_id=_clean(getattr(first, "branch_id", None)),
            bank_id=_clean(getattr(first, "routing_number", None)),
        )
        start_date = getattr(first.statement, "start_date", None)
        end_date = getattr(first.statement, "end_date", None)

        logger.info(f"Decoded {len(movements)} movements from OFX statement")
        return DecodedStatement(
            movements=movements,
            bank_meta=bank_meta,
            start_date=start_date.date() if start_date else None,
            end_date=end_date.date() if end_date else None,
        )

    def _ofx_movement(self, txn) -> Optional[StatementMovement]:
        if txn.date is None:
            logger.warning(f"Skipping OFX transaction {getattr(txn, 'id', '?')} without a date")
            return None

        amount = Decimal(txn.amount)
        description = _clean(getattr(txn, "memo", None)) or _clean(getattr(txn, "payee", None))
        return StatementMovement(
            date=txn.date.date(),
            description=description or NO_DESCRIPTION,
            amount=abs(amount),
            direction=Direction.CREDIT if amount >= 0 else Direction.DEBIT,
        )

    def _decode_pdf(self, raw_bytes: bytes, file_name: str) -> DecodedStatement:
        if self.pdf_extractor is None:
            raise DecodeError(
                "PDF statements need an extraction service (set BANKRECON_PDF_EXTRACTOR_URL)"
            )

        payload = self.pdf_extractor.extract(raw_bytes, file_name)
        if not isinstance(payload, dict):
            raise DecodeError("PDF extraction returned an unexpected payload")
        if not payload.get("success"):
            raise DecodeError(payload.get("error") or "Could not extract transactions from PDF")

        rows = payload.get("transactions") or []
        if not isinstance(rows, list):
            raise DecodeError("PDF extraction returned transactions that are not a list")
        bank_info = payload.get("bankInfo") or {}
        if not isinstance(bank_info, dict):
            raise DecodeError("PDF extraction returned bank info that is not an object")

        movements = []
        for index, row in enumerate(rows):
            try:
                movements.append(self._pdf_movement(row))
            except (ValueError, TypeError, AttributeError, KeyError) as e:
                logger.warning(f"Skipping PDF transaction #{index}: {e}")

        bank_meta = None
        if bank_info:
            bank_meta = BankMeta(
                account_id=_clean(bank_info.get("conta")),
                branch_id=_clean(bank_info.get("agencia")),
                tax_id=_clean(bank_info.get("cnpj")),
            )

        logger.info(f"Decoded {len(movements)} movements from PDF statement {file_name}")
        return DecodedStatement(movements=movements, bank_meta=bank_meta)

    def _pdf_movement(self, row: dict[str, Any]) -> StatementMovement:
        amount = parse_amount(row["amount"])
        kind = str(row.get("type") or "").strip().lower()
        if kind in _CREDIT_TYPES:
            direction = Direction.CREDIT
        elif kind in _DEBIT_TYPES:
            direction = Direction.DEBIT
        else:
            direction = Direction.CREDIT if amount >= 0 else Direction.DEBIT

        return StatementMovement(
            date=parse_date(row["date"]),
            description=_clean(row.get("description")) or NO_DESCRIPTION,
            amount=abs(amount),
            direction=direction,
        )
