"""Account identity validation.

Checks that the identifiers embedded in a statement belong to the account
the operator selected. Fields are compared in a fixed order (account
number, branch number, tax id) and the first mismatch is reported alone.
"""

import re
from typing import Optional

from bankrecon.domain.entities import Account, BankMeta
from bankrecon.domain.errors import MismatchError


def normalize_account_number(value: Optional[str]) -> str:
    """Reduce an account/branch/tax identifier to its significant digits.

    Non-digit characters and leading zeros are dropped, so "0012345-6"
    becomes "123456".
    """
    if value is None:
        return ""
    return re.sub(r"\D", "", str(value)).lstrip("0")


def validate_account_identity(bank_meta: Optional[BankMeta], account: Account) -> None:
    """Raise MismatchError if the statement does not belong to the account.

    A field is only compared when both the statement and the account
    expose it.
    """
    if bank_meta is None:
        return

    checks = (
        ("account", bank_meta.account_id, account.account_number),
        ("branch", bank_meta.branch_id, account.branch_number),
        ("tax_id", bank_meta.tax_id, account.tax_id),
    )
    for field, found, expected in checks:
        found_digits = normalize_account_number(found)
        expected_digits = normalize_account_number(expected)
        if not found_digits or not expected_digits:
            continue
        if found_digits != expected_digits:
            raise MismatchError(field=field, expected=expected, found=found)
