"""Automatic reconciliation of statement movements against ledger entries.

Greedy, one pass over the movements in input order. For each movement the
eligible candidates are the unreconciled entries of the matching kind whose
amount is within AMOUNT_EPSILON and whose date is within DATE_WINDOW_DAYS
(inclusive). Among those, the winner is the one with the smallest date
distance; equal distances go to the entry that comes first in the pool.
A matched entry leaves the pool, so no entry is paired twice.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from bankrecon.domain.entities import LedgerEntry, StatementLine, StatementMovement

logger = logging.getLogger(__name__)

AMOUNT_EPSILON = Decimal("0.01")
DATE_WINDOW_DAYS = 5


@dataclass
class MatchResult:
    """Lines produced by a matching pass and the pool left over."""

    lines: list[StatementLine]
    pool: list[LedgerEntry]
    reconciled_count: int

    def matched_entry_ids(self) -> list[int]:
        return [line.linked_entry_id for line in self.lines if line.reconciled]


def is_eligible(
    movement: StatementMovement,
    entry: LedgerEntry,
    amount_epsilon: Decimal = AMOUNT_EPSILON,
    window_days: int = DATE_WINDOW_DAYS,
) -> bool:
    """Check whether a ledger entry can be paired with a movement."""
    if entry.reconciled or entry.kind != movement.kind:
        return False
    if abs(Decimal(entry.amount) - abs(movement.amount)) > amount_epsilon:
        return False
    return abs((entry.transaction_date - movement.date).days) <= window_days


def find_match(
    movement: StatementMovement,
    pool: list[LedgerEntry],
    amount_epsilon: Decimal = AMOUNT_EPSILON,
    window_days: int = DATE_WINDOW_DAYS,
) -> Optional[int]:
    """Return the pool index of the best candidate for a movement, or None."""
    best_index = None
    best_delta = None
    for index, entry in enumerate(pool):
        if not is_eligible(movement, entry, amount_epsilon, window_days):
            continue
        delta = abs((entry.transaction_date - movement.date).days)
        # Strict comparison keeps the earliest pool position on ties
        if best_delta is None or delta < best_delta:
            best_index = index
            best_delta = delta
    return best_index


def match_movements(
    movements: list[StatementMovement],
    pool: list[LedgerEntry],
    import_id: str,
    amount_epsilon: Decimal = AMOUNT_EPSILON,
    window_days: int = DATE_WINDOW_DAYS,
) -> MatchResult:
    """Build statement lines for the movements, pairing what can be paired.

    Args:
        movements: Movements in the order they should be matched
        pool: Candidate ledger entries; not mutated
        import_id: Import the lines belong to
        amount_epsilon: Largest amount difference still considered equal
        window_days: Largest date distance, in days, still eligible

    Returns:
        MatchResult with one line per movement (IDs 1..n) and the remaining pool
    """
    remaining = [entry for entry in pool if not entry.reconciled]
    lines = []
    reconciled_count = 0

    for position, movement in enumerate(movements, start=1):
        line = StatementLine(
            id=position,
            import_id=import_id,
            date=movement.date,
            description=movement.description,
            amount=abs(movement.amount),
            direction=movement.direction,
        )

        index = find_match(movement, remaining, amount_epsilon, window_days)
        if index is not None:
            entry = remaining.pop(index)
            line.link(entry.id)
            reconciled_count += 1
            logger.debug(f"Line {position} ({movement.date} {movement.amount}) matched entry {entry.id}")

        lines.append(line)

    return MatchResult(lines=lines, pool=remaining, reconciled_count=reconciled_count)
