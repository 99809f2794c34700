"""Reporting period (competência) filter."""

from bankrecon.domain.entities import StatementMovement
from bankrecon.utils.date_parser import month_bounds


def filter_movements(
    movements: list[StatementMovement], month: int, year: int
) -> list[StatementMovement]:
    """Keep the movements dated inside the given calendar month (inclusive)."""
    first_day, last_day = month_bounds(month, year)
    return [m for m in movements if first_day <= m.date <= last_day]
