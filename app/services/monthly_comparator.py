"""
app/services/monthly_comparator.py

Month-over-month comparison of per-month quantity distributions.

Months are ordered by ascending ``YYYY-MM`` key with the ``"Unknown"``
bucket always last. Every month is laid out on the sorted union of the
quantities observed in any month; a quantity a month never saw has a share
of 0.0 in that month. The delta of a cell is the percentage-point change
from the previous month in that order, and is ``None`` for the first month.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from app.domain.order_analysis import (
    UNKNOWN_MONTH,
    ComparisonCell,
    ComparisonRow,
    MonthlyComparison,
    Quantity,
    Report,
)

logger = logging.getLogger(__name__)


def month_sort_key(month_key: str) -> tuple[bool, str]:
    return (month_key == UNKNOWN_MONTH, month_key)


def sort_month_keys(month_keys: Iterable[str]) -> list[str]:
    """
    Chronological order for month keys, ``"Unknown"`` pinned last.
    """

    return sorted(set(month_keys), key=month_sort_key)


class MonthlyComparator:
    """
    Aligns per-month reports and computes percentage-point deltas.
    """

    def __init__(self, *, include_unknown_month: bool = True) -> None:
        self._include_unknown_month = include_unknown_month

    def compare(self, monthly_reports: Mapping[str, Report]) -> MonthlyComparison:
        month_keys = sort_month_keys(monthly_reports)
        if not self._include_unknown_month:
            month_keys = [key for key in month_keys if key != UNKNOWN_MONTH]
        if not month_keys:
            return MonthlyComparison()

        shares: dict[str, dict[Quantity, float]] = {
            key: {row.quantity: row.percentage for row in monthly_reports[key].distribution}
            for key in month_keys
        }
        quantities = sorted({quantity for share in shares.values() for quantity in share})

        rows = tuple(
            ComparisonRow(quantity=quantity, cells=self._cells(quantity, month_keys, shares))
            for quantity in quantities
        )
        logger.debug(
            "Monthly comparison built: months=%d quantities=%d",
            len(month_keys),
            len(quantities),
        )
        return MonthlyComparison(month_keys=tuple(month_keys), rows=rows)

    @staticmethod
    def _cells(
        quantity: Quantity,
        month_keys: list[str],
        shares: Mapping[str, Mapping[Quantity, float]],
    ) -> tuple[ComparisonCell, ...]:
        cells: list[ComparisonCell] = []
        previous: float | None = None
        for key in month_keys:
            percentage = shares[key].get(quantity, 0.0)
            delta = None if previous is None else round(percentage - previous, 2)
            cells.append(ComparisonCell(month_key=key, percentage=percentage, delta=delta))
            previous = percentage
        return tuple(cells)


def compare(
    monthly_reports: Mapping[str, Report],
    *,
    include_unknown_month: bool = True,
) -> MonthlyComparison:
    """
    Module-level shortcut for :meth:`MonthlyComparator.compare`.
    """

    return MonthlyComparator(include_unknown_month=include_unknown_month).compare(monthly_reports)
