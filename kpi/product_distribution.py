"""
kpi/product_distribution.py

Quantity distribution and AOV for the orders containing a product.

Expected inputs
---------------
quantities : list[int | float]
    Summed product quantity for each matched order.
totals : list[float | None]
    Order total for each matched order, ``None`` when unknown.

Formulas
--------
Order Count      = number of matched orders with a given quantity
Percentage       = round(order_count / matched_orders * 100, 2)
AOV              = sum(known totals) / count(known totals)

Distribution rows are sorted by quantity, never by count. AOV is None when
no matched order has a known total; orders without a total are left out of
both sides of the mean.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Mapping, Sequence

from app.domain.order_analysis import (
    DistributionRow,
    OrderMeta,
    Quantity,
    Report,
    ReportRow,
)
from kpi.base import BaseReportFormula

_SENTINEL = None  # value stored when a metric cannot be computed


class ProductDistributionFormula(BaseReportFormula):
    """
    Deterministic distribution and AOV calculations.

    All arithmetic is self-contained.  No I/O, no logging, no side effects.
    """

    input_keys = ("quantities", "totals")
    output_keys = ("distribution", "aov", "total_orders")

    def calculate(self, inputs: dict[str, Any]) -> dict[str, Any]:
        """
        Compute the quantity distribution, AOV and matched order count.

        Returns
        -------
        dict
            Keys: ``distribution`` (tuple of DistributionRow), ``aov``,
            ``total_orders``.
        """
        quantities: Sequence[Quantity] = inputs["quantities"]
        totals: Sequence[float | None] = inputs["totals"]

        return {
            "distribution": _distribution(quantities),
            "aov": _aov(totals),
            "total_orders": len(quantities),
        }


# ---------------------------------------------------------------------------
# Pure formula functions
# ---------------------------------------------------------------------------


def _distribution(quantities: Sequence[Quantity]) -> tuple[DistributionRow, ...]:
    """
    Histogram of matched orders per quantity, ascending by quantity.

    The divisor falls back to 1 for an empty input, which yields no rows.
    """
    counts = Counter(quantities)
    divisor = len(quantities) or 1
    return tuple(
        DistributionRow(
            quantity=quantity,
            order_count=count,
            percentage=round(count / divisor * 100, 2),
        )
        for quantity, count in sorted(counts.items())
    )


def _aov(totals: Sequence[float | None]) -> float | None:
    """
    AOV = mean of the known order totals.

    Returns None when no total is known.
    """
    known = [total for total in totals if total is not None]
    if not known:
        return _SENTINEL
    return sum(known) / len(known)


# ---------------------------------------------------------------------------
# Report assembly
# ---------------------------------------------------------------------------


def summarize(
    aggregate: Mapping[str, Quantity],
    order_index: Mapping[str, OrderMeta],
) -> Report:
    """
    Build the Report for one scope from its matched-order quantities.

    A matched order missing from *order_index* is kept with an unknown total.
    """
    rows = tuple(
        ReportRow(
            order_id=order_id,
            quantity=quantity,
            total=_order_total(order_index, order_id),
        )
        for order_id, quantity in aggregate.items()
    )
    metrics = ProductDistributionFormula()(
        {
            "quantities": [row.quantity for row in rows],
            "totals": [row.total for row in rows],
        }
    )
    return Report(
        rows=rows,
        distribution=metrics["distribution"],
        aov=metrics["aov"],
        total_orders=metrics["total_orders"],
    )


def _order_total(order_index: Mapping[str, OrderMeta], order_id: str) -> float | None:
    meta = order_index.get(order_id)
    return meta.total if meta is not None else None
