"""
app/domain/order_analysis.py

Typed records produced by the order analysis pipeline.

Raw rows are untyped; everything in this module is built at the
schema/order-index boundary and never touches raw row values again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

ROLE_ORDER = "order"
ROLE_LINEITEM = "lineitem"
ROLE_QUANTITY = "quantity"
ROLE_TOTAL = "total"
ROLE_CREATED = "created"

ROLES: tuple[str, ...] = (
    ROLE_ORDER,
    ROLE_LINEITEM,
    ROLE_QUANTITY,
    ROLE_TOTAL,
    ROLE_CREATED,
)

UNKNOWN_MONTH = "Unknown"

Quantity = int | float


@dataclass(frozen=True)
class ColumnRoleMap:
    """
    Resolved role -> source header mapping. ``None`` means unresolved.
    """

    order: str | None = None
    lineitem: str | None = None
    quantity: str | None = None
    total: str | None = None
    created: str | None = None
    match_strategies: Mapping[str, str] = field(default_factory=dict)

    def column_for(self, role: str) -> str | None:
        if role not in ROLES:
            raise KeyError(f"Unknown column role: {role!r}")
        return getattr(self, role)

    def as_dict(self) -> dict[str, str | None]:
        return {role: self.column_for(role) for role in ROLES}

    @property
    def unresolved_roles(self) -> tuple[str, ...]:
        return tuple(role for role in ROLES if self.column_for(role) is None)


@dataclass(frozen=True)
class OrderMeta:
    """
    Order-level metadata captured from the first row seen for an order id.
    """

    total: float | None
    month_key: str = UNKNOWN_MONTH


@dataclass(frozen=True)
class ReportRow:
    """
    One matched order: summed product quantity and the order's total.
    """

    order_id: str
    quantity: Quantity
    total: float | None


@dataclass(frozen=True)
class DistributionRow:
    """
    Histogram bucket: how many matched orders bought ``quantity`` units.
    """

    quantity: Quantity
    order_count: int
    percentage: float


@dataclass(frozen=True)
class Report:
    """
    Product report for one scope (all months, or a single month bucket).

    ``aov`` is ``None`` when no matched order has a usable total, which is
    distinct from a real AOV of ``0.0``.
    """

    rows: tuple[ReportRow, ...] = ()
    distribution: tuple[DistributionRow, ...] = ()
    aov: float | None = None
    total_orders: int = 0

    @classmethod
    def empty(cls) -> "Report":
        return cls()


@dataclass(frozen=True)
class ComparisonCell:
    """
    Share of orders for one (quantity, month) pair.

    ``delta`` is the percentage-point change versus the previous month and
    is ``None`` for the first month.
    """

    month_key: str
    percentage: float
    delta: float | None = None


@dataclass(frozen=True)
class ComparisonRow:
    quantity: Quantity
    cells: tuple[ComparisonCell, ...]


@dataclass(frozen=True)
class MonthlyComparison:
    """
    Per-month distributions aligned on the union of observed quantities.
    """

    month_keys: tuple[str, ...] = ()
    rows: tuple[ComparisonRow, ...] = ()

    @property
    def quantities(self) -> tuple[Quantity, ...]:
        return tuple(row.quantity for row in self.rows)

    def cell(self, quantity: Quantity, month_key: str) -> ComparisonCell | None:
        for row in self.rows:
            if row.quantity != quantity:
                continue
            for cell in row.cells:
                if cell.month_key == month_key:
                    return cell
        return None
