"""
app/services/order_index.py

Order-level reduction of raw export rows.

Two independent scans over the same rows:

    build_order_index      order id -> OrderMeta (first row wins)
    aggregate_quantities   order id -> summed quantity of keyword-matched rows

Neither scan raises on bad cells. A row without an order id contributes to
nothing; an unparseable total, quantity or date only drops that value.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from app.domain.order_analysis import UNKNOWN_MONTH, ColumnRoleMap, OrderMeta, Quantity
from app.validators.value_parser import (
    as_quantity,
    month_key,
    normalize_order_id,
    normalize_text,
    parse_number,
)

logger = logging.getLogger(__name__)

RawRow = Mapping[str, Any]


def build_order_index(
    rows: Iterable[RawRow],
    column_map: ColumnRoleMap,
    *,
    log_skipped_rows: bool = False,
) -> dict[str, OrderMeta]:
    """
    Reduce rows to one OrderMeta per distinct order id.

    The total is taken from the first row of an order whose total parses as
    a number; the month key from the first row of the order. Later rows
    never overwrite either value.
    """

    order_column = column_map.order
    if order_column is None:
        return {}

    total_column = column_map.total
    created_column = column_map.created

    totals: dict[str, float] = {}
    months: dict[str, str] = {}
    skipped = 0

    for row_number, row in enumerate(rows, start=1):
        order_id = normalize_order_id(row.get(order_column))
        if order_id is None:
            skipped += 1
            if log_skipped_rows:
                logger.debug("Skipping row=%d without order id", row_number)
            continue

        if order_id not in months:
            months[order_id] = (
                month_key(row.get(created_column)) if created_column is not None else UNKNOWN_MONTH
            )

        if total_column is not None and order_id not in totals:
            total = parse_number(row.get(total_column))
            if total is not None:
                totals[order_id] = total

    index = {
        order_id: OrderMeta(total=totals.get(order_id), month_key=month)
        for order_id, month in months.items()
    }
    logger.debug(
        "Order index built: orders=%d with_total=%d skipped_rows=%d",
        len(index),
        len(totals),
        skipped,
    )
    return index


def aggregate_quantities(
    rows: Iterable[RawRow],
    column_map: ColumnRoleMap,
    keyword: str | None,
    *,
    log_skipped_rows: bool = False,
) -> dict[str, Quantity]:
    """
    Sum the matched product quantity per order.

    A row matches when its normalized line-item name contains the normalized
    keyword. An empty keyword matches nothing. Non-numeric quantities are
    skipped rather than counted as zero, so an order whose matched rows all
    carry bad quantities does not appear.
    """

    needle = normalize_text(keyword)
    order_column = column_map.order
    lineitem_column = column_map.lineitem
    quantity_column = column_map.quantity
    if not needle or order_column is None or lineitem_column is None or quantity_column is None:
        return {}

    sums: dict[str, float] = {}
    for row_number, row in enumerate(rows, start=1):
        if needle not in normalize_text(row.get(lineitem_column)):
            continue

        order_id = normalize_order_id(row.get(order_column))
        if order_id is None:
            if log_skipped_rows:
                logger.debug("Skipping matched row=%d without order id", row_number)
            continue

        quantity = parse_number(row.get(quantity_column))
        if quantity is None:
            if log_skipped_rows:
                logger.debug(
                    "Skipping matched row=%d order=%s with non-numeric quantity=%r",
                    row_number,
                    order_id,
                    row.get(quantity_column),
                )
            continue

        sums[order_id] = sums.get(order_id, 0.0) + quantity

    logger.debug("Keyword %r matched %d orders", needle, len(sums))
    return {order_id: as_quantity(total) for order_id, total in sums.items()}


def list_product_names(rows: Iterable[RawRow], column_map: ColumnRoleMap) -> list[str]:
    """
    Sorted distinct line-item names, for keyword suggestions.
    """

    lineitem_column = column_map.lineitem
    if lineitem_column is None:
        return []

    names: set[str] = set()
    for row in rows:
        value = row.get(lineitem_column)
        if normalize_text(value):
            names.add(str(value))
    return sorted(names)
