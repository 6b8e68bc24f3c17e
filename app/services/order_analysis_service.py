"""
app/services/order_analysis_service.py

Order analysis orchestrator.

Wires the pipeline stages into a single pure run over one dataset:

    SchemaMapper          – headers -> ColumnRoleMap
    order_index           – OrderMeta index and keyword-matched quantities
    product_distribution  – Report per scope (all months, each month)
    MonthlyComparator     – month-over-month alignment and deltas

Failure contract
----------------
- No rows at all          → raises EmptyDatasetError before any stage runs
- Unresolved column roles → reported in ``mapping_issues``; dependent
                            reports come back empty or with a null AOV
- Bad cells               → skipped per value; the run always completes

Each run is independent: the same rows, aliases and keyword always produce
the same result.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Mapping, Sequence

from app.config import get_order_analysis_settings
from app.domain.order_analysis import (
    UNKNOWN_MONTH,
    ColumnRoleMap,
    MonthlyComparison,
    OrderMeta,
    Quantity,
    Report,
)
from app.logging_utils import log_event
from app.mappers.schema_mapper import SchemaMapper
from app.services.monthly_comparator import MonthlyComparator, sort_month_keys
from app.services.order_index import (
    aggregate_quantities,
    build_order_index,
    list_product_names,
)
from app.validators.mapping_validator import MappingErrorDetail, MappingValidator
from app.validators.value_parser import normalize_text
from kpi.product_distribution import summarize

logger = logging.getLogger(__name__)

ALL_MONTHS = "all"

RawRow = Mapping[str, Any]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class EmptyDatasetError(ValueError):
    """
    Raised when an analysis is requested for a dataset without rows.
    """


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisResult:
    """
    Structured output of a single analysis run.

    Attributes
    ----------
    keyword:
        Normalized keyword the rows were matched against.
    column_map:
        Resolved column roles.
    mapping_issues:
        One detail per role that could not be resolved, plus one per
        alias override naming an unknown role.
    product_names:
        Distinct line-item names found in the dataset.
    all_months:
        Report across every month.
    monthly:
        Report per month key present among the matched orders, in
        chronological order with ``"Unknown"`` last.
    comparison:
        Month-over-month alignment of the monthly reports.
    """

    keyword: str
    column_map: ColumnRoleMap
    mapping_issues: tuple[MappingErrorDetail, ...] = ()
    product_names: tuple[str, ...] = ()
    all_months: Report = field(default_factory=Report.empty)
    monthly: Mapping[str, Report] = field(default_factory=dict)
    comparison: MonthlyComparison = field(default_factory=MonthlyComparison)

    @property
    def month_keys(self) -> tuple[str, ...]:
        return tuple(self.monthly)

    def report_for(self, month_key: str | None = None) -> Report:
        """
        Report for a scope: ``None`` or ``"all"`` selects every month.
        """
        if month_key is None or month_key == ALL_MONTHS:
            return self.all_months
        return self.monthly.get(month_key, Report.empty())


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class OrderAnalysisService:
    """
    Stateless product analysis over order-export rows.

    Usage::

        service = OrderAnalysisService()
        result = service.analyze(rows, "Widget A")
        print(result.all_months.aov)
    """

    def __init__(
        self,
        *,
        compare_unknown_month: bool = True,
        log_skipped_rows: bool = False,
        validator: MappingValidator | None = None,
    ) -> None:
        self._comparator = MonthlyComparator(include_unknown_month=compare_unknown_month)
        self._log_skipped_rows = log_skipped_rows
        self._validator = validator or MappingValidator()

    def analyze(
        self,
        rows: Sequence[RawRow],
        keyword: str | None,
        *,
        aliases: Mapping[str, Sequence[str]] | None = None,
    ) -> AnalysisResult:
        """
        Run the full analysis for one keyword over *rows*.

        The header set is taken from the first row. Header keys are kept as
        given, so non-string keys from spreadsheet readers still index rows.

        Raises
        ------
        EmptyDatasetError
            When *rows* is empty.
        """
        if not rows:
            raise EmptyDatasetError("No rows to analyze; the export produced an empty dataset.")

        started = time.perf_counter()
        headers = list(rows[0].keys())
        column_map = SchemaMapper(aliases=aliases).resolve(headers)
        unresolved = self._validator.unresolved(column_map=column_map, source_headers=headers)
        for detail in unresolved:
            logger.info("Column role %r unresolved: %s", detail.role, detail.message)

        needle = normalize_text(keyword)
        order_index = build_order_index(
            rows, column_map, log_skipped_rows=self._log_skipped_rows
        )
        aggregate = aggregate_quantities(
            rows, column_map, needle, log_skipped_rows=self._log_skipped_rows
        )

        all_months = summarize(aggregate, order_index)
        monthly = {
            month: summarize(scoped, order_index)
            for month, scoped in self._split_by_month(aggregate, order_index).items()
        }
        comparison = self._comparator.compare(monthly)

        log_event(
            logger,
            logging.INFO,
            "order_analysis_completed",
            keyword=needle,
            rows=len(rows),
            orders=len(order_index),
            matched_orders=all_months.total_orders,
            months=list(monthly),
            aov=all_months.aov,
            duration_ms=round((time.perf_counter() - started) * 1000, 3),
        )
        return AnalysisResult(
            keyword=needle,
            column_map=column_map,
            mapping_issues=(*self._validator.unknown_alias_roles(aliases or {}), *unresolved),
            product_names=tuple(list_product_names(rows, column_map)),
            all_months=all_months,
            monthly=monthly,
            comparison=comparison,
        )

    @staticmethod
    def _split_by_month(
        aggregate: Mapping[str, Quantity],
        order_index: Mapping[str, OrderMeta],
    ) -> dict[str, dict[str, Quantity]]:
        """
        Partition matched orders by the month key of their OrderMeta.
        """
        buckets: dict[str, dict[str, Quantity]] = {}
        for order_id, quantity in aggregate.items():
            meta = order_index.get(order_id)
            if meta is None:
                logger.warning(
                    "Matched order %r is missing from the order index; using %r month",
                    order_id,
                    UNKNOWN_MONTH,
                )
                month = UNKNOWN_MONTH
            else:
                month = meta.month_key
            buckets.setdefault(month, {})[order_id] = quantity
        return {month: buckets[month] for month in sort_month_keys(buckets)}


@lru_cache(maxsize=1)
def get_order_analysis_service() -> OrderAnalysisService:
    """
    Build and cache the analysis service with env-driven settings.
    """
    settings = get_order_analysis_settings()
    return OrderAnalysisService(
        compare_unknown_month=settings.compare_unknown_month,
        log_skipped_rows=settings.log_skipped_rows,
    )
