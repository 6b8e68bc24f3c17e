"""
app/domain package marker.
"""

from app.domain.order_analysis import (
    UNKNOWN_MONTH,
    ColumnRoleMap,
    ComparisonCell,
    ComparisonRow,
    DistributionRow,
    MonthlyComparison,
    OrderMeta,
    Report,
    ReportRow,
)

__all__ = [
    "UNKNOWN_MONTH",
    "ColumnRoleMap",
    "ComparisonCell",
    "ComparisonRow",
    "DistributionRow",
    "MonthlyComparison",
    "OrderMeta",
    "Report",
    "ReportRow",
]
