"""
app/schemas/order_analysis.py

Request and response schemas for order analysis endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OrderAnalysisRequest(BaseModel):
    """
    API request model: parsed export rows and the product keyword.
    """

    model_config = ConfigDict(extra="forbid")

    rows: list[dict[str, Any]] = Field(..., min_length=1)
    keyword: str = ""
    column_aliases: dict[str, list[str]] | None = None


class MappingIssueResponse(BaseModel):
    """
    API response model for one column mapping issue.
    """

    code: str
    message: str
    role: str | None = None
    source_column: str | None = None
    context: dict[str, Any] | None = None


class ReportRowResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: str
    quantity: int | float
    total: float | None = None


class DistributionRowResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    quantity: int | float
    order_count: int = Field(..., ge=1)
    percentage: float = Field(..., ge=0.0, le=100.0)


class ReportResponse(BaseModel):
    """
    API response model for one scope's product report.
    """

    model_config = ConfigDict(frozen=True)

    rows: list[ReportRowResponse] = Field(default_factory=list)
    distribution: list[DistributionRowResponse] = Field(default_factory=list)
    aov: float | None = None
    total_orders: int = Field(0, ge=0)


class MonthlyReportResponse(ReportResponse):
    month_key: str


class ComparisonCellResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    month_key: str
    percentage: float
    delta: float | None = None


class ComparisonRowResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    quantity: int | float
    cells: list[ComparisonCellResponse]


class MonthlyComparisonResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    month_keys: list[str] = Field(default_factory=list)
    rows: list[ComparisonRowResponse] = Field(default_factory=list)


class OrderAnalysisResponse(BaseModel):
    """
    API response model for a full analysis run.
    """

    keyword: str
    column_map: dict[str, str | None]
    mapping_issues: list[MappingIssueResponse] = Field(default_factory=list)
    product_names: list[str] = Field(default_factory=list)
    all_months: ReportResponse
    monthly: list[MonthlyReportResponse] = Field(default_factory=list)
    comparison: MonthlyComparisonResponse
