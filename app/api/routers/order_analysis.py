"""
app/api/routers/order_analysis.py

Order analysis HTTP endpoints.

The caller parses its export (CSV, spreadsheet) into row objects and posts
them with the product keyword; the response carries every report as plain
data for rendering or export.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_row_limited_request
from app.domain.order_analysis import Report
from app.schemas.order_analysis import (
    ComparisonCellResponse,
    ComparisonRowResponse,
    DistributionRowResponse,
    MappingIssueResponse,
    MonthlyComparisonResponse,
    MonthlyReportResponse,
    OrderAnalysisRequest,
    OrderAnalysisResponse,
    ReportResponse,
    ReportRowResponse,
)
from app.services.order_analysis_service import (
    AnalysisResult,
    EmptyDatasetError,
    OrderAnalysisService,
    get_order_analysis_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


@router.post("/analyze-orders", response_model=OrderAnalysisResponse)
def analyze_orders(
    body: OrderAnalysisRequest = Depends(get_row_limited_request),
    analysis_service: OrderAnalysisService = Depends(get_order_analysis_service),
) -> OrderAnalysisResponse:
    """
    Analyze the orders containing a product.

    Raises HTTP 400 for an empty dataset and HTTP 413 (via the dependency)
    when the payload exceeds the configured row ceiling.
    """

    try:
        result = analysis_service.analyze(
            body.rows,
            body.keyword,
            aliases=body.column_aliases,
        )
    except EmptyDatasetError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return _to_response(result)


def _to_response(result: AnalysisResult) -> OrderAnalysisResponse:
    return OrderAnalysisResponse(
        keyword=result.keyword,
        column_map=result.column_map.as_dict(),
        mapping_issues=[
            MappingIssueResponse(**issue.to_dict()) for issue in result.mapping_issues
        ],
        product_names=list(result.product_names),
        all_months=ReportResponse(**_report_fields(result.all_months)),
        monthly=[
            MonthlyReportResponse(month_key=month_key, **_report_fields(report))
            for month_key, report in result.monthly.items()
        ],
        comparison=MonthlyComparisonResponse(
            month_keys=list(result.comparison.month_keys),
            rows=[
                ComparisonRowResponse(
                    quantity=row.quantity,
                    cells=[
                        ComparisonCellResponse(
                            month_key=cell.month_key,
                            percentage=cell.percentage,
                            delta=cell.delta,
                        )
                        for cell in row.cells
                    ],
                )
                for row in result.comparison.rows
            ],
        ),
    )


def _report_fields(report: Report) -> dict[str, object]:
    return {
        "rows": [
            ReportRowResponse(order_id=row.order_id, quantity=row.quantity, total=row.total)
            for row in report.rows
        ],
        "distribution": [
            DistributionRowResponse(
                quantity=row.quantity,
                order_count=row.order_count,
                percentage=row.percentage,
            )
            for row in report.distribution
        ],
        "aov": report.aov,
        "total_orders": report.total_orders,
    }
