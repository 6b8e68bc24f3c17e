"""
app/schemas package marker.
"""

from app.schemas.order_analysis import (
    OrderAnalysisRequest,
    OrderAnalysisResponse,
    ReportResponse,
)

__all__ = [
    "OrderAnalysisRequest",
    "OrderAnalysisResponse",
    "ReportResponse",
]
