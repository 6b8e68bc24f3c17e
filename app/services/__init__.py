"""
app/services package marker.
"""

from app.services.order_analysis_service import (
    AnalysisResult,
    EmptyDatasetError,
    OrderAnalysisService,
    get_order_analysis_service,
)

__all__ = [
    "AnalysisResult",
    "EmptyDatasetError",
    "OrderAnalysisService",
    "get_order_analysis_service",
]
