"""
app/api/routers package marker.
"""

from app.api.routers.order_analysis import router as order_analysis_router

__all__ = [
    "order_analysis_router",
]
