"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, status

from app.config import OrderAnalysisSettings, get_order_analysis_settings
from app.schemas.order_analysis import OrderAnalysisRequest


def get_row_limited_request(
    body: OrderAnalysisRequest,
    settings: OrderAnalysisSettings = Depends(get_order_analysis_settings),
) -> OrderAnalysisRequest:
    """
    Reject analysis payloads with more rows than the configured ceiling.
    """

    if len(body.rows) > settings.max_rows:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Too many rows: {len(body.rows)} exceeds the limit of {settings.max_rows}.",
        )

    return body
