"""
app/mappers package marker.
"""

from app.mappers.schema_mapper import DEFAULT_COLUMN_ALIASES, SchemaMapper, resolve

__all__ = [
    "DEFAULT_COLUMN_ALIASES",
    "SchemaMapper",
    "resolve",
]
