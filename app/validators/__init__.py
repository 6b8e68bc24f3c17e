"""
app/validators package marker.
"""

from app.validators.mapping_validator import MappingErrorDetail, MappingValidator
from app.validators.value_parser import month_key, parse_date, parse_number

__all__ = [
    "MappingErrorDetail",
    "MappingValidator",
    "month_key",
    "parse_date",
    "parse_number",
]
