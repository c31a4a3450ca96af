"""
app/validators package marker.
"""

from app.validators.snapshot_validator import SnapshotRowValidator, calculate_coverage, find_duplicates
from app.validators.value_normalizer import parse_metric_number, validate_numeric_value

__all__ = [
    "SnapshotRowValidator",
    "calculate_coverage",
    "find_duplicates",
    "parse_metric_number",
    "validate_numeric_value",
]
