"""
app/schemas package marker.
"""

from app.schemas.snapshot_upload import (
    HealthResponse,
    SnapshotImportResponse,
    SnapshotValidationResponse,
    ValidationResultResponse,
)

__all__ = [
    "HealthResponse",
    "SnapshotImportResponse",
    "SnapshotValidationResponse",
    "ValidationResultResponse",
]
