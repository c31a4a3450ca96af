"""
app/services package marker.
"""

from app.services.import_executor import ChunkedImportExecutor, ImportInputError
from app.services.snapshot_import_service import (
    SnapshotImportService,
    SnapshotProcessResult,
    SnapshotUploadOptions,
    get_snapshot_import_service,
)
from app.services.upload_validation import SnapshotUploadError, SnapshotUploadValidator

__all__ = [
    "ChunkedImportExecutor",
    "ImportInputError",
    "SnapshotImportService",
    "SnapshotProcessResult",
    "SnapshotUploadError",
    "SnapshotUploadOptions",
    "SnapshotUploadValidator",
    "get_snapshot_import_service",
]
