"""
app/api/routers package marker.
"""

from app.api.routers.snapshot_upload import router as snapshot_upload_router

__all__ = [
    "snapshot_upload_router",
]
