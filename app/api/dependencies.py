"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and store access.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.performance import PickerDate
from app.repositories.performance_store import PerformanceStore, SQLAlchemyPerformanceStore
from db.session import get_db

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def get_picker_date(
    month: int | None = Query(default=None, description="Batch month (1-12) from the picker"),
    year: int | None = Query(default=None, description="Batch year from the picker"),
) -> PickerDate | None:
    """
    Build the batch picker date. Month and year must be supplied together.
    """

    if (month is None) != (year is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both month and year are required when using the date picker.",
        )
    return PickerDate.from_parts(month, year)


async def get_performance_store(
    db: AsyncSession = Depends(get_db),
) -> AsyncIterator[PerformanceStore]:
    yield SQLAlchemyPerformanceStore(db)
