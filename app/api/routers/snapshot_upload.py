"""
app/api/routers/snapshot_upload.py

Monthly performance snapshot upload endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, UploadFile, status

from app.api.dependencies import get_csv_upload, get_performance_store, get_picker_date
from app.domain.performance import PickerDate
from app.repositories.performance_store import PerformanceStore, PerformanceStoreError
from app.schemas.snapshot_upload import SnapshotImportResponse, SnapshotValidationResponse
from app.services.import_executor import ImportInputError
from app.services.snapshot_import_service import (
    SnapshotImportService,
    SnapshotUploadOptions,
    get_snapshot_import_service,
)
from app.services.template_service import TEMPLATE_FILENAMES, build_template_csv
from app.services.ticker_catalog import TickerCatalogCache
from app.services.upload_validation import SnapshotUploadError
from app.services.validation_report import generate_error_report

router = APIRouter(prefix="/snapshots", tags=["snapshots"])


async def _read_upload(file: UploadFile) -> bytes:
    try:
        return await file.read()
    finally:
        await file.close()


@router.post("/validate", response_model=SnapshotValidationResponse)
async def validate_snapshot(
    file: UploadFile = Depends(get_csv_upload),
    picker_date: PickerDate | None = Depends(get_picker_date),
    require_eom: bool | None = Query(default=None, description="Reject non month-end dates"),
    allow_mixed: bool | None = Query(default=None, description="Accept fund and benchmark rows in one file"),
    store: PerformanceStore = Depends(get_performance_store),
    snapshot_service: SnapshotImportService = Depends(get_snapshot_import_service),
) -> SnapshotValidationResponse:
    """
    Validate one snapshot CSV without writing anything.
    """

    content = await _read_upload(file)
    options = SnapshotUploadOptions(
        picker_date=picker_date,
        require_eom=require_eom,
        allow_mixed=allow_mixed,
    )
    try:
        result = await snapshot_service.validate_upload(
            content,
            catalog=TickerCatalogCache(store),
            options=options,
        )
    except SnapshotUploadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PerformanceStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Unable to load the ticker catalog.",
        ) from exc

    return SnapshotValidationResponse.model_validate(
        {"validation": result.to_dict(), "report": generate_error_report(result)}
    )


@router.post("/import", response_model=SnapshotImportResponse)
async def import_snapshot(
    response: Response,
    file: UploadFile = Depends(get_csv_upload),
    picker_date: PickerDate | None = Depends(get_picker_date),
    require_eom: bool | None = Query(default=None, description="Reject non month-end dates"),
    allow_mixed: bool | None = Query(default=None, description="Accept fund and benchmark rows in one file"),
    dry_run: bool = Query(default=False, description="Preview a sample without writing"),
    chunk_size: int | None = Query(default=None, ge=1, description="Rows per upsert chunk"),
    skip_invalid_rows: bool = Query(default=False, description="Import valid rows even if others failed"),
    store: PerformanceStore = Depends(get_performance_store),
    snapshot_service: SnapshotImportService = Depends(get_snapshot_import_service),
) -> SnapshotImportResponse:
    """
    Validate one snapshot CSV and upsert its valid rows, or preview a dry run.

    A file that fails validation is returned with status 422 and nothing is
    written. Chunk write failures do not fail the request; they are reported
    in ``outcome``.
    """

    content = await _read_upload(file)
    options = SnapshotUploadOptions(
        picker_date=picker_date,
        require_eom=require_eom,
        allow_mixed=allow_mixed,
        dry_run=dry_run,
        chunk_size=chunk_size,
        skip_invalid_rows=skip_invalid_rows,
    )
    try:
        result = await snapshot_service.process_upload(content, store=store, options=options)
    except (SnapshotUploadError, ImportInputError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PerformanceStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Snapshot store is unavailable.",
        ) from exc

    if result.outcome is None and result.dry_run is None and not result.validation.is_valid:
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    return SnapshotImportResponse.model_validate(result.to_dict())


@router.get("/templates/{kind}")
def download_template(kind: str) -> Response:
    """
    Download the CSV template for ``fund`` or ``benchmark`` uploads.
    """

    filename = TEMPLATE_FILENAMES.get(kind)
    if filename is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No template for upload kind '{kind}'.",
        )

    return Response(
        content=build_template_csv(kind),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
