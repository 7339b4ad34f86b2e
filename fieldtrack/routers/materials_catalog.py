import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError

from fieldtrack.core.authorization import Role, require_role
from fieldtrack.core.errors import ValidationError
from fieldtrack.database import SessionLocal
from fieldtrack.deps.auth import require_auth
from fieldtrack.deps.errors import user_action
from fieldtrack.schemas.material import ImportResponse, MaterialResponse
from fieldtrack.services.catalog_import import ImportMode, import_catalog
from fieldtrack.services.catalog_service import (
    display_name,
    export_catalog_csv,
    export_raw_rows_csv,
    list_catalog,
    list_categories,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/materials_catalog", tags=["Materials Catalog"])


def _csv_download(content: str, stem: str) -> Response:
    filename = f"{stem}_{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("", response_model=List[MaterialResponse])
def list_materials(
    search: Optional[str] = None,
    category: Optional[str] = None,
    _user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to load materials"):
            rows = list_catalog(db, search=search, category=category)
            return [
                MaterialResponse(
                    sku=r.sku,
                    material_name=r.material_name,
                    category=r.category,
                    unit_price=r.unit_price,
                    purchase_cost=r.purchase_cost,
                    part_length=r.part_length,
                    display_name=display_name(r),
                    raw_metadata=r.raw_metadata or [],
                )
                for r in rows
            ]
    finally:
        db.close()


@router.get("/categories", response_model=List[str])
def categories(_user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to load categories"):
            return list_categories(db)
    finally:
        db.close()


@router.post("/import", response_model=ImportResponse)
async def import_materials(
    request: Request,
    mode: ImportMode = Query(default=ImportMode.REPLACE),
    _role=Depends(require_role(Role.OFFICE)),
):
    body = await request.body()
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="Import failed: file is not UTF-8 text") from exc

    db = SessionLocal()
    try:
        result = import_catalog(db, text, mode)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=f"Import failed: {exc}") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Materials import failed", extra={"mode": mode.value})
        raise HTTPException(status_code=500, detail="Import failed: database write error") from exc
    finally:
        db.close()

    return ImportResponse(
        mode=result.mode,
        total_rows=result.total_rows,
        unique_materials=result.unique_materials,
        imported=result.imported,
    )


@router.get("/export")
def export_materials(_user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Export failed"):
            content = export_catalog_csv(db)
    finally:
        db.close()
    return _csv_download(content, "Materials_Catalog")


@router.get("/export/raw")
def export_raw_rows(_user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Export failed"):
            content = export_raw_rows_csv(db)
    finally:
        db.close()
    if content is None:
        raise HTTPException(status_code=404, detail="No data to export")
    return _csv_download(content, "Materials-Export")
