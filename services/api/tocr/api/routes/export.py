from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from tocr.api.deps import require_editor
from tocr.db.session import get_db
from tocr.services.csv_export import build_export_rows, render_export_csv

router = APIRouter(prefix="/v1/export", tags=["export"])


@router.get("")
def export_csv(
    magazine_id: str | None = Query(default=None, alias="magazineId"),
    db: Session = Depends(get_db),
    user=Depends(require_editor),
) -> Response:
    rows = build_export_rows(db, magazine_id=magazine_id)
    filename = f"tocr-export-{date.today().isoformat()}.csv"
    return Response(
        content=render_export_csv(rows).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
