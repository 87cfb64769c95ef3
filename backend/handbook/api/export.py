import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ..core.content import get_content_source, load_content_cache
from ..core.errors import ExportError
from ..services.export import export_policies_csv, EXPORT_FILENAME

router = APIRouter()
logger = logging.getLogger("handbook.export")


@router.get("/PolicyExportController/ExportCsv")
@router.get("/PolicyExport/ExportCsv")
def export_csv(source=Depends(get_content_source)):
    """Download every policy card as a CSV file"""
    try:
        cache = load_content_cache(source)
        content = export_policies_csv(cache)
    except Exception as e:
        logger.error("Error exporting policies to CSV", exc_info=True)
        raise ExportError() from e

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'}
    )
