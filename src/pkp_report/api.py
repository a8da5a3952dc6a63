from __future__ import annotations

import io
import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse

from pkp_report.config import settings
from pkp_report.models.report import ReportInput, suggested_filename
from pkp_report.services.export.download import MEDIA_TYPE_XLSX, content_disposition
from pkp_report.services.xlsx.layout import generate

logger = logging.getLogger(__name__)

app = FastAPI(title="pkp-report", version="0.1.0")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/v1/reports/pkp:export")
def export_pkp(report: ReportInput) -> StreamingResponse:
    buf = io.BytesIO()
    try:
        generate(report, buf, layout=settings.layout())
    except Exception as e:
        logger.exception("workbook generation failed for %r", report.root.pkp_name)
        raise HTTPException(status_code=500, detail=f"workbook generation failed: {type(e).__name__}") from e

    buf.seek(0)
    headers = {"Content-Disposition": content_disposition(suggested_filename(report.root))}
    return StreamingResponse(buf, media_type=MEDIA_TYPE_XLSX, headers=headers)
