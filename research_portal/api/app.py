"""HTTP API for the Research Portal.

Endpoints:
- POST /api/extract-financial   upload -> FinancialExtractionResult JSON
- POST /api/analyze-earnings    upload -> EarningsAnalysisResult JSON
- POST /api/download-excel      FinancialExtractionResult JSON -> .xlsx
- POST /api/download-summary    EarningsAnalysisResult JSON -> .txt
- GET  /health

Every failure is returned as ``{"success": false, "error", "details", "type"}``.
"""

from __future__ import annotations

import json
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from research_portal.agents.earnings_agent import EarningsAgent
from research_portal.agents.financial_agent import FinancialExtractionAgent
from research_portal.agents.schemas.earnings import EarningsAnalysisResult
from research_portal.agents.tools.document_parser import ParsedDocument, parse_document
from research_portal.config.logging_config import get_logger, setup_logging
from research_portal.config.settings import get_settings
from research_portal.errors import InvalidInputError, PortalError
from research_portal.reports.excel_renderer import (
    XLSX_CONTENT_TYPE,
    render,
    validate_financial_payload,
)
from research_portal.reports.filenames import excel_filename, summary_filename
from research_portal.reports.text_summary import TEXT_CONTENT_TYPE, render_summary

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("api_started", model=get_settings().llm_model)
    yield
    logger.info("api_stopped")


app = FastAPI(
    title="Research Portal API",
    version="0.1.0",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_financial_agent() -> FinancialExtractionAgent:
    return FinancialExtractionAgent()


def get_earnings_agent() -> EarningsAgent:
    return EarningsAgent()


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    logger.warning(
        "request_failed",
        path=request.url.path,
        error_type=exc.error_type,
        error=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected_error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected server error occurred. Please try again.",
            "details": str(exc),
            "type": "UNKNOWN",
        },
    )


async def _read_upload(file: UploadFile) -> ParsedDocument:
    data = await file.read()
    return await run_in_threadpool(
        parse_document, data, file.filename or "", file.content_type,
    )


async def _read_json(request: Request) -> object:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidInputError("Invalid JSON body.") from exc


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    return {"status": "ok", "model": get_settings().llm_model}


@app.post("/api/extract-financial")
async def extract_financial(
    file: UploadFile = File(...),
    agent: FinancialExtractionAgent = Depends(get_financial_agent),
) -> dict:
    """Parse an uploaded filing and extract its income statement."""
    start = time.perf_counter()
    doc = await _read_upload(file)
    result = await run_in_threadpool(agent.extract, doc.text, doc.truncated)
    if doc.truncated:
        result = result.with_note_prefix(doc.truncation_note())

    return {
        "success": True,
        "data": result.model_dump(by_alias=True),
        "processingTime": round(time.perf_counter() - start, 2),
        "documentName": file.filename,
    }


@app.post("/api/analyze-earnings")
async def analyze_earnings(
    file: UploadFile = File(...),
    agent: EarningsAgent = Depends(get_earnings_agent),
) -> dict:
    """Parse an uploaded transcript and analyze management commentary."""
    start = time.perf_counter()
    doc = await _read_upload(file)
    result = await run_in_threadpool(agent.analyze, doc.text, doc.truncated)
    if doc.truncated:
        result = result.with_note_prefix(doc.truncation_note())

    return {
        "success": True,
        "data": result.model_dump(by_alias=True),
        "processingTime": round(time.perf_counter() - start, 2),
        "documentName": file.filename,
    }


@app.post("/api/download-excel")
async def download_excel(request: Request) -> Response:
    """Render a previously extracted result as a formatted workbook."""
    result = validate_financial_payload(await _read_json(request))
    content = await run_in_threadpool(render, result)
    return _attachment(content, XLSX_CONTENT_TYPE, excel_filename(result.company_name))


@app.post("/api/download-summary")
async def download_summary(request: Request) -> Response:
    """Render a previously produced earnings analysis as a text report."""
    payload = await _read_json(request)
    if not isinstance(payload, dict):
        raise InvalidInputError("Invalid JSON body: expected an object.")
    document_name = str(payload.pop("documentName", "") or "")
    try:
        result = EarningsAnalysisResult.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise InvalidInputError("Missing or invalid earnings analysis fields.", fields=fields) from exc

    text = render_summary(result, document_name=document_name)
    return _attachment(text.encode("utf-8"), TEXT_CONTENT_TYPE, summary_filename(result.company_name))
