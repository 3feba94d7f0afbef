"""
FastAPI backend server for the MISMO document checklist.
This provides REST API endpoints for the checklist frontend and report generator.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from mismo_checklist import __version__
from mismo_checklist.config import ChecklistSettings, load_settings
from mismo_checklist.exceptions import MISMOParseError, UnsupportedFileError
from mismo_checklist.processor import MISMOChecklistProcessor
from mismo_checklist.utils import setup_logging

# Setup logging
logger = setup_logging()

# Initialize FastAPI app
app = FastAPI(
    title="MISMO Checklist API",
    description="REST API that turns MISMO 3.4 loan files into document checklists",
    version=__version__,
)

# Configure CORS for frontend access
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

frontend_url = load_settings().frontend_url
if frontend_url:
    allowed_origins.append(frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

processor = MISMOChecklistProcessor()


class ChecklistRequest(BaseModel):
    xml: str
    reference_date: Optional[date] = None  # defaults to today


def _require_enabled(settings: ChecklistSettings) -> None:
    if not settings.enabled:
        raise HTTPException(status_code=503, detail="Checklist generation is disabled")


def _parse_reference_date(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid reference_date: {value!r} (expected YYYY-MM-DD)")


def _validate_upload(settings: ChecklistSettings, filename: str, size: int) -> None:
    if not settings.is_allowed_filename(filename):
        raise UnsupportedFileError(
            f"Unsupported file type for {filename!r}; allowed: {', '.join(settings.allowed_extensions)}"
        )
    if size > settings.max_upload_bytes:
        raise UnsupportedFileError(
            f"File {filename!r} is {size} bytes; limit is {settings.max_upload_bytes}",
            status_code=413,
        )


def _build_response(xml, reference_date: date, source: Optional[str] = None) -> dict:
    result = processor.process(xml, reference_date)
    response = result.to_dict()
    response["reference_date"] = reference_date.isoformat()
    if source:
        response["source"] = source
    return response


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__, "name": "mismo-checklist"}


# ============================================================================
# Checklist APIs
# ============================================================================

@app.post("/api/mortgage/checklist")
async def checklist_from_upload(
    file: UploadFile = File(...),
    reference_date: Optional[str] = Form(None),
):
    """
    Generate a document checklist from an uploaded MISMO 3.4 XML file.

    Returns the loan summary and the income, general, assets and credit lists.
    """
    try:
        settings = load_settings()
        _require_enabled(settings)
        ref = _parse_reference_date(reference_date)

        content = await file.read()
        _validate_upload(settings, file.filename or "", len(content))

        response = _build_response(content, ref, source=file.filename)
        logger.info("Generated checklist for upload %s", file.filename)
        return response

    except HTTPException:
        raise
    except UnsupportedFileError as e:
        logger.warning("Rejected upload %s: %s", file.filename, e)
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except MISMOParseError as e:
        logger.warning("Unparseable MISMO upload %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Checklist generation failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/mortgage/checklist/xml")
async def checklist_from_xml(request: ChecklistRequest):
    """Generate a document checklist from MISMO XML posted as JSON."""
    try:
        settings = load_settings()
        _require_enabled(settings)
        ref = request.reference_date or date.today()

        size = len(request.xml.encode("utf-8"))
        if size > settings.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"XML payload is {size} bytes; limit is {settings.max_upload_bytes}",
            )

        return _build_response(request.xml, ref)

    except HTTPException:
        raise
    except MISMOParseError as e:
        logger.warning("Unparseable MISMO payload: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Checklist generation failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


# Entry point for running with uvicorn directly
def main():
    """Entry point for the API server."""
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
