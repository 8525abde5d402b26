import logging
from typing import Optional

from fastapi import FastAPI, UploadFile, File
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .logging_setup import setup_logging
from .models import ColumnsResponse, ErrorResponse, HealthResponse
from .normalize import process_upload
from .rules import UPLOAD_FIELD

logger = logging.getLogger(__name__)

settings = Settings()
setup_logging(settings.log_level)
import_config = settings.import_config()

app = FastAPI(
    title="service-order-import",
    description="Converts service-order CSV exports into canonical JSON records",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/columns", response_model=ColumnsResponse)
def columns():
    return {"columns": list(import_config.columns)}


@app.post(
    "/upload",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_csv(file: Optional[UploadFile] = File(default=None, alias=UPLOAD_FIELD)):
    raw = await file.read() if file is not None else None
    if file is not None:
        logger.info("Received upload %r (%d bytes)", file.filename, len(raw))

    outcome = process_upload(raw, import_config)
    if not outcome.ok:
        logger.warning("Upload rejected with %d: %s", outcome.status_code, outcome.payload)
    return JSONResponse(status_code=outcome.status_code, content=outcome.payload)
