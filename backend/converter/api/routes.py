"""API routes for conversion."""
import asyncio
import logging
import math
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import Response

from converter.config import (
    DEFAULT_QUALITY,
    ICO_SIZES,
    INPUT_EXTENSIONS,
    MAX_UPLOAD_SIZE_BYTES,
    OUTPUT_FORMATS,
    QUALITY_MAX,
    QUALITY_MIN,
    QUALITY_STEP,
)
from converter.conversion.errors import ConversionError, MissingInput, UploadTooLarge
from converter.conversion.filenames import content_disposition
from converter.conversion.models import FORMAT_ALIASES, FORMAT_SPECS, ConversionRequest, TargetFormat
from converter.conversion.service import get_conversion_service
from converter.request_log import request_logger

logger = logging.getLogger("converter.api")
router = APIRouter(prefix="/api", tags=["converter"])


def parse_quality(value: Optional[str], log=logger) -> Optional[float]:
    """Form quality as a float; None when absent or not a finite number."""
    if value is None or not value.strip():
        return None
    try:
        quality = float(value)
    except ValueError:
        log.warning("Failed to parse quality string: %s", value)
        return None
    if not math.isfinite(quality):
        log.warning("Failed to parse quality string: %s", value)
        return None
    return quality


async def _read_upload(file: UploadFile) -> bytes:
    max_mb = MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
    chunks: list[bytes] = []
    total = 0
    while chunk := await file.read(1024 * 1024):
        total += len(chunk)
        if total > MAX_UPLOAD_SIZE_BYTES:
            raise UploadTooLarge(f"File too large (max {max_mb} MB)")
        chunks.append(chunk)
    return b"".join(chunks)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/limits")
def get_limits():
    return {
        "max_upload_size_mb": MAX_UPLOAD_SIZE_BYTES // (1024 * 1024),
        "max_upload_size_bytes": MAX_UPLOAD_SIZE_BYTES,
    }


@router.get("/formats")
def get_formats():
    """Accepted inputs, output formats and the quality slider for clients."""
    outputs = {}
    for name in OUTPUT_FORMATS:
        spec = FORMAT_SPECS[TargetFormat(FORMAT_ALIASES.get(name, name))]
        outputs[name] = {"mime_type": spec.mime_type, "supports_quality": spec.supports_quality}
    return {
        "input_extensions": INPUT_EXTENSIONS,
        "output": outputs,
        "ico_sizes": list(ICO_SIZES),
        "default_quality": DEFAULT_QUALITY,
        "quality": {"min": QUALITY_MIN, "max": QUALITY_MAX, "step": QUALITY_STEP},
    }


@router.post("/convert")
async def convert_file(
    request: Request,
    file: Optional[UploadFile] = File(None),
    targetFormat: Optional[str] = Form(None),
    quality: Optional[str] = Form(None),
):
    """Convert one uploaded image and return it as an attachment."""
    log = request_logger("converter.api", request.state.request_id)
    log.info("Received request to /api/convert")
    if file is None:
        raise MissingInput("No file provided.")
    if not targetFormat or not targetFormat.strip():
        raise MissingInput("No target format provided.")

    log.info("File name: %s", file.filename)
    log.info("Target format: %s", targetFormat)
    if quality:
        log.info("Requested quality: %s", quality)

    conversion = ConversionRequest(
        source_bytes=await _read_upload(file),
        source_name=file.filename or "",
        source_mime_type=file.content_type or "",
        target_format=targetFormat,
        quality=parse_quality(quality, log),
    )
    svc = get_conversion_service()
    try:
        result = await asyncio.to_thread(svc.convert, conversion, log)
    except ConversionError:
        raise
    except Exception as e:
        log.exception("Error processing /api/convert: %s", e)
        raise HTTPException(500, str(e) or "Error processing file.")
    return Response(
        content=result.output_bytes,
        media_type=result.output_mime_type,
        headers={"Content-Disposition": content_disposition(result.output_filename)},
    )
