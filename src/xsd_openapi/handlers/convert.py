#!/usr/bin/env python3
"""
Handlers for XSD to OpenAPI conversion requests.

Uploaded schemas are converted from memory, so xs:import targets are not
resolved; prefixed references to imported types fall back to the default type.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import HTTPException, UploadFile

from ..core.config import api_config
from ..core.exceptions import ErrorSchemaError, XsdToOpenApiError
from ..models.models import ConversionConfig, ConversionResponse, GenerationOptions
from ..services.converter import xsd_to_openapi

logger = logging.getLogger(__name__)


async def _read_upload(file: UploadFile) -> str:
    content = await file.read()

    if not content:
        raise HTTPException(status_code=400, detail=f"Uploaded file '{file.filename}' is empty")

    if len(content) > api_config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"Uploaded file exceeds maximum size of {api_config.MAX_UPLOAD_BYTES} bytes"
        )

    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail=f"Uploaded file '{file.filename}' is not UTF-8 encoded")


def _convert_in_thread(config: ConversionConfig) -> dict[str, Any]:
    return asyncio.run(xsd_to_openapi(config))


async def handle_xsd_conversion(
    file: UploadFile,
    options: GenerationOptions,
    schema_name: Optional[str] = None,
) -> ConversionResponse:
    """Convert one uploaded XSD file to an OpenAPI document.

    Args:
        file: Uploaded XSD file
        options: Generation options
        schema_name: Optional display name (defaults to the uploaded file name)

    Returns:
        ConversionResponse with the generated document
    """
    try:
        xsd_content = await _read_upload(file)

        if not schema_name and file.filename:
            schema_name = Path(file.filename).stem

        config = ConversionConfig(xsd_content=xsd_content, schema_name=schema_name, options=options)

        logger.info(f"Converting uploaded schema {file.filename}")
        # Parsing and generation never yield to the loop; the timeout only
        # applies when they run on a worker thread
        document = await asyncio.wait_for(
            asyncio.to_thread(_convert_in_thread, config),
            timeout=api_config.OPERATION_TIMEOUT,
        )

        return ConversionResponse(
            filename=file.filename,
            schema_name=document["info"]["title"],
            path_count=len(document["paths"]),
            document=document,
        )

    except HTTPException:
        # Re-raise HTTP exceptions as-is
        raise
    except ErrorSchemaError as e:
        logger.error(f"Error response schema could not be built: {e}")
        raise HTTPException(status_code=400, detail=f"Invalid error schema: {str(e)}")
    except XsdToOpenApiError as e:
        logger.error(f"Conversion failed for {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except asyncio.TimeoutError:
        logger.error(f"Conversion timed out for {file.filename}")
        raise HTTPException(
            status_code=504,
            detail=f"Conversion exceeded {api_config.OPERATION_TIMEOUT} seconds"
        )
    except Exception as e:
        logger.error(f"Unexpected error during conversion: {e}")
        raise HTTPException(status_code=500, detail=f"Unexpected error during conversion: {str(e)}")
