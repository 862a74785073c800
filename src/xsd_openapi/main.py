#!/usr/bin/env python3

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from .core.auth import uses_default_token, verify_token
from .core.config import api_config
from .core.logging import setup_logging
from .models.models import ConversionResponse, ErrorResponseOptions, GenerationOptions

logger = logging.getLogger(__name__)

# Application start time for uptime calculation
_app_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    setup_logging()
    logger.info("Starting XSD to OpenAPI service")
    if uses_default_token():
        logger.warning("Using the default API token. Set XSD_OPENAPI_API_TOKEN for production")

    yield

    logger.info("Shutting down XSD to OpenAPI service")


app = FastAPI(
    title="XSD to OpenAPI API",
    description="API for converting XSD request/response schemas into OpenAPI documents",
    version=os.getenv("APP_VERSION", "unknown"),
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_version_header(request, call_next):
    """Add version information to response headers"""
    response = await call_next(request)
    response.headers["X-API-Version"] = os.getenv("APP_VERSION", "unknown")
    return response


@app.get("/healthz")
async def health_check():
    """Liveness check: confirms the application is alive and can serve requests"""
    current_time = time.time()
    return {
        "status": "healthy",
        "timestamp": current_time,
        "uptime": current_time - _app_start_time,
        "api_version": os.getenv("APP_VERSION", "unknown"),
    }


async def _build_options(
    request_suffix: str | None,
    response_suffix: str | None,
    use_schema_name_in_path: bool | None,
    http_method: str | None,
    content_type: str | None,
    default_type: str | None,
    error_file: UploadFile | None,
    error_type_name: str | None,
    error_status_code: str | None,
    error_description: str | None,
) -> GenerationOptions:
    values = {
        "request_suffix": request_suffix,
        "response_suffix": response_suffix,
        "use_schema_name_in_path": use_schema_name_in_path,
        "http_method": http_method.lower() if http_method else None,
        "content_type": content_type,
        "default_type": default_type,
    }
    values = {key: value for key, value in values.items() if value is not None}

    try:
        if error_file is not None:
            error_content = (await error_file.read()).decode("utf-8")
            error_values = {
                "error_xsd_content": error_content,
                "error_type_name": error_type_name,
                "error_status_code": error_status_code,
                "error_description": error_description,
            }
            values["error"] = ErrorResponseOptions(
                **{key: value for key, value in error_values.items() if value is not None}
            )
        return GenerationOptions(**values)
    except (ValidationError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid generation options: {str(e)}") from e


@app.post("/api/convert", response_model=ConversionResponse)
async def convert_xsd(
    file: UploadFile = File(...),
    schema_name: str = Form(None),
    request_suffix: str = Form(None),
    response_suffix: str = Form(None),
    use_schema_name_in_path: bool = Form(None),
    http_method: str = Form(None),
    content_type: str = Form(None),
    default_type: str = Form(None),
    error_file: UploadFile = File(None),
    error_type_name: str = Form(None),
    error_status_code: str = Form(None),
    error_description: str = Form(None),
    token: str = Depends(verify_token),
):
    """Convert an uploaded XSD schema to an OpenAPI 3.1 document.

    Request/response elements are paired by suffix; an optional error XSD
    adds an error response to every operation.
    """
    from .handlers.convert import handle_xsd_conversion

    options = await _build_options(
        request_suffix,
        response_suffix,
        use_schema_name_in_path,
        http_method,
        content_type,
        default_type,
        error_file,
        error_type_name,
        error_status_code,
        error_description,
    )
    return await handle_xsd_conversion(file, options, schema_name)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
