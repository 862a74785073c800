#!/usr/bin/env python3
"""
Deployment defaults for OpenAPI generation and the HTTP API.

Every value can be overridden through an environment variable so that a
deployment can change, e.g., the default HTTP method or naming suffixes
without callers passing them on every conversion.
"""

from .env_utils import getenv_bool, getenv_choice, getenv_clean, getenv_int, getenv_list

HTTP_METHODS = ("get", "post", "put", "delete", "patch")


class GenerationDefaults:
    """Fallback values for GenerationOptions fields.

    Read once at import time; GenerationOptions uses these as field defaults.
    """

    REQUEST_SUFFIX = getenv_clean("XSD_OPENAPI_REQUEST_SUFFIX", "Req")
    RESPONSE_SUFFIX = getenv_clean("XSD_OPENAPI_RESPONSE_SUFFIX", "Res")
    USE_SCHEMA_NAME_IN_PATH = getenv_bool("XSD_OPENAPI_USE_SCHEMA_NAME_IN_PATH", False)
    HTTP_METHOD = getenv_choice("XSD_OPENAPI_HTTP_METHOD", "post", HTTP_METHODS)
    CONTENT_TYPE = getenv_clean("XSD_OPENAPI_CONTENT_TYPE", "application/json")
    DEFAULT_TYPE = getenv_clean("XSD_OPENAPI_DEFAULT_TYPE", "string")

    ERROR_STATUS_CODE = getenv_clean("XSD_OPENAPI_ERROR_STATUS_CODE", "500")
    ERROR_DESCRIPTION = getenv_clean("XSD_OPENAPI_ERROR_DESCRIPTION", "Internal server error")


# Singleton instance
generation_defaults = GenerationDefaults()


# Token accepted when XSD_OPENAPI_API_TOKEN is unset; only meant for local use
DEFAULT_API_TOKEN = "devtoken"


class ApiConfig:
    """HTTP API limits and credentials."""

    API_TOKEN = getenv_clean("XSD_OPENAPI_API_TOKEN", DEFAULT_API_TOKEN)

    # Max seconds for one conversion request
    OPERATION_TIMEOUT = getenv_int("XSD_OPENAPI_OPERATION_TIMEOUT", 60)

    # Max accepted upload size in bytes
    MAX_UPLOAD_BYTES = getenv_int("XSD_OPENAPI_MAX_UPLOAD_BYTES", 5 * 1024 * 1024)

    CORS_ORIGINS = getenv_list("CORS_ORIGINS", ["http://localhost:3000"])


# Singleton instance
api_config = ApiConfig()
