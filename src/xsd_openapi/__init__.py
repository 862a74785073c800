"""
XSD to OpenAPI converter.

Converts an XSD schema describing request/response messages into an OpenAPI
3.1 document, pairing request and response elements into path operations.
"""

from .core.exceptions import (
    ErrorSchemaError,
    ImportResolutionError,
    InputFileNotFoundError,
    SchemaNotFoundError,
    SchemaParseError,
    XsdToOpenApiError,
)
from .models.models import ConversionConfig, ErrorResponseOptions, GenerationOptions
from .services.converter import xsd_to_openapi

__all__ = [
    "xsd_to_openapi",
    # Configuration
    "ConversionConfig",
    "ErrorResponseOptions",
    "GenerationOptions",
    # Errors
    "XsdToOpenApiError",
    "InputFileNotFoundError",
    "SchemaParseError",
    "SchemaNotFoundError",
    "ImportResolutionError",
    "ErrorSchemaError",
]
