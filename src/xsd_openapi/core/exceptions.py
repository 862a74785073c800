#!/usr/bin/env python3
"""
Exceptions raised by the XSD to OpenAPI conversion.

Every failure is terminal for the conversion call that raised it; the outer
surfaces (CLI, HTTP handlers) translate these into exit codes and HTTP errors.
"""


class XsdToOpenApiError(Exception):
    """Base class for all conversion failures."""
    pass


class InputFileNotFoundError(XsdToOpenApiError):
    """Raised when the configured input file does not exist."""
    pass


class SchemaParseError(XsdToOpenApiError):
    """Raised when schema content is not well-formed XML."""
    pass


class SchemaNotFoundError(XsdToOpenApiError):
    """Raised when parsed content has no xsd:schema root element."""
    pass


class ImportResolutionError(XsdToOpenApiError):
    """Raised when an xsd:import target file cannot be found."""
    pass


class ErrorSchemaError(XsdToOpenApiError):
    """Raised when the configured error response schema cannot be built."""
    pass
