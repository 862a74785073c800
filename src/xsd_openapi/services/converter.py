#!/usr/bin/env python3
"""
XSD to OpenAPI conversion entry point.

Loads the schema from a file or inline content, builds the optional error
response schema, generates the OpenAPI document and writes it when an output
path is configured.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from ..core.exceptions import ErrorSchemaError, InputFileNotFoundError, XsdToOpenApiError
from ..models.models import ConversionConfig, ErrorResponseOptions
from .domain.openapi import generate_document
from .domain.schema import generate_schema, parse_schema

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_NAME = "schema"
YAML_EXTENSIONS = (".yaml", ".yml")


def resolve_schema_name(schema_name: Optional[str], input_file_path: Optional[str]) -> str:
    """Display name for the schema: explicit name, else input file stem, lowercased."""
    if schema_name:
        return schema_name.lower()
    if input_file_path:
        return Path(input_file_path).stem.lower()
    return DEFAULT_SCHEMA_NAME


async def _read_bytes(path: Path) -> bytes:
    return await asyncio.to_thread(path.read_bytes)


async def build_error_schema(error: ErrorResponseOptions, default_type: str = "string") -> dict[str, Any]:
    """Build the JSON schema for the configured error response.

    Inline JSON schemas are used as-is. XSD sources are parsed and the complex
    type named by error_type_name, or the first complex type, is generated.

    Raises:
        ErrorSchemaError: If the error XSD is missing, malformed or has no usable type
    """
    if error.error_schema is not None:
        return error.error_schema

    try:
        if error.error_xsd_file_path is not None:
            path = Path(error.error_xsd_file_path)
            if not path.is_file():
                raise InputFileNotFoundError(f"Error schema file not found: {path}")
            content = await _read_bytes(path)
            source = str(path)
        else:
            content = error.error_xsd_content
            source = None

        error_xsd = parse_schema(content, source=source)
    except XsdToOpenApiError as e:
        raise ErrorSchemaError(f"Failed to load error schema: {e}") from e

    if error.error_type_name:
        complex_type = error_xsd.find_complex_type(error.error_type_name)
        if complex_type is None:
            raise ErrorSchemaError(f"Error schema has no complex type named '{error.error_type_name}'")
    elif error_xsd.complex_types:
        complex_type = error_xsd.complex_types[0]
    else:
        raise ErrorSchemaError("Error schema does not declare any complex type")

    logger.debug(f"Using complex type '{complex_type.name}' as error response schema")
    return generate_schema(error_xsd, complex_type.name, default_type=default_type).to_dict()


def serialize_document(document: dict[str, Any], output_path: Path) -> str:
    """Render the document as YAML for .yaml/.yml paths, JSON otherwise."""
    if output_path.suffix.lower() in YAML_EXTENSIONS:
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    return json.dumps(document, indent=2, ensure_ascii=False)


async def write_document(document: dict[str, Any], output_file_path: str) -> Path:
    output_path = Path(output_file_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    content = serialize_document(document, output_path)
    await asyncio.to_thread(output_path.write_text, content, encoding="utf-8")

    logger.info(f"Wrote OpenAPI document to {output_path}")
    return output_path


async def xsd_to_openapi(config: ConversionConfig) -> dict[str, Any]:
    """
    Convert an XSD schema to an OpenAPI document.

    Args:
        config: Conversion configuration (schema source, output, options)

    Returns:
        The generated OpenAPI document

    Raises:
        InputFileNotFoundError: If input_file_path does not exist
        SchemaParseError: If the schema is not well-formed XML
        SchemaNotFoundError: If the content has no xs:schema root
        ImportResolutionError: If an imported schema file is missing
        ErrorSchemaError: If the error response schema cannot be built
    """
    options = config.options

    if config.input_file_path is not None:
        input_path = Path(config.input_file_path)
        if not input_path.is_file():
            raise InputFileNotFoundError(f"Input file not found: {input_path}")
        logger.info(f"Converting XSD file {input_path}")
        content = await _read_bytes(input_path)
        schema = parse_schema(content, source=str(input_path))
    else:
        logger.info("Converting inline XSD content")
        schema = parse_schema(config.xsd_content)

    schema_name = resolve_schema_name(config.schema_name, config.input_file_path)

    error_schema = None
    if options.error is not None:
        error_schema = await build_error_schema(options.error, options.default_type)

    document = await generate_document(
        schema,
        schema_name,
        config.input_file_path,
        options,
        error_schema,
    )

    if config.output_file_path:
        await write_document(document, config.output_file_path)

    return document
