#!/usr/bin/env python3
"""OpenAPI document assembly.

Top-level schema elements are paired into operations by name suffix: with the
default suffixes, `CreateOrderReq` and `CreateOrderRes` become the request
body and "200" response of the operation at `/CreateOrder`.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ....models.models import GenerationOptions
from ..schema.generator import ImportedSchemas, generate_element_type_schema
from ..schema.parser import ElementDecl, SchemaDocument
from ..schema.resolver import extract_namespace_prefixes, resolve_imports

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.1.0"
INFO_VERSION = "1.0.0"
SUCCESS_STATUS_CODE = "200"


@dataclass
class OperationGroup:
    """Request and response elements sharing one path name."""
    path_name: str
    request: Optional[ElementDecl] = None
    response: Optional[ElementDecl] = None


def group_operations(
    elements: Iterable[ElementDecl],
    request_suffix: str,
    response_suffix: str,
) -> dict[str, OperationGroup]:
    """Group top-level elements into request/response pairs by name suffix.

    An element ending in the response suffix whose stripped name already has a
    request is that request's response. Otherwise the request suffix is tested
    before the response suffix. Elements matching neither are ignored, and a
    later element in the same role for the same path name replaces the earlier.

    Returns:
        Dict mapping path name to its group, in first-registration order
    """
    groups: dict[str, OperationGroup] = {}

    for element in elements:
        name = element.name
        response_path = name[:-len(response_suffix)] if name.endswith(response_suffix) else None

        if response_path is not None and response_path in groups and groups[response_path].request is not None:
            groups[response_path].response = element
        elif name.endswith(request_suffix):
            path_name = name[:-len(request_suffix)]
            groups.setdefault(path_name, OperationGroup(path_name)).request = element
        elif response_path is not None:
            groups.setdefault(response_path, OperationGroup(response_path)).response = element
        else:
            logger.debug(f"Element '{name}' matches neither request nor response suffix, skipping")

    return groups


def build_path(path_name: str, schema_name: str, use_schema_name_in_path: bool) -> str:
    if use_schema_name_in_path:
        return f"/{schema_name}/{path_name}"
    return f"/{path_name}"


def _content(content_type: str, schema: dict[str, Any]) -> dict[str, Any]:
    return {content_type: {"schema": schema}}


def build_operation(
    group: OperationGroup,
    path: str,
    schema: SchemaDocument,
    imported_schemas: ImportedSchemas,
    options: GenerationOptions,
    error_schema: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Build the operation object for one request/response group."""
    operation: dict[str, Any] = {
        "operationId": group.path_name,
        "summary": f"{options.http_method.upper()} {path}",
    }

    description = None
    if group.request is not None:
        description = group.request.documentation
    if description is None and group.response is not None:
        description = group.response.documentation
    if description:
        operation["description"] = description

    if group.request is not None:
        request_schema = generate_element_type_schema(
            group.request, schema, imported_schemas=imported_schemas, default_type=options.default_type
        )
        operation["requestBody"] = {
            "required": group.request.min_occurs != "0",
            "content": _content(options.content_type, request_schema.to_dict()),
        }

    responses: dict[str, Any] = {}
    if group.response is not None:
        response_schema = generate_element_type_schema(
            group.response, schema, imported_schemas=imported_schemas, default_type=options.default_type
        )
        responses[SUCCESS_STATUS_CODE] = {
            "description": "OK",
            "content": _content(options.content_type, response_schema.to_dict()),
        }

    if error_schema is not None and options.error is not None:
        responses[options.error.error_status_code] = {
            "description": options.error.error_description,
            "content": _content(options.content_type, copy.deepcopy(error_schema)),
        }

    operation["responses"] = responses
    return operation


async def generate_document(
    schema: SchemaDocument,
    schema_name: str,
    root_file_path: Optional[str],
    options: GenerationOptions,
    error_schema: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """
    Generate the OpenAPI document for a parsed schema.

    Args:
        schema: Parsed root schema
        schema_name: Display name, used as title and optional path prefix
        root_file_path: Path of the root schema file, used to resolve imports
        options: Generation options
        error_schema: Optional JSON schema for the error response

    Returns:
        The OpenAPI document as a dict
    """
    imported_schemas = await resolve_imports(
        schema.imports,
        root_file_path,
        extract_namespace_prefixes(schema),
    )

    document: dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": schema_name,
            "description": f"OpenAPI specification generated from XSD schema {schema_name}",
            "version": INFO_VERSION,
        },
        "paths": {},
    }

    groups = group_operations(schema.elements, options.request_suffix, options.response_suffix)

    for group in groups.values():
        if group.request is None and group.response is None:
            continue

        path = build_path(group.path_name, schema_name, options.use_schema_name_in_path)
        document["paths"][path] = {
            options.http_method: build_operation(
                group, path, schema, imported_schemas, options, error_schema
            )
        }

    logger.info(f"Generated {len(document['paths'])} paths for schema '{schema_name}'")
    return document
