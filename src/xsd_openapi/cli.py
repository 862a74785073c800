#!/usr/bin/env python3
"""Command-line interface: convert an XSD file (or inline XSD) to OpenAPI."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .core.exceptions import XsdToOpenApiError
from .core.logging import setup_logging
from .models.models import ConversionConfig, GenerationOptions
from .services.converter import xsd_to_openapi

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="xsd-openapi",
        description="Convert an XSD request/response schema into an OpenAPI 3.1 document",
    )

    source = ap.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", "-i", help="Path to the root XSD file")
    source.add_argument("--xsd-content", help="Inline XSD content (imports are not resolved)")

    ap.add_argument("--output", "-o", help="Output file (.json, .yaml or .yml); prints JSON to stdout when omitted")
    ap.add_argument("--schema-name", help="Schema display name (defaults to the input file name)")
    ap.add_argument("--config", help="YAML file with generation options (same keys as the flags below)")

    ap.add_argument("--request-suffix", help="Suffix marking request elements (default: Req)")
    ap.add_argument("--response-suffix", help="Suffix marking response elements (default: Res)")
    ap.add_argument(
        "--use-schema-name-in-path",
        action="store_true",
        default=None,
        help="Prefix every path with the schema name",
    )
    ap.add_argument("--http-method", choices=["get", "post", "put", "delete", "patch"])
    ap.add_argument("--content-type", help="Media type of request and response bodies")
    ap.add_argument("--default-type", help="JSON type used for untyped or unknown elements")

    ap.add_argument("--error-xsd", dest="error_xsd_file_path", help="XSD file holding the error response type")
    ap.add_argument("--error-type-name", help="Complex type in the error XSD (default: first complex type)")
    ap.add_argument("--error-status-code", help="Status code of the error response (default: 500)")
    ap.add_argument("--error-description", help="Description of the error response")

    ap.add_argument("--log-level", default=None, help="Logging level (default: XSD_OPENAPI_LOG_LEVEL or INFO)")
    return ap


def load_options_file(path: str) -> dict[str, Any]:
    """Read generation options from a YAML mapping."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Options file {path} must contain a mapping")
    return data


def build_options(args: argparse.Namespace) -> GenerationOptions:
    """Merge options file values with command-line flags (flags win)."""
    values: dict[str, Any] = load_options_file(args.config) if args.config else {}

    for key in (
        "request_suffix",
        "response_suffix",
        "use_schema_name_in_path",
        "http_method",
        "content_type",
        "default_type",
    ):
        value = getattr(args, key)
        if value is not None:
            values[key] = value

    error_values: dict[str, Any] = dict(values.get("error") or {})
    for key in ("error_xsd_file_path", "error_type_name", "error_status_code", "error_description"):
        value = getattr(args, key)
        if value is not None:
            error_values[key] = value
    if error_values:
        values["error"] = error_values

    return GenerationOptions(**values)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level.upper() if args.log_level else None)

    try:
        config = ConversionConfig(
            input_file_path=args.input,
            xsd_content=args.xsd_content,
            output_file_path=args.output,
            schema_name=args.schema_name,
            options=build_options(args),
        )
        document = asyncio.run(xsd_to_openapi(config))
    except (XsdToOpenApiError, ValidationError, ValueError, OSError) as e:
        logger.error(f"Conversion failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        print(f"OK: wrote OpenAPI document to {Path(args.output)}", file=sys.stderr)
    else:
        print(json.dumps(document, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
