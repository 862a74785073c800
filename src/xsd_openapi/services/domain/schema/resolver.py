#!/usr/bin/env python3

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional

from ....core.exceptions import ImportResolutionError
from .parser import XS_NS, ImportDecl, SchemaDocument, parse_schema

logger = logging.getLogger(__name__)

SCHEMA_FILE_EXTENSION = ".xsd"


def extract_namespace_prefixes(schema: SchemaDocument) -> dict[str, str]:
    """Map namespace URIs to the prefixes declared for them on the schema root.

    Prefixes bound to the XML Schema namespace are skipped, as is the default
    namespace. When a URI is declared under several prefixes the last one wins.
    """
    prefixes = {}
    for prefix, uri in schema.namespaces.items():
        if not prefix or uri == XS_NS or prefix in ("xs", "xsd"):
            continue
        prefixes[uri] = prefix
    return prefixes


def import_file_path(schema_location: str, root_file_path: str) -> Path:
    """Resolve an import's schemaLocation against the root input file's directory."""
    file_name = schema_location
    if not file_name.endswith(SCHEMA_FILE_EXTENSION):
        file_name = f"{file_name}{SCHEMA_FILE_EXTENSION}"
    return Path(root_file_path).parent / file_name


async def _load_imported_schema(path: Path) -> SchemaDocument:
    if not path.is_file():
        raise ImportResolutionError(f"Imported schema file not found: {path}")

    try:
        content = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise ImportResolutionError(f"Failed to read imported schema {path}: {e}") from e

    return parse_schema(content, source=str(path))


async def resolve_imports(
    import_decls: Iterable[ImportDecl],
    root_file_path: Optional[str],
    namespace_prefixes: Mapping[str, str],
) -> dict[str, SchemaDocument]:
    """
    Load every imported schema that is referenced through a declared prefix.

    Only imports declared by the root schema are followed; imports inside the
    imported files are not. Files are read concurrently and the first failure
    aborts the whole resolution.

    Args:
        import_decls: xs:import declarations of the root schema
        root_file_path: Path of the root input file, None for in-memory content
        namespace_prefixes: Namespace URI to prefix map of the root schema

    Returns:
        Dict mapping namespace prefix to the parsed imported schema
    """
    import_decls = list(import_decls)
    if not import_decls or not root_file_path:
        return {}

    pending: list[tuple[str, Path]] = []
    for import_decl in import_decls:
        prefix = namespace_prefixes.get(import_decl.namespace)
        if not prefix:
            logger.debug(f"Skipping import of namespace '{import_decl.namespace}': no prefix declared for it")
            continue
        pending.append((prefix, import_file_path(import_decl.schema_location, root_file_path)))

    if not pending:
        return {}

    logger.info(f"Resolving {len(pending)} schema imports for {root_file_path}")

    schemas = await asyncio.gather(*(_load_imported_schema(path) for _prefix, path in pending))

    imported_schemas = {}
    for (prefix, path), schema in zip(pending, schemas):
        if prefix in imported_schemas:
            logger.debug(f"Prefix '{prefix}' is bound to more than one import, using {path}")
        imported_schemas[prefix] = schema

    return imported_schemas
