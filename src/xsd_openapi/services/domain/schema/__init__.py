"""
XSD Schema Processing Domain

Handles XSD schema operations:
- Parsing (XSD text to immutable per-construct nodes)
- Import resolution (loading xs:import targets by namespace prefix)
- Schema generation (complex types to JSON-Schema nodes)
"""

from .generator import (
    XSD_PRIMITIVE_TYPES,
    generate_element_type_schema,
    generate_schema,
    resolve_type_reference,
)
from .nodes import ArraySchema, CombinatorSchema, ObjectSchema, PrimitiveSchema, SchemaNode
from .parser import ALWAYS_PLURAL, ComplexType, ElementDecl, SchemaDocument, parse_schema
from .resolver import extract_namespace_prefixes, resolve_imports

__all__ = [
    # Parsing
    "ALWAYS_PLURAL",
    "ComplexType",
    "ElementDecl",
    "SchemaDocument",
    "parse_schema",
    # Import resolution
    "extract_namespace_prefixes",
    "resolve_imports",
    # Generation
    "XSD_PRIMITIVE_TYPES",
    "generate_element_type_schema",
    "generate_schema",
    "resolve_type_reference",
    "ArraySchema",
    "CombinatorSchema",
    "ObjectSchema",
    "PrimitiveSchema",
    "SchemaNode",
]
