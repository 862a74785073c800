#!/usr/bin/env python3
"""Type resolution and JSON-Schema generation for XSD complex types.

generate_schema() turns a named complex type into a SchemaNode tree:

- xs:sequence becomes an object whose properties follow element order
  (elements of a choice nested in the sequence are flattened in place)
- a bare xs:choice becomes oneOf, or anyOf when the choice is unbounded
- XSD built-ins map to JSON-Schema primitives
- references to other complex types recurse, in the same document or, for
  prefixed references, in the imported document registered for that prefix

Recursion is bounded by the resolution chain: a type that is already being
resolved on the current path yields an empty object instead of recursing.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from .nodes import (
    ArraySchema,
    CombinatorKind,
    CombinatorSchema,
    Facets,
    ObjectSchema,
    PrimitiveSchema,
    PrimitiveType,
    SchemaNode,
)
from .parser import Choice, ElementDecl, SchemaDocument, Sequence

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "string"

# XSD built-in type (local name) -> JSON-Schema primitive
XSD_PRIMITIVE_TYPES: dict[str, PrimitiveType] = {
    "string": PrimitiveType.STRING,
    "decimal": PrimitiveType.NUMBER,
    "float": PrimitiveType.NUMBER,
    "double": PrimitiveType.NUMBER,
    "integer": PrimitiveType.INTEGER,
    "boolean": PrimitiveType.BOOLEAN,
    "date": PrimitiveType.STRING,
    "dateTime": PrimitiveType.STRING,
    "time": PrimitiveType.STRING,
}

# Treated as the XML Schema namespace even when the document does not declare them
RESERVED_XSD_PREFIXES = frozenset({"xs", "xsd"})

ImportedSchemas = Mapping[str, SchemaDocument]


@dataclass(frozen=True)
class TypeReference:
    """An element type attribute split into prefix and local name.

    prefix is None for types local to the current document. is_builtin marks
    references into the XML Schema namespace.
    """
    prefix: Optional[str]
    local_name: str
    is_builtin: bool = False


def resolve_type_reference(raw_type: Optional[str], schema: SchemaDocument) -> Optional[TypeReference]:
    """Split a raw type attribute value into a TypeReference.

    Returns None when the element has no type attribute.
    """
    if not raw_type:
        return None

    if ':' not in raw_type:
        return TypeReference(prefix=None, local_name=raw_type)

    prefix, local_name = raw_type.split(':', 1)

    if prefix in schema.own_prefixes:
        return TypeReference(prefix=None, local_name=local_name)

    if prefix in RESERVED_XSD_PREFIXES or prefix in schema.xsd_prefixes:
        return TypeReference(prefix=None, local_name=local_name, is_builtin=True)

    return TypeReference(prefix=prefix, local_name=local_name)


def _sequence_elements(sequence: Sequence) -> list[ElementDecl]:
    elements = []
    for particle in sequence.particles:
        if isinstance(particle, Choice):
            elements.extend(particle.flattened_elements())
        else:
            elements.append(particle)
    return elements


def generate_element_type_schema(
    element: ElementDecl,
    schema: SchemaDocument,
    resolved_types: frozenset[str] = frozenset(),
    imported_schemas: Optional[ImportedSchemas] = None,
    default_type: str = DEFAULT_TYPE,
) -> SchemaNode:
    """Generate the schema for the type an element refers to, without occurrence or facets."""
    ref = resolve_type_reference(element.type_ref, schema)

    if ref is None:
        node = PrimitiveSchema(type=default_type)
    elif ref.prefix is not None:
        imported_schema = imported_schemas.get(ref.prefix) if imported_schemas else None
        if imported_schema is not None:
            node = generate_schema(
                imported_schema, ref.local_name, resolved_types, imported_schemas, default_type
            )
        else:
            logger.debug(
                f"No imported schema for prefix '{ref.prefix}' of element '{element.name}', "
                f"using default type '{default_type}'"
            )
            node = PrimitiveSchema(type=default_type)
    elif ref.local_name in XSD_PRIMITIVE_TYPES:
        node = PrimitiveSchema(type=XSD_PRIMITIVE_TYPES[ref.local_name].value)
    elif ref.is_builtin:
        node = PrimitiveSchema(type=default_type)
    else:
        node = generate_schema(schema, ref.local_name, resolved_types, imported_schemas, default_type)

    return node


def _element_schema(
    element: ElementDecl,
    schema: SchemaDocument,
    resolved_types: frozenset[str],
    imported_schemas: Optional[ImportedSchemas],
    default_type: str,
) -> SchemaNode:
    """Build the property schema for one element, facets and array wrapping included."""
    node = generate_element_type_schema(element, schema, resolved_types, imported_schemas, default_type)

    if element.is_repeated:
        node = ArraySchema(items=node)

    node.facets = Facets(
        default=element.default,
        fixed=element.fixed,
        description=element.documentation,
    )
    return node


def _object_schema(
    elements: Iterable[ElementDecl],
    schema: SchemaDocument,
    resolved_types: frozenset[str],
    imported_schemas: Optional[ImportedSchemas],
    default_type: str,
) -> ObjectSchema:
    object_schema = ObjectSchema()

    for element in elements:
        property_schema = _element_schema(element, schema, resolved_types, imported_schemas, default_type)

        if element.is_required_occurrence:
            if object_schema.required is None:
                object_schema.required = []
            # Arrays are never required, whatever their minOccurs
            if not isinstance(property_schema, ArraySchema) and element.name not in object_schema.required:
                object_schema.required.append(element.name)

        object_schema.properties[element.name] = property_schema

    return object_schema


def _choice_schema(
    choice: Choice,
    schema: SchemaDocument,
    resolved_types: frozenset[str],
    imported_schemas: Optional[ImportedSchemas],
    default_type: str,
) -> CombinatorSchema:
    kind = CombinatorKind.ANY_OF if choice.is_unbounded else CombinatorKind.ONE_OF

    alternatives: list[SchemaNode] = []
    for particle in choice.particles:
        branch_elements = _sequence_elements(particle) if isinstance(particle, Sequence) else [particle]
        alternatives.append(
            _object_schema(branch_elements, schema, resolved_types, imported_schemas, default_type)
        )

    return CombinatorSchema(kind=kind, alternatives=alternatives)


def generate_schema(
    schema: SchemaDocument,
    type_name: str,
    resolved_types: frozenset[str] = frozenset(),
    imported_schemas: Optional[ImportedSchemas] = None,
    default_type: str = DEFAULT_TYPE,
) -> SchemaNode:
    """Generate the JSON-Schema node for a named complex type.

    Args:
        schema: Document the type is looked up in
        type_name: Local name of the complex type
        resolved_types: Type names being resolved on the current path
        imported_schemas: Imported documents keyed by namespace prefix
        default_type: Primitive type used for unknown or untyped references

    Returns:
        The generated schema node. Unknown type names (scalar element types
        such as xs:string end up here) produce the default primitive type.
    """
    if type_name in resolved_types:
        logger.debug(f"Circular reference to type '{type_name}', emitting empty object")
        return ObjectSchema()

    chain = resolved_types | {type_name}

    complex_type = schema.find_complex_type(type_name)
    if complex_type is None:
        return PrimitiveSchema(type=default_type)

    content = complex_type.content
    if isinstance(content, Sequence):
        return _object_schema(_sequence_elements(content), schema, chain, imported_schemas, default_type)
    if isinstance(content, Choice):
        return _choice_schema(content, schema, chain, imported_schemas, default_type)

    return PrimitiveSchema(type=default_type)
