#!/usr/bin/env python3
"""Generated JSON-Schema nodes.

One class per node shape so that illegal combinations (for example oneOf next
to properties) cannot be built. Every node serializes to a plain dict with
to_dict(); key order follows the OpenAPI conventions used in the output.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class PrimitiveType(str, Enum):
    """JSON-Schema primitive types produced for XSD built-ins."""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"


class CombinatorKind(str, Enum):
    """JSON-Schema combinators used for xs:choice."""
    ONE_OF = "oneOf"
    ANY_OF = "anyOf"


@dataclass
class Facets:
    """Facets copied from the source xs:element."""
    default: Optional[str] = None
    fixed: Optional[str] = None
    description: Optional[str] = None

    def apply(self, data: dict[str, Any]) -> dict[str, Any]:
        if self.default is not None:
            data["default"] = self.default
        if self.fixed is not None:
            data["fixed"] = self.fixed
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass
class PrimitiveSchema:
    type: str  # PrimitiveType value or the configured default type
    facets: Facets = field(default_factory=Facets)

    def to_dict(self) -> dict[str, Any]:
        return self.facets.apply({"type": self.type})


@dataclass
class ObjectSchema:
    properties: dict[str, "SchemaNode"] = field(default_factory=dict)
    required: Optional[list[str]] = None
    facets: Facets = field(default_factory=Facets)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": "object",
            "properties": {name: node.to_dict() for name, node in self.properties.items()},
        }
        if self.required is not None:
            data["required"] = list(self.required)
        return self.facets.apply(data)


@dataclass
class ArraySchema:
    items: "SchemaNode"
    facets: Facets = field(default_factory=Facets)

    def to_dict(self) -> dict[str, Any]:
        return self.facets.apply({"type": "array", "items": self.items.to_dict()})


@dataclass
class CombinatorSchema:
    kind: CombinatorKind
    alternatives: list["SchemaNode"] = field(default_factory=list)
    facets: Facets = field(default_factory=Facets)

    def to_dict(self) -> dict[str, Any]:
        return self.facets.apply({self.kind.value: [alt.to_dict() for alt in self.alternatives]})


SchemaNode = Union[PrimitiveSchema, ObjectSchema, ArraySchema, CombinatorSchema]
