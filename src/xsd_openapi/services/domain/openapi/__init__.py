"""
OpenAPI Document Domain

Pairs request/response elements by naming convention and assembles the
OpenAPI document from the schemas generated for them.
"""

from .assembler import build_operation, build_path, generate_document, group_operations

__all__ = [
    "build_operation",
    "build_path",
    "generate_document",
    "group_operations",
]
