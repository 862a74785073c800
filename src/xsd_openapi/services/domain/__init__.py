"""
Domain Layer

This package contains the conversion logic organized by domain area.
Domain services implement core algorithms but leave file output and
transport concerns to the services and handlers layers.

Domains:
- schema: XSD parsing, import resolution and JSON-Schema generation
- openapi: Request/response pairing and OpenAPI document assembly
"""
