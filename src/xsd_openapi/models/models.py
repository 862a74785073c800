#!/usr/bin/env python3

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.config import generation_defaults

# Pydantic Models

HttpMethod = Literal["get", "post", "put", "delete", "patch"]


class ErrorResponseOptions(BaseModel):
    """Error response attached to every generated operation.

    Exactly one error schema source must be given: an inline JSON schema, inline
    XSD content, or a path to an XSD file. For the XSD sources the complex type
    named by error_type_name (or the first complex type) becomes the schema.
    """

    model_config = ConfigDict(frozen=True)

    error_schema: dict[str, Any] | None = None
    error_xsd_content: str | None = None
    error_xsd_file_path: str | None = None
    error_type_name: str | None = None
    error_status_code: str = generation_defaults.ERROR_STATUS_CODE
    error_description: str = generation_defaults.ERROR_DESCRIPTION

    @field_validator("error_status_code", mode="before")
    @classmethod
    def _status_code_as_string(cls, value: Any) -> Any:
        # YAML and JSON option files carry status codes as integers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _check_single_source(self) -> "ErrorResponseOptions":
        sources = [self.error_schema, self.error_xsd_content, self.error_xsd_file_path]
        provided = sum(1 for source in sources if source is not None)
        if provided != 1:
            raise ValueError(
                "Exactly one of error_schema, error_xsd_content or error_xsd_file_path must be provided"
            )
        return self


class GenerationOptions(BaseModel):
    """Options threaded through every step of document generation."""

    model_config = ConfigDict(frozen=True)

    request_suffix: str = Field(default=generation_defaults.REQUEST_SUFFIX, min_length=1)
    response_suffix: str = Field(default=generation_defaults.RESPONSE_SUFFIX, min_length=1)
    use_schema_name_in_path: bool = generation_defaults.USE_SCHEMA_NAME_IN_PATH
    http_method: HttpMethod = generation_defaults.HTTP_METHOD
    content_type: str = generation_defaults.CONTENT_TYPE
    default_type: str = generation_defaults.DEFAULT_TYPE
    error: ErrorResponseOptions | None = None


class ConversionConfig(BaseModel):
    """Input for a single XSD to OpenAPI conversion."""

    input_file_path: str | None = None
    xsd_content: str | None = None
    output_file_path: str | None = None
    schema_name: str | None = None
    options: GenerationOptions = GenerationOptions()

    @model_validator(mode="after")
    def _check_single_source(self) -> "ConversionConfig":
        if self.input_file_path is None and self.xsd_content is None:
            raise ValueError("Either input_file_path or xsd_content must be provided")
        if self.input_file_path is not None and self.xsd_content is not None:
            raise ValueError("input_file_path and xsd_content are mutually exclusive")
        return self


class ConversionResponse(BaseModel):
    """Result returned by the HTTP conversion endpoint."""

    filename: str | None = None
    schema_name: str
    path_count: int
    document: dict[str, Any]
