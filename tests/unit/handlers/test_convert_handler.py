#!/usr/bin/env python3
"""Tests for the XSD upload conversion handler."""

import asyncio
import time
from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi import HTTPException, UploadFile

from xsd_openapi.core.config import api_config
from xsd_openapi.core.exceptions import ErrorSchemaError
from xsd_openapi.handlers.convert import handle_xsd_conversion
from xsd_openapi.models.models import ErrorResponseOptions, GenerationOptions

VALID_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xsd:schema xmlns:xsd="http://www.w3.org/2001/XMLSchema"
            xmlns:tns="http://example.com/test"
            targetNamespace="http://example.com/test">
    <xsd:element name="TestReq" type="tns:tTestReq"/>
    <xsd:element name="TestRes" type="xsd:string"/>
    <xsd:complexType name="tTestReq">
        <xsd:sequence>
            <xsd:element name="stringField" type="xsd:string"/>
        </xsd:sequence>
    </xsd:complexType>
</xsd:schema>
"""


class TestHandleXsdConversion:
    """Test suite for the upload conversion handler."""

    @pytest.fixture
    def create_mock_file(self):
        """Factory to create mock XSD upload files."""
        def _create_file(content=VALID_XSD, filename="Orders.xsd"):
            mock_file = Mock(spec=UploadFile)
            mock_file.filename = filename
            mock_file.read = AsyncMock(return_value=content)
            return mock_file
        return _create_file

    @pytest.mark.asyncio
    async def test_successful_conversion(self, create_mock_file):
        """Test that an uploaded schema is converted and summarized."""
        result = await handle_xsd_conversion(create_mock_file(), GenerationOptions())

        assert result.filename == "Orders.xsd"
        assert result.schema_name == "orders"
        assert result.path_count == 1
        assert result.document["paths"]["/Test"]["post"]["operationId"] == "Test"

    @pytest.mark.asyncio
    async def test_explicit_schema_name(self, create_mock_file):
        """Test that an explicit schema name overrides the file name."""
        options = GenerationOptions(use_schema_name_in_path=True)

        result = await handle_xsd_conversion(create_mock_file(), options, schema_name="Billing")

        assert result.schema_name == "billing"
        assert list(result.document["paths"]) == ["/billing/Test"]

    @pytest.mark.asyncio
    async def test_empty_upload(self, create_mock_file):
        """Test that an empty upload is rejected."""
        with pytest.raises(HTTPException) as exc_info:
            await handle_xsd_conversion(create_mock_file(content=b""), GenerationOptions())

        assert exc_info.value.status_code == 400
        assert "is empty" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_upload_too_large(self, create_mock_file):
        """Test that uploads above the size limit are rejected."""
        with patch.object(api_config, "MAX_UPLOAD_BYTES", 10):
            with pytest.raises(HTTPException) as exc_info:
                await handle_xsd_conversion(create_mock_file(), GenerationOptions())

        assert exc_info.value.status_code == 413
        assert "maximum size of 10 bytes" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_non_utf8_upload(self, create_mock_file):
        """Test that content that is not UTF-8 is rejected."""
        with pytest.raises(HTTPException) as exc_info:
            await handle_xsd_conversion(create_mock_file(content=b"\xff\xfe\x00<"), GenerationOptions())

        assert exc_info.value.status_code == 400
        assert "not UTF-8 encoded" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_malformed_schema(self, create_mock_file):
        """Test that parse failures become 400 responses."""
        with pytest.raises(HTTPException) as exc_info:
            await handle_xsd_conversion(create_mock_file(content=b"invalid content"), GenerationOptions())

        assert exc_info.value.status_code == 400
        assert "Invalid XSD content" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_not_a_schema(self, create_mock_file):
        """Test that XML without a schema root becomes a 400 response."""
        with pytest.raises(HTTPException) as exc_info:
            await handle_xsd_conversion(create_mock_file(content=b"<root/>"), GenerationOptions())

        assert exc_info.value.status_code == 400
        assert "No XSD schema found" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_invalid_error_schema(self, create_mock_file):
        """Test that a broken error schema is reported separately."""
        options = GenerationOptions(error=ErrorResponseOptions(error_xsd_content="<broken"))

        with pytest.raises(HTTPException) as exc_info:
            await handle_xsd_conversion(create_mock_file(), options)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail.startswith("Invalid error schema:")

    @pytest.mark.asyncio
    async def test_error_schema_error_from_converter(self, create_mock_file):
        """Test that ErrorSchemaError raised by the converter maps to 400."""
        with patch(
            "xsd_openapi.handlers.convert.xsd_to_openapi",
            new=AsyncMock(side_effect=ErrorSchemaError("no complex type")),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await handle_xsd_conversion(create_mock_file(), GenerationOptions())

        assert exc_info.value.detail == "Invalid error schema: no complex type"

    @pytest.mark.asyncio
    async def test_timeout(self, create_mock_file):
        """Test that a conversion exceeding the timeout becomes a 504 response."""
        with patch(
            "xsd_openapi.handlers.convert.xsd_to_openapi",
            new=AsyncMock(side_effect=asyncio.TimeoutError()),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await handle_xsd_conversion(create_mock_file(), GenerationOptions())

        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_blocking_conversion_times_out(self, create_mock_file):
        """Test that a conversion that never yields to the event loop still times out."""
        async def blocking_conversion(config):
            time.sleep(0.5)
            return {"info": {"title": "late"}, "paths": {}}

        with patch("xsd_openapi.handlers.convert.xsd_to_openapi", new=blocking_conversion), \
             patch.object(api_config, "OPERATION_TIMEOUT", 0.05):
            started = time.monotonic()
            with pytest.raises(HTTPException) as exc_info:
                await handle_xsd_conversion(create_mock_file(), GenerationOptions())
            elapsed = time.monotonic() - started

        assert exc_info.value.status_code == 504
        assert elapsed < 0.4

    @pytest.mark.asyncio
    async def test_unexpected_error(self, create_mock_file):
        """Test that unexpected failures become 500 responses."""
        with patch(
            "xsd_openapi.handlers.convert.xsd_to_openapi",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await handle_xsd_conversion(create_mock_file(), GenerationOptions())

        assert exc_info.value.status_code == 500
        assert "boom" in exc_info.value.detail
