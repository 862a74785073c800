#!/usr/bin/env python3
"""Tests for bearer token verification."""

from unittest.mock import patch

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from xsd_openapi.core.auth import uses_default_token, verify_token
from xsd_openapi.core.config import DEFAULT_API_TOKEN, api_config


def _bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestVerifyToken:
    """Test suite for verify_token"""

    def test_matching_token_is_returned(self):
        with patch.object(api_config, "API_TOKEN", "s3cret"):
            assert verify_token(_bearer("s3cret")) == "s3cret"

    def test_mismatched_token_rejected(self, caplog):
        with patch.object(api_config, "API_TOKEN", "s3cret"):
            with pytest.raises(HTTPException) as exc_info:
                verify_token(_bearer("guess"))

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
        assert "Rejected conversion request" in caplog.text

    def test_token_prefix_rejected(self):
        with patch.object(api_config, "API_TOKEN", "s3cret"):
            with pytest.raises(HTTPException):
                verify_token(_bearer("s3cre"))

    def test_default_token_detection(self):
        with patch.object(api_config, "API_TOKEN", DEFAULT_API_TOKEN):
            assert uses_default_token() is True
        with patch.object(api_config, "API_TOKEN", "s3cret"):
            assert uses_default_token() is False
