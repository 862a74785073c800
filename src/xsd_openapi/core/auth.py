#!/usr/bin/env python3

import logging
import secrets

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import DEFAULT_API_TOKEN, api_config

logger = logging.getLogger(__name__)
bearer_scheme = HTTPBearer()


def uses_default_token() -> bool:
    return api_config.API_TOKEN == DEFAULT_API_TOKEN


def verify_token(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    """Check the bearer token of a conversion request against XSD_OPENAPI_API_TOKEN.

    Raises:
        HTTPException: 401 when the token does not match
    """
    if not secrets.compare_digest(credentials.credentials.encode(), api_config.API_TOKEN.encode()):
        logger.warning(f"Rejected conversion request with an invalid {credentials.scheme} token")
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return credentials.credentials
