"""Caller identity from platform-forwarded client principal headers

Azure App Service / Static Web Apps authentication forwards the signed-in
user as a base64-encoded JSON document in X-MS-CLIENT-PRINCIPAL. The platform
strips this header from incoming requests, so its presence means the
platform authenticated the caller.
"""
import base64
import binascii
import json
import logging
from typing import Any, Dict

from fastapi import Request

from lifetrack.exceptions import AuthenticationError
from lifetrack.models import Claim, ClientPrincipal

logger = logging.getLogger(__name__)

PRINCIPAL_HEADER = "X-MS-CLIENT-PRINCIPAL"
NAME_IDENTIFIER_CLAIM = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier"


def parse_client_principal(header_value: str) -> ClientPrincipal:
    """
    Decode an X-MS-CLIENT-PRINCIPAL header value

    Supports both layouts:
    - App Service: {"auth_typ": ..., "claims": [{"typ": ..., "val": ...}]}
    - Static Web Apps: {"identityProvider": ..., "userId": ..., "userDetails": ...}

    Raises:
        AuthenticationError: If the value is not base64-encoded JSON
    """
    try:
        data: Dict[str, Any] = json.loads(base64.b64decode(header_value, validate=True))
    except (binascii.Error, ValueError) as e:
        raise AuthenticationError(
            message=f"Malformed {PRINCIPAL_HEADER} header",
            operation="parse_client_principal",
            cause=e
        )

    if not isinstance(data, dict):
        raise AuthenticationError(
            message=f"{PRINCIPAL_HEADER} header must encode a JSON object",
            operation="parse_client_principal"
        )

    claims = [
        Claim(type=str(c.get("typ", "")), value=str(c.get("val", "")))
        for c in data.get("claims") or []
        if isinstance(c, dict)
    ]

    if data.get("userId"):
        claims.append(Claim(type=NAME_IDENTIFIER_CLAIM, value=str(data["userId"])))
    if data.get("userDetails"):
        claims.append(Claim(type="preferred_username", value=str(data["userDetails"])))

    provider = data.get("auth_typ") or data.get("identityProvider") or ""
    return ClientPrincipal(identity_provider=str(provider), claims=claims)


async def get_client_principal(request: Request) -> ClientPrincipal:
    """FastAPI dependency: principal of the caller (unauthenticated if no header)"""
    header_value = request.headers.get(PRINCIPAL_HEADER)
    if not header_value:
        return ClientPrincipal()

    principal = parse_client_principal(header_value)
    logger.debug(f"Client principal from {principal.identity_provider}: {len(principal.claims)} claims")
    return principal
