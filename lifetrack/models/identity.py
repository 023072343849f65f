"""Identity claims supplied by the external identity provider"""
from typing import Optional

from pydantic import BaseModel, Field

# Claim types as issued by Microsoft Entra ID / forwarded by App Service
OBJECT_ID_CLAIMS = (
    "oid",
    "http://schemas.microsoft.com/identity/claims/objectidentifier",
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier",
)
EMAIL_CLAIMS = (
    "preferred_username",
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/emailaddress",
    "email",
)
NAME_CLAIMS = (
    "name",
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name",
)


class Claim(BaseModel):
    type: str
    value: str


class ClientPrincipal(BaseModel):
    """Resolved identity of the caller"""
    identity_provider: str = ""
    claims: list[Claim] = Field(default_factory=list)

    @property
    def object_id(self) -> str:
        return self.find_first(*OBJECT_ID_CLAIMS) or ""

    @property
    def is_authenticated(self) -> bool:
        """Signed in with a stable object id (without one there is no namespace to bind)"""
        return bool(self.identity_provider) and bool(self.object_id)

    def find_first(self, *claim_types: str) -> Optional[str]:
        """Value of the first non-empty claim, trying claim types in order"""
        for claim_type in claim_types:
            for claim in self.claims:
                if claim.type == claim_type and claim.value:
                    return claim.value
        return None
