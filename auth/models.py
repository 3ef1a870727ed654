"""
auth/models.py -- Validated shape of one configured user.

Pattern: Pydantic model as the construction-time contract. The Authenticator
feeds every raw record through UserRecord before hashing anything, so a
missing password or privileges field is a ConfigurationError at startup
rather than a KeyError on the first login.

Field names may arrive as any key form ("password", b"password", an Enum);
the Authenticator canonicalizes them with to_key() before validation.

Layer rule: no imports from authz/. core/ is allowed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from core.keys import to_secret


class UserRecord(BaseModel):
    """Password and raw privilege grants for a single user.

    password is stored as the stringified plaintext; it is hashed once by the
    Authenticator and the plaintext is not retained there. privileges is kept
    raw -- PrivilegeSet does the key/token normalization.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    password: str
    privileges: dict[Any, Any]

    @field_validator("password", mode="before")
    @classmethod
    def stringify_password(cls, value: Any) -> str:
        """Accept any stringifiable password; None counts as missing."""
        if value is None:
            raise ValueError("password is required")
        return to_secret(value)

    @field_validator("privileges", mode="before")
    @classmethod
    def require_mapping(cls, value: Any) -> dict:
        """privileges must be a mapping of resource key -> grant (may be empty)."""
        if not isinstance(value, Mapping):
            raise ValueError("privileges must be a mapping of resource key to grant")
        return dict(value)
