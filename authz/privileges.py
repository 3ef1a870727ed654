"""
authz/privileges.py -- Object/action privilege sets.

A privilege set maps a resource key (what is being acted on, e.g. "channel")
to a grant: either ALL, meaning every action on that key is allowed, or a
frozenset of action tokens ("get", "put", ...). A key that is absent and a key
mapped to an empty set both deny everything; require() raises in both cases.

Raw grants are normalized once, at construction:

    PrivilegeSet({"channel_set": ["get"], "channel": "all"})
        -> {"channel_set": frozenset({"get"}), "channel": ALL}

Keys and tokens go through core.keys.to_key(), so Enum and bytes forms match
their string equivalents.

Note the argument orders: has(privilege, target) but require(target, privilege).
Both are kept as-is because callers already depend on them.

Layer rule: no imports from auth/. core/ is allowed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional, Union

from core.exceptions import ConfigurationError, InsufficientPrivilegeError
from core.keys import ALL_TOKEN, Key, to_key

logger = logging.getLogger("kankri.authz")


class Wildcard(Enum):
    ALL = ALL_TOKEN

    def __repr__(self) -> str:
        return "ALL"


ALL = Wildcard.ALL

Grant = Union[Wildcard, frozenset]


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def check_privilege(target: Optional[Key], requisite: Optional[Key], privileges: Mapping[Key, Grant]) -> bool:
    """Return True if requisite is held on target under the normalized privileges.

    Inputs must already be canonical keys; PrivilegeSet.has() does that.
    """
    if target not in privileges:
        return False
    grant = privileges[target]
    return grant is ALL or requisite in grant


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_grant(description: Any) -> Grant:
    """Turn a raw grant ("all" or a sequence of tokens) into ALL or a frozenset.

    A bare scalar other than the all-token is rejected: "get" on its own is
    almost certainly a typo for ["get"], and silently granting nothing would
    hide it.
    """
    if isinstance(description, (str, bytes, Enum)):
        if to_key(description) == ALL_TOKEN:
            return ALL
        raise ConfigurationError(f"Grant {description!r} must be 'all' or a list of privileges.")
    if isinstance(description, Iterable) and not isinstance(description, Mapping):
        tokens = []
        for token in description:
            try:
                key = to_key(token)
            except (TypeError, UnicodeDecodeError) as exc:
                raise ConfigurationError(f"Invalid privilege {token!r}.") from exc
            if not key:
                raise ConfigurationError("Privileges must be non-empty identifiers.")
            tokens.append(key)
        return frozenset(tokens)
    raise ConfigurationError(f"Grant {description!r} must be 'all' or a list of privileges.")


def normalize_privileges(privileges: Mapping[Any, Any]) -> dict[Key, Grant]:
    """Canonicalize resource keys and grants. Two raw keys naming the same resource are an error."""
    normalized: dict[Key, Grant] = {}
    for raw_key, description in privileges.items():
        try:
            key = to_key(raw_key)
        except (TypeError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Invalid resource key {raw_key!r}.") from exc
        if not key:
            raise ConfigurationError("Resource keys must be non-empty identifiers.")
        if key in normalized:
            raise ConfigurationError(f"Resource key {key!r} is configured more than once.")
        normalized[key] = normalize_grant(description)
    return normalized


def _query_key(value: Any) -> Optional[Key]:
    """Canonical key for a query argument, or None if value cannot be a key."""
    try:
        return to_key(value)
    except (TypeError, UnicodeDecodeError):
        return None


# ---------------------------------------------------------------------------
# PrivilegeSet
# ---------------------------------------------------------------------------


class PrivilegeSet:
    """The privileges one authenticated user holds.

    Immutable once built; has() and require() never change it, so a set can be
    shared between threads and queried as often as needed.

    Usage:
        privs = PrivilegeSet({"channel_set": ["get", "put"]})
        privs.has("get", "channel_set")        # True
        privs.require("channel", "get")        # raises InsufficientPrivilegeError
    """

    __slots__ = ("_privileges",)

    def __init__(self, privileges: Optional[Mapping[Any, Any]] = None) -> None:
        self._privileges: Mapping[Key, Grant] = MappingProxyType(normalize_privileges(privileges or {}))

    def has(self, privilege: Any, target: Any) -> bool:
        """True if privilege is held on target. Arguments that cannot be keys are a miss."""
        target_key, privilege_key = _query_key(target), _query_key(privilege)
        if target_key is None or privilege_key is None:
            return False
        return check_privilege(target_key, privilege_key, self._privileges)

    def require(self, target: Any, privilege: Any) -> None:
        """Raise InsufficientPrivilegeError unless privilege is held on target."""
        if not self.has(privilege, target):
            logger.debug("Privilege %r denied on %r", _query_key(privilege), _query_key(target))
            raise InsufficientPrivilegeError(_query_key(target), _query_key(privilege))

    def targets(self) -> frozenset:
        """Resource keys that have a grant (including empty ones)."""
        return frozenset(self._privileges)

    def grant_for(self, target: Any) -> Optional[Grant]:
        """The grant for target, or None if target has none."""
        return self._privileges.get(_query_key(target))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivilegeSet):
            return NotImplemented
        return dict(self._privileges) == dict(other._privileges)

    def __hash__(self) -> int:
        return hash(frozenset(self._privileges.items()))

    def __repr__(self) -> str:
        return f"PrivilegeSet({dict(self._privileges)!r})"
