"""
core/keys.py -- Canonical key and secret representations.

Usernames, resource keys and privilege tokens arrive as plain strings, bytes,
or Enum members (the closest thing Python has to a symbol). to_key() folds all
of them into one case-preserving str so "admin", b"admin" and Role.admin
compare equal. Every boundary of the library (record construction,
authenticate(), has(), require()) goes through to_key() rather than doing its
own conversion.

to_secret() is the password counterpart: it only stringifies. Secrets are
never case-folded or stripped.

Layer rule: core/ is the kernel. This module may not import from auth/ or authz/.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

Key = str
KeyLike = Union[str, bytes, Enum]

# Token that, given as a whole grant, means "every privilege on this key".
ALL_TOKEN: Key = "all"


def to_key(value: Any) -> Key | None:
    """Return the canonical Key for value, or None if value is None.

    Enum members canonicalize to their value (so str-valued enums behave like
    symbols); bytes are decoded as UTF-8. Anything else is rejected with
    TypeError -- numbers, lists and the like are not identifiers.
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if isinstance(value, str):
        return str(value)
    raise TypeError(f"Cannot use {type(value).__name__} value {value!r} as a key")


def is_blank(value: Any) -> bool:
    """True for None and for empty strings, bytes and other sized values."""
    if value is None:
        return True
    return hasattr(value, "__len__") and len(value) == 0


def to_secret(value: Any) -> str:
    """Stringify a plaintext secret. None becomes the empty (always-rejected) secret."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)
