"""
core/exceptions.py -- Exception hierarchy for Kankri.

Every error the library raises derives from KankriError so callers can catch
the whole family with one clause. The three concrete kinds map onto the three
ways things go wrong:

  AuthenticationFailure       authenticate() rejected the credentials.
  InsufficientPrivilegeError  require() found the privilege missing.
  ConfigurationError          the record set or settings are unusable;
                              raised at construction, never at request time.

AuthenticationFailure deliberately carries no detail about which check failed
(unknown user, blank password, hash mismatch all look the same).

Layer rule: core/ is the kernel. This module may not import from auth/ or authz/.
"""

from __future__ import annotations


class KankriError(Exception):
    """Base class for all Kankri errors."""


class AuthenticationFailure(KankriError):
    """Raised when a username/password pair does not authenticate."""

    def __init__(self, message: str = "Authentication failed.") -> None:
        super().__init__(message)


class InsufficientPrivilegeError(KankriError):
    """Raised when a required privilege is not held for a target.

    target and privilege are the canonical keys that were checked, so a caller
    translating this into a response can say what was denied.
    """

    def __init__(self, target: str | None, privilege: str | None) -> None:
        self.target = target
        self.privilege = privilege
        super().__init__(f"Privilege {privilege!r} is required on {target!r}.")


class ConfigurationError(KankriError, ValueError):
    """Raised when user records or settings are malformed.

    Subclasses ValueError so pydantic model validators can raise it directly
    and so generic "bad value" handlers still see it.
    """
