"""
auth/credentials.py -- Username/secret comparison against a reference store.

This is a plain equality check with presence guards. It fails if the username
or the secret is None or empty, if the username is not in the store, or if the
stored secret differs from the candidate. Nothing is hashed, converted, or
case-folded here: the Authenticator canonicalizes the username and hashes the
candidate before calling in, and the store holds hashes too.

Known limitation: the final comparison is ordinary ==, not constant-time.

Layer rule: no imports from authz/. core/ is allowed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core.keys import is_blank


def check_credentials(username: Any, secret: Any, store: Mapping[Any, Any]) -> bool:
    """Return True iff username and secret are present and secret matches the store."""
    return CredentialCheck(username, secret, store).ok()


class CredentialCheck:
    """Method object for one credential check.

    Usage:
        CredentialCheck("alf", "hunter2", {"alf": "hunter2"}).ok()   # True
        CredentialCheck.check("alf", "nope", {"alf": "hunter2"})     # False

    Secrets may be plaintext, hashes, or anything else comparable with ==.
    """

    def __init__(self, username: Any, secret: Any, store: Mapping[Any, Any]) -> None:
        self._username = username
        self._secret = secret
        self._store = store

    @classmethod
    def check(cls, username: Any, secret: Any, store: Mapping[Any, Any]) -> bool:
        """Create and run a check in one call."""
        return cls(username, secret, store).ok()

    def ok(self) -> bool:
        """True if the credentials are present, the user is known, and the secret matches."""
        return self._credentials_present() and self._user_known() and self._secret_matches()

    # ------------------------------------------------------------------
    # Individual checks, evaluated in order and short-circuited by ok()
    # ------------------------------------------------------------------

    def _credentials_present(self) -> bool:
        return not is_blank(self._username) and not is_blank(self._secret)

    def _user_known(self) -> bool:
        return self._username in self._store

    def _secret_matches(self) -> bool:
        return self._store[self._username] == self._secret
