"""
auth/authenticator.py -- In-memory username/password authenticator.

Construction does all the work. For every configured user it builds, once:

  hashers           username -> Hasher (salted, unique per user and instance)
  hashed_passwords  username -> hash of the configured password
  privilege_sets    username -> PrivilegeSet

All three are read-only afterwards (MappingProxyType) and share one key set.
authenticate() is then a lookup, one hash, and an equality check, so it is
safe to call from many threads without locking.

Failure policy:
  Bad configuration (missing password/privileges, duplicate usernames, a hash
  maker that skips a user) raises ConfigurationError from __init__.
  A failed login raises AuthenticationFailure with the same message whatever
  the cause -- unknown user, blank password, wrong password.

Unknown usernames never reach a hasher. Response timing is not equalized;
this authenticator keeps plaintext-derived hashes in memory and is not meant
for high-security deployments.

Layer rule: may import from core/ and authz/.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Optional

from pydantic import ValidationError

from auth.credentials import CredentialCheck
from auth.hashing import HashMaker, default_hash_maker
from auth.models import UserRecord
from authz.privileges import PrivilegeSet
from core.exceptions import AuthenticationFailure, ConfigurationError
from core.keys import Key, is_blank, to_key, to_secret

logger = logging.getLogger("kankri.auth")


class Authenticator:
    """Authenticates users from an in-memory record set.

    Usage:
        auth = Authenticator({
            "admin": {"password": "hunter2", "privileges": {"foo": "all", "bar": ["abc"]}},
        })
        privs = auth.authenticate("admin", "hunter2")   # PrivilegeSet
        privs.has("abc", "bar")                          # True

    hash_maker, if given, is called once with the canonical usernames and must
    return a mapping username -> callable(password) -> hash for every one of
    them. It defaults to the maker chosen by Settings.hash_algorithm (SHA-256).
    """

    def __init__(self, users: Mapping[Any, Any], hash_maker: Optional[HashMaker] = None) -> None:
        hash_maker = hash_maker or default_hash_maker()
        records = _validate_records(users)

        hashers = dict(hash_maker(list(records)))
        missing = [name for name in records if name not in hashers]
        if missing:
            raise ConfigurationError(f"Hash maker returned no hasher for: {', '.join(sorted(missing))}.")

        self._hashers: Mapping[Key, Callable[[str], Any]] = MappingProxyType(
            {name: hashers[name] for name in records}
        )
        self._hashed_passwords: Mapping[Key, Any] = MappingProxyType(
            {name: _hash_configured(name, self._hashers[name], record) for name, record in records.items()}
        )
        self._privilege_sets: Mapping[Key, PrivilegeSet] = MappingProxyType(
            {name: _privilege_set(name, record) for name, record in records.items()}
        )
        logger.info("Authenticator ready (%d users)", len(records))

    @property
    def usernames(self) -> frozenset:
        """Canonical usernames this authenticator knows."""
        return frozenset(self._hashers)

    def authenticate(self, username: Any, password: Any) -> PrivilegeSet:
        """Return the user's PrivilegeSet, or raise AuthenticationFailure.

        username may be any key form (str, bytes, Enum); password is
        stringified, with None treated as blank.
        """
        name = _username_key(username)
        if name is None or not self._credentials_ok(name, _password_secret(password)):
            logger.debug("Authentication failed")
            raise AuthenticationFailure()
        return self._privilege_sets[name]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _credentials_ok(self, name: Key, password: str) -> bool:
        if name not in self._hashers or name not in self._hashed_passwords:
            return False
        if is_blank(password):
            return False
        try:
            hashed = self._hashers[name](password)
        except ValueError:
            # bcrypt refuses secrets over 72 bytes; that can only be a wrong password.
            return False
        return CredentialCheck.check(name, hashed, self._hashed_passwords)


def authenticator_from_dict(users: Mapping[Any, Any], hash_maker: Optional[HashMaker] = None) -> Authenticator:
    """Create an Authenticator from a dict of users.

    The dict maps usernames to mappings with two keys:

      password:    the plaintext password.
      privileges:  a mapping of privilege key -> "all" (every privilege on that
                   key) or a list of privileges held on that key.

    Example:
        authenticator_from_dict({
            "admin": {
                "password": "hunter2",
                "privileges": {"foo": "all", "bar": ["abc", "def", "ghi"], "baz": []},
            }
        })
    """
    return Authenticator(users, hash_maker)


# ---------------------------------------------------------------------------
# Construction helpers
# ---------------------------------------------------------------------------


def _username_key(username: Any) -> Optional[Key]:
    """Canonical username, or None for anything that cannot be a username."""
    try:
        return to_key(username)
    except (TypeError, UnicodeDecodeError):
        return None


def _password_secret(password: Any) -> str:
    """Stringified password, or the blank (always-rejected) secret if it cannot be decoded."""
    try:
        return to_secret(password)
    except UnicodeDecodeError:
        return ""


def _validate_records(users: Mapping[Any, Any]) -> dict[Key, UserRecord]:
    """Canonicalize usernames and validate each entry into a UserRecord."""
    records: dict[Key, UserRecord] = {}
    for raw_name, entry in users.items():
        try:
            name = to_key(raw_name)
        except (TypeError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Invalid username {raw_name!r}.") from exc
        if not name:
            raise ConfigurationError("Usernames must be non-empty.")
        if name in records:
            raise ConfigurationError(f"User {name!r} is configured more than once.")
        records[name] = _user_record(name, entry)
    return records


def _user_record(name: Key, entry: Any) -> UserRecord:
    if isinstance(entry, UserRecord):
        return entry
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"User {name!r} must be a mapping with password and privileges.")
    try:
        fields = {to_key(field): value for field, value in entry.items() if field is not None}
    except (TypeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"User {name!r} has a field name that is not a key.") from exc
    try:
        return UserRecord.model_validate(fields)
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors())
        raise ConfigurationError(f"User {name!r} is misconfigured ({problems}).") from exc


def _hash_configured(name: Key, hasher: Callable[[str], Any], record: UserRecord) -> Any:
    try:
        return hasher(record.password)
    except ValueError as exc:
        raise ConfigurationError(f"User {name!r}: password cannot be hashed ({exc}).") from exc


def _privilege_set(name: Key, record: UserRecord) -> PrivilegeSet:
    try:
        return PrivilegeSet(record.privileges)
    except ConfigurationError as exc:
        raise ConfigurationError(f"User {name!r}: {exc}") from exc
