"""
auth/hashing.py -- Per-user salted password hashers and the hash makers that build them.

A Hasher is a plain value: the algorithm name plus the salt drawn for one user.
hash_secret(hasher, secret) is the pure function that applies it. Keeping the
salt on a frozen dataclass (instead of captured in a closure) means tests and
callers can inspect it, and the Authenticator can hold hashers in a plain map.

A hash maker is any callable taking the usernames and returning a mapping of
username -> callable(str) -> secret. The Authenticator only relies on that
shape, so a caller may pass their own. The ones provided here:

  sha256_hasher(usernames)            default; digest(password + salt)
  digest_hasher(usernames, algorithm) any hashlib digest
  bcrypt_hasher(usernames, rounds)    bcrypt with a per-user gensalt()

Salts come from secrets.token_bytes / bcrypt.gensalt (both CSPRNG-backed) and
are drawn fresh on every call, so two Authenticators built from the same
records never share a salt.

Layer rule: no imports from authz/. core/ is allowed.
"""

from __future__ import annotations

import hashlib
import secrets
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Optional

import bcrypt

from core.config import BCRYPT, get_settings, is_digest_algorithm
from core.exceptions import ConfigurationError
from core.keys import Key

HashMaker = Callable[[Iterable[Key]], Mapping[Key, Callable[[str], bytes]]]

# bcrypt only looks at the first 72 bytes of a password. bcrypt 5 raises on
# longer input; older releases truncated silently. We reject consistently.
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class Hasher:
    """Salted hashing parameters for one user.

    salt is excluded from repr so hashers can appear in logs and tracebacks
    without leaking it.
    """

    algorithm: str
    salt: bytes = field(repr=False)

    def __call__(self, secret: str) -> bytes:
        return hash_secret(self, secret)


def hash_secret(hasher: Hasher, secret: str) -> bytes:
    """Return the salted hash of secret under hasher.

    Digest algorithms hash secret || salt. bcrypt uses the salt as its
    setting string, so the same hasher always reproduces the same hash.

    Raises ValueError if a bcrypt secret is longer than 72 bytes.
    """
    data = secret.encode("utf-8")
    if hasher.algorithm == BCRYPT:
        if len(data) > BCRYPT_MAX_BYTES:
            raise ValueError(f"bcrypt secrets are limited to {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(data, hasher.salt)
    return hashlib.new(hasher.algorithm, data + hasher.salt).digest()


# ---------------------------------------------------------------------------
# Hash makers
# ---------------------------------------------------------------------------


def digest_hasher(usernames: Iterable[Key], algorithm: str, salt_bytes: Optional[int] = None) -> dict[Key, Hasher]:
    """Make one digest Hasher per username, each with its own random salt.

    salt_bytes defaults to Settings.salt_bytes.
    """
    algorithm = algorithm.lower()
    if not is_digest_algorithm(algorithm):
        raise ConfigurationError(f"Unknown hash algorithm {algorithm!r}.")
    size = salt_bytes if salt_bytes is not None else get_settings().salt_bytes
    return {username: Hasher(algorithm=algorithm, salt=secrets.token_bytes(size)) for username in usernames}


def sha256_hasher(usernames: Iterable[Key]) -> dict[Key, Hasher]:
    """Make SHA-256 hashers; the default hash maker."""
    return digest_hasher(usernames, "sha256")


def bcrypt_hasher(usernames: Iterable[Key], rounds: Optional[int] = None) -> dict[Key, Hasher]:
    """Make one bcrypt Hasher per username.

    rounds defaults to Settings.bcrypt_rounds. Construction cost grows with
    rounds and with the number of users, since every password is hashed once.
    """
    cost = rounds if rounds is not None else get_settings().bcrypt_rounds
    return {username: Hasher(algorithm=BCRYPT, salt=bcrypt.gensalt(rounds=cost)) for username in usernames}


def default_hash_maker() -> HashMaker:
    """Return the hash maker selected by Settings.hash_algorithm."""
    algorithm = get_settings().hash_algorithm
    if algorithm == BCRYPT:
        return bcrypt_hasher
    if algorithm == "sha256":
        return sha256_hasher
    return lambda usernames: digest_hasher(usernames, algorithm)
