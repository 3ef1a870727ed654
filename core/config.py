"""
core/config.py -- Library configuration via pydantic-settings.

All environment variable reads for Kankri happen here. No module should call
os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from KANKRI_* environment
      variables and an optional .env file. Field names map to env var names
      (e.g. hash_algorithm -> KANKRI_HASH_ALGORITHM). Type coercion is built in.

  @model_validator(mode="after"): Cross-field validation once every field is
      resolved, so a bad algorithm name fails at startup rather than on the
      first Authenticator construction.

Scope: settings only choose how the default hash maker salts and hashes.
User records are always passed in memory; they are never read from here.

Layer rule: core/ is the kernel. This module may not import from auth/ or authz/.
"""

import hashlib
import logging
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("kankri.config")

BCRYPT = "bcrypt"

# Smallest salt we accept for digest hashers. Below this, precomputed tables
# across users become practical again.
MIN_SALT_BYTES = 8


def is_digest_algorithm(name: str) -> bool:
    """True if hashlib can build name as a fixed-length digest (SHAKE needs a length, so it is excluded).

    algorithms_available can list names the OpenSSL build refuses (ripemd160
    without the legacy provider), so the constructor is tried as well.
    """
    if name not in hashlib.algorithms_available or name.startswith("shake_"):
        return False
    try:
        hashlib.new(name)
    except ValueError:
        return False
    return True


class Settings(BaseSettings):
    """Library settings loaded from environment variables and .env file.

    All fields have defaults so Settings() works without any environment,
    which is the normal case for an embedded library.
    """

    model_config = SettingsConfigDict(
        env_prefix="KANKRI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Hashing
    # ------------------------------------------------------------------

    # A hashlib digest name ("sha256", "sha512", "blake2b", ...) or "bcrypt".
    hash_algorithm: str = "sha256"
    # Salt length for digest hashers. secrets.token_bytes(16) matches the
    # 16-byte default of the usual random_bytes helpers.
    salt_bytes: int = 16
    # bcrypt cost factor; only read when hash_algorithm is "bcrypt".
    bcrypt_rounds: int = 12

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_hashing(self) -> "Settings":
        """Reject algorithms hashlib cannot build and out-of-range sizes.

        The algorithm name is lower-cased so KANKRI_HASH_ALGORITHM=SHA256 works.
        """
        self.hash_algorithm = self.hash_algorithm.strip().lower()
        if self.hash_algorithm != BCRYPT and not is_digest_algorithm(self.hash_algorithm):
            raise ValueError(f"Unknown hash algorithm {self.hash_algorithm!r}.")
        if self.salt_bytes < MIN_SALT_BYTES:
            raise ValueError(f"salt_bytes must be at least {MIN_SALT_BYTES}.")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31.")
        if self.hash_algorithm == BCRYPT and self.bcrypt_rounds < 10:
            logger.warning("WARNING: bcrypt_rounds=%d is below the recommended minimum of 10.", self.bcrypt_rounds)
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the Settings singleton.

    In tests: call get_settings.cache_clear() after changing KANKRI_*
    variables so the next call picks them up.
    """
    return Settings()
