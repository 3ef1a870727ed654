"""Unit tests for auth/hashing.py -- Hasher values and hash makers.

Covers:
- hash_secret() computes digest(secret || salt) and is deterministic per hasher
- Distinct salts per user and per call
- bcrypt hashers, including the 72-byte limit
- default_hash_maker() follows Settings.hash_algorithm
"""

import hashlib

import bcrypt
import pytest

from auth.hashing import (
    Hasher,
    bcrypt_hasher,
    default_hash_maker,
    digest_hasher,
    hash_secret,
    sha256_hasher,
)
from core.config import get_settings
from core.exceptions import ConfigurationError

# ---------------------------------------------------------------------------
# TestHashSecret
# ---------------------------------------------------------------------------


class TestHashSecret:
    def test_sha256_is_password_then_salt(self):
        hasher = Hasher(algorithm="sha256", salt=b"\x00" * 16)
        assert hash_secret(hasher, "hunter2") == hashlib.sha256(b"hunter2" + b"\x00" * 16).digest()

    def test_call_matches_hash_secret(self):
        hasher = Hasher(algorithm="sha256", salt=b"saltsalt")
        assert hasher("hunter2") == hash_secret(hasher, "hunter2")

    def test_deterministic(self):
        hasher = Hasher(algorithm="sha512", salt=b"saltsalt")
        assert hasher("hunter2") == hasher("hunter2")

    def test_salt_changes_hash(self):
        a = Hasher(algorithm="sha256", salt=b"aaaaaaaa")
        b = Hasher(algorithm="sha256", salt=b"bbbbbbbb")
        assert a("hunter2") != b("hunter2")

    def test_salt_not_in_repr(self):
        hasher = Hasher(algorithm="sha256", salt=b"topsecret")
        assert "topsecret" not in repr(hasher)

    def test_hasher_is_frozen(self):
        hasher = Hasher(algorithm="sha256", salt=b"saltsalt")
        with pytest.raises(AttributeError):
            hasher.salt = b"other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# TestDigestHasher
# ---------------------------------------------------------------------------


class TestDigestHasher:
    def test_one_hasher_per_username(self):
        hashers = sha256_hasher(["alice", "bob"])
        assert set(hashers) == {"alice", "bob"}
        assert all(h.algorithm == "sha256" for h in hashers.values())

    def test_salts_differ_between_users(self):
        hashers = sha256_hasher(["alice", "bob"])
        assert hashers["alice"].salt != hashers["bob"].salt

    def test_salts_differ_between_calls(self):
        first = sha256_hasher(["alice"])["alice"]
        second = sha256_hasher(["alice"])["alice"]
        assert first.salt != second.salt
        assert first("hunter2") != second("hunter2")

    def test_salt_length_from_settings(self):
        assert len(sha256_hasher(["alice"])["alice"].salt) == get_settings().salt_bytes

    def test_explicit_salt_length(self):
        assert len(digest_hasher(["alice"], "sha256", salt_bytes=32)["alice"].salt) == 32

    def test_unknown_algorithm(self):
        with pytest.raises(ConfigurationError):
            digest_hasher(["alice"], "rot13")

    def test_empty_usernames(self):
        assert sha256_hasher([]) == {}


# ---------------------------------------------------------------------------
# TestBcryptHasher
# ---------------------------------------------------------------------------


class TestBcryptHasher:
    def test_hash_verifies_with_bcrypt(self):
        hasher = bcrypt_hasher(["alice"], rounds=4)["alice"]
        assert hasher.algorithm == "bcrypt"
        assert bcrypt.checkpw(b"hunter2", hasher("hunter2"))

    def test_same_hasher_reproduces_hash(self):
        hasher = bcrypt_hasher(["alice"], rounds=4)["alice"]
        assert hasher("hunter2") == hasher("hunter2")

    def test_salts_differ_between_users(self):
        hashers = bcrypt_hasher(["alice", "bob"], rounds=4)
        assert hashers["alice"].salt != hashers["bob"].salt

    def test_long_secret_rejected(self):
        hasher = bcrypt_hasher(["alice"], rounds=4)["alice"]
        with pytest.raises(ValueError, match="72 bytes"):
            hasher("x" * 73)


# ---------------------------------------------------------------------------
# TestDefaultHashMaker
# ---------------------------------------------------------------------------


class TestDefaultHashMaker:
    def test_default_is_sha256(self):
        assert default_hash_maker() is sha256_hasher

    def test_other_digest_from_settings(self, monkeypatch):
        monkeypatch.setenv("KANKRI_HASH_ALGORITHM", "sha512")
        get_settings.cache_clear()
        hashers = default_hash_maker()(["alice"])
        assert hashers["alice"].algorithm == "sha512"

    def test_bcrypt_from_settings(self, monkeypatch):
        monkeypatch.setenv("KANKRI_HASH_ALGORITHM", "bcrypt")
        monkeypatch.setenv("KANKRI_BCRYPT_ROUNDS", "4")
        get_settings.cache_clear()
        hashers = default_hash_maker()(["alice"])
        assert hashers["alice"].algorithm == "bcrypt"
