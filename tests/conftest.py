"""
tests/conftest.py -- Shared test fixtures for Kankri unit tests.

This module provides:
  - _isolated_settings (autouse): clears KANKRI_* env vars and the
    get_settings() cache so each test sees default settings
  - admin_users: the documented admin/hunter2 record set
  - channel_users: a single user with channel_set/channel grants
  - authenticator / admin_privileges: ready-built objects for those records

Settings are cached by lru_cache, so any test that sets KANKRI_* variables via
monkeypatch must call get_settings.cache_clear() afterwards; the autouse
fixture clears it again on teardown.
"""

from __future__ import annotations

import os
from collections.abc import Generator

import pytest

from auth.authenticator import Authenticator
from authz.privileges import PrivilegeSet
from core.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch) -> Generator[None, None, None]:
    for name in list(os.environ):
        if name.startswith("KANKRI_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def admin_users() -> dict:
    return {
        "admin": {
            "password": "hunter2",
            "privileges": {
                "foo": "all",
                "bar": ["abc", "def", "ghi"],
                "baz": [],
            },
        }
    }


@pytest.fixture
def channel_users() -> dict:
    return {
        "test": {
            "password": "hunter2",
            "privileges": {
                "channel_set": ["get"],
                "channel": "all",
            },
        }
    }


@pytest.fixture
def authenticator(channel_users) -> Authenticator:
    return Authenticator(channel_users)


@pytest.fixture
def admin_privileges(admin_users) -> PrivilegeSet:
    return Authenticator(admin_users).authenticate("admin", "hunter2")
