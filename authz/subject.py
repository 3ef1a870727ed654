"""
authz/subject.py -- Objects that are the target of privilege checks.

Anything with a privilege_key (a channel, a resource class, a handler) is a
PrivilegeSubject. can() and fail_if_cannot() look the subject up in a
PrivilegeSet under that key, so callers write

    if can(channel, "put", privs): ...
    fail_if_cannot(channel, "put", privs)

instead of repeating the key at every call site. Classes that would rather
call these as methods can inherit PrivilegeSubjectMixin, which is a thin
wrapper over the same two functions.

Layer rule: no imports from auth/. core/ is allowed.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from authz.privileges import PrivilegeSet


@runtime_checkable
class PrivilegeSubject(Protocol):
    """Anything exposing the key it is filed under in a privilege set."""

    @property
    def privilege_key(self) -> Any: ...


def can(subject: PrivilegeSubject, operation: Any, privilege_set: PrivilegeSet) -> bool:
    """True if privilege_set grants operation on subject."""
    return privilege_set.has(operation, subject.privilege_key)


def fail_if_cannot(subject: PrivilegeSubject, operation: Any, privilege_set: PrivilegeSet) -> None:
    """Raise InsufficientPrivilegeError unless privilege_set grants operation on subject."""
    privilege_set.require(subject.privilege_key, operation)


class PrivilegeSubjectMixin:
    """Adds can() / fail_if_cannot() methods to a class defining privilege_key."""

    privilege_key: Any

    def can(self, operation: Any, privilege_set: PrivilegeSet) -> bool:
        return can(self, operation, privilege_set)

    def fail_if_cannot(self, operation: Any, privilege_set: PrivilegeSet) -> None:
        fail_if_cannot(self, operation, privilege_set)
