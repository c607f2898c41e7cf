"""Role identifiers.

A deployment uses exactly one role representation:

- numeric: unsigned 64-bit flags, usually declared as an ``enum.IntFlag``
- textual: case-sensitive tokens, usually declared as a ``str`` Enum

Roles can be passed as plain ``int``/``str`` values, Enum members, or any
object exposing an ``id`` attribute.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union, runtime_checkable

from .errors import InvalidRoleError

MAX_ROLE_ID = (1 << 64) - 1

RoleID = Union[int, str]


class RoleKind(str, Enum):
    """The two supported role representations."""

    NUMERIC = "numeric"
    TEXT = "text"


@runtime_checkable
class Role(Protocol):
    """Anything carrying a role identifier."""

    @property
    def id(self) -> RoleID: ...


@dataclass(frozen=True)
class NumericRole:
    """A 64-bit flag role."""

    value: int
    name: str | None = None

    def __post_init__(self) -> None:
        role_identifier(self.value)

    @property
    def id(self) -> int:
        return self.value


@dataclass(frozen=True)
class TextRole:
    """A case-sensitive token role."""

    token: str

    @property
    def id(self) -> str:
        return self.token


RoleLike = Union[Role, int, str]


def role_identifier(role: RoleLike) -> RoleID:
    """Normalize a role to its underlying identifier.

    Enum members are reduced to their value, objects with an ``id`` to that
    id. Numeric identifiers are range checked against 64 bits.

    Raises:
        InvalidRoleError: If the role is neither numeric nor textual, or a
            numeric role does not fit in 64 unsigned bits.
    """
    value: object = role
    if isinstance(value, Enum):
        value = value.value
    elif not isinstance(value, (int, str)) and hasattr(value, "id"):
        value = value.id
        if isinstance(value, Enum):
            value = value.value

    if isinstance(value, bool):
        raise InvalidRoleError(role, "booleans are not roles")
    if isinstance(value, int):
        value = int(value)
        if not 0 <= value <= MAX_ROLE_ID:
            raise InvalidRoleError(role, "numeric roles must fit in 64 unsigned bits")
        return value
    if isinstance(value, str):
        return str(value)
    raise InvalidRoleError(role, "a role must be an int, a str or expose an id")


def role_kind(identifier: RoleID) -> RoleKind:
    """Return the kind of an already normalized identifier."""
    return RoleKind.TEXT if isinstance(identifier, str) else RoleKind.NUMERIC
