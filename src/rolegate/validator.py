"""Role validators.

A validator is compiled once from the roles declared for a guard and then
answers membership queries for every request on that route. Validators are
immutable after construction and safe to share between concurrent requests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from .errors import InvalidRoleError, MixedRoleKindsError
from .roles import RoleID, RoleKind, RoleLike, role_identifier, role_kind


class RoleValidator(ABC):
    """Membership test over a compiled role set."""

    __slots__ = ()

    kind: RoleKind | None = None

    @abstractmethod
    def is_member(self, candidate: RoleLike) -> bool:
        """Return True if the candidate role is covered by the role set."""

    def __contains__(self, candidate: RoleLike) -> bool:
        return self.is_member(candidate)


class PassThroughValidator(RoleValidator):
    """Validator for an empty role set: every candidate is a member."""

    __slots__ = ()

    def is_member(self, candidate: RoleLike) -> bool:
        return True

    def __repr__(self) -> str:
        return "PassThroughValidator()"


class BitmaskValidator(RoleValidator):
    """Numeric roles folded into one 64-bit mask.

    A candidate is a member when all of its bits are set in the mask, so a
    combined flag passes only if every flag in it was declared. Zero is a
    member of every mask.
    """

    __slots__ = ("_mask",)

    kind = RoleKind.NUMERIC

    def __init__(self, mask: int) -> None:
        self._mask = mask

    @property
    def mask(self) -> int:
        return self._mask

    def is_member(self, candidate: RoleLike) -> bool:
        try:
            value = role_identifier(candidate)
        except InvalidRoleError:
            return False
        if not isinstance(value, int):
            return False
        return (self._mask & value) == value

    def __repr__(self) -> str:
        return f"BitmaskValidator(mask={self._mask:#x})"


class TokenSetValidator(RoleValidator):
    """Textual roles held in a frozenset; membership is exact and case sensitive."""

    __slots__ = ("_tokens",)

    kind = RoleKind.TEXT

    def __init__(self, tokens: Iterable[str]) -> None:
        self._tokens = frozenset(tokens)

    @property
    def tokens(self) -> frozenset[str]:
        return self._tokens

    def is_member(self, candidate: RoleLike) -> bool:
        try:
            value = role_identifier(candidate)
        except InvalidRoleError:
            return False
        if not isinstance(value, str):
            return False
        return value in self._tokens

    def __repr__(self) -> str:
        return f"TokenSetValidator(tokens={sorted(self._tokens)!r})"


def build_validator(roles: Iterable[RoleLike]) -> RoleValidator:
    """Compile a role set into a validator.

    The kind of the first role picks the strategy; every other role must be
    of the same kind. An empty set yields a validator that admits anyone.

    Raises:
        InvalidRoleError: If a role is not a valid numeric or textual role.
        MixedRoleKindsError: If the set mixes numeric and textual roles.
    """
    declared = list(roles)
    if not declared:
        return PassThroughValidator()

    identifiers: list[RoleID] = [role_identifier(role) for role in declared]

    kind = role_kind(identifiers[0])
    for role, identifier in zip(declared, identifiers):
        if role_kind(identifier) is not kind:
            raise MixedRoleKindsError(role, kind.value)

    if kind is RoleKind.NUMERIC:
        mask = 0
        for identifier in identifiers:
            mask |= identifier  # type: ignore[operator]
        return BitmaskValidator(mask)

    return TokenSetValidator(identifiers)  # type: ignore[arg-type]
