"""
Principal - who is asking.

Built by the authentication layer and attached to the request. This package
only reads it: `id` for ownership/identity checks, `capabilities` for
membership checks.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from featureguard.utils import MISSING, read_field


CAPABILITY_COLLECTIONS = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class Principal:
    """
    An authenticated user (or service) and the capabilities it holds.

    Usage:
        principal = Principal(id="u1", capabilities=frozenset({"read:user"}))
        can(principal, "read:user")
    """

    id: Any
    capabilities: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        # A bare string would otherwise be split into single characters
        if not isinstance(self.capabilities, CAPABILITY_COLLECTIONS):
            raise TypeError(
                f"capabilities must be a list, tuple or set, not {type(self.capabilities).__name__}"
            )
        object.__setattr__(self, "capabilities", token_set(self.capabilities))

    @classmethod
    def of(cls, id: Any, capabilities: Iterable[str] = ()) -> Principal:
        if isinstance(capabilities, (str, bytes)):
            raise TypeError("capabilities must be a collection of tokens, not a string")
        return cls(id=id, capabilities=token_set(capabilities))


def token_set(capabilities: Iterable[Any]) -> frozenset[str]:
    """Tokens as plain strings; enum members are unwrapped to their value."""
    return frozenset(c.value if isinstance(c, Enum) else c for c in capabilities)


def principal_id(principal: Any) -> Any:
    """The identifier of any principal-shaped value (None if absent)."""
    return read_field(principal, "id", None)


def principal_capabilities(principal: Any) -> Any:
    """
    The raw capability collection of any principal-shaped value.

    `features` is accepted as an alias; older user records use that name.
    Returns MISSING when neither field exists.
    """
    capabilities = read_field(principal, "capabilities")
    if capabilities is MISSING:
        capabilities = read_field(principal, "features")
    return capabilities
