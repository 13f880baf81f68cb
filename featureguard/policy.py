"""
Policy table - what each capability allows.

One `CapabilityRule` per capability:

- ownership: how a concrete resource changes the decision
  (`PLAIN` ignores it, `OwnerMatch(field)` replaces it)
- input: which inbound fields may be written, and under which key
- output: which outbound fields may be read, and how

Nothing in here executes a check; authorization.py and projection.py read
this table. A new owner-scoped capability is a new table entry, not a new
branch in the decision function.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Literal, Mapping

from featureguard.capabilities import Capability


# =============================================================================
# Ownership rules
# =============================================================================


@dataclass(frozen=True)
class PlainRule:
    """Membership only; a resource never changes the result."""

    kind: Literal["plain"] = "plain"


@dataclass(frozen=True)
class OwnerMatch:
    """With a resource, allowed only if `principal.id == resource.<field>`."""

    field: Literal["id", "owner_id"]
    kind: Literal["owner-match"] = "owner-match"


OwnershipRule = PlainRule | OwnerMatch

PLAIN = PlainRule()


# =============================================================================
# Field rules
# =============================================================================


@dataclass(frozen=True)
class FieldMap:
    """Copy `source` from the payload into `target` of the result."""

    source: str
    target: str

    @classmethod
    def same(cls, *names: str) -> tuple[FieldMap, ...]:
        return tuple(cls(name, name) for name in names)


@dataclass(frozen=True)
class InputRule:
    fields: tuple[FieldMap, ...]


class OutputShape(str, Enum):
    """How an output rule walks the payload."""

    SINGLE = "single"              # one record
    LIST = "list"                  # a sequence, same rule per element
    CONTENT = "content"            # one record, checked by the content schema
    CONTENT_LIST = "content_list"  # a sequence of those


@dataclass(frozen=True)
class OutputRule:
    shape: OutputShape
    fields: tuple[FieldMap, ...] = ()

    # Output field that must equal principal.id (single records only)
    identity_field: str | None = None


@dataclass(frozen=True)
class CapabilityRule:
    ownership: OwnershipRule = PLAIN
    input: InputRule | None = None
    output: OutputRule | None = None


# =============================================================================
# The table
# =============================================================================


_USER_WRITE = InputRule(FieldMap.same("username", "email", "password"))

_CONTENT_FIELDS = ("slug", "title", "body", "status", "source_url")

_PUBLIC_USER = FieldMap.same("id", "username", "features", "created_at", "updated_at")

_TIMESTAMPS = ("expires_at", "created_at", "updated_at")


POLICY: Mapping[Capability, CapabilityRule] = MappingProxyType({
    # User
    Capability.CREATE_USER: CapabilityRule(input=_USER_WRITE),
    Capability.READ_USER: CapabilityRule(
        output=OutputRule(OutputShape.SINGLE, _PUBLIC_USER),
    ),
    Capability.READ_USER_SELF: CapabilityRule(
        output=OutputRule(
            OutputShape.SINGLE,
            FieldMap.same("id", "username", "email", "features", "created_at", "updated_at"),
            identity_field="id",
        ),
    ),
    Capability.READ_USER_LIST: CapabilityRule(
        output=OutputRule(OutputShape.LIST, _PUBLIC_USER),
    ),
    Capability.UPDATE_USER: CapabilityRule(
        ownership=OwnerMatch("id"),
        input=_USER_WRITE,
    ),

    # Migration
    Capability.READ_MIGRATION: CapabilityRule(),
    Capability.CREATE_MIGRATION: CapabilityRule(),

    # Activation token
    Capability.READ_ACTIVATION_TOKEN: CapabilityRule(
        input=InputRule((FieldMap("token_id", "tokenId"),)),
        output=OutputRule(OutputShape.SINGLE, FieldMap.same("id", "used", *_TIMESTAMPS)),
    ),

    # Session
    Capability.CREATE_SESSION: CapabilityRule(
        input=InputRule(FieldMap.same("email", "password")),
        output=OutputRule(
            OutputShape.SINGLE,
            FieldMap.same("id", "token", *_TIMESTAMPS),
            identity_field="user_id",
        ),
    ),
    Capability.READ_SESSION: CapabilityRule(
        output=OutputRule(
            OutputShape.SINGLE,
            FieldMap.same("id", *_TIMESTAMPS),
            identity_field="user_id",
        ),
    ),

    # Content
    Capability.READ_CONTENT: CapabilityRule(output=OutputRule(OutputShape.CONTENT)),
    Capability.UPDATE_CONTENT: CapabilityRule(
        ownership=OwnerMatch("owner_id"),
        input=InputRule(FieldMap.same("parent_id", *_CONTENT_FIELDS)),
    ),
    Capability.CREATE_CONTENT: CapabilityRule(),
    Capability.CREATE_CONTENT_TEXT_ROOT: CapabilityRule(
        input=InputRule(FieldMap.same(*_CONTENT_FIELDS)),
    ),
    Capability.CREATE_CONTENT_TEXT_CHILD: CapabilityRule(
        input=InputRule(FieldMap.same("parent_id", *_CONTENT_FIELDS)),
    ),
    Capability.READ_CONTENT_LIST: CapabilityRule(output=OutputRule(OutputShape.CONTENT_LIST)),
})


def rule_for(capability: Capability | str) -> CapabilityRule:
    """The rule for a vocabulary token (KeyError/ValueError if unknown)."""
    return POLICY[Capability(capability)]
