"""
Capabilities - the closed vocabulary of feature tokens.

This defines WHAT can be checked, not HOW we check it.
The actual rules live in policy.py, the checking in authorization.py.

Adding a capability is a code change. There is no runtime registration.
"""

from __future__ import annotations

from enum import Enum


class Capability(str, Enum):
    """
    Every capability token the authorization layer understands.

    Members compare equal to their string value, so handlers can pass
    either `Capability.READ_USER` or `"read:user"`.
    """

    # User
    CREATE_USER = "create:user"
    READ_USER = "read:user"
    READ_USER_SELF = "read:user:self"
    READ_USER_LIST = "read:user:list"
    UPDATE_USER = "update:user"

    # Migration
    READ_MIGRATION = "read:migration"
    CREATE_MIGRATION = "create:migration"

    # Activation token
    READ_ACTIVATION_TOKEN = "read:activation_token"

    # Session
    CREATE_SESSION = "create:session"
    READ_SESSION = "read:session"

    # Content
    READ_CONTENT = "read:content"
    UPDATE_CONTENT = "update:content"
    CREATE_CONTENT = "create:content"
    CREATE_CONTENT_TEXT_ROOT = "create:content:text_root"
    CREATE_CONTENT_TEXT_CHILD = "create:content:text_child"
    READ_CONTENT_LIST = "read:content:list"


AVAILABLE_CAPABILITIES: frozenset[str] = frozenset(c.value for c in Capability)


def is_available(capability: object) -> bool:
    """Is this token part of the vocabulary?"""
    if isinstance(capability, Capability):
        return True
    return isinstance(capability, str) and capability in AVAILABLE_CAPABILITIES

