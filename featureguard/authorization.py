"""
Authorization decision - `can(principal, capability, resource=None)`.

Base rule: the capability is in the principal's set.
When a resource is given and the capability carries an OwnerMatch rule, the
ownership comparison replaces the base rule entirely. Holding the token is
not enough to touch someone else's record, and not holding it does not stop
an owner.
"""

from __future__ import annotations

import logging
from typing import Any

from featureguard.capabilities import Capability
from featureguard.guard import validate_capability, validate_principal
from featureguard.policy import OwnerMatch, rule_for
from featureguard.principal import principal_capabilities, principal_id, token_set
from featureguard.utils import read_field

logger = logging.getLogger(__name__)


def can(principal: Any, capability: Capability | str, resource: Any = None) -> bool:
    """
    Is the principal allowed to use this capability (on this resource)?

    Usage:
        can(principal, "read:user")
        can(principal, "update:content", content)  # owner only
    """
    validate_principal(principal)
    validate_capability(capability)

    token = Capability(capability)
    authorized = token.value in token_set(principal_capabilities(principal))

    ownership = rule_for(token).ownership
    if resource is not None and isinstance(ownership, OwnerMatch):
        authorized = principal_id(principal) == read_field(resource, ownership.field, None)

    logger.debug(
        "authorization.can capability=%s principal=%s resource=%s authorized=%s",
        token.value,
        principal_id(principal),
        resource is not None,
        authorized,
    )
    return authorized
