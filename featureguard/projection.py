"""
Projection - shape inbound and outbound payloads to what a capability allows.

filter_input: strips fields a client must not write (over-posting).
filter_output: strips fields a principal must not see (over-exposure).

Both are data-shaping functions, not gates. A negative decision yields an
empty result, never an exception; route handlers that need a hard failure
call `can()` (or use `require()`) themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from featureguard.authorization import can
from featureguard.capabilities import Capability
from featureguard.content import validate_content
from featureguard.guard import (
    validate_capability,
    validate_input,
    validate_list_output,
    validate_output,
    validate_principal,
)
from featureguard.policy import FieldMap, OutputRule, OutputShape, rule_for
from featureguard.principal import principal_id
from featureguard.utils import compact, read_field

logger = logging.getLogger(__name__)


def _project(source: Any, fields: Iterable[FieldMap]) -> dict[str, Any]:
    """Copy the mapped fields, leaving out any the source does not have."""
    return compact({f.target: read_field(source, f.source) for f in fields})


def _items(output: Any, capability: Capability) -> list[Any]:
    validate_list_output(output, capability.value)
    return list(output)


# =============================================================================
# Input
# =============================================================================


def filter_input(principal: Any, capability: Capability | str, input: Any) -> dict[str, Any]:
    """
    Keep only the input fields this capability may write.

    Usage:
        values = filter_input(principal, "update:user", request_body)
        # {"username": ..., "email": ...}  (password only if sent)

    Returns {} when the principal lacks the capability or the capability
    accepts no input.
    """
    validate_principal(principal)
    validate_capability(capability)
    validate_input(input)

    token = Capability(capability)
    rule = rule_for(token).input

    if rule is None or not can(principal, token):
        logger.debug("projection.input_empty capability=%s", token.value)
        return {}

    return _project(input, rule.fields)


# =============================================================================
# Output
# =============================================================================


def _identity_matches(principal: Any, output: Any, field: str) -> bool:
    """Both ids present and equal."""
    own_id = principal_id(principal)
    linked_id = read_field(output, field, None)
    return bool(own_id) and bool(linked_id) and own_id == linked_id


def _filter_single(principal: Any, token: Capability, rule: OutputRule, output: Any) -> dict[str, Any]:
    if rule.identity_field is not None:
        # Identity-sensitive: both membership and identity must hold
        if not can(principal, token):
            return {}
        if not _identity_matches(principal, output, rule.identity_field):
            logger.debug(
                "projection.identity_mismatch capability=%s principal=%s",
                token.value,
                principal_id(principal),
            )
            return {}

    return _project(output, rule.fields)


def filter_output(
    principal: Any,
    capability: Capability | str,
    output: Any,
) -> dict[str, Any] | list[dict[str, Any]]:
    """
    Keep only the output fields this capability may read.

    Usage:
        return filter_output(principal, "read:user:list", users)

    Single records return a dict, list rules return a list of the same
    length and order as `output`.
    """
    validate_principal(principal)
    validate_capability(capability)
    validate_output(output)

    token = Capability(capability)
    rule = rule_for(token).output

    if rule is None:
        return {}

    if rule.shape is OutputShape.SINGLE:
        return _filter_single(principal, token, rule, output)

    if rule.shape is OutputShape.LIST:
        return [_project(item, rule.fields) for item in _items(output, token)]

    if rule.shape is OutputShape.CONTENT:
        return validate_content(output)

    return [validate_content(item) for item in _items(output, token)]
