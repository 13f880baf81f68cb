"""
Guard - precondition checks run before any decision or projection.

A failure here means the caller is broken (unknown token, principal without
capabilities, no payload), so it raises ContractViolation instead of
returning a polite "no".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from featureguard.capabilities import is_available
from featureguard.errors import ContractViolation
from featureguard.principal import CAPABILITY_COLLECTIONS, principal_capabilities

logger = logging.getLogger(__name__)

def violation(message: str, **kwargs: Any) -> ContractViolation:
    """Build a ContractViolation and log it with its error_id."""
    error = ContractViolation(message, **kwargs)
    logger.warning(
        "authorization.contract_violation error_id=%s message=%s context=%s",
        error.error_id,
        message,
        error.context,
    )
    return error


def validate_principal(principal: Any) -> None:
    if principal is None:
        raise violation('No "principal" was given to the authorization check.')

    capabilities = principal_capabilities(principal)
    if not isinstance(capabilities, CAPABILITY_COLLECTIONS):
        raise violation('"principal" has no "capabilities" or they are not a collection.')


def validate_capability(capability: Any) -> None:
    if not capability:
        raise violation('No "capability" was given to the authorization check.')

    if not is_available(capability):
        raise violation(
            "The capability used is not part of the available capabilities.",
            context={"capability": capability},
        )


def validate_input(input: Any) -> None:
    if input is None:
        raise violation('No "input" was given to the filter.')


def validate_output(output: Any) -> None:
    if output is None:
        raise violation('No "output" was given to the filter.')


def validate_list_output(output: Any, capability: str) -> None:
    """List rules need a sequence of records, not a single record."""
    if isinstance(output, (str, bytes, Mapping, BaseModel)) or not isinstance(output, Iterable):
        raise violation(
            "A list output was expected for this capability.",
            context={"capability": capability, "type": type(output).__name__},
        )
