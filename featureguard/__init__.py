"""
Authorization and data shaping between request handlers and storage.

Design principles:
1. One closed capability vocabulary for gating and shaping
2. Policy as data (policy.py), checks as plain functions
3. Malformed calls raise, negative shaping returns empty, route gates deny
4. Nothing here mutates its inputs or holds state
"""

from featureguard.authorization import can
from featureguard.capabilities import AVAILABLE_CAPABILITIES, Capability
from featureguard.errors import AuthorizationDenied, ContractViolation, FeatureGuardError
from featureguard.policies import check_request, get_principal, require
from featureguard.principal import Principal
from featureguard.projection import filter_input, filter_output

__all__ = [
    # Main interface
    "can",
    "filter_input",
    "filter_output",
    "require",
    "check_request",
    "get_principal",
    # Types
    "Capability",
    "AVAILABLE_CAPABILITIES",
    "Principal",
    # Errors
    "FeatureGuardError",
    "ContractViolation",
    "AuthorizationDenied",
]
