"""
Validation utilities for the Guard installer.

This module checks Azure authentication provider options. Every rule is an
independent (field, predicate, message) entry and all rules run on every
call, so a caller sees every problem at once instead of fixing them one by
one. It includes:

- Auth mode checks
- Credential presence checks
- Per-mode required field checks
- Tenant, client ID and PoP hostname checks
"""

import logging
from collections.abc import Callable
from typing import NamedTuple

from guard_installer.constants import (
    AKS_AUTH_MODE,
    ARC_AUTH_MODE,
    AUTH_MODES,
    CREDENTIAL_FREE_AUTH_MODES,
    ERROR_ARC_OVERAGE_CLAIM,
    ERROR_ARC_REGION,
    ERROR_ARC_RESOURCE_ID,
    ERROR_ARC_SKIP_RESOLUTION,
    ERROR_INVALID_AUTH_MODE,
    ERROR_MISSING_AKS_TOKEN_URL,
    ERROR_MISSING_CLIENT_ID,
    ERROR_MISSING_CREDENTIAL,
    ERROR_MISSING_POP_HOSTNAME,
    ERROR_MISSING_TENANT_ID,
    ERROR_PASSTHROUGH_OVERAGE_CLAIM,
    ERROR_PASSTHROUGH_SKIP_RESOLUTION,
    FLAG_AKS_TOKEN_URL,
    FLAG_AUTH_MODE,
    FLAG_AUTH_RESOURCE_ID,
    FLAG_CLIENT_ID,
    FLAG_CLIENT_SECRET,
    FLAG_GRAPH_CALL_ON_OVERAGE_CLAIM,
    FLAG_POP_HOSTNAME,
    FLAG_REGION,
    FLAG_SKIP_GROUP_MEMBERSHIP_RESOLUTION,
    FLAG_TENANT_ID,
    PASSTHROUGH_AUTH_MODE,
)
from guard_installer.errors import ValidationError
from guard_installer.models.azure import AzureOptions

logger = logging.getLogger(__name__)


class ValidationRule(NamedTuple):
    """A single invariant: the predicate returns True when it is violated."""

    field: str
    violated: Callable[[AzureOptions], bool]
    message: str


def _is_mode(mode: str) -> Callable[[AzureOptions], bool]:
    return lambda o: o.auth_mode == mode


def _missing_credential(o: AzureOptions) -> bool:
    return (
        o.auth_mode not in CREDENTIAL_FREE_AUTH_MODES
        and not o.client_secret
        and not o.client_assertion
    )


_is_aks = _is_mode(AKS_AUTH_MODE)
_is_arc = _is_mode(ARC_AUTH_MODE)
_is_passthrough = _is_mode(PASSTHROUGH_AUTH_MODE)

# Order only affects the order of reported errors
AZURE_OPTION_RULES: tuple[ValidationRule, ...] = (
    ValidationRule(
        FLAG_AUTH_MODE, lambda o: o.auth_mode not in AUTH_MODES, ERROR_INVALID_AUTH_MODE
    ),
    ValidationRule(FLAG_CLIENT_SECRET, _missing_credential, ERROR_MISSING_CREDENTIAL),
    ValidationRule(
        FLAG_AKS_TOKEN_URL,
        lambda o: _is_aks(o) and not o.aks_token_url,
        ERROR_MISSING_AKS_TOKEN_URL,
    ),
    ValidationRule(
        FLAG_GRAPH_CALL_ON_OVERAGE_CLAIM,
        lambda o: _is_passthrough(o)
        and not o.resolve_group_membership_only_on_overage_claim,
        ERROR_PASSTHROUGH_OVERAGE_CLAIM,
    ),
    ValidationRule(
        FLAG_SKIP_GROUP_MEMBERSHIP_RESOLUTION,
        lambda o: _is_passthrough(o) and not o.skip_group_membership_resolution,
        ERROR_PASSTHROUGH_SKIP_RESOLUTION,
    ),
    ValidationRule(
        FLAG_AUTH_RESOURCE_ID,
        lambda o: _is_arc(o) and not o.resource_id,
        ERROR_ARC_RESOURCE_ID,
    ),
    ValidationRule(
        FLAG_REGION,
        lambda o: _is_arc(o) and not o.azure_region,
        ERROR_ARC_REGION,
    ),
    ValidationRule(
        FLAG_SKIP_GROUP_MEMBERSHIP_RESOLUTION,
        lambda o: _is_arc(o) and o.skip_group_membership_resolution,
        ERROR_ARC_SKIP_RESOLUTION,
    ),
    ValidationRule(
        FLAG_GRAPH_CALL_ON_OVERAGE_CLAIM,
        lambda o: _is_arc(o) and not o.resolve_group_membership_only_on_overage_claim,
        ERROR_ARC_OVERAGE_CLAIM,
    ),
    ValidationRule(FLAG_TENANT_ID, lambda o: not o.tenant_id, ERROR_MISSING_TENANT_ID),
    ValidationRule(
        FLAG_CLIENT_ID,
        lambda o: o.verify_client_id and not o.client_id,
        ERROR_MISSING_CLIENT_ID,
    ),
    ValidationRule(
        FLAG_POP_HOSTNAME,
        lambda o: o.enable_pop and not o.pop_token_hostname,
        ERROR_MISSING_POP_HOSTNAME,
    ),
)


def normalize_auth_mode(options: AzureOptions) -> str:
    """
    Lowercase the auth mode in place.

    Args:
        options: Options to normalize

    Returns:
        The normalized auth mode
    """
    options.auth_mode = options.auth_mode.lower()
    return options.auth_mode


def validate_azure_options(options: AzureOptions) -> list[ValidationError]:
    """
    Validate Azure authentication provider options.

    The auth mode is lowercased on the options object before any rule runs.
    No rule depends on the outcome of another, so an unknown auth mode also
    triggers the credential rule when no credential is set.

    Args:
        options: Options to validate

    Returns:
        Every violated rule in rule order, empty when the options are valid
    """
    normalize_auth_mode(options)

    errors: list[ValidationError] = []
    for rule in AZURE_OPTION_RULES:
        if rule.violated(options):
            logger.debug(
                f"Validation rule failed for {rule.field}: {rule.message}",
                extra={"field": rule.field, "operation": "validate"},
            )
            errors.append(ValidationError(rule.message, field=rule.field))

    if errors:
        logger.warning(
            f"Azure options failed validation with {len(errors)} error(s)",
            extra={"error_count": len(errors), "operation": "validate"},
        )
    else:
        logger.debug(f"Validated Azure options (auth mode: {options.auth_mode})")

    return errors
