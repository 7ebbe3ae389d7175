"""
Command-line flag binding for the Azure authentication provider.

Registers the --azure.* flags on an argparse parser and turns the parsed
namespace back into AzureOptions. Flag names, --flag and --flag=value
boolean forms and duration syntax match the Guard server, so those forms
can be passed to either. argparse also accepts a boolean value after a
space (--azure.enable-pop false), which the server would read as a
positional argument; pass booleans with "=" when sharing flags with it.
"""

import argparse
import re
from datetime import timedelta

from guard_installer.constants import (
    FLAG_AKS_TOKEN_URL,
    FLAG_AUTH_MODE,
    FLAG_AUTH_RESOURCE_ID,
    FLAG_CLIENT_ASSERTION,
    FLAG_CLIENT_ID,
    FLAG_CLIENT_SECRET,
    FLAG_ENABLE_POP,
    FLAG_ENVIRONMENT,
    FLAG_GRAPH_CALL_ON_OVERAGE_CLAIM,
    FLAG_HTTP_CLIENT_RETRY_COUNT,
    FLAG_POP_HOSTNAME,
    FLAG_POP_TOKEN_VALIDITY_DURATION,
    FLAG_REGION,
    FLAG_SKIP_GROUP_MEMBERSHIP_RESOLUTION,
    FLAG_TENANT_ID,
    FLAG_USE_GROUP_UID,
    FLAG_VERIFY_CLIENT_ID,
)
from guard_installer.models.azure import AzureOptions

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

_TRUE_VALUES = {"1", "t", "true"}
_FALSE_VALUES = {"0", "f", "false"}


def parse_duration(value: str) -> timedelta:
    """
    Parse a Go style duration string such as "15m", "1h30m" or "-1.5s".

    Args:
        value: Duration string

    Returns:
        Parsed duration

    Raises:
        argparse.ArgumentTypeError: If the string is not a valid duration
    """
    text = value.strip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)

    seconds = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    if not text or pos != len(text):
        raise argparse.ArgumentTypeError(f"invalid duration {value!r}")
    return timedelta(seconds=sign * seconds)


def parse_bool(value: str) -> bool:
    """Parse a boolean flag value (true/false, t/f, 1/0, case-insensitive)."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value {value!r}")


def _add_bool_flag(
    parser, flag: str, dest: str, default: bool, help_text: str
) -> None:
    # A bare --flag means true; a value may follow after "=" or a space
    parser.add_argument(
        f"--{flag}",
        dest=dest,
        type=parse_bool,
        nargs="?",
        const=True,
        default=default,
        metavar="BOOL",
        help=help_text,
    )


def add_azure_flags(
    parser: argparse.ArgumentParser, defaults: AzureOptions | None = None
) -> argparse.ArgumentParser:
    """
    Register the --azure.* flags.

    Args:
        parser: Parser to add the flags to
        defaults: Options providing flag defaults (credential defaults included)

    Returns:
        The same parser
    """
    o = defaults or AzureOptions()
    group = parser.add_argument_group("azure", "Azure authentication provider")

    group.add_argument(
        f"--{FLAG_ENVIRONMENT}",
        dest="environment",
        default=o.environment,
        help="Azure cloud environment",
    )
    group.add_argument(
        f"--{FLAG_CLIENT_ID}",
        dest="client_id",
        default=o.client_id,
        help="MS Graph application client ID to use",
    )
    group.add_argument(
        f"--{FLAG_CLIENT_SECRET}",
        dest="client_secret",
        default=o.client_secret,
        help="MS Graph application client secret to use",
    )
    group.add_argument(
        f"--{FLAG_CLIENT_ASSERTION}",
        dest="client_assertion",
        default=o.client_assertion,
        help="MS Graph application client assertion (JWT) to use",
    )
    group.add_argument(
        f"--{FLAG_TENANT_ID}",
        dest="tenant_id",
        default=o.tenant_id,
        help="MS Graph application tenant id to use",
    )
    _add_bool_flag(
        group,
        FLAG_USE_GROUP_UID,
        "use_group_uid",
        o.use_group_uid,
        "Use group UID for authentication instead of group display name",
    )
    group.add_argument(
        f"--{FLAG_AUTH_MODE}",
        dest="auth_mode",
        default=o.auth_mode,
        help=(
            "auth mode to call graph api, valid value is either aks, arc, obo, "
            "client-credential or passthrough"
        ),
    )
    group.add_argument(
        f"--{FLAG_AKS_TOKEN_URL}",
        dest="aks_token_url",
        default=o.aks_token_url,
        help="url to call for AKS OBO flow",
    )
    group.add_argument(
        f"--{FLAG_POP_HOSTNAME}",
        dest="pop_token_hostname",
        default=o.pop_token_hostname,
        help="hostname used to run the pop hostname verification; 'u' claim",
    )
    _add_bool_flag(
        group,
        FLAG_ENABLE_POP,
        "enable_pop",
        o.enable_pop,
        "Enabling pop token verification",
    )
    group.add_argument(
        f"--{FLAG_POP_TOKEN_VALIDITY_DURATION}",
        dest="pop_token_validity_duration",
        type=parse_duration,
        default=o.pop_token_validity_duration,
        metavar="DURATION",
        help=(
            "time duration for PoP token to be considered valid from creation "
            "time, default 15 min"
        ),
    )
    _add_bool_flag(
        group,
        FLAG_GRAPH_CALL_ON_OVERAGE_CLAIM,
        "resolve_group_membership_only_on_overage_claim",
        o.resolve_group_membership_only_on_overage_claim,
        (
            "set to true to resolve group membership only when overage claim is "
            "present. setting to false will always call graph api to resolve "
            "group membership"
        ),
    )
    _add_bool_flag(
        group,
        FLAG_VERIFY_CLIENT_ID,
        "verify_client_id",
        o.verify_client_id,
        "set to true to validate token's audience claim matches clientID",
    )
    _add_bool_flag(
        group,
        FLAG_SKIP_GROUP_MEMBERSHIP_RESOLUTION,
        "skip_group_membership_resolution",
        o.skip_group_membership_resolution,
        "when set to true, this will bypass getting group membership from graph api",
    )
    # resource id and region are needed to retrieve the user's security groups via the Arc OBO service
    group.add_argument(
        f"--{FLAG_AUTH_RESOURCE_ID}",
        dest="resource_id",
        default=o.resource_id,
        help=(
            "azure cluster resource id (//subscription/<subName>/resourcegroups/"
            "<RGname>/providers/Microsoft.Kubernetes/connectedClusters/"
            "<clustername> for connectedk8s) used for making getMemberGroups "
            "to ARC OBO service"
        ),
    )
    group.add_argument(
        f"--{FLAG_REGION}",
        dest="azure_region",
        default=o.azure_region,
        help="region where cluster is deployed",
    )
    group.add_argument(
        f"--{FLAG_HTTP_CLIENT_RETRY_COUNT}",
        dest="http_client_retry_count",
        type=int,
        default=o.http_client_retry_count,
        help="number of retries for retryablehttp client",
    )
    return parser


def options_from_args(namespace: argparse.Namespace) -> AzureOptions:
    """Build AzureOptions from a namespace parsed with add_azure_flags."""
    values = {
        name: getattr(namespace, name)
        for name in AzureOptions.model_fields
        if hasattr(namespace, name)
    }
    return AzureOptions.model_validate(values)
