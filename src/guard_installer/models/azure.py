"""
Pydantic model for the Azure authentication provider options.

The model only coerces types. Cross-field rules are checked by
the accumulating validation in guard_installer.utils.validation so
that every problem can be reported in one pass.
"""

from datetime import timedelta

from pydantic import BaseModel, Field

from guard_installer.constants import (
    DEFAULT_AUTH_MODE,
    DEFAULT_HTTP_CLIENT_RETRY_COUNT,
    DEFAULT_POP_TOKEN_VALIDITY_DURATION,
    DEFAULT_USE_GROUP_UID,
)


class AzureOptions(BaseModel):
    """
    Options of the Azure authentication provider.

    Built once at startup, validated once, then only read.
    """

    model_config = {"populate_by_name": True}

    environment: str = Field("", description="Azure cloud environment")
    client_id: str = Field(
        "", alias="clientID", description="MS Graph application client ID to use"
    )
    client_secret: str = Field(
        "",
        alias="clientSecret",
        description="MS Graph application client secret to use",
        repr=False,
    )
    client_assertion: str = Field(
        "",
        alias="clientAssertion",
        description="MS Graph application client assertion (JWT) to use",
        repr=False,
    )
    tenant_id: str = Field(
        "", alias="tenantID", description="MS Graph application tenant id to use"
    )
    use_group_uid: bool = Field(
        DEFAULT_USE_GROUP_UID,
        alias="useGroupUID",
        description="Use group UID for authentication instead of group display name",
    )
    auth_mode: str = Field(
        DEFAULT_AUTH_MODE,
        alias="authMode",
        description="Auth mode to call graph api",
    )
    aks_token_url: str = Field(
        "", alias="aksTokenURL", description="URL to call for AKS OBO flow"
    )
    enable_pop: bool = Field(
        False, alias="enablePOP", description="Enable PoP token verification"
    )
    pop_token_hostname: str = Field(
        "",
        alias="popTokenHostname",
        description="Hostname used for PoP hostname verification ('u' claim)",
    )
    pop_token_validity_duration: timedelta = Field(
        DEFAULT_POP_TOKEN_VALIDITY_DURATION,
        alias="popTokenValidityDuration",
        description="How long a PoP token stays valid after creation",
    )
    resolve_group_membership_only_on_overage_claim: bool = Field(
        False,
        alias="resolveGroupMembershipOnlyOnOverageClaim",
        description="Resolve group membership only when an overage claim is present",
    )
    skip_group_membership_resolution: bool = Field(
        False,
        alias="skipGroupMembershipResolution",
        description="Bypass getting group membership from graph api",
    )
    verify_client_id: bool = Field(
        False,
        alias="verifyClientID",
        description="Validate that the token audience matches the client ID",
    )
    resource_id: str = Field(
        "",
        alias="resourceID",
        description="Azure cluster resource id used for the Arc OBO service",
    )
    azure_region: str = Field(
        "", alias="azureRegion", description="Region where the cluster is deployed"
    )
    http_client_retry_count: int = Field(
        DEFAULT_HTTP_CLIENT_RETRY_COUNT,
        alias="httpClientRetryCount",
        description="Number of retries for the retrying http client",
    )


def new_azure_options(
    client_secret: str = "", client_assertion: str = "", **overrides
) -> AzureOptions:
    """
    Build options with the credential defaults supplied explicitly.

    Args:
        client_secret: Default client secret (usually from AZURE_CLIENT_SECRET)
        client_assertion: Default client assertion (usually from AZURE_CLIENT_ASSERTION)
        **overrides: Any other AzureOptions field, by python name or alias

    Returns:
        AzureOptions instance
    """
    values = {"client_secret": client_secret, "client_assertion": client_assertion}
    values.update(overrides)
    return AzureOptions.model_validate(values)
