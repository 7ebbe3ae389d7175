"""
Constants used throughout the Guard installer.

This module defines all constant values used by the installer including:
- Azure authentication modes
- Names of the generated credential secret, its keys and mount path
- Flag names understood by the Guard server process
- Default configuration values
"""

from datetime import timedelta

# Azure authentication modes
AKS_AUTH_MODE = "aks"
ARC_AUTH_MODE = "arc"
OBO_AUTH_MODE = "obo"
CLIENT_CREDENTIAL_AUTH_MODE = "client-credential"
PASSTHROUGH_AUTH_MODE = "passthrough"

AUTH_MODES = (
    AKS_AUTH_MODE,
    ARC_AUTH_MODE,
    OBO_AUTH_MODE,
    CLIENT_CREDENTIAL_AUTH_MODE,
    PASSTHROUGH_AUTH_MODE,
)

# Modes that do not need a client secret or client assertion
CREDENTIAL_FREE_AUTH_MODES = frozenset(
    {AKS_AUTH_MODE, PASSTHROUGH_AUTH_MODE, ARC_AUTH_MODE}
)

# Modes passed verbatim to the server; everything else is emitted as client-credential
EMITTED_AUTH_MODES = frozenset(
    {AKS_AUTH_MODE, OBO_AUTH_MODE, CLIENT_CREDENTIAL_AUTH_MODE}
)

# Credential secret injected into the Guard deployment
AZURE_AUTH_SECRET_NAME = "guard-azure-auth"
AZURE_AUTH_MOUNT_PATH = "/etc/guard/auth/azure"
AZURE_AUTH_SECRET_MODE = 0o555
CLIENT_SECRET_KEY = "client-secret"
CLIENT_ASSERTION_KEY = "client-assertion"

# Environment variables read by the Guard server process
ENV_AZURE_CLIENT_SECRET = "AZURE_CLIENT_SECRET"
ENV_AZURE_CLIENT_ASSERTION = "AZURE_CLIENT_ASSERTION"

# Flag names shared with the Guard server process
FLAG_ENVIRONMENT = "azure.environment"
FLAG_CLIENT_ID = "azure.client-id"
FLAG_CLIENT_SECRET = "azure.client-secret"
FLAG_CLIENT_ASSERTION = "azure.client-assertion"
FLAG_TENANT_ID = "azure.tenant-id"
FLAG_USE_GROUP_UID = "azure.use-group-uid"
FLAG_AUTH_MODE = "azure.auth-mode"
FLAG_AKS_TOKEN_URL = "azure.aks-token-url"
FLAG_POP_HOSTNAME = "azure.pop-hostname"
FLAG_ENABLE_POP = "azure.enable-pop"
FLAG_POP_TOKEN_VALIDITY_DURATION = "azure.pop-token-validity-duration"
FLAG_GRAPH_CALL_ON_OVERAGE_CLAIM = "azure.graph-call-on-overage-claim"
FLAG_VERIFY_CLIENT_ID = "azure.verify-clientID"
FLAG_SKIP_GROUP_MEMBERSHIP_RESOLUTION = "azure.skip-group-membership-resolution"
FLAG_AUTH_RESOURCE_ID = "azure.auth-resource-id"
FLAG_REGION = "azure.region"
FLAG_HTTP_CLIENT_RETRY_COUNT = "azure.http-client-retry-count"

# Default configuration values
DEFAULT_AUTH_MODE = CLIENT_CREDENTIAL_AUTH_MODE
DEFAULT_USE_GROUP_UID = True
DEFAULT_POP_TOKEN_VALIDITY_DURATION = timedelta(minutes=15)
DEFAULT_HTTP_CLIENT_RETRY_COUNT = 2

# Error message templates
ERROR_INVALID_AUTH_MODE = (
    "invalid azure.auth-mode. valid value is either aks, arc, obo, "
    "client-credential or passthrough"
)
ERROR_MISSING_CREDENTIAL = (
    "azure.client-secret or azure.client-assertion must be non-empty"
)
ERROR_MISSING_AKS_TOKEN_URL = "azure.aks-token-url must be non-empty"
ERROR_PASSTHROUGH_OVERAGE_CLAIM = (
    "azure.graph-call-on-overage-claim cannot be false when passthrough "
    "azure.auth-mode is used"
)
ERROR_PASSTHROUGH_SKIP_RESOLUTION = (
    "azure.skip-group-membership-resolution cannot be false when passthrough "
    "azure.auth-mode is used"
)
ERROR_ARC_RESOURCE_ID = (
    "azure.resource-id must be non-empty for authentication using arc mode"
)
ERROR_ARC_REGION = "azure.region must be non-empty for authentication using arc mode"
ERROR_ARC_SKIP_RESOLUTION = (
    "azure.skip-group-membership-resolution cannot be true when arc "
    "azure.auth-mode is used"
)
ERROR_ARC_OVERAGE_CLAIM = (
    "azure.graph-call-on-overage-claim cannot be false when arc "
    "azure.auth-mode is used"
)
ERROR_MISSING_TENANT_ID = "azure.tenant-id must be non-empty"
ERROR_MISSING_CLIENT_ID = (
    "azure.client-id must be non-empty when azure.verify-clientID is set"
)
ERROR_MISSING_POP_HOSTNAME = (
    "azure.pop-hostname must be non-empty when pop token is enabled"
)
ERROR_NO_CONTAINERS = "Deployment '{}' has no containers in its pod template"
