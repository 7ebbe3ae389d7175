"""
Kubernetes utilities for the Guard installer.

This module builds the objects that wire the Azure authentication provider
into a Guard Deployment and applies them to the Deployment in place.

Key functionality:
- Credential secret construction
- Secret volume, volume mount and secret-backed environment variables
- Command-line arguments for the Guard server container
"""

import base64
import logging

from kubernetes import client

from guard_installer.constants import (
    AZURE_AUTH_MOUNT_PATH,
    AZURE_AUTH_SECRET_MODE,
    AZURE_AUTH_SECRET_NAME,
    CLIENT_ASSERTION_KEY,
    CLIENT_CREDENTIAL_AUTH_MODE,
    CLIENT_SECRET_KEY,
    EMITTED_AUTH_MODES,
    ENV_AZURE_CLIENT_ASSERTION,
    ENV_AZURE_CLIENT_SECRET,
    ERROR_NO_CONTAINERS,
    FLAG_AKS_TOKEN_URL,
    FLAG_AUTH_MODE,
    FLAG_CLIENT_ID,
    FLAG_ENVIRONMENT,
    FLAG_GRAPH_CALL_ON_OVERAGE_CLAIM,
    FLAG_HTTP_CLIENT_RETRY_COUNT,
    FLAG_TENANT_ID,
    FLAG_USE_GROUP_UID,
    FLAG_VERIFY_CLIENT_ID,
)
from guard_installer.errors import PreconditionError
from guard_installer.models.azure import AzureOptions

logger = logging.getLogger(__name__)


def _b64(value: str) -> str:
    return base64.b64encode(value.encode()).decode()


def _format_flag(name: str, value: str | bool | int) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"--{name}={value}"


def build_azure_auth_secret(
    options: AzureOptions,
    namespace: str | None,
    labels: dict[str, str] | None = None,
) -> client.V1Secret:
    """
    Build the secret holding the Azure client credentials.

    Both keys are always present; an empty credential is stored as an empty
    value.

    Args:
        options: Azure provider options
        namespace: Namespace of the Guard deployment
        labels: Labels copied from the Guard deployment

    Returns:
        Secret object (not created in the cluster)
    """
    return client.V1Secret(
        api_version="v1",
        kind="Secret",
        metadata=client.V1ObjectMeta(
            name=AZURE_AUTH_SECRET_NAME,
            namespace=namespace,
            labels=dict(labels) if labels else None,
        ),
        type="Opaque",
        data={
            CLIENT_SECRET_KEY: _b64(options.client_secret),
            CLIENT_ASSERTION_KEY: _b64(options.client_assertion),
        },
    )


def build_secret_env_var(name: str, secret_name: str, key: str) -> client.V1EnvVar:
    """Environment variable whose value is read from a secret key."""
    return client.V1EnvVar(
        name=name,
        value_from=client.V1EnvVarSource(
            secret_key_ref=client.V1SecretKeySelector(name=secret_name, key=key)
        ),
    )


def emitted_auth_mode(auth_mode: str) -> str:
    """
    Auth mode written to the Guard server arguments.

    aks, obo and client-credential pass through unchanged; every other
    value, arc and passthrough included, is emitted as client-credential.
    """
    if auth_mode in EMITTED_AUTH_MODES:
        return auth_mode
    return CLIENT_CREDENTIAL_AUTH_MODE


def build_azure_auth_args(options: AzureOptions) -> list[str]:
    """
    Build the --azure.* arguments for the Guard server container.

    Args:
        options: Validated Azure provider options

    Returns:
        Arguments in the order the server expects them
    """
    args = []
    if options.environment:
        args.append(_format_flag(FLAG_ENVIRONMENT, options.environment))
    if options.client_id:
        args.append(_format_flag(FLAG_CLIENT_ID, options.client_id))
    if options.tenant_id:
        args.append(_format_flag(FLAG_TENANT_ID, options.tenant_id))

    args.append(_format_flag(FLAG_AUTH_MODE, emitted_auth_mode(options.auth_mode)))

    if options.aks_token_url:
        args.append(_format_flag(FLAG_AKS_TOKEN_URL, options.aks_token_url))

    args.extend(
        [
            _format_flag(FLAG_USE_GROUP_UID, options.use_group_uid),
            _format_flag(
                FLAG_GRAPH_CALL_ON_OVERAGE_CLAIM,
                options.resolve_group_membership_only_on_overage_claim,
            ),
            _format_flag(FLAG_VERIFY_CLIENT_ID, options.verify_client_id),
            _format_flag(FLAG_HTTP_CLIENT_RETRY_COUNT, options.http_client_retry_count),
        ]
    )
    return args


def apply_azure_auth(
    options: AzureOptions, deployment: client.V1Deployment
) -> list[client.V1Secret]:
    """
    Wire the Azure authentication provider into a Guard deployment.

    The deployment is mutated in place: a secret volume is added to the pod
    template, and container 0 gets a volume mount, two secret-backed
    environment variables and the --azure.* arguments. Existing entries are
    kept in their original order.

    The pod template must define at least one container.

    Args:
        options: Validated Azure provider options
        deployment: Guard deployment to patch

    Returns:
        Extra objects to persist alongside the deployment (the credential secret)

    Raises:
        PreconditionError: If the pod template is missing or has no containers
    """
    metadata = deployment.metadata or client.V1ObjectMeta()
    template = deployment.spec.template if deployment.spec else None
    pod_spec = template.spec if template else None
    if pod_spec is None or not pod_spec.containers:
        raise PreconditionError(ERROR_NO_CONTAINERS.format(metadata.name))

    container = pod_spec.containers[0]
    logger.info(
        f"Applying Azure auth to deployment {metadata.name} in namespace {metadata.namespace}",
        extra={
            "resource_name": metadata.name,
            "namespace": metadata.namespace,
            "operation": "apply_azure_auth",
        },
    )

    # create auth secret
    auth_secret = build_azure_auth_secret(options, metadata.namespace, metadata.labels)
    secret_name = auth_secret.metadata.name

    # mount auth secret into deployment
    container.volume_mounts = list(container.volume_mounts or []) + [
        client.V1VolumeMount(name=secret_name, mount_path=AZURE_AUTH_MOUNT_PATH)
    ]
    pod_spec.volumes = list(pod_spec.volumes or []) + [
        client.V1Volume(
            name=secret_name,
            secret=client.V1SecretVolumeSource(
                secret_name=secret_name,
                default_mode=AZURE_AUTH_SECRET_MODE,
            ),
        )
    ]

    # use auth secret in container[0] env
    container.env = list(container.env or []) + [
        build_secret_env_var(ENV_AZURE_CLIENT_SECRET, secret_name, CLIENT_SECRET_KEY),
        build_secret_env_var(
            ENV_AZURE_CLIENT_ASSERTION, secret_name, CLIENT_ASSERTION_KEY
        ),
    ]

    container.args = list(container.args or []) + build_azure_auth_args(options)
    pod_spec.containers[0] = container

    logger.debug(
        f"Added {len(container.args)} argument(s) to container {container.name}"
    )
    return [auth_secret]
