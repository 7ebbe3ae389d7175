"""Shared pytest fixtures for Guard installer unit tests."""

import pytest
from kubernetes import client

from guard_installer.models.azure import AzureOptions


def make_guard_deployment(
    containers: list[client.V1Container] | None = None,
    volumes: list[client.V1Volume] | None = None,
    namespace: str = "kube-system",
    labels: dict[str, str] | None = None,
) -> client.V1Deployment:
    """Build a Guard deployment similar to the one the installer generates."""
    if containers is None:
        containers = [
            client.V1Container(
                name="guard",
                image="ghcr.io/kubeguard/guard:v0.17.0",
                args=["run", "--v=3"],
                env=[client.V1EnvVar(name="GUARD_LOG", value="info")],
                volume_mounts=[
                    client.V1VolumeMount(
                        name="guard-pki", mount_path="/etc/guard/pki"
                    )
                ],
            )
        ]
    if volumes is None:
        volumes = [
            client.V1Volume(
                name="guard-pki",
                secret=client.V1SecretVolumeSource(secret_name="guard-pki"),
            )
        ]

    labels = labels if labels is not None else {"app": "guard"}
    return client.V1Deployment(
        api_version="apps/v1",
        kind="Deployment",
        metadata=client.V1ObjectMeta(name="guard", namespace=namespace, labels=labels),
        spec=client.V1DeploymentSpec(
            replicas=1,
            selector=client.V1LabelSelector(match_labels=labels),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(labels=labels),
                spec=client.V1PodSpec(containers=containers, volumes=volumes),
            ),
        ),
    )


@pytest.fixture
def guard_deployment() -> client.V1Deployment:
    """Guard deployment with one container and one pre-existing volume."""
    return make_guard_deployment()


@pytest.fixture
def client_credential_options() -> AzureOptions:
    """Valid client-credential options with everything else at defaults."""
    return AzureOptions(tenant_id="t1", client_secret="s1")


@pytest.fixture
def deployment_factory():
    """Factory for Guard deployments with custom containers or volumes."""
    return make_guard_deployment
