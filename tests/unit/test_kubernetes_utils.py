"""Unit tests for Guard deployment patching."""

import base64

import pytest
from kubernetes import client

from guard_installer.errors import PreconditionError
from guard_installer.models.azure import AzureOptions
from guard_installer.utils.kubernetes import (
    apply_azure_auth,
    build_azure_auth_args,
    build_azure_auth_secret,
    emitted_auth_mode,
)


def _decode(value: str) -> str:
    return base64.b64decode(value).decode()


def _container(deployment: client.V1Deployment) -> client.V1Container:
    return deployment.spec.template.spec.containers[0]


class TestAzureAuthSecret:
    """Tests for the generated credential secret."""

    def test_secret_for_client_credential(
        self, client_credential_options, guard_deployment
    ):
        """Test secret name, namespace, labels and data."""
        extra = apply_azure_auth(client_credential_options, guard_deployment)

        assert len(extra) == 1
        secret = extra[0]
        assert isinstance(secret, client.V1Secret)
        assert secret.metadata.name == "guard-azure-auth"
        assert secret.metadata.namespace == "kube-system"
        assert secret.metadata.labels == {"app": "guard"}
        assert _decode(secret.data["client-secret"]) == "s1"
        assert _decode(secret.data["client-assertion"]) == ""

    def test_secret_labels_are_copied(self):
        """Test that later label changes on the deployment do not leak into the secret."""
        labels = {"app": "guard"}
        secret = build_azure_auth_secret(AzureOptions(), "ns", labels)

        labels["extra"] = "value"

        assert secret.metadata.labels == {"app": "guard"}

    def test_secret_without_labels(self, deployment_factory):
        """Test a deployment without labels."""
        deployment = deployment_factory(labels={})
        deployment.metadata.labels = None

        secret = apply_azure_auth(AzureOptions(client_assertion="jwt"), deployment)[0]

        assert secret.metadata.labels is None
        assert _decode(secret.data["client-assertion"]) == "jwt"


class TestApplyAzureAuth:
    """Tests for the volume, mount, env and arg mutations."""

    def test_append_only_counts(self, client_credential_options, guard_deployment):
        """Test that apply adds exactly one volume, one mount and two env vars."""
        container = _container(guard_deployment)
        volumes_before = list(guard_deployment.spec.template.spec.volumes)
        mounts_before = list(container.volume_mounts)
        env_before = list(container.env)
        args_before = list(container.args)

        apply_azure_auth(client_credential_options, guard_deployment)

        container = _container(guard_deployment)
        volumes = guard_deployment.spec.template.spec.volumes
        assert volumes[: len(volumes_before)] == volumes_before
        assert len(volumes) == len(volumes_before) + 1
        assert container.volume_mounts[: len(mounts_before)] == mounts_before
        assert len(container.volume_mounts) == len(mounts_before) + 1
        assert container.env[: len(env_before)] == env_before
        assert len(container.env) == len(env_before) + 2
        assert container.args[: len(args_before)] == args_before
        # tenant-id, auth-mode and the four always-emitted flags
        assert len(container.args) == len(args_before) + 6

    def test_secret_volume_and_mount(self, client_credential_options, guard_deployment):
        """Test the secret volume mode and mount path."""
        apply_azure_auth(client_credential_options, guard_deployment)

        volume = guard_deployment.spec.template.spec.volumes[-1]
        assert volume.name == "guard-azure-auth"
        assert volume.secret.secret_name == "guard-azure-auth"
        assert volume.secret.default_mode == 0o555

        mount = _container(guard_deployment).volume_mounts[-1]
        assert mount.name == "guard-azure-auth"
        assert mount.mount_path == "/etc/guard/auth/azure"

    def test_env_vars_reference_secret(
        self, client_credential_options, guard_deployment
    ):
        """Test that credentials are read from the secret, never inlined."""
        apply_azure_auth(client_credential_options, guard_deployment)

        env = _container(guard_deployment).env[-2:]
        assert [e.name for e in env] == ["AZURE_CLIENT_SECRET", "AZURE_CLIENT_ASSERTION"]
        for var, key in zip(env, ["client-secret", "client-assertion"], strict=True):
            assert var.value is None
            assert var.value_from.secret_key_ref.name == "guard-azure-auth"
            assert var.value_from.secret_key_ref.key == key

    def test_args_for_client_credential(
        self, client_credential_options, guard_deployment
    ):
        """Test the emitted arguments of the plain client-credential setup."""
        apply_azure_auth(client_credential_options, guard_deployment)

        assert _container(guard_deployment).args == [
            "run",
            "--v=3",
            "--azure.tenant-id=t1",
            "--azure.auth-mode=client-credential",
            "--azure.use-group-uid=true",
            "--azure.graph-call-on-overage-claim=false",
            "--azure.verify-clientID=false",
            "--azure.http-client-retry-count=2",
        ]

    def test_container_without_lists(self, client_credential_options, deployment_factory):
        """Test a container whose args, env and mounts are unset."""
        deployment = deployment_factory(
            containers=[client.V1Container(name="guard", image="guard")], volumes=None
        )
        deployment.spec.template.spec.volumes = None

        apply_azure_auth(client_credential_options, deployment)

        container = _container(deployment)
        assert len(deployment.spec.template.spec.volumes) == 1
        assert len(container.volume_mounts) == 1
        assert len(container.env) == 2
        assert container.args[0] == "--azure.tenant-id=t1"

    def test_only_first_container_patched(
        self, client_credential_options, deployment_factory
    ):
        """Test that sidecar containers are left alone."""
        deployment = deployment_factory(
            containers=[
                client.V1Container(name="guard", image="guard"),
                client.V1Container(name="sidecar", image="sidecar", args=["x"]),
            ]
        )

        apply_azure_auth(client_credential_options, deployment)

        sidecar = deployment.spec.template.spec.containers[1]
        assert sidecar.args == ["x"]
        assert sidecar.env is None
        assert sidecar.volume_mounts is None

    def test_no_containers_is_precondition_error(
        self, client_credential_options, deployment_factory
    ):
        """Test that a pod template without containers is rejected."""
        deployment = deployment_factory(containers=[])

        with pytest.raises(PreconditionError) as exc_info:
            apply_azure_auth(client_credential_options, deployment)

        assert "has no containers" in str(exc_info.value)
        assert exc_info.value.category == "precondition"

    def test_missing_template_spec_is_precondition_error(self, client_credential_options):
        """Test that a deployment without a pod spec is rejected."""
        deployment = client.V1Deployment(
            metadata=client.V1ObjectMeta(name="guard", namespace="kube-system"),
            spec=client.V1DeploymentSpec(
                selector=client.V1LabelSelector(match_labels={"app": "guard"}),
                template=client.V1PodTemplateSpec(metadata=client.V1ObjectMeta()),
            ),
        )

        with pytest.raises(PreconditionError) as exc_info:
            apply_azure_auth(client_credential_options, deployment)

        assert "guard" in str(exc_info.value)
        assert exc_info.value.category == "precondition"


class TestAzureAuthArgs:
    """Tests for argument ordering and formatting."""

    def test_all_optional_args(self):
        """Test the full argument list in its fixed order."""
        options = AzureOptions(
            environment="AzurePublicCloud",
            client_id="app-id",
            tenant_id="t1",
            auth_mode="aks",
            aks_token_url="https://aks.example.com/token",
            use_group_uid=False,
            resolve_group_membership_only_on_overage_claim=True,
            verify_client_id=True,
            http_client_retry_count=5,
        )

        assert build_azure_auth_args(options) == [
            "--azure.environment=AzurePublicCloud",
            "--azure.client-id=app-id",
            "--azure.tenant-id=t1",
            "--azure.auth-mode=aks",
            "--azure.aks-token-url=https://aks.example.com/token",
            "--azure.use-group-uid=false",
            "--azure.graph-call-on-overage-claim=true",
            "--azure.verify-clientID=true",
            "--azure.http-client-retry-count=5",
        ]

    def test_minimum_args(self):
        """Test that only the always-emitted flags appear for empty options."""
        assert len(build_azure_auth_args(AzureOptions())) == 5

    @pytest.mark.parametrize(
        "mode,expected",
        [
            ("aks", "aks"),
            ("obo", "obo"),
            ("client-credential", "client-credential"),
            ("arc", "client-credential"),
            ("passthrough", "client-credential"),
            ("bogus", "client-credential"),
        ],
    )
    def test_emitted_auth_mode(self, mode, expected):
        """Test that arc, passthrough and unknown modes collapse to client-credential."""
        assert emitted_auth_mode(mode) == expected
        assert f"--azure.auth-mode={expected}" in build_azure_auth_args(
            AzureOptions(auth_mode=mode)
        )

    def test_pop_options_not_emitted(self):
        """Test that PoP and arc settings are not passed as arguments."""
        options = AzureOptions(
            enable_pop=True,
            pop_token_hostname="guard.example.com",
            resource_id="rid",
            azure_region="westeurope",
        )

        args = build_azure_auth_args(options)

        assert not any("pop" in arg for arg in args)
        assert not any("region" in arg or "resource-id" in arg for arg in args)
