"""
Guard installer entry point.

Validates the Azure authentication provider options, patches a Guard
Deployment manifest with them and renders the result as a multi-document
YAML stream for the deployment tooling to apply.
"""

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from kubernetes import client

from guard_installer.errors import (
    ConfigurationError,
    InstallerError,
    PreconditionError,
)
from guard_installer.flags import add_azure_flags, options_from_args
from guard_installer.models.azure import AzureOptions, new_azure_options
from guard_installer.observability.logging import setup_structured_logging
from guard_installer.settings import Settings
from guard_installer.utils.kubernetes import apply_azure_auth
from guard_installer.utils.validation import validate_azure_options

logger = logging.getLogger(__name__)


def load_deployment(
    path: Path, api_client: client.ApiClient | None = None
) -> client.V1Deployment:
    """
    Load a Deployment manifest from a YAML file.

    Args:
        path: Path of the manifest
        api_client: Client used for deserialization

    Returns:
        Deployment object

    Raises:
        PreconditionError: If the file does not hold a well-formed Deployment
    """
    with path.open(encoding="utf-8") as f:
        manifest = yaml.safe_load(f)

    if not isinstance(manifest, dict) or manifest.get("kind") != "Deployment":
        raise PreconditionError(
            f"{path} does not contain a Deployment manifest",
            user_action="Pass a single apps/v1 Deployment document",
        )

    api_client = api_client or client.ApiClient()
    try:
        return api_client.deserialize(json.dumps(manifest), "V1Deployment", None)
    except ValueError as e:
        # Model validation errors from the client are ValueError subclasses
        raise PreconditionError(
            f"{path} is not a valid Deployment: {e}",
            user_action="Fix the manifest so it passes kubectl apply --dry-run",
        ) from e


def render_azure_auth(options: AzureOptions, deployment: client.V1Deployment) -> list:
    """
    Validate options and patch the deployment with them.

    Args:
        options: Azure provider options
        deployment: Guard deployment, patched in place

    Returns:
        The deployment followed by the extra objects to create

    Raises:
        ConfigurationError: If any option is invalid, carrying every error
        PreconditionError: If the deployment has no containers
    """
    errors = validate_azure_options(options)
    if errors:
        for error in errors:
            logger.error(
                f"Invalid Azure option: {error.message}",
                extra={"field": error.field, "operation": "validate"},
            )
        raise ConfigurationError(errors)

    extra_objects = apply_azure_auth(options, deployment)
    return [deployment, *extra_objects]


def dump_manifests(
    objects: Sequence[Any], api_client: client.ApiClient | None = None
) -> str:
    """Render Kubernetes objects as a multi-document YAML stream."""
    api_client = api_client or client.ApiClient()
    documents = [api_client.sanitize_for_serialization(obj) for obj in objects]
    return yaml.safe_dump_all(documents, sort_keys=False)


def build_parser(defaults: AzureOptions | None = None) -> argparse.ArgumentParser:
    """
    Build the installer command-line parser.

    Args:
        defaults: Options providing the --azure.* flag defaults

    Returns:
        Parser with --deployment and every --azure.* flag registered
    """
    parser = argparse.ArgumentParser(
        prog="guard-installer",
        description="Wire the Azure authentication provider into a Guard deployment.",
    )
    parser.add_argument(
        "--deployment",
        required=True,
        type=Path,
        help="Path to the Guard Deployment manifest (YAML).",
    )
    return add_azure_flags(parser, defaults)


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """
    Run the installer and write the patched manifests to stdout.

    Args:
        argv: Command-line arguments, sys.argv[1:] when None
        settings: Environment settings, loaded from the process when None

    Returns:
        Exit code: 0 on success, 1 when the options or manifest are rejected
    """
    settings = settings or Settings()
    setup_structured_logging(settings.log_level, settings.json_logs)

    defaults = new_azure_options(
        client_secret=settings.azure_client_secret,
        client_assertion=settings.azure_client_assertion,
    )
    args = build_parser(defaults).parse_args(argv)
    options = options_from_args(args)

    try:
        deployment = load_deployment(args.deployment)
        objects = render_azure_auth(options, deployment)
    except ConfigurationError as e:
        for error in e.errors:
            print(f"error: {error.message}", file=sys.stderr)
        return 1
    except InstallerError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to read deployment manifest {args.deployment}: {e}")
        print(f"error: cannot read {args.deployment}: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(dump_manifests(objects))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
