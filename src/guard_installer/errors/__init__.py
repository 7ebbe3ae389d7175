"""
Error handling module for the Guard installer.

This module provides the error hierarchy used when validating Azure provider
options and patching the Guard deployment.
"""

from .installer_errors import (
    ConfigurationError,
    InstallerError,
    PreconditionError,
    ValidationError,
)

__all__ = [
    "InstallerError",
    "ValidationError",
    "ConfigurationError",
    "PreconditionError",
]
