"""
Utils package - Utility modules for Guard installer functionality.

Contains helper modules for:
- Azure provider option validation
- Kubernetes deployment patching
"""

from guard_installer.utils.kubernetes import apply_azure_auth
from guard_installer.utils.validation import validate_azure_options

__all__ = [
    "apply_azure_auth",
    "validate_azure_options",
]
