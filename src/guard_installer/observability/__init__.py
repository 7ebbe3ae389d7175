"""
Observability utilities for the Guard installer.

This module provides structured logging for the installer CLI.
"""

from .logging import StructuredFormatter, setup_structured_logging

__all__ = [
    "StructuredFormatter",
    "setup_structured_logging",
]
