"""
Guard Installer - Azure authentication provider wiring for the Guard webhook.

This package provides:
- Configuration models for the Azure authentication provider
- Accumulating validation of provider options
- Deployment mutation that injects credentials and command-line flags
"""

__version__ = "0.1.0"
