"""
Models package - Pydantic models for type-safe configuration handling.

Defines data models for:
- Azure authentication provider options
"""
