"""
Tests package - Test suite for the Guard installer.

Contains:
- unit/: Unit tests for individual components
"""
