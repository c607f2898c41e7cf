"""Rolegate shared package.

This package contains components shared by the gate and its example app:
- config: Configuration management
- observability: Structured logging
"""

__version__ = "0.1.0"
