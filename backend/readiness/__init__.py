"""Automation readiness scoring backend."""

__version__ = "0.1.0"
