"""API routes."""

from . import diagnostics, nutrition

__all__ = ["diagnostics", "nutrition"]
