"""CLI commands for schema-composer."""

from . import compose

__all__ = ["compose"]
