"""Destination database access."""

from .adapter import DatabaseAdapter, DestinationError, DryRunAdapter, generate_id

__all__ = ['DatabaseAdapter', 'DestinationError', 'DryRunAdapter', 'generate_id']
