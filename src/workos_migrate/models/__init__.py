"""Data models for WorkOS entities and migration results."""

from .source import (
    AuthFactor,
    Identity,
    ListMetadata,
    ListResponse,
    Organization,
    OrganizationMembership,
    User,
)
from .summary import MigrationSummary, PhaseSummary

__all__ = [
    'AuthFactor',
    'Identity',
    'ListMetadata',
    'ListResponse',
    'Organization',
    'OrganizationMembership',
    'User',
    'MigrationSummary',
    'PhaseSummary',
]
