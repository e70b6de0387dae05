"""Shared fixtures and builders."""

from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from workos_migrate.api.client import WorkOSClient
from workos_migrate.config.config import WorkOSConfig
from workos_migrate.destination.adapter import DatabaseAdapter
from workos_migrate.models.source import ListMetadata, ListResponse


@pytest.fixture
def workos_config():
    return WorkOSConfig(api_key='sk_test_123456789', client_id='client_123')


@pytest.fixture
def adapter():
    """Destination adapter over a fresh in-memory SQLite database."""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    db = DatabaseAdapter('sqlite://', engine=engine)
    db.create_tables()
    yield db
    db.close()


def page(items: List, before: Optional[str] = None) -> ListResponse:
    return ListResponse(data=items, list_metadata=ListMetadata(before=before))


def make_source(
    organization_pages=(),
    user_pages=(),
    factors=None,
    identity=None,
    memberships=None,
    organizations=None,
):
    """Build a WorkOS client double.

    Args:
        organization_pages: ListResponse pages (or exceptions) in call order
        user_pages: ListResponse pages (or exceptions) in call order
        factors: user ID -> list of AuthFactor
        identity: user ID -> Identity
        memberships: user ID -> list of OrganizationMembership
        organizations: organization ID -> Organization
    """
    factors = factors or {}
    identity = identity or {}
    memberships = memberships or {}
    organizations = organizations or {}

    source = MagicMock(spec=WorkOSClient)
    source.list_organizations = AsyncMock(side_effect=list(organization_pages))
    source.list_users = AsyncMock(side_effect=list(user_pages))
    source.list_auth_factors = AsyncMock(
        side_effect=lambda user_id: factors.get(user_id, [])
    )
    source.get_user_identity = AsyncMock(
        side_effect=lambda user_id: identity.get(user_id)
    )
    source.list_organization_memberships = AsyncMock(
        side_effect=lambda user_id: memberships.get(user_id, [])
    )
    source.get_organization = AsyncMock(
        side_effect=lambda org_id: organizations[org_id]
    )
    return source
