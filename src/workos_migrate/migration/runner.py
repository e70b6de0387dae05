"""Two-phase WorkOS to better-auth migration."""

from functools import partial
from typing import AsyncIterator, Awaitable, Callable, Dict, List

from loguru import logger

from ..api.client import WorkOSClient
from ..api.exceptions import WorkOSNotFoundError, WorkOSRateLimitError
from ..destination.adapter import DatabaseAdapter
from ..models.source import AuthFactor, ListResponse, User
from ..models.summary import MigrationSummary, PhaseSummary
from .backup_codes import generate_backup_codes
from .transform import (
    build_credential_account,
    build_member_record,
    build_oauth_account,
    build_organization_record,
    build_user_record,
)

PAGE_SIZE = 100

PageFetcher = Callable[..., Awaitable[ListResponse]]


class MigrationRunner:
    """Copies organizations and users from WorkOS into the destination.

    Records are processed one at a time. A failure on one record is logged
    and counted; a failure to fetch a page ends the current phase.
    """

    def __init__(
        self,
        source: WorkOSClient,
        destination: DatabaseAdapter,
        page_size: int = PAGE_SIZE,
        dry_run: bool = False,
    ):
        self.source = source
        self.destination = destination
        self.page_size = page_size
        self.summary = MigrationSummary(dry_run=dry_run)
        self.logger = logger.bind(component='MigrationRunner')

    async def _pages(self, fetch_page: PageFetcher, entity: str) -> AsyncIterator[List]:
        """Yield pages until one comes back shorter than the page size."""
        before = None
        while True:
            try:
                page = await fetch_page(limit=self.page_size, before=before)
            except WorkOSRateLimitError as e:
                self.logger.error(
                    f'Failed to fetch {entity}: {e}, retry after {e.retry_after}s'
                )
                return
            except Exception as e:
                self.logger.error(f'Failed to fetch {entity}: {e}')
                return

            self.logger.info(f'Fetched {len(page.data)} {entity}')
            yield page.data

            if len(page.data) < self.page_size:
                return

            before = page.list_metadata.before
            if not before:
                self.logger.warning(
                    f'Full page of {entity} returned without a cursor, stopping'
                )
                return

    async def migrate_organizations(self) -> Dict[str, str]:
        """Migrate every organization.

        Returns:
            Mapping of WorkOS organization ID to destination organization ID
        """
        counts = self.summary.organizations
        mapping = self.summary.organization_mapping

        async for organizations in self._pages(
            self.source.list_organizations, 'organizations'
        ):
            counts.total += len(organizations)

            for org in organizations:
                try:
                    created = self.destination.create(
                        'organization', build_organization_record(org)
                    )
                    mapping[org.id] = created['id']
                    counts.migrated += 1
                    self.logger.info(f'Migrated organization: {org.name}')
                except Exception as e:
                    self.logger.error(f'Failed to migrate organization {org.name}: {e}')
                    counts.failed += 1

        self._log_phase_summary('Organizations', counts)
        return mapping

    async def migrate_users(self, organization_mapping: Dict[str, str]) -> PhaseSummary:
        """Migrate every user along with accounts, memberships and 2FA."""
        counts = self.summary.users

        async for users in self._pages(self.source.list_users, 'users'):
            counts.total += len(users)

            for user in users:
                try:
                    await self.migrate_user(user, organization_mapping)
                    counts.migrated += 1
                    self.logger.info(f'Successfully migrated user: {user.email}')
                except Exception as e:
                    self.logger.error(f'Failed to migrate user {user.email}: {e}')
                    counts.failed += 1

        self._log_phase_summary('Users', counts)
        return counts

    async def migrate_user(self, user: User, organization_mapping: Dict[str, str]) -> None:
        """Create one user, then its associated records.

        Only the factor lookup and the user insert propagate errors. Each
        associated record is attempted independently.
        """
        self.logger.info(f'Processing user: {user.email}')

        factors = await self.source.list_auth_factors(user.id)
        self.logger.debug(f'Found {len(factors)} auth factors for {user.email}')

        created = self.destination.create(
            'user', build_user_record(user, factors), force_allow_id=True
        )
        user_id = created['id']

        steps = [
            (
                'credential account',
                partial(self._migrate_credential_account, user_id, factors),
            ),
            ('OAuth account', partial(self._migrate_oauth_account, user, user_id)),
            (
                'organization memberships',
                partial(self._migrate_memberships, user, user_id, organization_mapping),
            ),
            ('2FA settings', partial(self._migrate_two_factor, user_id, factors)),
        ]
        for description, step in steps:
            try:
                await step()
            except Exception as e:
                self.logger.warning(
                    f'Failed to migrate {description} for {user.email}: {e}'
                )

    async def _migrate_credential_account(
        self, user_id: str, factors: List[AuthFactor]
    ) -> None:
        factor = next((f for f in factors if f.type == 'email' and f.email), None)
        if factor is None:
            return

        self.destination.create('account', build_credential_account(user_id, factor))
        self.logger.info('Migrated credential account')

    async def _migrate_oauth_account(self, user: User, user_id: str) -> None:
        try:
            identity = await self.source.get_user_identity(user.id)
        except WorkOSNotFoundError:
            identity = None

        if identity is None:
            self.logger.debug(f'No external identity for {user.email}')
            return

        self.destination.create('account', build_oauth_account(user_id, identity))
        self.logger.info(f'Migrated {identity.provider} account')

    async def _migrate_memberships(
        self, user: User, user_id: str, organization_mapping: Dict[str, str]
    ) -> None:
        memberships = await self.source.list_organization_memberships(user.id)

        for membership in memberships:
            organization_id = organization_mapping.get(membership.organization_id)
            if organization_id is None:
                self.logger.debug(
                    f'Skipping membership in unmigrated organization '
                    f'{membership.organization_id}'
                )
                continue

            org = await self.source.get_organization(membership.organization_id)
            self.destination.create(
                'member', build_member_record(organization_id, user_id, membership)
            )
            self.logger.info(f'Migrated membership in {org.name}')

    async def _migrate_two_factor(self, user_id: str, factors: List[AuthFactor]) -> None:
        for factor in factors:
            if factor.type != 'totp' or factor.totp is None:
                continue

            self.destination.create(
                'twoFactor',
                {
                    'userId': user_id,
                    'secret': factor.totp.secret,
                    'backupCodes': generate_backup_codes(factor.totp.secret),
                },
            )
            self.logger.info('Migrated 2FA settings')

    def _log_phase_summary(self, label: str, counts: PhaseSummary) -> None:
        self.logger.info(
            f'{label} migration summary: total={counts.total} '
            f'migrated={counts.migrated} failed={counts.failed}'
        )
