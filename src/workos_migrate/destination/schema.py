"""
Destination tables matching the better-auth schema.

Covers the core tables plus the columns added by the admin, username,
phone-number, two-factor and organization plugins.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()

user = Table(
    'user',
    metadata,
    Column('id', String(64), primary_key=True),
    Column('name', Text, nullable=False),
    Column('email', String(255), nullable=False, unique=True),
    Column('emailVerified', Boolean, nullable=False, default=False),
    Column('image', Text),
    Column('createdAt', DateTime(timezone=True), nullable=False),
    Column('updatedAt', DateTime(timezone=True), nullable=False),
    # admin plugin
    Column('role', String(64)),
    Column('banned', Boolean),
    Column('banReason', Text),
    Column('banExpires', DateTime(timezone=True)),
    # two-factor plugin
    Column('twoFactorEnabled', Boolean),
    # username plugin
    Column('username', String(255), unique=True),
    Column('displayUsername', String(255)),
    # phone-number plugin
    Column('phoneNumber', String(64), unique=True),
    Column('phoneNumberVerified', Boolean),
)

account = Table(
    'account',
    metadata,
    Column('id', String(64), primary_key=True),
    Column('accountId', Text, nullable=False),
    Column('providerId', Text, nullable=False),
    Column(
        'userId',
        String(64),
        ForeignKey('user.id', ondelete='CASCADE'),
        nullable=False,
    ),
    Column('accessToken', Text),
    Column('refreshToken', Text),
    Column('idToken', Text),
    Column('accessTokenExpiresAt', DateTime(timezone=True)),
    Column('refreshTokenExpiresAt', DateTime(timezone=True)),
    Column('scope', Text),
    Column('password', Text),
    Column('createdAt', DateTime(timezone=True), nullable=False),
    Column('updatedAt', DateTime(timezone=True), nullable=False),
)

organization = Table(
    'organization',
    metadata,
    Column('id', String(64), primary_key=True),
    Column('name', Text, nullable=False),
    Column('slug', String(255), unique=True),
    Column('logo', Text),
    Column('createdAt', DateTime(timezone=True), nullable=False),
    Column('metadata', Text),
)

member = Table(
    'member',
    metadata,
    Column('id', String(64), primary_key=True),
    Column(
        'organizationId',
        String(64),
        ForeignKey('organization.id', ondelete='CASCADE'),
        nullable=False,
    ),
    Column(
        'userId',
        String(64),
        ForeignKey('user.id', ondelete='CASCADE'),
        nullable=False,
    ),
    Column('role', String(64), nullable=False),
    Column('createdAt', DateTime(timezone=True), nullable=False),
)

two_factor = Table(
    'twoFactor',
    metadata,
    Column('id', String(64), primary_key=True),
    Column('secret', Text, nullable=False),
    Column('backupCodes', Text, nullable=False),
    Column(
        'userId',
        String(64),
        ForeignKey('user.id', ondelete='CASCADE'),
        nullable=False,
    ),
)

# Model names as used by the better-auth adapter API.
TABLES = {
    'user': user,
    'account': account,
    'organization': organization,
    'member': member,
    'twoFactor': two_factor,
}

TIMESTAMP_DEFAULTS = {
    'user': ('createdAt', 'updatedAt'),
    'account': ('createdAt', 'updatedAt'),
    'organization': ('createdAt',),
    'member': ('createdAt',),
    'twoFactor': (),
}
