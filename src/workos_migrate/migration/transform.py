"""Mapping of WorkOS records onto destination rows."""

import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from dateutil import parser as date_parser

from ..models.source import (
    AuthFactor,
    Identity,
    Organization,
    OrganizationMembership,
    User,
)

DEFAULT_MEMBER_ROLE = 'member'
CREDENTIAL_PROVIDER = 'credential'

_SLUG_INVALID = re.compile(r'[^a-z0-9]')


def safe_date_conversion(value: Union[str, int, float, None]) -> datetime:
    """Coerce a WorkOS timestamp into a datetime.

    Missing values become the current time. Numbers are epoch milliseconds.
    """
    if not value:
        return datetime.now(timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return date_parser.parse(value)


def slugify(name: str) -> str:
    """Lowercase ``name`` and replace everything outside [a-z0-9] with '-'."""
    return _SLUG_INVALID.sub('-', name.lower())


def username_from_email(email: str) -> str:
    return email.split('@', 1)[0]


def display_name(user: User) -> str:
    name = f'{user.first_name or ""} {user.last_name or ""}'.strip()
    return name or user.email


def find_factor(factors: List[AuthFactor], factor_type: str) -> Optional[AuthFactor]:
    return next((f for f in factors if f.type == factor_type), None)


def build_organization_record(org: Organization) -> Dict[str, Any]:
    return {
        'name': org.name,
        'slug': slugify(org.name),
        'createdAt': safe_date_conversion(org.created_at),
        'metadata': json.dumps({'workosId': org.id}),
    }


def build_user_record(user: User, factors: List[AuthFactor]) -> Dict[str, Any]:
    """Build the destination user row for a WorkOS user and its factors."""
    sms_factor = find_factor(factors, 'sms')

    return {
        'id': user.id,
        'email': user.email,
        'emailVerified': user.email_verified,
        'name': display_name(user),
        'image': user.profile_picture_url,
        'createdAt': safe_date_conversion(user.created_at),
        'updatedAt': safe_date_conversion(user.updated_at),
        'role': 'user',
        'banned': False,
        'twoFactorEnabled': any(f.type == 'totp' for f in factors),
        'username': username_from_email(user.email),
        'phoneNumber': sms_factor.sms.phone_number
        if sms_factor and sms_factor.sms
        else None,
        'phoneNumberVerified': sms_factor is not None,
    }


def build_credential_account(
    user_id: str, factor: AuthFactor
) -> Optional[Dict[str, Any]]:
    """Build a credential account from an email factor.

    Returns None when the factor carries no configuration.
    """
    if factor.email is None:
        return None
    return {
        'accountId': user_id,
        'providerId': CREDENTIAL_PROVIDER,
        'userId': user_id,
        'password': factor.email.password_hash,
    }


def build_oauth_account(user_id: str, identity: Identity) -> Dict[str, Any]:
    return {
        'accountId': identity.idp_id,
        'providerId': identity.provider.lower(),
        'userId': user_id,
    }


def build_member_record(
    organization_id: str, user_id: str, membership: OrganizationMembership
) -> Dict[str, Any]:
    role = membership.role.slug if membership.role else None
    return {
        'organizationId': organization_id,
        'userId': user_id,
        'role': role or DEFAULT_MEMBER_ROLE,
        'createdAt': safe_date_conversion(membership.created_at),
    }
