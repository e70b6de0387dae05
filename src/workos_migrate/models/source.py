"""WorkOS entity models as returned by the REST API."""

from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, Field

# Timestamps are kept raw; the migration coerces them itself.
Timestamp = Union[str, int, float, None]


class ListMetadata(BaseModel):
    """Cursor metadata returned with every list response."""

    before: Optional[str] = Field(default=None, description='Cursor for the next page')
    after: Optional[str] = Field(default=None, description='Cursor for the previous page')


EntityT = TypeVar('EntityT')


class ListResponse(BaseModel, Generic[EntityT]):
    """Paginated list envelope."""

    data: List[EntityT] = Field(default_factory=list)
    list_metadata: ListMetadata = Field(default_factory=ListMetadata)


class User(BaseModel):
    """WorkOS user."""

    id: str = Field(..., description='User ID')
    email: str = Field(..., description='Email address')
    email_verified: bool = Field(default=False, description='Email verified')
    first_name: Optional[str] = Field(default=None, description='First name')
    last_name: Optional[str] = Field(default=None, description='Last name')
    profile_picture_url: Optional[str] = Field(
        default=None, description='Avatar URL'
    )
    created_at: Timestamp = Field(default=None, description='Creation timestamp')
    updated_at: Timestamp = Field(default=None, description='Last update timestamp')
    external_id: Optional[str] = Field(default=None, description='External ID')
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description='Opaque metadata mapping'
    )


class TotpConfiguration(BaseModel):
    secret: str
    qr_code: Optional[str] = None


class SmsConfiguration(BaseModel):
    phone_number: str


class EmailConfiguration(BaseModel):
    email: Optional[str] = None
    password_hash: Optional[str] = None


class AuthFactor(BaseModel):
    """Authentication factor attached to a user.

    Exactly one of ``totp``, ``sms`` or ``email`` is normally populated,
    matching ``type``.
    """

    id: str = Field(..., description='Factor ID')
    type: str = Field(..., description='Factor type: totp, sms or email')
    user_id: Optional[str] = Field(default=None, description='Owning user ID')
    created_at: Timestamp = Field(default=None)
    updated_at: Timestamp = Field(default=None)

    totp: Optional[TotpConfiguration] = Field(default=None)
    sms: Optional[SmsConfiguration] = Field(default=None)
    email: Optional[EmailConfiguration] = Field(default=None)


class Organization(BaseModel):
    """WorkOS organization."""

    id: str = Field(..., description='Organization ID')
    name: str = Field(..., description='Organization name')
    created_at: Timestamp = Field(default=None)
    updated_at: Timestamp = Field(default=None)


class MembershipRole(BaseModel):
    slug: Optional[str] = None


class OrganizationMembership(BaseModel):
    """Link between a user and an organization."""

    id: str = Field(..., description='Membership ID')
    user_id: str = Field(..., description='Member user ID')
    organization_id: str = Field(..., description='Organization ID')
    role: Optional[MembershipRole] = Field(default=None, description='Member role')
    status: Optional[str] = Field(default=None, description='Membership status')
    created_at: Timestamp = Field(default=None)
    updated_at: Timestamp = Field(default=None)


class Identity(BaseModel):
    """External identity provider linkage (OAuth or SSO connection)."""

    idp_id: str = Field(..., description='User ID at the identity provider')
    type: str = Field(default='OAuth', description='Identity type')
    provider: str = Field(..., description='Provider type, e.g. GoogleOAuth')
