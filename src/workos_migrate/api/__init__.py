"""WorkOS API client."""

from .client import APIResponse, WorkOSClient
from .exceptions import (
    WorkOSAPIError,
    WorkOSAuthenticationError,
    WorkOSNotFoundError,
    WorkOSRateLimitError,
)

__all__ = [
    'APIResponse',
    'WorkOSClient',
    'WorkOSAPIError',
    'WorkOSAuthenticationError',
    'WorkOSNotFoundError',
    'WorkOSRateLimitError',
]
