"""WorkOS API client implementation."""

import asyncio
import json
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import aiohttp
import requests
from loguru import logger
from pydantic import BaseModel

from ..config.config import WorkOSConfig
from ..models.source import (
    AuthFactor,
    Identity,
    ListResponse,
    Organization,
    OrganizationMembership,
    User,
)
from .exceptions import (
    WorkOSAPIError,
    WorkOSAuthenticationError,
    WorkOSNotFoundError,
    WorkOSRateLimitError,
)

USER_AGENT = 'workos-migrate/0.1.0'
DEFAULT_RETRY_AFTER = 60
MEMBERSHIP_PAGE_SIZE = 100


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]
    success: bool


def _raise_for_status(
    status: int, headers: Dict[str, str], error_data: Optional[dict], text: str = ''
) -> None:
    """Map an HTTP error status onto the WorkOS exception hierarchy."""
    if status == 429:
        try:
            retry_after = int(headers.get('Retry-After', DEFAULT_RETRY_AFTER))
        except ValueError:
            # HTTP-date form
            retry_after = DEFAULT_RETRY_AFTER
        raise WorkOSRateLimitError(
            'Rate limit exceeded',
            retry_after=retry_after,
            status_code=status,
        )

    if status == 401:
        raise WorkOSAuthenticationError('Authentication failed', status_code=status)

    if status == 404:
        raise WorkOSNotFoundError('Resource not found', status_code=status)

    if status >= 400:
        if error_data:
            message = error_data.get('message', f'HTTP {status}')
        else:
            message = f'HTTP {status}: {text}'
        raise WorkOSAPIError(
            f'API request failed: {message}',
            status_code=status,
            response_data=error_data,
        )


class WorkOSClient:
    """WorkOS REST client authenticated with an API key."""

    def __init__(self, config: WorkOSConfig):
        """Initialize WorkOS client.

        Args:
            config: WorkOS account configuration
        """
        if not config.api_key:
            raise WorkOSAuthenticationError('No API key provided')

        self.config = config
        self.base_url = config.api_url.rstrip('/')
        self.session = requests.Session()
        self.session.headers.update(self._headers())

        logger.info(f'Initialized WorkOS client for {self.base_url}')

    def _headers(self) -> Dict[str, str]:
        return {
            'Authorization': f'Bearer {self.config.api_key}',
            'Content-Type': 'application/json',
            'User-Agent': USER_AGENT,
        }

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Args:
            endpoint: API endpoint path

        Returns:
            Full API URL
        """
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _handle_response(self, response: requests.Response) -> APIResponse:
        """Handle API response and convert to standard format.

        Raises:
            WorkOSAPIError: For various API errors
        """
        headers = dict(response.headers)

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = None
            _raise_for_status(response.status_code, headers, error_data, response.text)

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = response.text

        return APIResponse(
            status_code=response.status_code,
            data=data,
            headers=headers,
            success=200 <= response.status_code < 300,
        )

    def get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make GET request.

        Args:
            endpoint: API endpoint
            params: Query parameters
            **kwargs: Additional request arguments

        Returns:
            API response
        """
        url = self._build_url(endpoint)
        kwargs.setdefault('timeout', self.config.timeout)

        try:
            response = self.session.get(url, params=params, **kwargs)
            return self._handle_response(response)
        except requests.RequestException as e:
            logger.error(f'Network error during GET request: {e}')
            raise WorkOSAPIError(f'Network error: {e}')

    async def _make_request_async(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> APIResponse:
        """Make asynchronous API request.

        Args:
            method: HTTP method
            endpoint: API endpoint
            params: Query parameters; None values are dropped
            data: Request body data

        Returns:
            API response
        """
        url = self._build_url(endpoint)
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        async with aiohttp.ClientSession(
            headers=self._headers(), timeout=timeout
        ) as session:
            try:
                async with session.request(
                    method=method, url=url, params=params, json=data
                ) as response:
                    response_headers = dict(response.headers)
                    response_text = await response.text()

                    try:
                        response_data = (
                            json.loads(response_text) if response_text else None
                        )
                    except ValueError:
                        response_data = response_text

                    if response.status >= 400:
                        _raise_for_status(
                            response.status,
                            response_headers,
                            response_data if isinstance(response_data, dict) else None,
                            response_text,
                        )

                    return APIResponse(
                        status_code=response.status,
                        data=response_data,
                        headers=response_headers,
                        success=200 <= response.status < 300,
                    )

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(f'Network error during API request: {e!r}')
                raise WorkOSAPIError(f'Network error: {e!r}')

    async def get_async(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> APIResponse:
        """Make asynchronous GET request."""
        return await self._make_request_async('GET', endpoint, params=params)

    async def list_users(
        self, limit: int = 100, before: Optional[str] = None
    ) -> ListResponse[User]:
        """Fetch one page of users.

        Args:
            limit: Page size
            before: Cursor from the previous page's ``list_metadata.before``

        Returns:
            Page of users with cursor metadata
        """
        response = await self.get_async(
            '/user_management/users', params={'limit': limit, 'before': before}
        )
        return ListResponse[User](**response.data)

    async def list_organizations(
        self, limit: int = 100, before: Optional[str] = None
    ) -> ListResponse[Organization]:
        """Fetch one page of organizations."""
        response = await self.get_async(
            '/organizations', params={'limit': limit, 'before': before}
        )
        return ListResponse[Organization](**response.data)

    async def list_auth_factors(self, user_id: str) -> List[AuthFactor]:
        """Fetch every authentication factor of a user (unpaginated)."""
        response = await self.get_async(
            f'/user_management/users/{user_id}/auth_factors'
        )
        return ListResponse[AuthFactor](**response.data).data

    async def get_user_identity(self, user_id: str) -> Optional[Identity]:
        """Look up the external identity linked to a user.

        Returns:
            The first linked identity, or None when the user has none
        """
        response = await self.get_async(
            f'/user_management/users/{user_id}/identities'
        )
        identities = response.data or []
        if isinstance(identities, dict):
            identities = identities.get('data', [])
        if not identities:
            return None
        return Identity(**identities[0])

    async def list_organization_memberships(
        self, user_id: str
    ) -> List[OrganizationMembership]:
        """Fetch every organization membership of a user.

        Follows ``list_metadata.after`` until the API stops returning one.
        """
        memberships: List[OrganizationMembership] = []
        after = None
        while True:
            response = await self.get_async(
                '/user_management/organization_memberships',
                params={
                    'user_id': user_id,
                    'limit': MEMBERSHIP_PAGE_SIZE,
                    'after': after,
                },
            )
            page = ListResponse[OrganizationMembership](**response.data)
            memberships.extend(page.data)

            after = page.list_metadata.after
            if not after or not page.data:
                return memberships

    async def get_organization(self, organization_id: str) -> Organization:
        """Fetch a single organization."""
        response = await self.get_async(f'/organizations/{organization_id}')
        return Organization(**response.data)

    def test_connection(self) -> bool:
        """Test connection to the WorkOS API.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            response = self.get('/organizations', params={'limit': 1})
            return response.success
        except WorkOSAPIError as e:
            logger.error(f'Connection test failed: {e}')
            return False

    def close(self):
        """Close the client session."""
        self.session.close()
        logger.info('WorkOS client session closed')

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
