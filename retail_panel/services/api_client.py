"""Async HTTP client for the retail backend REST API."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from retail_panel.exceptions import ApiError

logger = logging.getLogger(__name__)


class ResourceClient:
    """
    CRUD calls for one backend collection (``/<path>/``).

    Returns raw decoded JSON; normalization into domain records happens in
    ``entity_adapter`` at the call sites.
    """

    def __init__(self, http: httpx.AsyncClient, path: str):
        self.http = http
        self.path = path.strip('/')

    def _url(self, item_id: Any = None) -> str:
        if item_id is None:
            return f"/{self.path}/"
        return f"/{self.path}/{item_id}/"

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"[API] {method} {url} unreachable: {e}")
            raise ApiError(f"Backend unreachable: {e}") from e

        if response.is_error:
            logger.error(f"[API] {method} {url} -> {response.status_code}: {response.text[:200]}")
            raise ApiError(
                f"Backend returned {response.status_code} for {method} {url}",
                status_code=response.status_code,
                body=response.text,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def list(self) -> List[Dict[str, Any]]:
        """Fetch the whole collection."""
        data = await self._request('GET', self._url())
        # DRF-style paginated envelope
        if isinstance(data, dict) and 'results' in data:
            data = data['results']
        return list(data or [])

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(f"[API] Creating {self.path}")
        return await self._request('POST', self._url(), json=payload)

    async def update(self, item_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(f"[API] Updating {self.path} #{item_id}")
        return await self._request('PUT', self._url(item_id), json=payload)

    async def delete(self, item_id: Any) -> None:
        logger.info(f"[API] Deleting {self.path} #{item_id}")
        await self._request('DELETE', self._url(item_id))


class PanelApiClient:
    """
    Backend client exposing one ``ResourceClient`` per entity type.

    Use as an async context manager; the underlying connection pool is
    bound to the running event loop, so create one per request.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {'Accept': 'application/json'}
        if token:
            headers['Authorization'] = f'Bearer {token}'

        self.http = httpx.AsyncClient(
            base_url=base_url.rstrip('/'),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self.products = ResourceClient(self.http, 'products')
        self.stores = ResourceClient(self.http, 'stores')
        self.users = ResourceClient(self.http, 'users')
        self.orders = ResourceClient(self.http, 'orders')

    @classmethod
    def from_config(cls, config, transport: Optional[httpx.AsyncBaseTransport] = None) -> 'PanelApiClient':
        """Build a client from a Flask config mapping."""
        return cls(
            base_url=config['API_BASE_URL'],
            token=config.get('API_TOKEN'),
            timeout=config.get('API_TIMEOUT'),
            transport=transport or config.get('API_TRANSPORT'),
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> 'PanelApiClient':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
