"""
HTTP Record Store Client
Client for the remote bans/guilds/users store over its JSON REST API
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from uniban.errors import StoreError

logger = logging.getLogger('record_store')


COLLECTIONS = ('bans', 'guilds', 'users')


class RecordStoreClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._auth = aiohttp.BasicAuth(username, password or '') if username else None
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def is_open(self) -> bool:
        return self._session is not None and not self._session.closed

    async def connect(self):
        if self.is_open:
            return
        self._session = aiohttp.ClientSession(
            auth=self._auth,
            headers={'Accept': 'application/json'},
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        logger.info(f"Record store client ready for {self.base_url}")

    async def close(self):
        if self._session:
            await self._session.close()
            self._session = None

    def endpoint(self, collection: str, row_id: Optional[Any] = None) -> str:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection {collection!r}")
        if row_id is None:
            return f"{self.base_url}/{collection}"
        return f"{self.base_url}/{collection}/{row_id}"

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
        expect_body: bool = True
    ) -> Any:
        if not self.is_open:
            await self.connect()

        try:
            async with self._session.request(method, url, params=params, json=payload) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise StoreError(
                        f"{method} {url} failed with status {response.status}: {text[:200]}",
                        status=response.status
                    )
                if not expect_body:
                    return None
                body = await response.text()
        except asyncio.TimeoutError:
            raise StoreError(f"{method} {url} timed out after {self.timeout}s")
        except aiohttp.ClientError as e:
            raise StoreError(f"{method} {url} failed: {e}")

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise StoreError(f"{method} {url} returned malformed JSON: {e}")

    async def list(self, collection: str, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        params = {key: str(value).lower() if isinstance(value, bool) else str(value)
                  for key, value in (query or {}).items()}
        rows = await self.request('GET', self.endpoint(collection), params=params)
        if not isinstance(rows, list):
            raise StoreError(f"Expected a list of {collection}, got {type(rows).__name__}")
        return rows

    async def put(self, collection: str, row: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request('POST', self.endpoint(collection), payload=row)

    async def update(self, collection: str, row_id: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request('PATCH', self.endpoint(collection, row_id), payload=changes)

    async def remove(self, collection: str, row_id: Any):
        await self.request('DELETE', self.endpoint(collection, row_id), expect_body=False)
