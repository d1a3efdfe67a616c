"""JSON-RPC probe client built on aiohttp."""

from typing import Any

import aiohttp

from .base import (
    BLOCK_NUMBER_METHOD,
    DEFAULT_HEADERS,
    GET_BLOCK_METHOD,
    LATEST_BLOCK_PARAMS,
    JsonRpcPayloads,
)


class AiohttpRpcClient:
    """
    Async JSON-RPC client.

    The session is created lazily on the first call so the client can be
    built outside a running event loop, and it is reused for every probe of
    the endpoint so warm connections are measured after the warm-up request.
    """

    def __init__(self, endpoint: str, timeout_ms: int, headers: dict[str, str] | None = None):
        self.endpoint = endpoint
        self.timeout_ms = timeout_ms
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._payloads = JsonRpcPayloads()
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_ms / 1000),
            )
        return self._session

    async def call(self, method: str, params: list | None = None) -> Any:
        session = self._get_session()
        async with session.post(self.endpoint, json=self._payloads.request(method, params)) as resp:
            try:
                body = await resp.json(content_type=None)
            except ValueError:
                body = None
            return JsonRpcPayloads.unwrap(resp.status, body)

    async def get_block_number(self) -> Any:
        return await self.call(BLOCK_NUMBER_METHOD)

    async def get_latest_block(self) -> Any:
        return await self.call(GET_BLOCK_METHOD, list(LATEST_BLOCK_PARAMS))

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
