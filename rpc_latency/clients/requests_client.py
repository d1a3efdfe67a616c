"""Blocking JSON-RPC probe client built on requests, run on worker threads."""

import asyncio
import threading
from typing import Any

import requests

from .base import (
    BLOCK_NUMBER_METHOD,
    DEFAULT_HEADERS,
    GET_BLOCK_METHOD,
    LATEST_BLOCK_PARAMS,
    JsonRpcPayloads,
)


class RequestsRpcClient:
    """
    JSON-RPC client for environments where a blocking HTTP stack is preferred.

    Each call runs in ``asyncio.to_thread``. A call abandoned by the sampler's
    bounded wait keeps running on its thread until requests' own timeout
    fires and keeps the shared session locked. Calls made meanwhile use a
    one-off session so they never queue behind it.
    """

    def __init__(self, endpoint: str, timeout_ms: int, headers: dict[str, str] | None = None):
        self.endpoint = endpoint
        self.timeout_ms = timeout_ms
        self._payloads = JsonRpcPayloads()
        self._session = requests.Session()
        self._session.headers.update({**DEFAULT_HEADERS, **(headers or {})})
        self._lock = threading.Lock()

    def _post(self, session: requests.Session, payload: dict[str, Any]) -> requests.Response:
        return session.post(self.endpoint, json=payload, timeout=self.timeout_ms / 1000)

    def _call_blocking(self, payload: dict[str, Any]) -> Any:
        if self._lock.acquire(blocking=False):
            try:
                resp = self._post(self._session, payload)
            finally:
                self._lock.release()
        else:
            # An abandoned call still owns the shared session
            with requests.Session() as session:
                session.headers.update(self._session.headers)
                resp = self._post(session, payload)

        try:
            body = resp.json()
        except ValueError:
            body = None
        return JsonRpcPayloads.unwrap(resp.status_code, body)

    async def call(self, method: str, params: list | None = None) -> Any:
        payload = self._payloads.request(method, params)
        return await asyncio.to_thread(self._call_blocking, payload)

    async def get_block_number(self) -> Any:
        return await self.call(BLOCK_NUMBER_METHOD)

    async def get_latest_block(self) -> Any:
        return await self.call(GET_BLOCK_METHOD, list(LATEST_BLOCK_PARAMS))

    async def close(self) -> None:
        self._session.close()
