"""Probe clients for JSON-RPC endpoints."""

from ..config import ClientKind
from .aiohttp_client import AiohttpRpcClient
from .base import JsonRpcPayloads, RpcClient
from .requests_client import RequestsRpcClient


def create_client(
    kind: ClientKind | str,
    endpoint: str,
    timeout_ms: int,
    headers: dict[str, str] | None = None,
) -> RpcClient:
    """Build the probe client for ``endpoint``."""
    kind = ClientKind(kind)
    if kind == ClientKind.REQUESTS:
        return RequestsRpcClient(endpoint, timeout_ms, headers=headers)
    return AiohttpRpcClient(endpoint, timeout_ms, headers=headers)


__all__ = [
    "AiohttpRpcClient",
    "JsonRpcPayloads",
    "RequestsRpcClient",
    "RpcClient",
    "create_client",
]
