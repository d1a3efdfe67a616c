"""
Probe client contract.

A probe client performs one minimal JSON-RPC round trip per call. The sampler
only cares whether a call completes; returned payloads are ignored.
"""

import itertools
from typing import Any, Protocol

from ..errors import RpcError

BLOCK_NUMBER_METHOD = "eth_blockNumber"
GET_BLOCK_METHOD = "eth_getBlockByNumber"
LATEST_BLOCK_PARAMS = ["latest", False]

DEFAULT_HEADERS = {"Content-Type": "application/json"}


class RpcClient(Protocol):
    """Capability the sampler needs from the network layer."""

    endpoint: str

    async def get_block_number(self) -> Any:
        """Cheap request used for the initial reachability check."""
        ...

    async def get_latest_block(self) -> Any:
        """Substantive, cache-resistant request used for every sample."""
        ...

    async def close(self) -> None:
        ...


class JsonRpcPayloads:
    """Builds JSON-RPC 2.0 requests and unwraps responses."""

    def __init__(self):
        self._ids = itertools.count(1)

    def request(self, method: str, params: list | None = None) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }

    @staticmethod
    def unwrap(status: int, body: Any) -> Any:
        """Return the ``result`` member or raise ``RpcError``."""
        if status >= 400:
            raise RpcError(f"HTTP {status} from RPC endpoint", status=status)

        if not isinstance(body, dict):
            raise RpcError("Malformed JSON-RPC response", status=status)

        error = body.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcError(
                    f"RPC error {error.get('code')}: {error.get('message', 'unknown error')}",
                    code=error.get("code"),
                    status=status,
                )
            raise RpcError(f"RPC error: {error}", status=status)

        if "result" not in body:
            raise RpcError("JSON-RPC response has no result", status=status)

        return body["result"]
