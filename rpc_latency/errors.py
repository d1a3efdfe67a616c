"""
Error taxonomy and cause classification.

``classify_error`` only chooses the text attached to a failed endpoint; it
never decides control flow.
"""

import asyncio
import socket
import ssl
from urllib.parse import urlparse

import aiohttp
import requests

NO_SUCCESSFUL_REQUESTS = "No successful requests completed"

DNS_MARKERS = ("enotfound", "name or service not known", "nodename nor servname", "getaddrinfo failed")


class LatencyTestError(Exception):
    """Base class for errors raised while testing an endpoint."""


class ConnectionCheckError(LatencyTestError):
    """The initial reachability probe failed or timed out."""

    def __init__(self, endpoint: str, cause: BaseException):
        self.endpoint = endpoint
        self.cause = cause
        super().__init__(f"Initial connection failed: {describe(cause)}")


class ProbeTimeoutError(LatencyTestError):
    """A probe did not complete within its timeout."""

    def __init__(self, timeout_ms: float):
        self.timeout_ms = timeout_ms
        super().__init__(f"Connection timeout after {timeout_ms:g}ms")


class RpcError(LatencyTestError):
    """The endpoint answered, but not with a usable JSON-RPC result."""

    def __init__(self, message: str, code: int | None = None, status: int | None = None):
        self.code = code
        self.status = status
        super().__init__(message)


class NoSuccessfulProbesError(LatencyTestError):
    """The observation window closed without a single valid sample."""

    def __init__(self):
        super().__init__(NO_SUCCESSFUL_REQUESTS)


def describe(error: BaseException) -> str:
    """Message for an exception, falling back to its type name."""
    message = str(error).strip()
    return message or type(error).__name__


def _chain(error: BaseException):
    """Yield the error and everything it wraps."""
    seen = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if isinstance(current, ConnectionCheckError):
            current = current.cause
        else:
            current = current.__cause__ or current.__context__


def _hostname(error: BaseException, endpoint: str | None) -> str:
    for err in _chain(error):
        host = getattr(err, "host", None)
        if isinstance(host, str) and host:
            return host
    if endpoint:
        host = urlparse(endpoint).hostname
        if host:
            return host
    return "unknown host"


def classify_error(error: BaseException, endpoint: str | None = None) -> str:
    """Map an exception to a human-readable cause."""
    chain = list(_chain(error))
    text = " ".join(describe(err).lower() for err in chain)

    if any(isinstance(err, (socket.gaierror, aiohttp.ClientConnectorDNSError)) for err in chain) \
            or any(marker in text for marker in DNS_MARKERS):
        return f"Could not resolve hostname: {_hostname(error, endpoint)}"

    if any(isinstance(err, (ssl.SSLCertVerificationError, aiohttp.ClientConnectorCertificateError,
                            requests.exceptions.SSLError)) for err in chain) \
            or "certificate" in text:
        return "SSL/TLS certificate validation failed"

    if any(isinstance(err, (ProbeTimeoutError, asyncio.TimeoutError, requests.exceptions.Timeout))
           for err in chain) or "timeout" in text or "timed out" in text:
        return "Connection timed out"

    if any(isinstance(err, ConnectionRefusedError) for err in chain) \
            or "cannot start up" in text or "connection refused" in text:
        return "Failed to connect to RPC endpoint"

    return describe(error)
