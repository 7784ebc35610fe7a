from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Any, Iterator

import httpx

from relaynet.errors import ApplicationError, ProtocolDecodeError, TransportFailure

JSONRPC_VERSION = "2.0"
DEFAULT_METHOD = "eth_sendRawTransaction"


def build_request(method: str, params: list[Any], request_id: int) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "method": method, "params": params}


def parse_response(body: Any, request_id: int) -> Any:
    """Validate a decoded JSON-RPC response envelope and return its result.

    Raises ProtocolDecodeError for anything that is not a well-formed 2.0
    response correlated with ``request_id``, and ApplicationError when the
    endpoint answered with an error object.
    """
    if not isinstance(body, dict):
        raise ProtocolDecodeError(f"response is not an object: {type(body).__name__}")
    if body.get("jsonrpc") != JSONRPC_VERSION:
        raise ProtocolDecodeError(f"unexpected jsonrpc version: {body.get('jsonrpc')!r}")
    # bool is an int subclass; True must not correlate with id 1
    response_id = body.get("id")
    if isinstance(response_id, bool) or response_id != request_id:
        raise ProtocolDecodeError(f"response id {response_id!r} does not match request id {request_id}")

    error = body.get("error")
    if error is not None:
        if not isinstance(error, dict):
            raise ProtocolDecodeError("error member is not an object")
        code = error.get("code")
        message = error.get("message")
        if not isinstance(code, int) or isinstance(code, bool) or not isinstance(message, str):
            raise ProtocolDecodeError(f"malformed error object: {error!r}")
        raise ApplicationError(code, message)

    if "result" not in body:
        raise ProtocolDecodeError("response has neither result nor error")
    return body["result"]


@dataclass
class RpcTransport:
    """Single-shot JSON-RPC submission against one endpoint."""

    method: str = DEFAULT_METHOD
    http_transport: httpx.AsyncBaseTransport | None = None
    _ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), init=False, repr=False)

    async def _post(self, endpoint: str, request: dict[str, Any], timeout: float) -> httpx.Response:
        # httpx timeouts apply per phase; the caller bounds the whole exchange
        async with httpx.AsyncClient(timeout=timeout, transport=self.http_transport) as client:
            return await client.post(endpoint, json=request)

    async def submit(self, endpoint: str, payload: str, timeout: float) -> Any:
        request_id = next(self._ids)
        request = build_request(self.method, [payload], request_id)
        try:
            response = await asyncio.wait_for(self._post(endpoint, request, timeout), timeout)
        except asyncio.TimeoutError as exc:
            raise TransportFailure(f"no complete response from {endpoint} within {timeout}s") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportFailure(f"{type(exc).__name__}: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            if response.is_success:
                raise ProtocolDecodeError(f"response body is not JSON: {exc}") from exc
            raise TransportFailure(f"HTTP {response.status_code} from {endpoint}") from exc
        return parse_response(body, request_id)
