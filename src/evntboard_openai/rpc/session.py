"""Bidirectional JSON-RPC session over a single connection.

The hub and this module both issue requests over the same socket, so a
session is a client and a server at once:

- outbound requests are tracked in a pending table keyed by request id and
  resolved when the matching response frame arrives
- inbound requests are dispatched to registered method handlers and answered
  with exactly one response frame

Frames are classified by shape: anything with a ``method`` is a request,
anything with ``result`` or ``error`` is a response.
"""

import asyncio
import json
import logging
import uuid
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

from evntboard_openai.rpc.protocol import (
    ErrorCode,
    RPCRequest,
    RPCResponse,
    is_request,
    is_response,
)

logger = logging.getLogger(__name__)

# Type for RPC method handlers
RPCHandler = Callable[[dict[str, Any]], Awaitable[Any]]

# Writes one serialized frame to the underlying connection
FrameSender = Callable[[str], Awaitable[None]]


class RPCCallError(Exception):
    """The remote side answered a request with an error."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data


class SessionClosedError(Exception):
    """The connection closed before a response arrived."""


class InvalidParamsError(Exception):
    """A handler was called with missing or malformed params."""


class RPCParams(dict[str, Any]):
    """Request params handed to method handlers.

    Indexing a missing key raises InvalidParamsError instead of KeyError, so
    a lookup failure deeper in a handler is not mistaken for bad input.
    """

    def __missing__(self, key: str) -> Any:
        raise InvalidParamsError(f"Missing param: {key}")


def _new_request_id() -> str:
    return str(uuid.uuid4())


class RPCSession:
    """JSON-RPC 2.0 client and server sharing one connection."""

    def __init__(
        self,
        send: FrameSender,
        id_factory: Callable[[], int | str] = _new_request_id,
    ):
        """Initialize the session.

        Args:
            send: Coroutine function writing a text frame to the connection.
            id_factory: Generates ids for outbound requests.
        """
        self._send = send
        self._id_factory = id_factory
        self._methods: dict[str, RPCHandler] = {}
        self._pending: dict[int | str, asyncio.Future[Any]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    def register(self, method: str, handler: RPCHandler) -> None:
        """Register an RPC method handler.

        Args:
            method: Method name (e.g., "getMessage").
            handler: Async function that takes params dict and returns result.
        """
        self._methods[method] = handler

    @property
    def methods(self) -> list[str]:
        """Names of the registered methods."""
        return sorted(self._methods)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def request(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Send a request and wait for its response.

        Raises:
            RPCCallError: If the remote side answers with an error.
            SessionClosedError: If the connection closes first.
        """
        if self._closed:
            raise SessionClosedError(f"Connection is closed, cannot call {method}")

        request = RPCRequest(method=method, params=params or {}, id=self._id_factory())
        assert request.id is not None
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request.id] = future

        try:
            await self._send(request.to_json())
        except Exception:
            self._pending.pop(request.id, None)
            raise

        logger.debug("rpc_request_sent", extra={"method": method, "id": request.id})
        return await future

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        """Send a notification. No response is expected."""
        if self._closed:
            raise SessionClosedError(f"Connection is closed, cannot notify {method}")

        request = RPCRequest(method=method, params=params or {})
        await self._send(request.to_json())
        logger.debug("rpc_notification_sent", extra={"method": method})

    async def handle_frame(self, raw: str | bytes) -> None:
        """Process one frame received from the connection."""
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("rpc_frame_unparseable", extra={"error": str(e)})
            response = RPCResponse.error_response(
                None, ErrorCode.PARSE_ERROR, f"Parse error: {e}"
            )
            await self._send(response.to_json())
            return

        if isinstance(payload, list):
            await self._handle_batch(payload)
            return

        response = await self._handle_message(payload)
        if response is not None:
            await self._send(response.to_json())

    async def _handle_batch(self, items: list[Any]) -> None:
        if not items:
            response = RPCResponse.error_response(
                None, ErrorCode.INVALID_REQUEST, "Empty batch"
            )
            await self._send(response.to_json())
            return

        results = await asyncio.gather(*(self._handle_message(item) for item in items))
        responses = [r.to_dict() for r in results if r is not None]
        if responses:
            await self._send(json.dumps(responses))

    async def _handle_message(self, payload: Any) -> RPCResponse | None:
        if is_request(payload):
            return await self._process_request(RPCRequest.from_dict(payload))

        if is_response(payload):
            self._resolve(RPCResponse.from_dict(payload))
            return None

        request_id = payload.get("id") if isinstance(payload, dict) else None
        return RPCResponse.error_response(
            request_id, ErrorCode.INVALID_REQUEST, "Invalid request"
        )

    async def _process_request(self, request: RPCRequest) -> RPCResponse | None:
        """Run the handler for an inbound request.

        Returns None for notifications, which are never answered.
        """
        response = await self._execute(request)
        if request.is_notification:
            if response.error is not None:
                logger.warning(
                    "rpc_notification_failed",
                    extra={"method": request.method, "error": response.error.message},
                )
            return None
        return response

    async def _execute(self, request: RPCRequest) -> RPCResponse:
        request_id = request.id

        if request.jsonrpc != "2.0":
            return RPCResponse.error_response(
                request_id, ErrorCode.INVALID_REQUEST, "Invalid JSON-RPC version"
            )

        handler = self._methods.get(request.method)
        if handler is None:
            return RPCResponse.error_response(
                request_id,
                ErrorCode.METHOD_NOT_FOUND,
                f"Method not found: {request.method}",
            )

        if not isinstance(request.params, dict):
            return RPCResponse.error_response(
                request_id, ErrorCode.INVALID_PARAMS, "Params must be an object"
            )

        try:
            result = await handler(RPCParams(request.params))
            return RPCResponse.success(request_id, result)
        except InvalidParamsError as e:
            return RPCResponse.error_response(
                request_id, ErrorCode.INVALID_PARAMS, f"Invalid params: {e}"
            )
        except Exception as e:
            logger.exception("RPC method error", extra={"method": request.method})
            return RPCResponse.error_response(
                request_id, ErrorCode.INTERNAL_ERROR, str(e)
            )

    def _resolve(self, response: RPCResponse) -> None:
        if response.id is None:
            if response.error is not None:
                logger.warning(
                    "rpc_error_without_id", extra={"error": response.error.message}
                )
            return

        future = self._pending.pop(response.id, None)
        if future is None:
            logger.warning("rpc_response_unmatched", extra={"id": response.id})
            return
        if future.done():
            return

        if response.error is not None:
            future.set_exception(
                RPCCallError(
                    code=response.error.code,
                    message=response.error.message,
                    data=response.error.data,
                )
            )
        else:
            future.set_result(response.result)

    def reject_all_pending(self, reason: str) -> None:
        """Fail every request still waiting for a response and close the session."""
        self._closed = True
        pending = list(self._pending.values())
        self._pending.clear()
        for future in pending:
            if not future.done():
                future.set_exception(SessionClosedError(reason))
        if pending:
            logger.info(
                "rpc_pending_rejected", extra={"count": len(pending), "reason": reason}
            )

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Run a coroutine in the background, holding a reference until it ends."""
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("rpc_task_failed", exc_info=exc)

    async def drain(self) -> None:
        """Wait for all background tasks started with spawn()."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
