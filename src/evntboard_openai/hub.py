"""Hub connection: register as a module and serve RPC methods.

Lifecycle of one connection:

1. open the WebSocket to the hub
2. send ``session.register`` with the module identity
3. build the OpenAI provider from the returned ``apiKey`` and register the
   method handlers
4. serve frames until the hub closes the connection, then fail whatever is
   still pending

There is no reconnection; ``run()`` returns once the connection is gone.
"""

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedError

from evntboard_openai.config import ModuleConfig
from evntboard_openai.provider import OpenAIProvider, extract_api_key
from evntboard_openai.rpc import (
    RPCCallError,
    RPCSession,
    SessionClosedError,
    register_assistant_methods,
    register_image_methods,
)

logger = logging.getLogger(__name__)

REGISTER_METHOD = "session.register"

# Called as connector(host, max_size=...), like websockets' connect
Connector = Callable[..., AbstractAsyncContextManager[Any]]
ProviderFactory = Callable[[str | None], OpenAIProvider]


def close_message(reason: str | None) -> str:
    return f"Connection is closed ({reason or ''})."


class HubModule:
    """This process, registered on the hub as one module."""

    def __init__(
        self,
        config: ModuleConfig,
        *,
        connector: Connector = connect,
        provider_factory: ProviderFactory = OpenAIProvider,
    ) -> None:
        self._config = config
        self._connector = connector
        self._provider_factory = provider_factory
        self._session: RPCSession | None = None
        self._provider: OpenAIProvider | None = None
        self._registered = asyncio.Event()

    @property
    def session(self) -> RPCSession | None:
        return self._session

    @property
    def provider(self) -> OpenAIProvider | None:
        return self._provider

    async def wait_registered(self) -> None:
        await self._registered.wait()

    async def run(self) -> None:
        """Connect, register and serve until the hub closes the connection."""
        host = self._config.host
        logger.info("hub_connecting", extra={"host": host})

        async with self._connector(
            host, max_size=self._config.max_frame_size
        ) as websocket:
            logger.info("hub_connected", extra={"host": host})
            session = RPCSession(websocket.send)
            self._session = session

            session.spawn(self._register(session))
            reason = await self._serve(websocket, session)

            session.reject_all_pending(close_message(reason))
            await session.drain()

        logger.info("hub_disconnected", extra={"reason": reason})

    async def _serve(self, websocket: Any, session: RPCSession) -> str:
        """Feed incoming frames to the session until the socket closes.

        Each frame gets its own task so slow provider calls interleave.

        Returns:
            The close reason sent by the hub, if any.
        """
        try:
            async for frame in websocket:
                session.spawn(session.handle_frame(frame))
        except ConnectionClosedError as e:
            logger.error("hub_connection_error", extra={"error": str(e)})
        return websocket.close_reason or ""

    async def _register(self, session: RPCSession) -> None:
        """Register with the hub, then expose the method handlers."""
        identity = self._config.module
        try:
            result = await session.request(
                REGISTER_METHOD, identity.to_register_params()
            )
        except (RPCCallError, SessionClosedError, ConnectionClosed) as e:
            logger.error("hub_registration_failed", extra={"error": str(e)})
            return

        api_key = extract_api_key(result)
        provider = self._provider_factory(api_key)
        self._provider = provider

        register_assistant_methods(session, provider)
        register_image_methods(session, provider, self._config)

        self._registered.set()
        logger.info(
            "hub_registered",
            extra={
                "module_code": identity.code,
                "module_name": identity.name,
                "methods": len(session.methods),
                "has_api_key": provider.is_configured,
            },
        )
