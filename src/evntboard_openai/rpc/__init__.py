"""RPC system for hub communication.

Provides a bidirectional JSON-RPC 2.0 session that lets this module call the
hub (registration, event notifications) while answering the methods the hub
invokes on it.

Public API:
- RPCSession: client and server over one connection
- register_assistant_methods, register_image_methods: method handlers

Protocol:
- RPCRequest, RPCResponse: JSON-RPC 2.0 message types
"""

from evntboard_openai.rpc.methods import (
    register_assistant_methods,
    register_image_methods,
)
from evntboard_openai.rpc.protocol import ErrorCode, RPCError, RPCRequest, RPCResponse
from evntboard_openai.rpc.session import (
    InvalidParamsError,
    RPCCallError,
    RPCHandler,
    RPCSession,
    SessionClosedError,
)

__all__ = [
    # Session
    "RPCSession",
    "RPCHandler",
    "RPCCallError",
    "SessionClosedError",
    "InvalidParamsError",
    # Methods
    "register_assistant_methods",
    "register_image_methods",
    # Protocol
    "RPCRequest",
    "RPCResponse",
    "RPCError",
    "ErrorCode",
]
