"""JSON-RPC 2.0 protocol implementation."""

import json
from dataclasses import dataclass, field
from typing import Any


# JSON-RPC 2.0 error codes
class ErrorCode:
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


@dataclass
class RPCRequest:
    """JSON-RPC 2.0 request.

    A request without an id is a notification and expects no response.
    """

    method: str
    params: dict[str, Any] = field(default_factory=dict)
    id: int | str | None = None
    jsonrpc: str = "2.0"

    @property
    def is_notification(self) -> bool:
        return self.id is None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
        }
        if self.id is not None:
            d["id"] = self.id
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RPCRequest":
        params = data.get("params")
        return cls(
            method=data.get("method", ""),
            params=params if params is not None else {},
            id=data.get("id"),
            jsonrpc=data.get("jsonrpc", "2.0"),
        )


@dataclass
class RPCError:
    """JSON-RPC 2.0 error."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        d = {"code": self.code, "message": self.message}
        if self.data is not None:
            d["data"] = self.data
        return d


@dataclass
class RPCResponse:
    """JSON-RPC 2.0 response."""

    id: int | str | None
    result: Any = None
    error: RPCError | None = None
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            d["error"] = self.error.to_dict()
        else:
            d["result"] = self.result
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def success(cls, id: int | str | None, result: Any) -> "RPCResponse":
        return cls(id=id, result=result)

    @classmethod
    def error_response(
        cls, id: int | str | None, code: int, message: str, data: Any = None
    ) -> "RPCResponse":
        return cls(id=id, error=RPCError(code=code, message=message, data=data))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RPCResponse":
        error = None
        if data.get("error") is not None:
            err = data["error"]
            error = RPCError(
                code=err.get("code", ErrorCode.INTERNAL_ERROR),
                message=err.get("message", "Unknown error"),
                data=err.get("data"),
            )
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=error,
            jsonrpc=data.get("jsonrpc", "2.0"),
        )


def is_request(data: Any) -> bool:
    """Whether a decoded frame is a request or notification (has a method)."""
    return isinstance(data, dict) and isinstance(data.get("method"), str)


def is_response(data: Any) -> bool:
    """Whether a decoded frame answers an earlier request."""
    return (
        isinstance(data, dict)
        and "method" not in data
        and ("result" in data or "error" in data)
    )
