"""
JSON-RPC style envelopes exchanged over POST /api/message
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from .errors import RpcError

JSONRPC_VERSION = "2.0"

RequestId = Optional[Union[int, str]]


class RpcMethod(str, Enum):
    INITIALIZE = "initialize"
    LIST_TOOLS = "listTools"
    CALL_TOOL = "callTool"
    PING = "ping"

    @classmethod
    def decode(cls, name: str) -> "RpcMethod":
        """Map a method name onto the supported set, or raise -32601."""
        try:
            return cls(name)
        except ValueError:
            raise RpcError.method_not_supported() from None


@dataclass
class RpcRequest:
    method: str
    id: RequestId = None
    params: Dict[str, Any] = field(default_factory=dict)
    jsonrpc: str = JSONRPC_VERSION

    @classmethod
    def from_dict(cls, data: Any) -> "RpcRequest":
        if not isinstance(data, dict):
            raise RpcError.invalid_request("message must be a JSON object")

        method = data.get("method")
        if not isinstance(method, str):
            raise RpcError.invalid_request("method must be a string")

        params = data.get("params")
        if params is None:
            params = {}
        elif not isinstance(params, dict):
            raise RpcError.invalid_request("params must be an object")

        return cls(
            method=method,
            id=data.get("id"),
            params=params,
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
            "params": self.params,
        }


@dataclass
class RpcResponse:
    id: RequestId = None
    result: Any = None
    error: Optional[Dict[str, Any]] = None

    @classmethod
    def success(cls, request_id: RequestId, result: Any) -> "RpcResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: RequestId, error: RpcError) -> "RpcResponse":
        return cls(id=request_id, error=error.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        # A successful response always carries "result", even when it is null
        envelope = {"jsonrpc": JSONRPC_VERSION, "id": self.id}
        if self.error is not None:
            envelope["error"] = self.error
        else:
            envelope["result"] = self.result
        return envelope


def request_id_of(data: Any) -> RequestId:
    """Best-effort id extraction so error envelopes can echo it."""
    if isinstance(data, dict):
        return data.get("id")
    return None
