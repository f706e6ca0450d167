"""Error types for the transport tier and the protocol tier."""

from __future__ import annotations

from starlette import status

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


class DirectAPIError(Exception):
    """Transport-tier failure, rendered as a non-2xx ``{"error": ...}`` body."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(DirectAPIError):
    status_code = status.HTTP_400_BAD_REQUEST


class SessionNotFound(DirectAPIError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Session not found. Register first."):
        super().__init__(message)


class NotInitialized(DirectAPIError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Session not initialized. Send initialize method first."):
        super().__init__(message)


class RpcError(Exception):
    """Protocol-tier failure, carried back inside the response envelope."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def to_dict(self):
        return {"code": self.code, "message": self.message}

    @classmethod
    def parse_error(cls) -> "RpcError":
        return cls(PARSE_ERROR, "Parse error")

    @classmethod
    def invalid_request(cls, detail: str = "") -> "RpcError":
        message = "Invalid Request"
        if detail:
            message = f"{message}: {detail}"
        return cls(INVALID_REQUEST, message)

    @classmethod
    def method_not_supported(cls) -> "RpcError":
        return cls(METHOD_NOT_FOUND, "Method not supported")

    @classmethod
    def invalid_params(cls, detail: str) -> "RpcError":
        return cls(INVALID_PARAMS, f"Invalid params: {detail}")
