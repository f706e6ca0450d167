"""
Session-scoped message dispatch.

Every message goes through the same steps: resolve the session, let
"initialize" through unconditionally, refuse everything else until the
session is initialized, then route on the decoded method.

Two error tiers come out of here. ``DirectAPIError`` subclasses are raised
for the transport to turn into HTTP statuses; ``RpcError`` is caught and
returned inside the envelope with the request id echoed.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .config import SERVER_NAME, SERVER_VERSION
from .errors import NotInitialized, RpcError, SessionNotFound
from .jsonrpc import RpcMethod, RpcRequest, RpcResponse, request_id_of
from .sessions import Session, SessionStore
from .tools import ToolRegistry, default_registry

logger = logging.getLogger(__name__)


class Dispatcher:
    def __init__(self, store: SessionStore, tools: Optional[ToolRegistry] = None):
        self.store = store
        self.tools = tools if tools is not None else default_registry()

    async def dispatch(self, session_id: str, message: Any) -> Dict[str, Any]:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFound()

        try:
            request = RpcRequest.from_dict(message)
        except RpcError as e:
            return RpcResponse.failure(request_id_of(message), e).to_dict()

        logger.info("Received %s (id: %s) for session %s", request.method, request.id, session_id)

        try:
            result = await self._route(session, request)
        except RpcError as e:
            logger.info("Protocol error for %s: %s", request.method, e.message)
            return RpcResponse.failure(request.id, e).to_dict()
        return RpcResponse.success(request.id, result).to_dict()

    async def _route(self, session: Session, request: RpcRequest) -> Any:
        if request.method == RpcMethod.INITIALIZE.value:
            return self._initialize(session, request.params)

        if not session.initialized:
            raise NotInitialized()

        method = RpcMethod.decode(request.method)
        if method is RpcMethod.LIST_TOOLS:
            return {"tools": self.tools.descriptors()}
        if method is RpcMethod.CALL_TOOL:
            return await self._call_tool(request.params)
        if method is RpcMethod.PING:
            return None
        # RpcMethod.INITIALIZE was handled before the initialization check
        raise RpcError.method_not_supported()

    def _initialize(self, session: Session, params: Dict[str, Any]) -> Dict[str, Any]:
        client_info = params.get("client")
        self.store.initialize(session.id, client_info)
        logger.info("Session %s initialized by client %s", session.id, client_info)
        return {
            "server": {"name": SERVER_NAME, "version": SERVER_VERSION},
            "capabilities": {},
        }

    async def _call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        tool = self.tools.get(name) if isinstance(name, str) else None
        if tool is None:
            # Unknown tools answer like unknown methods
            raise RpcError.method_not_supported()

        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}

        missing = tool.missing_arguments(arguments)
        if missing:
            raise RpcError.invalid_params(f"{missing[0]} is required")

        logger.info("Executing %s tool with arguments: %s", tool.name, arguments)
        return await tool(arguments)
