#!/usr/bin/env python3
"""
Direct API Server - FastAPI transport

A simplified tool server without SSE for easier debugging. Clients register
a session, send "initialize", then list and call tools over plain
request/response HTTP.

Endpoints:
- POST /register: Register a new session
- POST /api/message?sessionId=ID: Send a JSON-RPC style message
- GET /status: Server status and session count
- GET /health: Service health check
- GET /: Human readable description page

Usage: direct-api-server (runs on http://localhost:3002 unless PORT is set)
"""

# Web framework
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from starlette import status
import uvicorn

# Standard libraries
import html
import logging
import time
from typing import Any, Optional

from .config import HOST, PORT, SERVER_NAME, SERVER_VERSION, configure_logging
from .dispatcher import Dispatcher
from .errors import DirectAPIError, InvalidRequest, RpcError, SessionNotFound
from .jsonrpc import RpcResponse
from .sessions import SessionStore
from .tools import ToolRegistry, default_registry

logger = logging.getLogger(__name__)

# ============================================================================
# HOME PAGE
# ============================================================================

HOME_PAGE = """
<html>
  <head>
    <title>Direct API Server</title>
    <style>
      body {{ font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; }}
      h1 {{ color: #333; }}
      pre {{ background: #f4f4f4; padding: 10px; border-radius: 5px; }}
      .endpoint {{ margin-bottom: 20px; }}
    </style>
  </head>
  <body>
    <h1>Direct API Server</h1>
    <p>This is a simplified direct API server without SSE for easier debugging.</p>

    <div class="endpoint">
      <h2>Endpoints:</h2>
      <ul>
        <li><strong>POST /register</strong> - Register a new session</li>
        <li><strong>POST /api/message?sessionId=ID</strong> - Send a message</li>
        <li><strong>GET /status</strong> - Check server status</li>
        <li><strong>GET /health</strong> - Health check</li>
      </ul>
    </div>

    <div class="endpoint">
      <h2>Available Tools:</h2>
      <ul>
{tools}
      </ul>
    </div>
  </body>
</html>
"""


def render_home_page(tools: ToolRegistry) -> str:
    items = "\n".join(
        f"        <li><strong>{html.escape(d['name'])}</strong> - {html.escape(d['description'])}</li>"
        for d in tools.descriptors()
    )
    return HOME_PAGE.format(tools=items)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


MALFORMED = object()


async def read_json(request: Request) -> Any:
    """Decoded JSON body, or MALFORMED when the body is empty or not JSON."""
    try:
        return await request.json()
    except ValueError:
        return MALFORMED


# ============================================================================
# APPLICATION
# ============================================================================


def create_app(
    store: Optional[SessionStore] = None,
    tools: Optional[ToolRegistry] = None,
) -> FastAPI:
    store = store if store is not None else SessionStore()
    tools = tools if tools is not None else default_registry()
    dispatcher = Dispatcher(store, tools)

    app = FastAPI(title="Direct API Server", version=SERVER_VERSION)
    app.state.store = store
    app.state.dispatcher = dispatcher
    app.state.tools = tools

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time
        # Don't spam logs with health checks
        level = logging.DEBUG if request.url.path == "/health" else logging.INFO
        logger.log(
            level,
            "%s %s completed in %.3fs with status %d",
            request.method, request.url.path, duration, response.status_code,
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(DirectAPIError)
    async def handle_direct_api_error(request: Request, exc: DirectAPIError):
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return error_response(exc.message, exc.status_code)

    # ========================================================================
    # SESSION ENDPOINTS
    # ========================================================================

    @app.post("/register")
    async def register(request: Request):
        """Register a new session by client-chosen id."""
        body = await read_json(request)
        session_id = body.get("sessionId") if isinstance(body, dict) else None

        logger.info("Registering new session: %s", session_id)
        session = store.register(session_id)

        return {
            "status": "success",
            "sessionId": session.id,
            "message": "Session registered successfully",
        }

    @app.post("/api/message")
    async def handle_message(request: Request):
        """Route one JSON-RPC style message to the dispatcher."""
        body = await read_json(request)

        session_id = request.query_params.get("sessionId")
        if not session_id and isinstance(body, dict):
            session_id = body.get("sessionId")
        if session_id is None or session_id == "":
            raise InvalidRequest("Missing sessionId parameter")
        if not isinstance(session_id, str):
            raise InvalidRequest("sessionId must be a non-empty string")

        if body is MALFORMED:
            if store.get(session_id) is None:
                raise SessionNotFound()
            return RpcResponse.failure(None, RpcError.parse_error()).to_dict()

        try:
            return await dispatcher.dispatch(session_id, body)
        except DirectAPIError:
            raise
        except Exception:
            logger.exception("Error handling message for session %s", session_id)
            return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    # ========================================================================
    # INFORMATIONAL ENDPOINTS
    # ========================================================================

    @app.get("/status")
    async def server_status():
        return {
            "status": "online",
            "sessions": store.count(),
            "server": {"name": SERVER_NAME, "version": SERVER_VERSION},
        }

    @app.get("/health", response_class=PlainTextResponse)
    async def health_check():
        """Health check endpoint."""
        return "OK"

    @app.get("/", response_class=HTMLResponse)
    async def root():
        """Root endpoint."""
        return render_home_page(tools)

    return app


app = create_app()

# ============================================================================
# MAIN APPLICATION
# ============================================================================


def main():
    configure_logging()
    logger.info("Direct API Server running on http://localhost:%d", PORT)
    logger.info("Register endpoint: http://localhost:%d/register", PORT)
    logger.info("Message endpoint: http://localhost:%d/api/message", PORT)
    logger.info("Available tools: %s", ", ".join(app.state.tools.names()))
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
