#!/usr/bin/env python3
"""Direct client that exercises the server end-to-end without SSE."""

import argparse
import logging
import sys
import uuid
from typing import Any, Dict, List, Optional

import requests

from .config import SERVER_URL, configure_logging
from .jsonrpc import RpcRequest

logger = logging.getLogger(__name__)

CLIENT_INFO = {"name": "direct-mcp-client", "version": "1.0.0"}
DEFAULT_TARGET_URL = "https://modelcontextprotocol.io"
REQUEST_TIMEOUT = 30


class ClientError(Exception):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, action: str, status_code: int, body: str):
        super().__init__(f"{action} failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class DirectClient:
    """Thin requests-based client for the register/initialize/message flow."""

    def __init__(self, server_url: str = SERVER_URL, session: Optional[requests.Session] = None):
        self.server_url = server_url.rstrip("/")
        self.http = session or requests.Session()
        self.session_id: Optional[str] = None
        self.request_id = 0

    def _check(self, response: requests.Response, action: str) -> Dict[str, Any]:
        if not response.ok:
            raise ClientError(action, response.status_code, response.text)
        return response.json()

    def status(self) -> Dict[str, Any]:
        response = self.http.get(f"{self.server_url}/status", timeout=REQUEST_TIMEOUT)
        return self._check(response, "Status check")

    def register(self, session_id: Optional[str] = None) -> Dict[str, Any]:
        session_id = session_id or str(uuid.uuid4())
        response = self.http.post(
            f"{self.server_url}/register",
            json={"sessionId": session_id},
            timeout=REQUEST_TIMEOUT,
        )
        data = self._check(response, "Registration")
        self.session_id = session_id
        return data

    def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send one envelope and return the decoded response envelope."""
        if self.session_id is None:
            raise RuntimeError("Register a session before sending messages")

        self.request_id += 1
        request = RpcRequest(method=method, id=self.request_id, params=params or {})
        response = self.http.post(
            f"{self.server_url}/api/message",
            params={"sessionId": self.session_id},
            json=request.to_dict(),
            timeout=REQUEST_TIMEOUT,
        )
        return self._check(response, method)

    def initialize(self, client_info: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.send("initialize", {
            "client": client_info or CLIENT_INFO,
            "capabilities": {}
        })

    def list_tools(self) -> List[Dict[str, Any]]:
        return self.send("listTools").get("result", {}).get("tools", [])

    def call_tool(self, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return self.send("callTool", {"name": name, "arguments": arguments})

    def ping(self) -> Dict[str, Any]:
        return self.send("ping")


def run_direct_client(server_url: str = SERVER_URL, url: str = DEFAULT_TARGET_URL,
                      client: Optional[DirectClient] = None) -> bool:
    """Walk through status, register, initialize, listTools and callTool."""
    client = client or DirectClient(server_url)
    print("Starting direct MCP client...")
    print(f"Server URL: {client.server_url}")

    try:
        # 1. Check that the server is running
        print("Checking server status...")
        status = client.status()
        print(f"Server status: {status}")
        if status.get("status") != "online":
            raise RuntimeError("Server is not online")

        # 2. Register a session
        print("\nRegistering session...")
        registration = client.register()
        print(f"Session ID: {client.session_id}")
        print(f"Registration response: {registration}")

        # 3. Initialize the session
        print("\nInitializing session...")
        print(f"Initialization response: {client.initialize()}")

        # 4. List available tools
        print("\nListing available tools...")
        print(f"Available tools: {client.list_tools()}")

        # 5. Call the fetchWebsite tool
        print(f"\nCalling fetchWebsite tool with URL: {url}")
        envelope = client.call_tool("fetchWebsite", {"url": url})
        if "error" in envelope:
            raise RuntimeError(f"Tool call returned error: {envelope['error']}")

        result = envelope.get("result") or {}
        print("Tool call failed, see content below" if result.get("isError") else "Tool call successful!")
        content = result.get("content") or []
        if content:
            print(f"Content type: {content[0].get('type')}")
            text = content[0].get("text")
            if text:
                print(f"First 100 characters of content: {text[:100]}...")

        print("\nAll operations completed successfully!")
        return True

    except (ClientError, RuntimeError, requests.RequestException) as e:
        logger.error("Error: %s", e)
        return False


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Direct API client")
    parser.add_argument(
        "--server-url",
        default=SERVER_URL,
        help=f"Server to talk to (default: {SERVER_URL})"
    )
    parser.add_argument(
        "--url",
        default=DEFAULT_TARGET_URL,
        help=f"Website to fetch through the server (default: {DEFAULT_TARGET_URL})"
    )
    args = parser.parse_args(argv)

    configure_logging()
    return 0 if run_direct_client(args.server_url, args.url) else 1


if __name__ == "__main__":
    sys.exit(main())
