#!/usr/bin/env python3

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from .config import FETCH_TIMEOUT, MAX_CONTENT_LENGTH

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]

TRUNCATION_MARKER = "...(truncated)"

# ============================================================================
# TOOL RESULTS
# ============================================================================


def text_result(text: str, is_error: bool = False) -> Dict[str, Any]:
    """Build a tool result carrying a single text content item."""
    result: Dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


# ============================================================================
# TOOL REGISTRY
# ============================================================================


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    parameters: Dict[str, Any]
    handler: ToolHandler

    def descriptor(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }

    def missing_arguments(self, arguments: Dict[str, Any]) -> List[str]:
        """Required argument names that are absent or empty."""
        return [
            name for name in self.parameters.get("required", [])
            if arguments.get(name) in (None, "")
        ]

    async def __call__(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return await self.handler(arguments)


class ToolRegistry:
    """Static name -> tool mapping, filled at startup and read-only afterwards."""

    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> Tool:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        return tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def descriptors(self) -> List[Dict[str, Any]]:
        return [tool.descriptor() for tool in self._tools.values()]


# ============================================================================
# FETCH WEBSITE
# ============================================================================

FETCH_WEBSITE_PARAMETERS = {
    "type": "object",
    "properties": {
        "url": {
            "type": "string",
            "format": "uri",
            "description": "The URL to fetch"
        }
    },
    "required": ["url"]
}


def validate_url(url: Any) -> str:
    """Accept only absolute http(s) URLs; anything else fails like a fetch."""
    if isinstance(url, str):
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL:
            parsed = None
        if parsed is not None and parsed.scheme in ("http", "https") and parsed.host:
            return url
    raise httpx.InvalidURL("url must be an absolute http(s) URL")


def truncate(text: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    if len(text) > max_length:
        return text[:max_length] + TRUNCATION_MARKER
    return text


async def fetch_website(
    url: str,
    timeout: float = FETCH_TIMEOUT,
    max_length: int = MAX_CONTENT_LENGTH,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    GET a URL and return its body as truncated text.

    The body is returned whatever the status code. Network failures and
    timeouts propagate as ``httpx.HTTPError``.

    Args:
        url: Absolute http(s) URL
        timeout: Overall request timeout in seconds
        max_length: Number of characters kept before truncation
        transport: Optional httpx transport, used to stub the network

    Returns:
        "Content from {url}:\\n\\n{text}"
    """
    logger.info("Fetching website content from: %s", url)
    async with httpx.AsyncClient(
        timeout=timeout, follow_redirects=True, transport=transport
    ) as client:
        response = await client.get(url)
        text = response.text

    logger.info("Successfully fetched %s, content length: %d chars", url, len(text))
    return f"Content from {url}:\n\n{truncate(text, max_length)}"


def fetch_website_tool(
    timeout: float = FETCH_TIMEOUT,
    max_length: int = MAX_CONTENT_LENGTH,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tool:
    async def handler(arguments: Dict[str, Any]) -> Dict[str, Any]:
        url = arguments.get("url")
        try:
            url = validate_url(url)
            text = await fetch_website(
                url, timeout=timeout, max_length=max_length, transport=transport
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Error fetching %s: %s", url, e)
            return text_result(f"Error fetching website: {describe_error(e)}", is_error=True)
        return text_result(text)

    return Tool(
        name="fetchWebsite",
        description="Fetches the content of a website by URL",
        parameters=FETCH_WEBSITE_PARAMETERS,
        handler=handler,
    )


def describe_error(error: Exception) -> str:
    # Some httpx errors (e.g. bare timeouts) stringify to ""
    return str(error) or error.__class__.__name__


def default_registry(
    timeout: float = FETCH_TIMEOUT,
    max_length: int = MAX_CONTENT_LENGTH,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(fetch_website_tool(timeout, max_length, transport))
    return registry
