"""
Direct API Server - a plain HTTP tool server and its demonstration client.

Sessions register over POST /register, perform a single "initialize"
handshake and then discover and call tools through POST /api/message using
JSON-RPC style envelopes. No streaming transport is involved.
"""

from .config import SERVER_NAME, SERVER_VERSION

__version__ = SERVER_VERSION

__all__ = ["SERVER_NAME", "SERVER_VERSION", "__version__"]
