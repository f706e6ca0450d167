#!/usr/bin/env python3

import logging
import os

# ============================================================================
# SERVER IDENTITY
# ============================================================================

SERVER_NAME = "direct-api-server"
SERVER_VERSION = "1.0.0"

# ============================================================================
# ENVIRONMENT
# ============================================================================

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3002"))

# Target used by the demonstration client
SERVER_URL = os.environ.get("SERVER_URL", "http://localhost:3002")

# Outbound fetch limits
FETCH_TIMEOUT = float(os.environ.get("FETCH_TIMEOUT", "10.0"))
MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", "4000"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging once for the server and client entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
