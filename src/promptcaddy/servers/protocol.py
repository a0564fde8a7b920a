"""
JSON-RPC envelope handling for the stdio MCP transport.

One JSON object per line in each direction. Requests are validated with
pydantic; responses are plain dicts encoded compactly with keys in
``jsonrpc, id, result|error`` order. The request id is echoed exactly as
decoded, so numeric ids stay numbers and string ids stay strings.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND
from pydantic import BaseModel, ValidationError

__all__ = [
    "CallToolParams",
    "INITIALIZE_ID",
    "INVALID_PARAMS",
    "JSONRPCRequest",
    "JSONRPC_VERSION",
    "METHOD_NOT_FOUND",
    "encode",
    "error_response",
    "parse_request",
    "stringify_argument",
    "success_response",
]

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

# Correlation id of the unsolicited initialize message sent on startup
INITIALIZE_ID = 0


class JSONRPCRequest(BaseModel):
    """Incoming request envelope."""

    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    method: str = ""
    params: Any = None


class CallToolParams(BaseModel):
    """Params of a ``tools/call`` request."""

    name: str = ""
    arguments: dict[str, Any] | None = None


def parse_request(line: str | bytes) -> JSONRPCRequest | None:
    """Decode one input line into a request envelope.

    Returns:
        The request, or None when the line is not valid JSON or not a
        well-formed envelope (wrong top-level type or field types)
    """
    try:
        return JSONRPCRequest.model_validate_json(line)
    except ValidationError as e:
        logger.debug(f"Discarding malformed request line: {e.error_count()} error(s)")
        return None


def success_response(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def encode(message: dict[str, Any]) -> str:
    """Serialize a response as a single compact JSON line (no newline)."""
    return json.dumps(message, ensure_ascii=False, separators=(",", ":"))


def stringify_argument(value: Any) -> str:
    """Textual form of a tool argument value.

    Strings pass through unchanged; any other JSON value is rendered as
    JSON text (``true``, ``3``, ``1.5``, ``null``, ``[1, 2]``).
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
