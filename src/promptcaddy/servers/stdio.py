"""
Stdio MCP server exposing prompts as tools.

The server reads one JSON-RPC request per line from its input stream,
dispatches it against a fixed method table and writes one response per
line to its output stream. Requests are handled strictly in order on the
calling thread. The only concurrency is the directory watcher reloading
the PromptStore in the background; the store's readers-writer lock keeps
every lookup on a complete generation.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from enum import Enum
from typing import IO, Any

from mcp import types
from pydantic import ValidationError

from promptcaddy.config.app import PromptCaddyConfig, ServerSettings
from promptcaddy.prompts.errors import PromptRenderError
from promptcaddy.prompts.models import Prompt
from promptcaddy.prompts.render import SELECTION_PARAMETER, render_prompt
from promptcaddy.prompts.store import PromptStore
from promptcaddy.prompts.watcher import PromptWatcher

from .protocol import (
    INITIALIZE_ID,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    CallToolParams,
    JSONRPCRequest,
    encode,
    error_response,
    parse_request,
    stringify_argument,
    success_response,
)

__all__ = ["PromptServer", "ServerState", "build_tool"]

logger = logging.getLogger(__name__)

SELECTION_DESCRIPTION = "The selected text or code to process"

Handler = Callable[[JSONRPCRequest], dict[str, Any]]


class ServerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    SERVING = "serving"
    STOPPED = "stopped"


def build_tool(prompt: Prompt) -> dict[str, Any]:
    """Synthesize the MCP tool descriptor for a prompt.

    Every declared parameter becomes a schema property; a string
    ``selection`` property is always added and never required.
    """
    properties: dict[str, Any] = {}
    required: list[str] = []

    for spec in prompt.parameters:
        properties[spec.name] = {"type": spec.type, "description": spec.description}
        if spec.required:
            required.append(spec.name)

    properties[SELECTION_PARAMETER] = {
        "type": "string",
        "description": SELECTION_DESCRIPTION,
    }

    tool = types.Tool(
        name=prompt.id,
        description=prompt.description,
        inputSchema={
            "type": "object",
            "properties": properties,
            "required": required,
        },
    )
    return tool.model_dump(by_alias=True, exclude_none=True)


class PromptServer:
    """
    MCP server over a line-oriented stdio transport.

    Example:
        >>> server = PromptServer.from_config(load_config())
        >>> server.serve()  # returns on end of input
    """

    def __init__(
        self,
        store: PromptStore,
        watcher: PromptWatcher | None = None,
        reader: IO[str] | None = None,
        writer: IO[str] | None = None,
        server_info: ServerSettings | None = None,
    ):
        """Initialize the server.

        Args:
            store: Loaded prompt store backing tools/list and tools/call
            watcher: Optional watcher started and stopped with the serve loop
            reader: Input stream (defaults to stdin)
            writer: Output stream (defaults to stdout)
            server_info: Name, version and protocol version to announce
        """
        self.store = store
        self.watcher = watcher
        self.reader = reader if reader is not None else sys.stdin
        self.writer = writer if writer is not None else sys.stdout
        self.server_info = server_info or ServerSettings()
        self.state = ServerState.UNINITIALIZED

        self._handlers: dict[str, Handler] = {
            "initialize": self._handle_initialize,
            "tools/list": self._handle_list_tools,
            "tools/call": self._handle_call_tool,
        }

    @classmethod
    def from_config(
        cls,
        config: PromptCaddyConfig,
        reader: IO[str] | None = None,
        writer: IO[str] | None = None,
    ) -> PromptServer:
        """Build a server from configuration, loading prompts up front.

        Raises:
            PromptStoreError: If the initial load fails
        """
        store = PromptStore(config.get_prompts_path(), extension=config.extension)
        result = store.reload()
        logger.info(f"Loaded {result.loaded} prompts from {store.directory}")

        watcher = None
        if config.watch.enabled:
            watcher = PromptWatcher(store, recursive=config.watch.recursive)

        return cls(
            store,
            watcher=watcher,
            reader=reader,
            writer=writer,
            server_info=config.server,
        )

    def initialize_result(self) -> dict[str, Any]:
        """Capability and identity payload sent on initialize."""
        return {
            "protocolVersion": self.server_info.protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": {
                "name": self.server_info.name,
                "version": self.server_info.version,
            },
        }

    def serve(self) -> None:
        """Run the read-dispatch-write loop until end of input.

        Starts the watcher (if any) and announces the server before the
        first read. The watcher is stopped on every exit path.

        Raises:
            RuntimeError: If the server has already been served
            WatcherError: If the watcher cannot start
        """
        if self.state is not ServerState.UNINITIALIZED:
            raise RuntimeError(f"PromptServer cannot serve from state '{self.state.value}'")

        if self.watcher is not None:
            self.watcher.start()

        try:
            self.state = ServerState.SERVING
            self._send(success_response(INITIALIZE_ID, self.initialize_result()))

            while True:
                line = self.reader.readline()
                if not line:
                    logger.debug("End of input, stopping server")
                    break

                response = self.handle_line(line)
                if response is not None:
                    self._send(response)
        finally:
            if self.watcher is not None:
                self.watcher.stop()
            self.state = ServerState.STOPPED

    def handle_line(self, line: str) -> dict[str, Any] | None:
        """Handle one raw input line; None means nothing is written back."""
        request = parse_request(line)
        if request is None:
            return None
        return self.handle_request(request)

    def handle_request(self, request: JSONRPCRequest) -> dict[str, Any]:
        """Dispatch a decoded request to its method handler."""
        handler = self._handlers.get(request.method)
        if handler is None:
            logger.debug(f"Unknown method: {request.method!r}")
            return error_response(request.id, METHOD_NOT_FOUND, "Method not found")
        return handler(request)

    def _send(self, message: dict[str, Any]) -> None:
        self.writer.write(encode(message) + "\n")
        self.writer.flush()

    def _handle_initialize(self, request: JSONRPCRequest) -> dict[str, Any]:
        return success_response(request.id, self.initialize_result())

    def _handle_list_tools(self, request: JSONRPCRequest) -> dict[str, Any]:
        tools = [build_tool(prompt) for prompt in self.store.list()]
        return success_response(request.id, {"tools": tools})

    def _handle_call_tool(self, request: JSONRPCRequest) -> dict[str, Any]:
        try:
            params = CallToolParams.model_validate(request.params)
        except ValidationError:
            return error_response(request.id, INVALID_PARAMS, "Invalid params")

        prompt = self.store.find(params.name)
        if prompt is None:
            # Same code as invalid params, kept for client compatibility
            return error_response(request.id, INVALID_PARAMS, "Tool not found")

        bindings = {
            key: stringify_argument(value) for key, value in (params.arguments or {}).items()
        }

        try:
            text = render_prompt(prompt, bindings)
        except PromptRenderError as e:
            return error_response(request.id, INVALID_PARAMS, str(e))

        logger.debug(f"Rendered tool '{prompt.id}' ({len(text)} chars)")
        content = types.TextContent(type="text", text=text)
        return success_response(
            request.id, {"content": [content.model_dump(by_alias=True, exclude_none=True)]}
        )
