"""Main MCP server implementation for Gemini media generation."""

import asyncio
import logging
from typing import Optional

from mcp import Resource, Tool
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import (
    GetPromptResult,
    Prompt,
    PromptArgument,
    PromptMessage,
    TextContent,
)

from .backends import GeminiBackend, MediaBackend, MockBackend
from .config.settings import Settings, is_enabled, load_settings
from .core.dispatcher import Dispatcher
from .core.media_library import MediaLibrary
from .managers.progress_manager import ProgressManager, ProgressTick
from .registry import OperationRegistry
from .registry.operations import register_all_operations

logger = logging.getLogger(__name__)

SERVER_NAME = "gemini-media-mcp"
SERVER_VERSION = "1.0.0"


class ToolCallFailed(Exception):
    """Carries rendered error text out to the MCP layer, which flags isError."""
    pass


class GeminiMediaMCPServer:
    """MCP Server exposing Gemini image, video and text tools."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend: Optional[MediaBackend] = None
    ):
        """
        Initialize the MCP server.

        Args:
            settings: Runtime settings (loaded from the environment if omitted)
            backend: Media backend (chosen from settings and flags if omitted)
        """
        self.settings = settings or load_settings()
        self.backend = backend or self._create_backend()

        self.registry = OperationRegistry(strict=is_enabled('strict_registration'))
        self.library = register_all_operations(self.registry, MediaLibrary())

        self.progress = ProgressManager(
            sender=self._send_progress,
            interval=self.settings.progress_interval_seconds,
        )
        self.dispatcher = Dispatcher(self.registry, self.backend, self.progress)

        # Create MCP server instance
        self.server = Server(SERVER_NAME)

        # Register handlers
        self._register_handlers()

    def _create_backend(self) -> MediaBackend:
        if is_enabled('demo_mode'):
            logger.info("Demo mode enabled; serving placeholder media")
            return MockBackend()
        self.settings.require_api_key()
        return GeminiBackend(self.settings)

    async def _send_progress(self, tick: ProgressTick) -> None:
        session = self.server.request_context.session
        await session.send_progress_notification(
            progress_token=tick.token,
            progress=tick.sequence_number,
            total=tick.total,
            message=tick.message,
        )

    def _register_handlers(self):
        """Register all MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List all available tools."""
            return [
                Tool(
                    name=entry["name"],
                    description=entry["description"],
                    inputSchema=entry["inputSchema"],
                )
                for entry in self.dispatcher.list_operations()
            ]

        @self.server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: dict) -> list[TextContent]:
            """Route tool calls through the dispatcher."""
            meta = self.server.request_context.meta
            progress_token = meta.progressToken if meta is not None else None

            result = await self.dispatcher.dispatch(name, arguments, progress_token)
            if result.is_error:
                raise ToolCallFailed(result.text)
            return [TextContent(type="text", text=result.text)]

        @self.server.list_prompts()
        async def handle_list_prompts() -> list[Prompt]:
            """List prompt-style entries for tools that define them."""
            return [
                Prompt(
                    name=entry["name"],
                    description=entry["description"],
                    arguments=[PromptArgument(**argument) for argument in entry["arguments"]],
                )
                for entry in self.dispatcher.list_prompt_style_operations()
            ]

        @self.server.get_prompt()
        async def handle_get_prompt(name: str, arguments: Optional[dict[str, str]]) -> GetPromptResult:
            """Render the user message for a prompt."""
            message = self.registry.get_prompt_message(name, arguments)
            if message is None:
                raise ValueError(f"Unknown prompt: {name}")
            return GetPromptResult(
                description=self.registry.get(name).prompt.description,
                messages=[
                    PromptMessage(role="user", content=TextContent(type="text", text=message)),
                ],
            )

        @self.server.list_resources()
        async def handle_list_resources() -> list[Resource]:
            """No resources are exposed."""
            return []

    async def check_backend(self) -> bool:
        """Log whether the backend answers; failures are not fatal."""
        try:
            healthy = await self.backend.health_check()
        except Exception as e:
            logger.warning(f"Backend health check raised: {e}")
            return False

        if healthy:
            logger.info(f"Backend '{self.backend.name}' is reachable")
        else:
            logger.warning(f"Backend '{self.backend.name}' health check failed")
        return healthy

    async def run(self):
        """Run the MCP server."""
        from mcp.server.stdio import stdio_server

        await self.check_backend()
        logger.info(f"{SERVER_NAME} started with {len(self.registry)} tools")

        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    InitializationOptions(
                        server_name=SERVER_NAME,
                        server_version=SERVER_VERSION,
                        capabilities=self.server.get_capabilities(
                            notification_options=NotificationOptions(),
                            experimental_capabilities={}
                        )
                    )
                )
        finally:
            await self.backend.close()


def main():
    """Main entry point for the MCP server."""
    settings = load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level))
    server = GeminiMediaMCPServer(settings)
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
