"""Tests for server assembly (no stdio transport is started)."""

import pytest

from src.backends import MockBackend
from src.config.settings import ConfigurationError, Settings, is_enabled, set_flag
from src.server import GeminiMediaMCPServer


@pytest.fixture
def server():
    return GeminiMediaMCPServer(Settings(progress_interval_seconds=5), backend=MockBackend())


def test_server_registers_catalog(server):
    assert len(server.registry) == 14
    assert server.progress.interval == 5
    assert server.dispatcher.registry is server.registry


@pytest.mark.asyncio
async def test_generated_media_visible_to_media_tools(server):
    await server.dispatcher.dispatch("generate_video_veo", {"prompt": "Waves"})

    listing = await server.dispatcher.dispatch("list_generated_media", {"action": "list"})

    assert len(server.library) == 1
    assert "VIDEO" in listing.text


@pytest.mark.asyncio
async def test_check_backend(server):
    assert await server.check_backend() is True


def test_missing_api_key_outside_demo_mode():
    original = is_enabled("demo_mode")
    try:
        set_flag("demo_mode", False)
        with pytest.raises(ConfigurationError):
            GeminiMediaMCPServer(Settings())
    finally:
        set_flag("demo_mode", original)


def test_demo_mode_uses_mock_backend():
    original = is_enabled("demo_mode")
    try:
        set_flag("demo_mode", True)
        server = GeminiMediaMCPServer(Settings())
    finally:
        set_flag("demo_mode", original)

    assert isinstance(server.backend, MockBackend)


# ============================================================================
# MCP transport (in-memory client session)
# ============================================================================

@pytest.mark.asyncio
async def test_call_tool_delivers_progress_ticks(server):
    from mcp.shared.memory import create_connected_server_and_client_session

    ticks = []

    async def on_progress(progress, total, message):
        ticks.append((progress, total, message))

    async with create_connected_server_and_client_session(server.server) as client:
        result = await client.call_tool(
            "generate_text", {"prompt": "Write a haiku"}, progress_callback=on_progress,
        )

    assert result.isError is False
    assert "Text Generated Successfully" in result.content[0].text
    assert ticks == [
        (0.0, None, "🎨 Starting generate_text"),
        (100.0, 100.0, "✅ generate_text completed successfully!"),
    ]


@pytest.mark.asyncio
async def test_call_tool_failure_sets_is_error(server):
    from mcp.shared.memory import create_connected_server_and_client_session

    async with create_connected_server_and_client_session(server.server) as client:
        missing = await client.call_tool("missing_tool", {})
        invalid = await client.call_tool("generate_text", {"prompt": ""})

    assert missing.isError is True
    assert missing.content[0].text == "❌ Unknown tool: missing_tool"
    assert invalid.isError is True
    assert invalid.content[0].text.startswith("❌ Invalid arguments for generate_text: prompt:")


@pytest.mark.asyncio
async def test_list_tools_and_prompts(server):
    from mcp.shared.memory import create_connected_server_and_client_session

    async with create_connected_server_and_client_session(server.server) as client:
        tools = await client.list_tools()
        prompts = await client.list_prompts()

    assert len(tools.tools) == 14
    assert "imageUrl" in {tool.name: tool for tool in tools.tools}["analyze_image"].inputSchema["properties"]
    assert [prompt.name for prompt in prompts.prompts][0] == "generate_image_nano_banana"


@pytest.mark.asyncio
async def test_get_prompt_requires_arguments(server):
    from mcp.shared.exceptions import McpError
    from mcp.shared.memory import create_connected_server_and_client_session

    async with create_connected_server_and_client_session(server.server) as client:
        rendered = await client.get_prompt("generate_text", {"prompt": "A limerick"})

        with pytest.raises(McpError, match="requires arguments: prompt"):
            await client.get_prompt("generate_text", {})

    message = rendered.messages[0]
    assert message.role == "user"
    assert message.content.text.startswith("Use the generate_text tool.")
    assert "- prompt: A limerick" in message.content.text
