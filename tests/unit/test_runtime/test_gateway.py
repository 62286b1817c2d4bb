from types import SimpleNamespace

import pytest

from rivalscope.runtime.gateway import GatewayToolError, McpGateway


class PagedSession:
    """Serves the tool list in pages keyed by cursor."""

    def __init__(self, pages):
        self.pages = pages
        self.cursors = []

    async def list_tools(self, cursor=None):
        self.cursors.append(cursor)
        names, next_cursor = self.pages[cursor]
        tools = [SimpleNamespace(name=n) for n in names]
        return SimpleNamespace(tools=tools, nextCursor=next_cursor)

    async def call_tool(self, name, arguments):
        if name == "broken":
            return SimpleNamespace(
                content=[SimpleNamespace(type="text", text="quota exceeded")], isError=True
            )
        return SimpleNamespace(
            content=[SimpleNamespace(type="image"), SimpleNamespace(type="text", text="ok")],
            isError=False,
        )


def connected(session) -> McpGateway:
    gateway = McpGateway("http://gateway.test/mcp")
    gateway.session = session
    return gateway


@pytest.mark.asyncio
async def test_list_tool_names_follows_cursor():
    session = PagedSession({
        None: (["exa_search"], "page-2"),
        "page-2": (["perplexity_ask", "xai_search"], "page-3"),
        "page-3": (["create_entities"], None),
    })

    names = await connected(session).list_tool_names()

    assert names == ["exa_search", "perplexity_ask", "xai_search", "create_entities"]
    assert session.cursors == [None, "page-2", "page-3"]


@pytest.mark.asyncio
async def test_call_tool_returns_first_text_block():
    assert await connected(PagedSession({})).call_tool("exa_search", {}) == "ok"


@pytest.mark.asyncio
async def test_call_tool_error_raises():
    with pytest.raises(GatewayToolError, match="quota exceeded"):
        await connected(PagedSession({})).call_tool("broken", {})


@pytest.mark.asyncio
async def test_requires_connection():
    with pytest.raises(RuntimeError):
        await McpGateway("http://gateway.test/mcp").list_tool_names()
