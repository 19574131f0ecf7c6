"""E2E tests for the flowforge MCP tools.

Calls every tool through an in-memory fastmcp Client and checks the
response shape, invalid-payload handling and the server entry point.
"""

import json

import pytest
import pytest_asyncio
import yaml

from fastmcp import Client
from fastmcp.exceptions import ToolError

from flowforge import server
from flowforge.server import mcp

GOOD_PAGE = """\
import { CSBasePage, CSGetElement, CSReporter } from '@mdakhan.mak/cs-playwright-test-framework';

export class LoginPage extends CSBasePage {
    /** Username input */
    @CSGetElement({ role: 'textbox', name: 'Username', selfHeal: true, alternativeLocators: ['#username'] })
    public usernameField!: CSWebElement;

    /** Enter the username */
    public async enterUsername(username: string): Promise<void> {
        CSReporter.info('Entering username');
        await this.usernameField.fillWithTimeout(username);
    }
}
"""


@pytest_asyncio.fixture
async def mcp_client():
    async with Client(mcp) as client:
        yield client


@pytest.fixture
def noisy_payload(login_payload):
    wrapper = {
        "type": "click",
        "method": "click",
        "target": {"type": "locator", "selector": "#wrapper"},
        "args": [],
    }
    return [wrapper, wrapper] + login_payload


@pytest.mark.asyncio
async def test_tools_are_registered(mcp_client):
    tools = {t.name for t in await mcp_client.list_tools()}
    assert tools >= {
        "filter_actions",
        "optimize_locators",
        "detect_flows",
        "generate_names",
        "suggest_assertions",
        "extract_test_data",
        "analyze_recording",
        "analyze_code_quality",
    }


@pytest.mark.asyncio
async def test_filter_actions(mcp_client, noisy_payload):
    res = await mcp_client.call_tool("filter_actions", {"actions": noisy_payload})
    assert res.data.get("success") is True
    assert len(res.data["actions"]) == 3
    assert len(res.data["removed"]) == 2
    assert res.data["stats"]["originalCount"] == 5
    assert res.data["summary"].startswith("Action Filtering Summary:")


@pytest.mark.asyncio
async def test_filter_actions_accepts_json_text(mcp_client, login_payload):
    res = await mcp_client.call_tool(
        "filter_actions",
        {"actions": json.dumps({"actions": login_payload}), "include_summary": False},
    )
    assert res.data.get("success") is True
    assert len(res.data["actions"]) == 3
    assert "summary" not in res.data


@pytest.mark.asyncio
async def test_optimize_locators(mcp_client, noisy_payload):
    res = await mcp_client.call_tool("optimize_locators", {"actions": noisy_payload})
    assert res.data.get("success") is True
    assert res.data["count"] == 5

    res = await mcp_client.call_tool(
        "optimize_locators", {"actions": noisy_payload, "filter_first": True}
    )
    assert res.data["count"] == 3
    assert res.data["locators"][0]["original"] == 'role=textbox[name="Username"]'


@pytest.mark.asyncio
async def test_detect_flows_all(mcp_client, login_payload):
    res = await mcp_client.call_tool("detect_flows", {"actions": login_payload})
    assert res.data.get("success") is True
    assert res.data["view"] == "all"
    flow = res.data["flows"][0]
    assert flow["type"] == "login"
    assert flow["confidence"] == 0.95
    assert flow["methodName"] == "performLogin"
    assert "intents" in res.data
    assert res.data["pages"][0]["reason"] == "End of recording"


@pytest.mark.asyncio
async def test_detect_flows_single_view(mcp_client, login_payload):
    res = await mcp_client.call_tool(
        "detect_flows", {"actions": login_payload, "view": " PAGES "}
    )
    assert res.data.get("success") is True
    assert res.data["view"] == "pages"
    assert "pages" in res.data
    assert "flows" not in res.data
    assert "intents" not in res.data


@pytest.mark.asyncio
async def test_detect_flows_rejects_unknown_view(mcp_client, login_payload):
    with pytest.raises(ToolError):
        await mcp_client.call_tool("detect_flows", {"actions": login_payload, "view": "graph"})


@pytest.mark.asyncio
async def test_generate_names(mcp_client, login_payload):
    res = await mcp_client.call_tool("generate_names", {"actions": login_payload})
    assert res.data.get("success") is True
    assert res.data["count"] == 3
    first, _, last = res.data["names"]
    assert first["element"]["propertyName"] == "usernameField"
    assert first["method"]["methodName"] == "enterUsername"
    assert last["flowMethod"]["methodName"] == "performLogin"


@pytest.mark.asyncio
async def test_suggest_assertions(mcp_client, login_payload):
    res = await mcp_client.call_tool("suggest_assertions", {"actions": login_payload})
    assert res.data.get("success") is True
    assert res.data["count"] == 1
    point = res.data["verification_points"][0]
    assert point["afterActionIndex"] == 2
    assert point["suggestions"][0]["type"] == "url-contains"
    assert point["suggestions"][0]["confidence"] == 0.9


@pytest.mark.asyncio
async def test_extract_test_data_json(mcp_client, login_payload):
    res = await mcp_client.call_tool("extract_test_data", {"actions": login_payload})
    assert res.data.get("success") is True
    assert res.data["format"] == "json"
    assert res.data["data"]["username"]["value"] == "bob"
    assert res.data["data"]["password"]["value"] == "se*****23"
    assert res.data["sensitiveFields"] == ["Password"]
    assert json.loads(res.data["data_file"])[0]["password"] == "${PASSWORD}"
    assert "secret123" not in json.dumps(res.data)


@pytest.mark.asyncio
async def test_extract_test_data_yaml(mcp_client, login_payload):
    res = await mcp_client.call_tool(
        "extract_test_data", {"actions": login_payload, "format": "YAML"}
    )
    assert res.data.get("success") is True
    assert res.data["format"] == "yaml"
    records = yaml.safe_load(res.data["data_file"])
    assert records[1]["username"] == "testuser_variation"


@pytest.mark.asyncio
async def test_analyze_recording(mcp_client, noisy_payload):
    res = await mcp_client.call_tool("analyze_recording", {"actions": noisy_payload})
    assert res.data.get("success") is True
    assert res.data["filter"]["stats"]["removedCount"] == 2
    assert len(res.data["steps"]) == 3
    assert res.data["flows"][0]["methodName"] == "performLogin"
    assert res.data["verificationPoints"][0]["afterActionIndex"] == 2
    assert "Removed: 2" in res.data["summary"]


@pytest.mark.asyncio
async def test_analyze_code_quality(mcp_client):
    code = {
        "pageObjects": [
            {"className": "LoginPage", "fileName": "LoginPage.ts", "content": GOOD_PAGE}
        ],
        "stepDefinitions": [],
        "steps": 3,
    }
    res = await mcp_client.call_tool("analyze_code_quality", {"code": code})
    assert res.data.get("success") is True
    assert res.data["overallScore"] == 100
    assert res.data["grade"] == "A - Excellent"
    assert len(res.data["categories"]) == 8


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "tool",
    [
        "filter_actions",
        "optimize_locators",
        "detect_flows",
        "generate_names",
        "suggest_assertions",
        "extract_test_data",
        "analyze_recording",
    ],
)
async def test_invalid_payload(mcp_client, tool):
    res = await mcp_client.call_tool(tool, {"actions": "not json"})
    assert res.data.get("success") is False
    assert "not valid JSON" in res.data["error"]


@pytest.mark.asyncio
async def test_payload_without_action_list(mcp_client):
    res = await mcp_client.call_tool("analyze_recording", {"actions": {"steps": []}})
    assert res.data.get("success") is False
    assert res.data["error"] == "Recording must be a list of actions"


@pytest.mark.asyncio
async def test_invalid_generated_code(mcp_client):
    res = await mcp_client.call_tool("analyze_code_quality", {"code": {"pageObjects": "x"}})
    assert res.data.get("success") is False
    assert "pageObjects" in res.data["error"]


# =============================================================================
# Entry point
# =============================================================================


class TestMain:
    """Argument parsing and mcp.run keyword arguments."""

    @pytest.fixture
    def run_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(server.mcp, "run", lambda **kwargs: calls.append(kwargs))
        return calls

    def test_defaults_to_stdio(self, run_calls):
        server.main([])
        assert run_calls == [{"transport": "stdio"}]

    def test_stdio_ignores_http_options(self, run_calls):
        server.main(["--host", "0.0.0.0", "--port", "9000"])
        assert run_calls == [{"transport": "stdio"}]

    def test_http_options(self, run_calls):
        server.main([
            "--transport", "http", "--host", "0.0.0.0", "--port", "9000",
            "--path", "/mcp", "--log-level", "DEBUG",
        ])
        assert run_calls == [{
            "transport": "http",
            "log_level": "DEBUG",
            "host": "0.0.0.0",
            "port": 9000,
            "path": "/mcp",
        }]

    def test_keyboard_interrupt(self, monkeypatch):
        def interrupted(**kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr(server.mcp, "run", interrupted)
        server.main(["--transport", "sse"])

    def test_rejects_unknown_transport(self):
        with pytest.raises(SystemExit):
            server._build_arg_parser().parse_args(["--transport", "websocket"])
