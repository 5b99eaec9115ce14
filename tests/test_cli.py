from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from pbs_mcp.cli import cli
from pbs_mcp.constants import PBS_API_ENDPOINTS
from pbs_mcp.envelopes import RateLimit, ResultEnvelope, UpstreamErrorEnvelope

runner = CliRunner()

TOOL_RESULT = {"content": [{"type": "text", "text": '```json\n{"status": 200}\n```'}]}


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("pbs_mcp.cli.setup_logging"):
        yield


@pytest.fixture
def mock_tool():
    with patch("pbs_mcp.cli.run_pbs_api_tool", new_callable=AsyncMock) as mock:
        mock.return_value = TOOL_RESULT
        yield mock


def called_arguments(mock: AsyncMock) -> dict:
    return mock.call_args.args[0]


def test_list_endpoints_does_not_call_upstream(mock_tool: AsyncMock) -> None:
    result = runner.invoke(cli, ["list-endpoints"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "Available PBS API Endpoints:"
    assert tuple(lines[2:]) == PBS_API_ENDPOINTS
    mock_tool.assert_not_awaited()


def test_info(mock_tool: AsyncMock) -> None:
    result = runner.invoke(cli, ["info"])

    assert result.exit_code == 0
    assert result.output.strip() == TOOL_RESULT["content"][0]["text"]
    assert called_arguments(mock_tool) == {"endpoint": "", "method": "GET"}


def test_prescribers_collects_filters(mock_tool: AsyncMock) -> None:
    result = runner.invoke(cli, ["prescribers", "-c", "1234K", "-t", "medical", "--latest"])

    assert result.exit_code == 0
    assert called_arguments(mock_tool) == {
        "endpoint": "prescribers",
        "method": "GET",
        "params": {
            "limit": "10",
            "page": "1",
            "pbs_code": "1234K",
            "prescriber_type": "medical",
            "get_latest_schedule_only": "true",
        },
    }


def test_item_overview_defaults(mock_tool: AsyncMock) -> None:
    result = runner.invoke(cli, ["item-overview", "-l", "5"])

    assert result.exit_code == 0
    assert called_arguments(mock_tool)["endpoint"] == "item-overview"
    assert called_arguments(mock_tool)["params"] == {"limit": "5", "page": "1"}


def test_query_builds_arguments(mock_tool: AsyncMock) -> None:
    result = runner.invoke(
        cli,
        ["query", "/schedules", "-m", "post", "-p", '{"limit": "2"}', "-k", "abc", "-t", "500"],
    )

    assert result.exit_code == 0
    assert called_arguments(mock_tool) == {
        "endpoint": "/schedules",
        "method": "post",
        "timeout": 500,
        "params": {"limit": "2"},
        "subscriptionKey": "abc",
    }


def test_query_invalid_params_json(mock_tool: AsyncMock) -> None:
    result = runner.invoke(cli, ["query", "items", "-p", "{oops"])

    assert result.exit_code == 1
    assert "Error parsing params JSON" in result.output
    mock_tool.assert_not_awaited()


def test_tool_failure_exits_nonzero(mock_tool: AsyncMock) -> None:
    mock_tool.side_effect = RuntimeError("bad arguments")

    result = runner.invoke(cli, ["query", "items"])

    assert result.exit_code == 1
    assert "Error: bad arguments" in result.output


def test_check_success() -> None:
    envelope = ResultEnvelope(
        status=200,
        status_text="OK",
        headers={},
        body={"_meta": {"info": {"publisher": {"name": "Department of Health"}}, "processing_time": 12}},
        rate_limit=RateLimit(limit="100", remaining="99"),
    )
    with patch("pbs_mcp.cli.forward", new_callable=AsyncMock, return_value=envelope) as mock_forward:
        result = runner.invoke(cli, ["check"])

    assert result.exit_code == 0
    assert mock_forward.call_args.args[0].endpoint == ""
    assert "PBS API connection successful!" in result.output
    assert "Status: 200 OK" in result.output
    assert "Remaining: 99" in result.output
    assert "API Publisher: Department of Health" in result.output
    assert "Processing Time: 12" in result.output


def test_check_failure() -> None:
    envelope = UpstreamErrorEnvelope(status=401, status_text="Unauthorized", headers={}, body={})
    with patch("pbs_mcp.cli.forward", new_callable=AsyncMock, return_value=envelope):
        result = runner.invoke(cli, ["check"])

    assert result.exit_code == 1
    assert "PBS API connection failed!" in result.output
    assert "Authentication failed" in result.output


def test_serve_overrides_port_and_host() -> None:
    with patch("pbs_mcp.cli.run_http_server") as mock_serve:
        result = runner.invoke(cli, ["serve", "--port", "8080", "--host", "127.0.0.1"])

    assert result.exit_code == 0
    settings = mock_serve.call_args.args[0]
    assert settings.http.port == 8080
    assert settings.http.host == "127.0.0.1"


def test_serve_uses_port_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "4123")
    with patch("pbs_mcp.cli.run_http_server") as mock_serve:
        result = runner.invoke(cli, ["serve"])

    assert result.exit_code == 0
    assert mock_serve.call_args.args[0].http.port == 4123
