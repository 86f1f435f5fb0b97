"""MCP manifest validation and scanner tests."""

import json

import pytest

from src.diagnostics.scanners.mcp import McpScanner, validate_mcp_config
from tests.helpers import found, make_context

MCP_URL = "https://example.com/.well-known/mcp.json"

VALID_CONFIG = {
    "version": "1.0",
    "capabilities": ["search", "checkout"],
    "actions": [
        {"name": "search", "description": "Search products", "parameters": {"q": "string"}},
    ],
    "server": {"url": "https://example.com/mcp"},
}


def test_validate_complete_config():
    validation = validate_mcp_config(json.dumps(VALID_CONFIG))
    assert validation.is_valid
    assert validation.action_count == 1
    assert validation.capabilities == ["search", "checkout"]


def test_validate_empty_object():
    validation = validate_mcp_config("{}")
    assert validation.issues == [
        "Missing required field: version",
        "Missing or invalid capabilities array",
        "Missing server configuration",
    ]


def test_validate_incomplete_actions_and_auth():
    config = dict(VALID_CONFIG, actions=[{"name": "x"}], authentication={"scheme": "bearer"})
    validation = validate_mcp_config(json.dumps(config))
    assert "Action 0 missing description" in validation.issues
    assert "Action 0 missing parameters" in validation.issues
    assert "Authentication specified but type is missing" in validation.issues
    assert validation.auth_required is True


def test_validate_server_without_url():
    config = dict(VALID_CONFIG, server={"name": "mcp"})
    assert validate_mcp_config(json.dumps(config)).issues == ["Missing server URL"]


def test_validate_invalid_json():
    assert validate_mcp_config("{nope").issues == ["Invalid JSON format"]


@pytest.mark.asyncio
async def test_scan_valid_manifest_passes(mock_fetch):
    mock_fetch.routes[MCP_URL] = found(json.dumps(VALID_CONFIG))

    result = await McpScanner().scan(make_context())

    assert result.status == "pass"
    assert result.score == 1.0
    assert result.weight == 2.5
    assert result.evidence.data["action_count"] == 1


@pytest.mark.asyncio
async def test_scan_invalid_manifest_warns(mock_fetch):
    mock_fetch.routes[MCP_URL] = found("[]")

    result = await McpScanner().scan(make_context())

    assert result.status == "warn"
    assert result.score == 0.5
    assert result.evidence.issues == ["MCP configuration must be a JSON object"]


@pytest.mark.asyncio
async def test_scan_missing_manifest_fails(mock_fetch):
    result = await McpScanner().scan(make_context())

    assert result.status == "fail"
    assert result.score == 0.0
    assert result.evidence.checked_url == MCP_URL
    assert result.evidence.data == {"has_mcp": False}
