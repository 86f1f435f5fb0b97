"""Model Context Protocol manifest scanner (``/.well-known/mcp.json``)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from src.diagnostics.models import Evidence, IndicatorResult, ScanContext

from .base import BaseScanner
from .utils import build_url

MCP_PATH = "/.well-known/mcp.json"


@dataclass
class McpValidation:
    issues: list[str] = field(default_factory=list)
    config: dict[str, Any] | None = None
    capabilities: list[Any] = field(default_factory=list)
    action_count: int = 0
    auth_required: bool = False

    @property
    def is_valid(self) -> bool:
        return not self.issues


def validate_mcp_config(content: str) -> McpValidation:
    result = McpValidation()
    try:
        config = json.loads(content)
    except json.JSONDecodeError:
        result.issues.append("Invalid JSON format")
        return result
    if not isinstance(config, dict):
        result.issues.append("MCP configuration must be a JSON object")
        return result
    result.config = config

    if not config.get("version"):
        result.issues.append("Missing required field: version")

    capabilities = config.get("capabilities")
    if not isinstance(capabilities, list):
        result.issues.append("Missing or invalid capabilities array")
    else:
        result.capabilities = capabilities
        actions = config.get("actions")
        if isinstance(actions, list):
            result.action_count = len(actions)
            for index, action in enumerate(actions):
                action = action if isinstance(action, dict) else {}
                for prop in ("name", "description", "parameters"):
                    if not action.get(prop):
                        result.issues.append(f"Action {index} missing {prop}")

    auth = config.get("authentication")
    if auth:
        result.auth_required = True
        if not (isinstance(auth, dict) and auth.get("type")):
            result.issues.append("Authentication specified but type is missing")

    server = config.get("server")
    if not server:
        result.issues.append("Missing server configuration")
    elif not (isinstance(server, dict) and server.get("url")):
        result.issues.append("Missing server URL")

    return result


class McpScanner(BaseScanner):
    name = "mcp"
    category = "standards"
    description = "Detects Model Context Protocol (MCP) configuration for AI agent actions"
    weight = 2.5

    async def scan(self, context: ScanContext) -> IndicatorResult:
        url = build_url(context.site_url, MCP_PATH)
        fetched = await self._fetch(url)

        if not fetched.found:
            return self._result(
                "fail",
                0.0,
                message=f"No MCP configuration found at {MCP_PATH}",
                recommendation=(
                    f"Implement Model Context Protocol (MCP) configuration at {MCP_PATH} "
                    "to enable AI agents to perform actions on your site"
                ),
                evidence=Evidence(
                    checked_url=url,
                    status_code=fetched.status_code,
                    error=fetched.error,
                    data={"has_mcp": False},
                ),
                found=False,
                is_valid=False,
            )

        validation = validate_mcp_config(fetched.content or "")
        data = {
            "has_mcp": True,
            "content_preview": (fetched.content or "")[:200],
            "capabilities": validation.capabilities,
            "action_count": validation.action_count,
            "auth_required": validation.auth_required,
        }

        if not validation.is_valid:
            return self._result(
                "warn",
                0.5,
                message="MCP configuration found but has validation issues",
                recommendation=f"Fix MCP configuration issues: {'; '.join(validation.issues)}",
                evidence=Evidence(
                    checked_url=url,
                    status_code=fetched.status_code,
                    issues=validation.issues,
                    data=data,
                ),
                found=True,
                is_valid=False,
            )

        return self._result(
            "pass",
            1.0,
            message="Valid MCP configuration enables AI agent actions",
            evidence=Evidence(checked_url=url, status_code=fetched.status_code, data=data),
            found=True,
            is_valid=True,
        )
