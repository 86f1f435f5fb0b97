"""agents.json scanner: site-declared capabilities for AI agents."""

from __future__ import annotations

import json
from typing import Any

from src.diagnostics.models import Evidence, FetchResult, IndicatorResult, ScanContext

from .base import BaseScanner
from .utils import build_url, missing_fields

AGENTS_JSON_PATHS: tuple[str, ...] = ("/.well-known/agents.json", "/agents.json", "/agent.json")
REQUIRED_FIELDS = ["name", "description"]
RECOMMENDED_FIELDS = ["version", "capabilities", "contact"]


def agents_json_warnings(data: dict[str, Any]) -> list[str]:
    warnings = [
        f"Recommended field '{name}' is missing"
        for name in RECOMMENDED_FIELDS
        if name not in data
    ]
    if "capabilities" in data and not isinstance(data["capabilities"], list):
        warnings.append("capabilities should be an array")
    if "contact" in data and not isinstance(data["contact"], dict):
        warnings.append("contact should be an object")
    api = data.get("api")
    if isinstance(api, dict) and "endpoints" in api and not isinstance(api["endpoints"], list):
        warnings.append("api.endpoints should be an array")
    return warnings


class AgentsJsonScanner(BaseScanner):
    name = "agents_json"
    category = "standards"
    description = "Checks for the presence and validity of an agents.json file describing AI agent capabilities"
    weight = 1.5

    async def _locate(self, site_url: str) -> tuple[str, FetchResult]:
        """Return the first candidate location that exists, or the last miss."""
        url, fetched = "", FetchResult(found=False)
        for path in AGENTS_JSON_PATHS:
            url = build_url(site_url, path)
            fetched = await self._fetch(url)
            if fetched.found:
                break
        return url, fetched

    async def scan(self, context: ScanContext) -> IndicatorResult:
        url, fetched = await self._locate(context.site_url)

        if not fetched.found:
            return self._result(
                "fail",
                0.0,
                message="No agents.json file found",
                recommendation=(
                    "Publish an agents.json file (e.g. /.well-known/agents.json) to define "
                    "AI agent capabilities"
                ),
                evidence=Evidence(
                    checked_url=url,
                    status_code=fetched.status_code,
                    error=fetched.error,
                    data={"checked_locations": list(AGENTS_JSON_PATHS)},
                ),
                found=False,
                is_valid=False,
            )

        try:
            data = json.loads(fetched.content or "{}")
        except json.JSONDecodeError as exc:
            return self._result(
                "fail",
                0.0,
                message="Invalid JSON in agents.json file",
                recommendation="Fix the JSON syntax errors in your agents.json file",
                evidence=Evidence(checked_url=url, status_code=fetched.status_code, error=str(exc)),
                found=True,
                is_valid=False,
            )

        if not isinstance(data, dict):
            data = {}

        missing = missing_fields(data, REQUIRED_FIELDS)
        warnings = agents_json_warnings(data)

        if missing:
            return self._result(
                "warn",
                0.5,
                message="agents.json file found but missing recommended fields",
                recommendation=f"Add the following fields to your agents.json: {', '.join(missing)}",
                evidence=Evidence(
                    checked_url=url,
                    status_code=fetched.status_code,
                    issues=[f"Missing required field: {name}" for name in missing],
                    data={"warnings": warnings, "content": data},
                ),
                found=True,
                is_valid=False,
            )

        capabilities = data.get("capabilities")
        return self._result(
            "pass",
            1.0,
            message="Valid agents.json file found",
            evidence=Evidence(
                checked_url=url,
                status_code=fetched.status_code,
                data={
                    "warnings": warnings,
                    "capabilities": len(capabilities) if isinstance(capabilities, list) else 0,
                    "has_api": bool(data.get("api")),
                },
            ),
            found=True,
            is_valid=True,
        )
