"""llms.txt scanner: checks the site's instructions file for AI agents."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from src.diagnostics.models import Evidence, IndicatorResult, ScanContext

from .base import BaseScanner
from .utils import build_url

logger = logging.getLogger(__name__)


@dataclass
class LlmsTxtDocument:
    """Parsed llms.txt directives, grouped by user agent."""

    user_agent: str | None = None
    groups: dict[str, dict[str, Any]] = field(default_factory=dict)
    extra: dict[str, str] = field(default_factory=dict)
    directive_count: int = 0
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_agent": self.user_agent,
            "groups": self.groups,
            "extra": self.extra,
            "directive_count": self.directive_count,
        }


def _new_group() -> dict[str, Any]:
    return {"allow": [], "disallow": [], "crawl_delay": None}


def parse_llms_txt(content: str) -> LlmsTxtDocument:
    """Parse and validate an llms.txt body.

    Lines are ``key: value`` directives; blank lines and ``#`` comments are
    skipped. Directives seen before the first ``User-agent`` line apply to
    ``*``. When several ``User-agent`` lines exist the last one is reported.
    """
    doc = LlmsTxtDocument()

    if not content.strip():
        doc.issues.append("File is empty")
        return doc

    current = "*"
    for lineno, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        if ":" not in line:
            doc.issues.append(f"Line {lineno}: Invalid format, missing colon")
            continue

        key, value = line.split(":", 1)
        key = key.strip().lower()
        value = value.strip()
        doc.directive_count += 1

        if key == "user-agent":
            current = value or "*"
            doc.user_agent = value
            doc.groups.setdefault(current, _new_group())
            continue

        group = doc.groups.setdefault(current, _new_group())
        if key in ("allow", "disallow"):
            group[key].append(value)
        elif key == "crawl-delay":
            try:
                delay = float(value)
            except ValueError:
                delay = -1.0
            if not math.isfinite(delay) or delay < 0:
                doc.issues.append(f"Line {lineno}: Invalid crawl-delay value")
            else:
                group["crawl_delay"] = delay
        else:
            doc.extra[key] = value

    if not doc.user_agent:
        doc.issues.append("Missing User-agent directive")

    return doc


class LlmsTxtScanner(BaseScanner):
    name = "llms_txt"
    category = "standards"
    description = "Checks for the presence and validity of llms.txt file for AI agent instructions"
    weight = 2.0

    async def scan(self, context: ScanContext) -> IndicatorResult:
        url = build_url(context.site_url, "/llms.txt")
        fetched = await self._fetch(url)

        if not fetched.found:
            return self._result(
                "fail",
                0.0,
                message="No llms.txt file found",
                recommendation=(
                    "Create an llms.txt file at the root of your website to provide "
                    "instructions for AI agents"
                ),
                evidence=Evidence(
                    checked_url=url,
                    status_code=fetched.status_code,
                    error=fetched.error,
                ),
                found=False,
                is_valid=False,
            )

        doc = parse_llms_txt(fetched.content or "")
        logger.debug(
            "llms.txt parsed",
            extra={"url": url, "directives": doc.directive_count, "issues": len(doc.issues)},
        )

        if doc.issues:
            return self._result(
                "warn",
                0.5,
                message="llms.txt file found but has issues",
                recommendation="Fix the issues in your llms.txt file to ensure proper AI agent compatibility",
                evidence=Evidence(
                    checked_url=url,
                    status_code=fetched.status_code,
                    issues=doc.issues,
                    data={"parsed": doc.to_dict(), "content": fetched.content},
                ),
                found=True,
                is_valid=False,
            )

        return self._result(
            "pass",
            1.0,
            message="Valid llms.txt file found",
            evidence=Evidence(
                checked_url=url,
                status_code=fetched.status_code,
                data={"parsed": doc.to_dict()},
            ),
            found=True,
            is_valid=True,
        )
