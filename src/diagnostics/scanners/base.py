"""Scanner protocol and the shared base class."""

from __future__ import annotations

from typing import Any, Protocol

from src.diagnostics.models import (
    Evidence,
    FetchResult,
    IndicatorCategory,
    IndicatorResult,
    IndicatorStatus,
    ScanContext,
)

from .utils import DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, fetch_url


class Scanner(Protocol):
    """Protocol for scanners."""

    name: str
    category: IndicatorCategory
    description: str
    weight: float

    async def scan(self, context: ScanContext) -> IndicatorResult: ...

    def is_applicable(self, context: ScanContext) -> bool: ...


class BaseScanner:
    """Common plumbing: result stamping and configured fetching.

    Subclasses set ``name``, ``category`` and ``description`` and implement
    ``scan``. ``max_score`` is the scale the scanner reports ``score`` on.
    """

    name: str = ""
    category: IndicatorCategory = "standards"
    description: str = ""
    weight: float = 1.0
    max_score: float = 1.0

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
    ) -> None:
        self._timeout = timeout
        self._user_agent = user_agent
        self._max_redirects = max_redirects

    async def scan(self, context: ScanContext) -> IndicatorResult:
        raise NotImplementedError

    def is_applicable(self, context: ScanContext) -> bool:
        return True

    async def _fetch(self, url: str) -> FetchResult:
        return await fetch_url(
            url,
            self._timeout,
            user_agent=self._user_agent,
            max_redirects=self._max_redirects,
        )

    def _result(
        self,
        status: IndicatorStatus,
        score: float | None = None,
        *,
        message: str = "",
        recommendation: str | None = None,
        evidence: Evidence | None = None,
        found: bool | None = None,
        is_valid: bool | None = None,
    ) -> IndicatorResult:
        return IndicatorResult(
            indicator_name=self.name,
            category=self.category,
            status=status,
            score=score,
            max_score=self.max_score,
            weight=self.weight,
            message=message,
            recommendation=recommendation,
            evidence=evidence or Evidence(),
            found=found,
            is_valid=is_valid,
        )


class HtmlScanner(BaseScanner):
    """Base for scanners that only look at the supplied page HTML."""

    def is_applicable(self, context: ScanContext) -> bool:
        return bool(context.page_html)

    def _no_html(self, what: str) -> IndicatorResult:
        return self._result(
            "not_applicable",
            message=f"No HTML content available for {what}",
            evidence=Evidence(data={"reason": "Page HTML not provided"}),
        )


def describe(scanner: Scanner) -> dict[str, Any]:
    return {
        "name": scanner.name,
        "category": scanner.category,
        "description": scanner.description,
        "weight": scanner.weight,
    }
