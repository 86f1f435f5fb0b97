"""Data models shared by the scanners, registry, profile detector and aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

IndicatorStatus = Literal["pass", "warn", "fail", "not_applicable"]
IndicatorCategory = Literal[
    "standards",
    "seo",
    "structured_data",
    "accessibility",
    "performance",
    "security",
]
SiteProfile = Literal[
    "blog_content",
    "ecommerce",
    "saas_app",
    "kb_support",
    "gov_nontransacting",
    "custom",
]
ReportCategory = Literal["discovery", "understanding", "actions", "trust"]
AccessIntent = Literal["allow", "partial", "block"]

SITE_PROFILES: tuple[SiteProfile, ...] = (
    "blog_content",
    "ecommerce",
    "saas_app",
    "kb_support",
    "gov_nontransacting",
    "custom",
)
REPORT_CATEGORIES: tuple[ReportCategory, ...] = ("discovery", "understanding", "actions", "trust")

_STATUS_SCORES: dict[str, float] = {
    "pass": 1.0,
    "warn": 0.5,
    "fail": 0.0,
    "not_applicable": 0.0,
}


@dataclass(frozen=True)
class PageMetadata:
    """Lightweight page facts recorded by the crawler."""

    title: str = ""
    meta_description: str = ""
    status_code: int | None = None
    load_time_ms: int | None = None
    word_count: int | None = None


@dataclass(frozen=True)
class CrawlerMetadata:
    user_agent: str = ""
    crawled_at: datetime | None = None


@dataclass(frozen=True)
class ScanContext:
    """Input handed to every scanner. Scanners must treat it as read-only."""

    audit_id: str
    site_url: str
    page_url: str | None = None
    page_html: str | None = None
    page_metadata: PageMetadata | None = None
    crawler_metadata: CrawlerMetadata | None = None


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a single GET. ``found`` is true only for 2xx responses."""

    found: bool
    status_code: int | None = None
    content: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    error: str | None = None


@dataclass(frozen=True)
class Evidence:
    """What a scanner saw.

    The named fields are the ones other components read (the profile detector
    reads ``schemas``, the aggregator reads ``access_intent``). Anything only
    the scanner itself cares about goes in ``data``.
    """

    checked_url: str | None = None
    status_code: int | None = None
    error: str | None = None
    issues: list[str] = field(default_factory=list)
    schemas: list[str] = field(default_factory=list)
    access_intent: AccessIntent | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.checked_url is not None:
            out["checked_url"] = self.checked_url
        if self.status_code is not None:
            out["status_code"] = self.status_code
        if self.error is not None:
            out["error"] = self.error
        if self.issues:
            out["issues"] = list(self.issues)
        if self.schemas:
            out["schemas"] = list(self.schemas)
        if self.access_intent is not None:
            out["access_intent"] = self.access_intent
        out.update(self.data)
        return out


@dataclass(frozen=True)
class IndicatorResult:
    """Normalized output of one scanner run."""

    indicator_name: str
    category: IndicatorCategory
    status: IndicatorStatus
    score: float | None = None
    max_score: float = 1.0
    weight: float = 1.0
    message: str = ""
    recommendation: str | None = None
    evidence: Evidence = field(default_factory=Evidence)
    found: bool | None = None
    is_valid: bool | None = None

    @property
    def normalized_score(self) -> float:
        """Score on a 0..1 scale, falling back to the status when no score was given."""
        if self.score is None or self.max_score <= 0:
            return _STATUS_SCORES[self.status]
        return min(1.0, max(0.0, self.score / self.max_score))


@dataclass(frozen=True)
class ProfileDetectionResult:
    profile: SiteProfile
    confidence: float
    method: Literal["declared", "inferred"]
    signals: list[str] = field(default_factory=list)
