"""Request/response Pydantic models."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

SiteProfileName = Literal[
    "blog_content",
    "ecommerce",
    "saas_app",
    "kb_support",
    "gov_nontransacting",
    "custom",
]
Priority = Literal["high", "medium", "low"]
ReadinessLevel = Literal["excellent", "good", "needs_improvement", "poor"]

_FROZEN = {"frozen": True}


class PageInput(BaseModel):
    url: str
    html: str | None = None
    title: str = ""
    meta_description: str = ""
    status_code: int | None = None
    load_time_ms: int | None = None
    word_count: int | None = None


class ScanRequest(BaseModel):
    site_url: str
    pages: list[PageInput] = []
    declared_profile: SiteProfileName | None = None

    @field_validator("site_url")
    @classmethod
    def _http_only(cls, value: str) -> str:
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError("Only HTTP and HTTPS URLs are allowed")
        return value


class ScannerInfo(BaseModel):
    name: str
    category: str
    description: str
    weight: float


class ApplicabilityInfo(BaseModel):
    model_config = _FROZEN

    status: Literal["required", "optional", "not_applicable"]
    reason: str
    included_in_category_math: bool


class IndicatorReport(BaseModel):
    model_config = _FROZEN

    name: str
    status: str
    score: float
    weight: float
    result_count: int
    applicability: ApplicabilityInfo
    message: str = ""
    recommendation: str | None = None
    evidence: dict[str, Any] = {}


class CategoryScore(BaseModel):
    model_config = _FROZEN

    category: str
    score: float
    # per-page results counted, matching passed/warning/failed counts
    indicator_count: int = 0
    passed_count: int = 0
    warning_count: int = 0
    failed_count: int = 0
    indicator_scores: dict[str, float] = {}


class CategoryWeights(BaseModel):
    model_config = _FROZEN

    discovery: float = 0.30
    understanding: float = 0.30
    actions: float = 0.25
    trust: float = 0.15


class OverallScore(BaseModel):
    model_config = _FROZEN

    raw: float
    score100: int
    ai_readiness: ReadinessLevel


class ProfileDetection(BaseModel):
    model_config = _FROZEN

    confidence: float
    method: Literal["declared", "inferred"]
    signals: list[str] = []


class SiteInfo(BaseModel):
    model_config = _FROZEN

    url: str
    audit_id: str = ""
    scan_date: str
    profile: SiteProfileName
    profile_name: str
    profile_detection: ProfileDetection
    access_intent: Literal["allow", "partial", "block"] = "allow"
    pages_scanned: int = 0


class CriticalIssue(BaseModel):
    model_config = _FROZEN

    indicator_name: str
    category: str
    severity: Literal["critical", "high"]
    message: str


class Recommendation(BaseModel):
    model_config = _FROZEN

    indicator_name: str
    category: str
    priority: Priority
    recommendation: str


class ReportSummary(BaseModel):
    model_config = _FROZEN

    total_indicators: int = 0
    passed_indicators: int = 0
    warning_indicators: int = 0
    failed_indicators: int = 0
    critical_issues: list[CriticalIssue] = []
    recommendations: list[Recommendation] = []
    completion_percentage: int = 0
    ai_readiness_percentage: int = 0
    compliance_level: ReadinessLevel = "poor"


class Report(BaseModel):
    model_config = _FROZEN

    site: SiteInfo
    categories: dict[str, CategoryScore]
    indicators: dict[str, IndicatorReport] = {}
    weights: CategoryWeights = Field(default_factory=CategoryWeights)
    overall: OverallScore
    summary: ReportSummary = Field(default_factory=ReportSummary)
