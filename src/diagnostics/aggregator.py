"""Report aggregation: per-page indicator results in, weighted site report out."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

from src.api.schemas import (
    ApplicabilityInfo,
    CategoryScore,
    CategoryWeights,
    CriticalIssue,
    IndicatorReport,
    OverallScore,
    ProfileDetection,
    Recommendation,
    Report,
    ReportSummary,
    SiteInfo,
)
from src.diagnostics.applicability import CATEGORY_MEMBERSHIP, Applicability, ApplicabilityMatrix
from src.diagnostics.models import (
    REPORT_CATEGORIES,
    IndicatorResult,
    ReportCategory,
    SiteProfile,
)
from src.diagnostics.profile import SiteProfileDetector, display_name

logger = logging.getLogger(__name__)

CATEGORY_WEIGHTS = CategoryWeights(discovery=0.30, understanding=0.30, actions=0.25, trust=0.15)
MAX_CRITICAL_ISSUES = 5
MAX_RECOMMENDATIONS = 5
AI_CATEGORIES = ("standards", "structured_data")

# worst first
_STATUS_RANK = {"fail": 0, "warn": 1, "pass": 2, "not_applicable": 3}


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def readiness_level(percent: float, thresholds: tuple[int, int, int]) -> str:
    excellent, good, needs_improvement = thresholds
    if percent >= excellent:
        return "excellent"
    if percent >= good:
        return "good"
    if percent >= needs_improvement:
        return "needs_improvement"
    return "poor"


def recommendation_priority(status: str, weight: float) -> str:
    if status == "fail" and weight >= 2.0:
        return "high"
    if status == "fail" or (status == "warn" and weight >= 2.0):
        return "medium"
    return "low"


def _representatives(results: Sequence[IndicatorResult]) -> dict[str, IndicatorResult]:
    """The worst-status result per indicator name, first seen on ties."""
    reps: dict[str, IndicatorResult] = {}
    for result in results:
        current = reps.get(result.indicator_name)
        if current is None or _STATUS_RANK[result.status] < _STATUS_RANK[current.status]:
            reps[result.indicator_name] = result
    return reps


def _percent(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole else 0


class ReportAggregator:
    """Build a ``Report`` from the indicator results of every scanned page.

    Pure and synchronous: given the same results and declared profile it
    produces the same categories and overall score. Only ``scan_date``
    depends on the clock.
    """

    def __init__(
        self,
        detector: SiteProfileDetector | None = None,
        matrix: ApplicabilityMatrix | None = None,
        *,
        critical_weight_threshold: float = 2.0,
    ) -> None:
        self._detector = detector or SiteProfileDetector()
        self._matrix = matrix or ApplicabilityMatrix()
        self._critical_weight_threshold = critical_weight_threshold

    def aggregate(
        self,
        site_url: str,
        page_results_by_url: Mapping[str, Sequence[IndicatorResult]],
        declared_profile: SiteProfile | None = None,
        audit_id: str = "",
    ) -> Report:
        page_urls = list(page_results_by_url)
        results = [r for page in page_results_by_url.values() for r in page]

        detection = self._detector.detect_profile(results, page_urls, declared_profile)
        profile = detection.profile

        applicability: dict[str, Applicability] = {
            name: self._matrix.get(name, profile)
            for name in dict.fromkeys(r.indicator_name for r in results)
        }
        scored = [
            r
            for r in results
            if r.status != "not_applicable" and applicability[r.indicator_name].included_in_category_math
        ]

        categories = {cat: self._category_score(cat, scored) for cat in REPORT_CATEGORIES}
        raw = sum(categories[cat].score * getattr(CATEGORY_WEIGHTS, cat) for cat in REPORT_CATEGORIES)
        raw = min(1.0, max(0.0, raw))
        score100 = round_half_up(raw * 100)

        report = Report(
            site=SiteInfo(
                url=site_url,
                audit_id=audit_id,
                scan_date=datetime.now(timezone.utc).date().isoformat(),
                profile=profile,
                profile_name=display_name(profile),
                profile_detection=ProfileDetection(
                    confidence=detection.confidence,
                    method=detection.method,
                    signals=list(detection.signals),
                ),
                access_intent=self._access_intent(results),
                pages_scanned=len(page_urls),
            ),
            categories=categories,
            indicators=self._indicators(results, applicability),
            weights=CATEGORY_WEIGHTS,
            overall=OverallScore(
                raw=raw,
                score100=score100,
                ai_readiness=readiness_level(score100, (90, 70, 50)),
            ),
            summary=self._summary(scored),
        )

        logger.info(
            "report aggregated",
            extra={
                "audit_id": audit_id,
                "site_url": site_url,
                "profile": profile,
                "profile_method": detection.method,
                "results": len(results),
                "scored": len(scored),
                "score100": score100,
            },
        )
        return report

    def _category_score(self, category: ReportCategory, scored: Sequence[IndicatorResult]) -> CategoryScore:
        members = CATEGORY_MEMBERSHIP[category]
        in_category = [r for r in scored if r.indicator_name in members]

        per_indicator: dict[str, list[float]] = {}
        for result in in_category:
            per_indicator.setdefault(result.indicator_name, []).append(result.normalized_score)

        return CategoryScore(
            category=category,
            score=_mean([r.normalized_score for r in in_category]),
            indicator_count=len(in_category),
            passed_count=sum(1 for r in in_category if r.status == "pass"),
            warning_count=sum(1 for r in in_category if r.status == "warn"),
            failed_count=sum(1 for r in in_category if r.status == "fail"),
            indicator_scores={name: _mean(scores) for name, scores in per_indicator.items()},
        )

    def _indicators(
        self,
        results: Sequence[IndicatorResult],
        applicability: Mapping[str, Applicability],
    ) -> dict[str, IndicatorReport]:
        grouped: dict[str, list[IndicatorResult]] = {}
        for result in results:
            grouped.setdefault(result.indicator_name, []).append(result)

        indicators: dict[str, IndicatorReport] = {}
        for name, group in grouped.items():
            rep = _representatives(group)[name]
            applies = applicability[name]
            counted = [r.normalized_score for r in group if r.status != "not_applicable"]
            indicators[name] = IndicatorReport(
                name=name,
                status=rep.status,
                score=_mean(counted),
                weight=rep.weight,
                result_count=len(group),
                applicability=ApplicabilityInfo(
                    status=applies.status,
                    reason=applies.reason,
                    included_in_category_math=applies.included_in_category_math,
                ),
                message=rep.message,
                recommendation=rep.recommendation,
                evidence=rep.evidence.to_dict(),
            )
        return indicators

    def _summary(self, scored: Sequence[IndicatorResult]) -> ReportSummary:
        reps = list(_representatives(scored).values())
        by_weight = sorted(reps, key=lambda r: r.weight, reverse=True)

        critical = [
            CriticalIssue(
                indicator_name=r.indicator_name,
                category=r.category,
                severity="critical" if r.weight >= 2.5 else "high",
                message=r.message or f"{r.indicator_name} failed",
            )
            for r in by_weight
            if r.status == "fail" and r.weight >= self._critical_weight_threshold
        ][:MAX_CRITICAL_ISSUES]

        recommendations = [
            Recommendation(
                indicator_name=r.indicator_name,
                category=r.category,
                priority=recommendation_priority(r.status, r.weight),
                recommendation=r.recommendation,
            )
            for r in by_weight
            if r.recommendation and r.status in ("fail", "warn")
        ][:MAX_RECOMMENDATIONS]

        passed = sum(1 for r in reps if r.status == "pass")
        ai_reps = [r for r in reps if r.category in AI_CATEGORIES]
        completion = _percent(passed, len(reps))

        return ReportSummary(
            total_indicators=len(reps),
            passed_indicators=passed,
            warning_indicators=sum(1 for r in reps if r.status == "warn"),
            failed_indicators=sum(1 for r in reps if r.status == "fail"),
            critical_issues=critical,
            recommendations=recommendations,
            completion_percentage=completion,
            ai_readiness_percentage=_percent(sum(1 for r in ai_reps if r.status == "pass"), len(ai_reps)),
            compliance_level=readiness_level(completion, (90, 75, 50)),
        )

    @staticmethod
    def _access_intent(results: Sequence[IndicatorResult]) -> str:
        for result in results:
            if result.indicator_name == "robots_txt" and result.evidence.access_intent:
                return result.evidence.access_intent
        return "allow"
