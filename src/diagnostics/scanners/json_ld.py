"""JSON-LD scanner: grades schema.org structured data embedded in the page."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any

from src.diagnostics.models import Evidence, IndicatorResult, ScanContext

from .base import HtmlScanner
from .utils import extract_json_ld

AI_RELEVANT_TYPES: tuple[str, ...] = (
    "Organization",
    "Corporation",
    "LocalBusiness",
    "WebSite",
    "WebPage",
    "Article",
    "NewsArticle",
    "BlogPosting",
    "Product",
    "Service",
    "FAQPage",
    "HowTo",
    "Recipe",
    "Event",
    "Person",
    "VideoObject",
    "ImageObject",
)


@dataclass
class JsonLdAnalysis:
    found: bool = False
    count: int = 0
    types: list[str] = field(default_factory=list)
    has_organization: bool = False
    has_website: bool = False
    has_webpage: bool = False
    has_breadcrumb: bool = False
    has_product: bool = False
    has_article: bool = False
    validation_issues: list[str] = field(default_factory=list)
    ai_relevant_types: list[str] = field(default_factory=list)


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def _as_type_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def extract_types(obj: Any) -> list[str]:
    """Collect every ``@type`` value in *obj* and its nested objects."""
    types: list[str] = []
    if isinstance(obj, dict):
        types.extend(_as_type_list(obj.get("@type")))
        for value in obj.values():
            if isinstance(value, (dict, list)):
                types.extend(extract_types(value))
    elif isinstance(obj, list):
        for item in obj:
            types.extend(extract_types(item))
    return types


def _validate_node(node: dict[str, Any], *, check_context: bool = True) -> list[str]:
    issues: list[str] = []

    if check_context:
        context = node.get("@context")
        if not context:
            issues.append("Missing @context property")
        elif isinstance(context, str) and "schema.org" not in context:
            issues.append("@context should reference schema.org")

    if not node.get("@type"):
        issues.append("Missing @type property")

    types = _as_type_list(node.get("@type"))

    if any("Organization" in t for t in types):
        if not node.get("name"):
            issues.append("Organization missing name property")
        if not node.get("url"):
            issues.append("Organization missing url property")

    if "WebSite" in types:
        if not node.get("url"):
            issues.append("WebSite missing url property")
        if not node.get("name"):
            issues.append("WebSite missing name property")

    if "Product" in types:
        if not node.get("name"):
            issues.append("Product missing name property")
        if not node.get("description"):
            issues.append("Product missing description property")

    if any("Article" in t for t in types) or "BlogPosting" in types:
        for prop in ("headline", "author", "datePublished"):
            if not node.get(prop):
                issues.append(f"Article missing {prop} property")

    return issues


def validate_block(block: Any) -> list[str]:
    """Structural issues for one JSON-LD block.

    Top-level arrays are validated item by item. ``@graph`` containers carry
    the ``@context`` for their nodes, so nodes inside are not expected to
    repeat it.
    """
    if isinstance(block, list):
        issues: list[str] = []
        for item in block:
            issues.extend(validate_block(item))
        return issues
    if not isinstance(block, dict):
        return []

    graph = block.get("@graph")
    if isinstance(graph, list):
        issues = []
        context = block.get("@context")
        if not context:
            issues.append("Missing @context property")
        elif isinstance(context, str) and "schema.org" not in context:
            issues.append("@context should reference schema.org")
        for node in graph:
            if isinstance(node, dict):
                issues.extend(_validate_node(node, check_context=False))
        return issues

    return _validate_node(block)


def analyze_json_ld(blocks: list[Any]) -> JsonLdAnalysis:
    analysis = JsonLdAnalysis(found=bool(blocks), count=len(blocks))

    for block in blocks:
        types = extract_types(block)
        analysis.types.extend(types)

        for t in types:
            if "Organization" in t or "Corporation" in t:
                analysis.has_organization = True
            if t == "WebSite":
                analysis.has_website = True
            if t == "WebPage":
                analysis.has_webpage = True
            if t == "BreadcrumbList":
                analysis.has_breadcrumb = True
            if t == "Product":
                analysis.has_product = True
            if "Article" in t or t == "BlogPosting":
                analysis.has_article = True
            if any(ai_type in t for ai_type in AI_RELEVANT_TYPES):
                analysis.ai_relevant_types.append(t)

        analysis.validation_issues.extend(validate_block(block))

    analysis.types = _dedupe(analysis.types)
    analysis.ai_relevant_types = _dedupe(analysis.ai_relevant_types)
    analysis.validation_issues = _dedupe(analysis.validation_issues)
    return analysis


def score_json_ld(analysis: JsonLdAnalysis) -> int:
    """Integer score on a 0..10 scale."""
    score = 0.0
    if analysis.found:
        score += 5
    if analysis.has_organization or analysis.has_website:
        score += 3
    if analysis.has_webpage or analysis.has_breadcrumb:
        score += 1
    if analysis.has_product or analysis.has_article:
        score += 2
    score += min(3, len(analysis.ai_relevant_types))
    if analysis.count > 1:
        score += 1

    if analysis.validation_issues:
        # partial article metadata is common, so article issues cost half
        lenient = any("Article" in issue for issue in analysis.validation_issues)
        penalty = 0.5 if lenient else 1.0
        score -= min(4, len(analysis.validation_issues) * penalty)

    return max(0, min(10, math.floor(score + 0.5)))


def _message(analysis: JsonLdAnalysis) -> str:
    if analysis.validation_issues:
        return (
            f"Found {len(analysis.types)} structured data types with "
            f"{len(analysis.validation_issues)} validation issues"
        )
    if analysis.ai_relevant_types:
        return f"Excellent structured data with {len(analysis.ai_relevant_types)} AI-relevant types"
    return f"Basic structured data found with {len(analysis.types)} types"


def _recommendation(analysis: JsonLdAnalysis) -> str:
    recs: list[str] = []
    if not analysis.has_organization and not analysis.has_website:
        recs.append("Add Organization or WebSite schema for better brand recognition")
    if not analysis.has_breadcrumb:
        recs.append("Consider adding BreadcrumbList for better navigation context")
    if analysis.validation_issues:
        recs.append(f"Fix validation issues: {', '.join(analysis.validation_issues[:3])}")
    if not analysis.ai_relevant_types:
        recs.append("Consider using AI-relevant schema types like Article, Product, or FAQPage")
    if not recs:
        return "Structured data is well-implemented for AI agents"
    return ". ".join(recs)


class JsonLdScanner(HtmlScanner):
    name = "json_ld"
    category = "structured_data"
    description = "Analyzes JSON-LD structured data for search engine and AI understanding"
    weight = 2.0
    max_score = 10.0

    async def scan(self, context: ScanContext) -> IndicatorResult:
        if not context.page_html:
            return self._no_html("JSON-LD analysis")

        analysis = analyze_json_ld(extract_json_ld(context.page_html))
        evidence = Evidence(
            checked_url=context.page_url,
            issues=analysis.validation_issues,
            schemas=analysis.types,
            data=asdict(analysis),
        )

        if not analysis.found:
            return self._result(
                "fail",
                0,
                message="No JSON-LD structured data found",
                recommendation=(
                    "Add JSON-LD structured data to help search engines and AI agents "
                    "understand your content"
                ),
                evidence=evidence,
                found=False,
                is_valid=False,
            )

        score = score_json_ld(analysis)
        if score >= 8:
            status = "pass"
        elif score >= 3:
            status = "warn"
        else:
            status = "fail"

        return self._result(
            status,
            score,
            message=_message(analysis),
            recommendation=_recommendation(analysis),
            evidence=evidence,
            found=True,
            is_valid=not analysis.validation_issues,
        )
