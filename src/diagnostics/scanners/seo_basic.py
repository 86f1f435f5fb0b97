"""Basic on-page SEO scanner: title, meta description, headings, Open Graph."""

from __future__ import annotations

import math
from typing import Any

from bs4 import BeautifulSoup

from src.diagnostics.models import Evidence, IndicatorResult, ScanContext

from .base import HtmlScanner
from .utils import extract_meta_tags

OG_TAGS = ("og:title", "og:description", "og:image", "og:url")
_MAX_POINTS = 10


def _length_check(text: str, low: int, high: int, label: str) -> dict[str, Any]:
    if not text.strip():
        return {"exists": False, "text": "", "optimal": False, "issue": f"Missing {label}"}
    length = len(text)
    issue = None
    if length < low:
        issue = f"{label[0].upper()}{label[1:]} too short (< {low} characters)"
    elif length > high:
        issue = f"{label[0].upper()}{label[1:]} too long (> {high} characters)"
    return {"exists": True, "text": text, "length": length, "optimal": issue is None, "issue": issue}


def analyze_headings(soup: BeautifulSoup) -> dict[str, Any]:
    structure: list[str] = []
    h1_count = 0
    for heading in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
        if heading.name == "h1":
            h1_count += 1
        text = heading.get_text(" ", strip=True)
        if text:
            short = text[:50] + ("..." if len(text) > 50 else "")
            structure.append(f"{heading.name.upper()}: {short}")

    issue = None
    if h1_count == 0:
        issue = "No H1 tag found"
    elif h1_count > 1:
        issue = f"Multiple H1 tags found ({h1_count})"
    return {"h1_count": h1_count, "has_h1": h1_count > 0, "structure": structure[:10], "issue": issue}


def analyze_seo(html: str) -> dict[str, Any]:
    meta = extract_meta_tags(html)
    soup = BeautifulSoup(html, "html.parser")
    missing_og = [tag for tag in OG_TAGS if not meta.get(tag)]
    return {
        "title": _length_check(meta.get("title", ""), 30, 60, "title tag"),
        "meta_description": _length_check(meta.get("description", ""), 120, 160, "meta description"),
        "headings": analyze_headings(soup),
        "open_graph": {"has_basic_og": not missing_og, "missing_tags": missing_og},
    }


def score_seo(analysis: dict[str, Any]) -> int:
    """Score on a 0..10 scale."""
    points = 0.0
    for key in ("title", "meta_description"):
        if analysis[key]["exists"]:
            points += 3 if analysis[key]["optimal"] else 1.5

    headings = analysis["headings"]
    if headings["h1_count"] == 1:
        points += 2
    elif headings["has_h1"]:
        points += 1

    og = analysis["open_graph"]
    if og["has_basic_og"]:
        points += 2
    elif len(og["missing_tags"]) <= 2:
        points += 1

    return math.floor(points / _MAX_POINTS * 10 + 0.5)


def _message(analysis: dict[str, Any]) -> str:
    problems: list[str] = []
    title, desc, headings = analysis["title"], analysis["meta_description"], analysis["headings"]
    if not title["exists"]:
        problems.append("missing title")
    elif not title["optimal"]:
        problems.append("suboptimal title length")
    if not desc["exists"]:
        problems.append("missing meta description")
    elif not desc["optimal"]:
        problems.append("suboptimal meta description length")
    if not headings["has_h1"]:
        problems.append("missing H1")
    elif headings["h1_count"] > 1:
        problems.append("multiple H1 tags")
    if not analysis["open_graph"]["has_basic_og"]:
        problems.append("incomplete Open Graph tags")

    if not problems:
        return "Excellent SEO implementation"
    if len(problems) <= 2:
        return f"Good SEO with minor issues: {', '.join(problems)}"
    return f"SEO needs improvement: {', '.join(problems)}"


def _issues(analysis: dict[str, Any]) -> list[str]:
    issues = [
        analysis[key]["issue"]
        for key in ("title", "meta_description", "headings")
        if analysis[key]["issue"]
    ]
    missing = analysis["open_graph"]["missing_tags"]
    if missing:
        issues.append(f"Add missing Open Graph tags: {', '.join(missing)}")
    return issues


class SeoBasicScanner(HtmlScanner):
    name = "seo_basic"
    category = "seo"
    description = "Analyzes basic SEO elements including title, meta description, and headings"
    weight = 1.5
    max_score = 10.0

    async def scan(self, context: ScanContext) -> IndicatorResult:
        if not context.page_html:
            return self._no_html("SEO analysis")

        analysis = analyze_seo(context.page_html)
        score = score_seo(analysis)
        if score >= 8:
            status = "pass"
        elif score >= 5:
            status = "warn"
        else:
            status = "fail"

        issues = _issues(analysis)
        return self._result(
            status,
            score,
            message=_message(analysis),
            recommendation=". ".join(issues) if issues else "SEO elements are well-optimized",
            evidence=Evidence(checked_url=context.page_url, issues=issues, data=analysis),
            found=True,
            is_valid=not issues,
        )
