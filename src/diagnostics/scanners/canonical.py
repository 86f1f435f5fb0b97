"""Canonical URL scanner."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlparse

from bs4 import BeautifulSoup

from src.diagnostics.models import Evidence, IndicatorResult, ScanContext

from .base import HtmlScanner
from .utils import extract_meta_tags

ACCEPTABLE_QUERY_PARAMS = {"page", "sort", "category", "tag"}
_INDEX_FILES = ("index.html", "index.php")


def extract_canonical_url(html: str) -> str | None:
    soup = BeautifulSoup(html, "html.parser")
    for link in soup.find_all("link", href=True):
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if "canonical" in (r.lower() for r in rel):
            return link["href"].strip()
    return None


def validate_canonical_url(canonical: str) -> list[str]:
    issues: list[str] = []
    parsed = urlparse(canonical)

    if not parsed.scheme or not parsed.netloc:
        issues.append("Canonical URL must be absolute (include protocol and domain)")
    else:
        if parsed.scheme not in ("http", "https"):
            issues.append("Invalid protocol (must be http or https)")
        params = {key.lower() for key, _ in parse_qsl(parsed.query, keep_blank_values=True)}
        if params - ACCEPTABLE_QUERY_PARAMS:
            issues.append("Contains potentially problematic query parameters")

    if " " in canonical:
        issues.append("URL contains spaces")
    if canonical.endswith(_INDEX_FILES):
        issues.append("Avoid including index files in canonical URLs")
    return issues


def check_og_consistency(canonical: str, og_url: str | None) -> str | None:
    """Return a description of the mismatch, or None when consistent."""
    if not og_url:
        return None
    a, b = urlparse(canonical), urlparse(og_url)
    if not b.scheme or not b.netloc:
        return "Invalid URL format in canonical or og:url"
    if a.hostname != b.hostname:
        return "Different domains in canonical and og:url"
    if a.path.rstrip("/") != b.path.rstrip("/"):
        return "Different paths in canonical and og:url"
    return None


class CanonicalScanner(HtmlScanner):
    name = "canonical_urls"
    category = "seo"
    description = "Validates canonical URL implementation for proper content indexing"
    weight = 1.0

    async def scan(self, context: ScanContext) -> IndicatorResult:
        if not context.page_html:
            return self._no_html("canonical URL analysis")

        canonical = extract_canonical_url(context.page_html)
        if not canonical:
            return self._result(
                "warn",
                0.3,
                message="No canonical URL specified",
                recommendation="Add a canonical URL link tag to prevent duplicate content issues",
                evidence=Evidence(checked_url=context.page_url),
                found=False,
                is_valid=False,
            )

        issues = validate_canonical_url(canonical)
        if issues:
            return self._result(
                "fail",
                0.0,
                message="Invalid canonical URL implementation",
                recommendation=f"Fix canonical URL issues: {', '.join(issues)}",
                evidence=Evidence(
                    checked_url=context.page_url,
                    issues=issues,
                    data={"canonical_url": canonical},
                ),
                found=True,
                is_valid=False,
            )

        og_url = extract_meta_tags(context.page_html).get("og:url")
        mismatch = check_og_consistency(canonical, og_url)
        if mismatch:
            return self._result(
                "warn",
                0.7,
                message="Canonical URL inconsistency detected",
                recommendation="Ensure canonical URL and og:url meta tag are consistent",
                evidence=Evidence(
                    checked_url=context.page_url,
                    issues=[mismatch],
                    data={"canonical_url": canonical, "og_url": og_url},
                ),
                found=True,
                is_valid=True,
            )

        return self._result(
            "pass",
            1.0,
            message="Proper canonical URL implementation",
            evidence=Evidence(
                checked_url=context.page_url,
                data={"canonical_url": canonical, "matches_og_url": og_url is not None},
            ),
            found=True,
            is_valid=True,
        )
