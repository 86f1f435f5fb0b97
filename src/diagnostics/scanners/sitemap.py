"""XML sitemap scanner."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from urllib.parse import urlparse

from src.diagnostics.models import Evidence, IndicatorResult, ScanContext

from .base import BaseScanner
from .utils import build_url, parse_robots_txt

logger = logging.getLogger(__name__)

SITEMAP_PATHS: tuple[str, ...] = ("/sitemap.xml", "/sitemap_index.xml")
MAX_URLS = 50_000
MAX_BYTES = 50 * 1024 * 1024
_LOC_SAMPLE = 10


@dataclass
class SitemapValidation:
    url: str
    kind: str = ""
    is_valid: bool = False
    entry_count: int = 0
    issues: list[str] = field(default_factory=list)
    has_lastmod: bool = False
    has_changefreq: bool = False
    has_priority: bool = False


def _localname(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _is_absolute_http(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc) and " " not in url


def validate_sitemap(url: str, content: str) -> SitemapValidation:
    """Check one sitemap document (``urlset`` or ``sitemapindex``)."""
    validation = SitemapValidation(url=url)

    try:
        root = ET.fromstring(content.strip())
    except ET.ParseError as exc:
        validation.issues.append(f"Invalid XML sitemap format: {exc}")
        return validation

    validation.kind = _localname(root.tag)
    if validation.kind == "urlset":
        entry_tag = "url"
    elif validation.kind == "sitemapindex":
        entry_tag = "sitemap"
    else:
        validation.issues.append(f"Unsupported sitemap root element: {validation.kind}")
        return validation

    entries = [child for child in root if _localname(child.tag) == entry_tag]
    validation.entry_count = len(entries)
    if not entries:
        validation.issues.append("Sitemap contains no URLs")
        return validation

    locs: list[str] = []
    for entry in entries:
        for child in entry:
            name = _localname(child.tag)
            if name == "loc" and child.text:
                locs.append(child.text.strip())
            elif name == "lastmod":
                validation.has_lastmod = True
            elif name == "changefreq":
                validation.has_changefreq = True
            elif name == "priority":
                validation.has_priority = True

    for loc in locs[:_LOC_SAMPLE]:
        if not _is_absolute_http(loc):
            validation.issues.append(f"Invalid URL in sitemap: {loc}")

    if validation.entry_count > MAX_URLS:
        validation.issues.append("Sitemap exceeds 50,000 URL limit")
    if len(content.encode("utf-8")) > MAX_BYTES:
        validation.issues.append("Sitemap exceeds 50MB size limit")

    validation.is_valid = not validation.issues
    return validation


class SitemapScanner(BaseScanner):
    name = "sitemap_xml"
    category = "seo"
    description = "Checks for XML sitemap presence and validity"
    weight = 1.0

    async def _discover(self, site_url: str) -> dict[str, str]:
        """Fetch well-known sitemap locations plus robots.txt references."""
        documents: dict[str, str] = {}

        for path in SITEMAP_PATHS:
            url = build_url(site_url, path)
            fetched = await self._fetch(url)
            if fetched.found:
                documents[url] = fetched.content or ""

        robots = await self._fetch(build_url(site_url, "/robots.txt"))
        if robots.found and robots.content:
            for ref in parse_robots_txt(robots.content)["sitemaps"]:
                if ref in documents or not _is_absolute_http(ref):
                    continue
                fetched = await self._fetch(ref)
                if fetched.found:
                    documents[ref] = fetched.content or ""

        return documents

    async def scan(self, context: ScanContext) -> IndicatorResult:
        documents = await self._discover(context.site_url)

        if not documents:
            return self._result(
                "fail",
                0.0,
                message="No XML sitemap found",
                recommendation=(
                    "Create an XML sitemap and reference it in robots.txt for better "
                    "search engine discovery"
                ),
                evidence=Evidence(
                    issues=["No XML sitemap detected"],
                    data={"checked_locations": [*SITEMAP_PATHS, "robots.txt"]},
                ),
                found=False,
                is_valid=False,
            )

        validations = [validate_sitemap(url, content) for url, content in documents.items()]
        total = sum(v.entry_count for v in validations)
        valid = [v for v in validations if v.is_valid]
        issues = [issue for v in validations for issue in v.issues]
        logger.debug(
            "sitemaps validated",
            extra={"site_url": context.site_url, "sitemaps": len(validations), "valid": len(valid)},
        )

        data = {
            "sitemap_urls": list(documents),
            "total_urls": total,
            "valid_sitemaps": len(valid),
            "has_lastmod": any(v.has_lastmod for v in validations),
            "has_changefreq": any(v.has_changefreq for v in validations),
            "has_priority": any(v.has_priority for v in validations),
        }

        if not valid:
            return self._result(
                "fail",
                0.2,
                message="Sitemap found but contains errors",
                recommendation="Fix the validation errors in your XML sitemap",
                evidence=Evidence(issues=issues, data=data),
                found=True,
                is_valid=False,
            )

        has_optional = data["has_lastmod"] or data["has_changefreq"] or data["has_priority"]
        plural = "s" if len(documents) > 1 else ""
        return self._result(
            "warn" if issues else "pass",
            1.0 if has_optional else 0.8,
            message=f"Valid XML sitemap{plural} found with {total} URLs",
            recommendation=(
                "Sitemap is well-structured"
                if has_optional
                else "Consider adding lastmod, changefreq, and priority tags for better SEO"
            ),
            evidence=Evidence(issues=issues, data=data),
            found=True,
            is_valid=not issues,
        )
