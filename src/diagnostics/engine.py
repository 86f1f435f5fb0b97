"""Diagnostics engine: scans the supplied pages concurrently, then aggregates."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from src.api.schemas import PageInput, Report
from src.config import Settings
from src.diagnostics.aggregator import ReportAggregator
from src.diagnostics.applicability import ApplicabilityMatrix
from src.diagnostics.models import (
    CrawlerMetadata,
    IndicatorResult,
    PageMetadata,
    ScanContext,
    SiteProfile,
)
from src.diagnostics.profile import SiteProfileDetector
from src.diagnostics.scanners import ScannerRegistry, build_default_registry

logger = logging.getLogger(__name__)


class DiagnosticsEngine:
    """Runs every registered scanner over each page and builds one report per site."""

    def __init__(self, settings: Settings, registry: ScannerRegistry | None = None) -> None:
        self._settings = settings
        self.registry = registry if registry is not None else build_default_registry(settings)
        self.aggregator = ReportAggregator(
            SiteProfileDetector(),
            ApplicabilityMatrix(),
            critical_weight_threshold=settings.critical_weight_threshold,
        )

    async def scan_page(self, audit_id: str, site_url: str, page: PageInput) -> list[IndicatorResult]:
        context = ScanContext(
            audit_id=audit_id,
            site_url=site_url,
            page_url=page.url,
            page_html=page.html,
            page_metadata=PageMetadata(
                title=page.title,
                meta_description=page.meta_description,
                status_code=page.status_code,
                load_time_ms=page.load_time_ms,
                word_count=page.word_count,
            ),
            crawler_metadata=CrawlerMetadata(
                user_agent=self._settings.user_agent,
                crawled_at=datetime.now(timezone.utc),
            ),
        )
        return await self.registry.run_all(context)

    async def run(
        self,
        site_url: str,
        pages: Sequence[PageInput],
        declared_profile: SiteProfile | None = None,
    ) -> Report:
        """Scan *pages* (at most ``max_pages``) and aggregate them into a report.

        With no pages the site root is scanned without HTML, so only the
        site-level checks produce results.
        """
        audit_id = uuid.uuid4().hex[:12]
        selected = list(pages[: self._settings.max_pages]) or [PageInput(url=site_url)]
        started = time.monotonic()

        logger.info(
            "diagnostics scan started",
            extra={
                "audit_id": audit_id,
                "site_url": site_url,
                "pages": len(selected),
                "pages_dropped": max(0, len(pages) - len(selected)),
                "declared_profile": declared_profile,
            },
        )

        semaphore = asyncio.Semaphore(self._settings.max_concurrent_pages)

        async def bounded(page: PageInput) -> list[IndicatorResult]:
            async with semaphore:
                return await self.scan_page(audit_id, site_url, page)

        page_results = await asyncio.gather(*(bounded(page) for page in selected))

        # later duplicates of a page URL are merged into the first
        results_by_url: dict[str, list[IndicatorResult]] = {}
        for page, results in zip(selected, page_results):
            results_by_url.setdefault(page.url, []).extend(results)

        report = self.aggregator.aggregate(site_url, results_by_url, declared_profile, audit_id=audit_id)

        logger.info(
            "diagnostics scan completed",
            extra={
                "audit_id": audit_id,
                "site_url": site_url,
                "score100": report.overall.score100,
                "profile": report.site.profile,
                "elapsed_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return report
