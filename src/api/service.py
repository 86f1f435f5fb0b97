"""Service layer: runs diagnostics and describes the scanner catalog for the API routes."""

from __future__ import annotations

import logging

from src.api.schemas import Report, ScannerInfo, ScanRequest
from src.diagnostics.engine import DiagnosticsEngine
from src.diagnostics.scanners.base import describe

logger = logging.getLogger(__name__)


async def run_scan(engine: DiagnosticsEngine, body: ScanRequest) -> Report:
    """Scan the requested pages and return the aggregated report."""
    logger.info(
        "scan requested",
        extra={
            "site_url": body.site_url,
            "pages": len(body.pages),
            "declared_profile": body.declared_profile,
        },
    )
    return await engine.run(body.site_url, body.pages, body.declared_profile)


def list_scanners(engine: DiagnosticsEngine) -> list[ScannerInfo]:
    return [ScannerInfo(**describe(scanner)) for scanner in engine.registry.all()]
