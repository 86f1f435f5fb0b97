"""Scanner registry with failure-isolated concurrent execution."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from src.diagnostics.models import Evidence, IndicatorResult, ScanContext

if TYPE_CHECKING:
    from .base import Scanner

logger = logging.getLogger(__name__)


class ScannerRegistrationError(ValueError):
    """Raised when a scanner name is registered twice."""


class ScannerRegistry:
    """Catalog of scanner instances keyed by indicator name."""

    def __init__(self) -> None:
        self._scanners: dict[str, Scanner] = {}

    def register(self, scanner: Scanner) -> None:
        """Add *scanner*. Names must be unique."""
        if scanner.name in self._scanners:
            raise ScannerRegistrationError(f"Scanner {scanner.name} is already registered")
        self._scanners[scanner.name] = scanner

    def unregister(self, name: str) -> None:
        self._scanners.pop(name, None)

    def get(self, name: str) -> Scanner | None:
        return self._scanners.get(name)

    def all(self) -> list[Scanner]:
        return list(self._scanners.values())

    def names(self) -> list[str]:
        return list(self._scanners)

    def by_category(self, category: str) -> list[Scanner]:
        return [s for s in self._scanners.values() if s.category == category]

    def clear(self) -> None:
        self._scanners.clear()

    def __len__(self) -> int:
        return len(self._scanners)

    async def run_all(self, context: ScanContext) -> list[IndicatorResult]:
        """Run every applicable scanner concurrently.

        A scanner whose applicability check or scan raises is reported as a ``fail`` result instead of
        aborting the batch, so the output always has one entry per
        applicable scanner, in registration order.
        """
        return await self._run(self.all(), context)

    async def run_by_category(self, category: str, context: ScanContext) -> list[IndicatorResult]:
        return await self._run(self.by_category(category), context)

    async def _run(self, scanners: list[Scanner], context: ScanContext) -> list[IndicatorResult]:
        outcomes = await asyncio.gather(*(self._run_one(s, context) for s in scanners))
        results = [r for r in outcomes if r is not None]
        logger.debug(
            "ran scanners",
            extra={
                "audit_id": context.audit_id,
                "page_url": context.page_url,
                "applicable": [r.indicator_name for r in results],
                "skipped": len(scanners) - len(results),
            },
        )
        return results

    async def _run_one(self, scanner: Scanner, context: ScanContext) -> IndicatorResult | None:
        try:
            if not scanner.is_applicable(context):
                return None
            return await scanner.scan(context)
        except Exception as exc:
            logger.warning(
                "scanner failed",
                extra={"scanner": scanner.name, "audit_id": context.audit_id, "page_url": context.page_url},
                exc_info=True,
            )
            error = str(exc) or type(exc).__name__
            return IndicatorResult(
                indicator_name=scanner.name,
                category=scanner.category,
                status="fail",
                score=0.0,
                weight=scanner.weight,
                message=f"Scanner failed: {error}",
                evidence=Evidence(error=error),
                found=False,
                is_valid=False,
            )
