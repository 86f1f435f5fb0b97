"""Diagnostic scanners with a pluggable registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .agents_json import AgentsJsonScanner
from .base import BaseScanner, HtmlScanner, Scanner
from .canonical import CanonicalScanner
from .json_ld import JsonLdScanner
from .llms_txt import LlmsTxtScanner
from .mcp import McpScanner
from .registry import ScannerRegistrationError, ScannerRegistry
from .robots import RobotsScanner
from .seo_basic import SeoBasicScanner
from .sitemap import SitemapScanner

if TYPE_CHECKING:
    from src.config import Settings

__all__ = [
    "AgentsJsonScanner",
    "BaseScanner",
    "CanonicalScanner",
    "HtmlScanner",
    "JsonLdScanner",
    "LlmsTxtScanner",
    "McpScanner",
    "RobotsScanner",
    "Scanner",
    "ScannerRegistrationError",
    "ScannerRegistry",
    "SeoBasicScanner",
    "SitemapScanner",
    "build_default_registry",
]

logger = logging.getLogger(__name__)

_DEFAULT_SCANNERS: tuple[type[BaseScanner], ...] = (
    LlmsTxtScanner,
    AgentsJsonScanner,
    McpScanner,
    RobotsScanner,
    CanonicalScanner,
    SitemapScanner,
    SeoBasicScanner,
    JsonLdScanner,
)


def build_default_registry(settings: Settings) -> ScannerRegistry:
    """Build the default scanner registry with configured fetch settings."""
    registry = ScannerRegistry()
    for scanner_cls in _DEFAULT_SCANNERS:
        registry.register(
            scanner_cls(
                timeout=settings.fetch_timeout_seconds,
                user_agent=settings.user_agent,
                max_redirects=settings.fetch_max_redirects,
            )
        )
    logger.debug("scanner registry built", extra={"scanners": registry.names()})
    return registry
