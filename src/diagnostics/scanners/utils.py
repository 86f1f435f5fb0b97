"""Fetch and parse helpers used by the scanners."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from src.diagnostics.models import FetchResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_USER_AGENT = "ai-readiness-diagnostics/0.1.0"

_VALID_SCHEMES = {"http", "https"}


async def fetch_url(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
) -> FetchResult:
    """GET *url* and report what came back. Never raises.

    *timeout* bounds the whole request, body included.
    """
    try:
        async with asyncio.timeout(timeout), httpx.AsyncClient(
            follow_redirects=True,
            max_redirects=max_redirects,
            headers={"User-Agent": user_agent},
        ) as client:
            resp = await client.get(url, timeout=timeout)
    except Exception as exc:
        logger.debug("fetch failed", extra={"url": url, "error": str(exc)})
        return FetchResult(found=False, error=str(exc) or type(exc).__name__)

    found = 200 <= resp.status_code < 300
    logger.debug("fetched", extra={"url": url, "status_code": resp.status_code})
    return FetchResult(
        found=found,
        status_code=resp.status_code,
        content=resp.text,
        headers=dict(resp.headers),
    )


def build_url(base_url: str, path: str) -> str:
    """Resolve *path* against *base_url*, allowing only http(s) results."""
    url = urljoin(base_url, path)
    parsed = urlparse(url)
    if parsed.scheme not in _VALID_SCHEMES or not parsed.netloc:
        raise ValueError(f"Invalid URL: {url!r}")
    return url


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def extract_meta_tags(html: str) -> dict[str, str]:
    """Collect ``<meta name|property=... content=...>`` pairs plus the page title."""
    soup = _soup(html)
    tags: dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = meta.get("name") or meta.get("property")
        content = meta.get("content")
        if key and content is not None:
            tags[key.strip().lower()] = content.strip()
    if soup.title and soup.title.string:
        tags["title"] = soup.title.string.strip()
    return tags


def extract_json_ld(html: str) -> list[Any]:
    """Return every parseable JSON-LD block in document order.

    Blocks that are not valid JSON are dropped: a broken block is treated
    as absent, not as a validation issue.
    """
    soup = _soup(html)
    blocks: list[Any] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text() or ""
        raw = raw.strip()
        if not raw:
            continue
        try:
            blocks.append(json.loads(raw))
        except json.JSONDecodeError:
            logger.debug("skipping invalid json-ld block", extra={"length": len(raw)})
    return blocks


def extract_robots_meta(html: str) -> dict[str, bool]:
    """Read standard and AI-specific directives from robots meta tags."""
    meta = extract_meta_tags(html)
    robots = meta.get("robots", "").lower()
    robots_ai = meta.get("robots-ai", "").lower()
    return {
        "noindex": "noindex" in robots,
        "nofollow": "nofollow" in robots,
        "noai": "noai" in robots or "noai" in robots_ai,
        "noimageai": "noimageai" in robots or "noimageai" in robots_ai,
    }


def parse_robots_txt(content: str) -> dict[str, Any]:
    """Parse robots.txt into per-agent allow/disallow lists and sitemap URLs.

    Rules that appear before any ``User-agent`` line are ignored, matching
    how crawlers read the file.
    """
    user_agents: dict[str, dict[str, list[str]]] = {}
    sitemaps: list[str] = []
    crawl_delay: float | None = None
    current: str | None = None

    for raw_line in content.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line or ":" not in line:
            continue
        directive, value = line.split(":", 1)
        directive = directive.strip().lower()
        value = value.strip()

        if directive == "user-agent":
            current = value
            user_agents.setdefault(current, {"allow": [], "disallow": []})
        elif directive in ("allow", "disallow"):
            if value and current is not None:
                user_agents[current][directive].append(value)
        elif directive == "sitemap":
            if value:
                sitemaps.append(value)
        elif directive == "crawl-delay":
            try:
                crawl_delay = float(value)
            except ValueError:
                pass

    return {"user_agents": user_agents, "sitemaps": sitemaps, "crawl_delay": crawl_delay}


def missing_fields(data: dict[str, Any], required: list[str]) -> list[str]:
    return [name for name in required if name not in data]
