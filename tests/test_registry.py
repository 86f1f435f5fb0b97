"""Scanner registry tests: registration, lookup and failure-isolated runs."""

import asyncio
from unittest.mock import MagicMock

import pytest

from src.diagnostics.models import IndicatorResult
from src.diagnostics.scanners import ScannerRegistrationError, ScannerRegistry, build_default_registry
from src.diagnostics.scanners.base import BaseScanner, HtmlScanner
from tests.helpers import make_context


class _Static(BaseScanner):
    def __init__(self, name, category="standards", status="pass", delay=0.0):
        super().__init__()
        self.name = name
        self.category = category
        self._status = status
        self._delay = delay

    async def scan(self, context):
        await asyncio.sleep(self._delay)
        return self._result(self._status, 1.0 if self._status == "pass" else 0.0)


class _Exploding(BaseScanner):
    name = "exploding"
    weight = 2.0

    async def scan(self, context):
        raise RuntimeError("boom")


class _BadApplicability(BaseScanner):
    name = "bad_check"
    weight = 1.5

    def is_applicable(self, context):
        raise KeyError("page_metadata")

    async def scan(self, context):
        return self._result("pass", 1.0)


class _HtmlOnly(HtmlScanner):
    name = "html_only"

    async def scan(self, context):
        return self._result("pass", 1.0)


def test_register_and_lookup():
    registry = ScannerRegistry()
    scanner = _Static("a")
    registry.register(scanner)

    assert registry.get("a") is scanner
    assert registry.get("missing") is None
    assert registry.names() == ["a"]
    assert len(registry) == 1


def test_duplicate_registration_raises():
    registry = ScannerRegistry()
    registry.register(_Static("a"))

    with pytest.raises(ScannerRegistrationError, match="already registered"):
        registry.register(_Static("a"))
    assert issubclass(ScannerRegistrationError, ValueError)


def test_unregister_and_clear():
    registry = ScannerRegistry()
    registry.register(_Static("a"))
    registry.register(_Static("b"))

    registry.unregister("a")
    registry.unregister("never-registered")
    assert registry.names() == ["b"]

    registry.clear()
    assert len(registry) == 0


def test_by_category():
    registry = ScannerRegistry()
    registry.register(_Static("a", category="seo"))
    registry.register(_Static("b", category="standards"))
    registry.register(_Static("c", category="seo"))

    assert [s.name for s in registry.by_category("seo")] == ["a", "c"]


def test_default_registry_uses_settings():
    settings = MagicMock(fetch_timeout_seconds=2.0, user_agent="probe", fetch_max_redirects=3)
    registry = build_default_registry(settings)

    assert registry.names() == [
        "llms_txt",
        "agents_json",
        "mcp",
        "robots_txt",
        "canonical_urls",
        "sitemap_xml",
        "seo_basic",
        "json_ld",
    ]
    scanner = registry.get("mcp")
    assert scanner._timeout == 2.0
    assert scanner._user_agent == "probe"
    assert scanner._max_redirects == 3


@pytest.mark.asyncio
async def test_run_all_preserves_registration_order():
    registry = ScannerRegistry()
    registry.register(_Static("slow", delay=0.05))
    registry.register(_Static("fast"))

    results = await registry.run_all(make_context("<html></html>"))

    assert [r.indicator_name for r in results] == ["slow", "fast"]


@pytest.mark.asyncio
async def test_run_all_isolates_scanner_failure():
    registry = ScannerRegistry()
    registry.register(_Static("ok"))
    registry.register(_Exploding())

    results = await registry.run_all(make_context())

    assert len(results) == 2
    failed = results[1]
    assert isinstance(failed, IndicatorResult)
    assert failed.indicator_name == "exploding"
    assert failed.status == "fail"
    assert failed.score == 0.0
    assert failed.weight == 2.0
    assert failed.message == "Scanner failed: boom"
    assert failed.evidence.error == "boom"
    assert results[0].status == "pass"


@pytest.mark.asyncio
async def test_run_all_isolates_applicability_failure():
    registry = ScannerRegistry()
    registry.register(_BadApplicability())
    registry.register(_Static("ok"))

    results = await registry.run_all(make_context())

    assert [(r.indicator_name, r.status) for r in results] == [("bad_check", "fail"), ("ok", "pass")]
    assert results[0].score == 0.0
    assert results[0].weight == 1.5
    assert results[0].message == "Scanner failed: 'page_metadata'"


@pytest.mark.asyncio
async def test_run_all_skips_inapplicable_scanners():
    registry = ScannerRegistry()
    registry.register(_HtmlOnly())
    registry.register(_Static("site"))

    without_html = await registry.run_all(make_context(None))
    with_html = await registry.run_all(make_context("<p>x</p>"))

    assert [r.indicator_name for r in without_html] == ["site"]
    assert [r.indicator_name for r in with_html] == ["html_only", "site"]


@pytest.mark.asyncio
async def test_run_by_category():
    registry = ScannerRegistry()
    registry.register(_Static("a", category="seo"))
    registry.register(_Static("b", category="standards"))

    results = await registry.run_by_category("standards", make_context())

    assert [r.indicator_name for r in results] == ["b"]
