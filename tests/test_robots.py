"""robots.txt / robots meta scanner tests."""

import pytest

from src.diagnostics.scanners.robots import (
    RobotsScanner,
    analyze_robots_meta,
    analyze_robots_txt,
    determine_access_intent,
)
from tests.helpers import found, make_context

ROBOTS_URL = "https://example.com/robots.txt"
PLAIN_HTML = "<html><head><title>Home</title></head><body></body></html>"


# --- analysis (sync) ---


def test_ai_agent_group_scores_full():
    analysis = analyze_robots_txt("User-agent: GPTBot\nDisallow: /\n")
    assert analysis["score"] == 1.0
    assert analysis["ai_user_agents"] == ["GPTBot"]


def test_ai_agent_match_is_case_insensitive():
    analysis = analyze_robots_txt("User-agent: ccbot\nDisallow: /\n")
    assert analysis["ai_user_agents"] == ["CCBot"]


def test_sitemap_without_ai_directives():
    analysis = analyze_robots_txt("User-agent: *\nDisallow:\nSitemap: https://example.com/sitemap.xml\n")
    assert analysis["score"] == 0.7
    assert analysis["has_ai_directives"] is False


def test_basic_robots_txt():
    assert analyze_robots_txt("User-agent: *\nDisallow: /tmp/\n")["score"] == 0.5


def test_empty_robots_txt():
    analysis = analyze_robots_txt("   ")
    assert analysis["score"] == 0.0
    assert analysis["has_content"] is False


def test_robots_meta_scores():
    assert analyze_robots_meta('<meta name="robots" content="noai">')["score"] == 1.0
    assert analyze_robots_meta('<meta name="robots" content="noindex">')["score"] == 0.5
    assert analyze_robots_meta(PLAIN_HTML)["score"] == 0.7


def test_access_intent():
    block = analyze_robots_txt("User-agent: GPTBot\nDisallow: /\n")
    partial = analyze_robots_txt("User-agent: *\nDisallow: /private/\n")
    open_ = analyze_robots_txt("User-agent: *\nAllow: /\n")

    assert determine_access_intent(block, None) == "block"
    assert determine_access_intent(partial, None) == "partial"
    assert determine_access_intent(open_, None) == "allow"
    assert determine_access_intent(None, analyze_robots_meta('<meta name="robots" content="noimageai">')) == "block"
    assert determine_access_intent(None, None) == "allow"


# --- scanner ---


@pytest.mark.asyncio
async def test_scan_missing_robots_fails(mock_fetch):
    result = await RobotsScanner().scan(make_context())

    assert result.status == "fail"
    assert result.score == 0.0
    assert result.evidence.access_intent == "allow"
    assert result.message.startswith("Access intent: allow - No robots.txt file found")
    assert "Create a robots.txt file" in result.recommendation


@pytest.mark.asyncio
async def test_scan_ai_directives_block_and_pass(mock_fetch):
    mock_fetch.routes[ROBOTS_URL] = found("User-agent: GPTBot\nDisallow: /\n")

    result = await RobotsScanner().scan(make_context())

    assert result.status == "pass"
    assert result.score == 1.0
    assert result.evidence.access_intent == "block"


@pytest.mark.asyncio
async def test_scan_blends_txt_and_meta(mock_fetch):
    mock_fetch.routes[ROBOTS_URL] = found(
        "User-agent: *\nDisallow: /private/\nSitemap: https://example.com/sitemap.xml\n"
    )

    result = await RobotsScanner().scan(make_context(PLAIN_HTML))

    # 0.7 * 0.6 + 0.7 * 0.4
    assert result.score == 0.7
    assert result.status == "pass"
    assert result.evidence.access_intent == "partial"
    assert result.evidence.data["robots_meta"] is not None


@pytest.mark.asyncio
async def test_scan_basic_robots_warns(mock_fetch):
    mock_fetch.routes[ROBOTS_URL] = found("User-agent: *\nDisallow:\n")

    result = await RobotsScanner().scan(make_context())

    assert result.status == "warn"
    assert result.score == 0.5
    assert result.is_valid is True


def test_scan_runs_without_html():
    assert RobotsScanner().is_applicable(make_context(None)) is True
