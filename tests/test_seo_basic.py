"""Basic SEO scanner tests."""

import pytest

from src.diagnostics.scanners.seo_basic import SeoBasicScanner, analyze_seo, score_seo
from tests.helpers import make_context

GOOD_TITLE = "Example Store - Quality Goods Shipped Worldwide"  # 47 chars
GOOD_DESCRIPTION = (
    "Example Store sells quality goods with fast worldwide shipping, easy returns, "
    "and friendly support for every order you place."
)
OG = "".join(
    f'<meta property="og:{tag}" content="x">' for tag in ("title", "description", "image", "url")
)


def _page(title=None, description=None, h1s=1, og=True):
    head = ""
    if title is not None:
        head += f"<title>{title}</title>"
    if description is not None:
        head += f'<meta name="description" content="{description}">'
    if og:
        head += OG
    body = "".join(f"<h1>Heading {i}</h1>" for i in range(h1s)) + "<h2>Sub</h2>"
    return f"<html><head>{head}</head><body>{body}</body></html>"


def test_description_fixture_is_optimal_length():
    assert 120 <= len(GOOD_DESCRIPTION) <= 160


def test_analyze_full_page():
    analysis = analyze_seo(_page(GOOD_TITLE, GOOD_DESCRIPTION))
    assert analysis["title"]["optimal"] is True
    assert analysis["meta_description"]["optimal"] is True
    assert analysis["headings"]["h1_count"] == 1
    assert analysis["headings"]["structure"] == ["H1: Heading 0", "H2: Sub"]
    assert analysis["open_graph"]["has_basic_og"] is True
    assert score_seo(analysis) == 10


def test_short_title_and_multiple_h1():
    analysis = analyze_seo(_page("Short", None, h1s=2, og=False))
    assert analysis["title"]["issue"] == "Title tag too short (< 30 characters)"
    assert analysis["meta_description"]["issue"] == "Missing meta description"
    assert analysis["headings"]["issue"] == "Multiple H1 tags found (2)"
    # 1.5 title + 1 heading
    assert score_seo(analysis) == 3


@pytest.mark.asyncio
async def test_scan_full_page_passes():
    result = await SeoBasicScanner().scan(make_context(_page(GOOD_TITLE, GOOD_DESCRIPTION)))

    assert result.status == "pass"
    assert result.score == 10
    assert result.normalized_score == 1.0
    assert result.message == "Excellent SEO implementation"
    assert result.evidence.data["title"]["text"] == GOOD_TITLE


@pytest.mark.asyncio
async def test_scan_missing_heading_and_og_warns():
    result = await SeoBasicScanner().scan(make_context(_page(GOOD_TITLE, GOOD_DESCRIPTION, h1s=0, og=False)))

    assert result.status == "warn"
    assert result.score == 6
    assert "No H1 tag found" in result.evidence.issues


@pytest.mark.asyncio
async def test_scan_bare_page_fails():
    result = await SeoBasicScanner().scan(make_context("<html><body><p>hi</p></body></html>"))

    assert result.status == "fail"
    assert result.score == 0
    assert result.message.startswith("SEO needs improvement")
