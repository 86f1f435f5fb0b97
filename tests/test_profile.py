"""Site profile detection tests."""

import pytest

from src.diagnostics.models import Evidence
from src.diagnostics.profile import SiteProfileDetector, display_name
from tests.helpers import result


def _json_ld(*schemas):
    return result("json_ld", "pass", 10, category="structured_data", max_score=10.0, evidence=Evidence(schemas=list(schemas)))


def _seo(title="", description=""):
    data = {"title": {"text": title}, "meta_description": {"text": description}}
    return result("seo_basic", "pass", 8, category="seo", max_score=10.0, evidence=Evidence(data=data))


@pytest.fixture
def detector():
    return SiteProfileDetector()


def test_declared_profile_short_circuits(detector):
    detection = detector.detect_profile([_json_ld("Article")], ["https://example.com/blog/x"], "ecommerce")

    assert detection.profile == "ecommerce"
    assert detection.confidence == 1.0
    assert detection.method == "declared"
    assert detection.signals == ["Client declared profile"]


def test_declared_custom_is_still_declared(detector):
    detection = detector.detect_profile([], [], "custom")
    assert detection.method == "declared"
    assert detection.profile == "custom"


def test_unknown_declared_profile_raises(detector):
    with pytest.raises(ValueError, match="Unknown site profile"):
        detector.detect_profile([], [], "marketplace")


def test_no_signals_is_custom(detector):
    detection = detector.detect_profile([], ["https://example.com/"])

    assert detection.profile == "custom"
    assert detection.method == "inferred"
    assert detection.confidence == 0.0
    assert detection.signals == ["No clear profile signals detected"]


def test_product_schema_and_cart_url_infer_ecommerce(detector):
    detection = detector.detect_profile(
        [_json_ld("Product", "Offer")],
        ["https://shop.example.com/cart", "https://shop.example.com/product/42"],
    )

    assert detection.profile == "ecommerce"
    assert detection.method == "inferred"
    # 2 schemas + 1 + 1 url hits
    assert detection.confidence == pytest.approx(0.8)
    assert detection.signals[0] == "E-commerce schemas detected: Product, Offer"


def test_article_schema_infers_blog(detector):
    detection = detector.detect_profile([_json_ld("BlogPosting")], ["https://example.com/blog/hello"])

    assert detection.profile == "blog_content"
    assert "Article/Blog schema detected" in detection.signals
    assert "Blog/content URL patterns" in detection.signals


def test_gov_host(detector):
    detection = detector.detect_profile([], ["https://agency.gov/about"])
    assert detection.profile == "gov_nontransacting"


def test_seo_copy_contributes(detector):
    detection = detector.detect_profile([_seo("Help Center", "Documentation and FAQ")], [])

    assert detection.profile == "kb_support"
    assert detection.signals == ["Support keywords in SEO: help, documentation, faq"]


def test_confidence_is_capped(detector):
    detection = detector.detect_profile(
        [_json_ld("Product", "Offer", "Brand", "Review", "Store"), _seo("Shop now", "Buy with free shipping")],
        ["https://example.com/checkout"],
    )
    assert detection.profile == "ecommerce"
    assert detection.confidence == 1.0


def test_ties_go_to_earlier_profile(detector):
    detection = detector.detect_profile([], ["https://example.com/blog/docs"])
    # blog_content and kb_support both score 1
    assert detection.profile == "blog_content"


def test_detection_is_deterministic(detector):
    inputs = ([_json_ld("Product"), _seo("Store", "")], ["https://example.com/shop"])
    assert detector.detect_profile(*inputs) == detector.detect_profile(*inputs)


def test_display_name():
    assert display_name("saas_app") == "SaaS Application"
