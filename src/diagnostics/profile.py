"""Site profile detection from structured data, URL shape and page copy."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from urllib.parse import urlparse

from src.diagnostics.models import (
    SITE_PROFILES,
    IndicatorResult,
    ProfileDetectionResult,
    SiteProfile,
)

logger = logging.getLogger(__name__)

PROFILE_DISPLAY_NAMES: dict[SiteProfile, str] = {
    "blog_content": "Blog/Content Site",
    "ecommerce": "E-commerce Site",
    "saas_app": "SaaS Application",
    "kb_support": "Knowledge Base/Support",
    "gov_nontransacting": "Government (Non-transacting)",
    "custom": "Custom/Other",
}

ECOMMERCE_SCHEMAS = (
    "Product",
    "Offer",
    "AggregateOffer",
    "ShoppingCart",
    "Store",
    "OnlineStore",
    "ProductModel",
    "Brand",
    "Review",
    "AggregateRating",
)
ARTICLE_SCHEMAS = ("Article", "BlogPosting", "NewsArticle")
KB_SCHEMAS = ("FAQPage", "HowTo", "QAPage")
GOV_SCHEMAS = ("GovernmentOrganization", "GovernmentService")

ECOMMERCE_URL_TOKENS = (
    "/cart",
    "/checkout",
    "/product",
    "/shop",
    "/store",
    "/wc-api/",
    "/woocommerce",
    "/add-to-cart",
    "/my-account",
    "/basket",
    "/order",
    "/payment",
    "/billing",
)
SAAS_URL_TOKENS = ("/api", "/dashboard", "/login", "/oauth")
KB_URL_TOKENS = ("/docs", "/help", "/support", "/faq")
BLOG_URL_TOKENS = ("/blog", "/post", "/article", "/news")
GOV_URL_TOKENS = ("/policy", "/regulations")

ECOMMERCE_KEYWORDS = (
    "shop",
    "store",
    "buy",
    "purchase",
    "cart",
    "checkout",
    "add to cart",
    "buy now",
    "sale",
    "price",
    "product",
    "free shipping",
    "delivery",
    "discount",
    "in stock",
    "new arrivals",
    "gift card",
    "wishlist",
)
BLOG_KEYWORDS = ("blog", "article", "read", "post", "news", "stories")
SUPPORT_KEYWORDS = ("help", "support", "documentation", "guide", "faq", "tutorial")

# evidence needed for full confidence
_CONFIDENCE_SCALE = 5.0


def display_name(profile: SiteProfile) -> str:
    return PROFILE_DISPLAY_NAMES.get(profile, "Unknown")


def _first(indicators: Iterable[IndicatorResult], name: str) -> IndicatorResult | None:
    return next((i for i in indicators if i.indicator_name == name), None)


def _schemas(indicators: Sequence[IndicatorResult]) -> list[str]:
    """Union of the JSON-LD types seen across all pages, in first-seen order."""
    seen: dict[str, None] = {}
    for result in indicators:
        if result.indicator_name == "json_ld":
            for schema in result.evidence.schemas:
                seen.setdefault(schema, None)
    return list(seen)


def _matches(text: str, keywords: Iterable[str]) -> list[str]:
    return [k for k in keywords if k in text]


class SiteProfileDetector:
    """Classify a site into one of the six profiles, or accept a declared one."""

    def detect_profile(
        self,
        indicators: Sequence[IndicatorResult],
        url_samples: Sequence[str],
        declared_profile: SiteProfile | None = None,
    ) -> ProfileDetectionResult:
        if declared_profile is not None:
            if declared_profile not in SITE_PROFILES:
                raise ValueError(f"Unknown site profile: {declared_profile!r}")
            return ProfileDetectionResult(
                profile=declared_profile,
                confidence=1.0,
                method="declared",
                signals=["Client declared profile"],
            )
        return self._infer(indicators, url_samples)

    def _infer(
        self,
        indicators: Sequence[IndicatorResult],
        url_samples: Sequence[str],
    ) -> ProfileDetectionResult:
        scores: dict[SiteProfile, float] = dict.fromkeys(SITE_PROFILES, 0.0)
        signals: list[str] = []

        self._score_schemas(_schemas(indicators), scores, signals)
        for url in url_samples:
            self._score_url(url, scores, signals)
        seo = _first(indicators, "seo_basic")
        if seo is not None:
            self._score_copy(seo, scores, signals)

        best: SiteProfile = "custom"
        best_score = 0.0
        for profile in SITE_PROFILES:
            if scores[profile] > best_score:
                best, best_score = profile, scores[profile]

        if best_score == 0:
            signals.append("No clear profile signals detected")

        result = ProfileDetectionResult(
            profile=best,
            confidence=min(1.0, best_score / _CONFIDENCE_SCALE),
            method="inferred",
            signals=signals,
        )
        logger.debug(
            "site profile inferred",
            extra={"profile": result.profile, "confidence": result.confidence, "signal_count": len(signals)},
        )
        return result

    def _score_schemas(
        self,
        schemas: list[str],
        scores: dict[SiteProfile, float],
        signals: list[str],
    ) -> None:
        if not schemas:
            return
        ecommerce = [s for s in schemas if s in ECOMMERCE_SCHEMAS]
        if ecommerce:
            scores["ecommerce"] += min(4, len(ecommerce))
            signals.append(f"E-commerce schemas detected: {', '.join(ecommerce)}")
        if any(s in ARTICLE_SCHEMAS for s in schemas):
            scores["blog_content"] += 3
            signals.append("Article/Blog schema detected")
        if any(s in KB_SCHEMAS for s in schemas):
            scores["kb_support"] += 3
            signals.append("FAQ/HowTo schema detected")
        if any(s in GOV_SCHEMAS for s in schemas):
            scores["gov_nontransacting"] += 3
            signals.append("Government schema detected")

    def _score_url(
        self,
        url: str,
        scores: dict[SiteProfile, float],
        signals: list[str],
    ) -> None:
        lowered = url.lower()
        parsed = urlparse(lowered)
        path = parsed.path

        ecommerce = _matches(path, ECOMMERCE_URL_TOKENS)
        if ecommerce:
            scores["ecommerce"] += min(2, len(ecommerce))
            signals.append(f"E-commerce URL patterns: {', '.join(ecommerce)}")
        if _matches(path, SAAS_URL_TOKENS):
            scores["saas_app"] += 1
            signals.append("SaaS app URL patterns")
        if _matches(path, KB_URL_TOKENS):
            scores["kb_support"] += 1
            signals.append("Knowledge base URL patterns")
        if _matches(path, BLOG_URL_TOKENS):
            scores["blog_content"] += 1
            signals.append("Blog/content URL patterns")
        if (parsed.hostname or "").endswith(".gov") or _matches(path, GOV_URL_TOKENS):
            scores["gov_nontransacting"] += 1
            signals.append("Government URL patterns")

    def _score_copy(
        self,
        seo: IndicatorResult,
        scores: dict[SiteProfile, float],
        signals: list[str],
    ) -> None:
        data = seo.evidence.data
        title = (data.get("title") or {}).get("text", "")
        description = (data.get("meta_description") or {}).get("text", "")
        text = f"{title} {description}".lower()
        if not text.strip():
            return

        ecommerce = _matches(text, ECOMMERCE_KEYWORDS)
        if ecommerce:
            scores["ecommerce"] += min(4, len(ecommerce))
            signals.append(f"E-commerce keywords in SEO: {', '.join(ecommerce)}")
        blog = _matches(text, BLOG_KEYWORDS)
        if blog:
            scores["blog_content"] += min(2, len(blog))
            signals.append(f"Blog keywords in SEO: {', '.join(blog)}")
        support = _matches(text, SUPPORT_KEYWORDS)
        if support:
            scores["kb_support"] += min(2, len(support))
            signals.append(f"Support keywords in SEO: {', '.join(support)}")
