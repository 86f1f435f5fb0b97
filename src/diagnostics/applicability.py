"""Applicability policy: which indicators matter for which site profile."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from src.diagnostics.models import SITE_PROFILES, ReportCategory, SiteProfile

ApplicabilityStatus = Literal["required", "optional", "not_applicable"]


@dataclass(frozen=True)
class Applicability:
    status: ApplicabilityStatus
    reason: str

    @property
    def included_in_category_math(self) -> bool:
        return self.status != "not_applicable"


def _everywhere(status: ApplicabilityStatus) -> dict[SiteProfile, ApplicabilityStatus]:
    return dict.fromkeys(SITE_PROFILES, status)


APPLICABILITY_MATRIX: dict[str, dict[SiteProfile, ApplicabilityStatus]] = {
    "mcp": {
        "blog_content": "not_applicable",
        "ecommerce": "required",
        "saas_app": "required",
        "kb_support": "optional",
        "gov_nontransacting": "not_applicable",
        "custom": "optional",
    },
    "agents_json": {
        "blog_content": "optional",
        "ecommerce": "required",
        "saas_app": "required",
        "kb_support": "optional",
        "gov_nontransacting": "optional",
        "custom": "optional",
    },
    "llms_txt": _everywhere("required"),
    "json_ld": _everywhere("required"),
    "sitemap_xml": _everywhere("required"),
    "canonical_urls": _everywhere("required"),
    "robots_txt": _everywhere("required"),
    "seo_basic": _everywhere("required"),
}

CATEGORY_MEMBERSHIP: dict[ReportCategory, tuple[str, ...]] = {
    "discovery": ("robots_txt", "sitemap_xml", "seo_basic"),
    "understanding": ("json_ld", "llms_txt", "canonical_urls"),
    "actions": ("mcp", "agents_json"),
    "trust": ("canonical_urls", "robots_txt", "seo_basic"),
}

_PROFILE_PHRASES: dict[SiteProfile, str] = {
    "blog_content": "blog/content sites",
    "ecommerce": "e-commerce sites",
    "saas_app": "SaaS applications",
    "kb_support": "knowledge base/support sites",
    "gov_nontransacting": "government (non-transacting) sites",
    "custom": "custom sites",
}


def categories_for(indicator_name: str) -> list[ReportCategory]:
    """Report categories an indicator rolls up into (possibly several, possibly none)."""
    return [cat for cat, names in CATEGORY_MEMBERSHIP.items() if indicator_name in names]


class ApplicabilityMatrix:
    """Lookup over the static policy table.

    Pairs missing from the table are ``optional`` so an unlisted indicator
    is still scored.
    """

    def __init__(
        self,
        matrix: dict[str, dict[SiteProfile, ApplicabilityStatus]] | None = None,
    ) -> None:
        self._matrix = matrix if matrix is not None else APPLICABILITY_MATRIX

    def get(self, indicator_name: str, profile: SiteProfile) -> Applicability:
        status = self._matrix.get(indicator_name, {}).get(profile, "optional")
        return Applicability(status=status, reason=self._reason(indicator_name, profile, status))

    def for_profile(self, profile: SiteProfile) -> dict[str, Applicability]:
        return {name: self.get(name, profile) for name in self._matrix}

    def included(self, indicator_name: str, profile: SiteProfile) -> bool:
        return self.get(indicator_name, profile).included_in_category_math

    @staticmethod
    def _reason(indicator_name: str, profile: SiteProfile, status: ApplicabilityStatus) -> str:
        phrase = _PROFILE_PHRASES.get(profile, "unknown site type")
        if status == "required":
            return f"{indicator_name} is required for {phrase}"
        if status == "optional":
            return f"{indicator_name} is recommended but optional for {phrase}"
        return f"{indicator_name} is not applicable to {phrase}"
