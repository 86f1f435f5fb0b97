"""Applicability matrix and category membership tests."""

from src.diagnostics.applicability import (
    APPLICABILITY_MATRIX,
    CATEGORY_MEMBERSHIP,
    ApplicabilityMatrix,
    categories_for,
)
from src.diagnostics.models import SITE_PROFILES


def test_ecommerce_requires_mcp():
    applicability = ApplicabilityMatrix().get("mcp", "ecommerce")
    assert applicability.status == "required"
    assert applicability.included_in_category_math is True
    assert applicability.reason == "mcp is required for e-commerce sites"


def test_blog_excludes_mcp():
    matrix = ApplicabilityMatrix()
    applicability = matrix.get("mcp", "blog_content")
    assert applicability.status == "not_applicable"
    assert applicability.included_in_category_math is False
    assert matrix.included("mcp", "blog_content") is False


def test_unknown_pair_is_optional():
    applicability = ApplicabilityMatrix().get("favicon", "saas_app")
    assert applicability.status == "optional"
    assert applicability.included_in_category_math is True


def test_every_profile_is_covered():
    for statuses in APPLICABILITY_MATRIX.values():
        assert set(statuses) == set(SITE_PROFILES)


def test_for_profile():
    applicability = ApplicabilityMatrix().for_profile("gov_nontransacting")
    assert applicability["mcp"].status == "not_applicable"
    assert applicability["agents_json"].status == "optional"
    assert applicability["llms_txt"].status == "required"


def test_custom_matrix():
    matrix = ApplicabilityMatrix({"llms_txt": {"custom": "not_applicable"}})
    assert matrix.get("llms_txt", "custom").status == "not_applicable"
    assert matrix.get("llms_txt", "ecommerce").status == "optional"


def test_categories_for():
    assert categories_for("robots_txt") == ["discovery", "trust"]
    assert categories_for("mcp") == ["actions"]
    assert categories_for("unknown") == []


def test_every_category_has_members():
    assert all(CATEGORY_MEMBERSHIP.values())
