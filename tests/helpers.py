"""Shared builders for scan contexts, fetch results and indicator results."""

from src.diagnostics.models import Evidence, FetchResult, IndicatorResult, ScanContext

SITE = "https://example.com"


def make_context(html=None, page_url=None, site_url=SITE, audit_id="audit-1"):
    return ScanContext(
        audit_id=audit_id,
        site_url=site_url,
        page_url=page_url or site_url + "/",
        page_html=html,
    )


def found(content, status_code=200):
    return FetchResult(found=True, status_code=status_code, content=content)


def missing(status_code=404):
    return FetchResult(found=False, status_code=status_code, content="Not Found")


def result(name, status, score=None, *, category="standards", weight=1.0, max_score=1.0, **kwargs):
    return IndicatorResult(
        indicator_name=name,
        category=category,
        status=status,
        score=score,
        max_score=max_score,
        weight=weight,
        evidence=kwargs.pop("evidence", Evidence()),
        **kwargs,
    )
