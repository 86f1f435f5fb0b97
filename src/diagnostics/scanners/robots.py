"""robots.txt scanner: crawler access policy, with emphasis on AI crawlers."""

from __future__ import annotations

from typing import Any

from src.diagnostics.models import AccessIntent, Evidence, IndicatorResult, ScanContext

from .base import BaseScanner
from .utils import build_url, extract_robots_meta, parse_robots_txt

AI_USER_AGENTS: tuple[str, ...] = ("GPTBot", "ChatGPT-User", "CCBot", "anthropic-ai", "Claude-Web")

_TXT_SHARE = 0.6
_META_SHARE = 0.4


def analyze_robots_txt(content: str) -> dict[str, Any]:
    """Grade a robots.txt body on a 0..1 scale."""
    parsed = parse_robots_txt(content)
    agents: dict[str, dict[str, list[str]]] = parsed["user_agents"]
    lowered = {name.lower(): name for name in agents}

    ai_agents = [agent for agent in AI_USER_AGENTS if agent.lower() in lowered]
    general = agents.get("*", {"allow": [], "disallow": []})
    has_ai_directives = bool(ai_agents) or any("noai" in path for path in general["disallow"])

    analysis: dict[str, Any] = {
        "has_content": bool(content.strip()),
        "user_agents": list(agents),
        "general_disallow": list(general["disallow"]),
        "sitemaps": parsed["sitemaps"],
        "ai_user_agents": ai_agents,
        "has_ai_directives": has_ai_directives,
    }

    if not analysis["has_content"]:
        analysis["score"], analysis["message"] = 0.0, "Empty robots.txt file"
    elif has_ai_directives:
        analysis["score"], analysis["message"] = 1.0, "robots.txt contains AI-specific directives"
    elif parsed["sitemaps"]:
        analysis["score"], analysis["message"] = 0.7, "robots.txt found with sitemaps but no AI directives"
    else:
        analysis["score"], analysis["message"] = 0.5, "Basic robots.txt found without AI considerations"
    return analysis


def analyze_robots_meta(html: str) -> dict[str, Any]:
    directives = extract_robots_meta(html)
    has_ai = directives["noai"] or directives["noimageai"]
    analysis: dict[str, Any] = {
        "directives": directives,
        "has_robots_meta": any(directives.values()),
        "has_ai_directives": has_ai,
    }
    if has_ai:
        analysis["score"], analysis["message"] = 1.0, "Page contains AI-specific robots meta tags"
    elif analysis["has_robots_meta"]:
        analysis["score"], analysis["message"] = 0.5, "Page has robots meta tags but no AI directives"
    else:
        analysis["score"], analysis["message"] = 0.7, "No restrictive robots meta tags found"
    return analysis


def determine_access_intent(
    txt: dict[str, Any] | None,
    meta: dict[str, Any] | None,
) -> AccessIntent:
    meta_directives = (meta or {}).get("directives", {})
    if (txt and txt["ai_user_agents"]) or meta_directives.get("noai") or meta_directives.get("noimageai"):
        return "block"
    if (txt and txt["general_disallow"]) or meta_directives.get("noindex") or meta_directives.get("nofollow"):
        return "partial"
    return "allow"


def _recommendation(txt: dict[str, Any] | None, meta: dict[str, Any] | None) -> str:
    recs: list[str] = []
    if not txt or not txt["has_content"]:
        recs.append("Create a robots.txt file to control crawler access")
    if not (txt and txt["has_ai_directives"]) and not (meta and meta["has_ai_directives"]):
        recs.append(
            "Consider adding AI-specific directives (e.g., User-agent: GPTBot) to explicitly "
            "control AI crawler access"
        )
    if not (txt and txt["sitemaps"]):
        recs.append("Add sitemap references to robots.txt for better discoverability")
    if not recs:
        return "Robots configuration is well-optimized for AI agents"
    return ". ".join(recs)


class RobotsScanner(BaseScanner):
    name = "robots_txt"
    category = "standards"
    description = "Analyzes robots.txt and robots meta tags for AI agent access intent"
    weight = 1.0

    async def scan(self, context: ScanContext) -> IndicatorResult:
        url = build_url(context.site_url, "/robots.txt")
        fetched = await self._fetch(url)

        txt = analyze_robots_txt(fetched.content or "") if fetched.found else None
        meta = analyze_robots_meta(context.page_html) if context.page_html else None
        intent = determine_access_intent(txt, meta)

        messages = [txt["message"] if txt else "No robots.txt file found"]
        if meta:
            messages.append(meta["message"])

        evidence = Evidence(
            checked_url=url,
            status_code=fetched.status_code,
            error=fetched.error,
            access_intent=intent,
            data={"robots_txt": txt, "robots_meta": meta},
        )
        message = f"Access intent: {intent} - {'; '.join(messages)}"
        recommendation = _recommendation(txt, meta)

        if txt is None:
            return self._result(
                "fail",
                0.0,
                message=message,
                recommendation=recommendation,
                evidence=evidence,
                found=False,
                is_valid=False,
            )

        if meta is None:
            score = txt["score"]
        else:
            score = round(txt["score"] * _TXT_SHARE + meta["score"] * _META_SHARE, 4)

        return self._result(
            "pass" if score >= 0.7 else "warn",
            score,
            message=message,
            recommendation=recommendation,
            evidence=evidence,
            found=True,
            is_valid=txt["has_content"],
        )
