"""External plan analysis via an OpenAI-compatible chat endpoint.

Only the bounded digest (``qt_plan.digest.compact``) leaves the process;
the full plan and full query text never do. The reply is expected to be a
single JSON object, but may arrive wrapped in prose or markdown fences, so
the first decodable embedded object is used.

Usage:
    from qt_shared.llm import create_llm_client
    from qt_plan.ai_insights import analyze_plan_with_ai

    outcome = analyze_plan_with_ai(execution, create_llm_client(), locale="en")
    if outcome.result:
        print(outcome.result.summary)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from qt_shared.llm import LLMClient

from .digest import compact
from .schemas import PlanExecution

logger = logging.getLogger(__name__)

TUNING_DOCS = {
    "dws": "https://support.huaweicloud.com/devg-dws/dws_04_0401.html",
    "opengauss": "https://docs.opengauss.org/zh/docs/latest/performance_tuning_guide/sql_optimization.html",
}

DIGEST_NOTE = "Digest is intentionally compact; do not request full SQL or plan."

SYSTEM_PROMPT = " ".join([
    "You are a senior database performance analyst.",
    "Given a compact JSON digest of SQL and execution plan, produce a concise, structured analysis.",
    "Prioritize accuracy, avoid speculation, and explicitly call out assumptions.",
    "Use the database-specific performance tuning documentation when dialect matches:",
    f"dws -> {TUNING_DOCS['dws']}",
    f"opengauss -> {TUNING_DOCS['opengauss']}",
    "If you can access the web, consult the relevant doc and reflect key guidance.",
    "If web access is unavailable, leave sources empty and add a follow-up note to review the official doc.",
    "Return ONLY valid JSON with the schema:",
    "{summary: string, planQuality: {rating: 'good'|'needs_attention'|'critical', rationale: string[]},",
    "findings: {title:string,severity:'info'|'warn'|'critical',detail:string,evidence?:string}[],",
    "recommendations: {action:string,rationale:string,impact?:string}[],",
    "indexHints: {table?:string,columns:string[],reason:string}[],",
    "followUps: string[],",
    "sources: {title:string,url:string,reason:string}[]}.",
    "Respond in Chinese when locale is 'zh', otherwise respond in English.",
])

SEVERITIES = ("info", "warn", "critical")
RATINGS = ("good", "needs_attention", "critical")


class AiConfigurationError(Exception):
    """Raised when no analysis endpoint is configured."""


# ── Response models ──────────────────────────────────────────────────

class AiInsightFinding(BaseModel):
    title: str = "Insight"
    severity: str = "info"
    detail: str = ""
    evidence: Optional[str] = None


class AiInsightRecommendation(BaseModel):
    action: str = ""
    rationale: str = ""
    impact: Optional[str] = None


class AiInsightIndexHint(BaseModel):
    table: Optional[str] = None
    columns: List[str] = Field(default_factory=list)
    reason: str = ""


class AiInsightSource(BaseModel):
    title: str = ""
    url: str = ""
    reason: str = ""


class AiPlanQuality(BaseModel):
    rating: str = "needs_attention"
    rationale: List[str] = Field(default_factory=list)


class AiInsightResult(BaseModel):
    summary: str = ""
    planQuality: AiPlanQuality = Field(default_factory=AiPlanQuality)
    findings: List[AiInsightFinding] = Field(default_factory=list)
    recommendations: List[AiInsightRecommendation] = Field(default_factory=list)
    indexHints: List[AiInsightIndexHint] = Field(default_factory=list)
    followUps: List[str] = Field(default_factory=list)
    sources: List[AiInsightSource] = Field(default_factory=list)


@dataclass
class AiAnalysisOutcome:
    """Normalized result (None when the reply held no JSON) plus raw text."""
    result: Optional[AiInsightResult]
    raw: str


# ── Request ─────────────────────────────────────────────────────────

def build_user_message(execution: PlanExecution, locale: str = "en") -> str:
    """JSON document ``{locale, digest, tuningDocs, note}`` sent as the user turn."""
    return json.dumps({
        "locale": locale,
        "digest": compact(execution).to_dict(),
        "tuningDocs": TUNING_DOCS,
        "note": DIGEST_NOTE,
    }, ensure_ascii=False)


# ── Response ────────────────────────────────────────────────────────

def extract_json_object(content: str) -> Optional[Dict[str, Any]]:
    """Return the first well-formed JSON object in ``content``.

    Tries the whole (trimmed) text first, then decodes from each ``{`` in
    turn so leading prose, markdown fences or trailing remarks are ignored.
    """
    text = (content or "").strip()
    if not text:
        return None
    try:
        parsed = json.loads(text)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)
    return None


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _as_optional_str(value: Any) -> Optional[str]:
    return None if value is None else _as_str(value)


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [_as_str(item) for item in value if item is not None]


def _dict_items(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def normalize_result(payload: Optional[Dict[str, Any]]) -> Optional[AiInsightResult]:
    """Coerce a loosely-shaped reply into AiInsightResult.

    Unknown severities become "info", unknown ratings "needs_attention",
    missing lists empty.
    """
    if payload is None:
        return None

    quality = payload.get("planQuality")
    if not isinstance(quality, dict):
        quality = {}
    rating = quality.get("rating")

    return AiInsightResult(
        summary=_as_str(payload.get("summary")),
        planQuality=AiPlanQuality(
            rating=rating if rating in RATINGS else "needs_attention",
            rationale=_str_list(quality.get("rationale")),
        ),
        findings=[
            AiInsightFinding(
                title=_as_str(item.get("title"), "Insight"),
                severity=item.get("severity") if item.get("severity") in SEVERITIES else "info",
                detail=_as_str(item.get("detail")),
                evidence=_as_optional_str(item.get("evidence")),
            )
            for item in _dict_items(payload.get("findings"))
        ],
        recommendations=[
            AiInsightRecommendation(
                action=_as_str(item.get("action")),
                rationale=_as_str(item.get("rationale")),
                impact=_as_optional_str(item.get("impact")),
            )
            for item in _dict_items(payload.get("recommendations"))
        ],
        indexHints=[
            AiInsightIndexHint(
                table=_as_optional_str(item.get("table")),
                columns=_str_list(item.get("columns")),
                reason=_as_str(item.get("reason")),
            )
            for item in _dict_items(payload.get("indexHints"))
        ],
        followUps=_str_list(payload.get("followUps")),
        sources=[
            AiInsightSource(
                title=_as_str(item.get("title")),
                url=_as_str(item.get("url")),
                reason=_as_str(item.get("reason")),
            )
            for item in _dict_items(payload.get("sources"))
        ],
    )


def analyze_plan_with_ai(
    execution: PlanExecution,
    client: Optional[LLMClient],
    locale: str = "en",
) -> AiAnalysisOutcome:
    """Send the execution's digest for external analysis.

    One request, no retry. Transport errors from the client propagate.

    Raises:
        AiConfigurationError: no client (endpoint, key or model missing)
    """
    if client is None:
        raise AiConfigurationError(
            "AI analysis is not configured. Set QT_AI_BASE_URL, QT_AI_API_KEY and QT_AI_MODEL."
        )

    user_message = build_user_message(execution, locale)
    logger.info(
        "Requesting AI analysis for %s (digest=%d chars)",
        execution.summary.id, len(user_message),
    )
    raw = client.analyze(user_message, system=SYSTEM_PROMPT)
    result = normalize_result(extract_json_object(raw))
    if result is None:
        logger.warning("AI analysis reply contained no JSON object (%d chars)", len(raw or ""))
    return AiAnalysisOutcome(result=result, raw=raw or "")
