"""Execution record builder.

Wraps a normalized node forest with summary metadata and rolled-up stats.
Only the forest is consumed, so any parser can feed it.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from .schemas import (
    PlanDialect,
    PlanExecution,
    PlanNode,
    PlanSource,
    PlanStats,
    PlanSummary,
)
from .stats import aggregate_stats

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Imported Plan"
FINGERPRINT_FALLBACK = "plan"
FINGERPRINT_ID_CHARS = 8
SLUG_MAX_CHARS = 40


@dataclass
class ParseOptions:
    """Caller-supplied ingestion metadata."""
    dialect_hint: Optional[PlanDialect] = None  # overrides detection
    title: Optional[str] = None
    source: PlanSource = PlanSource.MANUAL_IMPORT
    captured_at: Optional[datetime] = None  # defaults to now (UTC)
    sql_text: Optional[str] = None


def slugify(value: str) -> str:
    """``"SELECT * FROM Orders"`` -> ``"select--from-orders"`` (max 40 chars)."""
    slug = re.sub(r"\s+", "-", value.strip().lower())
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    return slug[:SLUG_MAX_CHARS]


def make_fingerprint(summary_id: str, title: str, sql_text: Optional[str] = None) -> str:
    """Display/dedup aid: slug of the query (else title) plus a slice of the id.

    Not unique; collisions are tolerated.
    """
    base = slugify(sql_text) if sql_text else slugify(title)
    return f"{base or FINGERPRINT_FALLBACK}-{summary_id[:FINGERPRINT_ID_CHARS]}"


def build_execution(
    nodes: List[PlanNode],
    dialect: PlanDialect,
    plan_source: str,
    options: Optional[ParseOptions] = None,
) -> PlanExecution:
    """Assemble a PlanExecution from a parsed forest.

    Args:
        nodes: Normalized root nodes in parse order
        dialect: Dialect already resolved by the caller
        plan_source: Verbatim original input
        options: Title, provenance, capture time and query text

    Returns:
        A fresh execution record with recomputed stats
    """
    options = options or ParseOptions()
    summary_id = str(uuid.uuid4())

    title = (options.title or "").strip()
    if not title:
        title = nodes[0].name if nodes else DEFAULT_TITLE
    sql_text = (options.sql_text or "").strip() or None

    totals = aggregate_stats(nodes)
    stats = PlanStats(
        total_time_ms=round(totals.total_time_ms),
        total_memory_mb=round(totals.total_memory_mb),
        node_count=totals.node_count,
        depth=totals.depth,
    )

    summary = PlanSummary(
        id=summary_id,
        captured_at=options.captured_at or datetime.now(timezone.utc),
        dialect=dialect,
        source=PlanSource(options.source),
        sql_fingerprint=make_fingerprint(summary_id, title, sql_text),
        title=title,
        sql_text=sql_text,
    )
    logger.debug(
        "Built execution %s: %d nodes, %d ms, %d MB",
        summary_id, stats.node_count, stats.total_time_ms, stats.total_memory_mb,
    )
    return PlanExecution(
        summary=summary,
        plan_source=plan_source,
        nodes=nodes,
        stats=stats,
        plan_query=sql_text,
    )
