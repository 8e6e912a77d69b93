"""Digest compactor.

Projects an execution record into a bounded summary for the external
analysis collaborator. Every list is capped and long query text is replaced
by a head/tail excerpt, so payload size does not grow with the plan.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, List, Optional, Tuple

from .schemas import (
    NodeDigest,
    PlanDigest,
    PlanExecution,
    PlanNode,
    PlanStats,
    SqlDigest,
)

MAX_SQL_CHARS = 1400
SQL_HEAD_SHARE = 0.65
SQL_TAIL_SHARE = 0.25
MAX_NODES = 14
MAX_NODE_TYPES = 12
MAX_WARNINGS = 14
SKEW_RATIO_THRESHOLD = 1.8

_WHITESPACE_RE = re.compile(r"\s+")


def flatten_nodes(
    nodes: List[PlanNode],
    parent_id: Optional[str] = None,
) -> List[Tuple[PlanNode, Optional[str]]]:
    """Pre-order list of ``(node, parent_id)`` pairs."""
    flat: List[Tuple[PlanNode, Optional[str]]] = []
    for node in nodes:
        flat.append((node, parent_id))
        flat.extend(flatten_nodes(node.children, node.id))
    return flat


def compute_depth(nodes: List[PlanNode]) -> int:
    if not nodes:
        return 0
    return 1 + max(compute_depth(node.children) for node in nodes)


def _to_node_digest(node: PlanNode, parent_id: Optional[str]) -> NodeDigest:
    m = node.metrics
    ratio = m.actual_rows / m.estimated_rows if m.estimated_rows else None
    return NodeDigest(
        id=node.id,
        name=node.name,
        level=node.level,
        parent_id=parent_id,
        actual_rows=m.actual_rows,
        estimated_rows=m.estimated_rows,
        actual_time_ms=m.actual_time_ms,
        estimated_time_ms=m.estimated_time_ms,
        memory_mb=m.memory_mb,
        estimate_ratio=ratio,
    )


def compact_sql(sql_text: Optional[str]) -> Tuple[int, Optional[str], bool]:
    """Collapse whitespace; excerpt head and tail when over budget.

    Returns:
        (compacted length, preview, truncated)
    """
    if not sql_text:
        return 0, None, False
    compact = _WHITESPACE_RE.sub(" ", sql_text).strip()
    if len(compact) <= MAX_SQL_CHARS:
        return len(compact), compact, False
    head = compact[:int(MAX_SQL_CHARS * SQL_HEAD_SHARE)]
    tail = compact[-int(MAX_SQL_CHARS * SQL_TAIL_SHARE):]
    return len(compact), f"{head} ... {tail}", True


def compact(execution: PlanExecution) -> PlanDigest:
    """Build the bounded digest of an execution. Read-only."""
    flat = flatten_nodes(execution.nodes)
    digests = [_to_node_digest(node, parent_id) for node, parent_id in flat]

    by_time = sorted(digests, key=lambda d: d.actual_time_ms, reverse=True)[:MAX_NODES]
    by_rows = sorted(digests, key=lambda d: d.actual_rows, reverse=True)[:MAX_NODES]
    skewed = sorted(
        (d for d in digests if d.estimate_ratio is not None and d.estimate_ratio > SKEW_RATIO_THRESHOLD),
        key=lambda d: d.estimate_ratio,
        reverse=True,
    )[:MAX_NODES]

    # Counter keeps first-seen order for ties; sorted() is stable
    counts = Counter(d.name for d in digests)
    node_type_counts: List[Dict[str, object]] = [
        {"name": name, "count": count}
        for name, count in sorted(counts.items(), key=lambda item: item[1], reverse=True)
    ][:MAX_NODE_TYPES]

    warnings = [
        {"nodeId": node.id, "nodeName": node.name, "warning": warning}
        for node, _ in flat
        for warning in (node.warnings or [])
    ][:MAX_WARNINGS]

    length, preview, truncated = compact_sql(execution.summary.sql_text)
    stats = execution.stats
    return PlanDigest(
        dialect=execution.summary.dialect,
        sql=SqlDigest(
            length=length,
            preview=preview,
            fingerprint=execution.summary.sql_fingerprint,
            truncated=truncated,
        ),
        stats=PlanStats(
            total_time_ms=stats.total_time_ms,
            total_memory_mb=stats.total_memory_mb,
            node_count=stats.node_count,
            depth=compute_depth(execution.nodes),
        ),
        top_nodes_by_time=by_time,
        top_nodes_by_rows=by_rows,
        skewed_nodes=skewed,
        node_type_counts=node_type_counts,
        warnings=warnings,
    )
