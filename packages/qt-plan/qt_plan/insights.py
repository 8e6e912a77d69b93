"""Rule-based insight generator.

Rules run per node in pre-order (parents before children, siblings in parse
order); the plan-level memory rule is appended last. Nothing is deduplicated.

Insight ids are derived from the node (or execution) id and the rule, so
evaluating the same execution twice yields identical sequences.
"""

from __future__ import annotations

from typing import List, Optional

from .schemas import PlanExecution, PlanInsight, PlanNode, Severity

RUNTIME_SHARE_THRESHOLD = 0.35
ROW_SKEW_FACTOR = 2
NODE_MEMORY_THRESHOLD_MB = 256
PLAN_MEMORY_THRESHOLD_MB = 2048


def _node_insights(node: PlanNode, total_time_ms: float) -> List[PlanInsight]:
    found: List[PlanInsight] = []
    metrics = node.metrics

    share = metrics.actual_time_ms / total_time_ms if total_time_ms > 0 else 0.0
    if share > RUNTIME_SHARE_THRESHOLD:
        found.append(PlanInsight(
            id=f"{node.id}:runtime",
            title=f"{node.name} dominates runtime",
            severity=Severity.CRITICAL,
            details=(
                f"{share * 100:.1f}% of execution time spent on {node.name}. "
                "Investigate predicates or indexes."
            ),
            node_ref=node.id,
        ))

    if metrics.actual_rows > metrics.estimated_rows * ROW_SKEW_FACTOR:
        found.append(PlanInsight(
            id=f"{node.id}:row-skew",
            title=f"{node.name} row skew",
            severity=Severity.WARN,
            details=(
                f"Actual rows {metrics.actual_rows:,} vs estimate {metrics.estimated_rows:,}. "
                "Refresh statistics or adjust join order."
            ),
            node_ref=node.id,
        ))

    if metrics.memory_mb is not None and metrics.memory_mb > NODE_MEMORY_THRESHOLD_MB:
        found.append(PlanInsight(
            id=f"{node.id}:memory",
            title=f"{node.name} high memory usage",
            severity=Severity.WARN,
            details=(
                f"{metrics.memory_mb:g} MB allocated; consider increasing work_mem "
                "or reducing hash build size."
            ),
            node_ref=node.id,
        ))

    for idx, warning in enumerate(node.warnings or []):
        found.append(PlanInsight(
            id=f"{node.id}:warning-{idx}",
            title=warning,
            severity=Severity.INFO,
            details=f"{node.name}: {warning}",
            node_ref=node.id,
        ))
    return found


def evaluate(execution: Optional[PlanExecution]) -> List[PlanInsight]:
    """Derive severity-tagged findings from an execution record.

    Returns an empty list for a missing execution. Never mutates its input.
    """
    if execution is None:
        return []

    total_time_ms = execution.stats.total_time_ms
    insights: List[PlanInsight] = []
    for node in execution.iter_nodes():
        insights.extend(_node_insights(node, total_time_ms))

    total_memory_mb = execution.stats.total_memory_mb
    if total_memory_mb > PLAN_MEMORY_THRESHOLD_MB:
        insights.append(PlanInsight(
            id=f"{execution.summary.id}:plan-memory",
            title="Plan level memory pressure",
            severity=Severity.WARN,
            details=(
                f"Total memory {total_memory_mb} MB. Review operators or increase "
                "resource pool limits."
            ),
        ))
    return insights
