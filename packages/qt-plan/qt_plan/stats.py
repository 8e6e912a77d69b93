"""Statistics roll-up over a plan forest."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .schemas import PlanNode


@dataclass
class TreeTotals:
    """Unrounded totals; the builder rounds them into PlanStats."""
    total_time_ms: float = 0.0
    total_memory_mb: float = 0.0
    node_count: int = 0
    depth: int = 0


def aggregate_stats(nodes: List[PlanNode]) -> TreeTotals:
    """Sum time and memory over every node and measure the tree.

    Time is the plain sum of each node's reported ``actual_time_ms``, parents
    included, so nested (cumulative) timings are counted again at each level.
    Unknown memory counts as zero here without touching the node.
    ``depth`` is the number of nodes on the longest root-to-leaf path.
    """
    totals = TreeTotals()

    def walk(node: PlanNode, depth: int) -> None:
        totals.node_count += 1
        totals.total_time_ms += node.metrics.actual_time_ms
        totals.total_memory_mb += node.metrics.memory_mb or 0.0
        totals.depth = max(totals.depth, depth)
        for child in node.children:
            walk(child, depth + 1)

    for root in nodes:
        walk(root, 1)
    return totals
