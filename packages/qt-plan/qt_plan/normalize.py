"""Plan tree normalizer.

Every format parser hands its raw fields to ``make_node`` so that all nodes
share one canonical shape: a fresh opaque id, the operator name, a level,
metrics, verbatim properties and the documentation key.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from .node_docs import doc_key_for
from .schemas import PlanMetric, PlanNode

DEFAULT_NODE_NAME = "Operator"


def new_node_id() -> str:
    """Opaque unique token; never derived from node content."""
    return str(uuid.uuid4())


def make_node(
    name: str,
    level: int,
    metrics: Optional[PlanMetric] = None,
    properties: Optional[Dict[str, Any]] = None,
    warnings: Optional[List[str]] = None,
) -> PlanNode:
    """Build a canonical PlanNode with no children attached yet."""
    name = (name or "").strip() or DEFAULT_NODE_NAME
    return PlanNode(
        id=new_node_id(),
        name=name,
        level=max(int(level), 0),
        metrics=metrics or PlanMetric(),
        properties=dict(properties or {}),
        children=[],
        warnings=list(warnings) if warnings else None,
        doc_key=doc_key_for(name),
    )
