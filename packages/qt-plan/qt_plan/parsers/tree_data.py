"""Tree-data (JSON) plan parser.

Accepts ``EXPLAIN (FORMAT JSON)`` style output: either a single object or an
array whose first element carries the root under ``"Plan"``. Child operators
are listed under ``"Plans"``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from ..errors import EmptyInputError, MalformedInputError
from ..normalize import make_node
from ..schemas import PlanMetric, PlanNode
from ..units import as_number, parse_memory

logger = logging.getLogger(__name__)

SKEW_WARNING = "Actual rows exceed estimates significantly"
SKEW_FACTOR = 2

# Copied into PlanNode.properties verbatim when present
PROPERTY_KEYS = (
    "Join Type",
    "Relation Name",
    "Alias",
    "Index Name",
    "Filter",
    "Hash Cond",
    "Merge Cond",
    "Recheck Cond",
    "Group Key",
    "Plan Width",
)


def _first_present(node: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = node.get(key)
        if value is not None:
            return value
    return None


def _find_root(parsed: Any) -> Optional[Dict[str, Any]]:
    top = parsed
    if isinstance(parsed, list):
        if not parsed:
            return None
        top = parsed[0]
    if not isinstance(top, dict):
        return None
    root = top.get("Plan", top)
    if not isinstance(root, dict) or not root:
        return None
    return root


def _convert(node: Dict[str, Any], level: int) -> PlanNode:
    actual_rows = int(as_number(node.get("Actual Rows")))
    estimated_rows = int(as_number(node.get("Plan Rows")))
    dn_name = node.get("DN Name")

    metrics = PlanMetric(
        actual_rows=actual_rows,
        estimated_rows=estimated_rows,
        actual_time_ms=as_number(
            _first_present(node, "Actual Total Time", "Actual Startup Time")
        ),
        estimated_time_ms=as_number(node.get("Total Cost")),
        memory_mb=parse_memory(_first_present(node, "Peak Memory Usage", "Memory Used")),
        executor_id=dn_name if isinstance(dn_name, str) else None,
    )
    properties = {key: node[key] for key in PROPERTY_KEYS if node.get(key) is not None}
    warnings = [SKEW_WARNING] if actual_rows > estimated_rows * SKEW_FACTOR else None

    result = make_node(
        str(node.get("Node Type") or ""),
        level,
        metrics=metrics,
        properties=properties,
        warnings=warnings,
    )
    children = node.get("Plans") or []
    if not isinstance(children, list):
        logger.debug("Ignoring non-list Plans under %s: %r", result.name, children)
        children = []
    for child in children:
        if isinstance(child, dict):
            result.children.append(_convert(child, level + 1))
        else:
            logger.debug("Skipping non-object child plan: %r", child)
    return result


def parse_tree_data(text: str) -> List[PlanNode]:
    """Parse a JSON plan payload into a single-root forest.

    Raises:
        EmptyInputError: trimmed text is empty
        MalformedInputError: payload is not JSON or has no root plan section
    """
    payload = (text or "").strip()
    if not payload:
        raise EmptyInputError()
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedInputError("Unable to parse JSON plan") from e

    root = _find_root(parsed)
    if root is None:
        raise MalformedInputError("JSON plan missing Plan section")
    return [_convert(root, 0)]
