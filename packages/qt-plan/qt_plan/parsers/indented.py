"""Indented-text plan parser.

Handles the human-readable tracer output, one operator per line:

    Aggregate  (cost=10.00..12.00 actual time=750 rows=1)
      ->  Hash Join  (rows=5400)
        ->  Seq Scan on orders  (rows=10000 memory=32MB)

Depth comes from indentation, two columns per level.
"""

from __future__ import annotations

import logging
import re
from typing import List

from ..errors import EmptyInputError
from ..normalize import make_node
from ..schemas import PlanMetric, PlanNode
from ..units import match_number, parse_memory
from .nesting import nest_nodes

logger = logging.getLogger(__name__)

INDENT_WIDTH = 2
METRICS_BOUNDARY = "  ("

_NUM = r"([0-9]+(?:\.[0-9]+)?)"
_LEADING_RE = re.compile(r"^(\s*)(?:->)?\s*")
_ROWS_RE = re.compile(r"rows=" + _NUM, re.IGNORECASE)
_PLAN_ROWS_RE = re.compile(r"plan rows=" + _NUM, re.IGNORECASE)
_ACTUAL_TIME_RE = re.compile(r"actual time=" + _NUM, re.IGNORECASE)
_COST_RE = re.compile(r"cost=" + _NUM + r"\.\.", re.IGNORECASE)
_MEMORY_RE = re.compile(r"memory=([0-9.]+\s*(?:KB|MB|GB|K|M|G)?)", re.IGNORECASE)


def extract_metrics(text: str) -> PlanMetric:
    """Pull labeled metrics out of the parenthesised tail of a plan line."""
    actual_rows = match_number(text, _ROWS_RE)
    estimated_rows = match_number(text, _PLAN_ROWS_RE)
    if estimated_rows is None:
        estimated_rows = actual_rows
    memory = _MEMORY_RE.search(text or "")
    return PlanMetric(
        actual_rows=int(actual_rows or 0),
        estimated_rows=int(estimated_rows or 0),
        actual_time_ms=match_number(text, _ACTUAL_TIME_RE) or 0.0,
        estimated_time_ms=match_number(text, _COST_RE) or 0.0,
        memory_mb=parse_memory(memory.group(1)) if memory else None,
    )


def parse_line(line: str) -> PlanNode:
    """Turn one non-blank plan line into a level-tagged node."""
    m = _LEADING_RE.match(line)
    indent = len(m.group(1))
    cleaned = line[m.end():]
    name_part, sep, rest = cleaned.partition(METRICS_BOUNDARY)
    metrics_text = "(" + rest if sep else ""
    return make_node(
        name_part.strip(),
        indent // INDENT_WIDTH,
        metrics=extract_metrics(metrics_text),
        properties={"raw": line},
    )


def parse_indented(text: str) -> List[PlanNode]:
    """Parse indented plan text into a forest.

    Raises:
        EmptyInputError: trimmed text is empty
    """
    if not (text or "").strip():
        raise EmptyInputError()
    nodes = [parse_line(line) for line in text.splitlines() if line.strip()]
    roots = nest_nodes(nodes)
    logger.debug("Indented parser: %d lines -> %d roots", len(nodes), len(roots))
    return roots
