"""Tabular-text plan parser.

Handles column renderings such as ``EXPLAIN PERFORMANCE`` output:

    id  | operation          | A-time | A-rows | E-rows | Peak Memory | E-costs
    1   | Aggregate          | 750.0  | 120    | 100    | 48MB        | 600
    1.1 | Hash Join          | 640.0  | 5400   | 2400   | 96MB        | 400

Columns are split on ``|`` or on runs of two or more spaces. Depth comes
from the dotted ``id`` column. Without a recognisable header the whole text
is handed to the indented parser instead.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from ..errors import EmptyInputError
from ..normalize import make_node
from ..schemas import PlanMetric, PlanNode
from ..units import leading_number, parse_memory
from .indented import parse_indented
from .nesting import nest_nodes

logger = logging.getLogger(__name__)

PIPE_SPLIT_RE = re.compile(r"\s*\|\s*")
SPACE_SPLIT_RE = re.compile(r"\s{2,}")
_RULE_LINE_RE = re.compile(r"^[-+|\s]+$")
_OPERATION_RE = re.compile(r"operation", re.IGNORECASE)
_ACTUAL_TIME_RE = re.compile(r"A-time", re.IGNORECASE)
_MARKER_RE = re.compile(r"^(?:->)?\s*")


def split_columns(line: str) -> List[str]:
    """Split a table line into cells.

    Bar-delimited lines split on bars only, so an operation cell such as
    ``->  Hash Join`` stays whole; other lines split on 2+ spaces.
    """
    line = line.strip()
    if "|" in line:
        return PIPE_SPLIT_RE.split(line.strip("|").strip())
    return SPACE_SPLIT_RE.split(line)


def _find_header(lines: List[str]) -> int:
    for idx, line in enumerate(lines):
        if _OPERATION_RE.search(line) and _ACTUAL_TIME_RE.search(line):
            return idx
    return -1


def _first_cell(row: Dict[str, str], *keys: str) -> Optional[str]:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _level_from_id(row_id: Optional[str]) -> int:
    if not row_id:
        return 0
    return len(row_id.split(".")) - 1


def _row_to_node(row: Dict[str, str], step: int) -> PlanNode:
    name = _first_cell(row, "operation", "node") or f"Step {step}"
    name = _MARKER_RE.sub("", name.strip(), count=1)

    actual_rows = leading_number(_first_cell(row, "a-rows", "rows"))
    estimated_rows = leading_number(_first_cell(row, "e-rows", "rows"))
    peak_memory = row.get("peak memory")
    metrics = PlanMetric(
        actual_rows=int(actual_rows or 0),
        estimated_rows=int(estimated_rows or 0),
        actual_time_ms=leading_number(row.get("a-time")) or 0.0,
        estimated_time_ms=leading_number(row.get("e-costs")) or 0.0,
        memory_mb=parse_memory(peak_memory) if peak_memory else None,
        executor_id=_first_cell(row, "dn", "node"),
    )
    return make_node(
        name,
        _level_from_id(row.get("id")),
        metrics=metrics,
        properties=dict(row),
    )


def parse_tabular(text: str) -> List[PlanNode]:
    """Parse a header-plus-rows plan table into a forest.

    Rows whose column count differs from the header are skipped.

    Raises:
        EmptyInputError: trimmed text is empty
    """
    if not (text or "").strip():
        raise EmptyInputError()

    lines = [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not _RULE_LINE_RE.match(line.strip())
    ]
    header_idx = _find_header(lines)
    if header_idx == -1:
        logger.debug("No tabular header found; falling back to indented parser")
        return parse_indented(text)

    headers = [h.lower() for h in split_columns(lines[header_idx])]
    nodes: List[PlanNode] = []
    for offset, line in enumerate(lines[header_idx + 1:], start=1):
        columns = split_columns(line)
        if len(columns) != len(headers):
            logger.debug(
                "Skipping row %d: %d columns, header has %d",
                offset, len(columns), len(headers),
            )
            continue
        nodes.append(_row_to_node(dict(zip(headers, columns)), offset))

    roots = nest_nodes(nodes)
    logger.debug("Tabular parser: %d rows -> %d roots", len(nodes), len(roots))
    return roots
