"""Format-specific plan parsers.

Format is sniffed from content, in priority order:
1. Text starting with ``{`` or ``[``      -> tree-data (JSON) parser
2. Text with both ``E-rows`` and ``A-time`` -> tabular parser
3. Anything else                          -> indented parser

The order matters: the tabular parser downgrades to the indented parser when
no header row is found, instead of failing.
"""

from __future__ import annotations

import logging
from typing import List

from ..errors import EmptyInputError
from ..schemas import PlanFormat, PlanNode
from .indented import parse_indented
from .nesting import nest_by_level, nest_nodes
from .tabular import parse_tabular
from .tree_data import parse_tree_data

logger = logging.getLogger(__name__)

ROW_ESTIMATE_MARKER = "E-rows"
TIMING_MARKER = "A-time"

_PARSERS = {
    PlanFormat.TREE_DATA: parse_tree_data,
    PlanFormat.TABULAR: parse_tabular,
    PlanFormat.INDENTED: parse_indented,
}


def detect_format(text: str) -> PlanFormat:
    stripped = (text or "").strip()
    if stripped.startswith(("{", "[")):
        return PlanFormat.TREE_DATA
    if ROW_ESTIMATE_MARKER in stripped and TIMING_MARKER in stripped:
        return PlanFormat.TABULAR
    return PlanFormat.INDENTED


def parse_nodes(text: str) -> List[PlanNode]:
    """Sniff the format and run the matching parser.

    Raises:
        EmptyInputError: trimmed text is empty
        MalformedInputError: JSON payload is undecodable or has no root plan
    """
    stripped = (text or "").strip()
    if not stripped:
        raise EmptyInputError()
    fmt = detect_format(stripped)
    logger.debug("Detected plan format: %s", fmt.value)
    return _PARSERS[fmt](stripped)


__all__ = [
    "detect_format",
    "parse_nodes",
    "parse_tree_data",
    "parse_tabular",
    "parse_indented",
    "nest_by_level",
    "nest_nodes",
]
