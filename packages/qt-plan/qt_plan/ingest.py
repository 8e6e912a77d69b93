"""Ingestion entry point: raw plan text -> PlanExecution.

Usage:
    from qt_plan.ingest import parse
    from qt_plan.builder import ParseOptions

    execution = parse(open("plan.txt").read(), ParseOptions(sql_text=sql))
    print(execution.stats.node_count, execution.summary.dialect)
"""

from __future__ import annotations

import logging
from typing import Optional

from .builder import ParseOptions, build_execution
from .dialect import detect_dialect
from .errors import EmptyInputError
from .parsers import parse_nodes
from .schemas import PlanDialect, PlanExecution

logger = logging.getLogger(__name__)


def parse(raw_text: str, options: Optional[ParseOptions] = None) -> PlanExecution:
    """Parse raw plan text of any supported shape into an execution record.

    Dialect detection only labels the record; the parser is chosen by
    content sniffing. No partial record is returned on failure.

    Raises:
        EmptyInputError: trimmed input is empty
        MalformedInputError: JSON payload is undecodable or has no root plan
    """
    options = options or ParseOptions()
    text = (raw_text or "").strip()
    if not text:
        raise EmptyInputError()

    if options.dialect_hint is not None:
        dialect = PlanDialect(options.dialect_hint)
    else:
        dialect = detect_dialect(text)

    nodes = parse_nodes(text)
    logger.debug("Parsed %d root node(s), dialect=%s", len(nodes), dialect.value)
    return build_execution(nodes, dialect, plan_source=raw_text, options=options)
