"""Dialect detection for raw plan text.

Advisory only: the result selects documentation and analysis context, never
the parsing strategy (see ``qt_plan.parsers.detect_format``).
"""

from __future__ import annotations

import re

from .schemas import PlanDialect

PRIMARY_DIALECT = PlanDialect.OPENGAUSS

# Checked in order; first keyword found wins
_DIALECT_KEYWORDS = (
    (PlanDialect.OPENGAUSS, re.compile(r"opengauss", re.IGNORECASE)),
    (PlanDialect.DWS, re.compile(r"dws", re.IGNORECASE)),
)


def detect_dialect(text: str) -> PlanDialect:
    """Classify plan text by case-insensitive keyword search."""
    for dialect, pattern in _DIALECT_KEYWORDS:
        if pattern.search(text or ""):
            return dialect
    return PRIMARY_DIALECT
