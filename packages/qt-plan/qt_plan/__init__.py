"""QueryTorque Plan — execution plan ingestion and analysis engine.

Pipeline:
1. Detect:    dialect keyword search (advisory) + format sniff
2. Parse:     tree-data (JSON) | tabular | indented text -> PlanNode forest
3. Build:     PlanExecution with summary, fingerprint and rolled-up stats
4. Evaluate:  rule-based PlanInsights (runtime share, row skew, memory)
5. Compact:   bounded PlanDigest for external analysis

Usage:
    from qt_plan import parse, evaluate, compact, ParseOptions

    execution = parse(plan_text, ParseOptions(sql_text=sql))
    for insight in evaluate(execution):
        print(insight.severity.value, insight.title)
    digest = compact(execution)
"""

from .builder import ParseOptions, build_execution
from .dialect import detect_dialect
from .digest import compact
from .errors import EmptyInputError, MalformedInputError, PlanParseError
from .ingest import parse
from .insights import evaluate
from .parsers import detect_format
from .schemas import (
    NodeDigest,
    PlanDialect,
    PlanDigest,
    PlanExecution,
    PlanFormat,
    PlanInsight,
    PlanMetric,
    PlanNode,
    PlanSource,
    PlanStats,
    PlanSummary,
    Severity,
    SqlDigest,
)

__version__ = "0.1.0"

__all__ = [
    "parse",
    "evaluate",
    "compact",
    "build_execution",
    "detect_dialect",
    "detect_format",
    "ParseOptions",
    "PlanParseError",
    "EmptyInputError",
    "MalformedInputError",
    "NodeDigest",
    "PlanDialect",
    "PlanDigest",
    "PlanExecution",
    "PlanFormat",
    "PlanInsight",
    "PlanMetric",
    "PlanNode",
    "PlanSource",
    "PlanStats",
    "PlanSummary",
    "Severity",
    "SqlDigest",
]
