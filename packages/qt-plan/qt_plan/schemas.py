"""QueryTorque Plan schemas.

Data structures for the plan ingestion engine:
- Plan tree: PlanMetric, PlanNode
- Execution record: PlanSummary, PlanStats, PlanExecution
- Derived views: PlanInsight, NodeDigest, SqlDigest, PlanDigest

``to_dict()`` renders the camelCase wire shape consumed by the CLI JSON
output and by the external analysis collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class PlanDialect(str, Enum):
    """Database product family that produced the plan text."""
    OPENGAUSS = "opengauss"
    DWS = "dws"


class PlanSource(str, Enum):
    """How the plan text reached the engine."""
    MANUAL_IMPORT = "upload"
    LIVE_CONNECTION = "connection"


class PlanFormat(str, Enum):
    """Textual shape of the raw plan, chosen by content sniffing."""
    TREE_DATA = "json"
    TABULAR = "table"
    INDENTED = "text"


class Severity(str, Enum):
    INFO = "info"
    WARN = "warn"
    CRITICAL = "critical"


@dataclass
class PlanMetric:
    actual_rows: int = 0
    estimated_rows: int = 0
    actual_time_ms: float = 0.0
    estimated_time_ms: float = 0.0
    memory_mb: Optional[float] = None  # None = unknown, never zero
    executor_id: Optional[str] = None  # originating DN / shard

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actualRows": self.actual_rows,
            "estimatedRows": self.estimated_rows,
            "actualTimeMs": self.actual_time_ms,
            "estimatedTimeMs": self.estimated_time_ms,
            "memoryMB": self.memory_mb,
            "executorId": self.executor_id,
        }


@dataclass
class PlanNode:
    """One operator in the plan tree.

    Children are owned exclusively by their parent and keep parse order.
    """
    id: str
    name: str
    level: int
    metrics: PlanMetric = field(default_factory=PlanMetric)
    properties: Dict[str, Any] = field(default_factory=dict)
    children: List["PlanNode"] = field(default_factory=list)
    warnings: Optional[List[str]] = None
    doc_key: Optional[str] = None

    def iter_nodes(self):
        """Yield this node and every descendant in pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "metrics": self.metrics.to_dict(),
            "properties": dict(self.properties),
            "warnings": list(self.warnings) if self.warnings else None,
            "docKey": self.doc_key,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class PlanSummary:
    id: str
    captured_at: datetime
    dialect: PlanDialect
    source: PlanSource
    sql_fingerprint: str
    title: str
    sql_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "capturedAt": self.captured_at.isoformat(),
            "dialect": self.dialect.value,
            "source": self.source.value,
            "sqlFingerprint": self.sql_fingerprint,
            "title": self.title,
            "sqlText": self.sql_text,
        }


@dataclass
class PlanStats:
    """Rolled-up totals, always recomputed from the node forest."""
    total_time_ms: int = 0
    total_memory_mb: int = 0
    node_count: int = 0
    depth: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalTimeMs": self.total_time_ms,
            "totalMemoryMB": self.total_memory_mb,
            "nodeCount": self.node_count,
            "depth": self.depth,
        }


@dataclass
class PlanExecution:
    """Aggregate root produced once per ingestion."""
    summary: PlanSummary
    plan_source: str
    nodes: List[PlanNode]
    stats: PlanStats
    plan_query: Optional[str] = None

    def iter_nodes(self):
        for root in self.nodes:
            yield from root.iter_nodes()

    def find_node(self, node_id: str) -> Optional[PlanNode]:
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "planSource": self.plan_source,
            "planQuery": self.plan_query,
            "nodes": [node.to_dict() for node in self.nodes],
            "stats": self.stats.to_dict(),
        }


@dataclass
class PlanInsight:
    id: str
    title: str
    severity: Severity
    details: str
    node_ref: Optional[str] = None  # lookup-only reference to PlanNode.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "severity": self.severity.value,
            "details": self.details,
            "nodeRef": self.node_ref,
        }


@dataclass
class NodeDigest:
    id: str
    name: str
    level: int
    parent_id: Optional[str]
    actual_rows: int
    estimated_rows: int
    actual_time_ms: float
    estimated_time_ms: float
    memory_mb: Optional[float]
    estimate_ratio: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "parentId": self.parent_id,
            "actualRows": self.actual_rows,
            "estimatedRows": self.estimated_rows,
            "actualTimeMs": self.actual_time_ms,
            "estimatedTimeMs": self.estimated_time_ms,
            "memoryMB": self.memory_mb,
            "estimateRatio": self.estimate_ratio,
        }


@dataclass
class SqlDigest:
    length: int
    preview: Optional[str]
    fingerprint: str
    truncated: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "length": self.length,
            "preview": self.preview,
            "fingerprint": self.fingerprint,
            "truncated": self.truncated,
        }


@dataclass
class PlanDigest:
    """Bounded projection of a PlanExecution for external analysis."""
    dialect: PlanDialect
    sql: SqlDigest
    stats: PlanStats
    top_nodes_by_time: List[NodeDigest] = field(default_factory=list)
    top_nodes_by_rows: List[NodeDigest] = field(default_factory=list)
    skewed_nodes: List[NodeDigest] = field(default_factory=list)
    node_type_counts: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dialect": self.dialect.value,
            "sql": self.sql.to_dict(),
            "stats": self.stats.to_dict(),
            "topNodesByTime": [n.to_dict() for n in self.top_nodes_by_time],
            "topNodesByRows": [n.to_dict() for n in self.top_nodes_by_rows],
            "skewedNodes": [n.to_dict() for n in self.skewed_nodes],
            "nodeTypeCounts": [dict(entry) for entry in self.node_type_counts],
            "warnings": [dict(entry) for entry in self.warnings],
        }
