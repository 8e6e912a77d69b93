"""Operator documentation lookup.

Maps operator names to documentation keys and holds the static reference
table shown next to plan nodes.

Usage:
    from qt_plan.node_docs import doc_key_for, lookup_doc_entry

    entry = lookup_doc_entry(doc_key_for("Hash Join"))
    print(entry.title, entry.source_url)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DOC_KEY_MAP: Dict[str, str] = {
    "Aggregate": "aggregate",
    "Hash Aggregate": "aggregate",
    "Hash Join": "hash_join",
    "Nested Loop": "nest_loop",
    "Seq Scan": "seq_scan",
    "Index Scan": "index_scan",
    "Bitmap Heap Scan": "bitmap_heap",
    "Bitmap Index Scan": "bitmap_index",
}

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class PlanDocEntry:
    key: str
    title: str
    summary: str
    optimization: List[str] = field(default_factory=list)
    source_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "summary": self.summary,
            "optimization": list(self.optimization),
            "sourceUrl": self.source_url,
        }


_DOCS: Dict[str, PlanDocEntry] = {
    "aggregate": PlanDocEntry(
        key="aggregate",
        title="Aggregate",
        summary=(
            "Combines rows using group keys; watch for large hash tables or partial "
            "aggregate opportunities in distributed coordinators."
        ),
        optimization=[
            "Consider pushing aggregates down to DNs or using pre-aggregated materialized views",
            "Ensure grouping keys leverage distribution to avoid re-partitioning",
        ],
        source_url="https://docs.opengauss.org/en/docs/latest/docs/Developerguide/sql-aggregate.html",
    ),
    "hash_join": PlanDocEntry(
        key="hash_join",
        title="Hash Join",
        summary=(
            "Builds a hash table from the smaller input and probes with the other; "
            "sensitive to work_mem sizing and skewed rows."
        ),
        optimization=[
            "Verify join keys are selective and stats are fresh (ANALYZE)",
            "Increase work_mem or enable spill-friendly operators when hash table exceeds memory",
            "Distribute tables on common keys in DWS to reduce network shuffle",
        ],
        source_url="https://support.huaweicloud.com/devg-dws/dws_04_0401.html",
    ),
    "seq_scan": PlanDocEntry(
        key="seq_scan",
        title="Sequential Scan",
        summary=(
            "Reads an entire table; acceptable for analytic scans but problematic "
            "for OLTP-style filters when stats mispredict."
        ),
        optimization=[
            "Ensure predicates can use indexes or partition pruning",
            "Consider columnar storage or projections to reduce IO",
        ],
        source_url="https://docs.opengauss.org/en/docs/latest/docs/Developerguide/sql-select.html",
    ),
    "index_scan": PlanDocEntry(
        key="index_scan",
        title="Index Scan",
        summary=(
            "Traverses a B-Tree index and fetches heap rows; random IO can dominate "
            "when many rows are returned."
        ),
        optimization=[
            "Cover the query using index-only scans if possible",
            "Monitor heap fetch vs index hits to size buffer pools",
        ],
        source_url="https://support.huaweicloud.com/intl/en-us/devg-opengauss/",
    ),
}


def doc_key_for(name: str) -> str:
    """Documentation key for an operator name.

    Known operators use DOC_KEY_MAP; anything else is lower-cased with
    whitespace runs turned into underscores ("Sort Key" -> "sort_key").
    """
    name = (name or "").strip()
    if name in DOC_KEY_MAP:
        return DOC_KEY_MAP[name]
    return _WHITESPACE_RE.sub("_", name.lower())


def lookup_doc_entry(key: Optional[str]) -> Optional[PlanDocEntry]:
    if not key:
        return None
    return _DOCS.get(key)


def list_docs() -> List[PlanDocEntry]:
    return list(_DOCS.values())
