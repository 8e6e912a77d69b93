"""Bundled demo plans: one order-aggregation query in each textual shape."""

from __future__ import annotations

import json

from .schemas import PlanFormat

SAMPLE_SQL = """
SELECT c.id, count(*) AS completed_orders
FROM orders o
JOIN customers c ON o.customer_id = c.id
WHERE o.status = 'completed'
GROUP BY c.id
""".strip()

_TREE = [
    {
        "Plan": {
            "Node Type": "Aggregate",
            "Actual Rows": 120,
            "Plan Rows": 100,
            "Actual Total Time": 750.0,
            "Total Cost": 600.0,
            "Peak Memory Usage": "48MB",
            "DN Name": "CN",
            "Group Key": ["c.id"],
            "Plans": [
                {
                    "Node Type": "Hash Join",
                    "Join Type": "Inner",
                    "Hash Cond": "(o.customer_id = c.id)",
                    "Actual Rows": 5400,
                    "Plan Rows": 2400,
                    "Actual Total Time": 640.0,
                    "Total Cost": 400.0,
                    "Peak Memory Usage": "96MB",
                    "DN Name": "DN1",
                    "Plans": [
                        {
                            "Node Type": "Seq Scan",
                            "Relation Name": "orders",
                            "Alias": "o",
                            "Filter": "(status = 'completed'::text)",
                            "Actual Rows": 10000,
                            "Plan Rows": 10000,
                            "Actual Total Time": 380.0,
                            "Total Cost": 370.0,
                            "Peak Memory Usage": "32MB",
                            "DN Name": "DN1",
                        },
                        {
                            "Node Type": "Index Scan",
                            "Relation Name": "customers",
                            "Index Name": "customers_pkey",
                            "Actual Rows": 120,
                            "Plan Rows": 120,
                            "Actual Total Time": 80.0,
                            "Total Cost": 60.0,
                            "Peak Memory Usage": "6144KB",
                            "DN Name": "DN2",
                        },
                    ],
                }
            ],
        }
    }
]

SAMPLE_TREE_DATA = json.dumps(_TREE, indent=2)

SAMPLE_INDENTED = """\
Aggregate  (cost=600.00..600.01 rows=120 plan rows=100 actual time=750.000 memory=48MB)
  ->  Hash Join  (cost=60.00..400.00 rows=5400 plan rows=2400 actual time=640.000 memory=96MB)
    ->  Seq Scan on orders  (cost=0.00..370.00 rows=10000 actual time=380.000 memory=32MB)
    ->  Index Scan using customers_pkey on customers  (cost=0.00..60.00 rows=120 actual time=80.000 memory=6MB)
"""

SAMPLE_TABULAR = """\
QUERY PLAN (DWS explain performance)
  id   |            operation             |  A-time  | A-rows | E-rows | Peak Memory | E-costs | dn
-------+----------------------------------+----------+--------+--------+-------------+---------+-----
 1     | Aggregate                        | 750.000  | 120    | 100    | 48MB        | 600.00  | CN
 1.1   | ->  Hash Join                    | 640.000  | 5400   | 2400   | 96MB        | 400.00  | DN1
 1.1.1 | ->  Seq Scan on orders           | 380.000  | 10000  | 10000  | 32MB        | 370.00  | DN1
 1.1.2 | ->  Index Scan on customers_pkey | 80.000   | 120    | 120    | 6MB         | 60.00   | DN2
"""

SAMPLE_PLANS = {
    PlanFormat.TREE_DATA: SAMPLE_TREE_DATA,
    PlanFormat.INDENTED: SAMPLE_INDENTED,
    PlanFormat.TABULAR: SAMPLE_TABULAR,
}


def get_sample(fmt: PlanFormat = PlanFormat.TREE_DATA) -> str:
    return SAMPLE_PLANS[PlanFormat(fmt)]
