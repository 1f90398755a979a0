"""Prometheus metrics for pack deployment.

Counts created and failed entities per type, rows soft-deleted during
teardown, and the wall time of whole apply runs.
"""

from prometheus_client import Counter, Histogram

PACK_ENTITIES_CREATED = Counter(
    "agentpack_entities_created_total",
    "Total number of entities created while applying packs",
    labelnames=["pack_key", "entity_type"],
)

# reason: store_error | unresolved_ref
PACK_ENTITY_FAILURES = Counter(
    "agentpack_entity_failures_total",
    "Total number of pack entities that were not created",
    labelnames=["entity_type", "reason"],
)

PACK_APPLY_DURATION = Histogram(
    "agentpack_apply_duration_seconds",
    "Duration of a complete pack apply run",
    labelnames=["pack_key", "outcome"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

PACK_ROWS_CLEARED = Counter(
    "agentpack_rows_cleared_total",
    "Total number of rows soft-deleted by tenant teardown",
    labelnames=["entity_type"],
)
