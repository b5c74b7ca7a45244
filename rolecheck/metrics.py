"""Health metrics derived from structured checker findings."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field

from rolecheck.checks.hierarchy import HierarchyFindings
from rolecheck.checks.relations import RelationFindings
from rolecheck.checks.workflows import WorkflowFindings
from rolecheck.config.models import MetricWeights
from rolecheck.model.types import RBACModel

logger = logging.getLogger(__name__)

METRIC_NAMES: tuple[str, ...] = (
    "interconnection_coverage",
    "permission_consistency",
    "workflow_completeness",
    "security_compliance",
)


class MetricsResult(BaseModel):
    """Four bounded component scores and their weighted composite, all in [0, 100].

    Values are unrounded; use ``rounded()`` for display only.
    """

    interconnection_coverage: float = 100.0
    permission_consistency: float = 100.0
    workflow_completeness: float = 100.0
    security_compliance: float = 100.0
    overall_health_score: float = 100.0
    excluded: list[str] = Field(default_factory=list)

    def rounded(self) -> "MetricsResult":
        return self.model_copy(
            update={
                name: round(getattr(self, name), 1)
                for name in (*METRIC_NAMES, "overall_health_score")
            }
        )


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _ratio(numerator: int, denominator: int) -> float | None:
    """Percentage, or None when there is nothing to measure."""
    if denominator == 0:
        return None
    return _clamp(numerator / denominator * 100.0)


def connected_pairs(model: RBACModel, relations: RelationFindings) -> tuple[int, int]:
    """Count (connected, expected) unordered should-connect pairs.

    A pair is connected when either matrix has an edge in either direction.
    Self-pairs are left out; the reference checker warns about them.
    """
    pairs = dict.fromkeys(frozenset(p) for p in model.should_connect if p[0] != p[1])
    connected = 0
    for pair in pairs:
        a, b = sorted(pair)
        if any(
            index.has_edge(a, b) or index.has_edge(b, a)
            for index in (relations.communication, relations.delegation)
        ):
            connected += 1
    return connected, len(pairs)


def compute_metrics(
    model: RBACModel,
    hierarchy: HierarchyFindings,
    relations: RelationFindings,
    workflows: WorkflowFindings,
    weights: MetricWeights | None = None,
    vacuous_policy: Literal["full", "exclude"] = "full",
) -> MetricsResult:
    """Reduce checker findings to a MetricsResult.

    Empty denominators score 100. Under ``vacuous_policy="exclude"`` they are
    also dropped from the composite, whose weights are renormalised over the
    remaining metrics; if nothing remains the composite is 100.
    """
    weights = weights or MetricWeights()

    connected, expected = connected_pairs(model, relations)
    raw: dict[str, float | None] = {
        "interconnection_coverage": _ratio(connected, expected),
        "permission_consistency": _ratio(hierarchy.satisfied_pairs, len(hierarchy.escalations)),
        "workflow_completeness": _ratio(workflows.valid_count, len(workflows.results)),
        "security_compliance": _ratio(relations.compliant_delegation_edges, relations.delegation_edges),
    }

    excluded = [name for name, value in raw.items() if value is None] if vacuous_policy == "exclude" else []
    scores = {name: 100.0 if value is None else value for name, value in raw.items()}

    weight_map = weights.as_dict()
    total_weight = sum(w for name, w in weight_map.items() if name not in excluded)
    if total_weight > 0:
        overall = sum(
            scores[name] * w for name, w in weight_map.items() if name not in excluded
        ) / total_weight
    else:
        overall = 100.0

    result = MetricsResult(**scores, overall_health_score=_clamp(overall), excluded=excluded)
    logger.debug("metrics: %s", result.rounded().model_dump())
    return result
