"""Communication and delegation graph checks, plus the derived per-role views."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field

from rolecheck.model.types import RBACModel

logger = logging.getLogger(__name__)

SelfEdgePolicy = Literal["warn", "allow", "error"]


class RelationIndex(BaseModel):
    """Forward and reverse adjacency for one matrix, direct edges only.

    Forward lists keep declaration order; reverse lists follow hierarchy order.
    Only edges whose endpoints are both declared roles are indexed.
    """

    forward: dict[str, list[str]] = Field(default_factory=dict)
    reverse: dict[str, list[str]] = Field(default_factory=dict)

    def targets(self, role_id: str) -> list[str]:
        return list(self.forward.get(role_id, []))

    def sources(self, role_id: str) -> list[str]:
        return list(self.reverse.get(role_id, []))

    def has_edge(self, source: str, target: str) -> bool:
        return target in self.forward.get(source, ())


class RelationFindings(BaseModel):
    communication_errors: list[str] = Field(default_factory=list)
    delegation_errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    communication: RelationIndex = Field(default_factory=RelationIndex)
    delegation: RelationIndex = Field(default_factory=RelationIndex)
    delegation_edges: int = 0
    compliant_delegation_edges: int = 0

    @property
    def errors(self) -> list[str]:
        return [*self.communication_errors, *self.delegation_errors]


class RelationChecker:
    """Checks the communication and delegation matrices.

    Unknown endpoints are skipped here; the reference checker reports them.
    Upward delegation (target outranks source) is a security error.
    """

    def __init__(self, model: RBACModel, self_edge_policy: SelfEdgePolicy = "warn") -> None:
        self.model = model
        self.self_edge_policy = self_edge_policy
        self._ranks = model.ranks
        self._order = list(dict.fromkeys(model.role_ids))

    def check(self) -> RelationFindings:
        findings = RelationFindings()
        findings.communication = self._scan(
            "communication", self.model.communication, findings, findings.communication_errors
        )
        findings.delegation = self._scan(
            "delegation", self.model.delegation, findings, findings.delegation_errors
        )
        self._check_delegation_direction(findings)
        self._check_orphans(findings)
        self._log_one_way(findings.communication)
        logger.debug(
            "relation check: %d error(s), %d warning(s), %d/%d delegation edge(s) compliant",
            len(findings.errors),
            len(findings.warnings),
            findings.compliant_delegation_edges,
            findings.delegation_edges,
        )
        return findings

    def _scan(
        self,
        name: str,
        matrix: Mapping[str, tuple[str, ...]],
        findings: RelationFindings,
        errors: list[str],
    ) -> RelationIndex:
        """Single pass over a matrix: flag self/duplicate edges, build the index."""
        forward: dict[str, list[str]] = {role: [] for role in self._order}
        for source, targets in matrix.items():
            seen: set[str] = set()
            for target in targets:
                if target in seen:
                    findings.warnings.append(f"{name} matrix lists '{source}' -> '{target}' more than once")
                    continue
                seen.add(target)
                if source == target:
                    message = f"{name} matrix has self-edge on '{source}'"
                    if self.self_edge_policy == "error":
                        errors.append(message)
                    elif self.self_edge_policy == "warn":
                        findings.warnings.append(message)
                if source in self._ranks and target in self._ranks:
                    forward[source].append(target)

        reverse: dict[str, list[str]] = {role: [] for role in self._order}
        for source in self._order:
            for target in forward[source]:
                reverse[target].append(source)
        return RelationIndex(forward=forward, reverse=reverse)

    def _check_delegation_direction(self, findings: RelationFindings) -> None:
        for source in self._order:
            for target in findings.delegation.forward[source]:
                findings.delegation_edges += 1
                if self._ranks[target] > self._ranks[source]:
                    findings.delegation_errors.append(
                        f"delegation '{source}' (rank {self._ranks[source]}) -> '{target}' "
                        f"(rank {self._ranks[target]}) delegates upward"
                    )
                else:
                    findings.compliant_delegation_edges += 1

    def _check_orphans(self, findings: RelationFindings) -> None:
        isolated = set(self.model.isolated_roles)
        for role in self._order:
            if role in isolated:
                continue
            if not findings.communication.forward[role]:
                findings.warnings.append(f"role '{role}' has no communication channels")
            if not findings.delegation.forward[role] and not findings.delegation.reverse[role]:
                findings.warnings.append(f"role '{role}' cannot delegate or receive tasks")

    def _log_one_way(self, index: RelationIndex) -> None:
        for source in self._order:
            for target in index.forward[source]:
                if source != target and not index.has_edge(target, source):
                    logger.debug("one-way communication: %s -> %s", source, target)
