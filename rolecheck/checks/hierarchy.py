"""Role hierarchy ordering and permission escalation consistency."""

from __future__ import annotations

import logging
from collections import Counter

from pydantic import BaseModel, Field

from rolecheck.model.types import RBACModel

logger = logging.getLogger(__name__)


class EscalationResult(BaseModel):
    """Outcome of comparing one (superior, subordinate) pair."""

    superior: str
    subordinate: str
    satisfied: bool
    missing: list[str] = Field(default_factory=list)


class HierarchyFindings(BaseModel):
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    permission_warnings: list[str] = Field(default_factory=list)
    escalations: list[EscalationResult] = Field(default_factory=list)

    @property
    def hierarchy_valid(self) -> bool:
        return not self.errors

    @property
    def satisfied_pairs(self) -> int:
        return sum(1 for e in self.escalations if e.satisfied)


class HierarchyChecker:
    """Validates rank ordering and the monotonicity of declared escalation pairs.

    Monotonicity is only checked where an escalation pair is declared: some
    permissions are legitimately role-specific, so a global "higher rank holds
    everything below it" rule would be wrong.
    """

    def __init__(self, model: RBACModel) -> None:
        self.model = model
        self._ranks = model.ranks
        self._catalog = set(model.permission_catalog)

    def check(self) -> HierarchyFindings:
        findings = HierarchyFindings()
        self._check_duplicates(findings)
        self._check_ties(findings)
        self._check_expected_order(findings)
        self._check_escalations(findings)
        self._check_permission_map(findings)
        logger.debug(
            "hierarchy check: %d error(s), %d warning(s), %d/%d escalation pair(s) satisfied",
            len(findings.errors),
            len(findings.warnings) + len(findings.permission_warnings),
            findings.satisfied_pairs,
            len(findings.escalations),
        )
        return findings

    # ------------------------------------------------------------------
    # Rank ordering
    # ------------------------------------------------------------------

    def _check_duplicates(self, findings: HierarchyFindings) -> None:
        counts = Counter(self.model.role_ids)
        for role_id in dict.fromkeys(self.model.role_ids):
            if counts[role_id] > 1:
                findings.errors.append(
                    f"role hierarchy declares '{role_id}' {counts[role_id]} times"
                )

    def _check_ties(self, findings: HierarchyFindings) -> None:
        if len(self._ranks) < 2:
            return
        by_rank: dict[int, list[str]] = {}
        for role_id, rank in self._ranks.items():
            by_rank.setdefault(rank, []).append(role_id)
        top, bottom = max(by_rank), min(by_rank)
        for rank in sorted(by_rank, reverse=True):
            tied = by_rank[rank]
            if len(tied) < 2:
                continue
            names = ", ".join(f"'{r}'" for r in tied)
            if rank == top:
                findings.errors.append(f"role hierarchy: multiple roles share the top rank {rank}: {names}")
            elif rank == bottom:
                findings.errors.append(f"role hierarchy: multiple roles share the bottom rank {rank}: {names}")
            else:
                findings.warnings.append(f"role hierarchy: roles share rank {rank}: {names}")

    def _check_expected_order(self, findings: HierarchyFindings) -> None:
        known = [r for r in self.model.expected_order if r in self._ranks]
        for higher, lower in zip(known, known[1:]):
            if self._ranks[higher] <= self._ranks[lower]:
                findings.errors.append(
                    f"role hierarchy: '{higher}' (rank {self._ranks[higher]}) should outrank "
                    f"'{lower}' (rank {self._ranks[lower]})"
                )

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def _check_escalations(self, findings: HierarchyFindings) -> None:
        for superior, subordinate in self.model.escalation_pairs:
            if superior not in self._ranks or subordinate not in self._ranks:
                # already reported as a dangling reference
                findings.escalations.append(
                    EscalationResult(superior=superior, subordinate=subordinate, satisfied=False)
                )
                continue

            satisfied = True
            if self._ranks[superior] <= self._ranks[subordinate]:
                satisfied = False
                findings.permission_warnings.append(
                    f"escalation pair ('{superior}', '{subordinate}'): '{superior}' "
                    f"(rank {self._ranks[superior]}) does not outrank '{subordinate}' "
                    f"(rank {self._ranks[subordinate]})"
                )

            held = set(self.model.permissions_of(superior))
            exempt = set(self.model.role_specific_permissions.get(subordinate, ()))
            missing = [
                perm for perm in dict.fromkeys(self.model.permissions_of(subordinate))
                if perm not in held and perm not in exempt
            ]
            for perm in missing:
                findings.permission_warnings.append(
                    f"permission '{perm}' is held by '{subordinate}' but not by superior '{superior}'"
                )
            findings.escalations.append(
                EscalationResult(
                    superior=superior,
                    subordinate=subordinate,
                    satisfied=satisfied and not missing,
                    missing=missing,
                )
            )

    def _check_permission_map(self, findings: HierarchyFindings) -> None:
        for role_id, perms in self.model.role_permissions.items():
            counts = Counter(perms)
            for perm in dict.fromkeys(perms):
                if counts[perm] > 1:
                    findings.permission_warnings.append(
                        f"permission map for role '{role_id}' lists '{perm}' {counts[perm]} times"
                    )

        for role_id in dict.fromkeys(self.model.role_ids):
            if role_id not in self.model.role_permissions:
                findings.permission_warnings.append(f"role '{role_id}' has no permission map entry")

        granted = {perm for perms in self.model.role_permissions.values() for perm in perms}
        for perm in dict.fromkeys(self.model.permission_catalog):
            if perm not in granted:
                findings.permission_warnings.append(f"permission '{perm}' is not granted to any role")
