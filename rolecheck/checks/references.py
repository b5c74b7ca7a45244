"""Referential integrity: every role and permission id must be declared."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from pydantic import BaseModel, Field

from rolecheck.model.types import RBACModel

logger = logging.getLogger(__name__)


class ReferenceFindings(BaseModel):
    """Dangling references, grouped by the part of the model they were found in."""

    permissions: list[str] = Field(default_factory=list)
    communication: list[str] = Field(default_factory=list)
    delegation: list[str] = Field(default_factory=list)
    workflows: list[str] = Field(default_factory=list)
    policy: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    has_role_errors: bool = False

    @property
    def errors(self) -> list[str]:
        return [
            *self.permissions,
            *self.communication,
            *self.delegation,
            *self.workflows,
            *self.policy,
        ]


class ReferenceChecker:
    """Confirms that matrices, workflows and policy inputs only name known ids."""

    def __init__(self, model: RBACModel) -> None:
        self.model = model
        self._roles = set(model.role_ids)
        self._catalog = set(model.permission_catalog)

    def check(self) -> ReferenceFindings:
        findings = ReferenceFindings()
        self._check_permission_map(findings)
        self._check_matrix(findings, "communication", self.model.communication, findings.communication)
        self._check_matrix(findings, "delegation", self.model.delegation, findings.delegation)
        self._check_workflows(findings)
        self._check_policy(findings)
        logger.debug("reference check: %d dangling reference(s)", len(findings.errors))
        return findings

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _role(self, findings: ReferenceFindings, bucket: list[str], role_id: str, message: str) -> None:
        if role_id in self._roles:
            return
        bucket.append(message)
        findings.has_role_errors = True

    def _check_permission_map(self, findings: ReferenceFindings) -> None:
        bucket = findings.permissions
        for role_id, perms in self.model.role_permissions.items():
            self._role(findings, bucket, role_id, f"permission map references unknown role '{role_id}'")
            for perm in perms:
                if perm not in self._catalog:
                    bucket.append(
                        f"permission map for role '{role_id}' references unknown permission '{perm}'"
                    )
        for role_id, perms in self.model.role_specific_permissions.items():
            self._role(
                findings, bucket, role_id,
                f"role-specific permissions reference unknown role '{role_id}'",
            )
            for perm in perms:
                if perm not in self._catalog:
                    bucket.append(
                        f"role-specific permissions for '{role_id}' reference unknown permission '{perm}'"
                    )

    def _check_matrix(
        self,
        findings: ReferenceFindings,
        name: str,
        matrix: Mapping[str, tuple[str, ...]],
        bucket: list[str],
    ) -> None:
        for source, targets in matrix.items():
            self._role(findings, bucket, source, f"{name} matrix references unknown source role '{source}'")
            for target in targets:
                self._role(
                    findings, bucket, target,
                    f"{name} matrix entry '{source}' -> '{target}' references unknown role '{target}'",
                )

    def _check_workflows(self, findings: ReferenceFindings) -> None:
        bucket = findings.workflows
        for workflow in self.model.workflows:
            for i, step in enumerate(workflow.steps, start=1):
                self._role(
                    findings, bucket, step.role,
                    f"workflow '{workflow.name}' step {i} references unknown role '{step.role}'",
                )
                if step.permission not in self._catalog:
                    bucket.append(
                        f"workflow '{workflow.name}' step {i} references unknown permission "
                        f"'{step.permission}'"
                    )

    def _check_policy(self, findings: ReferenceFindings) -> None:
        bucket = findings.policy
        for role_id in self.model.expected_order:
            self._role(findings, bucket, role_id, f"expected order references unknown role '{role_id}'")
        for superior, subordinate in self.model.escalation_pairs:
            for role_id in dict.fromkeys((superior, subordinate)):
                self._role(
                    findings, bucket, role_id,
                    f"escalation pair ('{superior}', '{subordinate}') references unknown role '{role_id}'",
                )
        for a, b in self.model.should_connect:
            if a == b:
                findings.warnings.append(
                    f"should-connect pair ('{a}', '{b}') names the same role twice and is ignored"
                )
            for role_id in dict.fromkeys((a, b)):
                self._role(
                    findings, bucket, role_id,
                    f"should-connect pair ('{a}', '{b}') references unknown role '{role_id}'",
                )
        for role_id in self.model.isolated_roles:
            self._role(findings, bucket, role_id, f"isolated roles reference unknown role '{role_id}'")
