"""Workflow path checks: permission possession and step-to-step reachability."""

from __future__ import annotations

import logging
from collections import Counter

from pydantic import BaseModel, Field

from rolecheck.checks.relations import RelationIndex
from rolecheck.model.types import RBACModel, Workflow

logger = logging.getLogger(__name__)


class StepResult(BaseModel):
    step: int
    name: str
    role: str
    permission: str
    valid: bool
    error: str | None = None


class WorkflowValidationResult(BaseModel):
    """Outcome of walking one workflow's steps."""

    workflow_name: str
    valid: bool
    step_count: int
    distinct_roles: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    steps: list[StepResult] = Field(default_factory=list)


class WorkflowFindings(BaseModel):
    results: list[WorkflowValidationResult] = Field(default_factory=list)
    # Pooled for the facade; dangling references are left to the reference checker.
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def all_valid(self) -> bool:
        return all(r.valid for r in self.results)

    @property
    def valid_count(self) -> int:
        return sum(1 for r in self.results if r.valid)


class WorkflowChecker:
    """Walks each workflow in declaration order.

    A step is invalid when its role or permission is unknown, when its role
    lacks the permission, or when the baton passes from a different role
    without a communication edge between them.
    """

    def __init__(
        self,
        model: RBACModel,
        communication: RelationIndex,
        delegation: RelationIndex | None = None,
        warn_undelegated_handoffs: bool = False,
    ) -> None:
        self.model = model
        self.communication = communication
        self.delegation = delegation or RelationIndex()
        self.warn_undelegated_handoffs = warn_undelegated_handoffs
        self._roles = set(model.role_ids)
        self._catalog = set(model.permission_catalog)

    def check(self) -> WorkflowFindings:
        findings = WorkflowFindings()

        counts = Counter(w.name for w in self.model.workflows)
        for name in dict.fromkeys(w.name for w in self.model.workflows):
            if counts[name] > 1:
                findings.warnings.append(f"workflow '{name}' is declared {counts[name]} times")

        for workflow in self.model.workflows:
            findings.results.append(self._check_workflow(workflow, findings))

        logger.debug(
            "workflow check: %d/%d workflow(s) valid",
            findings.valid_count,
            len(findings.results),
        )
        return findings

    def _check_workflow(self, workflow: Workflow, findings: WorkflowFindings) -> WorkflowValidationResult:
        name = workflow.name
        errors: list[str] = []
        steps: list[StepResult] = []

        if not workflow.steps:
            msg = f"workflow '{name}' has no steps"
            errors.append(msg)
            findings.errors.append(msg)

        prev_role: str | None = None
        for i, step in enumerate(workflow.steps, start=1):
            step_errors: list[str] = []
            role_known = step.role in self._roles
            perm_known = step.permission in self._catalog

            # Dangling ids: listed on the workflow result, not pooled again.
            if not role_known:
                step_errors.append(f"workflow '{name}' step {i} references unknown role '{step.role}'")
            if not perm_known:
                step_errors.append(
                    f"workflow '{name}' step {i} references unknown permission '{step.permission}'"
                )
            errors.extend(step_errors)

            if role_known and perm_known and step.permission not in self.model.permissions_of(step.role):
                msg = f"workflow '{name}' step {i}: role '{step.role}' lacks permission '{step.permission}'"
                step_errors.append(msg)
                errors.append(msg)
                findings.errors.append(msg)

            if prev_role is not None and prev_role != step.role:
                if prev_role in self._roles and role_known:
                    if not self.communication.has_edge(prev_role, step.role):
                        msg = (
                            f"workflow '{name}' step {i}: no communication path "
                            f"from '{prev_role}' to '{step.role}'"
                        )
                        step_errors.append(msg)
                        errors.append(msg)
                        findings.errors.append(msg)
                    elif self.warn_undelegated_handoffs and not self.delegation.has_edge(prev_role, step.role):
                        findings.warnings.append(
                            f"workflow '{name}' step {i}: handoff from '{prev_role}' to "
                            f"'{step.role}' has no delegation edge"
                        )

            steps.append(
                StepResult(
                    step=i,
                    name=step.name,
                    role=step.role,
                    permission=step.permission,
                    valid=not step_errors,
                    error="; ".join(step_errors) or None,
                )
            )
            prev_role = step.role

        return WorkflowValidationResult(
            workflow_name=name,
            valid=not errors,
            step_count=len(workflow.steps),
            distinct_roles=list(dict.fromkeys(s.role for s in workflow.steps)),
            errors=errors,
            steps=steps,
        )
