"""Validator facade: runs the checkers in a fixed order and aggregates results."""

from __future__ import annotations

import logging
from functools import cached_property

from pydantic import BaseModel, Field

from rolecheck.checks import (
    HierarchyChecker,
    HierarchyFindings,
    ReferenceChecker,
    ReferenceFindings,
    RelationChecker,
    RelationFindings,
    WorkflowChecker,
    WorkflowFindings,
    WorkflowValidationResult,
)
from rolecheck.config.models import ValidatorConfig
from rolecheck.metrics import MetricsResult, compute_metrics
from rolecheck.model.catalog import DEFAULT_MODEL
from rolecheck.model.types import RBACModel
from rolecheck.summary import CommunicationPartners, RoleSummary, RoleSummaryProjector, WorkflowPath

logger = logging.getLogger(__name__)


class ValidationDetails(BaseModel):
    hierarchy_valid: bool = True
    permissions_consistent: bool = True
    communication_paths_valid: bool = True
    workflow_paths_valid: bool = True
    delegation_matrix_valid: bool = True


class ValidationResult(BaseModel):
    """Aggregated result of one validation pass."""

    valid: bool = True
    details: ValidationDetails = Field(default_factory=ValidationDetails)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class RoleInterconnectionValidator:
    """Validates one immutable RBAC model snapshot.

    Checker output is computed once per instance and reused; every public
    method returns fresh result objects. Errors and warnings are ordered by
    checker (references, hierarchy, relations, workflows) and then by model
    declaration order, so repeated calls produce identical output.
    """

    def __init__(self, model: RBACModel | None = None, config: ValidatorConfig | None = None) -> None:
        self.model = model if model is not None else DEFAULT_MODEL
        self.config = config or ValidatorConfig()

    # -- Checker output ------------------------------------------------------

    @cached_property
    def references(self) -> ReferenceFindings:
        return ReferenceChecker(self.model).check()

    @cached_property
    def hierarchy(self) -> HierarchyFindings:
        return HierarchyChecker(self.model).check()

    @cached_property
    def relations(self) -> RelationFindings:
        return RelationChecker(self.model, self.config.self_edge_policy).check()

    @cached_property
    def workflows(self) -> WorkflowFindings:
        return WorkflowChecker(
            self.model,
            self.relations.communication,
            self.relations.delegation,
            warn_undelegated_handoffs=self.config.warn_undelegated_handoffs,
        ).check()

    @cached_property
    def _projector(self) -> RoleSummaryProjector:
        return RoleSummaryProjector(self.model, self.relations)

    # -- Public API ----------------------------------------------------------

    def validate_role_interconnections(self) -> ValidationResult:
        refs, hier, rel, wf = self.references, self.hierarchy, self.relations, self.workflows

        details = ValidationDetails(
            hierarchy_valid=hier.hierarchy_valid and not refs.has_role_errors,
            permissions_consistent=not refs.permissions,
            communication_paths_valid=not refs.communication and not rel.communication_errors,
            workflow_paths_valid=not refs.workflows and wf.all_valid,
            delegation_matrix_valid=not refs.delegation and not rel.delegation_errors,
        )
        errors = [*refs.errors, *hier.errors, *rel.errors, *wf.errors]
        warnings = [
            *refs.warnings, *hier.warnings, *hier.permission_warnings, *rel.warnings, *wf.warnings
        ]
        valid = all(details.model_dump().values())

        logger.info(
            "validated %d role(s), %d workflow(s): %s (%d error(s), %d warning(s))",
            len(self.model.roles),
            len(self.model.workflows),
            "valid" if valid else "invalid",
            len(errors),
            len(warnings),
        )
        return ValidationResult(valid=valid, details=details, errors=errors, warnings=warnings)

    def calculate_interconnection_metrics(self) -> MetricsResult:
        return compute_metrics(
            self.model,
            self.hierarchy,
            self.relations,
            self.workflows,
            weights=self.config.weights,
            vacuous_policy=self.config.vacuous_policy,
        )

    def validate_all_workflows(self) -> list[WorkflowValidationResult]:
        return [r.model_copy(deep=True) for r in self.workflows.results]

    def get_role_permission_summary(self, role_id: str) -> RoleSummary | None:
        return self._projector.summary(role_id)

    def get_all_role_summaries(self) -> list[RoleSummary]:
        return self._projector.all_summaries()

    def get_communication_partners(self, role_id: str) -> CommunicationPartners | None:
        return self._projector.partners(role_id)

    def get_workflow_path(self, name: str) -> WorkflowPath | None:
        return self._projector.workflow_path(name)


# -- Module-level conveniences ---------------------------------------------
# Each call builds its own validator; nothing is cached between calls.


def validate_role_interconnections(
    model: RBACModel | None = None, config: ValidatorConfig | None = None
) -> ValidationResult:
    return RoleInterconnectionValidator(model, config).validate_role_interconnections()


def calculate_interconnection_metrics(
    model: RBACModel | None = None, config: ValidatorConfig | None = None
) -> MetricsResult:
    return RoleInterconnectionValidator(model, config).calculate_interconnection_metrics()


def validate_all_workflows(
    model: RBACModel | None = None, config: ValidatorConfig | None = None
) -> list[WorkflowValidationResult]:
    return RoleInterconnectionValidator(model, config).validate_all_workflows()


def get_role_permission_summary(
    role_id: str, model: RBACModel | None = None, config: ValidatorConfig | None = None
) -> RoleSummary | None:
    return RoleInterconnectionValidator(model, config).get_role_permission_summary(role_id)


def get_all_role_summaries(
    model: RBACModel | None = None, config: ValidatorConfig | None = None
) -> list[RoleSummary]:
    return RoleInterconnectionValidator(model, config).get_all_role_summaries()
