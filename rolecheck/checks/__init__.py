"""Checkers run by the validator, in order: references, hierarchy, relations, workflows."""

from rolecheck.checks.hierarchy import EscalationResult, HierarchyChecker, HierarchyFindings
from rolecheck.checks.references import ReferenceChecker, ReferenceFindings
from rolecheck.checks.relations import RelationChecker, RelationFindings, RelationIndex
from rolecheck.checks.workflows import (
    StepResult,
    WorkflowChecker,
    WorkflowFindings,
    WorkflowValidationResult,
)

__all__ = [
    "EscalationResult",
    "HierarchyChecker",
    "HierarchyFindings",
    "ReferenceChecker",
    "ReferenceFindings",
    "RelationChecker",
    "RelationFindings",
    "RelationIndex",
    "StepResult",
    "WorkflowChecker",
    "WorkflowFindings",
    "WorkflowValidationResult",
]
