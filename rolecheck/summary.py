"""Read-only per-role projections for reporting."""

from __future__ import annotations

from pydantic import BaseModel, Field

from rolecheck.checks.relations import RelationFindings
from rolecheck.model.types import RBACModel, Step, permission_category


class RoleSummary(BaseModel):
    role: str
    label: str
    rank: int
    permission_count: int
    permissions: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    can_communicate_with: list[str] = Field(default_factory=list)
    can_be_contacted_by: list[str] = Field(default_factory=list)
    can_delegate_to: list[str] = Field(default_factory=list)
    can_receive_from: list[str] = Field(default_factory=list)


class CommunicationPartners(BaseModel):
    can_communicate_with: list[str] = Field(default_factory=list)
    can_be_contacted_by: list[str] = Field(default_factory=list)


class WorkflowPath(BaseModel):
    name: str
    description: str = ""
    roles: list[str] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)


class RoleSummaryProjector:
    """Builds summaries from the model and the relation checker's indexes."""

    def __init__(self, model: RBACModel, relations: RelationFindings) -> None:
        self.model = model
        self.relations = relations

    def summary(self, role_id: str) -> RoleSummary | None:
        """Return the summary for ``role_id``, or None if it is not a declared role."""
        role = self.model.get_role(role_id)
        if role is None:
            return None
        permissions = list(dict.fromkeys(self.model.permissions_of(role_id)))
        return RoleSummary(
            role=role.id,
            label=role.label or role.id,
            rank=role.rank,
            permission_count=len(permissions),
            permissions=permissions,
            categories=list(dict.fromkeys(permission_category(p) for p in permissions)),
            can_communicate_with=self.relations.communication.targets(role_id),
            can_be_contacted_by=self.relations.communication.sources(role_id),
            can_delegate_to=self.relations.delegation.targets(role_id),
            can_receive_from=self.relations.delegation.sources(role_id),
        )

    def all_summaries(self) -> list[RoleSummary]:
        """One summary per declared role, highest rank first (stable on ties)."""
        role_ids = list(dict.fromkeys(self.model.role_ids))
        summaries = [self.summary(role_id) for role_id in role_ids]
        return sorted((s for s in summaries if s is not None), key=lambda s: -s.rank)

    def partners(self, role_id: str) -> CommunicationPartners | None:
        if self.model.get_role(role_id) is None:
            return None
        return CommunicationPartners(
            can_communicate_with=self.relations.communication.targets(role_id),
            can_be_contacted_by=self.relations.communication.sources(role_id),
        )

    def workflow_path(self, name: str) -> WorkflowPath | None:
        for workflow in self.model.workflows:
            if workflow.name == name:
                return WorkflowPath(
                    name=workflow.name,
                    description=workflow.description,
                    roles=list(dict.fromkeys(s.role for s in workflow.steps)),
                    steps=list(workflow.steps),
                )
        return None
