"""Immutable value types for a declared RBAC model."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

_MAPPING_FIELDS = ("role_permissions", "communication", "delegation", "role_specific_permissions")


def permission_category(permission: str) -> str:
    """Return the category prefix of a permission id (``patient:read`` -> ``patient``)."""
    return permission.split(":", 1)[0]


class Role(BaseModel):
    """A named, ranked actor category. Higher rank = more privileged."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    label: str = ""
    rank: int
    description: str = ""

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("role id cannot be empty or whitespace")
        return v


class Step(BaseModel):
    """One role-attributed step of a workflow."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    role: str
    permission: str
    description: str = ""


class Workflow(BaseModel):
    """An ordered sequence of steps representing a cross-role business process."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = ""
    steps: tuple[Step, ...] = ()

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("workflow name cannot be empty or whitespace")
        return v


class RBACModel(BaseModel):
    """A complete snapshot of the authorization model.

    Mappings keep declaration order and use tuples rather than sets so that
    every derived result is deterministic across processes.

    The policy inputs (``expected_order``, ``escalation_pairs``,
    ``role_specific_permissions``, ``should_connect``, ``isolated_roles``)
    are explicit declarations; nothing about them is inferred.

    Mapping fields are stored as read-only proxies over a private copy, so a
    model (including the shared built-in one) cannot be edited in place.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    roles: tuple[Role, ...] = ()
    permission_catalog: tuple[str, ...] = ()
    role_permissions: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    communication: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    delegation: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    workflows: tuple[Workflow, ...] = ()

    expected_order: tuple[str, ...] = ()
    escalation_pairs: tuple[tuple[str, str], ...] = ()
    role_specific_permissions: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    should_connect: tuple[tuple[str, str], ...] = ()
    isolated_roles: tuple[str, ...] = ()

    @field_validator(*_MAPPING_FIELDS, mode="after")
    @classmethod
    def freeze_mapping(cls, v: Mapping[str, tuple[str, ...]]) -> Mapping[str, tuple[str, ...]]:
        return MappingProxyType(dict(v))

    @field_serializer(*_MAPPING_FIELDS)
    def dump_mapping(self, v: Mapping[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
        return dict(v)

    @property
    def role_ids(self) -> tuple[str, ...]:
        return tuple(r.id for r in self.roles)

    @property
    def ranks(self) -> dict[str, int]:
        """Role id -> rank. On duplicate ids the first declaration wins."""
        ranks: dict[str, int] = {}
        for role in self.roles:
            ranks.setdefault(role.id, role.rank)
        return ranks

    def get_role(self, role_id: str) -> Role | None:
        for role in self.roles:
            if role.id == role_id:
                return role
        return None

    def permissions_of(self, role_id: str) -> tuple[str, ...]:
        return self.role_permissions.get(role_id, ())
