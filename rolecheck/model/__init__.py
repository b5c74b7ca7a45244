from .catalog import (
    CROSS_ROLE_WORKFLOWS,
    DEFAULT_MODEL,
    PERMISSION_CATALOG,
    ROLE_COMMUNICATION_MATRIX,
    ROLE_HIERARCHY,
    ROLE_PERMISSIONS,
    TASK_DELEGATION_MATRIX,
)
from .loader import load_model
from .types import RBACModel, Role, Step, Workflow, permission_category

__all__ = [
    "CROSS_ROLE_WORKFLOWS",
    "DEFAULT_MODEL",
    "PERMISSION_CATALOG",
    "RBACModel",
    "ROLE_COMMUNICATION_MATRIX",
    "ROLE_HIERARCHY",
    "ROLE_PERMISSIONS",
    "Role",
    "Step",
    "TASK_DELEGATION_MATRIX",
    "Workflow",
    "load_model",
    "permission_category",
]
