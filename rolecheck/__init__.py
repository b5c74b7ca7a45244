"""rolecheck - consistency checks and health metrics for a declared RBAC model."""

__version__ = "0.1.0"

from rolecheck.config import ValidatorConfig, load_config
from rolecheck.metrics import MetricsResult
from rolecheck.model import (
    CROSS_ROLE_WORKFLOWS,
    DEFAULT_MODEL,
    PERMISSION_CATALOG,
    ROLE_COMMUNICATION_MATRIX,
    ROLE_HIERARCHY,
    ROLE_PERMISSIONS,
    TASK_DELEGATION_MATRIX,
    RBACModel,
    Role,
    Step,
    Workflow,
    load_model,
)
from rolecheck.summary import RoleSummary
from rolecheck.validator import (
    RoleInterconnectionValidator,
    ValidationResult,
    calculate_interconnection_metrics,
    get_all_role_summaries,
    get_role_permission_summary,
    validate_all_workflows,
    validate_role_interconnections,
)

__all__ = [
    "CROSS_ROLE_WORKFLOWS",
    "DEFAULT_MODEL",
    "MetricsResult",
    "PERMISSION_CATALOG",
    "RBACModel",
    "ROLE_COMMUNICATION_MATRIX",
    "ROLE_HIERARCHY",
    "ROLE_PERMISSIONS",
    "Role",
    "RoleInterconnectionValidator",
    "RoleSummary",
    "Step",
    "TASK_DELEGATION_MATRIX",
    "ValidationResult",
    "ValidatorConfig",
    "Workflow",
    "calculate_interconnection_metrics",
    "get_all_role_summaries",
    "get_role_permission_summary",
    "load_config",
    "load_model",
    "validate_all_workflows",
    "validate_role_interconnections",
]
