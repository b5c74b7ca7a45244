"""Report assembly and JSON/Markdown rendering."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from rolecheck import __version__
from rolecheck.checks.workflows import WorkflowValidationResult
from rolecheck.metrics import MetricsResult
from rolecheck.summary import RoleSummary
from rolecheck.validator import RoleInterconnectionValidator, ValidationResult

_STATUS_LABELS = {
    "healthy": "HEALTHY",
    "attention": "NEEDS ATTENTION",
    "critical": "CRITICAL",
}

_DETAIL_LABELS = {
    "hierarchy_valid": "Role Hierarchy",
    "permissions_consistent": "Permissions",
    "communication_paths_valid": "Communication Paths",
    "workflow_paths_valid": "Workflow Paths",
    "delegation_matrix_valid": "Delegation Matrix",
}

_METRIC_LABELS = {
    "interconnection_coverage": "Interconnection Coverage",
    "permission_consistency": "Permission Consistency",
    "workflow_completeness": "Workflow Completeness",
    "security_compliance": "Security Compliance",
}


class InterconnectionReport(BaseModel):
    generated_at: str
    version: str = __version__
    status: str
    validation: ValidationResult
    metrics: MetricsResult
    workflows: list[WorkflowValidationResult] = Field(default_factory=list)
    roles: list[RoleSummary] = Field(default_factory=list)
    communication_matrix: dict[str, list[str]] = Field(default_factory=dict)
    delegation_matrix: dict[str, list[str]] = Field(default_factory=dict)


def build_report(
    validator: RoleInterconnectionValidator, generated_at: datetime | None = None
) -> InterconnectionReport:
    """Collect every validator output into one serialisable report."""
    metrics = validator.calculate_interconnection_metrics()
    generated_at = generated_at or datetime.now(timezone.utc)
    return InterconnectionReport(
        generated_at=generated_at.isoformat(),
        status=validator.config.thresholds.classify(metrics.overall_health_score),
        validation=validator.validate_role_interconnections(),
        metrics=metrics,
        workflows=validator.validate_all_workflows(),
        roles=validator.get_all_role_summaries(),
        communication_matrix={k: list(v) for k, v in validator.model.communication.items()},
        delegation_matrix={k: list(v) for k, v in validator.model.delegation.items()},
    )


def status_label(status: str) -> str:
    return _STATUS_LABELS.get(status, status.upper())


def render_json(report: InterconnectionReport) -> str:
    return report.model_dump_json(indent=2)


def render_markdown(report: InterconnectionReport, verbose: bool = False) -> str:
    lines: list[str] = [
        "# Role Interconnection Validation Report",
        "",
        f"**Generated:** {report.generated_at}",
        f"**Version:** {report.version}",
        "",
        "## Validation Status",
        "",
        f"**Overall:** {'VALID' if report.validation.valid else 'INVALID'}",
        "",
        "| Check | Status |",
        "|-------|--------|",
    ]
    for key, label in _DETAIL_LABELS.items():
        ok = getattr(report.validation.details, key)
        lines.append(f"| {label} | {'Pass' if ok else 'Fail'} |")
    lines.append("")

    if report.validation.errors:
        lines += ["### Errors", ""]
        lines += [f"- {err}" for err in report.validation.errors]
        lines.append("")
    if report.validation.warnings:
        lines += ["### Warnings", ""]
        lines += [f"- {warn}" for warn in report.validation.warnings]
        lines.append("")

    m = report.metrics.rounded()
    lines += ["## Metrics", "", "| Metric | Score |", "|--------|-------|"]
    for key, label in _METRIC_LABELS.items():
        suffix = " (excluded)" if key in m.excluded else ""
        lines.append(f"| {label} | {getattr(m, key):.1f}%{suffix} |")
    lines.append(f"| **Overall Health Score** | **{m.overall_health_score:.1f}%** |")
    lines += ["", f"**Status:** {status_label(report.status)}", ""]

    lines += ["## Workflows", "", "| Workflow | Status | Steps |", "|----------|--------|-------|"]
    for wf in report.workflows:
        lines.append(f"| {wf.workflow_name} | {'Valid' if wf.valid else 'Invalid'} | {wf.step_count} |")
    lines.append("")
    if verbose:
        for wf in report.workflows:
            if wf.errors:
                lines += [f"### {wf.workflow_name}", ""]
                lines += [f"- {err}" for err in wf.errors]
                lines.append("")

    lines += [
        "## Roles Summary",
        "",
        "| Role | Rank | Permissions | Communications | Delegations |",
        "|------|------|-------------|----------------|-------------|",
    ]
    for role in report.roles:
        lines.append(
            f"| {role.role} | {role.rank} | {role.permission_count} | "
            f"{len(role.can_communicate_with)} | {len(role.can_delegate_to)} |"
        )
    lines.append("")

    if verbose:
        for title, matrix in (
            ("Communication Matrix", report.communication_matrix),
            ("Delegation Matrix", report.delegation_matrix),
        ):
            lines += [f"## {title}", "", "```"]
            lines += [f"{role}: {', '.join(targets) or '(none)'}" for role, targets in matrix.items()]
            lines += ["```", ""]

    return "\n".join(lines)
