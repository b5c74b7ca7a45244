"""CLI entry point for rolecheck."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from rolecheck.config import ValidatorConfig, load_config
from rolecheck.config.loader import DEFAULT_CONFIG_TEMPLATE
from rolecheck.metrics import METRIC_NAMES, MetricsResult
from rolecheck.model import DEFAULT_MODEL, RBACModel, load_model
from rolecheck.report import InterconnectionReport, build_report, render_json, render_markdown, status_label
from rolecheck.summary import RoleSummary
from rolecheck.validator import RoleInterconnectionValidator

app = typer.Typer(
    name="rolecheck",
    help="Validate role interconnections in an RBAC model and score its health.",
)

config_app = typer.Typer(help="Manage rolecheck configuration.")
app.add_typer(config_app, name="config")


# Global state
_config: ValidatorConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_STATUS_STYLES = {"healthy": "green", "attention": "yellow", "critical": "red"}


def _get_config() -> ValidatorConfig:
    if _config is None:
        return load_config()
    return _config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to rolecheck.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _setup_logging(_config.log_level)


def _load_validator(model_path: str | None) -> RoleInterconnectionValidator:
    model: RBACModel = DEFAULT_MODEL
    if model_path:
        try:
            model = load_model(model_path)
        except ValueError as e:
            rprint(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
    return RoleInterconnectionValidator(model, _get_config())


def _bar(value: float) -> str:
    filled = round(value / 5)
    return "█" * filled + "░" * (20 - filled)


# ---------------------------------------------------------------------------
# Console rendering
# ---------------------------------------------------------------------------


def _metrics_table(metrics: MetricsResult, status: str) -> Table:
    m = metrics.rounded()
    table = Table(title="Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("", no_wrap=True)
    table.add_column("Score", justify="right")
    for name in METRIC_NAMES:
        label = name.replace("_", " ").title()
        if name in m.excluded:
            label += " [dim](excluded)[/dim]"
        table.add_row(label, _bar(getattr(m, name)), f"{getattr(m, name):.1f}%")
    style = _STATUS_STYLES.get(status, "white")
    table.add_row(
        "[bold]Overall Health Score[/bold]",
        _bar(m.overall_health_score),
        f"[bold {style}]{m.overall_health_score:.1f}%[/bold {style}]",
    )
    table.caption = f"Status: [{style}]{status_label(status)}[/{style}]"
    return table


def _roles_table(roles: list[RoleSummary]) -> Table:
    table = Table(title=f"Roles ({len(roles)})")
    table.add_column("Role", style="cyan")
    table.add_column("Rank", justify="right")
    table.add_column("Permissions", justify="right")
    table.add_column("Communications", justify="right")
    table.add_column("Delegations", justify="right")
    for r in roles:
        table.add_row(
            r.role,
            str(r.rank),
            str(r.permission_count),
            str(len(r.can_communicate_with)),
            str(len(r.can_delegate_to)),
        )
    return table


def _render_console(console: Console, report: InterconnectionReport, verbose: bool) -> None:
    v = report.validation
    status_text = "[green]VALID[/green]" if v.valid else "[red]INVALID[/red]"
    detail_lines = "\n".join(
        f"{'[green]✓[/green]' if ok else '[red]✗[/red]'} {key.replace('_', ' ')}"
        for key, ok in v.details.model_dump().items()
    )
    console.print(
        Panel(
            f"[bold]Overall:[/bold] {status_text}\n\n{detail_lines}\n\n"
            f"[dim]Generated:[/dim] {report.generated_at}\n"
            f"[dim]Version:[/dim]   {report.version}",
            title="Role Interconnection Validation",
            border_style="green" if v.valid else "red",
        )
    )

    if v.errors:
        console.print(f"\n[bold red]Errors ({len(v.errors)})[/bold red]")
        for err in v.errors:
            console.print(f"  [red]✗[/red] {err}", highlight=False)
    if v.warnings:
        console.print(f"\n[bold yellow]Warnings ({len(v.warnings)})[/bold yellow]")
        for warn in v.warnings:
            console.print(f"  [yellow]![/yellow] {warn}", highlight=False)
    console.print()

    console.print(_metrics_table(report.metrics, report.status))

    wf_tree = Tree(f"[bold]Workflows[/bold] ({len(report.workflows)})")
    for wf in report.workflows:
        icon = "[green]✓[/green]" if wf.valid else "[red]✗[/red]"
        node = wf_tree.add(f"{icon} {wf.workflow_name}")
        if verbose:
            node.add(f"[dim]Steps:[/dim] {wf.step_count}")
            node.add(f"[dim]Roles:[/dim] {', '.join(wf.distinct_roles) or 'N/A'}")
            for err in wf.errors:
                node.add(f"[red]{err}[/red]")
    console.print(wf_tree)

    console.print(_roles_table(report.roles))

    if verbose:
        for title, matrix in (
            ("Communication Matrix", report.communication_matrix),
            ("Delegation Matrix", report.delegation_matrix),
        ):
            tree = Tree(f"[bold]{title}[/bold]")
            for role, targets in matrix.items():
                tree.add(f"[cyan]{role}[/cyan] → {', '.join(targets) or '(none)'}")
            console.print(tree)


def _render_role(role: RoleSummary) -> None:
    def _listing(items: list[str]) -> str:
        return "\n".join(f"  • {i}" for i in items) if items else "  (none)"

    rprint(
        Panel(
            f"[dim]Label:[/dim]            {role.label}\n"
            f"[dim]Rank:[/dim]             {role.rank}\n"
            f"[dim]Permission count:[/dim] {role.permission_count}\n\n"
            f"[bold]Permission categories[/bold]\n{_listing(role.categories)}\n\n"
            f"[bold]Can communicate with[/bold]\n{_listing(role.can_communicate_with)}\n\n"
            f"[bold]Can be contacted by[/bold]\n{_listing(role.can_be_contacted_by)}\n\n"
            f"[bold]Can delegate to[/bold]\n{_listing(role.can_delegate_to)}\n\n"
            f"[bold]Can receive delegation from[/bold]\n{_listing(role.can_receive_from)}",
            title=f"Role: {role.role}",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def validate(
    model: Annotated[
        str | None, typer.Option("--model", "-m", help="YAML model file (default: built-in catalog)")
    ] = None,
    fmt: Annotated[
        str, typer.Option("--format", "-f", help="Output format: console, json, markdown")
    ] = "console",
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write the report to a file")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show matrices and step detail")] = False,
    check: Annotated[
        bool, typer.Option("--check", help="Exit 1 on validation errors or a low health score")
    ] = False,
    metrics_only: Annotated[bool, typer.Option("--metrics-only", help="Only show the metrics summary")] = False,
) -> None:
    """Validate role interconnections and report health metrics."""
    if fmt not in ("console", "json", "markdown"):
        rprint(f"[red]Error:[/red] Unknown format '{fmt}' (valid: console, json, markdown)")
        raise typer.Exit(1)

    validator = _load_validator(model)
    cfg = validator.config

    if metrics_only:
        metrics = validator.calculate_interconnection_metrics()
        status = cfg.thresholds.classify(metrics.overall_health_score)
        if fmt == "json":
            typer.echo(metrics.rounded().model_dump_json(indent=2))
        else:
            rprint(_metrics_table(metrics, status))
        if check and metrics.overall_health_score < cfg.thresholds.fail_below:
            raise typer.Exit(code=1)
        return

    report = build_report(validator)

    if fmt == "console":
        console = Console(file=io.StringIO(), record=True, width=100) if output else Console(width=100)
        _render_console(console, report, verbose)
        text = console.export_text() if output else None
    elif fmt == "json":
        text = render_json(report)
    else:
        text = render_markdown(report, verbose=verbose)

    if output:
        Path(output).write_text(text or "")
        rprint(f"[green]Report written to[/green] {output}")
    elif fmt != "console":
        typer.echo(text)

    if check:
        failed = not report.validation.valid
        low_score = report.metrics.overall_health_score < cfg.thresholds.fail_below
        if failed or low_score:
            raise typer.Exit(code=1)


@app.command()
def role(
    role_id: str = typer.Argument(..., help="Role id to describe"),
    model: Annotated[
        str | None, typer.Option("--model", "-m", help="YAML model file (default: built-in catalog)")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON")] = False,
) -> None:
    """Show permissions and interconnections for a single role."""
    validator = _load_validator(model)
    summary = validator.get_role_permission_summary(role_id)
    if summary is None:
        valid = ", ".join(dict.fromkeys(validator.model.role_ids)) or "(none)"
        rprint(f"[red]Error:[/red] Unknown role '{role_id}'. Valid roles: {valid}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(summary.model_dump_json(indent=2))
    else:
        _render_role(summary)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default rolecheck.yaml in current directory."""
    target = Path("rolecheck.yaml")
    if target.exists() and not force:
        rprint("[yellow]rolecheck.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
