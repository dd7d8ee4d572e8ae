"""Rich output formatting helpers for the AgentRadar CLI.

Status Color Mapping:
    RUNNING = bold green, INSTALLED = cyan, AVAILABLE = yellow
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from agentradar.discovery import (
    AgentStatus,
    DetectedAgent,
    DiscoveryIssue,
    DiscoveryTarget,
    IssueLevel,
    ScanResult,
)

_STATUS_STYLES: dict[AgentStatus, str] = {
    AgentStatus.RUNNING: "bold green",
    AgentStatus.INSTALLED: "cyan",
    AgentStatus.AVAILABLE: "yellow",
}

_ISSUE_STYLES: dict[IssueLevel, str] = {
    IssueLevel.ERROR: "bold red",
    IssueLevel.WARN: "yellow",
}

console = Console()


def status_style(status: AgentStatus) -> str:
    """Return the Rich style string for a presence status."""
    return _STATUS_STYLES.get(status, "white")


def health_summary(issues: list[DiscoveryIssue]) -> dict[str, Any]:
    """Summarise scan health from its issues.

    Returns:
        ``{"status": "ok" | "degraded", "warnings": n, "errors": n}``.
    """
    errors = sum(1 for i in issues if i.level is IssueLevel.ERROR)
    warnings = sum(1 for i in issues if i.level is IssueLevel.WARN)
    return {
        "status": "degraded" if issues else "ok",
        "warnings": warnings,
        "errors": errors,
    }


def scan_payload(result: ScanResult) -> dict[str, Any]:
    """Build the JSON payload for ``agentradar scan --json``.

    ``registered`` is always empty: registering agents with IDE config
    files is not part of discovery.
    """
    payload = result.to_dict()
    return {
        "detected": payload["detected"],
        "registered": [],
        "health": health_summary(result.issues),
        "issues": payload["issues"],
    }


def print_detected(agents: list[DetectedAgent]) -> None:
    """Print a table of detected agents, strongest confidence first."""
    if not agents:
        console.print("[dim]No agents detected.[/dim]")
        return

    table = Table(title="Detected Agents", show_header=True, header_style="bold")
    table.add_column("Agent", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Confidence", justify="right")
    table.add_column("Versions", style="dim")
    table.add_column("Evidence")

    for agent in agents:
        status = Text(agent.status.value.upper(), style=status_style(agent.status))
        versions = ", ".join(agent.versions) or "-"
        providers = ", ".join(p.value for p in agent.providers)
        table.add_row(agent.name, status, f"{agent.confidence}%", versions, providers)

    console.print(table)


def print_issues(issues: list[DiscoveryIssue]) -> None:
    """Print one line per issue, colored by level."""
    if not issues:
        return
    console.print("")
    console.print("[bold]Issues:[/bold]")
    for issue in issues:
        style = _ISSUE_STYLES.get(issue.level, "white")
        agent = f" [{issue.agent_id}]" if issue.agent_id else ""
        line = Text.assemble(
            (f"  {issue.level.value.upper():<5s} ", style),
            (issue.code, "bold"),
            (agent, "dim"),
            (f" {issue.message}", ""),
        )
        console.print(line)


def print_scan_result(result: ScanResult) -> None:
    """Print detections followed by issues and a one-line summary."""
    print_detected(result.detected)
    print_issues(result.issues)
    health = health_summary(result.issues)
    parts = [f"[bold]{len(result.detected)}[/bold] agent(s) detected"]
    if health["warnings"]:
        parts.append(f"[yellow]{health['warnings']} warning(s)[/yellow]")
    if health["errors"]:
        parts.append(f"[red]{health['errors']} error(s)[/red]")
    console.print(" | ".join(parts))


def target_categories(target: DiscoveryTarget) -> list[str]:
    """Names of the evidence categories a target configures."""
    categories: list[str] = []
    if target.filesystem_signals:
        categories.append("filesystem")
    if target.env_signals:
        categories.append("env")
    if target.binaries:
        categories.append("binary")
    if any(paths for paths in target.app_paths.values()):
        categories.append("app")
    if target.process_signals:
        categories.append("process")
    return categories


def print_targets(targets: list[DiscoveryTarget]) -> None:
    """Print the known targets and their evidence categories."""
    table = Table(title="Known Agents", show_header=True, header_style="bold")
    table.add_column("Id", style="bold")
    table.add_column("Name")
    table.add_column("Signals", style="dim")
    for target in targets:
        table.add_row(target.id, target.name, ", ".join(target_categories(target)))
    console.print(table)
