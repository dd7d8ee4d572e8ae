"""``agentradar scan`` -- Discover AI agents present on this machine.

Runs every built-in target through the discovery engine and prints a
table of detected agents (or a JSON payload with ``--json``).

Exit Codes:
    0 -- At least one agent was detected.
    2 -- No agent reached the confidence threshold.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from agentradar.discovery import DEFAULT_DISCOVERY_CONFIG, AgentDiscovery
from agentradar.discovery.config import DiscoveryConfig, compile_pattern
from agentradar.exceptions import ConfigurationError, DiscoveryError


def _build_config(
    config_file: str | None,
    threshold: int | None,
    no_processes: bool,
    timeout_ms: int | None,
    paths: tuple[str, ...],
    env_patterns: tuple[str, ...],
    exclude: tuple[str, ...],
) -> DiscoveryConfig:
    """Map CLI options onto a ``DiscoveryConfig``.

    Options override values loaded from ``config_file``.
    """
    base = (
        DiscoveryConfig.from_file(config_file)
        if config_file
        else DEFAULT_DISCOVERY_CONFIG
    )
    changes: dict[str, Any] = {}
    if threshold is not None:
        changes["confidence_threshold"] = threshold
    if no_processes:
        changes["check_processes"] = False
    if timeout_ms is not None:
        changes["process_timeout_ms"] = timeout_ms
    if paths:
        changes["additional_paths"] = paths
    if env_patterns:
        changes["additional_env_patterns"] = env_patterns
    if exclude:
        changes["process_exclusion_patterns"] = tuple(compile_pattern(p) for p in exclude)
    return base.with_overrides(**changes)


@click.command("scan")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print a JSON payload instead of a table.")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False),
              default=None, help="YAML or JSON file with discovery settings.")
@click.option("--threshold", type=click.IntRange(0, 100), default=None,
              help="Minimum confidence to report (default: 20).")
@click.option("--no-processes", is_flag=True, default=False,
              help="Skip the process table scan.")
@click.option("--timeout-ms", type=click.IntRange(min=1), default=None,
              help="Budget per blocking probe in milliseconds (default: 5000).")
@click.option("--path", "paths", multiple=True,
              type=click.Path(file_okay=False),
              help="Extra root to check for filesystem signals (repeatable).")
@click.option("--env-pattern", "env_patterns", multiple=True,
              help="Extra environment variable prefix (repeatable).")
@click.option("--exclude", multiple=True,
              help="Regex of process command lines to ignore (repeatable).")
@click.option("--cwd", type=click.Path(exists=True, file_okay=False), default=None,
              help="Working directory used as the primary filesystem root.")
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Log probe details to stderr.")
def scan_command(
    as_json: bool,
    config_file: str | None,
    threshold: int | None,
    no_processes: bool,
    timeout_ms: int | None,
    paths: tuple[str, ...],
    env_patterns: tuple[str, ...],
    exclude: tuple[str, ...],
    cwd: str | None,
    verbose: bool,
) -> None:
    """Discover AI agents installed or running on this machine.

    Exit code 0 if any agent is detected, 2 if none is.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    try:
        config = _build_config(
            config_file, threshold, no_processes, timeout_ms, paths, env_patterns, exclude,
        )
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    discovery = AgentDiscovery(cwd=Path(cwd) if cwd else None, config=config)
    try:
        result = asyncio.run(discovery.scan())
    except DiscoveryError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        from agentradar.cli.output import scan_payload
        click.echo(json.dumps(scan_payload(result), indent=2))
    else:
        from agentradar.cli.output import print_scan_result
        print_scan_result(result)

    sys.exit(0 if result.detected else 2)
