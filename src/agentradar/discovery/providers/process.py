"""Process provider: running processes whose command line matches a target.

Matching runs against a ``ProcessSnapshot``. The engine normally captures
one snapshot per scan and hands it over through ``ProbeContext``; when the
provider is used on its own it captures a snapshot itself.

A failed or timed-out capture never raises: it yields no evidence and one
issue (warn for a timeout, error when listing was refused).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from agentradar.discovery.config import DiscoveryConfig
from agentradar.discovery.models import (
    DetectionEvidence,
    DetectionProvider,
    DiscoveryIssue,
    DiscoveryTarget,
    IssueLevel,
)
from agentradar.discovery.process_table import ProcessSnapshot
from agentradar.discovery.providers.base import (
    ProbeContext,
    ProviderResult,
    SignalProvider,
)
from agentradar.exceptions import ProbeError, ProbeTimeoutError

logger = logging.getLogger(__name__)


@dataclass
class ProcessProbeResult:
    """Evidence and issues from one process probe."""

    evidence: list[DetectionEvidence] = field(default_factory=list)
    issues: list[DiscoveryIssue] = field(default_factory=list)


def issue_for_probe_error(error: ProbeError) -> DiscoveryIssue:
    """Convert a failed process capture into an issue."""
    if isinstance(error, ProbeTimeoutError):
        return DiscoveryIssue(
            level=IssueLevel.WARN, code="PROCESS_SCAN_TIMEOUT", message=str(error),
        )
    return DiscoveryIssue(
        level=IssueLevel.ERROR, code="PROCESS_SCAN_FAILED", message=str(error),
    )


def match_processes(
    snapshot: ProcessSnapshot,
    signals: Iterable[re.Pattern[str]],
    exclusions: Iterable[re.Pattern[str]] = (),
) -> list[DetectionEvidence]:
    """Return one evidence item per process matching any signal.

    A process whose command line also matches an exclusion is skipped.
    """
    signal_list = list(signals)
    exclusion_list = list(exclusions)
    evidence: list[DetectionEvidence] = []
    for entry in snapshot:
        if any(rule.search(entry.command) for rule in exclusion_list):
            continue
        if not any(pattern.search(entry.command) for pattern in signal_list):
            continue
        evidence.append(DetectionEvidence(
            provider=DetectionProvider.PROCESS,
            detail=f"{entry.pid}:{entry.command}",
            metadata={
                "pid": entry.pid,
                "name": entry.name,
                "command": entry.command,
                "executable": entry.executable,
            },
        ))
    return evidence


def detect_process_signals(
    signals: Iterable[re.Pattern[str]],
    exclusions: Iterable[re.Pattern[str]],
    timeout_ms: int,
    snapshot: ProcessSnapshot | None = None,
) -> ProcessProbeResult:
    """Match running processes against a target's signals.

    Args:
        signals: Regexes searched in each command line.
        exclusions: Regexes that veto a match.
        timeout_ms: Budget for capturing the process table.
        snapshot: Pre-captured table. Captured on demand when None.

    Returns:
        Evidence per matching process, or no evidence and one issue
        when the process table could not be listed.
    """
    if snapshot is None:
        try:
            snapshot = ProcessSnapshot.capture(timeout_ms)
        except ProbeError as exc:
            logger.warning("Process scan degraded: %s", exc)
            return ProcessProbeResult(issues=[issue_for_probe_error(exc)])
    return ProcessProbeResult(evidence=match_processes(snapshot, signals, exclusions))


class ProcessProvider(SignalProvider):
    """Detects agents that are currently running."""

    @property
    def category(self) -> DetectionProvider:
        return DetectionProvider.PROCESS

    def applies_to(self, target: DiscoveryTarget, config: DiscoveryConfig) -> bool:
        return config.check_processes and bool(target.process_signals)

    def detect(self, target: DiscoveryTarget, context: ProbeContext) -> ProviderResult:
        if context.process_error is not None:
            return ProviderResult(issues=[issue_for_probe_error(context.process_error)])
        exclusions = [
            *context.config.process_exclusion_patterns,
            *target.process_exclusions,
        ]
        result = detect_process_signals(
            target.process_signals,
            exclusions,
            context.config.process_timeout_ms,
            snapshot=context.processes,
        )
        return ProviderResult(evidence=result.evidence, issues=result.issues)
