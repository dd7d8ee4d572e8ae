"""Data models for the discovery module.

Contains the evidence, issue and result types produced by the discovery
engine and its providers, plus the static ``DiscoveryTarget`` descriptor
that tells the engine which evidence categories apply to a given agent.

Every model is a dataclass. Evidence, issues and targets are frozen so that
a provider cannot alter what another provider already reported.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union

# A signal pattern is either a literal prefix or a compiled regex.
SignalPattern = Union[str, re.Pattern]


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class DetectionProvider(str, Enum):
    """Category of host evidence a provider inspects."""

    FILESYSTEM = "filesystem"
    PROCESS = "process"
    ENV = "env"
    BINARY = "binary"
    APP = "app"


class IssueLevel(str, Enum):
    """Severity of a discovery issue. Neither level aborts a scan."""

    WARN = "warn"
    ERROR = "error"


class AgentStatus(str, Enum):
    """Coarse presence classification, strongest first.

    - **RUNNING**: a matching process was observed.
    - **INSTALLED**: files, a binary or an application bundle were found.
    - **AVAILABLE**: only configuration (environment variables) was found,
      presence itself is unconfirmed.
    """

    RUNNING = "running"
    INSTALLED = "installed"
    AVAILABLE = "available"


# ---------------------------------------------------------------------------
# Evidence and issues
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DetectionEvidence:
    """A single weighted signal confirming a target's presence.

    Attributes:
        provider: Category that produced the evidence.
        detail: Human-readable description (a path, a variable name,
            ``pid:command`` for processes).
        confidence_weight: Weight of the evidence category for its target.
            The engine stamps the resolved category weight; providers
            leave the default.
        metadata: Provider-specific extras (matched paths, PIDs, ...).
    """

    provider: DetectionProvider
    detail: str
    confidence_weight: float = 1.0
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "provider": self.provider.value,
            "detail": self.detail,
            "confidence_weight": self.confidence_weight,
        }
        if self.metadata:
            out["metadata"] = self.metadata
        return out


@dataclass(frozen=True)
class DiscoveryIssue:
    """An informational record of a degraded probe.

    Attributes:
        level: ``warn`` for expected degradation (timeouts), ``error`` for
            unexpected provider failures.
        code: Stable machine-readable code, e.g. ``PROCESS_SCAN_TIMEOUT``.
        message: Human-readable explanation.
        agent_id: Target the issue belongs to, when known.
        metadata: Extra context (provider name, exception type, ...).
    """

    level: IssueLevel
    code: str
    message: str
    agent_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def with_agent(self, agent_id: str) -> DiscoveryIssue:
        """Return a copy of this issue tagged with ``agent_id``."""
        return replace(self, agent_id=agent_id)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "level": self.level.value,
            "code": self.code,
            "message": self.message,
        }
        if self.agent_id is not None:
            out["agent_id"] = self.agent_id
        if self.metadata:
            out["metadata"] = self.metadata
        return out


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiscoveryTarget:
    """Describes which host signals identify one detectable agent.

    A category only participates in scoring when its signal list is
    non-empty. A target with no signals at all can never be detected.

    Attributes:
        id: Stable machine identifier (e.g. ``"claude-code"``).
        name: Human-readable display name.
        filesystem_signals: Paths relative to the scan roots (absolute
            paths are checked as-is).
        env_signals: Environment variable name prefixes or regexes.
        process_signals: Regexes matched against process command lines.
        process_exclusions: Regexes that veto a process match.
        binaries: Executable names resolved on ``PATH``.
        app_paths: Well-known install locations keyed by ``sys.platform``.
        weights: Partial per-category weight overrides.
    """

    id: str
    name: str
    filesystem_signals: tuple[str, ...] = ()
    env_signals: tuple[SignalPattern, ...] = ()
    process_signals: tuple[re.Pattern[str], ...] = ()
    process_exclusions: tuple[re.Pattern[str], ...] = ()
    binaries: tuple[str, ...] = ()
    app_paths: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    weights: Mapping[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class DetectedAgent:
    """An agent that cleared the confidence threshold in one scan.

    Attributes:
        agent_id: The ``DiscoveryTarget.id`` that matched.
        name: Display name copied from the target.
        confidence: Integer in [0, 100].
        status: Presence classification derived from the evidence.
        evidence: All evidence items, in provider invocation order.
        versions: Deduplicated ``binary@version`` strings.
        detected_at: ISO-8601 UTC timestamp of the detection.
    """

    agent_id: str
    name: str
    confidence: int
    status: AgentStatus
    evidence: list[DetectionEvidence] = field(default_factory=list)
    versions: list[str] = field(default_factory=list)
    detected_at: str = ""

    @property
    def providers(self) -> list[DetectionProvider]:
        """Distinct evidence categories, in first-seen order."""
        return list(dict.fromkeys(item.provider for item in self.evidence))

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "name": self.name,
            "confidence": self.confidence,
            "status": self.status.value,
            "evidence": [item.to_dict() for item in self.evidence],
            "versions": list(self.versions),
            "detected_at": self.detected_at,
        }


@dataclass
class ScanResult:
    """Complete result of one ``DiscoveryEngine.scan()`` call.

    Attributes:
        detected: Agents above threshold, sorted by confidence descending.
        issues: Every degraded-probe record, in target order.
    """

    detected: list[DetectedAgent] = field(default_factory=list)
    issues: list[DiscoveryIssue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "detected": [agent.to_dict() for agent in self.detected],
            "issues": [issue.to_dict() for issue in self.issues],
        }
