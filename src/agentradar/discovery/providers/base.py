"""Base interface and data structures for detection providers.

Every provider implements the ``SignalProvider`` abstract base class, which
provides two methods:

- ``applies_to(target, config)`` -- Whether the target configures any
  signal in this provider's category. Only applicable categories count
  towards a target's possible weight.
- ``detect(target, context)`` -- Inspect the host and return whatever
  evidence, issues and versions were found.

Providers must be read-only with respect to host state and should turn
expected failures (timeouts, permission denials, missing tools) into
``DiscoveryIssue`` records rather than raising. Anything they do raise is
caught by the engine and reported as a ``PROVIDER_FAILED`` issue.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from agentradar.discovery.config import DiscoveryConfig
from agentradar.discovery.models import (
    DetectionEvidence,
    DetectionProvider,
    DiscoveryIssue,
    DiscoveryTarget,
)
from agentradar.discovery.process_table import ProcessSnapshot
from agentradar.exceptions import ProbeError


@dataclass(frozen=True)
class ProbeContext:
    """Per-scan inputs shared by every provider call.

    Attributes:
        cwd: Primary filesystem root of the scan.
        config: The engine's configuration.
        processes: Process table captured once for the scan, if any.
        process_error: Why the capture failed, when it did. Providers
            report it instead of listing processes again.
    """

    cwd: Path
    config: DiscoveryConfig
    processes: ProcessSnapshot | None = None
    process_error: ProbeError | None = None


@dataclass
class ProviderResult:
    """What one provider found for one target.

    Attributes:
        evidence: Evidence items. Non-empty means the category matched.
        issues: Degraded-probe records, untagged (the engine tags them
            with the target id).
        versions: ``binary@version`` strings discovered along the way.
    """

    evidence: list[DetectionEvidence] = field(default_factory=list)
    issues: list[DiscoveryIssue] = field(default_factory=list)
    versions: list[str] = field(default_factory=list)


class SignalProvider(ABC):
    """Abstract base class for one category of host evidence."""

    @property
    @abstractmethod
    def category(self) -> DetectionProvider:
        """The evidence category this provider reports."""

    @abstractmethod
    def applies_to(self, target: DiscoveryTarget, config: DiscoveryConfig) -> bool:
        """Return True if the target configures signals for this category.

        Args:
            target: The target being scored.
            config: Engine configuration (global switches live here).
        """

    @abstractmethod
    def detect(self, target: DiscoveryTarget, context: ProbeContext) -> ProviderResult:
        """Probe the host for this target's signals.

        Args:
            target: The target being scored.
            context: Per-scan shared inputs.

        Returns:
            A ``ProviderResult``. Empty evidence means no match.
        """
