"""Weighted multi-provider discovery engine.

Turns heterogeneous host evidence into one reproducible confidence score
and a presence status per target.

Discovery Algorithm:
    1. Capture the process table once for the whole scan (only when
       process checks are enabled and some target has process signals).
    2. For each target, run every applicable provider in order
       (filesystem, env, binary, app, process). Each applicable category
       adds its weight to the possible total; each category that returns
       evidence adds its weight to the matched total.
    3. ``confidence = 100 * matched / possible``, rounded half-up.
    4. Keep targets with evidence and confidence >= threshold, then sort
       by confidence descending (stable for ties).

Targets are probed concurrently in worker threads, bounded by
``config.max_workers``. Degraded probes surface as ``DiscoveryIssue``
records; ``scan()`` itself does not raise for them.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path

from agentradar.discovery.config import DEFAULT_DISCOVERY_CONFIG, DiscoveryConfig
from agentradar.discovery.models import (
    DetectedAgent,
    DetectionEvidence,
    DiscoveryIssue,
    DiscoveryTarget,
    IssueLevel,
    ScanResult,
)
from agentradar.discovery.process_table import ProcessSnapshot
from agentradar.discovery.providers import (
    ProbeContext,
    ProcessProvider,
    SignalProvider,
    default_providers,
)
from agentradar.discovery.scoring import (
    compute_confidence,
    derive_status,
    resolve_weights,
)
from agentradar.exceptions import ProbeError, ProbeExecutionError

logger = logging.getLogger(__name__)


@dataclass
class TargetOutcome:
    """Result of scoring one target.

    Attributes:
        detected: The detection, or None when the target stayed below
            threshold or produced no evidence.
        issues: Issues raised while probing, tagged with the target id.
        confidence: The computed confidence, reported even when the
            target was not detected.
    """

    detected: DetectedAgent | None = None
    issues: list[DiscoveryIssue] = field(default_factory=list)
    confidence: int = 0


class DiscoveryEngine:
    """Discovers which known agents are present on this machine.

    Usage::

        engine = DiscoveryEngine(AGENT_TARGETS, cwd=".")
        result = asyncio.run(engine.scan())
        for agent in result.detected:
            print(f"{agent.name}: {agent.confidence} ({agent.status.value})")

    The engine holds only the immutable ``(targets, cwd, config)`` bound
    at construction, so concurrent ``scan()`` calls are safe.

    Args:
        targets: Descriptors of the agents to look for.
        cwd: Primary filesystem root for filesystem signals.
        config: Discovery tunables. Validated at construction.
        providers: Replacement provider list (fakes in tests). Defaults to
            ``default_providers()``.
    """

    def __init__(
        self,
        targets: Iterable[DiscoveryTarget],
        cwd: str | Path,
        config: DiscoveryConfig = DEFAULT_DISCOVERY_CONFIG,
        providers: Sequence[SignalProvider] | None = None,
    ) -> None:
        config.validate()
        self._targets: tuple[DiscoveryTarget, ...] = tuple(targets)
        self._cwd = Path(cwd)
        self._config = config
        self._providers: tuple[SignalProvider, ...] = tuple(
            providers if providers is not None else default_providers()
        )

    @property
    def targets(self) -> tuple[DiscoveryTarget, ...]:
        return self._targets

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def config(self) -> DiscoveryConfig:
        return self._config

    # -- Scan -------------------------------------------------------------

    async def scan(self) -> ScanResult:
        """Run one read-only discovery pass over host state.

        Returns:
            A ``ScanResult`` with detections sorted by confidence
            (descending, stable) and all issues in target order.
        """
        context = await asyncio.to_thread(self.build_context, self._targets)
        semaphore = asyncio.Semaphore(self._config.max_workers)

        async def _run(target: DiscoveryTarget) -> TargetOutcome:
            async with semaphore:
                return await asyncio.to_thread(self.scan_target, target, context)

        outcomes = await asyncio.gather(*(_run(t) for t in self._targets))

        detected: list[DetectedAgent] = []
        issues: list[DiscoveryIssue] = []
        for outcome in outcomes:
            issues.extend(outcome.issues)
            if outcome.detected is not None:
                detected.append(outcome.detected)

        detected.sort(key=lambda agent: agent.confidence, reverse=True)
        logger.debug(
            "Scan finished: %d/%d targets detected, %d issues",
            len(detected), len(self._targets), len(issues),
        )
        return ScanResult(detected=detected, issues=issues)

    def build_context(self, targets: Iterable[DiscoveryTarget]) -> ProbeContext:
        """Capture the per-scan shared inputs for ``targets``."""
        if not self._needs_processes(targets):
            return ProbeContext(cwd=self._cwd, config=self._config)
        try:
            snapshot = ProcessSnapshot.capture(self._config.process_timeout_ms)
        except ProbeError as exc:
            logger.warning("Process scan degraded: %s", exc)
            return ProbeContext(cwd=self._cwd, config=self._config, process_error=exc)
        except Exception as exc:
            logger.warning("Process scan failed unexpectedly", exc_info=True)
            return ProbeContext(
                cwd=self._cwd,
                config=self._config,
                process_error=ProbeExecutionError(f"Process scan failed: {exc}"),
            )
        return ProbeContext(cwd=self._cwd, config=self._config, processes=snapshot)

    def _needs_processes(self, targets: Iterable[DiscoveryTarget]) -> bool:
        process_providers = [
            p for p in self._providers if isinstance(p, ProcessProvider)
        ]
        if not process_providers:
            return False
        for target in targets:
            for provider in process_providers:
                try:
                    if provider.applies_to(target, self._config):
                        return True
                except Exception:
                    # scan_target reports this failure for the target.
                    logger.debug(
                        "process applicability check failed for %s", target.id,
                        exc_info=True,
                    )
        return False

    # -- Per-target aggregation ------------------------------------------

    def scan_target(
        self,
        target: DiscoveryTarget,
        context: ProbeContext | None = None,
    ) -> TargetOutcome:
        """Score one target against the host.

        Every provider call is isolated: an exception from one provider
        becomes an error issue tagged with the target id and the remaining
        providers still run.

        Args:
            target: The target to score.
            context: Shared scan inputs. Built on demand when None.

        Returns:
            A ``TargetOutcome``; ``detected`` is None when the target has
            no evidence or is below the confidence threshold.
        """
        if context is None:
            context = self.build_context([target])

        weights = resolve_weights(target.weights)
        possible: list[float] = []
        matched: list[float] = []
        evidence: list[DetectionEvidence] = []
        versions: list[str] = []
        issues: list[DiscoveryIssue] = []

        for provider in self._providers:
            category = provider.category
            try:
                if not provider.applies_to(target, self._config):
                    continue
            except Exception as exc:
                issues.append(self._provider_failure(target, provider, exc))
                continue

            possible.append(weights[category])
            try:
                result = provider.detect(target, context)
            except Exception as exc:
                issues.append(self._provider_failure(target, provider, exc))
                continue

            issues.extend(issue.with_agent(target.id) for issue in result.issues)
            versions.extend(result.versions)
            if result.evidence:
                evidence.extend(
                    replace(item, confidence_weight=weights[category])
                    for item in result.evidence
                )
                matched.append(weights[category])

        confidence = compute_confidence(possible, matched)
        if confidence < self._config.confidence_threshold or not evidence:
            return TargetOutcome(issues=issues, confidence=confidence)

        detected = DetectedAgent(
            agent_id=target.id,
            name=target.name,
            confidence=confidence,
            status=derive_status(evidence),
            evidence=evidence,
            versions=list(dict.fromkeys(versions)),
            detected_at=datetime.now(timezone.utc).isoformat(),
        )
        return TargetOutcome(detected=detected, issues=issues, confidence=confidence)

    @staticmethod
    def _provider_failure(
        target: DiscoveryTarget,
        provider: SignalProvider,
        exc: Exception,
    ) -> DiscoveryIssue:
        category = provider.category.value
        logger.warning(
            "%s provider failed for %s", category, target.id, exc_info=True,
        )
        return DiscoveryIssue(
            level=IssueLevel.ERROR,
            code="PROVIDER_FAILED",
            message=f"{category} provider failed: {exc}",
            agent_id=target.id,
            metadata={"provider": category, "exception": type(exc).__name__},
        )
