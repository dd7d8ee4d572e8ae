"""High-level discovery facade over ``DiscoveryEngine``.

``AgentDiscovery`` binds the built-in target registry, the default process
exclusions and a working directory, and retries a whole scan with
exponential backoff if the engine fails unexpectedly. Individual probes
are never retried here: providers already degrade to issues.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from agentradar.discovery.config import DEFAULT_DISCOVERY_CONFIG, DiscoveryConfig
from agentradar.discovery.engine import DiscoveryEngine
from agentradar.discovery.models import (
    DetectedAgent,
    DiscoveryIssue,
    DiscoveryTarget,
    IssueLevel,
    ScanResult,
)
from agentradar.discovery.targets import AGENT_TARGETS, DEFAULT_PROCESS_EXCLUSIONS
from agentradar.exceptions import DiscoveryError

logger = logging.getLogger(__name__)


class AgentDiscovery:
    """Discovers the built-in (or supplied) agents on this machine.

    Usage::

        discovery = AgentDiscovery()
        agents = asyncio.run(discovery.scan_system())
        for agent in agents:
            print(f"{agent.name}: {agent.status.value}")
        for issue in discovery.last_issues:
            print(issue.code, issue.message)

    Args:
        cwd: Working directory used as the primary filesystem root.
            Defaults to the current directory.
        config: Discovery tunables. ``DEFAULT_PROCESS_EXCLUSIONS`` are
            prepended to its process exclusions.
        targets: Targets to look for. Defaults to ``AGENT_TARGETS``.
    """

    def __init__(
        self,
        cwd: str | Path | None = None,
        config: DiscoveryConfig | None = None,
        targets: Iterable[DiscoveryTarget] | None = None,
    ) -> None:
        base = config or DEFAULT_DISCOVERY_CONFIG
        exclusions = tuple(dict.fromkeys(
            (*DEFAULT_PROCESS_EXCLUSIONS, *base.process_exclusion_patterns)
        ))
        self._config = base.with_overrides(process_exclusion_patterns=exclusions)
        self._cwd = Path(cwd) if cwd is not None else Path.cwd()
        self._targets: tuple[DiscoveryTarget, ...] = tuple(
            targets if targets is not None else AGENT_TARGETS
        )
        self._last_issues: list[DiscoveryIssue] = []
        self._last_attempts = 0

    @property
    def config(self) -> DiscoveryConfig:
        return self._config

    @property
    def last_issues(self) -> list[DiscoveryIssue]:
        """Issues from the most recent scan (a copy)."""
        return list(self._last_issues)

    @property
    def last_attempts(self) -> int:
        """Attempts the most recent scan needed (0 before any scan)."""
        return self._last_attempts

    def get_target(self, agent_id: str) -> DiscoveryTarget | None:
        for target in self._targets:
            if target.id == agent_id:
                return target
        return None

    def all_targets(self) -> list[DiscoveryTarget]:
        return list(self._targets)

    def create_engine(self) -> DiscoveryEngine:
        """Build a fresh engine for one attempt."""
        return DiscoveryEngine(self._targets, self._cwd, self._config)

    async def scan(self) -> ScanResult:
        """Run a scan with whole-scan retries.

        Waits ``retry_delay_ms * 2**(attempt - 1)`` between attempts.

        Returns:
            The ``ScanResult`` of the first successful attempt.

        Raises:
            DiscoveryError: If every one of ``max_retries`` attempts fails.
        """
        attempts = self._config.max_retries
        for attempt in range(1, attempts + 1):
            self._last_attempts = attempt
            try:
                result = await self.create_engine().scan()
            except Exception as exc:
                logger.warning(
                    "Discovery attempt %d/%d failed", attempt, attempts, exc_info=True,
                )
                self._last_issues = [DiscoveryIssue(
                    level=IssueLevel.ERROR,
                    code="DISCOVERY_SCAN_FAILED",
                    message=str(exc) or "Agent discovery failed",
                    metadata={"attempt": attempt},
                )]
                if attempt >= attempts:
                    raise DiscoveryError(
                        f"Agent discovery failed after {attempts} attempt(s): {exc}"
                    ) from exc
                delay_ms = self._config.retry_delay_ms * 2 ** (attempt - 1)
                await asyncio.sleep(delay_ms / 1000.0)
                continue

            self._last_issues = list(result.issues)
            return result

        raise DiscoveryError("Agent discovery made no attempts")

    async def scan_system(self) -> list[DetectedAgent]:
        """Run a scan and return only the detected agents."""
        result = await self.scan()
        return result.detected
