"""Weighted multi-provider discovery of AI agents on the local machine.

Combines filesystem, environment, binary, app-path and process evidence
into one confidence score (0-100) and a presence status per agent.

Public API::

    import asyncio

    from agentradar.discovery import AGENT_TARGETS, DiscoveryEngine

    engine = DiscoveryEngine(AGENT_TARGETS, cwd=".")
    result = asyncio.run(engine.scan())
    for agent in result.detected:
        print(f"{agent.name}: {agent.confidence}% {agent.status.value}")
"""

from __future__ import annotations

from agentradar.discovery.agent_discovery import AgentDiscovery
from agentradar.discovery.config import DEFAULT_DISCOVERY_CONFIG, DiscoveryConfig
from agentradar.discovery.engine import DiscoveryEngine, TargetOutcome
from agentradar.discovery.models import (
    AgentStatus,
    DetectedAgent,
    DetectionEvidence,
    DetectionProvider,
    DiscoveryIssue,
    DiscoveryTarget,
    IssueLevel,
    ScanResult,
)
from agentradar.discovery.scoring import DEFAULT_WEIGHTS
from agentradar.discovery.targets import (
    AGENT_TARGETS,
    DEFAULT_PROCESS_EXCLUSIONS,
    get_target,
)

__all__ = [
    "AGENT_TARGETS",
    "AgentDiscovery",
    "AgentStatus",
    "DEFAULT_DISCOVERY_CONFIG",
    "DEFAULT_PROCESS_EXCLUSIONS",
    "DEFAULT_WEIGHTS",
    "DetectedAgent",
    "DetectionEvidence",
    "DetectionProvider",
    "DiscoveryConfig",
    "DiscoveryEngine",
    "DiscoveryIssue",
    "DiscoveryTarget",
    "IssueLevel",
    "ScanResult",
    "TargetOutcome",
    "get_target",
]
