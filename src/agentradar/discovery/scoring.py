"""Confidence scoring: weight resolution, aggregation and status mapping.

Confidence Model:
    confidence(t) = round(100 * sum(W[c] for c in M) / sum(W[c] for c in C))

where ``C`` is the set of evidence categories the target configures,
``M`` the subset that actually produced evidence, and ``W`` the default
weights overridden per key by the target's own ``weights`` mapping.

A live process is the strongest proof of active use, so it carries the
largest default weight. Environment variables only prove configuration
and carry the smallest.

All functions here are pure: they never touch host state.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from agentradar.discovery.models import (
    AgentStatus,
    DetectionEvidence,
    DetectionProvider,
)

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: dict[DetectionProvider, float] = {
    DetectionProvider.FILESYSTEM: 6,
    DetectionProvider.PROCESS: 10,
    DetectionProvider.ENV: 4,
    DetectionProvider.BINARY: 8,
    DetectionProvider.APP: 7,
}

# Evidence from these categories proves the agent is on disk.
_INSTALL_PROVIDERS: frozenset[DetectionProvider] = frozenset({
    DetectionProvider.FILESYSTEM,
    DetectionProvider.BINARY,
    DetectionProvider.APP,
})


def resolve_weights(
    overrides: Mapping[Any, Any] | None = None,
) -> dict[DetectionProvider, float]:
    """Merge a target's partial weight overrides onto the defaults.

    Keys may be ``DetectionProvider`` members or their string values.
    Unknown keys and values that are not non-negative numbers are ignored
    and the default weight is kept.

    Args:
        overrides: The target's ``weights`` mapping (may be empty/None).

    Returns:
        A complete weight table with one entry per provider.
    """
    weights = dict(DEFAULT_WEIGHTS)
    if not overrides:
        return weights

    for key, value in overrides.items():
        try:
            provider = DetectionProvider(key)
        except ValueError:
            logger.debug("Ignoring unknown weight key: %r", key)
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.debug("Ignoring non-numeric weight for %s: %r", provider.value, value)
            continue
        try:
            weight = float(value)
        except OverflowError:
            weight = math.inf
        if not math.isfinite(weight) or weight < 0:
            logger.debug("Ignoring out-of-range weight for %s: %r", provider.value, value)
            continue
        weights[provider] = weight
    return weights


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def compute_confidence(
    possible: Iterable[float],
    matched: Iterable[float],
) -> int:
    """Turn possible/matched category weights into a 0-100 confidence.

    Args:
        possible: Weights of every category the target configures.
        matched: Weights of the categories that produced evidence.

    Returns:
        Integer confidence in [0, 100]. Zero when nothing is possible or
        the weights cannot be compared (infinite weights).
    """
    possible = list(possible)
    matched = list(matched)
    max_weight = sum(possible)
    if max_weight <= 0:
        return 0
    score = sum(matched)
    scaled = 100 * score / max_weight
    if not (math.isfinite(max_weight) and math.isfinite(scaled)):
        # Sums overflowed: compare the weights relative to the largest one.
        peak = max(possible)
        if not (peak > 0 and math.isfinite(peak)):
            logger.debug("Ignoring non-finite weights %r", possible)
            return 0
        scaled = 100 * (
            sum(w / peak for w in matched) / sum(w / peak for w in possible)
        )
        if not math.isfinite(scaled):
            logger.debug("Ignoring non-finite confidence for weights %r", possible)
            return 0
    confidence = round_half_up(scaled)
    return max(0, min(100, confidence))


def derive_status(evidence: Iterable[DetectionEvidence]) -> AgentStatus:
    """Map collected evidence to a presence status.

    ``running`` if any evidence came from the process provider, else
    ``installed`` if any came from filesystem/binary/app, else
    ``available``.
    """
    providers = {item.provider for item in evidence}
    if DetectionProvider.PROCESS in providers:
        return AgentStatus.RUNNING
    if providers & _INSTALL_PROVIDERS:
        return AgentStatus.INSTALLED
    return AgentStatus.AVAILABLE
