"""Environment provider: variables an agent (or its API) is configured with."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping

from agentradar.discovery.config import DiscoveryConfig
from agentradar.discovery.models import (
    DetectionEvidence,
    DetectionProvider,
    DiscoveryTarget,
    SignalPattern,
)
from agentradar.discovery.providers.base import (
    ProbeContext,
    ProviderResult,
    SignalProvider,
)


def _matches(pattern: SignalPattern, name: str) -> bool:
    if isinstance(pattern, re.Pattern):
        return pattern.search(name) is not None
    return name.startswith(pattern)


def detect_env_signals(
    patterns: Iterable[SignalPattern],
    additional_patterns: Iterable[SignalPattern] = (),
    environ: Mapping[str, str] | None = None,
) -> list[DetectionEvidence]:
    """Match environment variable names against prefixes or regexes.

    Variables with an empty value are ignored.

    Args:
        patterns: The target's own env signals.
        additional_patterns: Config-wide extra signals, merged in.
        environ: Environment to inspect. Defaults to ``os.environ``.

    Returns:
        At most one evidence item; matched names are listed in
        ``metadata["variables"]``. Values are never recorded.
    """
    env = os.environ if environ is None else environ
    all_patterns = [*patterns, *additional_patterns]
    matched: list[str] = []
    for pattern in all_patterns:
        for name in sorted(env):
            if env[name] and _matches(pattern, name):
                matched.append(name)

    matched = list(dict.fromkeys(matched))
    if not matched:
        return []
    return [
        DetectionEvidence(
            provider=DetectionProvider.ENV,
            detail=matched[0],
            metadata={"variables": matched},
        )
    ]


class EnvProvider(SignalProvider):
    """Detects agents whose configuration is present in the environment."""

    @property
    def category(self) -> DetectionProvider:
        return DetectionProvider.ENV

    def applies_to(self, target: DiscoveryTarget, config: DiscoveryConfig) -> bool:
        return bool(target.env_signals)

    def detect(self, target: DiscoveryTarget, context: ProbeContext) -> ProviderResult:
        evidence = detect_env_signals(
            target.env_signals,
            context.config.additional_env_patterns,
        )
        return ProviderResult(evidence=evidence)
