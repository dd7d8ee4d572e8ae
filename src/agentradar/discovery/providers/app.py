"""App-path provider: well-known application install locations.

Only the paths listed for the current ``sys.platform`` are checked
(``darwin``, ``linux``, ``win32``).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path

from agentradar.discovery.config import DiscoveryConfig
from agentradar.discovery.models import (
    DetectionEvidence,
    DetectionProvider,
    DiscoveryTarget,
)
from agentradar.discovery.providers.base import (
    ProbeContext,
    ProviderResult,
    SignalProvider,
)

logger = logging.getLogger(__name__)


def detect_app_signals(
    platform_paths: Mapping[str, Iterable[str]],
    platform: str | None = None,
) -> list[DetectionEvidence]:
    """Check the install locations for the current platform.

    Args:
        platform_paths: Paths keyed by ``sys.platform`` value.
        platform: Override of the platform key (for testing).

    Returns:
        At most one evidence item; every existing path is listed in
        ``metadata["paths"]``.
    """
    key = platform or sys.platform
    found: list[str] = []
    for raw in platform_paths.get(key, ()):
        candidate = Path(raw).expanduser()
        try:
            if candidate.exists():
                found.append(str(candidate))
        except (PermissionError, OSError):
            logger.debug("Cannot stat %s", candidate)
            continue

    if not found:
        return []
    return [
        DetectionEvidence(
            provider=DetectionProvider.APP,
            detail=found[0],
            metadata={"paths": found},
        )
    ]


class AppPathProvider(SignalProvider):
    """Detects desktop applications by their install location."""

    @property
    def category(self) -> DetectionProvider:
        return DetectionProvider.APP

    def applies_to(self, target: DiscoveryTarget, config: DiscoveryConfig) -> bool:
        # Paths listed for other platforms still make the category applicable.
        return any(paths for paths in target.app_paths.values())

    def detect(self, target: DiscoveryTarget, context: ProbeContext) -> ProviderResult:
        return ProviderResult(evidence=detect_app_signals(target.app_paths))
