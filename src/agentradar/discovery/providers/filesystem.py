"""Filesystem provider: dot-directories and config files on disk.

Signals are paths relative to a set of candidate roots: the scan's working
directory and each of its ancestors, the user's home directory, and any
``additional_paths`` from the config. Absolute signals are checked as-is.
Checking a path that does not exist is one syscall, so the root list is
deliberately generous.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
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


def _home_dir() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


def candidate_roots(
    root: str | Path,
    additional_roots: Iterable[str | Path] = (),
) -> list[Path]:
    """Return the deduplicated roots checked for filesystem signals.

    Order: ``root``, its ancestors up to the filesystem root, the home
    directory, then ``additional_roots``.
    """
    start = Path(root).expanduser().resolve()
    roots: list[Path] = [start, *start.parents]
    home = _home_dir()
    if home is not None:
        roots.append(home)
    for extra in additional_roots:
        roots.append(Path(extra).expanduser().resolve())
    return list(dict.fromkeys(roots))


def _exists(path: Path) -> bool:
    try:
        return path.exists()
    except (PermissionError, OSError):
        logger.debug("Cannot stat %s", path)
        return False


def detect_filesystem_signals(
    root: str | Path,
    relative_paths: Iterable[str],
    additional_roots: Iterable[str | Path] = (),
) -> list[DetectionEvidence]:
    """Check each signal path under every candidate root.

    Args:
        root: Primary root (usually the scan's working directory).
        relative_paths: Signal paths, relative or absolute.
        additional_roots: Extra roots from the config.

    Returns:
        At most one evidence item for the whole category. Every matched
        path is listed in ``metadata["paths"]``; the first is the detail.
    """
    roots = candidate_roots(root, additional_roots)
    matched: list[str] = []
    for signal in relative_paths:
        signal_path = Path(signal).expanduser()
        if signal_path.is_absolute():
            candidates = [signal_path]
        else:
            candidates = [r / signal_path for r in roots]
        for candidate in candidates:
            if _exists(candidate):
                matched.append(str(candidate))

    matched = list(dict.fromkeys(matched))
    if not matched:
        return []
    return [
        DetectionEvidence(
            provider=DetectionProvider.FILESYSTEM,
            detail=matched[0],
            metadata={"paths": matched},
        )
    ]


class FilesystemProvider(SignalProvider):
    """Detects agents by the files and directories they leave on disk."""

    @property
    def category(self) -> DetectionProvider:
        return DetectionProvider.FILESYSTEM

    def applies_to(self, target: DiscoveryTarget, config: DiscoveryConfig) -> bool:
        return bool(target.filesystem_signals)

    def detect(self, target: DiscoveryTarget, context: ProbeContext) -> ProviderResult:
        evidence = detect_filesystem_signals(
            context.cwd,
            target.filesystem_signals,
            context.config.additional_paths,
        )
        return ProviderResult(evidence=evidence)
