"""Binary provider: executables resolvable on ``PATH``.

Resolution uses ``shutil.which`` (no subprocess). For every resolved
binary a bounded version probe runs ``<path> --version`` and then
``<path> -v``. A version probe that times out adds a warn issue but never
removes the resolution evidence: the binary is there either way.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Iterable

from agentradar.discovery.config import DiscoveryConfig
from agentradar.discovery.models import (
    DetectionEvidence,
    DetectionProvider,
    DiscoveryIssue,
    DiscoveryTarget,
    IssueLevel,
)
from agentradar.discovery.providers.base import (
    ProbeContext,
    ProviderResult,
    SignalProvider,
)
from agentradar.exceptions import ProbeTimeoutError

logger = logging.getLogger(__name__)

_VERSION_FLAGS: tuple[str, ...] = ("--version", "-v")
_VERSION_RE = re.compile(r"(\d+\.\d+(?:\.\d+)?)")


def probe_version(binary: str, path: str, timeout_ms: int) -> str | None:
    """Ask a resolved binary for its version.

    Args:
        binary: Name used in the returned label.
        path: Resolved executable path.
        timeout_ms: Budget for each invocation.

    Returns:
        ``"<binary>@<x.y[.z]>"``, ``"<binary>@unknown"`` when the tool
        answers without a recognisable version, or None.

    Raises:
        ProbeTimeoutError: If an invocation exceeds ``timeout_ms``.
    """
    for flag in _VERSION_FLAGS:
        try:
            proc = subprocess.run(
                [path, flag],
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                stdin=subprocess.DEVNULL,
                timeout=timeout_ms / 1000.0,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProbeTimeoutError(
                f"{binary} {flag} exceeded {timeout_ms}ms"
            ) from exc
        except (OSError, subprocess.SubprocessError):
            logger.debug("Version probe failed: %s %s", path, flag, exc_info=True)
            continue
        if proc.returncode != 0:
            continue
        output = (proc.stdout or "").strip() or (proc.stderr or "").strip()
        match = _VERSION_RE.search(output)
        if match:
            return f"{binary}@{match.group(1)}"
        if output:
            return f"{binary}@unknown"
    return None


def detect_binary_signals(
    names: Iterable[str],
    timeout_ms: int,
) -> ProviderResult:
    """Resolve each binary name and collect versions.

    Args:
        names: Executable names to look up.
        timeout_ms: Budget for each version invocation.

    Returns:
        A ``ProviderResult`` with at most one evidence item (resolved paths
        in ``metadata["binaries"]``), deduplicated versions, and one warn
        issue per timed-out version probe.
    """
    resolved: dict[str, str] = {}
    versions: list[str] = []
    issues: list[DiscoveryIssue] = []

    for name in dict.fromkeys(names):
        path = shutil.which(name)
        if not path:
            logger.debug("Binary not on PATH: %s", name)
            continue
        resolved[name] = path
        try:
            version = probe_version(name, path, timeout_ms)
        except ProbeTimeoutError as exc:
            issues.append(DiscoveryIssue(
                level=IssueLevel.WARN,
                code="BINARY_VERSION_TIMEOUT",
                message=str(exc),
                metadata={"binary": name, "path": path},
            ))
            continue
        if version:
            versions.append(version)

    evidence: list[DetectionEvidence] = []
    if resolved:
        evidence.append(DetectionEvidence(
            provider=DetectionProvider.BINARY,
            detail=next(iter(resolved.values())),
            metadata={"binaries": resolved},
        ))
    return ProviderResult(
        evidence=evidence,
        issues=issues,
        versions=list(dict.fromkeys(versions)),
    )


class BinaryProvider(SignalProvider):
    """Detects agents that ship a command-line executable."""

    @property
    def category(self) -> DetectionProvider:
        return DetectionProvider.BINARY

    def applies_to(self, target: DiscoveryTarget, config: DiscoveryConfig) -> bool:
        return bool(target.binaries)

    def detect(self, target: DiscoveryTarget, context: ProbeContext) -> ProviderResult:
        return detect_binary_signals(target.binaries, context.config.process_timeout_ms)
