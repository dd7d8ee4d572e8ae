"""Detection providers, one per evidence category.

``default_providers()`` returns the built-in providers in invocation
order: filesystem, env, binary, app, process.
"""

from __future__ import annotations

from agentradar.discovery.providers.app import AppPathProvider, detect_app_signals
from agentradar.discovery.providers.base import (
    ProbeContext,
    ProviderResult,
    SignalProvider,
)
from agentradar.discovery.providers.binary import BinaryProvider, detect_binary_signals
from agentradar.discovery.providers.env import EnvProvider, detect_env_signals
from agentradar.discovery.providers.filesystem import (
    FilesystemProvider,
    detect_filesystem_signals,
)
from agentradar.discovery.providers.process import (
    ProcessProvider,
    detect_process_signals,
)


def default_providers() -> list[SignalProvider]:
    """Create the five built-in providers in invocation order."""
    return [
        FilesystemProvider(),
        EnvProvider(),
        BinaryProvider(),
        AppPathProvider(),
        ProcessProvider(),
    ]


__all__ = [
    "AppPathProvider",
    "BinaryProvider",
    "EnvProvider",
    "FilesystemProvider",
    "ProbeContext",
    "ProcessProvider",
    "ProviderResult",
    "SignalProvider",
    "default_providers",
    "detect_app_signals",
    "detect_binary_signals",
    "detect_env_signals",
    "detect_filesystem_signals",
    "detect_process_signals",
]
