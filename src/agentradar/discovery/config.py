"""Discovery configuration.

``DiscoveryConfig`` is supplied once when an engine is constructed and is
never mutated afterwards. Use ``with_overrides()`` (or
``dataclasses.replace``) to derive a new config between scans.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from agentradar.discovery.models import SignalPattern
from agentradar.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# camelCase spellings accepted by ``from_mapping`` (JSON config files).
_CAMEL_CASE_KEYS: dict[str, str] = {
    "maxRetries": "max_retries",
    "retryDelayMs": "retry_delay_ms",
    "confidenceThreshold": "confidence_threshold",
    "checkProcesses": "check_processes",
    "processTimeoutMs": "process_timeout_ms",
    "additionalPaths": "additional_paths",
    "additionalEnvPatterns": "additional_env_patterns",
    "processExclusionPatterns": "process_exclusion_patterns",
    "maxWorkers": "max_workers",
}

_INT_FIELDS: tuple[str, ...] = (
    "max_retries",
    "retry_delay_ms",
    "confidence_threshold",
    "process_timeout_ms",
    "max_workers",
)
_SEQUENCE_FIELDS: tuple[str, ...] = (
    "additional_paths",
    "additional_env_patterns",
    "process_exclusion_patterns",
)


@dataclass(frozen=True)
class DiscoveryConfig:
    """Tunables for one discovery engine.

    Attributes:
        max_retries: Attempts made by ``AgentDiscovery`` when a whole scan
            fails unexpectedly.
        retry_delay_ms: Base delay between those attempts (doubled each
            time).
        confidence_threshold: Minimum confidence (0-100) for an agent to
            be reported.
        check_processes: Global switch for the process provider.
        process_timeout_ms: Budget for each blocking probe (process table
            listing, each binary version call).
        additional_paths: Extra filesystem roots checked for
            filesystem signals.
        additional_env_patterns: Extra env prefixes/regexes merged into
            every target's env signals.
        process_exclusion_patterns: Regexes that veto process matches for
            every target.
        max_workers: Upper bound on targets probed concurrently.
    """

    max_retries: int = 3
    retry_delay_ms: int = 500
    confidence_threshold: int = 20
    check_processes: bool = True
    process_timeout_ms: int = 5000
    additional_paths: tuple[str, ...] = ()
    additional_env_patterns: tuple[SignalPattern, ...] = ()
    process_exclusion_patterns: tuple[re.Pattern[str], ...] = ()
    max_workers: int = 8

    def validate(self) -> None:
        """Raise ConfigurationError if any value has the wrong type or range."""
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if not isinstance(self.check_processes, bool):
            raise ConfigurationError(
                f"check_processes must be a boolean, got {self.check_processes!r}"
            )
        if self.max_retries < 1:
            raise ConfigurationError(
                f"max_retries must be at least 1, got {self.max_retries}"
            )
        if self.retry_delay_ms < 0:
            raise ConfigurationError(
                f"retry_delay_ms must be non-negative, got {self.retry_delay_ms}"
            )
        if not 0 <= self.confidence_threshold <= 100:
            raise ConfigurationError(
                "confidence_threshold must be in [0, 100], "
                f"got {self.confidence_threshold}"
            )
        if self.process_timeout_ms <= 0:
            raise ConfigurationError(
                f"process_timeout_ms must be positive, got {self.process_timeout_ms}"
            )
        if self.max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be at least 1, got {self.max_workers}"
            )

    @property
    def process_timeout(self) -> float:
        """``process_timeout_ms`` in seconds."""
        return self.process_timeout_ms / 1000.0

    def with_overrides(self, **changes: Any) -> DiscoveryConfig:
        """Return a copy with ``changes`` applied and validated."""
        updated = replace(self, **changes)
        updated.validate()
        return updated

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DiscoveryConfig:
        """Build a config from a plain mapping, e.g. a parsed JSON file.

        Keys may be snake_case or camelCase. Unknown keys are ignored.
        A single string is accepted where a list is expected.
        String entries in ``process_exclusion_patterns`` are compiled
        case-insensitively.

        Raises:
            ConfigurationError: If a pattern does not compile or a value
                has the wrong type or is out of range.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for raw_key, value in data.items():
            key = _CAMEL_CASE_KEYS.get(raw_key, raw_key)
            if key not in known:
                logger.debug("Ignoring unknown discovery config key: %s", raw_key)
                continue
            kwargs[key] = value

        for key in _SEQUENCE_FIELDS:
            if key in kwargs:
                kwargs[key] = _as_tuple(key, kwargs[key])
        for key in ("additional_paths", "additional_env_patterns"):
            for entry in kwargs.get(key, ()):
                if not isinstance(entry, str):
                    raise ConfigurationError(
                        f"{key} entries must be strings, got {entry!r}"
                    )
        if "process_exclusion_patterns" in kwargs:
            kwargs["process_exclusion_patterns"] = tuple(
                compile_pattern(p) for p in kwargs["process_exclusion_patterns"]
            )

        config = cls(**kwargs)
        config.validate()
        return config

    @classmethod
    def from_file(cls, path: str | Path) -> DiscoveryConfig:
        """Load a config from a YAML (or JSON) file.

        The document must be a mapping; see ``from_mapping`` for keys.

        Raises:
            ConfigurationError: If the file cannot be read or parsed, or
                does not hold a mapping.
        """
        config_path = Path(path)
        try:
            raw = config_path.read_text(encoding="utf-8")
            data = yaml.safe_load(raw)
        except (OSError, yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Cannot load {config_path}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{config_path} must contain a mapping, got {type(data).__name__}"
            )
        logger.debug("Loaded discovery config from %s", config_path)
        return cls.from_mapping(data)


def _as_tuple(key: str, value: Any) -> tuple[Any, ...]:
    """Accept a list, a tuple or a single string for a sequence setting."""
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(value)
    raise ConfigurationError(f"{key} must be a list, got {value!r}")


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a regex string case-insensitively; pass compiled ones through."""
    if isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str):
        raise ConfigurationError(f"Pattern must be a string, got {pattern!r}")
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        raise ConfigurationError(f"Invalid regex {pattern!r}: {exc}") from exc


DEFAULT_DISCOVERY_CONFIG = DiscoveryConfig()
