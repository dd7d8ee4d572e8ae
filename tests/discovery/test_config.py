"""Tests for DiscoveryConfig defaults, validation and mapping input."""

from __future__ import annotations

import re

import pytest

from agentradar.discovery.config import (
    DEFAULT_DISCOVERY_CONFIG,
    DiscoveryConfig,
    compile_pattern,
)
from agentradar.exceptions import ConfigurationError


class TestDefaults:

    def test_values(self) -> None:
        config = DEFAULT_DISCOVERY_CONFIG
        assert config.max_retries == 3
        assert config.retry_delay_ms == 500
        assert config.confidence_threshold == 20
        assert config.check_processes is True
        assert config.process_timeout_ms == 5000
        assert config.additional_paths == ()
        assert config.additional_env_patterns == ()
        assert config.process_exclusion_patterns == ()

    def test_process_timeout_seconds(self) -> None:
        assert DiscoveryConfig(process_timeout_ms=250).process_timeout == 0.25

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_DISCOVERY_CONFIG.confidence_threshold = 50  # type: ignore[misc]


class TestValidate:

    @pytest.mark.parametrize("changes", [
        {"max_retries": 0},
        {"retry_delay_ms": -1},
        {"confidence_threshold": -1},
        {"confidence_threshold": 101},
        {"process_timeout_ms": 0},
        {"max_workers": 0},
    ])
    def test_out_of_range(self, changes: dict) -> None:
        with pytest.raises(ConfigurationError):
            DiscoveryConfig(**changes).validate()

    def test_bounds_accepted(self) -> None:
        DiscoveryConfig(confidence_threshold=0).validate()
        DiscoveryConfig(confidence_threshold=100, retry_delay_ms=0).validate()

    def test_with_overrides(self) -> None:
        updated = DEFAULT_DISCOVERY_CONFIG.with_overrides(confidence_threshold=50)
        assert updated.confidence_threshold == 50
        assert DEFAULT_DISCOVERY_CONFIG.confidence_threshold == 20

    def test_with_overrides_validates(self) -> None:
        with pytest.raises(ConfigurationError):
            DEFAULT_DISCOVERY_CONFIG.with_overrides(max_retries=0)


class TestFromMapping:

    def test_camel_case_keys(self) -> None:
        config = DiscoveryConfig.from_mapping({
            "confidenceThreshold": 40,
            "checkProcesses": False,
            "additionalPaths": ["/opt/agents"],
        })
        assert config.confidence_threshold == 40
        assert config.check_processes is False
        assert config.additional_paths == ("/opt/agents",)

    def test_snake_case_keys(self) -> None:
        config = DiscoveryConfig.from_mapping({"process_timeout_ms": 1000})
        assert config.process_timeout_ms == 1000

    def test_unknown_keys_ignored(self) -> None:
        config = DiscoveryConfig.from_mapping({"colour": "blue"})
        assert config == DiscoveryConfig()

    def test_exclusions_compiled(self) -> None:
        config = DiscoveryConfig.from_mapping({"processExclusionPatterns": ["helper"]})
        (pattern,) = config.process_exclusion_patterns
        assert pattern.search("SomeHELPER process")

    def test_bad_regex(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid regex"):
            DiscoveryConfig.from_mapping({"processExclusionPatterns": ["("]})

    @pytest.mark.parametrize("data", [
        {"confidenceThreshold": "50"},
        {"processTimeoutMs": None},
        {"maxRetries": 2.5},
        {"maxWorkers": True},
        {"checkProcesses": "no"},
    ])
    def test_wrong_value_type(self, data: dict) -> None:
        with pytest.raises(ConfigurationError, match="must be"):
            DiscoveryConfig.from_mapping(data)

    def test_single_string_for_list(self) -> None:
        config = DiscoveryConfig.from_mapping({
            "additionalPaths": "/opt/x",
            "additionalEnvPatterns": "MY_AGENT_",
            "processExclusionPatterns": "helper",
        })
        assert config.additional_paths == ("/opt/x",)
        assert config.additional_env_patterns == ("MY_AGENT_",)
        assert len(config.process_exclusion_patterns) == 1

    @pytest.mark.parametrize("data", [
        {"additionalPaths": 42},
        {"additionalPaths": ["/opt/x", 7]},
        {"additionalEnvPatterns": [None]},
        {"processExclusionPatterns": [3]},
    ])
    def test_wrong_list_entries(self, data: dict) -> None:
        with pytest.raises(ConfigurationError):
            DiscoveryConfig.from_mapping(data)

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            DiscoveryConfig.from_mapping({"maxRetries": 0})


class TestCompilePattern:

    def test_string_case_insensitive(self) -> None:
        assert compile_pattern("abc").flags & re.IGNORECASE

    def test_compiled_passthrough(self) -> None:
        pattern = re.compile("abc")
        assert compile_pattern(pattern) is pattern


class TestFromFile:

    def test_yaml(self, tmp_path) -> None:
        path = tmp_path / "radar.yaml"
        path.write_text(
            "confidenceThreshold: 35\n"
            "additionalEnvPatterns:\n"
            "  - MY_AGENT_\n"
            "processExclusionPatterns:\n"
            "  - helper\n"
        )
        config = DiscoveryConfig.from_file(path)
        assert config.confidence_threshold == 35
        assert config.additional_env_patterns == ("MY_AGENT_",)
        assert config.process_exclusion_patterns[0].search("HELPER")

    def test_json(self, tmp_path) -> None:
        path = tmp_path / "radar.json"
        path.write_text('{"checkProcesses": false, "processTimeoutMs": 900}')
        config = DiscoveryConfig.from_file(path)
        assert config.check_processes is False
        assert config.process_timeout_ms == 900

    def test_empty_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert DiscoveryConfig.from_file(path) == DiscoveryConfig()

    def test_not_a_mapping(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            DiscoveryConfig.from_file(path)

    def test_malformed(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Cannot load"):
            DiscoveryConfig.from_file(path)

    def test_missing(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            DiscoveryConfig.from_file(tmp_path / "nope.yaml")
