"""Tests for confidence scoring: weights, rounding and status mapping."""

from __future__ import annotations

import pytest

from agentradar.discovery.models import (
    AgentStatus,
    DetectionEvidence,
    DetectionProvider,
)
from agentradar.discovery.scoring import (
    DEFAULT_WEIGHTS,
    compute_confidence,
    derive_status,
    resolve_weights,
    round_half_up,
)


def _evidence(*providers: DetectionProvider) -> list[DetectionEvidence]:
    return [DetectionEvidence(provider=p, detail=p.value) for p in providers]


# ---------------------------------------------------------------------------
# resolve_weights()
# ---------------------------------------------------------------------------


class TestResolveWeights:
    """Merging target overrides onto the default weight table."""

    def test_defaults(self) -> None:
        """Process counts most, env least."""
        weights = resolve_weights()
        assert weights[DetectionProvider.FILESYSTEM] == 6
        assert weights[DetectionProvider.PROCESS] == 10
        assert weights[DetectionProvider.ENV] == 4
        assert weights[DetectionProvider.BINARY] == 8
        assert weights[DetectionProvider.APP] == 7

    def test_string_key_override(self) -> None:
        """Overrides keyed by category name win per key."""
        weights = resolve_weights({"env": 9})
        assert weights[DetectionProvider.ENV] == 9
        assert weights[DetectionProvider.FILESYSTEM] == 6

    def test_enum_key_override(self) -> None:
        """Overrides keyed by the enum member are accepted too."""
        weights = resolve_weights({DetectionProvider.APP: 1.5})
        assert weights[DetectionProvider.APP] == 1.5

    def test_unknown_key_ignored(self) -> None:
        """Unknown categories fall back silently to the defaults."""
        weights = resolve_weights({"port": 8, "network": 3})
        assert weights == DEFAULT_WEIGHTS

    @pytest.mark.parametrize("bad", ["heavy", None, True, -1, float("nan"), float("inf")])
    def test_invalid_value_ignored(self, bad: object) -> None:
        """Non-numeric, boolean, negative and non-finite values are ignored."""
        weights = resolve_weights({"binary": bad})
        assert weights[DetectionProvider.BINARY] == 8

    def test_int_too_large_for_float_ignored(self) -> None:
        """An integer beyond the float range keeps the default."""
        weights = resolve_weights({"binary": 10 ** 400})
        assert weights[DetectionProvider.BINARY] == 8

    def test_defaults_not_mutated(self) -> None:
        """Overrides never leak into the module-level table."""
        resolve_weights({"filesystem": 100})
        assert DEFAULT_WEIGHTS[DetectionProvider.FILESYSTEM] == 6


# ---------------------------------------------------------------------------
# compute_confidence()
# ---------------------------------------------------------------------------


class TestComputeConfidence:
    """Matched weight over total possible weight, scaled to 0-100."""

    def test_partial_match(self) -> None:
        """Filesystem (6) matched out of filesystem + env (10) gives 60."""
        assert compute_confidence([6, 4], [6]) == 60

    def test_full_match(self) -> None:
        assert compute_confidence([6, 4], [6, 4]) == 100

    def test_no_match(self) -> None:
        assert compute_confidence([6, 4], []) == 0

    def test_nothing_possible(self) -> None:
        """A target with no categories always scores zero."""
        assert compute_confidence([], []) == 0

    def test_zero_weights(self) -> None:
        """All-zero weights cannot divide by zero."""
        assert compute_confidence([0, 0], [0]) == 0

    def test_rounds_half_up(self) -> None:
        """1 / 8 = 12.5 rounds to 13, where round() would give 12."""
        assert compute_confidence([1, 7], [1]) == 13

    def test_filesystem_against_process(self) -> None:
        """6 / 16 = 37.5 rounds to 38."""
        assert compute_confidence([6, 10], [6]) == 38

    def test_weights_near_float_limit(self) -> None:
        """Sums that overflow are compared relative to the largest weight."""
        assert compute_confidence([1e308, 1e308], [1e308]) == 50
        assert compute_confidence([1e308], [1e308]) == 100
        assert compute_confidence([1e308, 1e308, 1e308, 1e308], [1e308]) == 25

    def test_infinite_weight_scores_zero(self) -> None:
        assert compute_confidence([float("inf"), 6], [6]) == 0

    def test_result_is_int(self) -> None:
        assert isinstance(compute_confidence([6, 7, 8], [7]), int)

    def test_round_half_up_helper(self) -> None:
        assert round_half_up(12.5) == 13
        assert round_half_up(12.4999) == 12
        assert round_half_up(0.5) == 1


# ---------------------------------------------------------------------------
# derive_status()
# ---------------------------------------------------------------------------


class TestDeriveStatus:
    """Strongest evidence category decides the status."""

    def test_process_means_running(self) -> None:
        evidence = _evidence(DetectionProvider.ENV, DetectionProvider.PROCESS)
        assert derive_status(evidence) is AgentStatus.RUNNING

    @pytest.mark.parametrize("provider", [
        DetectionProvider.FILESYSTEM,
        DetectionProvider.BINARY,
        DetectionProvider.APP,
    ])
    def test_install_evidence_means_installed(self, provider: DetectionProvider) -> None:
        evidence = _evidence(DetectionProvider.ENV, provider)
        assert derive_status(evidence) is AgentStatus.INSTALLED

    def test_env_only_means_available(self) -> None:
        assert derive_status(_evidence(DetectionProvider.ENV)) is AgentStatus.AVAILABLE
