"""Property-based tests for the confidence model.

Verifies bounds, monotonicity and status precedence for arbitrary weight
tables and evidence subsets.

Model: confidence = round_half_up(100 * sum(matched) / sum(possible))
"""
from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from agentradar.discovery.models import (
    AgentStatus,
    DetectionEvidence,
    DetectionProvider,
)
from agentradar.discovery.scoring import (
    compute_confidence,
    derive_status,
    resolve_weights,
)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

providers = st.sampled_from(list(DetectionProvider))
weights = st.floats(min_value=0, max_value=1000, allow_nan=False, allow_infinity=False)


huge_weights = st.floats(
    min_value=1e300, max_value=1.7e308, allow_nan=False, allow_infinity=False,
)


@st.composite
def weight_split(draw):
    """A list of possible weights and a matched subset of it."""
    possible = draw(st.lists(weights, min_size=0, max_size=5))
    mask = draw(st.lists(st.booleans(), min_size=len(possible), max_size=len(possible)))
    matched = [w for w, keep in zip(possible, mask) if keep]
    return possible, matched


# ---------------------------------------------------------------------------
# compute_confidence()
# ---------------------------------------------------------------------------


class TestConfidenceBounds:
    """Confidence is always an integer in [0, 100]."""

    @given(split=weight_split())
    def test_in_range(self, split) -> None:
        possible, matched = split
        confidence = compute_confidence(possible, matched)
        assert isinstance(confidence, int)
        assert 0 <= confidence <= 100

    @given(
        possible=st.lists(st.one_of(weights, huge_weights), min_size=1, max_size=5),
        data=st.data(),
    )
    def test_in_range_near_float_limit(self, possible, data) -> None:
        """Weights close to the float maximum never overflow the score."""
        mask = data.draw(st.lists(st.booleans(), min_size=len(possible), max_size=len(possible)))
        matched = [w for w, keep in zip(possible, mask) if keep]
        confidence = compute_confidence(possible, matched)
        assert 0 <= confidence <= 100

    @given(possible=st.lists(weights, min_size=1, max_size=5))
    def test_nothing_matched_is_zero(self, possible) -> None:
        assert compute_confidence(possible, []) == 0

    @given(possible=st.lists(weights.filter(lambda w: w > 0), min_size=1, max_size=5))
    def test_everything_matched_is_hundred(self, possible) -> None:
        assert compute_confidence(possible, possible) == 100

    @given(split=weight_split(), extra=weights)
    def test_more_evidence_never_lowers(self, split, extra) -> None:
        """Adding a matched category never lowers confidence."""
        possible, matched = split
        before = compute_confidence(possible + [extra], matched)
        after = compute_confidence(possible + [extra], matched + [extra])
        assert after >= before


# ---------------------------------------------------------------------------
# resolve_weights()
# ---------------------------------------------------------------------------


class TestWeightResolution:

    @given(overrides=st.dictionaries(
        st.one_of(st.sampled_from([p.value for p in DetectionProvider]), st.text()),
        st.one_of(st.integers(), st.floats(), st.text(), st.booleans(), st.none()),
    ))
    def test_always_complete_and_non_negative(self, overrides) -> None:
        table = resolve_weights(overrides)
        assert set(table) == set(DetectionProvider)
        assert all(value >= 0 for value in table.values())


# ---------------------------------------------------------------------------
# derive_status()
# ---------------------------------------------------------------------------


class TestStatusPrecedence:

    @given(found=st.lists(providers, min_size=1, max_size=6))
    def test_process_wins(self, found) -> None:
        evidence = [DetectionEvidence(provider=p, detail=p.value) for p in found]
        status = derive_status(evidence)
        if DetectionProvider.PROCESS in found:
            assert status is AgentStatus.RUNNING
        elif set(found) == {DetectionProvider.ENV}:
            assert status is AgentStatus.AVAILABLE
        else:
            assert status is AgentStatus.INSTALLED
