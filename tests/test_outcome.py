"""
Tests for operation outcomes.

Feature: main-branch
"""

from hypothesis import given
from hypothesis import strategies as st

from main_branch.outcome import Outcome


def test_exit_codes() -> None:
    assert Outcome.NO_OP.exit_code == 0
    assert Outcome.SUCCESS.exit_code == 0
    assert Outcome.FAILURE.exit_code == 1


def test_only_failure_is_an_error() -> None:
    assert [o for o in Outcome if o.is_error] == [Outcome.FAILURE]


@given(st.lists(st.sampled_from(list(Outcome))))
def test_worst_is_most_severe(outcomes: list[Outcome]) -> None:
    worst = Outcome.worst(*outcomes)

    if not outcomes:
        assert worst is Outcome.NO_OP
    else:
        assert worst in outcomes
        assert all(o <= worst for o in outcomes)
    assert worst.is_error == (Outcome.FAILURE in outcomes)
