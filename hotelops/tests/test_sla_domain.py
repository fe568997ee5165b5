from datetime import datetime, timedelta, timezone

from hypothesis import given
from hypothesis import strategies as st

from hotelops.app.domain import (
    TERMINAL,
    OrderStatus,
    can_transition,
    claim_rejection,
    is_on_time,
    minutes_between,
)

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_minutes_round_half_up():
    assert minutes_between(T0, T0 + timedelta(seconds=89)) == 1
    assert minutes_between(T0, T0 + timedelta(seconds=90)) == 2
    assert minutes_between(T0, T0 + timedelta(minutes=45)) == 45


def test_clock_skew_never_negative():
    assert minutes_between(T0, T0 - timedelta(minutes=3)) == 0


def test_naive_timestamps_are_utc():
    naive = T0.replace(tzinfo=None)
    assert minutes_between(naive, T0 + timedelta(minutes=10)) == 10


def test_on_time_includes_the_target_minute():
    assert is_on_time(30, 30) is True
    assert is_on_time(31, 30) is False
    assert is_on_time(0, 0) is True


@given(st.integers(min_value=0, max_value=10_000), st.integers(min_value=0, max_value=600))
def test_on_time_matches_threshold(minutes, sla):
    assert is_on_time(minutes, sla) == (minutes <= sla)


@given(st.integers(min_value=-86_400, max_value=86_400 * 7))
def test_minutes_non_negative(seconds):
    assert minutes_between(T0, T0 + timedelta(seconds=seconds)) >= 0


def test_terminal_states_are_final():
    for src in TERMINAL:
        for dst in OrderStatus:
            assert not can_transition(src, dst)
    assert can_transition(OrderStatus.PREPARING, OrderStatus.DELIVERED)
    assert can_transition(OrderStatus.PREPARING, OrderStatus.CANCELLED)


def test_claim_rules_checked_in_order():
    assert claim_rejection(None, -5)[0] == "HOTEL_REQUIRED"
    assert claim_rejection("h", 0)[0] == "AMOUNT_NOT_POSITIVE"
    assert claim_rejection("h", 150)[0] == "AMOUNT_NOT_WHOLE_RUPEES"
    assert claim_rejection("h", 9_900)[0] == "AMOUNT_BELOW_MINIMUM"
    assert claim_rejection("h", 10_000) is None


@given(st.integers(min_value=-1_000_000, max_value=1_000_000))
def test_accepted_claims_are_whole_rupees_over_minimum(amount):
    if claim_rejection("h", amount) is None:
        assert amount >= 10_000
        assert amount % 100 == 0
