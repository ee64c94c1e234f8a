import pytest

from engine.tiers import WITHDRAWAL_TIERS, resolve_tier


@pytest.mark.parametrize(
    "balance, expected",
    [
        (-500, 0),
        (0, 0),
        (3999, 0),
        (4000, 4000),
        (12999, 4000),
        (13000, 13000),
        (50000, 40000),
        (3800000, 3800000),
        (10**9, 3800000),
    ],
)
def test_resolve_tier(balance, expected):
    assert resolve_tier(balance) == expected


def test_tier_is_monotonic_and_on_the_ladder():
    previous = 0
    for balance in range(0, 4_000_000, 997):
        tier = resolve_tier(balance)
        assert tier == 0 or tier in WITHDRAWAL_TIERS
        assert tier <= balance
        assert tier >= previous
        previous = tier


def test_custom_ladder():
    assert resolve_tier(250, (100, 200, 300)) == 200
    assert resolve_tier(99, (100, 200, 300)) == 0
