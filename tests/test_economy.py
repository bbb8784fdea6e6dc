"""Tests for the economy engine."""

from stormidle.data.balance import BALANCE
from stormidle.engine.economy import (
    apply_effect,
    can_purchase,
    collect_drop,
    collect_drops,
    format_duration,
    format_number,
    tick,
    tick_auto_rain,
    tick_passive,
    try_purchase,
)
from stormidle.engine.game_state import GameState
from stormidle.engine.upgrades import UpgradeManager


def test_format_number_small():
    assert format_number(0) == "0"
    assert format_number(5) == "5"
    assert format_number(99.5) == "99.5"


def test_format_number_thousands():
    result = format_number(1500)
    assert "K" in result
    assert "1.5" in result


def test_format_number_millions():
    result = format_number(2_300_000)
    assert "M" in result


def test_format_duration():
    assert format_duration(42) == "42s"
    assert format_duration(125) == "2m 05s"
    assert format_duration(3600) == "1h 00m"


def test_default_state():
    state = GameState()
    assert state.currency == 0
    assert state.fall_speed == BALANCE.economy.base_fall_speed
    assert state.drops_to_fill == 50
    assert state.currency_earned == 1
    assert state.rps == 0
    assert state.cps == 0


# ── Collection ───────────────────────────────────────────────────


def test_collect_drop_converts_when_bowl_full():
    state = GameState(drops_to_fill=3)
    assert not collect_drop(state)
    assert not collect_drop(state)
    assert collect_drop(state)
    assert state.currency == 1
    assert state.drops_collected == 0


def test_conversion_arithmetic_two_full_bowls():
    state = GameState(drops_to_fill=45, currency_earned=2)
    conversions = sum(collect_drop(state) for _ in range(90))
    assert conversions == 2
    assert state.currency == 4
    assert state.drops_collected == 0


def test_conversion_arithmetic_leftover_drop():
    state = GameState(drops_to_fill=45, currency_earned=2)
    conversions = sum(collect_drop(state) for _ in range(46))
    assert conversions == 1
    assert state.currency == 2
    assert state.drops_collected == 1


# ── Auto rain & condensation ─────────────────────────────────────


def _drops_over(rate: float, steps: int, dt: float) -> int:
    state = GameState(rps=rate)
    return sum(tick_auto_rain(state, dt) for _ in range(steps))


def test_auto_rain_carries_fractions_regardless_of_chunking():
    assert _drops_over(0.5, 10, 1.0) == 5
    assert _drops_over(0.5, 100, 0.1) == 5
    assert _drops_over(0.5, 1000, 0.01) == 5
    assert _drops_over(0.5, 1, 10.0) == 5


def test_auto_rain_slow_rate_accumulates():
    state = GameState(rps=0.2)
    produced = [tick_auto_rain(state, 1.0) for _ in range(5)]
    assert produced == [0, 0, 0, 0, 1]


def test_auto_rain_disabled_without_rate():
    state = GameState()
    assert tick_auto_rain(state, 100.0) == 0
    assert state.rain_accumulator == 0.0


def test_passive_income_carries_fractions():
    state = GameState(cps=0.2)
    earned = sum(tick_passive(state, 0.5) for _ in range(20))
    assert earned == 2
    assert state.currency == 2


def test_tick_feeds_auto_drops_into_bowl():
    state = GameState(rps=1.0, drops_to_fill=2, currency_earned=3)
    result = tick(state, 5.0)
    assert result.drops == 5
    assert result.conversions == 2
    assert state.currency == 6
    assert state.drops_collected == 1


def test_tick_ignores_non_positive_dt():
    state = GameState(rps=1.0, cps=1.0)
    result = tick(state, -3.0)
    assert result.drops == 0
    assert result.passive_earned == 0
    assert state.currency == 0


# ── Purchases ────────────────────────────────────────────────────


def test_purchase_deducts_and_applies_effect():
    manager = UpgradeManager()
    state = GameState(currency=10)
    assert try_purchase(manager.rain.speed_tree, 0, state)
    assert state.currency == 9
    assert state.fall_speed == 350.0
    assert manager.rain.speed_tree[0].purchased


def test_purchase_insufficient_funds_changes_nothing():
    manager = UpgradeManager()
    state = GameState(currency=4)
    assert not try_purchase(manager.auto.auto_tree, 0, state)
    assert state.currency == 4
    assert state.rps == 0
    assert not manager.auto.auto_tree[0].purchased


def test_purchase_twice_is_rejected():
    manager = UpgradeManager()
    state = GameState(currency=100)
    tree = manager.econ.conversion_tree
    assert try_purchase(tree, 0, state)
    assert not try_purchase(tree, 0, state)
    assert state.currency == 70
    assert state.currency_earned == 2


def test_purchase_out_of_range_index():
    manager = UpgradeManager()
    state = GameState(currency=100)
    tree = manager.rain.speed_tree
    assert not try_purchase(tree, -1, state)
    assert not try_purchase(tree, len(tree), state)
    assert state.currency == 100


def test_gating_holds_for_every_tree():
    """Tier k>1 is buyable only once tier k-1 is owned."""
    manager = UpgradeManager()
    state = GameState(currency=10**12)
    for tree in manager.all_trees():
        for k in range(1, len(tree)):
            assert not can_purchase(tree, k, state)
            assert not try_purchase(tree, k, state)
        for k in range(len(tree)):
            assert try_purchase(tree, k, state)


def test_each_effect_kind():
    manager = UpgradeManager()
    state = GameState()
    apply_effect(manager.rain.bowl_tree[0], state)
    apply_effect(manager.auto.auto_tree[0], state)
    apply_effect(manager.auto.auto_tree[1], state)
    apply_effect(manager.econ.conversion_tree[2], state)
    apply_effect(manager.econ.condensation_tree[0], state)
    assert state.drops_to_fill == 45
    assert state.rps == 1.5
    assert state.currency_earned == 10
    assert state.cps == 0.2


def test_smaller_bowl_caps_pending_drops():
    manager = UpgradeManager()
    state = GameState(currency=20, drops_collected=48)
    assert try_purchase(manager.rain.bowl_tree, 0, state)
    assert state.drops_collected == 44
    assert collect_drop(state)
    assert state.currency == 1


# ── Invariants ───────────────────────────────────────────────────


def test_clamp_fixes_negative_currency():
    state = GameState(currency=-5, drops_to_fill=0)
    assert state.clamp()
    assert state.currency == 0
    assert state.drops_to_fill == 1
    assert not GameState().clamp()


def test_clamp_caps_runaway_rates():
    cap = BALANCE.economy.max_rate
    state = GameState(rps=1e308, cps=1e308, drops_to_fill=10**12)
    assert state.clamp()
    assert state.rps == cap
    assert state.cps == cap
    assert state.drops_to_fill == BALANCE.economy.max_drops_to_fill


# ── Large rates ──────────────────────────────────────────────────


def test_collect_drops_matches_one_at_a_time():
    one_by_one = GameState(drops_to_fill=45, currency_earned=2, drops_collected=10)
    batched = GameState(drops_to_fill=45, currency_earned=2, drops_collected=10)
    singles = sum(collect_drop(one_by_one) for _ in range(127))
    assert collect_drops(batched, 127) == singles
    assert batched == one_by_one
    assert collect_drops(batched, 0) == 0


def test_huge_rate_produces_drops_in_one_step():
    state = GameState(rps=1e12)
    assert tick_auto_rain(state, 1.0) == 10**12
    assert state.rain_accumulator < 1.0


def test_tick_with_huge_rate_and_long_gap():
    state = GameState(rps=1e9, drops_to_fill=50)
    result = tick(state, 1000.0)
    assert result.drops == 10**12
    assert result.conversions == 2 * 10**10
    assert state.currency == 2 * 10**10
    assert state.drops_collected == 0
