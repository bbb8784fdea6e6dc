"""Economy engine — rain collection, auto generation, purchases, and number formatting."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stormidle.data.balance import BALANCE
from stormidle.data.upgrades import UpgradeEffect
from stormidle.engine.game_state import GameState
from stormidle.engine.upgrades import UpgradeTier, UpgradeTree

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """What one call to ``tick`` produced."""

    drops: int = 0
    conversions: int = 0
    passive_earned: int = 0


# ── Rain → bowl → currency ──────────────────────────────────────


def collect_drop(state: GameState) -> bool:
    """A drop landed in the bowl. Returns True if the bowl converted."""
    state.drops_collected += 1
    if state.drops_collected >= state.drops_to_fill:
        state.drops_collected = 0
        state.currency += state.currency_earned
        return True
    return False


def collect_drops(state: GameState, count: int) -> int:
    """Land ``count`` drops at once. Returns how many bowls converted."""
    if count <= 0:
        return 0
    conversions, state.drops_collected = divmod(state.drops_collected + count, state.drops_to_fill)
    state.currency += conversions * state.currency_earned
    return conversions


def tick_auto_rain(state: GameState, dt: float) -> int:
    """Advance auto rain by dt seconds. Returns whole drops produced.

    The fractional remainder is carried so slow rates still add up no
    matter how dt is chunked.
    """
    if state.rps <= 0 or dt <= 0:
        return 0
    state.rain_accumulator += state.rps * dt
    drops = int(state.rain_accumulator + BALANCE.economy.carry_epsilon)
    if drops > 0:
        state.rain_accumulator -= drops
    return drops


def tick_passive(state: GameState, dt: float) -> int:
    """Apply condensation income for dt seconds. Returns currency earned."""
    if state.cps <= 0 or dt <= 0:
        return 0
    state.passive_accumulator += state.cps * dt
    whole = int(state.passive_accumulator + BALANCE.economy.carry_epsilon)
    if whole > 0:
        state.passive_accumulator -= whole
        state.currency += whole
    return whole


def tick(state: GameState, dt: float) -> TickResult:
    """Advance the economy by dt seconds.

    Auto-rain drops go straight into the bowl; hosts that animate
    falling drops should call ``tick_auto_rain`` and ``collect_drop``
    themselves instead.
    """
    result = TickResult()
    if dt <= 0:
        return result
    result.drops = tick_auto_rain(state, dt)
    result.conversions = collect_drops(state, result.drops)
    result.passive_earned = tick_passive(state, dt)
    return result


# ── Purchases ───────────────────────────────────────────────────


def apply_effect(tier: UpgradeTier, state: GameState) -> None:
    """Apply a tier's effect to the state."""
    effect = tier.effect
    if effect == UpgradeEffect.FALL_SPEED:
        state.fall_speed += tier.value
    elif effect == UpgradeEffect.DROPS_TO_FILL:
        state.drops_to_fill = int(tier.value)
        # A fuller bowl than the new size converts on the next drop
        if state.drops_collected >= state.drops_to_fill:
            state.drops_collected = state.drops_to_fill - 1
    elif effect == UpgradeEffect.AUTO_RAIN:
        state.rps += tier.value
    elif effect == UpgradeEffect.CONVERSION_YIELD:
        state.currency_earned = int(tier.value)
    elif effect == UpgradeEffect.CONDENSATION:
        state.cps += tier.value


def can_afford(state: GameState, tier: UpgradeTier) -> bool:
    return state.currency >= tier.cost


def can_purchase(tree: UpgradeTree, index: int, state: GameState) -> bool:
    """True if ``try_purchase`` would succeed right now."""
    if index < 0 or index >= len(tree):
        return False
    upgrade = tree[index]
    if upgrade.purchased:
        return False
    if not upgrade.is_unlocked(tree.previous(index)):
        return False
    return can_afford(state, upgrade)


def try_purchase(tree: UpgradeTree, index: int, state: GameState) -> bool:
    """Attempt to buy the tier at position ``index``. Returns True if bought.

    Nothing is changed unless every check passes.
    """
    if index < 0 or index >= len(tree):
        logger.debug("Ignoring purchase of %s index %d (out of range)", tree.tree_id, index)
        return False

    if not can_purchase(tree, index, state):
        return False

    upgrade = tree[index]
    state.currency -= upgrade.cost
    upgrade.purchased = True
    apply_effect(upgrade, state)

    logger.debug("Purchased %s for %d", upgrade.upgrade_id, upgrade.cost)
    return True


# ── Display ─────────────────────────────────────────────────────


def format_number(n: float) -> str:
    """Format a number with suffixes for readability."""
    if n < 0:
        return f"-{format_number(-n)}"

    for threshold, suffix in reversed(BALANCE.economy.suffixes):
        if n >= threshold:
            value = n / threshold
            if value >= 100:
                return f"{value:.0f}{suffix}"
            elif value >= 10:
                return f"{value:.1f}{suffix}"
            else:
                return f"{value:.2f}{suffix}"

    if n >= 100:
        return f"{n:.0f}"
    elif n >= 10:
        return f"{n:.1f}"
    elif n == int(n):
        return str(int(n))
    else:
        return f"{n:.1f}"


def format_duration(seconds: int) -> str:
    """Format seconds as e.g. ``1h 05m`` or ``42s``."""
    hours, rem = divmod(max(0, int(seconds)), 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"
