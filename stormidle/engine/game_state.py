"""Game state — single source of truth for the economy."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stormidle.data.balance import BALANCE

logger = logging.getLogger(__name__)

_ECON = BALANCE.economy


@dataclass
class GameState:
    """Complete mutable economic state for one session."""

    # ── Persisted ────────────────────────────────────────
    currency: int = _ECON.starting_currency
    fall_speed: float = _ECON.base_fall_speed
    drops_to_fill: int = _ECON.base_drops_to_fill
    rps: float = _ECON.base_rps                       # auto rain, drops per second
    cps: float = _ECON.base_cps                       # condensation, currency per second
    currency_earned: int = _ECON.base_currency_earned  # currency per bowl conversion

    # ── Live only (never saved) ──────────────────────────
    drops_collected: int = 0          # bowl fill, resets on each conversion
    rain_accumulator: float = 0.0     # fractional auto-rain drops
    passive_accumulator: float = 0.0  # fractional condensation currency

    def reset_live(self) -> None:
        """Zero the per-session counters that are not part of a save."""
        self.drops_collected = 0
        self.rain_accumulator = 0.0
        self.passive_accumulator = 0.0

    def clamp(self) -> bool:
        """Pull any out-of-range field back to its nearest valid value.

        Returns True if something had to be fixed.  These only go wrong
        through a bug or a hand-edited save, so each fix is logged as an error.
        """
        fixed = False
        if self.currency < 0:
            logger.error("Currency was negative (%s); clamping to 0", self.currency)
            self.currency = 0
            fixed = True
        if self.drops_to_fill < 1:
            logger.error("drops_to_fill was %s; clamping to 1", self.drops_to_fill)
            self.drops_to_fill = 1
            fixed = True
        if self.currency_earned < 1:
            logger.error("currency_earned was %s; clamping to 1", self.currency_earned)
            self.currency_earned = 1
            fixed = True
        if self.fall_speed <= 0:
            logger.error("fall_speed was %s; resetting to default", self.fall_speed)
            self.fall_speed = _ECON.base_fall_speed
            fixed = True
        if self.rps < 0:
            logger.error("rps was negative (%s); clamping to 0", self.rps)
            self.rps = 0.0
            fixed = True
        if self.cps < 0:
            logger.error("cps was negative (%s); clamping to 0", self.cps)
            self.cps = 0.0
            fixed = True
        if self.drops_to_fill > _ECON.max_drops_to_fill:
            logger.error("drops_to_fill was %s; clamping to %s", self.drops_to_fill, _ECON.max_drops_to_fill)
            self.drops_to_fill = _ECON.max_drops_to_fill
            fixed = True
        if self.rps > _ECON.max_rate:
            logger.error("rps was %s; clamping to %s", self.rps, _ECON.max_rate)
            self.rps = _ECON.max_rate
            fixed = True
        if self.cps > _ECON.max_rate:
            logger.error("cps was %s; clamping to %s", self.cps, _ECON.max_rate)
            self.cps = _ECON.max_rate
            fixed = True
        if not 0 <= self.drops_collected < self.drops_to_fill:
            logger.error("drops_collected was %s of %s", self.drops_collected, self.drops_to_fill)
            self.drops_collected = min(max(self.drops_collected, 0), self.drops_to_fill - 1)
            fixed = True
        return fixed
