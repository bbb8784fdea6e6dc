"""Save/load — persists the economy between sessions and pays out offline progress.

Save format (JSON):

    {
      "currency": 100,
      "fallSpeed": 350.0,
      "dropsToFill": 45,
      "rps": 0.5,
      "cps": 0.2,
      "currencyEarned": 2,
      "lastClosedTime": 1760000000,
      "purchasedUpgrades": ["speed_1", "value_1", "auto_1"]
    }
"""

from __future__ import annotations

import json
import logging
import math
import time
from dataclasses import dataclass, field
from pathlib import Path

from stormidle.data.balance import BALANCE
from stormidle.engine.game_state import GameState
from stormidle.engine.upgrades import UpgradeManager

logger = logging.getLogger(__name__)

SAVE_FILE = BALANCE.persistence.save_file

_ECON = BALANCE.economy


@dataclass
class OfflineResult:
    """Returned by ``load_game`` so the host can show a welcome-back breakdown."""

    has_progress: bool = False
    seconds_away: int = 0  # capped at max_offline_seconds
    earned_from_conversion: int = 0
    earned_from_passive: int = 0

    @property
    def total(self) -> int:
        return self.earned_from_conversion + self.earned_from_passive

    @classmethod
    def none(cls) -> OfflineResult:
        return cls()


@dataclass
class SaveRecord:
    """Flat, durable form of a session."""

    currency: int = _ECON.starting_currency
    fall_speed: float = _ECON.base_fall_speed
    drops_to_fill: int = _ECON.base_drops_to_fill
    rps: float = _ECON.base_rps
    cps: float = _ECON.base_cps
    currency_earned: int = _ECON.base_currency_earned
    last_closed_time: int = 0
    purchased_upgrades: list[str] = field(default_factory=list)

    @classmethod
    def capture(cls, state: GameState, upgrades: UpgradeManager, now: float) -> SaveRecord:
        return cls(
            currency=state.currency,
            fall_speed=state.fall_speed,
            drops_to_fill=state.drops_to_fill,
            rps=state.rps,
            cps=state.cps,
            currency_earned=state.currency_earned,
            last_closed_time=int(now),
            purchased_upgrades=upgrades.purchased_ids(),
        )

    def apply_to(self, state: GameState) -> None:
        """Overwrite every persisted field on ``state``."""
        state.currency = self.currency
        state.fall_speed = self.fall_speed
        state.drops_to_fill = self.drops_to_fill
        state.rps = self.rps
        state.cps = self.cps
        state.currency_earned = self.currency_earned
        state.reset_live()


# ── Serialisation helpers ────────────────────────────────────────


def _record_to_dict(r: SaveRecord) -> dict:
    return {
        "currency": r.currency,
        "fallSpeed": r.fall_speed,
        "dropsToFill": r.drops_to_fill,
        "rps": r.rps,
        "cps": r.cps,
        "currencyEarned": r.currency_earned,
        "lastClosedTime": r.last_closed_time,
        "purchasedUpgrades": list(r.purchased_upgrades),
    }


def _number(d: dict, key: str) -> int | float | None:
    value = d.get(key)
    # bool is an int subclass; true/false is never a valid count
    if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
        raise TypeError(f"{key} must be a number, got {type(value).__name__}")
    return value


def _as_int(d: dict, key: str, default: int) -> int:
    value = _number(d, key)
    if value is None:
        return default
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{key} must be a whole number: {value}")
    return int(value)


def _as_float(d: dict, key: str, default: float) -> float:
    value = _number(d, key)
    if value is None:
        return default
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{key} is not a finite number: {value}")
    return value


def _dict_to_record(d: dict) -> SaveRecord:
    """Build a record from parsed JSON.

    Missing fields take their defaults; values of the wrong type raise
    ValueError/TypeError so the whole save is rejected.
    """
    if not isinstance(d, dict):
        raise TypeError(f"Save data must be an object, got {type(d).__name__}")

    raw_ids = d.get("purchasedUpgrades")
    if raw_ids is None:
        raw_ids = []
    if not isinstance(raw_ids, list):
        raise TypeError("purchasedUpgrades must be a list")
    ids = [uid for uid in raw_ids if isinstance(uid, str)]
    if len(ids) != len(raw_ids):
        logger.warning("Skipping %d non-string purchased upgrade ids", len(raw_ids) - len(ids))

    return SaveRecord(
        currency=_as_int(d, "currency", _ECON.starting_currency),
        fall_speed=_as_float(d, "fallSpeed", _ECON.base_fall_speed),
        drops_to_fill=_as_int(d, "dropsToFill", _ECON.base_drops_to_fill),
        rps=_as_float(d, "rps", _ECON.base_rps),
        cps=_as_float(d, "cps", _ECON.base_cps),
        currency_earned=_as_int(d, "currencyEarned", _ECON.base_currency_earned),
        last_closed_time=_as_int(d, "lastClosedTime", 0),
        purchased_upgrades=ids,
    )


# ── Offline progress ─────────────────────────────────────────────


def compute_offline_progress(
    state: GameState,
    last_closed_time: int,
    now: float,
    max_seconds: int | None = None,
) -> OfflineResult:
    """Work out what the player earned while away.  Does not touch ``state``.

    Rates and conversion yield are taken as they are now for the whole
    window; earlier, lower rates are not tracked.
    """
    if last_closed_time <= 0:
        return OfflineResult.none()
    if max_seconds is None:
        max_seconds = BALANCE.offline.max_offline_seconds

    # Clock skew can put the save in the future
    seconds_away = min(max(int(now) - last_closed_time, 0), max_seconds)
    eps = _ECON.carry_epsilon

    from_conversion = 0
    if state.rps > 0 and state.drops_to_fill > 0:
        bowls = state.rps * seconds_away / state.drops_to_fill
        if math.isfinite(bowls):
            from_conversion = math.floor(bowls + eps) * state.currency_earned
        else:
            logger.error("Offline rain overflowed (rps=%s); paying nothing", state.rps)

    from_passive = 0
    if state.cps > 0:
        passive = state.cps * seconds_away
        if math.isfinite(passive):
            from_passive = math.floor(passive + eps)
        else:
            logger.error("Offline condensation overflowed (cps=%s); paying nothing", state.cps)

    return OfflineResult(
        has_progress=(from_conversion + from_passive) > 0,
        seconds_away=seconds_away,
        earned_from_conversion=from_conversion,
        earned_from_passive=from_passive,
    )


# ── Public API ───────────────────────────────────────────────────


def save_game(
    state: GameState,
    upgrades: UpgradeManager,
    path: Path | None = None,
    now: float | None = None,
) -> bool:
    """Persist state and purchased upgrades. Returns False if the write failed."""
    path = path or SAVE_FILE
    record = SaveRecord.capture(state, upgrades, time.time() if now is None else now)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(_record_to_dict(record), indent=2), encoding="utf-8")
    except OSError:
        logger.exception("Failed to write save file %s", path)
        return False

    logger.info("Game saved. Purchased upgrades: %d", len(record.purchased_upgrades))
    return True


def load_game(
    state: GameState,
    upgrades: UpgradeManager,
    path: Path | None = None,
    now: float | None = None,
) -> OfflineResult:
    """Restore state and purchased flags from disk, then pay out offline progress.

    Purchased effects are not re-applied: the saved numbers already
    include them.  A missing or corrupt save leaves ``state`` untouched.
    """
    path = path or SAVE_FILE
    if not path.exists():
        logger.info("No save file found at %s, starting fresh", path)
        return OfflineResult.none()

    try:
        record = _dict_to_record(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError, TypeError, OverflowError, RecursionError):
        logger.exception("Failed to load save file %s; starting fresh", path)
        return OfflineResult.none()

    record.apply_to(state)
    state.clamp()
    upgrades.restore_purchased(record.purchased_upgrades)

    result = compute_offline_progress(
        state, record.last_closed_time, time.time() if now is None else now
    )
    state.currency += result.total

    logger.info(
        "Game loaded. Currency: %d (offline +%d over %ds)",
        state.currency, result.total, result.seconds_away,
    )
    return result


def delete_save(path: Path | None = None) -> bool:
    """Remove the save file (prestige). In-memory state is not touched."""
    path = path or SAVE_FILE
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.exception("Failed to delete save file %s", path)
        return False
    logger.info("Save file deleted")
    return True
