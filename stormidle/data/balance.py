"""Balance constants — all tuning knobs in one place.

Defaults here are also the fallback values used when a save file is
missing a field.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class EconomyBalance:
    """Starting values for the rain → bowl → currency loop."""

    # Starting currency
    starting_currency: int = 0

    # Pixels per second a raindrop falls (display only)
    base_fall_speed: float = 300.0

    # Drops the bowl must collect before converting to currency
    base_drops_to_fill: int = 50

    # Currency awarded per bowl conversion
    base_currency_earned: int = 1

    # Auto rain (drops/s) and condensation (currency/s) start disabled
    base_rps: float = 0.0
    base_cps: float = 0.0

    # Tolerance for float accumulators crossing a whole unit
    carry_epsilon: float = 1e-9

    # Ceilings for values read back from a save; far above anything the
    # upgrade trees can reach
    max_rate: float = 1e9
    max_drops_to_fill: int = 1_000_000

    # Large number formatting thresholds
    suffixes: tuple[tuple[float, str], ...] = (
        (1e3, "K"),
        (1e6, "M"),
        (1e9, "B"),
        (1e12, "T"),
        (1e15, "Qa"),
        (1e18, "Qi"),
    )


@dataclass(frozen=True)
class OfflineBalance:
    """Tuning for progress earned while the game was closed."""

    # Longest absence that still pays out
    max_offline_seconds: int = 3600


@dataclass(frozen=True)
class PersistenceBalance:
    """Where the game keeps its save and log files."""

    save_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("STORMIDLE_HOME", Path.home() / ".stormidle"))
    )
    save_file_name: str = "stormidle_save.json"
    log_file_name: str = "stormidle.log"

    @property
    def save_file(self) -> Path:
        return self.save_dir / self.save_file_name

    @property
    def log_file(self) -> Path:
        return self.save_dir / self.log_file_name


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    economy: EconomyBalance = field(default_factory=EconomyBalance)
    offline: OfflineBalance = field(default_factory=OfflineBalance)
    persistence: PersistenceBalance = field(default_factory=PersistenceBalance)

    # Game loop ticks per second
    tick_rate_hz: float = 30.0
    # Auto-save every N seconds
    autosave_interval_s: float = 30.0


# Singleton — import this everywhere
BALANCE = GameBalance()
