"""Upgrade definitions — every purchasable tier, grouped by tree."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class UpgradeEffect(Enum):
    """What an upgrade modifies."""

    FALL_SPEED = auto()         # Add value to fall speed
    DROPS_TO_FILL = auto()      # Set drops needed per bowl conversion
    AUTO_RAIN = auto()          # Add value to drops generated per second
    CONVERSION_YIELD = auto()   # Set currency earned per bowl conversion
    CONDENSATION = auto()       # Add value to passive currency per second


# Tree identifiers (also the prefix of saved upgrade ids)
TREE_SPEED = "speed"
TREE_VALUE = "value"
TREE_AUTO = "auto"
TREE_CONVERSION = "conversion"
TREE_CONDENSATION = "condensation"


@dataclass(frozen=True)
class UpgradeDef:
    """Definition of a single tier in an upgrade tree."""

    tree_id: str
    tier: int
    name: str
    description: str
    cost: int
    effect: UpgradeEffect
    # Added or assigned depending on the effect
    value: float

    @property
    def upgrade_id(self) -> str:
        return f"{self.tree_id}_{self.tier}"


def _tree(
    tree_id: str,
    effect: UpgradeEffect,
    rows: list[tuple[str, str, int, float]],
) -> tuple[UpgradeDef, ...]:
    return tuple(
        UpgradeDef(
            tree_id=tree_id,
            tier=i,
            name=name,
            description=description,
            cost=cost,
            effect=effect,
            value=value,
        )
        for i, (name, description, cost, value) in enumerate(rows, start=1)
    )


# ── Rain ─────────────────────────────────────────────────────────

SPEED_TREE = _tree(TREE_SPEED, UpgradeEffect.FALL_SPEED, [
    ("Fall Speed I", "Increases rainfall speed", 1, 50.0),
    ("Fall Speed II", "Increases rainfall speed", 20, 100.0),
    ("Fall Speed III", "Increases rainfall speed", 1_000, 200.0),
    ("Fall Speed IV", "Increases rainfall speed", 100_000, 400.0),
    ("Fall Speed V", "Increases rainfall speed", 1_000_000_000, 800.0),
])

VALUE_TREE = _tree(TREE_VALUE, UpgradeEffect.DROPS_TO_FILL, [
    ("Rain Value I", "Bowl fills with 45 drops", 20, 45),
    ("Rain Value II", "Bowl fills with 40 drops", 200, 40),
    ("Rain Value III", "Bowl fills with 35 drops", 20_000, 35),
    ("Rain Value IV", "Bowl fills with 25 drops", 2_000_000, 25),
    ("Rain Value V", "Bowl fills with 10 drops", 2_000_000_000, 10),
])

# ── Auto ─────────────────────────────────────────────────────────

AUTO_TREE = _tree(TREE_AUTO, UpgradeEffect.AUTO_RAIN, [
    ("Rain Generation I", "Cloud auto generates 1 drop every 2 seconds", 5, 0.5),
    ("Rain Generation II", "Adds 1 drop per second", 50, 1.0),
    ("Rain Generation III", "Adds 2 drops per second", 1_000, 2.0),
    ("Rain Generation IV", "Adds 5 drops per second", 100_000, 5.0),
    ("Rain Generation V", "Adds 10 drops per second", 1_000_000_000, 10.0),
])

# ── Econ ─────────────────────────────────────────────────────────

CONVERSION_TREE = _tree(TREE_CONVERSION, UpgradeEffect.CONVERSION_YIELD, [
    ("Silver Lining I", "Bowl conversions yield 2 currency", 30, 2),
    ("Silver Lining II", "Bowl conversions yield 5 currency", 300, 5),
    ("Silver Lining III", "Bowl conversions yield 10 currency", 3_000, 10),
    ("Silver Lining IV", "Bowl conversions yield 100 currency", 300_000, 100),
    ("Silver Lining V", "Bowl conversions yield 1000 currency", 30_000_000, 1000),
])

CONDENSATION_TREE = _tree(TREE_CONDENSATION, UpgradeEffect.CONDENSATION, [
    ("Condensation I", "Generate 1 currency every 5 seconds", 50, 0.2),
    ("Condensation II", "Adds 1 currency every 2 seconds", 200, 0.5),
    ("Condensation III", "Adds 1 currency per second", 1_000, 1.0),
    ("Condensation IV", "Adds 10 currency per second", 10_000, 10.0),
    ("Condensation V", "Adds 20 currency per second", 1_000_000, 20.0),
])

# ── All trees registry ──────────────────────────────────────────

ALL_TREES: dict[str, tuple[UpgradeDef, ...]] = {
    TREE_SPEED: SPEED_TREE,
    TREE_VALUE: VALUE_TREE,
    TREE_AUTO: AUTO_TREE,
    TREE_CONVERSION: CONVERSION_TREE,
    TREE_CONDENSATION: CONDENSATION_TREE,
}

TREE_TITLES: dict[str, str] = {
    TREE_SPEED: "Rainfall Speed",
    TREE_VALUE: "Bowl Capacity",
    TREE_AUTO: "Auto Rain",
    TREE_CONVERSION: "Conversion",
    TREE_CONDENSATION: "Condensation",
}
