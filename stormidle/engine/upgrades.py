"""Upgrade trees — runtime tiers, tree gating, and the manager that holds them all."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from stormidle.data.upgrades import (
    ALL_TREES,
    TREE_AUTO,
    TREE_CONDENSATION,
    TREE_CONVERSION,
    TREE_SPEED,
    TREE_TITLES,
    TREE_VALUE,
    UpgradeDef,
    UpgradeEffect,
)


@dataclass
class UpgradeTier:
    """A definition plus whether the player owns it."""

    definition: UpgradeDef
    purchased: bool = False

    @property
    def tree_id(self) -> str:
        return self.definition.tree_id

    @property
    def tier(self) -> int:
        return self.definition.tier

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def cost(self) -> int:
        return self.definition.cost

    @property
    def effect(self) -> UpgradeEffect:
        return self.definition.effect

    @property
    def value(self) -> float:
        return self.definition.value

    @property
    def upgrade_id(self) -> str:
        return self.definition.upgrade_id

    def is_unlocked(self, previous: UpgradeTier | None) -> bool:
        """Tier 1 is always open; later tiers need the one before them."""
        if self.tier == 1:
            return True
        return previous is not None and previous.purchased


class UpgradeTree:
    """Linear sequence of tiers, tier 1 first."""

    def __init__(self, tree_id: str, definitions: Iterable[UpgradeDef]) -> None:
        self.tree_id = tree_id
        self.title = TREE_TITLES.get(tree_id, tree_id)
        self.tiers: list[UpgradeTier] = [UpgradeTier(d) for d in definitions]

        for expected, t in enumerate(self.tiers, start=1):
            if t.tree_id != tree_id:
                raise ValueError(f"Tier {t.upgrade_id} does not belong to tree {tree_id!r}")
            if t.tier != expected:
                raise ValueError(
                    f"Tree {tree_id!r} tiers must run 1..n without gaps; "
                    f"found tier {t.tier} at position {expected}"
                )

    def __iter__(self) -> Iterator[UpgradeTier]:
        return iter(self.tiers)

    def __len__(self) -> int:
        return len(self.tiers)

    def __getitem__(self, index: int) -> UpgradeTier:
        return self.tiers[index]

    def __repr__(self) -> str:
        owned = sum(1 for t in self.tiers if t.purchased)
        return f"UpgradeTree({self.tree_id!r}, {owned}/{len(self.tiers)} purchased)"

    def previous(self, index: int) -> UpgradeTier | None:
        """The tier before position ``index``, or None for the first tier."""
        return self.tiers[index - 1] if index > 0 else None

    def next_index(self) -> int | None:
        """Position of the first tier not yet bought, or None when maxed."""
        for i, t in enumerate(self.tiers):
            if not t.purchased:
                return i
        return None

    def next_tier(self) -> UpgradeTier | None:
        index = self.next_index()
        return None if index is None else self.tiers[index]


class RainUpgrades:
    """Trees that change the falling rain and the bowl."""

    def __init__(self) -> None:
        self.speed_tree = UpgradeTree(TREE_SPEED, ALL_TREES[TREE_SPEED])
        self.bowl_tree = UpgradeTree(TREE_VALUE, ALL_TREES[TREE_VALUE])

    def trees(self) -> list[UpgradeTree]:
        return [self.speed_tree, self.bowl_tree]


class AutoUpgrades:
    """Trees that make it rain on its own."""

    def __init__(self) -> None:
        self.auto_tree = UpgradeTree(TREE_AUTO, ALL_TREES[TREE_AUTO])

    def trees(self) -> list[UpgradeTree]:
        return [self.auto_tree]


class EconUpgrades:
    """Trees that change how currency is earned."""

    def __init__(self) -> None:
        self.conversion_tree = UpgradeTree(TREE_CONVERSION, ALL_TREES[TREE_CONVERSION])
        self.condensation_tree = UpgradeTree(TREE_CONDENSATION, ALL_TREES[TREE_CONDENSATION])

    def trees(self) -> list[UpgradeTree]:
        return [self.conversion_tree, self.condensation_tree]


class UpgradeManager:
    """Every upgrade tree in one place.

    Save/load and the UI hold a single manager instead of reaching into
    each category.
    """

    def __init__(self) -> None:
        self.rain = RainUpgrades()
        self.auto = AutoUpgrades()
        self.econ = EconUpgrades()
        self._by_id: dict[str, UpgradeTree] = {t.tree_id: t for t in self.all_trees()}

    def all_trees(self) -> list[UpgradeTree]:
        return self.rain.trees() + self.auto.trees() + self.econ.trees()

    def tree(self, tree_id: str) -> UpgradeTree | None:
        return self._by_id.get(tree_id)

    def tier(self, upgrade_id: str) -> UpgradeTier | None:
        """Look up a tier by its ``"<tree>_<tier>"`` id."""
        tree_id, _, number = upgrade_id.rpartition("_")
        tree = self._by_id.get(tree_id)
        if tree is None or not number.isdigit():
            return None
        index = int(number) - 1
        if not 0 <= index < len(tree):
            return None
        return tree[index]

    def purchased_ids(self) -> list[str]:
        return [t.upgrade_id for tree in self.all_trees() for t in tree if t.purchased]

    def restore_purchased(self, upgrade_ids: Iterable[str]) -> int:
        """Mark every tier whose id is listed as purchased.

        Effects are not applied.  Unknown ids and duplicates are ignored.
        Returns how many tiers were marked.
        """
        wanted = set(upgrade_ids)
        marked = 0
        for tree in self.all_trees():
            for t in tree:
                if t.upgrade_id in wanted:
                    t.purchased = True
                    marked += 1
        return marked

    def reset(self) -> None:
        """Clear every purchase (prestige)."""
        for tree in self.all_trees():
            for t in tree:
                t.purchased = False
