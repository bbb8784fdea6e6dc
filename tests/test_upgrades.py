"""Tests for upgrade trees, gating, and the upgrade manager."""

import pytest

from stormidle.data.upgrades import (
    ALL_TREES,
    TREE_AUTO,
    TREE_SPEED,
    UpgradeDef,
    UpgradeEffect,
)
from stormidle.engine.upgrades import UpgradeManager, UpgradeTier, UpgradeTree


def _tier(tree_id: str, tier: int) -> UpgradeDef:
    return UpgradeDef(tree_id, tier, f"T{tier}", "", 1, UpgradeEffect.FALL_SPEED, 1.0)


# ── Content ──────────────────────────────────────────────────────


def test_every_tree_is_numbered_from_one_without_gaps():
    for tree_id, defs in ALL_TREES.items():
        assert [d.tier for d in defs] == list(range(1, len(defs) + 1))
        assert all(d.tree_id == tree_id for d in defs)
        assert all(d.cost >= 0 for d in defs)


def test_upgrade_id_format():
    assert ALL_TREES[TREE_SPEED][0].upgrade_id == "speed_1"
    assert ALL_TREES[TREE_AUTO][2].upgrade_id == "auto_3"


def test_tree_rejects_gap_in_tiers():
    with pytest.raises(ValueError):
        UpgradeTree("speed", [_tier("speed", 1), _tier("speed", 3)])


def test_tree_rejects_foreign_tier():
    with pytest.raises(ValueError):
        UpgradeTree("speed", [_tier("speed", 1), _tier("auto", 2)])


# ── Gating ───────────────────────────────────────────────────────


def test_tier_one_always_unlocked():
    tier = UpgradeTier(_tier("speed", 1))
    assert tier.is_unlocked(None)


def test_later_tier_needs_previous_purchased():
    first = UpgradeTier(_tier("speed", 1))
    second = UpgradeTier(_tier("speed", 2))
    assert not second.is_unlocked(None)
    assert not second.is_unlocked(first)
    first.purchased = True
    assert second.is_unlocked(first)


def test_previous_and_next_tier():
    tree = UpgradeManager().rain.speed_tree
    assert tree.previous(0) is None
    assert tree.previous(2) is tree[1]
    assert tree.next_index() == 0

    tree[0].purchased = True
    tree[1].purchased = True
    assert tree.next_tier() is tree[2]

    for t in tree:
        t.purchased = True
    assert tree.next_index() is None
    assert tree.next_tier() is None


# ── Manager ──────────────────────────────────────────────────────


def test_manager_holds_all_five_trees_in_order():
    manager = UpgradeManager()
    ids = [t.tree_id for t in manager.all_trees()]
    assert ids == ["speed", "value", "auto", "conversion", "condensation"]
    assert all(len(t) == 5 for t in manager.all_trees())


def test_manager_lookup_by_id():
    manager = UpgradeManager()
    assert manager.tree("auto") is manager.auto.auto_tree
    assert manager.tier("condensation_2") is manager.econ.condensation_tree[1]
    assert manager.tree("nope") is None
    assert manager.tier("speed_0") is None
    assert manager.tier("speed_6") is None
    assert manager.tier("speed_x") is None
    assert manager.tier("garbage") is None


def test_restore_and_list_purchased():
    manager = UpgradeManager()
    marked = manager.restore_purchased(["speed_1", "speed_1", "value_2", "unknown_1"])
    assert marked == 2
    assert manager.purchased_ids() == ["speed_1", "value_2"]


def test_reset_clears_every_purchase():
    manager = UpgradeManager()
    manager.restore_purchased(["speed_1", "auto_1", "conversion_3"])
    manager.reset()
    assert manager.purchased_ids() == []
