"""Session — the one object a host needs to drive the game.

Bundles a GameState, an UpgradeManager, and the save location, and is
the call site that keeps save/load from overlapping or running twice.
"""

from __future__ import annotations

import logging
from pathlib import Path

from stormidle.engine import economy, save
from stormidle.engine.economy import TickResult
from stormidle.engine.game_state import GameState
from stormidle.engine.save import OfflineResult
from stormidle.engine.upgrades import UpgradeManager, UpgradeTree

logger = logging.getLogger(__name__)


class Session:
    """Live game session (single-threaded)."""

    def __init__(
        self,
        state: GameState | None = None,
        upgrades: UpgradeManager | None = None,
        save_path: Path | None = None,
    ) -> None:
        self.state = state if state is not None else GameState()
        self.upgrades = upgrades if upgrades is not None else UpgradeManager()
        self.save_path = save_path
        self._loaded = False
        self._io_busy = False

    # ── Read accessors ───────────────────────────────────

    @property
    def currency(self) -> int:
        return self.state.currency

    @property
    def fall_speed(self) -> float:
        return self.state.fall_speed

    @property
    def drops_to_fill(self) -> int:
        return self.state.drops_to_fill

    @property
    def drops_collected(self) -> int:
        return self.state.drops_collected

    @property
    def rps(self) -> float:
        return self.state.rps

    @property
    def cps(self) -> float:
        return self.state.cps

    @property
    def currency_earned(self) -> int:
        return self.state.currency_earned

    # ── Gameplay ─────────────────────────────────────────

    def tick(self, dt: float) -> TickResult:
        return economy.tick(self.state, dt)

    def collect_drop(self) -> bool:
        return economy.collect_drop(self.state)

    def _resolve_tree(self, tree: UpgradeTree | str) -> UpgradeTree | None:
        if isinstance(tree, UpgradeTree):
            return tree
        return self.upgrades.tree(tree)

    def try_purchase(self, tree: UpgradeTree | str, index: int) -> bool:
        """Buy the tier at ``index`` (0-based) in a tree or tree id."""
        resolved = self._resolve_tree(tree)
        if resolved is None:
            logger.debug("Ignoring purchase in unknown tree %r", tree)
            return False
        bought = economy.try_purchase(resolved, index, self.state)
        if self.state.clamp():
            logger.error("State was inconsistent after purchasing %s[%d]", resolved.tree_id, index)
        return bought

    def buy_next(self, tree: UpgradeTree | str) -> bool:
        """Buy the next unowned tier of a tree."""
        resolved = self._resolve_tree(tree)
        if resolved is None:
            return False
        index = resolved.next_index()
        if index is None:
            return False
        return self.try_purchase(resolved, index)

    # ── Persistence ──────────────────────────────────────

    def save(self, now: float | None = None) -> bool:
        if self._io_busy:
            logger.warning("Save requested while another save/load is running; skipped")
            return False
        self._io_busy = True
        try:
            return save.save_game(self.state, self.upgrades, self.save_path, now=now)
        finally:
            self._io_busy = False

    def load(self, now: float | None = None) -> OfflineResult:
        """Load once per session. Repeat calls do nothing."""
        if self._loaded:
            logger.warning("Session already loaded; ignoring repeat load")
            return OfflineResult.none()
        if self._io_busy:
            logger.warning("Load requested while another save/load is running; skipped")
            return OfflineResult.none()
        self._io_busy = True
        try:
            result = save.load_game(self.state, self.upgrades, self.save_path, now=now)
        finally:
            self._io_busy = False
        self._loaded = True
        return result

    def delete_save(self) -> bool:
        return save.delete_save(self.save_path)

    def prestige(self) -> bool:
        """Full reset: delete the save, clear purchases, and start a fresh state."""
        deleted = self.delete_save()
        self.upgrades.reset()
        self.state = GameState()
        return deleted
