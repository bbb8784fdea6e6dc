"""Storm Idle — Main Textual Application.

A thin view over the engine Session: it reads state each tick and
forwards key presses to collection and purchase.
"""

from __future__ import annotations

import time
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.timer import Timer
from textual.widgets import Footer, Header

from stormidle.data.balance import BALANCE
from stormidle.engine.economy import format_duration, format_number
from stormidle.engine.session import Session
from stormidle.ui.hud import HUD
from stormidle.ui.upgrade_panel import UpgradePanel


class StormIdleApp(App):
    """The Storm Idle TUI game application."""

    TITLE = "Storm Idle"
    SUB_TITLE = "Catch the rain. Fill the bowl."

    BINDINGS = [
        Binding("space", "catch_rain", "Catch Rain", show=True, priority=True),
        Binding("1", "buy_tree_1", "Buy #1", show=False),
        Binding("2", "buy_tree_2", "Buy #2", show=False),
        Binding("3", "buy_tree_3", "Buy #3", show=False),
        Binding("4", "buy_tree_4", "Buy #4", show=False),
        Binding("5", "buy_tree_5", "Buy #5", show=False),
        Binding("p", "prestige", "Prestige", show=True),
        Binding("q", "quit_game", "Quit", show=True),
    ]

    def __init__(self, save_path: Path | None = None) -> None:
        super().__init__()
        self._session = Session(save_path=save_path)
        self._last_tick: float = time.time()
        self._last_autosave: float = time.time()
        self._tick_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="game-container"):
            yield HUD(id="hud-panel")
            yield UpgradePanel(id="upgrade-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Load the save, report offline earnings, and start the game loop."""
        result = self._session.load()
        if result.has_progress:
            self.notify(
                f"Welcome back! Away {format_duration(result.seconds_away)}: "
                f"+{format_number(result.earned_from_conversion)} from rain, "
                f"+{format_number(result.earned_from_passive)} from condensation",
                severity="information", timeout=6,
            )

        interval = 1.0 / BALANCE.tick_rate_hz
        self._tick_timer = self.set_interval(interval, self._game_tick)
        self._last_tick = time.time()
        self._sync_ui()

    def _game_tick(self) -> None:
        """Main game loop — called BALANCE.tick_rate_hz times per second."""
        now = time.time()
        dt = now - self._last_tick
        self._last_tick = now

        self._session.tick(dt)

        # Periodic auto-save
        if now - self._last_autosave >= BALANCE.autosave_interval_s:
            if not self._session.save():
                self.notify("Auto-save failed", severity="error", timeout=2)
            self._last_autosave = now

        self._sync_ui()

    def _sync_ui(self) -> None:
        """Push game state to all UI widgets."""
        hud = self.query_one("#hud-panel", HUD)
        hud.update_from_state(self._session.state)

        panel = self.query_one("#upgrade-panel", UpgradePanel)
        panel.update_from_state(self._session.state, self._session.upgrades)

    # ── Actions ──────────────────────────────────────

    def action_catch_rain(self) -> None:
        if self._session.collect_drop():
            self.notify(
                f"Bowl full! +{format_number(self._session.currency_earned)}",
                severity="information", timeout=1,
            )
        self._sync_ui()

    def _buy(self, position: int) -> None:
        """Buy the next tier of the tree at display position (0-based)."""
        trees = self._session.upgrades.all_trees()
        if position >= len(trees):
            return

        tree = trees[position]
        tier = tree.next_tier()
        if tier is None:
            self.notify(f"{tree.title} is maxed.", severity="information", timeout=1)
        elif self._session.buy_next(tree):
            self.notify(f"Purchased {tier.name}!", severity="information", timeout=1)
        else:
            self.notify("Can't afford that upgrade.", severity="error", timeout=1)
        self._sync_ui()

    def action_buy_tree_1(self) -> None:
        self._buy(0)

    def action_buy_tree_2(self) -> None:
        self._buy(1)

    def action_buy_tree_3(self) -> None:
        self._buy(2)

    def action_buy_tree_4(self) -> None:
        self._buy(3)

    def action_buy_tree_5(self) -> None:
        self._buy(4)

    def action_prestige(self) -> None:
        """Wipe all progress and start over."""
        self._session.prestige()
        self._sync_ui()
        self.notify("The storm begins anew.", severity="warning", timeout=3)

    def action_quit_game(self) -> None:
        """Save and quit."""
        self._session.save()
        self.exit()
