"""Upgrade panel — next tier of every tree, with cost and affordability."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from stormidle.engine.economy import can_purchase, format_number
from stormidle.engine.game_state import GameState
from stormidle.engine.upgrades import UpgradeManager


class UpgradePanel(Widget):
    """Lists each tree's next tier. Keys 1-5 buy in display order."""

    DEFAULT_CSS = """
    UpgradePanel {
        width: 100%;
        height: 100%;
        padding: 1;
        overflow-y: auto;
    }
    """

    # Serialized panel data for reactivity
    summary: reactive[str] = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state: GameState | None = None
        self._upgrades: UpgradeManager | None = None

    def render(self) -> Text:
        text = Text()
        text.append("  ═══ Upgrades ═══\n\n", style="bold magenta")

        if self._state is None or self._upgrades is None:
            return text

        for i, tree in enumerate(self._upgrades.all_trees()):
            owned = sum(1 for t in tree if t.purchased)
            text.append(f"  [{i + 1}] ", style="bold")
            text.append(f"{tree.title} ", style="bold")
            text.append(f"{owned}/{len(tree)}\n", style="dim")

            index = tree.next_index()
            if index is None:
                text.append("      MAX\n\n", style="bold green")
                continue

            tier = tree[index]
            affordable = can_purchase(tree, index, self._state)
            name_style = "bold green" if affordable else "bold red"
            text.append(f"      {tier.name}\n", style=name_style)
            text.append(f"      {tier.description}\n", style="dim italic")
            cost_style = "green" if affordable else "red"
            text.append(f"      Cost: {format_number(tier.cost)}\n\n", style=cost_style)

        return text

    def update_from_state(self, state: GameState, upgrades: UpgradeManager) -> None:
        """Sync panel with game state."""
        self._state = state
        self._upgrades = upgrades
        # Trigger re-render via reactive
        self.summary = "|".join(
            ",".join(t.upgrade_id for t in tree if t.purchased)
            for tree in upgrades.all_trees()
        ) + f"|c:{state.currency}"
