"""HUD widget — currency, bowl fill, and rates."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from stormidle.engine.economy import format_number
from stormidle.engine.game_state import GameState


class HUD(Widget):
    """Heads-up display showing core economy stats."""

    DEFAULT_CSS = """
    HUD {
        width: 100%;
        height: 100%;
        padding: 1;
    }
    """

    currency: reactive[str] = reactive("0")
    drops_collected: reactive[int] = reactive(0)
    drops_to_fill: reactive[int] = reactive(50)
    per_conversion: reactive[str] = reactive("1")
    rain_rate: reactive[str] = reactive("0/s")
    condensation_rate: reactive[str] = reactive("0/s")
    fall_speed: reactive[str] = reactive("300")

    def render(self) -> Text:
        text = Text()
        text.append("  === Storm ===\n\n", style="bold cyan")

        text.append("  Currency: ", style="dim")
        text.append(f"{self.currency}\n", style="bold green")
        text.append("  Per Bowl: ", style="dim")
        text.append(f"{self.per_conversion}\n", style="green")

        text.append("\n")

        # Bowl fill bar
        bar_width = 20
        pct = min(self.drops_collected / max(self.drops_to_fill, 1), 1.0)
        filled = int(pct * bar_width)
        bar = "#" * filled + "." * (bar_width - filled)
        text.append("  Bowl: ", style="dim")
        text.append(f"{self.drops_collected}/{self.drops_to_fill}\n", style="bold cyan")
        text.append(f"  [{bar}]\n", style="cyan")

        text.append("\n")

        text.append("  Auto Rain: ", style="dim")
        text.append(f"{self.rain_rate}\n", style="cyan")
        text.append("  Condensation: ", style="dim")
        text.append(f"{self.condensation_rate}\n", style="green")
        text.append("  Fall Speed: ", style="dim")
        text.append(f"{self.fall_speed}\n", style="cyan")

        text.append("\n")
        text.append("  [Space] Catch Rain  [1-5] Buy\n", style="dim italic")
        text.append("  [P] Prestige  [Q] Quit\n", style="dim italic")

        return text

    def update_from_state(self, state: GameState) -> None:
        """Sync HUD with game state."""
        self.currency = format_number(state.currency)
        self.drops_collected = state.drops_collected
        self.drops_to_fill = state.drops_to_fill
        self.per_conversion = format_number(state.currency_earned)
        self.rain_rate = f"{format_number(state.rps)}/s"
        self.condensation_rate = f"{format_number(state.cps)}/s"
        self.fall_speed = format_number(state.fall_speed)
