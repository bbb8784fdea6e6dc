"""Entry point for Storm Idle."""

import logging

from stormidle.app import StormIdleApp
from stormidle.data.balance import BALANCE


def main() -> None:
    # The TUI owns the terminal, so logs go to a file beside the save
    log_file = BALANCE.persistence.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.FileHandler(log_file, mode="a", encoding="utf-8")],
    )

    app = StormIdleApp()
    app.run()


if __name__ == "__main__":
    main()
