"""Entry points for the pizzeria console app and HTTP API."""

from __future__ import annotations

from pizzeria import config
from pizzeria.api import run as run_api
from pizzeria.log import configure_logging
from pizzeria.pizzeria_app import PizzeriaApp


def main() -> None:
    """Run the Textual application; logs go to a file since the UI owns the terminal."""
    configure_logging(config.LOG_FILE)
    PizzeriaApp().run()


def api_main() -> None:
    run_api()


if __name__ == "__main__":
    main()
