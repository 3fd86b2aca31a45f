"""
Programmatic Alembic migration runner.

Runs migrations without an alembic.ini by pointing Alembic at this package's
migrations directory and the URL from clubs_api.db.config.

Usage examples:
    python -m clubs_api.db.run_migrations upgrade head
    python -m clubs_api.db.run_migrations downgrade -1
    python -m clubs_api.db.run_migrations current
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List

from alembic import command
from alembic.config import Config

from clubs_api.db.config import get_settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


# PUBLIC_INTERFACE
def build_config() -> Config:
    """Return an Alembic Config bound to the packaged migrations and configured database."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # env.py swaps in the async URL for online runs
    cfg.set_main_option("sqlalchemy.url", get_settings().sync_database_url)
    return cfg


_COMMANDS: Dict[str, Callable[[Config, List[str]], None]] = {
    "upgrade": lambda cfg, rest: command.upgrade(cfg, *(rest or ["head"])),
    "downgrade": lambda cfg, rest: command.downgrade(cfg, *(rest or ["-1"])),
    "current": lambda cfg, rest: command.current(cfg, *rest),
    "history": lambda cfg, rest: command.history(cfg, *rest),
    "heads": lambda cfg, rest: command.heads(cfg, *rest),
    "stamp": lambda cfg, rest: command.stamp(cfg, *(rest or ["head"])),
}


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """Run an Alembic command, e.g. main(["upgrade", "head"])."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    name, rest = args[0], args[1:]
    handler = _COMMANDS.get(name)
    if handler is None:
        print(f"Unsupported Alembic command: {name}. Choose from: {', '.join(sorted(_COMMANDS))}")
        sys.exit(2)

    logger.info("alembic %s %s", name, " ".join(rest))
    handler(build_config(), rest)


if __name__ == "__main__":
    main()
