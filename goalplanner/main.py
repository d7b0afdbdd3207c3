from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from dotenv import find_dotenv, load_dotenv
from loguru import logger

from goalplanner.bridge.goals_handlers import setup_goals_handlers
from goalplanner.bridge.ipc import Bridge
from goalplanner.client.goals_api import GoalsApi
from goalplanner.client.goals_store import GoalsStore
from goalplanner.db.schema import ensure_schema
from goalplanner.db.session import Store, open_store
from goalplanner.logging_setup import setup_logging

if TYPE_CHECKING:
    from goalplanner.config import Settings


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if not env_path:
        candidate = Path(__file__).resolve().parents[1] / ".env"
        if candidate.exists():
            env_path = str(candidate)
    if env_path:
        logger.info("Loaded .env from {}", env_path)
        load_dotenv(env_path, override=True)
    else:
        logger.warning("No .env found")


@dataclass
class PlannerApp:
    store: Store
    bridge: Bridge
    goals: GoalsStore

    def close(self) -> None:
        self.store.close()


def create_app(config: Settings, *, today: Callable[[], date] = date.today) -> PlannerApp:
    store = open_store(config.sqlite_path, echo=config.sqlite_echo)
    ensure_schema(store)
    bridge = Bridge()
    setup_goals_handlers(bridge, store)
    goals = GoalsStore(GoalsApi(bridge), today=today, max_week=config.cycle_max_week)
    return PlannerApp(store=store, bridge=bridge, goals=goals)


def main() -> None:
    _load_env()

    from goalplanner.config import settings

    setup_logging(settings)

    try:
        app = create_app(settings)
    except Exception as exc:
        logger.error("Database FATAL: cannot open {} ({})", settings.sqlite_path, exc)
        sys.exit(1)

    try:
        app.goals.fetch_current_cycle()
        app.goals.fetch_projects()
        logger.info(
            "Planner ready: year={} quarter={} week={} projects={}",
            app.goals.current_year,
            app.goals.current_quarter,
            app.goals.current_week,
            len(app.goals.projects),
        )
    finally:
        app.close()


if __name__ == "__main__":
    main()
