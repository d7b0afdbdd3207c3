from datetime import date
from typing import Any

import pytest
from sqlalchemy import text

from goalplanner.bridge.ipc import Bridge
from goalplanner.client.goals_api import GoalsApi
from goalplanner.client.goals_store import GoalsStore
from goalplanner.core.errors import NotInitializedError, ValidationError
from goalplanner.db.session import Store

TODAY = date(2025, 2, 3)


@pytest.fixture()
def goals(bridge: Bridge) -> GoalsStore:
    return GoalsStore(GoalsApi(bridge), today=lambda: TODAY)


class _BrokenApi(GoalsApi):
    def __init__(self) -> None:
        super().__init__(Bridge())

    def _invoke(self, name: str, *args: Any) -> Any:
        raise RuntimeError(f"{name} unavailable")


def _seed_project(goals: GoalsStore) -> dict:
    return goals.add_project({"title": "Run a marathon", "year": 2025, "quarter": 1})


def test_initial_context_comes_from_today(goals: GoalsStore) -> None:
    assert (goals.current_year, goals.current_quarter, goals.current_week) == (2025, 1, 1)
    assert goals.current_cycle is None
    assert goals.confirm_delete is True


def test_add_project_prepends(goals: GoalsStore) -> None:
    first = _seed_project(goals)
    second = goals.add_project({"title": "Learn Go", "year": 2025, "quarter": 1})
    assert [p["id"] for p in goals.projects] == [second["id"], first["id"]]


def test_fetch_projects_replaces_cache(goals: GoalsStore, bridge: Bridge) -> None:
    goals.projects = [{"id": -1, "title": "stale"}]
    bridge.invoke("goals:createProject", {"title": "Fresh", "year": 2025, "quarter": 1})
    bridge.invoke("goals:createProject", {"title": "Elsewhere", "year": 2025, "quarter": 3})

    goals.fetch_projects()

    assert [p["title"] for p in goals.projects] == ["Fresh"]


def test_update_project_merges_sent_fields(goals: GoalsStore) -> None:
    project = _seed_project(goals)
    assert goals.update_project({"id": project["id"], "note": "on track"}) is True
    assert goals.projects[0]["note"] == "on track"
    assert goals.projects[0]["title"] == "Run a marathon"


def test_remove_project_drops_children(goals: GoalsStore) -> None:
    project = _seed_project(goals)
    pid = project["id"]
    goals.add_action({"project_id": pid, "week_number": 1, "content": "5k"})
    goals.add_monthly_plan({"project_id": pid, "month": 1, "content": "base", "is_primary": True})

    assert goals.remove_project(pid) is True
    assert goals.projects == []
    assert pid not in goals.actions
    assert pid not in goals.monthly_plans


def test_action_write_through(goals: GoalsStore, bridge: Bridge) -> None:
    pid = _seed_project(goals)["id"]
    action = goals.add_action({"project_id": pid, "week_number": 1, "content": "5k"})
    other = goals.add_action({"project_id": pid, "week_number": 1, "content": "10k", "priority": "high"})

    goals.toggle_action(action["id"], True, pid)
    goals.update_action({"id": other["id"], "content": "12k", "priority": "medium"}, pid)
    goals.delete_action(action["id"], pid)

    assert goals.actions[pid] == bridge.invoke("goals:getAllActions", pid)
    assert goals.actions[pid][0]["content"] == "12k"
    assert goals.actions[pid][0]["priority"] == "medium"


def test_fetch_actions_uses_current_week(goals: GoalsStore) -> None:
    pid = _seed_project(goals)["id"]
    goals.add_action({"project_id": pid, "week_number": 1, "content": "week one"})
    goals.add_action({"project_id": pid, "week_number": 2, "content": "week two"})

    goals.current_week = 2
    goals.fetch_actions(pid)
    assert [a["content"] for a in goals.actions[pid]] == ["week two"]

    goals.fetch_all_actions(pid)
    assert [a["content"] for a in goals.actions[pid]] == ["week one", "week two"]


def test_monthly_plan_write_through(goals: GoalsStore, bridge: Bridge) -> None:
    pid = _seed_project(goals)["id"]
    jan = goals.add_monthly_plan({"project_id": pid, "month": 1, "content": "base", "is_primary": False})
    feb = goals.add_monthly_plan({"project_id": pid, "month": 2, "content": "build", "is_primary": False})

    goals.toggle_monthly_plan_primary(jan["id"], True, pid)
    goals.delete_monthly_plan(feb["id"], pid)

    assert goals.monthly_plans[pid] == bridge.invoke("goals:getMonthlyPlans", pid)
    assert goals.monthly_plans[pid][0]["is_primary"] is True


def test_failed_write_leaves_cache_untouched(goals: GoalsStore) -> None:
    pid = _seed_project(goals)["id"]
    with pytest.raises(ValidationError):
        goals.add_action({"project_id": pid, "week_number": 0, "content": "bad week"})
    assert pid not in goals.actions


def test_fetch_failures_are_swallowed() -> None:
    goals = GoalsStore(_BrokenApi(), today=lambda: TODAY)
    goals.actions[7] = [{"id": 1}]

    goals.fetch_projects()
    goals.fetch_actions(7)
    goals.fetch_all_actions(7)
    goals.fetch_monthly_plans(7)
    goals.fetch_current_cycle()

    assert goals.projects == []
    assert goals.actions[7] == [{"id": 1}]
    assert goals.monthly_plans == {}
    assert goals.current_cycle is None


def test_writes_fail_loudly_without_api() -> None:
    goals = GoalsStore(None, today=lambda: TODAY)
    goals.fetch_projects()
    with pytest.raises(NotInitializedError):
        goals.add_project({"title": "x", "year": 2025, "quarter": 1})
    with pytest.raises(RuntimeError):
        GoalsStore(_BrokenApi(), today=lambda: TODAY).create_cycle(
            {"title": "x", "start_date": "2025-01-06", "end_date": "2025-03-30"}
        )


def test_create_cycle_moves_context_and_reloads_projects(goals: GoalsStore, bridge: Bridge) -> None:
    bridge.invoke("goals:createProject", {"title": "Last year", "year": 2024, "quarter": 4})

    cycle = goals.create_cycle({"title": "Winter", "start_date": "2024-12-02", "end_date": "2025-02-23"})

    assert goals.current_cycle == cycle
    assert (goals.current_year, goals.current_quarter, goals.current_week) == (2024, 4, 10)
    assert [p["title"] for p in goals.projects] == ["Last year"]


def test_fetch_current_cycle_derives_week(goals: GoalsStore, bridge: Bridge) -> None:
    bridge.invoke("goals:createCycle", {"title": "Q1", "start_date": "2025-01-06", "end_date": "2025-03-30"})

    goals.fetch_current_cycle()

    assert goals.current_cycle["title"] == "Q1"
    assert (goals.current_year, goals.current_quarter, goals.current_week) == (2025, 1, 5)


def test_week_cap_is_configurable(bridge: Bridge) -> None:
    bridge.invoke("goals:createCycle", {"title": "Old", "start_date": "2024-01-01", "end_date": "2024-03-24"})

    capped = GoalsStore(GoalsApi(bridge), today=lambda: TODAY, max_week=12)
    capped.fetch_current_cycle()
    uncapped = GoalsStore(GoalsApi(bridge), today=lambda: TODAY)
    uncapped.fetch_current_cycle()

    assert capped.current_week == 12
    assert uncapped.current_week > 12


def test_update_cycle_merges_only_current(goals: GoalsStore) -> None:
    current = goals.create_cycle({"title": "Q1", "start_date": "2025-01-06", "end_date": "2025-03-30"})

    updated = goals.update_cycle(
        {"id": current["id"], "title": "Q1 (moved)", "start_date": "2025-01-13", "end_date": "2025-04-06"}
    )

    assert updated["title"] == "Q1 (moved)"
    assert goals.current_cycle["title"] == "Q1 (moved)"
    assert goals.current_cycle["is_active"] is True
    assert goals.current_week == 4


def test_fetch_current_cycle_survives_unreadable_start_date(goals: GoalsStore, store: Store) -> None:
    with store.engine.begin() as conn:
        conn.execute(
            text(
                "INSERT INTO cycles (title, start_date, end_date, is_active) "
                "VALUES ('legacy', 'soon', '2025-03-30', 1)"
            )
        )

    goals.fetch_current_cycle()

    assert goals.current_cycle is None
    assert (goals.current_year, goals.current_quarter, goals.current_week) == (2025, 1, 1)


def test_cache_keys_use_stored_project_id(goals: GoalsStore) -> None:
    pid = _seed_project(goals)["id"]

    goals.add_action({"project_id": str(pid), "week_number": 1, "content": "5k"})
    goals.add_monthly_plan({"project_id": str(pid), "month": 1, "content": "base", "is_primary": False})

    assert list(goals.actions) == [pid]
    assert list(goals.monthly_plans) == [pid]


def test_week_view_drops_actions_moved_to_another_week(goals: GoalsStore, bridge: Bridge) -> None:
    pid = _seed_project(goals)["id"]
    stays = goals.add_action({"project_id": pid, "week_number": 1, "content": "stays"})
    moves = goals.add_action({"project_id": pid, "week_number": 1, "content": "moves"})
    goals.fetch_actions(pid)

    goals.update_action({"id": moves["id"], "week_number": 3}, pid)
    goals.add_action({"project_id": pid, "week_number": 2, "content": "later"})

    assert [a["id"] for a in goals.actions[pid]] == [stays["id"]]
    assert goals.actions[pid] == bridge.invoke("goals:getActions", pid, 1)


def test_all_weeks_view_keeps_moved_actions(goals: GoalsStore) -> None:
    pid = _seed_project(goals)["id"]
    action = goals.add_action({"project_id": pid, "week_number": 1, "content": "moves"})
    goals.fetch_all_actions(pid)

    goals.update_action({"id": action["id"], "week_number": 3}, pid)

    assert goals.actions[pid][0]["week_number"] == 3
