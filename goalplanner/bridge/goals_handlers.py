from __future__ import annotations

from functools import partial, wraps
from typing import Any

from loguru import logger

from goalplanner.bridge.ipc import Bridge, HandlerFn
from goalplanner.core.errors import ValidationError
from goalplanner.core.payloads import (
    ActionPatch,
    CreateAction,
    CreateCycle,
    CreateMonthlyPlan,
    CreateProject,
    CyclePatch,
    ProjectPatch,
    parse_flag,
    parse_int,
)
from goalplanner.db.models import action_to_dict, cycle_to_dict, monthly_plan_to_dict, project_to_dict
from goalplanner.db.repositories import actions_repo, cycles_repo, monthly_plans_repo, projects_repo
from goalplanner.db.session import Store


def get_projects(store: Store, year: Any, quarter: Any) -> list[dict[str, Any]]:
    year_n = parse_int(year, "year")
    quarter_n = parse_int(quarter, "quarter")
    with store.session() as session:
        rows = projects_repo.list_projects(session, year=year_n, quarter=quarter_n)
        return [project_to_dict(p) for p in rows]


def create_project(store: Store, data: Any) -> dict[str, Any]:
    payload = CreateProject.from_dict(data)
    with store.session() as session:
        project = projects_repo.create_project(session, payload)
        logger.info("project created id={}", project.id)
        return project_to_dict(project)


def update_project(store: Store, data: Any) -> bool:
    patch = ProjectPatch.from_dict(data)
    with store.session() as session:
        return projects_repo.update_project(session, patch)


def delete_project(store: Store, project_id: Any) -> bool:
    pid = parse_int(project_id, "project_id")
    with store.session() as session:
        return projects_repo.delete_project(session, pid)


def get_actions(store: Store, project_id: Any, week_number: Any) -> list[dict[str, Any]]:
    pid = parse_int(project_id, "project_id")
    week = parse_int(week_number, "week_number")
    with store.session() as session:
        rows = actions_repo.list_week_actions(session, project_id=pid, week_number=week)
        return [action_to_dict(a) for a in rows]


def get_all_actions(store: Store, project_id: Any) -> list[dict[str, Any]]:
    pid = parse_int(project_id, "project_id")
    with store.session() as session:
        return [action_to_dict(a) for a in actions_repo.list_all_actions(session, project_id=pid)]


def create_action(store: Store, data: Any) -> dict[str, Any]:
    payload = CreateAction.from_dict(data)
    with store.session() as session:
        return action_to_dict(actions_repo.create_action(session, payload))


def update_action(store: Store, data: Any) -> bool:
    patch = ActionPatch.from_dict(data)
    with store.session() as session:
        return actions_repo.update_action(session, patch)


def toggle_action(store: Store, action_id: Any, is_completed: Any) -> bool:
    aid = parse_int(action_id, "action_id")
    done = parse_flag(is_completed, "is_completed")
    with store.session() as session:
        return actions_repo.set_action_completed(session, aid, done)


def delete_action(store: Store, action_id: Any) -> bool:
    aid = parse_int(action_id, "action_id")
    with store.session() as session:
        return actions_repo.delete_action(session, aid)


def get_monthly_plans(store: Store, project_id: Any) -> list[dict[str, Any]]:
    pid = parse_int(project_id, "project_id")
    with store.session() as session:
        return [monthly_plan_to_dict(p) for p in monthly_plans_repo.list_monthly_plans(session, project_id=pid)]


def create_monthly_plan(store: Store, data: Any) -> dict[str, Any]:
    payload = CreateMonthlyPlan.from_dict(data)
    with store.session() as session:
        return monthly_plan_to_dict(monthly_plans_repo.create_monthly_plan(session, payload))


def delete_monthly_plan(store: Store, plan_id: Any) -> bool:
    plan = parse_int(plan_id, "plan_id")
    with store.session() as session:
        return monthly_plans_repo.delete_monthly_plan(session, plan)


def toggle_monthly_plan_primary(store: Store, plan_id: Any, is_primary: Any) -> bool:
    plan = parse_int(plan_id, "plan_id")
    primary = parse_flag(is_primary, "is_primary")
    with store.session() as session:
        return monthly_plans_repo.set_primary(session, plan, primary)


def get_current_cycle(store: Store) -> dict[str, Any] | None:
    with store.session() as session:
        cycle = cycles_repo.get_current_cycle(session)
        return cycle_to_dict(cycle) if cycle is not None else None


def create_cycle(store: Store, data: Any) -> dict[str, Any]:
    payload = CreateCycle.from_dict(data)
    with store.transaction() as session:
        cycle = cycles_repo.create_cycle(session, payload)
        logger.info("cycle created id={} start={} end={}", cycle.id, cycle.start_date, cycle.end_date)
        return cycle_to_dict(cycle)


def update_cycle(store: Store, data: Any) -> dict[str, Any]:
    patch = CyclePatch.from_dict(data)
    with store.transaction() as session:
        return cycle_to_dict(cycles_repo.update_cycle(session, patch))


GOALS_HANDLERS: dict[str, HandlerFn] = {
    "goals:getProjects": get_projects,
    "goals:createProject": create_project,
    "goals:updateProject": update_project,
    "goals:deleteProject": delete_project,
    "goals:getActions": get_actions,
    "goals:getAllActions": get_all_actions,
    "goals:createAction": create_action,
    "goals:updateAction": update_action,
    "goals:toggleAction": toggle_action,
    "goals:deleteAction": delete_action,
    "goals:getMonthlyPlans": get_monthly_plans,
    "goals:createMonthlyPlan": create_monthly_plan,
    "goals:deleteMonthlyPlan": delete_monthly_plan,
    "goals:toggleMonthlyPlanPrimary": toggle_monthly_plan_primary,
    "goals:getCurrentCycle": get_current_cycle,
    "goals:createCycle": create_cycle,
    "goals:updateCycle": update_cycle,
}


def _logged(channel: str, fn: HandlerFn) -> HandlerFn:
    @wraps(fn)
    def wrapped(*args: Any) -> Any:
        try:
            return fn(*args)
        except ValidationError as exc:
            logger.warning("{} rejected field={} err={}", channel, exc.field, exc)
            raise
        except Exception as exc:
            logger.error("{} failed err={}", channel, exc)
            raise

    return wrapped


def setup_goals_handlers(bridge: Bridge, store: Store) -> None:
    for channel, fn in GOALS_HANDLERS.items():
        bridge.handle(channel, _logged(channel, partial(fn, store)))
