"""In-memory mirror of the planner data used by the UI.

Write methods call the API first and only touch local state after the call
returned, so a failed write leaves the cache as it was and the error reaches
the caller. Fetch methods replace the cached collection for their key and
swallow errors (after logging) so the UI can still render an empty or stale
view.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable

from loguru import logger

from goalplanner.client.goals_api import GoalsApi
from goalplanner.core.cycle_resolver import cycle_context, quarter_of
from goalplanner.core.errors import NotInitializedError
from goalplanner.core.payloads import ActionPatch, ProjectPatch


class GoalsStore:
    def __init__(
        self,
        api: GoalsApi | None,
        *,
        today: Callable[[], date] = date.today,
        max_week: int | None = None,
    ) -> None:
        self._api = api
        self._today = today
        self._max_week = max_week

        now = today()
        self.current_year: int = now.year
        self.current_quarter: int = quarter_of(now)
        self.current_week: int = 1
        self.current_cycle: dict[str, Any] | None = None

        self.projects: list[dict[str, Any]] = []
        self.actions: dict[int, list[dict[str, Any]]] = {}
        self.monthly_plans: dict[int, list[dict[str, Any]]] = {}
        # Week each cached action list was fetched for; None when it holds every week.
        self._action_weeks: dict[int, int | None] = {}
        self.confirm_delete: bool = True

    def _get_api(self) -> GoalsApi:
        if self._api is None:
            raise NotInitializedError("API not initialized. Please restart the application.")
        return self._api

    # projects

    def fetch_projects(self) -> None:
        try:
            self.projects = self._get_api().get_projects(self.current_year, self.current_quarter)
        except Exception as exc:
            logger.error("Failed to fetch projects: {}", exc)

    def add_project(self, data: dict[str, Any]) -> dict[str, Any]:
        project = self._get_api().create_project(data)
        self.projects.insert(0, project)
        return project

    def update_project(self, data: dict[str, Any]) -> bool:
        updated = self._get_api().update_project(data)
        patch = ProjectPatch.from_dict(data)
        for project in self.projects:
            if project["id"] == patch.id:
                project.update(patch.changes())
        return updated

    def remove_project(self, project_id: int) -> bool:
        removed = self._get_api().delete_project(project_id)
        self.projects = [p for p in self.projects if p["id"] != project_id]
        self.actions.pop(project_id, None)
        self._action_weeks.pop(project_id, None)
        self.monthly_plans.pop(project_id, None)
        return removed

    # weekly actions

    def fetch_actions(self, project_id: int) -> None:
        """Load only the actions of the current week for ``project_id``."""
        try:
            self.actions[project_id] = self._get_api().get_actions(project_id, self.current_week)
            self._action_weeks[project_id] = self.current_week
        except Exception as exc:
            logger.error("Failed to fetch actions for project {}: {}", project_id, exc)

    def fetch_all_actions(self, project_id: int) -> None:
        try:
            self.actions[project_id] = self._get_api().get_all_actions(project_id)
            self._action_weeks[project_id] = None
        except Exception as exc:
            logger.error("Failed to fetch all actions for project {}: {}", project_id, exc)

    def add_action(self, data: dict[str, Any]) -> dict[str, Any]:
        action = self._get_api().create_action(data)
        if self._in_cached_week(action):
            self.actions.setdefault(action["project_id"], []).append(action)
        return action

    def update_action(self, data: dict[str, Any], project_id: int) -> bool:
        updated = self._get_api().update_action(data)
        patch = ActionPatch.from_dict(data)
        action = self._find(self.actions, project_id, patch.id)
        if action is not None:
            action.update(patch.changes())
            if not self._in_cached_week(action):
                self.actions[project_id] = [a for a in self.actions[project_id] if a["id"] != patch.id]
        return updated

    def _in_cached_week(self, action: dict[str, Any]) -> bool:
        week = self._action_weeks.get(action["project_id"])
        return week is None or action["week_number"] == week

    def toggle_action(self, action_id: int, is_completed: bool, project_id: int) -> None:
        self._get_api().toggle_action(action_id, is_completed)
        action = self._find(self.actions, project_id, action_id)
        if action is not None:
            action["is_completed"] = is_completed

    def delete_action(self, action_id: int, project_id: int) -> None:
        self._get_api().delete_action(action_id)
        if project_id in self.actions:
            self.actions[project_id] = [a for a in self.actions[project_id] if a["id"] != action_id]

    # monthly plans

    def fetch_monthly_plans(self, project_id: int) -> None:
        try:
            self.monthly_plans[project_id] = self._get_api().get_monthly_plans(project_id)
        except Exception as exc:
            logger.error("Failed to fetch monthly plans for project {}: {}", project_id, exc)

    def add_monthly_plan(self, data: dict[str, Any]) -> dict[str, Any]:
        plan = self._get_api().create_monthly_plan(data)
        self.monthly_plans.setdefault(plan["project_id"], []).append(plan)
        return plan

    def delete_monthly_plan(self, plan_id: int, project_id: int) -> None:
        self._get_api().delete_monthly_plan(plan_id)
        if project_id in self.monthly_plans:
            self.monthly_plans[project_id] = [p for p in self.monthly_plans[project_id] if p["id"] != plan_id]

    def toggle_monthly_plan_primary(self, plan_id: int, is_primary: bool, project_id: int) -> None:
        self._get_api().toggle_monthly_plan_primary(plan_id, is_primary)
        plan = self._find(self.monthly_plans, project_id, plan_id)
        if plan is not None:
            plan["is_primary"] = is_primary

    # cycles

    def _apply_cycle(self, cycle: dict[str, Any]) -> None:
        ctx = cycle_context(cycle["start_date"], self._today(), max_week=self._max_week)
        self.current_week = ctx.week
        self.current_year = ctx.year
        self.current_quarter = ctx.quarter

    def fetch_current_cycle(self) -> None:
        try:
            cycle = self._get_api().get_current_cycle()
            if cycle:
                self._apply_cycle(cycle)
                self.current_cycle = cycle
        except Exception as exc:
            logger.error("Failed to fetch current cycle: {}", exc)

    def create_cycle(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            cycle = self._get_api().create_cycle(data)
        except Exception as exc:
            logger.error("Failed to create cycle: {}", exc)
            raise
        self.current_cycle = cycle
        self._apply_cycle(cycle)
        # The new cycle may point at another year/quarter.
        self.fetch_projects()
        return cycle

    def update_cycle(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            cycle = self._get_api().update_cycle(data)
        except Exception as exc:
            logger.error("Failed to update cycle: {}", exc)
            raise
        if self.current_cycle is not None and self.current_cycle["id"] == data["id"]:
            self.current_cycle = {**self.current_cycle, **cycle}
            self._apply_cycle(cycle)
        return cycle

    @staticmethod
    def _find(groups: dict[int, list[dict[str, Any]]], project_id: int, item_id: int) -> dict[str, Any] | None:
        for item in groups.get(project_id) or []:
            if item["id"] == item_id:
                return item
        return None
