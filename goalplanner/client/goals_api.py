from __future__ import annotations

from typing import Any

from goalplanner.bridge.ipc import Bridge


class GoalsApi:
    """Client-side view of the ``goals:*`` channels."""

    def __init__(self, bridge: Bridge) -> None:
        self._bridge = bridge

    def _invoke(self, name: str, *args: Any) -> Any:
        return self._bridge.invoke(f"goals:{name}", *args)

    def get_projects(self, year: int, quarter: int) -> list[dict[str, Any]]:
        return self._invoke("getProjects", year, quarter)

    def create_project(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._invoke("createProject", data)

    def update_project(self, data: dict[str, Any]) -> bool:
        return self._invoke("updateProject", data)

    def delete_project(self, project_id: int) -> bool:
        return self._invoke("deleteProject", project_id)

    def get_actions(self, project_id: int, week_number: int) -> list[dict[str, Any]]:
        return self._invoke("getActions", project_id, week_number)

    def get_all_actions(self, project_id: int) -> list[dict[str, Any]]:
        return self._invoke("getAllActions", project_id)

    def create_action(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._invoke("createAction", data)

    def update_action(self, data: dict[str, Any]) -> bool:
        return self._invoke("updateAction", data)

    def toggle_action(self, action_id: int, is_completed: bool) -> bool:
        return self._invoke("toggleAction", action_id, is_completed)

    def delete_action(self, action_id: int) -> bool:
        return self._invoke("deleteAction", action_id)

    def get_monthly_plans(self, project_id: int) -> list[dict[str, Any]]:
        return self._invoke("getMonthlyPlans", project_id)

    def create_monthly_plan(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._invoke("createMonthlyPlan", data)

    def delete_monthly_plan(self, plan_id: int) -> bool:
        return self._invoke("deleteMonthlyPlan", plan_id)

    def toggle_monthly_plan_primary(self, plan_id: int, is_primary: bool) -> bool:
        return self._invoke("toggleMonthlyPlanPrimary", plan_id, is_primary)

    def get_current_cycle(self) -> dict[str, Any] | None:
        return self._invoke("getCurrentCycle")

    def create_cycle(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._invoke("createCycle", data)

    def update_cycle(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._invoke("updateCycle", data)
