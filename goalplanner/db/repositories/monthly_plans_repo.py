from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from goalplanner.core.payloads import CreateMonthlyPlan
from goalplanner.db.models import MonthlyPlan


def list_monthly_plans(session: Session, *, project_id: int) -> list[MonthlyPlan]:
    return list(
        session.scalars(
            select(MonthlyPlan)
            .where(MonthlyPlan.project_id == project_id)
            .order_by(MonthlyPlan.month, MonthlyPlan.created_at, MonthlyPlan.id)
        ).all()
    )


def create_monthly_plan(session: Session, payload: CreateMonthlyPlan) -> MonthlyPlan:
    plan = MonthlyPlan(
        project_id=payload.project_id,
        month=payload.month,
        content=payload.content,
        is_primary=payload.is_primary,
    )
    session.add(plan)
    session.flush()
    session.refresh(plan)
    return plan


def delete_monthly_plan(session: Session, plan_id: int) -> bool:
    result = session.execute(delete(MonthlyPlan).where(MonthlyPlan.id == plan_id))
    return result.rowcount > 0


def set_primary(session: Session, plan_id: int, is_primary: bool) -> bool:
    result = session.execute(update(MonthlyPlan).where(MonthlyPlan.id == plan_id).values(is_primary=is_primary))
    return result.rowcount > 0
