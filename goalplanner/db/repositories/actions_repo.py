from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from goalplanner.core.payloads import ActionPatch, CreateAction
from goalplanner.db.models import WeeklyAction


def list_week_actions(session: Session, *, project_id: int, week_number: int) -> list[WeeklyAction]:
    return list(
        session.scalars(
            select(WeeklyAction)
            .where(WeeklyAction.project_id == project_id, WeeklyAction.week_number == week_number)
            .order_by(WeeklyAction.created_at, WeeklyAction.id)
        ).all()
    )


def list_all_actions(session: Session, *, project_id: int) -> list[WeeklyAction]:
    return list(
        session.scalars(
            select(WeeklyAction)
            .where(WeeklyAction.project_id == project_id)
            .order_by(WeeklyAction.week_number, WeeklyAction.created_at, WeeklyAction.id)
        ).all()
    )


def create_action(session: Session, payload: CreateAction) -> WeeklyAction:
    action = WeeklyAction(
        project_id=payload.project_id,
        week_number=payload.week_number,
        content=payload.content,
        due_date=payload.due_date,
        priority=payload.priority,
        is_completed=False,
    )
    session.add(action)
    session.flush()
    session.refresh(action)
    return action


def update_action(session: Session, patch: ActionPatch) -> bool:
    changes = patch.changes()
    if not changes:
        return session.get(WeeklyAction, patch.id) is not None
    result = session.execute(update(WeeklyAction).where(WeeklyAction.id == patch.id).values(**changes))
    return result.rowcount > 0


def set_action_completed(session: Session, action_id: int, is_completed: bool) -> bool:
    result = session.execute(
        update(WeeklyAction).where(WeeklyAction.id == action_id).values(is_completed=is_completed)
    )
    return result.rowcount > 0


def delete_action(session: Session, action_id: int) -> bool:
    result = session.execute(delete(WeeklyAction).where(WeeklyAction.id == action_id))
    return result.rowcount > 0
