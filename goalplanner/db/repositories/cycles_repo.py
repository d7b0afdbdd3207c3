from sqlalchemy import select, update
from sqlalchemy.orm import Session

from goalplanner.core.errors import NotFoundError
from goalplanner.core.payloads import CreateCycle, CyclePatch
from goalplanner.db.models import PlanCycle


def get_current_cycle(session: Session) -> PlanCycle | None:
    """Return the active cycle, or the most recently created one if none is active."""
    return session.scalar(
        select(PlanCycle)
        .order_by(PlanCycle.is_active.desc(), PlanCycle.created_at.desc(), PlanCycle.id.desc())
        .limit(1)
    )


def create_cycle(session: Session, payload: CreateCycle) -> PlanCycle:
    """Insert a cycle as the only active one.

    Must run inside a single transaction so the intermediate state with no
    active cycle is never committed.
    """
    session.execute(update(PlanCycle).where(PlanCycle.is_active.is_(True)).values(is_active=False))
    cycle = PlanCycle(
        title=payload.title,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_active=True,
    )
    session.add(cycle)
    session.flush()
    session.refresh(cycle)
    return cycle


def update_cycle(session: Session, patch: CyclePatch) -> PlanCycle:
    if session.get(PlanCycle, patch.id) is None:
        raise NotFoundError(f"cycle {patch.id} not found")

    if patch.is_active is True:
        session.execute(
            update(PlanCycle)
            .where(PlanCycle.id != patch.id, PlanCycle.is_active.is_(True))
            .values(is_active=False)
        )

    changes = patch.changes()
    if changes:
        session.execute(update(PlanCycle).where(PlanCycle.id == patch.id).values(**changes))
    return session.get(PlanCycle, patch.id, populate_existing=True)
