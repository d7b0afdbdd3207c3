from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from goalplanner.core.payloads import CreateProject, ProjectPatch
from goalplanner.db.models import Project


def list_projects(session: Session, *, year: int, quarter: int) -> list[Project]:
    return list(
        session.scalars(
            select(Project)
            .where(Project.year == year, Project.quarter == quarter)
            .order_by(Project.created_at.desc(), Project.id.desc())
        ).all()
    )


def create_project(session: Session, payload: CreateProject) -> Project:
    project = Project(
        title=payload.title,
        description=payload.description,
        tactics=payload.tactics,
        deadline=payload.deadline,
        year=payload.year,
        quarter=payload.quarter,
    )
    session.add(project)
    session.flush()
    session.refresh(project)
    return project


def update_project(session: Session, patch: ProjectPatch) -> bool:
    changes = patch.changes()
    if not changes:
        return session.get(Project, patch.id) is not None
    result = session.execute(update(Project).where(Project.id == patch.id).values(**changes))
    return result.rowcount > 0


def delete_project(session: Session, project_id: int) -> bool:
    # Actions and monthly plans go with it through ON DELETE CASCADE.
    result = session.execute(delete(Project).where(Project.id == project_id))
    return result.rowcount > 0
