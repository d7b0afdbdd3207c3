from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

PRIORITIES = ("high", "medium", "low", "none")
DEFAULT_PRIORITY = "none"


class Base(DeclarativeBase):
    pass


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_year_quarter", "year", "quarter"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tactics: Mapped[str] = mapped_column(Text, default="", server_default="", nullable=False)
    deadline: Mapped[str | None] = mapped_column(String(10), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    quarter: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    actions: Mapped[list["WeeklyAction"]] = relationship(
        "WeeklyAction",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    monthly_plans: Mapped[list["MonthlyPlan"]] = relationship(
        "MonthlyPlan",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class WeeklyAction(Base):
    __tablename__ = "weekly_actions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    priority: Mapped[str] = mapped_column(
        String(16), default=DEFAULT_PRIORITY, server_default=DEFAULT_PRIORITY, nullable=False
    )
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    project: Mapped[Project] = relationship("Project", back_populates="actions")


class MonthlyPlan(Base):
    __tablename__ = "monthly_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Several plans of one project/month may be primary at once.
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    project: Mapped[Project] = relationship("Project", back_populates="monthly_plans")


class PlanCycle(Base):
    __tablename__ = "cycles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[str] = mapped_column(String(10), nullable=False)
    end_date: Mapped[str] = mapped_column(String(10), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def project_to_dict(project: Project) -> dict:
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "tactics": project.tactics,
        "deadline": project.deadline,
        "note": project.note,
        "year": project.year,
        "quarter": project.quarter,
        "created_at": _iso(project.created_at),
    }


def action_to_dict(action: WeeklyAction) -> dict:
    return {
        "id": action.id,
        "project_id": action.project_id,
        "week_number": action.week_number,
        "content": action.content,
        "due_date": action.due_date,
        "priority": action.priority or DEFAULT_PRIORITY,
        "is_completed": bool(action.is_completed),
        "created_at": _iso(action.created_at),
    }


def monthly_plan_to_dict(plan: MonthlyPlan) -> dict:
    return {
        "id": plan.id,
        "project_id": plan.project_id,
        "month": plan.month,
        "content": plan.content,
        "is_primary": bool(plan.is_primary),
        "created_at": _iso(plan.created_at),
    }


def cycle_to_dict(cycle: PlanCycle) -> dict:
    return {
        "id": cycle.id,
        "title": cycle.title,
        "start_date": cycle.start_date,
        "end_date": cycle.end_date,
        "is_active": bool(cycle.is_active),
        "created_at": _iso(cycle.created_at),
    }
