"""Request payloads accepted by the ``goals:*`` handlers.

Create payloads carry every column with its default filled in. Patch payloads
remember which keys the caller actually sent, so an update only touches those
columns.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any, Mapping

from goalplanner.core.errors import ValidationError
from goalplanner.db.models import DEFAULT_PRIORITY, PRIORITIES

DATE_FORMAT = "%Y-%m-%d"


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _as_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("payload must be an object")
    return payload


def _required(payload: Mapping[str, Any], name: str) -> Any:
    value = payload.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} is required", field=name)
    return value


def _text(value: Any, name: str) -> str:
    if value is None:
        raise ValidationError(f"{name} cannot be blank", field=name)
    text = str(value).strip()
    if not text:
        raise ValidationError(f"{name} cannot be blank", field=name)
    return text


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _int(value: Any, name: str, *, minimum: int | None = None, maximum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer", field=name)
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be an integer", field=name) from exc
    if isinstance(value, float) and number != value:
        raise ValidationError(f"{name} must be an integer", field=name)
    if minimum is not None and number < minimum:
        raise ValidationError(f"{name} must be >= {minimum}", field=name)
    if maximum is not None and number > maximum:
        raise ValidationError(f"{name} must be <= {maximum}", field=name)
    return number


def _bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValidationError(f"{name} must be a boolean", field=name)


def _date(value: Any, name: str) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    raw = str(value).strip()
    try:
        parsed = datetime.strptime(raw, DATE_FORMAT)
    except ValueError as exc:
        raise ValidationError(f"{name} must use format YYYY-MM-DD", field=name) from exc
    # Normalized to the zero-padded form.
    return parsed.date().isoformat()


def _optional_date(value: Any, name: str) -> str | None:
    if value is None or value == "":
        return None
    return _date(value, name)


def _priority(value: Any) -> str:
    if value is None or value == "":
        return DEFAULT_PRIORITY
    priority = str(value).strip().lower()
    if priority not in PRIORITIES:
        raise ValidationError(f"priority must be one of {list(PRIORITIES)}", field="priority")
    return priority


class _Patch:
    """Mixin for patch dataclasses: ``id`` plus fields defaulting to UNSET."""

    __slots__ = ()

    def changes(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)  # type: ignore[arg-type]
            if f.name != "id" and getattr(self, f.name) is not UNSET
        }


@dataclass(slots=True)
class CreateProject:
    title: str
    year: int
    quarter: int
    description: str | None = None
    tactics: str = ""
    deadline: str | None = None

    @classmethod
    def from_dict(cls, payload: Any) -> "CreateProject":
        data = _as_mapping(payload)
        title = _text(_required(data, "title"), "title")
        year = _int(_required(data, "year"), "year", minimum=1)
        quarter = _int(_required(data, "quarter"), "quarter", minimum=1, maximum=4)
        return cls(
            title=title,
            year=year,
            quarter=quarter,
            description=_optional_text(data.get("description")),
            tactics=str(data.get("tactics") or ""),
            deadline=_optional_date(data.get("deadline"), "deadline"),
        )


@dataclass(slots=True)
class ProjectPatch(_Patch):
    id: int
    title: str = UNSET
    description: str | None = UNSET
    deadline: str | None = UNSET
    note: str | None = UNSET

    @classmethod
    def from_dict(cls, payload: Any) -> "ProjectPatch":
        data = _as_mapping(payload)
        for frozen in ("year", "quarter"):
            if frozen in data:
                raise ValidationError(f"{frozen} cannot be changed after creation", field=frozen)
        patch = cls(id=_int(_required(data, "id"), "id"))
        if "title" in data:
            patch.title = _text(data["title"], "title")
        if "description" in data:
            patch.description = _optional_text(data["description"])
        if "deadline" in data:
            patch.deadline = _optional_date(data["deadline"], "deadline")
        if "note" in data:
            patch.note = _optional_text(data["note"])
        return patch


@dataclass(slots=True)
class CreateAction:
    project_id: int
    week_number: int
    content: str
    due_date: str | None = None
    priority: str = DEFAULT_PRIORITY

    @classmethod
    def from_dict(cls, payload: Any) -> "CreateAction":
        data = _as_mapping(payload)
        return cls(
            project_id=_int(_required(data, "project_id"), "project_id"),
            week_number=_int(_required(data, "week_number"), "week_number", minimum=1),
            content=_text(_required(data, "content"), "content"),
            due_date=_optional_date(data.get("due_date"), "due_date"),
            priority=_priority(data.get("priority")),
        )


@dataclass(slots=True)
class ActionPatch(_Patch):
    id: int
    content: str = UNSET
    due_date: str | None = UNSET
    priority: str = UNSET
    week_number: int = UNSET

    @classmethod
    def from_dict(cls, payload: Any) -> "ActionPatch":
        data = _as_mapping(payload)
        patch = cls(id=_int(_required(data, "id"), "id"))
        if "content" in data:
            patch.content = _text(data["content"], "content")
        if "due_date" in data:
            patch.due_date = _optional_date(data["due_date"], "due_date")
        if "priority" in data:
            patch.priority = _priority(data["priority"])
        if "week_number" in data:
            patch.week_number = _int(data["week_number"], "week_number", minimum=1)
        return patch


@dataclass(slots=True)
class CreateMonthlyPlan:
    project_id: int
    month: int
    content: str
    is_primary: bool

    @classmethod
    def from_dict(cls, payload: Any) -> "CreateMonthlyPlan":
        data = _as_mapping(payload)
        if "is_primary" not in data or data["is_primary"] is None:
            raise ValidationError("is_primary is required", field="is_primary")
        return cls(
            project_id=_int(_required(data, "project_id"), "project_id"),
            month=_int(_required(data, "month"), "month", minimum=1, maximum=12),
            content=_text(_required(data, "content"), "content"),
            is_primary=_bool(data["is_primary"], "is_primary"),
        )


def _check_range(start_date: str, end_date: str) -> None:
    if date.fromisoformat(end_date) < date.fromisoformat(start_date):
        raise ValidationError("end_date must not be before start_date", field="end_date")


@dataclass(slots=True)
class CreateCycle:
    title: str
    start_date: str
    end_date: str

    @classmethod
    def from_dict(cls, payload: Any) -> "CreateCycle":
        data = _as_mapping(payload)
        cycle = cls(
            title=_text(_required(data, "title"), "title"),
            start_date=_date(_required(data, "start_date"), "start_date"),
            end_date=_date(_required(data, "end_date"), "end_date"),
        )
        _check_range(cycle.start_date, cycle.end_date)
        return cycle


@dataclass(slots=True)
class CyclePatch(_Patch):
    id: int
    title: str = UNSET
    start_date: str = UNSET
    end_date: str = UNSET
    is_active: bool = UNSET

    @classmethod
    def from_dict(cls, payload: Any) -> "CyclePatch":
        data = _as_mapping(payload)
        patch = cls(
            id=_int(_required(data, "id"), "id"),
            title=_text(_required(data, "title"), "title"),
            start_date=_date(_required(data, "start_date"), "start_date"),
            end_date=_date(_required(data, "end_date"), "end_date"),
        )
        _check_range(patch.start_date, patch.end_date)
        if data.get("is_active") is not None:
            patch.is_active = _bool(data["is_active"], "is_active")
        return patch


def parse_int(value: Any, name: str) -> int:
    if value is None:
        raise ValidationError(f"{name} is required", field=name)
    return _int(value, name)


def parse_flag(value: Any, name: str) -> bool:
    if value is None:
        raise ValidationError(f"{name} is required", field=name)
    return _bool(value, name)
