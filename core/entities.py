"""Value objects held by the entity store.

Every entity is immutable; edits are made with ``dataclasses.replace`` (or the
helpers on ``Schedule``) and submitted back through the services.
"""
from dataclasses import dataclass, field, replace
from datetime import date
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from core.models import Role

UNASSIGNED = 0


def as_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


@dataclass(frozen=True)
class Ministry:
    id: int
    name: str
    color: str


@dataclass(frozen=True)
class Function:
    id: int
    name: str
    ministry_id: int


@dataclass(frozen=True)
class Shift:
    id: int
    name: str
    time_range: str


@dataclass(frozen=True)
class Servant:
    id: int
    name: str
    phone: str = ""
    function_ids: FrozenSet[int] = frozenset()
    active: bool = True
    photo_url: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "function_ids", frozenset(self.function_ids))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "function_ids": sorted(self.function_ids),
            "active": self.active,
            "photo_url": self.photo_url,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data["id"]),
            name=data["name"],
            phone=data.get("phone", ""),
            function_ids=frozenset(int(pk) for pk in data.get("function_ids", [])),
            active=bool(data.get("active", True)),
            photo_url=data.get("photo_url"),
        )


@dataclass(frozen=True)
class ScheduleItem:
    id: int
    function_id: int
    servant_id: int = UNASSIGNED
    shift_id: int = 0

    @property
    def is_assigned(self):
        return self.servant_id != UNASSIGNED

    def to_dict(self):
        return {
            "id": self.id,
            "function_id": self.function_id,
            "servant_id": self.servant_id,
            "shift_id": self.shift_id,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data["id"]),
            function_id=int(data["function_id"]),
            servant_id=int(data.get("servant_id", UNASSIGNED)),
            shift_id=int(data.get("shift_id", 0)),
        )


@dataclass(frozen=True)
class Schedule:
    date: date
    items: Tuple[ScheduleItem, ...] = ()
    notes: str = ""
    published: bool = False

    def __post_init__(self):
        object.__setattr__(self, "date", as_date(self.date))
        object.__setattr__(self, "items", tuple(self.items))

    def assigned_items(self):
        return [item for item in self.items if item.is_assigned]

    def with_item(self, item):
        return replace(self, items=self.items + (item,))

    def replace_item(self, item):
        return replace(self, items=tuple(item if current.id == item.id else current for current in self.items))

    def without_item(self, item_id):
        return replace(self, items=tuple(item for item in self.items if item.id != item_id))

    def to_dict(self):
        return {
            "date": self.date.isoformat(),
            "items": [item.to_dict() for item in self.items],
            "notes": self.notes,
            "published": self.published,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            date=as_date(data["date"]),
            items=tuple(ScheduleItem.from_dict(item) for item in data.get("items", [])),
            notes=data.get("notes") or "",
            published=bool(data.get("published", False)),
        )


@dataclass(frozen=True)
class Event:
    id: int
    title: str
    start_date: date
    end_date: date
    location: str = ""
    # Overrides por data; mantido para compatibilidade, nunca interpretado.
    schedules: Mapping[date, Schedule] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "start_date", as_date(self.start_date))
        object.__setattr__(self, "end_date", as_date(self.end_date))
        overrides = {as_date(day): schedule for day, schedule in dict(self.schedules).items()}
        object.__setattr__(self, "schedules", MappingProxyType(overrides))

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "location": self.location,
            "schedules": {day.isoformat(): schedule.to_dict() for day, schedule in self.schedules.items()},
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data["id"]),
            title=data["title"],
            start_date=as_date(data["start_date"]),
            end_date=as_date(data["end_date"]),
            location=data.get("location", ""),
            schedules={
                as_date(day): Schedule.from_dict(schedule)
                for day, schedule in (data.get("schedules") or {}).items()
            },
        )


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str
    role: Role
    photo_url: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "role", Role(self.role))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "photo_url": self.photo_url,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data["id"]),
            name=data["name"],
            email=data.get("email", ""),
            role=Role(data["role"]),
            photo_url=data.get("photo_url"),
        )
