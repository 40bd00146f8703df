import logging

from core.entities import UNASSIGNED, ScheduleItem, as_date
from core.services.persistence import SCHEDULES, SERVANTS

logger = logging.getLogger(__name__)


def get_schedule_by_date(store, day):
    return store.get(SCHEDULES, as_date(day))


def upsert_schedule(store, schedule):
    schedules = store.collection(SCHEDULES)
    replaced = schedule.date in schedules
    schedules[schedule.date] = schedule
    store.replace(SCHEDULES, schedules)
    logger.info(
        "Escala de %s %s (%s itens)",
        schedule.date.isoformat(),
        "substituida" if replaced else "criada",
        len(schedule.items),
    )
    return schedule


def add_schedule(store, schedule):
    return upsert_schedule(store, schedule)


def update_schedule(store, schedule):
    return upsert_schedule(store, schedule)


def schedules_between(store, start, end):
    start, end = as_date(start), as_date(end)
    return [schedule for schedule in store.schedules if start <= schedule.date <= end]


def new_item(store, function_id, servant_id=UNASSIGNED, shift_id=0):
    return ScheduleItem(id=store.mint_id(), function_id=function_id, servant_id=servant_id, shift_id=shift_id)


def servant_assignments(store, servant_id, start=None):
    """(schedule, item) pairs for one servant, optionally from ``start`` on."""
    start = as_date(start) if start else None
    pairs = []
    for schedule in store.schedules:
        if start and schedule.date < start:
            continue
        for item in schedule.assigned_items():
            if item.servant_id == servant_id:
                pairs.append((schedule, item))
    return pairs


def servant_duties(store, schedules):
    """Group the assigned items of ``schedules`` per servant, for reminders.

    Returns ``[{"servant": Servant, "duties": [(date, Function), ...]}]``
    ordered by servant name. Items whose servant or function no longer
    exists are left out.
    """
    by_servant = {}
    for schedule in schedules:
        for item in schedule.assigned_items():
            servant = store.get(SERVANTS, item.servant_id)
            function = store.function(item.function_id)
            if servant is None or function is None:
                continue
            entry = by_servant.setdefault(servant.id, {"servant": servant, "duties": []})
            entry["duties"].append((schedule.date, function))
    return sorted(by_servant.values(), key=lambda entry: entry["servant"].name)
