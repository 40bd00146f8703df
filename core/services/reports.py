from collections import defaultdict

from core.services.persistence import SERVANTS
from core.services.schedules import schedules_between

MISSING_LABEL = "N/A"


def label(entity):
    return entity.name if entity is not None else MISSING_LABEL


def _joined_items(store, start, end):
    for schedule in schedules_between(store, start, end):
        for item in schedule.assigned_items():
            function = store.function(item.function_id)
            ministry = store.ministry(function.ministry_id) if function else None
            yield schedule, item, function, ministry


def participation_rows(store, start, end):
    rows = []
    for schedule, item, function, ministry in _joined_items(store, start, end):
        servant = store.get(SERVANTS, item.servant_id)
        if servant is None or function is None or ministry is None:
            continue
        rows.append({"date": schedule.date, "ministry": ministry, "function": function, "servant": servant})
    return rows


def servant_rows(store, servant_id, start, end):
    """One servant's history; ``function``/``ministry`` are None when no longer known."""
    rows = []
    for schedule, item, function, ministry in _joined_items(store, start, end):
        if item.servant_id != servant_id:
            continue
        rows.append({"date": schedule.date, "ministry": ministry, "function": function})
    return rows


def ministry_participation(store, start, end):
    counts = defaultdict(lambda: defaultdict(int))
    for row in participation_rows(store, start, end):
        counts[row["ministry"]][row["servant"].name] += 1
    return [
        {"ministry": ministry, "servant": servant_name, "participations": total}
        for ministry, per_servant in counts.items()
        for servant_name, total in per_servant.items()
    ]
