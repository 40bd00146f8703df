import logging
import time

from django.conf import settings

from core import reference
from core.entities import Event, Schedule, Servant, User
from core.models import Permission, Role
from core.services.persistence import (
    ACTIVE_USER_ID,
    EVENTS,
    ROLE_PERMISSIONS,
    SCHEDULES,
    SERVANTS,
    USERS,
    get_gateway,
)

logger = logging.getLogger(__name__)


def _encode_role_permissions(mapping):
    return {role.value: sorted(permission.value for permission in granted) for role, granted in mapping.items()}


def _decode_role_permissions(data):
    mapping = {Role(role): frozenset(Permission(value) for value in granted) for role, granted in data.items()}
    mapping[Role.ADMINISTRATOR] = frozenset(Permission)
    return mapping


def _decode_active_user_id(data):
    if data is None:
        return None
    if isinstance(data, bool) or not isinstance(data, int):
        raise TypeError("Identificador de usuario invalido.")
    return data


def _keyed(entities, key="id"):
    return {getattr(entity, key): entity for entity in entities}


# key -> (encode(collection), decode(json))
CODECS = {
    SERVANTS: (
        lambda servants: [servant.to_dict() for servant in servants.values()],
        lambda data: _keyed(Servant.from_dict(item) for item in data),
    ),
    SCHEDULES: (
        lambda schedules: [schedules[day].to_dict() for day in sorted(schedules)],
        lambda data: _keyed((Schedule.from_dict(item) for item in data), key="date"),
    ),
    EVENTS: (
        lambda events: [event.to_dict() for event in events.values()],
        lambda data: _keyed(Event.from_dict(item) for item in data),
    ),
    USERS: (
        lambda users: [user.to_dict() for user in users.values()],
        lambda data: _keyed(User.from_dict(item) for item in data),
    ),
    ROLE_PERMISSIONS: (_encode_role_permissions, _decode_role_permissions),
}


class EntityStore:
    """Owns every collection plus the active user pointer.

    Reference data (ministries, functions, shifts) is constant. The mutable
    collections are kept as id- or date-keyed dicts and only change through
    ``replace``, which persists before swapping the in-memory value.
    """

    def __init__(self, gateway, servants, schedules, events, users, role_permissions, current_user):
        self.gateway = gateway
        self.ministries = reference.MINISTRIES
        self.functions = reference.FUNCTIONS
        self.shifts = reference.SHIFTS
        self._collections = {
            SERVANTS: servants,
            SCHEDULES: schedules,
            EVENTS: events,
            USERS: users,
            ROLE_PERMISSIONS: role_permissions,
        }
        self._current_user = current_user
        self._last_id = self._highest_known_id()

    @classmethod
    def load(cls, gateway=None, seed_defaults=None):
        gateway = gateway or get_gateway()
        if seed_defaults is None:
            seed_defaults = getattr(settings, "ESCALAS_SEED_DEFAULTS", True)

        defaults = {
            SERVANTS: reference.initial_servants() if seed_defaults else [],
            SCHEDULES: reference.initial_schedules() if seed_defaults else [],
            EVENTS: reference.initial_events() if seed_defaults else [],
            USERS: reference.initial_users() if seed_defaults else [],
        }
        collections = {
            key: gateway.load(key, _keyed(default, key="date" if key == SCHEDULES else "id"), parse=CODECS[key][1])
            for key, default in defaults.items()
        }
        role_permissions = gateway.load(
            ROLE_PERMISSIONS, dict(reference.INITIAL_ROLE_PERMISSIONS), parse=_decode_role_permissions
        )

        users = collections[USERS]
        first_user = next(iter(users.values()), None)
        active_id = gateway.load(ACTIVE_USER_ID, first_user.id if first_user else None, parse=_decode_active_user_id)
        current_user = users.get(active_id) or first_user or reference.initial_users()[0]
        logger.debug(
            "Store carregado: %s servos, %s escalas, %s eventos, %s usuarios",
            len(collections[SERVANTS]),
            len(collections[SCHEDULES]),
            len(collections[EVENTS]),
            len(users),
        )

        return cls(
            gateway,
            servants=collections[SERVANTS],
            schedules=collections[SCHEDULES],
            events=collections[EVENTS],
            users=users,
            role_permissions=role_permissions,
            current_user=current_user,
        )

    # Leitura ---------------------------------------------------------------

    @property
    def servants(self):
        return tuple(self._collections[SERVANTS].values())

    @property
    def schedules(self):
        schedules = self._collections[SCHEDULES]
        return tuple(schedules[day] for day in sorted(schedules))

    @property
    def events(self):
        return tuple(self._collections[EVENTS].values())

    @property
    def users(self):
        return tuple(self._collections[USERS].values())

    @property
    def role_permissions(self):
        return dict(self._collections[ROLE_PERMISSIONS])

    @property
    def current_user(self):
        return self._current_user

    def collection(self, key):
        """Return a copy of the keyed collection for the services to edit."""
        return dict(self._collections[key])

    def get(self, key, pk):
        return self._collections[key].get(pk)

    def function(self, function_id):
        return next((function for function in self.functions if function.id == function_id), None)

    def ministry(self, ministry_id):
        return next((ministry for ministry in self.ministries if ministry.id == ministry_id), None)

    # Escrita ---------------------------------------------------------------

    def replace(self, key, collection):
        encode = CODECS[key][0]
        self.gateway.save(key, encode(collection))
        self._collections[key] = collection

    def seat_current_user(self, user):
        self.gateway.save(ACTIVE_USER_ID, user.id)
        self._current_user = user

    def mint_id(self):
        """Time based id, strictly increasing for the life of the store."""
        candidate = max(int(time.time() * 1000), self._last_id + 1)
        self._last_id = candidate
        return candidate

    def _highest_known_id(self):
        ids = [0]
        for key in (SERVANTS, EVENTS, USERS):
            ids.extend(self._collections[key])
        for schedule in self._collections[SCHEDULES].values():
            ids.extend(item.id for item in schedule.items)
        return max(ids)
