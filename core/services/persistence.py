import json
import logging

from django.conf import settings

from core.models import StoredCollection

logger = logging.getLogger(__name__)

SERVANTS = "servants"
SCHEDULES = "schedules"
EVENTS = "events"
USERS = "users"
ROLE_PERMISSIONS = "role-permissions"
ACTIVE_USER_ID = "active-user-id"

COLLECTION_KEYS = (SERVANTS, SCHEDULES, EVENTS, USERS, ROLE_PERMISSIONS, ACTIVE_USER_ID)

# Erros esperados ao interpretar um valor salvo malformado.
PARSE_ERRORS = (ValueError, TypeError, KeyError, AttributeError, RecursionError)


class PersistenceGateway:
    """Load/save named collections as JSON text.

    Subclasses only move raw text around; decoding, fallback to the default
    and discarding of corrupt values happen here.
    """

    def _read_raw(self, key):
        raise NotImplementedError

    def _write_raw(self, key, text):
        raise NotImplementedError

    def _delete_raw(self, key):
        raise NotImplementedError

    def load(self, key, default, parse=None):
        raw = self._read_raw(key)
        if raw is None or not raw.strip():
            return default
        try:
            data = json.loads(raw)
            return parse(data) if parse else data
        except PARSE_ERRORS as exc:
            logger.warning("Descartando valor corrompido em %s: %s", key, exc)
            self.discard(key)
            return default

    def save(self, key, value):
        self._write_raw(key, json.dumps(value, ensure_ascii=False))
        logger.debug("Colecao %s salva", key)

    def discard(self, key):
        self._delete_raw(key)


class DatabaseGateway(PersistenceGateway):
    def _read_raw(self, key):
        return StoredCollection.objects.filter(key=key).values_list("value", flat=True).first()

    def _write_raw(self, key, text):
        StoredCollection.objects.update_or_create(key=key, defaults={"value": text})

    def _delete_raw(self, key):
        StoredCollection.objects.filter(key=key).delete()


class MemoryGateway(PersistenceGateway):
    def __init__(self, initial=None):
        self.data = dict(initial or {})

    def _read_raw(self, key):
        return self.data.get(key)

    def _write_raw(self, key, text):
        self.data[key] = text

    def _delete_raw(self, key):
        self.data.pop(key, None)


_shared_memory_gateway = MemoryGateway()


def get_gateway():
    backend = getattr(settings, "ESCALAS_PERSISTENCE_BACKEND", "database")
    if backend == "memory":
        return _shared_memory_gateway
    if backend == "database":
        return DatabaseGateway()
    raise ValueError(f"Backend de persistencia desconhecido: {backend}")
