import logging

from django.conf import settings

from core.entities import Event, Servant, User, as_date
from core.services.persistence import EVENTS, SERVANTS, USERS

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER_PHOTO_URL = "https://picsum.photos/seed/{id}/100/100"


class DirectoryValidationError(ValueError):
    pass


def _placeholder_photo(servant_id):
    template = getattr(settings, "ESCALAS_PLACEHOLDER_PHOTO_URL", DEFAULT_PLACEHOLDER_PHOTO_URL)
    return template.format(id=servant_id)


def _check_event_dates(start_date, end_date):
    try:
        start, end = as_date(start_date), as_date(end_date)
    except (TypeError, ValueError):
        raise DirectoryValidationError("Datas do evento invalidas.")
    if end < start:
        raise DirectoryValidationError("A data de fim nao pode ser anterior a data de inicio.")
    return start, end


def _update(store, key, entity):
    entities = store.collection(key)
    if entity.id not in entities:
        return None
    entities[entity.id] = entity
    store.replace(key, entities)
    logger.info("%s %s atualizado", key, entity.id)
    return entity


def _delete(store, key, pk):
    entities = store.collection(key)
    if entities.pop(pk, None) is None:
        return False
    store.replace(key, entities)
    logger.info("%s %s removido", key, pk)
    return True


# Servos ---------------------------------------------------------------------


def add_servant(store, name, phone="", function_ids=(), active=True, photo_url=None):
    servant_id = store.mint_id()
    servant = Servant(
        id=servant_id,
        name=name,
        phone=phone,
        function_ids=frozenset(function_ids),
        active=active,
        photo_url=photo_url or _placeholder_photo(servant_id),
    )
    servants = store.collection(SERVANTS)
    servants[servant.id] = servant
    store.replace(SERVANTS, servants)
    logger.info("Servo %s criado (%s)", servant.id, servant.name)
    return servant


def update_servant(store, servant):
    return _update(store, SERVANTS, servant)


def delete_servant(store, servant_id):
    # Itens de escala mantem o servant_id; relatorios ignoram servos ausentes.
    return _delete(store, SERVANTS, servant_id)


# Usuarios -------------------------------------------------------------------


def add_user(store, name, email, role, photo_url=None):
    user = User(id=store.mint_id(), name=name, email=email, role=role, photo_url=photo_url)
    users = store.collection(USERS)
    users[user.id] = user
    store.replace(USERS, users)
    logger.info("Usuario %s criado (%s)", user.id, user.role.value)
    return user


def update_user(store, user):
    updated = _update(store, USERS, user)
    if updated is not None and store.current_user.id == updated.id:
        store.seat_current_user(updated)
    return updated


def delete_user(store, user_id):
    return _delete(store, USERS, user_id)


# Eventos --------------------------------------------------------------------


def add_event(store, title, start_date, end_date, location=""):
    start, end = _check_event_dates(start_date, end_date)
    event = Event(id=store.mint_id(), title=title, start_date=start, end_date=end, location=location, schedules={})
    events = store.collection(EVENTS)
    events[event.id] = event
    store.replace(EVENTS, events)
    logger.info("Evento %s criado (%s a %s)", event.id, start.isoformat(), end.isoformat())
    return event


def update_event(store, event):
    _check_event_dates(event.start_date, event.end_date)
    return _update(store, EVENTS, event)


def delete_event(store, event_id):
    # Escalas sao indexadas por data, nao por evento: nada a cascatear.
    return _delete(store, EVENTS, event_id)
