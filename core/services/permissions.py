"""Role based permission lookups for the active user.

These checks are advisory: views consult them to decide what to show, but
the directory and schedule services never refuse a write because of them.
The active user is selected, not authenticated ("simulate as").
"""
import logging

from core.models import PERMISSION_CATEGORIES, Permission, Role
from core.services.persistence import ROLE_PERMISSIONS, USERS

logger = logging.getLogger(__name__)


def permissions_for(store, role):
    return store.role_permissions.get(role, frozenset())


def has_permission(store, permission):
    granted = store.role_permissions.get(store.current_user.role)
    if granted is None:
        return False
    return permission in granted


def current_permissions(store):
    return sorted(permissions_for(store, store.current_user.role))


def update_role_permissions(store, role, permissions):
    role = Role(role)
    if role == Role.ADMINISTRATOR:
        logger.warning("Permissoes do Administrador sao fixas; alteracao ignorada.")
        return False
    mapping = store.collection(ROLE_PERMISSIONS)
    mapping[role] = frozenset(Permission(value) for value in permissions)
    store.replace(ROLE_PERMISSIONS, mapping)
    logger.info("Permissoes de %s atualizadas (%s)", role.value, len(mapping[role]))
    return True


def set_current_user(store, user):
    user_id = getattr(user, "id", user)
    found = store.get(USERS, user_id)
    if found is None:
        return None
    store.seat_current_user(found)
    logger.info("Usuario atual: %s (%s)", found.name, found.role.value)
    return found


def permission_catalog():
    return [
        {"id": permission.value, "description": permission.label, "category": PERMISSION_CATEGORIES[permission]}
        for permission in Permission
    ]
