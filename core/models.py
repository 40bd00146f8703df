from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Role(models.TextChoices):
    ADMINISTRATOR = "Administrador", "Administrador"
    PASTOR = "Pastor", "Pastor"
    LEADER = "Líder", "Líder"
    SERVANT = "Servo", "Servo"


class Permission(models.TextChoices):
    VIEW_DASHBOARD = "viewDashboard", "Visualizar Dashboard"
    VIEW_SCHEDULE = "viewEscala", "Visualizar Escalas"
    MANAGE_SCHEDULE = "manageEscala", "Gerenciar Escalas"
    VIEW_SERVANTS = "viewServos", "Visualizar Servos"
    MANAGE_SERVANTS = "manageServos", "Gerenciar Servos"
    VIEW_EVENTS = "viewEventos", "Visualizar Eventos"
    MANAGE_EVENTS = "manageEventos", "Gerenciar Eventos"
    VIEW_REPORTS = "viewRelatorios", "Visualizar Relatórios"
    VIEW_ADMIN = "viewAdmin", "Acessar Admin"
    MANAGE_USERS = "manageUsers", "Gerenciar Usuários"
    MANAGE_PERMISSIONS = "managePermissions", "Gerenciar Permissões"


PERMISSION_CATEGORIES = {
    Permission.VIEW_DASHBOARD: "Geral",
    Permission.VIEW_SCHEDULE: "Escalas",
    Permission.MANAGE_SCHEDULE: "Escalas",
    Permission.VIEW_SERVANTS: "Servos",
    Permission.MANAGE_SERVANTS: "Servos",
    Permission.VIEW_EVENTS: "Eventos",
    Permission.MANAGE_EVENTS: "Eventos",
    Permission.VIEW_REPORTS: "Relatórios",
    Permission.VIEW_ADMIN: "Admin",
    Permission.MANAGE_USERS: "Admin",
    Permission.MANAGE_PERMISSIONS: "Admin",
}


class StoredCollection(TimeStampedModel):
    """Raw JSON text of one logical collection (servants, schedules, ...)."""

    key = models.CharField(max_length=64, unique=True)
    value = models.TextField(blank=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return self.key
