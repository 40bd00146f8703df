from datetime import date, timedelta

from core.entities import Event, Function, Ministry, Schedule, ScheduleItem, Servant, Shift, User
from core.models import Permission, Role

COMMUNICATION = 1
WORSHIP = 2
RECEPTION = 3
SERVICE = 4

MINISTRIES = (
    Ministry(id=COMMUNICATION, name="Comunicação", color="bg-blue-500"),
    Ministry(id=WORSHIP, name="Louvor", color="bg-purple-500"),
    Ministry(id=RECEPTION, name="Recepção", color="bg-green-500"),
    Ministry(id=SERVICE, name="Serviço/Limpeza", color="bg-orange-500"),
)

FUNCTIONS = (
    Function(id=1, name="Projeção", ministry_id=COMMUNICATION),
    Function(id=2, name="Iluminação", ministry_id=COMMUNICATION),
    Function(id=3, name="Captação de Imagem", ministry_id=COMMUNICATION),
    Function(id=4, name="Live", ministry_id=COMMUNICATION),
    Function(id=5, name="Vocal", ministry_id=WORSHIP),
    Function(id=6, name="Guitarrista", ministry_id=WORSHIP),
    Function(id=7, name="Baterista", ministry_id=WORSHIP),
    Function(id=8, name="Contrabaixo", ministry_id=WORSHIP),
    Function(id=9, name="Teclado", ministry_id=WORSHIP),
    Function(id=10, name="Violão", ministry_id=WORSHIP),
    Function(id=13, name="Técnico de Som", ministry_id=WORSHIP),
    Function(id=11, name="Recepção", ministry_id=RECEPTION),
    Function(id=12, name="Limpeza/Serviço", ministry_id=SERVICE),
)

SHIFTS = (
    Shift(id=1, name="Manhã", time_range="08:00 - 12:00"),
    Shift(id=2, name="Tarde", time_range="13:00 - 17:00"),
    Shift(id=3, name="Noite", time_range="18:00 - 22:00"),
)

INITIAL_ROLE_PERMISSIONS = {
    Role.ADMINISTRATOR: frozenset(Permission),
    Role.PASTOR: frozenset(
        [
            Permission.VIEW_DASHBOARD,
            Permission.VIEW_SCHEDULE,
            Permission.MANAGE_SCHEDULE,
            Permission.VIEW_SERVANTS,
            Permission.MANAGE_SERVANTS,
            Permission.VIEW_EVENTS,
            Permission.MANAGE_EVENTS,
            Permission.VIEW_REPORTS,
            Permission.VIEW_ADMIN,
            Permission.MANAGE_USERS,
        ]
    ),
    Role.LEADER: frozenset(
        [
            Permission.VIEW_DASHBOARD,
            Permission.VIEW_SCHEDULE,
            Permission.MANAGE_SCHEDULE,
            Permission.VIEW_SERVANTS,
            Permission.MANAGE_SERVANTS,
            Permission.VIEW_EVENTS,
        ]
    ),
    Role.SERVANT: frozenset(
        [
            Permission.VIEW_DASHBOARD,
            Permission.VIEW_SCHEDULE,
            Permission.VIEW_SERVANTS,
            Permission.VIEW_EVENTS,
        ]
    ),
}


def initial_servants():
    rows = [
        (1, "Ana Silva", "(11) 98765-4321", [5, 10], True, 1027),
        (2, "Bruno Costa", "(11) 91234-5678", [6, 8], True, 1005),
        (3, "Carla Dias", "(21) 99876-5432", [1], True, 1011),
        (4, "Daniel Martins", "(31) 98888-7777", [7], True, 1012),
        (5, "Eduarda Lima", "(51) 97654-3210", [11], True, 1013),
        (6, "Fábio Pereira", "(41) 96543-2109", [12], True, 1014),
        (7, "Gabriela Rocha", "(61) 95432-1098", [9], True, 1015),
        (8, "Heitor Santos", "(71) 94321-0987", [2, 3], True, 1016),
        (9, "Isabela Nunes", "(81) 93210-9876", [4], False, 1018),
        (10, "João Vitor", "(91) 92109-8765", [10], True, 1019),
    ]
    return [
        Servant(
            id=pk,
            name=name,
            phone=phone,
            function_ids=frozenset(functions),
            active=active,
            photo_url=f"https://picsum.photos/id/{photo}/100/100",
        )
        for pk, name, phone, functions, active, photo in rows
    ]


def _last_sunday(today):
    return today - timedelta(days=(today.weekday() + 1) % 7)


def initial_schedules(today=None):
    today = today or date.today()
    sunday = _last_sunday(today)
    next_sunday = sunday + timedelta(days=7)
    return [
        Schedule(
            date=sunday,
            published=True,
            notes="Ensaio geral às 18h no sábado.",
            items=(
                ScheduleItem(id=1, function_id=5, servant_id=1, shift_id=3),
                ScheduleItem(id=2, function_id=6, servant_id=2, shift_id=3),
                ScheduleItem(id=3, function_id=7, servant_id=4, shift_id=3),
                ScheduleItem(id=4, function_id=9, servant_id=7, shift_id=3),
                ScheduleItem(id=5, function_id=1, servant_id=3, shift_id=3),
                ScheduleItem(id=6, function_id=11, servant_id=5, shift_id=3),
            ),
        ),
        Schedule(
            date=next_sunday,
            published=False,
            items=(
                ScheduleItem(id=7, function_id=5, servant_id=1, shift_id=3),
                ScheduleItem(id=8, function_id=10, servant_id=10, shift_id=3),
            ),
        ),
    ]


def initial_events(today=None):
    today = today or date.today()
    start = today + timedelta(days=12)
    return [
        Event(
            id=1,
            title="Conferência Anual",
            start_date=start,
            end_date=start + timedelta(days=2),
            location="Sede da Igreja",
        )
    ]


def initial_users():
    return [
        User(id=1, name="João Administrador", email="admin@email.com", role=Role.ADMINISTRATOR,
             photo_url="https://picsum.photos/seed/user1/100/100"),
        User(id=2, name="Maria Pastora", email="pastora@email.com", role=Role.PASTOR,
             photo_url="https://picsum.photos/seed/user2/100/100"),
        User(id=3, name="Carlos Líder", email="lider@email.com", role=Role.LEADER,
             photo_url="https://picsum.photos/seed/user3/100/100"),
        User(id=4, name="Ana Servo", email="servo@email.com", role=Role.SERVANT,
             photo_url="https://picsum.photos/seed/user4/100/100"),
    ]


def functions_for_ministry(ministry_id):
    return [function for function in FUNCTIONS if function.ministry_id == ministry_id]

