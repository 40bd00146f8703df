import logging
from dataclasses import replace

from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from api.serializers import (
    CurrentUserSelectionSerializer,
    DateRangeSerializer,
    EventSerializer,
    FunctionSerializer,
    MinistrySerializer,
    ReportQuerySerializer,
    RolePermissionsSerializer,
    ScheduleSerializer,
    ServantDutiesSerializer,
    ServantSerializer,
    ShiftSerializer,
    UserSerializer,
)
from core import reference
from core.entities import Schedule, ScheduleItem, as_date
from core.models import Role
from core.services import directory, permissions, reports, schedules
from core.services.directory import DirectoryValidationError
from core.services.persistence import EVENTS, SERVANTS, USERS
from core.services.store import EntityStore

logger = logging.getLogger(__name__)


def _not_found():
    return Response({"detail": "Nao encontrado."}, status=status.HTTP_404_NOT_FOUND)


def _invalid(exc):
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class StoreMixin:
    def get_store(self):
        if not hasattr(self.request, "_escalas_store"):
            self.request._escalas_store = EntityStore.load()
        return self.request._escalas_store


class DirectoryViewSet(StoreMixin, viewsets.ViewSet):
    """CRUD over one directory collection; writes are not permission gated."""

    collection_key = None
    serializer_class = None
    lookup_value_regex = r"\d+"

    def perform_add(self, store, data):
        raise NotImplementedError

    def perform_update(self, store, entity):
        raise NotImplementedError

    def perform_delete(self, store, pk):
        raise NotImplementedError

    def list(self, request):
        entities = getattr(self.get_store(), self.collection_key)
        return Response(self.serializer_class(entities, many=True).data)

    def retrieve(self, request, pk=None):
        entity = self.get_store().get(self.collection_key, int(pk))
        if entity is None:
            return _not_found()
        return Response(self.serializer_class(entity).data)

    def create(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            entity = self.perform_add(self.get_store(), serializer.validated_data)
        except DirectoryValidationError as exc:
            return _invalid(exc)
        return Response(self.serializer_class(entity).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        store = self.get_store()
        existing = store.get(self.collection_key, int(pk))
        if existing is None:
            return _not_found()
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            entity = self.perform_update(store, replace(existing, **serializer.validated_data))
        except DirectoryValidationError as exc:
            return _invalid(exc)
        return Response(self.serializer_class(entity).data)

    def destroy(self, request, pk=None):
        if not self.perform_delete(self.get_store(), int(pk)):
            return _not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)


class ServantViewSet(DirectoryViewSet):
    collection_key = SERVANTS
    serializer_class = ServantSerializer

    def perform_add(self, store, data):
        return directory.add_servant(store, **data)

    def perform_update(self, store, entity):
        return directory.update_servant(store, entity)

    def perform_delete(self, store, pk):
        return directory.delete_servant(store, pk)


class UserViewSet(DirectoryViewSet):
    collection_key = USERS
    serializer_class = UserSerializer

    def perform_add(self, store, data):
        return directory.add_user(store, **data)

    def perform_update(self, store, entity):
        return directory.update_user(store, entity)

    def perform_delete(self, store, pk):
        return directory.delete_user(store, pk)


class EventViewSet(DirectoryViewSet):
    collection_key = EVENTS
    serializer_class = EventSerializer

    def perform_add(self, store, data):
        return directory.add_event(store, **data)

    def perform_update(self, store, entity):
        return directory.update_event(store, entity)

    def perform_delete(self, store, pk):
        return directory.delete_event(store, pk)


class ScheduleViewSet(StoreMixin, viewsets.ViewSet):
    lookup_field = "date"
    lookup_value_regex = r"\d{4}-\d{2}-\d{2}"

    def list(self, request):
        store = self.get_store()
        start, end = request.query_params.get("start"), request.query_params.get("end")
        try:
            if start and end:
                found = schedules.schedules_between(store, start, end)
            else:
                found = store.schedules
        except ValueError as exc:
            return _invalid(exc)
        return Response(ScheduleSerializer(found, many=True).data)

    def retrieve(self, request, date=None):
        try:
            schedule = schedules.get_schedule_by_date(self.get_store(), date)
        except ValueError as exc:
            return _invalid(exc)
        if schedule is None:
            return _not_found()
        return Response(ScheduleSerializer(schedule).data)

    def update(self, request, date=None):
        store = self.get_store()
        try:
            day = as_date(date)
        except ValueError as exc:
            return _invalid(exc)
        serializer = ScheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        items = []
        for item in data["items"]:
            if item.get("id"):
                items.append(ScheduleItem(**item))
            else:
                items.append(schedules.new_item(store, item["function_id"], item["servant_id"], item["shift_id"]))
        schedule = schedules.upsert_schedule(
            store, Schedule(date=day, items=tuple(items), notes=data["notes"], published=data["published"])
        )
        return Response(ScheduleSerializer(schedule).data)


class ReferenceView(APIView):
    def get(self, request):
        return Response(
            {
                "ministries": [
                    dict(
                        MinistrySerializer(ministry).data,
                        function_ids=[function.id for function in reference.functions_for_ministry(ministry.id)],
                    )
                    for ministry in reference.MINISTRIES
                ],
                "functions": FunctionSerializer(reference.FUNCTIONS, many=True).data,
                "shifts": ShiftSerializer(reference.SHIFTS, many=True).data,
            }
        )


class CurrentUserView(StoreMixin, APIView):
    def _payload(self, store):
        return {
            "user": UserSerializer(store.current_user).data,
            "permissions": permissions.current_permissions(store),
        }

    def get(self, request):
        return Response(self._payload(self.get_store()))

    def put(self, request):
        serializer = CurrentUserSelectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        store = self.get_store()
        if permissions.set_current_user(store, serializer.validated_data["id"]) is None:
            return _not_found()
        return Response(self._payload(store))


class PermissionsView(StoreMixin, APIView):
    def get(self, request):
        store = self.get_store()
        return Response(
            {
                "role_permissions": {
                    role.value: sorted(permissions.permissions_for(store, role)) for role in Role
                },
                "catalog": permissions.permission_catalog(),
                "current_user_permissions": permissions.current_permissions(store),
            }
        )


class RolePermissionsView(StoreMixin, APIView):
    def put(self, request, role):
        if role not in Role.values:
            return _not_found()
        serializer = RolePermissionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        store = self.get_store()
        if not permissions.update_role_permissions(store, role, serializer.validated_data["permissions"]):
            return Response(
                {"detail": "Permissoes do Administrador nao podem ser alteradas."},
                status=status.HTTP_403_FORBIDDEN,
            )
        return Response({"role": role, "permissions": sorted(permissions.permissions_for(store, role))})


class ParticipationReportView(StoreMixin, APIView):
    def get(self, request):
        query = ReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        store = self.get_store()
        start, end = params["start"], params["end"]

        if params.get("by") == "ministry":
            rows = [
                {"ministry": row["ministry"].name, "servant": row["servant"], "participations": row["participations"]}
                for row in reports.ministry_participation(store, start, end)
            ]
        elif params.get("servant_id") is not None:
            rows = [
                {
                    "date": row["date"].isoformat(),
                    "ministry": reports.label(row["ministry"]),
                    "function": reports.label(row["function"]),
                }
                for row in reports.servant_rows(store, params["servant_id"], start, end)
            ]
        else:
            rows = [
                {
                    "date": row["date"].isoformat(),
                    "ministry": row["ministry"].name,
                    "function": row["function"].name,
                    "servant": row["servant"].name,
                    "servant_id": row["servant"].id,
                }
                for row in reports.participation_rows(store, start, end)
            ]
        logger.debug("Relatorio %s a %s: %s linhas", start, end, len(rows))
        return Response(rows)


class RemindersView(StoreMixin, APIView):
    """Assigned duties per servant for the schedules in a date range."""

    def get(self, request):
        query = DateRangeSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        store = self.get_store()
        found = schedules.schedules_between(store, query.validated_data["start"], query.validated_data["end"])
        return Response(ServantDutiesSerializer(schedules.servant_duties(store, found), many=True).data)
