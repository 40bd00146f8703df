from django.urls import include, path
from rest_framework.routers import DefaultRouter

from api.views import (
    CurrentUserView,
    EventViewSet,
    ParticipationReportView,
    PermissionsView,
    ReferenceView,
    RemindersView,
    RolePermissionsView,
    ScheduleViewSet,
    ServantViewSet,
    UserViewSet,
)

router = DefaultRouter()
router.register("servants", ServantViewSet, basename="servant")
router.register("users", UserViewSet, basename="user")
router.register("events", EventViewSet, basename="event")
router.register("schedules", ScheduleViewSet, basename="schedule")

urlpatterns = [
    path("reference/", ReferenceView.as_view(), name="reference"),
    path("current-user/", CurrentUserView.as_view(), name="current-user"),
    path("permissions/", PermissionsView.as_view(), name="permissions"),
    path("permissions/<str:role>/", RolePermissionsView.as_view(), name="role-permissions"),
    path("reports/participation/", ParticipationReportView.as_view(), name="participation-report"),
    path("reminders/", RemindersView.as_view(), name="reminders"),
    path("", include(router.urls)),
]
