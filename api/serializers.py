from rest_framework import serializers

from core import reference
from core.models import Permission, Role


class MinistrySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    color = serializers.CharField()


class FunctionSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    ministry_id = serializers.IntegerField()


class ShiftSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    time_range = serializers.CharField()


class ServantSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=200)
    phone = serializers.CharField(max_length=30, allow_blank=True, default="")
    function_ids = serializers.ListField(child=serializers.IntegerField(), default=list)
    active = serializers.BooleanField(default=True)
    photo_url = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_function_ids(self, value):
        known = {function.id for function in reference.FUNCTIONS}
        unknown = sorted(set(value) - known)
        if unknown:
            raise serializers.ValidationError(f"Funcoes desconhecidas: {unknown}")
        return frozenset(value)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["function_ids"] = sorted(data["function_ids"])
        return data


class UserSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    role = serializers.ChoiceField(choices=Role.choices)
    photo_url = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ScheduleItemSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False)
    function_id = serializers.IntegerField()
    servant_id = serializers.IntegerField(default=0, min_value=0)
    shift_id = serializers.IntegerField(default=0, min_value=0)

    def validate_function_id(self, value):
        if value not in {function.id for function in reference.FUNCTIONS}:
            raise serializers.ValidationError("Funcao desconhecida.")
        return value


class ScheduleSerializer(serializers.Serializer):
    date = serializers.DateField(read_only=True)
    items = ScheduleItemSerializer(many=True, default=list)
    notes = serializers.CharField(allow_blank=True, default="")
    published = serializers.BooleanField(default=False)


class EventSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(max_length=200)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    location = serializers.CharField(max_length=200, allow_blank=True, default="")
    schedules = serializers.SerializerMethodField()

    def get_schedules(self, instance):
        return {day.isoformat(): ScheduleSerializer(schedule).data for day, schedule in instance.schedules.items()}


class RolePermissionsSerializer(serializers.Serializer):
    permissions = serializers.ListField(child=serializers.ChoiceField(choices=Permission.choices))


class CurrentUserSelectionSerializer(serializers.Serializer):
    id = serializers.IntegerField()


class DateRangeSerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, attrs):
        if attrs["end"] < attrs["start"]:
            raise serializers.ValidationError("Periodo invalido.")
        return attrs


class ReportQuerySerializer(DateRangeSerializer):
    servant_id = serializers.IntegerField(required=False)
    by = serializers.ChoiceField(choices=["ministry"], required=False)


class ServantDutiesSerializer(serializers.Serializer):
    servant = ServantSerializer()
    duties = serializers.SerializerMethodField()

    def get_duties(self, instance):
        return [{"date": day.isoformat(), "function": function.name} for day, function in instance["duties"]]
