"""Serializers for the read-only display records in ``clinic.records``."""
from rest_framework import serializers


class EnumValueField(serializers.Field):
    def to_representation(self, value):
        return getattr(value, 'value', value)


class AppointmentSerializer(serializers.Serializer):
    id = serializers.CharField()
    patientId = serializers.CharField(source='patient_id')
    doctorId = serializers.CharField(source='doctor_id')
    date = serializers.DateTimeField()
    duration = serializers.IntegerField()
    status = EnumValueField()
    type = serializers.CharField()
    reason = serializers.CharField(allow_null=True)
    notes = serializers.CharField(allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')
    patient = serializers.CharField(source='patient_name')
    doctor = serializers.CharField(source='doctor_name')
    urgent = serializers.BooleanField()


class DashboardStatsSerializer(serializers.Serializer):
    totalPatients = serializers.IntegerField(source='total_patients')
    todayAppointments = serializers.IntegerField(source='today_appointments')
    pendingResults = serializers.IntegerField(source='pending_results')
    monthlyRevenue = serializers.FloatField(source='monthly_revenue')


class TrendSerializer(serializers.Serializer):
    value = serializers.FloatField()
    label = serializers.CharField()
    type = serializers.CharField()


class StatCardSerializer(serializers.Serializer):
    title = serializers.CharField()
    value = serializers.CharField()
    subtitle = serializers.CharField()
    color = serializers.CharField()
    icon = serializers.CharField()
    trend = TrendSerializer(allow_null=True)


class RecentActivitySerializer(serializers.Serializer):
    id = serializers.CharField()
    type = serializers.CharField()
    message = serializers.CharField()
    time = serializers.CharField()
    user = serializers.CharField()
    priority = serializers.CharField(allow_null=True)


class QuickActionSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    icon = serializers.CharField()
    color = serializers.CharField()
    href = serializers.CharField()


class NavItemSerializer(serializers.Serializer):
    name = serializers.CharField()
    href = serializers.CharField()
    icon = serializers.CharField()
    active = serializers.BooleanField()


class SectionSerializer(serializers.Serializer):
    key = serializers.CharField()
    title = serializers.CharField()
    subtitle = serializers.CharField()
    listTitle = serializers.CharField(source='list_title')
    empty = serializers.CharField()
    emptyHint = serializers.CharField(source='empty_hint')
    icon = serializers.CharField()
    actionHref = serializers.CharField(source='action_href', allow_null=True)
    actionLabel = serializers.CharField(source='action_label', allow_null=True)
