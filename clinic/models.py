"""
Database models for MedixOne.

Only accounts and the audit trail are stored.  Clinical records (patients,
appointments, dashboard figures) are display shapes defined in
``clinic.records`` and are not persisted by this application.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Staff or patient account.

    Accounts sign in with their email address, which is also stored as the
    username so Django's default authentication backend can be used as-is.
    """

    class Role(models.TextChoices):
        ADMIN = 'ADMIN', 'Administrator'
        DOCTOR = 'DOCTOR', 'Doctor'
        NURSE = 'NURSE', 'Nurse'
        RECEPTIONIST = 'RECEPTIONIST', 'Receptionist'
        PATIENT = 'PATIENT', 'Patient'

    role = models.CharField(max_length=16, choices=Role.choices, default=Role.PATIENT)
    avatar = models.URLField(blank=True)

    def __str__(self) -> str:
        return f"{self.email or self.username} ({self.role})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='clinic_audit_action_created'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='clinic_audit_object_created'),
        ]

    def __str__(self) -> str:
        return f"{self.action} by {self.user_id or '-'} at {self.created_at:%Y-%m-%d %H:%M:%S}"
