"""
Patient-creation form handling.

The form container validates a submission and hands back the accepted
record.  Records are not stored here; a downstream records service owns
persistence.
"""
from __future__ import annotations

import uuid
from datetime import date

from django.utils import timezone

from clinic.records import EmergencyContact, Patient


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    today = today or timezone.localdate()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def accept_patient(data: dict) -> Patient:
    """Build the accepted record from validated form data."""
    now = timezone.now()
    contact = data.get('emergencyContact')
    return Patient(
        id=f'pat-{uuid.uuid4().hex[:12]}',
        first_name=data['firstName'],
        last_name=data['lastName'],
        phone=data['phone'],
        date_of_birth=data['dateOfBirth'],
        gender=data['gender'],
        email=data.get('email') or None,
        address=data.get('address') or None,
        blood_type=data.get('bloodType') or None,
        allergies=data.get('allergies') or None,
        chronic_diseases=data.get('chronicDiseases') or None,
        insurance=data.get('insurance') or None,
        emergency_contact=EmergencyContact(**contact) if contact else None,
        created_at=now,
        updated_at=now,
    )
