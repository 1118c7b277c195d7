import re

import bleach
from django.utils import timezone
from rest_framework import serializers

from clinic.services.patients import calculate_age

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_RE = re.compile(r'^\+?[1-9]\d{1,14}$')

GENDERS = ['MALE', 'FEMALE', 'OTHER']
BLOOD_TYPES = [
    'A_POSITIVE', 'A_NEGATIVE', 'B_POSITIVE', 'B_NEGATIVE',
    'AB_POSITIVE', 'AB_NEGATIVE', 'O_POSITIVE', 'O_NEGATIVE',
]


def clean_text(v):
    return bleach.clean((v or '').strip(), tags=[], strip=True)


class EmergencyContactSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=128)
    relationship = serializers.CharField(max_length=64)
    phone = serializers.CharField(max_length=32)

    def validate_name(self, v):
        return clean_text(v)

    def validate_relationship(self, v):
        return clean_text(v)

    def validate_phone(self, v):
        v = re.sub(r'\s', '', v or '')
        if not PHONE_RE.match(v):
            raise serializers.ValidationError('invalid phone number')
        return v


class PatientCreateSerializer(serializers.Serializer):
    firstName = serializers.CharField(max_length=64)
    lastName = serializers.CharField(max_length=64)
    email = serializers.CharField(required=False, allow_blank=True, max_length=254)
    phone = serializers.CharField(max_length=32)
    dateOfBirth = serializers.DateField()
    gender = serializers.ChoiceField(choices=GENDERS, default='OTHER')
    address = serializers.CharField(required=False, allow_blank=True, max_length=255)
    emergencyContact = EmergencyContactSerializer(required=False, allow_null=True)
    bloodType = serializers.ChoiceField(choices=BLOOD_TYPES, required=False, allow_blank=True)
    allergies = serializers.CharField(required=False, allow_blank=True)
    chronicDiseases = serializers.CharField(required=False, allow_blank=True)
    insurance = serializers.CharField(required=False, allow_blank=True, max_length=128)

    def validate_firstName(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('this field is required')
        return v

    def validate_lastName(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('this field is required')
        return v

    def validate_email(self, v):
        v = (v or '').strip()
        if v and not EMAIL_RE.match(v):
            raise serializers.ValidationError('invalid email address')
        return v.lower()

    def validate_phone(self, v):
        v = re.sub(r'\s', '', v or '')
        if not PHONE_RE.match(v):
            raise serializers.ValidationError('invalid phone number')
        return v

    def validate_dateOfBirth(self, v):
        if v > timezone.localdate():
            raise serializers.ValidationError('date of birth cannot be in the future')
        return v

    def validate_address(self, v):
        return clean_text(v)

    def validate_allergies(self, v):
        return clean_text(v)

    def validate_chronicDiseases(self, v):
        return clean_text(v)

    def validate_insurance(self, v):
        return clean_text(v)


class PatientSerializer(serializers.Serializer):
    id = serializers.CharField()
    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')
    fullName = serializers.CharField(source='full_name')
    email = serializers.CharField(allow_null=True)
    phone = serializers.CharField()
    dateOfBirth = serializers.DateField(source='date_of_birth')
    age = serializers.SerializerMethodField()
    gender = serializers.CharField()
    address = serializers.CharField(allow_null=True)
    bloodType = serializers.CharField(source='blood_type', allow_null=True)
    allergies = serializers.CharField(allow_null=True)
    chronicDiseases = serializers.CharField(source='chronic_diseases', allow_null=True)
    insurance = serializers.CharField(allow_null=True)
    emergencyContact = EmergencyContactSerializer(source='emergency_contact', allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')

    def get_age(self, obj):
        return calculate_age(obj.date_of_birth)
