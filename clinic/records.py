"""
Display records handed to the page shells.

These are plain shapes produced by the data providers in
``clinic.services``; the shells render them and never modify them, so every
record is a frozen dataclass.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class AppointmentStatus(str, Enum):
    SCHEDULED = 'SCHEDULED'
    CONFIRMED = 'CONFIRMED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'
    NO_SHOW = 'NO_SHOW'


class AppointmentType(str, Enum):
    CONSULTATION = 'CONSULTATION'
    FOLLOW_UP = 'FOLLOW_UP'
    EMERGENCY = 'EMERGENCY'
    SURGERY = 'SURGERY'
    CHECKUP = 'CHECKUP'


@dataclass(frozen=True)
class Appointment:
    id: str
    patient_id: str
    doctor_id: str
    date: datetime
    duration: int  # minutes
    status: AppointmentStatus
    type: str
    created_at: datetime
    updated_at: datetime
    reason: Optional[str] = None
    notes: Optional[str] = None
    # display-only names resolved by the provider
    patient_name: str = ''
    doctor_name: str = ''
    urgent: bool = False


@dataclass(frozen=True)
class DashboardStats:
    total_patients: int
    today_appointments: int
    pending_results: int
    monthly_revenue: float


@dataclass(frozen=True)
class Trend:
    value: float
    label: str
    type: str  # increase | decrease | neutral


@dataclass(frozen=True)
class StatCard:
    title: str
    value: str
    subtitle: str
    color: str  # blue | green | purple | red | yellow
    icon: str
    trend: Optional[Trend] = None


@dataclass(frozen=True)
class RecentActivity:
    id: str
    type: str  # appointment | lab | prescription | patient
    message: str
    time: str
    user: str
    priority: Optional[str] = None  # high | medium | low


@dataclass(frozen=True)
class QuickAction:
    id: str
    title: str
    description: str
    icon: str
    color: str
    href: str


@dataclass(frozen=True)
class NavItem:
    name: str
    href: str
    icon: str
    active: bool = False


@dataclass(frozen=True)
class EmergencyContact:
    name: str
    relationship: str
    phone: str


@dataclass(frozen=True)
class Patient:
    id: str
    first_name: str
    last_name: str
    phone: str
    date_of_birth: date
    gender: str
    created_at: datetime
    updated_at: datetime
    email: Optional[str] = None
    address: Optional[str] = None
    blood_type: Optional[str] = None
    allergies: Optional[str] = None
    chronic_diseases: Optional[str] = None
    insurance: Optional[str] = None
    emergency_contact: Optional[EmergencyContact] = None

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'.strip()


@dataclass(frozen=True)
class Section:
    """An area of the clinic with no records to list yet."""
    key: str
    title: str
    subtitle: str
    list_title: str
    empty: str
    empty_hint: str
    icon: str
    action_href: Optional[str] = None
    action_label: Optional[str] = None
