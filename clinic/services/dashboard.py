"""
Data providers for the dashboard and appointment shells.

Clinical data is not stored by this application; these providers return the
demonstration figures the front-end has always shown, built fresh on each
call and labelled in the requested language.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from django.utils import timezone

from clinic.records import (
    Appointment,
    AppointmentStatus,
    AppointmentType,
    DashboardStats,
    NavItem,
    QuickAction,
    RecentActivity,
    Section,
    StatCard,
    Trend,
)
from clinic.services.translations import Translator

NAVIGATION = [
    ('navigation.dashboard', '/dashboard', 'home'),
    ('navigation.patients', '/patients', 'users'),
    ('navigation.appointments', '/appointments', 'calendar'),
    ('navigation.laboratory', '/laboratory', 'beaker'),
    ('navigation.prescriptions', '/prescriptions', 'document'),
    ('navigation.billing', '/billing', 'currency'),
    ('navigation.reports', '/reports', 'chart'),
    ('navigation.medicalRecords', '/medical-records', 'folder'),
]

QUICK_ACTIONS = [
    ('new-patient', 'quickActions.newPatient', 'plus', 'blue', '/patients/new'),
    ('schedule-appointment', 'quickActions.scheduleAppointment', 'calendar', 'green', '/appointments'),
    ('lab-results', 'quickActions.labResults', 'clipboard-check', 'purple', '/laboratory'),
    ('emergency', 'quickActions.emergency', 'alert', 'red', '/appointments?type=EMERGENCY'),
]

# Catalog key, icon and the page that creates the first record, if any
SECTIONS = {
    'patients': ('sections.patients', 'users', '/patients/new', 'patients.new'),
    'laboratory': ('sections.laboratory', 'beaker', None, None),
    'prescriptions': ('sections.prescriptions', 'document', None, None),
    'billing': ('sections.billing', 'currency', None, None),
    'reports': ('sections.reports', 'chart', None, None),
    'medical-records': ('sections.medicalRecords', 'folder', '/patients/new', 'patients.new'),
}


def navigation(language, current_path: str = '') -> list[NavItem]:
    t = Translator(language)
    return [NavItem(name=t(key), href=href, icon=icon, active=(href == current_path)) for key, href, icon in NAVIGATION]


def quick_actions(language) -> list[QuickAction]:
    t = Translator(language)
    return [
        QuickAction(
            id=action_id,
            title=t(f'{key}.title'),
            description=t(f'{key}.description'),
            icon=icon,
            color=color,
            href=href,
        )
        for action_id, key, icon, color, href in QUICK_ACTIONS
    ]


def section(language, key: str) -> Section:
    """Empty-state shell for a clinic area; raises ``KeyError`` for unknown areas."""
    catalog_key, icon, action_href, action_key = SECTIONS[key]
    t = Translator(language)
    return Section(
        key=key,
        title=t(f'{catalog_key}.title'),
        subtitle=t(f'{catalog_key}.subtitle'),
        list_title=t(f'{catalog_key}.listTitle'),
        empty=t(f'{catalog_key}.empty'),
        empty_hint=t(f'{catalog_key}.emptyHint'),
        icon=icon,
        action_href=action_href,
        action_label=t(action_key) if action_key else None,
    )


def dashboard_stats() -> DashboardStats:
    return DashboardStats(
        total_patients=1248,
        today_appointments=24,
        pending_results=15,
        monthly_revenue=184320.0,
    )


def stat_cards(language, stats: DashboardStats | None = None) -> list[StatCard]:
    t = Translator(language)
    stats = stats or dashboard_stats()
    return [
        StatCard(
            title=t('dashboard.todayPatients'),
            value=str(stats.today_appointments),
            subtitle=t('dashboard.scheduledConsultations'),
            color='blue',
            icon='users',
            trend=Trend(value=12, label=t('dashboard.vsYesterday'), type='increase'),
        ),
        StatCard(
            title=t('dashboard.todayRevenue'),
            value='$8,420',
            subtitle=t('dashboard.completedConsultations'),
            color='green',
            icon='dollar',
        ),
        StatCard(
            title=t('dashboard.labResults'),
            value=str(stats.pending_results),
            subtitle=t('dashboard.pendingReview'),
            color='purple',
            icon='lab',
        ),
        StatCard(
            title=t('dashboard.emergencies'),
            value='3',
            subtitle=t('dashboard.activeCases'),
            color='red',
            icon='alert',
            trend=Trend(value=0, label='', type='neutral'),
        ),
    ]


def recent_activity(now: datetime | None = None) -> list[RecentActivity]:
    now = now or timezone.now()
    fmt = '%H:%M'
    return [
        RecentActivity(
            id='act-1', type='appointment', message='Cita confirmada: María González',
            time=(now - timedelta(minutes=5)).strftime(fmt), user='Recepción',
        ),
        RecentActivity(
            id='act-2', type='lab', message='Resultados de hemograma disponibles',
            time=(now - timedelta(minutes=18)).strftime(fmt), user='Laboratorio', priority='high',
        ),
        RecentActivity(
            id='act-3', type='prescription', message='Receta emitida para Carlos Ruiz',
            time=(now - timedelta(minutes=42)).strftime(fmt), user='Dr. José Martínez', priority='medium',
        ),
        RecentActivity(
            id='act-4', type='patient', message='Nuevo paciente registrado',
            time=(now - timedelta(hours=1, minutes=10)).strftime(fmt), user='Admin Usuario', priority='low',
        ),
    ]


def today_appointments(now: datetime | None = None) -> list[Appointment]:
    now = now or timezone.now()
    day = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
    created = day - timedelta(days=3)
    rows = [
        ('apt-1', 'pat-1', 'María González', 9, 0, 30, AppointmentStatus.CONFIRMED, AppointmentType.CONSULTATION, 'Control de presión arterial', False),
        ('apt-2', 'pat-2', 'Carlos Ruiz', 10, 30, 45, AppointmentStatus.SCHEDULED, AppointmentType.FOLLOW_UP, 'Seguimiento postoperatorio', False),
        ('apt-3', 'pat-3', 'Ana Torres', 11, 15, 60, AppointmentStatus.IN_PROGRESS, AppointmentType.EMERGENCY, 'Dolor torácico', True),
        ('apt-4', 'pat-4', 'Luis Pérez', 15, 0, 30, AppointmentStatus.SCHEDULED, AppointmentType.CHECKUP, 'Chequeo anual', False),
    ]
    return [
        Appointment(
            id=apt_id,
            patient_id=patient_id,
            doctor_id='user-2',
            date=day.replace(hour=hour, minute=minute),
            duration=duration,
            status=status,
            type=apt_type.value,
            reason=reason,
            created_at=created,
            updated_at=created,
            patient_name=patient_name,
            doctor_name='Dr. José Martínez',
            urgent=urgent,
        )
        for apt_id, patient_id, patient_name, hour, minute, duration, status, apt_type, reason, urgent in rows
    ]
