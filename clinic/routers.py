"""
URL mappings for the MedixOne clinic front-end.

Page shells live at the root; their JSON counterparts live under ``/api``.
Trailing slashes are omitted throughout, matching the paths the browser
client already links to.
"""
from django.urls import path

from .views import dashboard, health, language, pages, patients
from .views.auth import login_api, login_page, logout_api, logout_page, session_api

urlpatterns = [
    path('healthz', health.healthz, name='healthz'),
    # Pages
    path('', pages.index, name='index'),
    path('login', login_page, name='login_page'),
    path('logout', logout_page, name='logout_page'),
    path('dashboard', pages.dashboard_page, name='dashboard_page'),
    path('appointments', pages.appointments_page, name='appointments_page'),
    path('patients/new', pages.patient_new_page, name='patient_new_page'),
    path('patients', pages.section_page, {'section': 'patients'}, name='patients_page'),
    path('laboratory', pages.section_page, {'section': 'laboratory'}, name='laboratory_page'),
    path('prescriptions', pages.section_page, {'section': 'prescriptions'}, name='prescriptions_page'),
    path('billing', pages.section_page, {'section': 'billing'}, name='billing_page'),
    path('reports', pages.section_page, {'section': 'reports'}, name='reports_page'),
    path('medical-records', pages.section_page, {'section': 'medical-records'}, name='medical_records_page'),
    path('language/toggle', language.toggle_page, name='language_toggle_page'),
    # Authentication
    path('api/auth/login', login_api, name='login_api'),
    path('api/auth/logout', logout_api, name='logout_api'),
    path('api/auth/session', session_api, name='session_api'),
    # Language
    path('api/language', language.language_api, name='language_api'),
    path('api/language/toggle', language.language_toggle_api, name='language_toggle_api'),
    path('api/translations', language.translations_api, name='translations_api'),
    # Dashboard
    path('api/dashboard', dashboard.dashboard_api, name='dashboard_api'),
    path('api/appointments/today', dashboard.today_appointments_api, name='today_appointments_api'),
    # Patients
    path('api/patients', patients.patient_create_api, name='patient_create_api'),
]
