"""
Page shells.

Each page takes its data from a provider in ``clinic.services``, serialises
it and renders it as HTML (or JSON for clients asking for it).  The route
guard has already run by the time these views are reached.
"""
from __future__ import annotations

from django.shortcuts import redirect
from django.views.decorators.csrf import csrf_protect
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer, TemplateHTMLRenderer
from rest_framework.response import Response

from clinic.records import AppointmentType
from clinic.serializers.auth import UserSerializer
from clinic.serializers.dashboard import (
    AppointmentSerializer,
    DashboardStatsSerializer,
    QuickActionSerializer,
    RecentActivitySerializer,
    SectionSerializer,
    StatCardSerializer,
)
from clinic.serializers.patient import BLOOD_TYPES, GENDERS, PatientCreateSerializer, PatientSerializer
from clinic.services import dashboard as provider
from clinic.services.patients import accept_patient
from clinic.services.translations import translate

PAGE_RENDERERS = [TemplateHTMLRenderer, JSONRenderer]


def index(request):
    return redirect('dashboard_page')


@api_view(['GET'])
@renderer_classes(PAGE_RENDERERS)
@permission_classes([IsAuthenticated])
def dashboard_page(request):
    language = request.language_store.language
    stats = provider.dashboard_stats()
    return Response({
        'ok': True,
        'profile': UserSerializer(request.user).data,
        'stats': DashboardStatsSerializer(stats).data,
        'cards': StatCardSerializer(provider.stat_cards(language, stats), many=True).data,
        'quickActions': QuickActionSerializer(provider.quick_actions(language), many=True).data,
        'appointments': AppointmentSerializer(provider.today_appointments(), many=True).data,
        'activities': RecentActivitySerializer(provider.recent_activity(), many=True).data,
    }, template_name='clinic/dashboard.html')


@api_view(['GET'])
@renderer_classes(PAGE_RENDERERS)
@permission_classes([IsAuthenticated])
def appointments_page(request):
    """Today's appointments, optionally narrowed to one type with ``?type=``."""
    appointments = provider.today_appointments()
    kind = request.query_params.get('type')
    if kind in AppointmentType.__members__:
        appointments = [a for a in appointments if a.type == kind]
    else:
        kind = None
    return Response({
        'ok': True,
        'appointments': AppointmentSerializer(appointments, many=True).data,
        'count': len(appointments),
        'type': kind,
    }, template_name='clinic/appointments.html')


@csrf_protect
@api_view(['GET', 'POST'])
@renderer_classes(PAGE_RENDERERS)
@permission_classes([IsAuthenticated])
def patient_new_page(request):
    page = {'ok': True, 'errors': {}, 'values': {}, 'patient': None, 'message': None,
            'genders': GENDERS, 'bloodTypes': BLOOD_TYPES}
    if request.method == 'GET':
        return Response(page, template_name='clinic/patient_form.html')

    s = PatientCreateSerializer(data=request.data)
    if not s.is_valid():
        values = request.data.dict() if hasattr(request.data, 'dict') else dict(request.data)
        page.update(ok=False, errors=s.errors, values=values)
        return Response(page, status=400, template_name='clinic/patient_form.html')

    patient = accept_patient(s.validated_data)
    page.update(
        patient=PatientSerializer(patient).data,
        message=translate(request.language_store.language, 'patients.created'),
    )
    return Response(page, status=201, template_name='clinic/patient_form.html')


@api_view(['GET'])
@renderer_classes(PAGE_RENDERERS)
@permission_classes([IsAuthenticated])
def section_page(request, section):
    shell = provider.section(request.language_store.language, section)
    return Response({'ok': True, 'section': SectionSerializer(shell).data}, template_name='clinic/section.html')
