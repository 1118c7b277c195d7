"""
Dashboard data endpoints for script clients of the page shells.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.dashboard import (
    AppointmentSerializer,
    DashboardStatsSerializer,
    NavItemSerializer,
    QuickActionSerializer,
    RecentActivitySerializer,
    StatCardSerializer,
)
from clinic.services import dashboard as provider


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_api(request):
    language = request.language_store.language
    stats = provider.dashboard_stats()
    return Response({
        'ok': True,
        'data': {
            'stats': DashboardStatsSerializer(stats).data,
            'cards': StatCardSerializer(provider.stat_cards(language, stats), many=True).data,
            'quickActions': QuickActionSerializer(provider.quick_actions(language), many=True).data,
            'activities': RecentActivitySerializer(provider.recent_activity(), many=True).data,
            'navigation': NavItemSerializer(provider.navigation(language), many=True).data,
        },
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def today_appointments_api(request):
    appointments = provider.today_appointments()
    return Response({'ok': True, 'data': AppointmentSerializer(appointments, many=True).data,
                     'count': len(appointments)})
