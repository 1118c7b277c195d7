from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.patient import PatientCreateSerializer, PatientSerializer
from clinic.services.audit import log_action
from clinic.services.patients import accept_patient


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def patient_create_api(request):
    """Validate a patient payload and return the accepted record."""
    s = PatientCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = accept_patient(s.validated_data)
    log_action(user=request.user, action='patient_accept', object_type='patient',
               detail={'patientId': patient.id})
    return Response({'ok': True, 'data': PatientSerializer(patient).data}, status=201)
