from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Booking, Patient
from ..permissions import IsAdminOrPatient
from ..serializers.bookings import BookingListQuerySerializer
from ..serializers.profiles import PatientUpdateSerializer
from ..services.bookings import BOOKING_RELATED, serialize_booking
from ..services.pagination import paginate
from ..services.profiles import patient_completeness, serialize_patient


def _may_view(user, patient: Patient) -> bool:
    if user.role == 'admin' or patient.user_id == user.id:
        return True
    # doctors see patients who booked with them
    return user.role == 'doctor' and Booking.objects.filter(patient=patient, doctor__user=user).exists()


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_detail(request, patient_id: int):
    patient = get_object_or_404(Patient.objects.select_related('user'), pk=patient_id)
    if not _may_view(request.user, patient):
        return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                        status=status.HTTP_403_FORBIDDEN)
    return Response({'ok': True, 'data': serialize_patient(patient)})


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdminOrPatient])
def update_patient(request, patient_id: int):
    patient = get_object_or_404(Patient.objects.select_related('user'), pk=patient_id)
    if request.user.role != 'admin' and patient.user_id != request.user.id:
        return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                        status=status.HTTP_403_FORBIDDEN)
    s = PatientUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    for field, value in s.validated_data.items():
        setattr(patient, field, value)
    patient.profile_completeness = patient_completeness(patient)
    patient.save()
    return Response({'ok': True, 'data': serialize_patient(patient)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrPatient])
def patient_bookings(request, patient_id: int):
    patient = get_object_or_404(Patient, pk=patient_id)
    if request.user.role != 'admin' and patient.user_id != request.user.id:
        return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                        status=status.HTTP_403_FORBIDDEN)
    q = BookingListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Booking.objects.filter(patient=patient).select_related(*BOOKING_RELATED).order_by('-created_at')
    if q.validated_data.get('status'):
        qs = qs.filter(status=q.validated_data['status'])
    return Response(paginate(qs, request.query_params, serialize_booking))
