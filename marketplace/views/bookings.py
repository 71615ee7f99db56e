"""
Surgery booking endpoints.

Patients book for themselves; administrators may book on behalf of a
patient.  Cancellation is a status change, bookings are never deleted.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Booking, Doctor, Hospital, Implant, Patient
from ..permissions import IsAdminOrPatient
from ..serializers.bookings import BookingCreateSerializer, BookingListQuerySerializer, BookingUpdateSerializer
from ..services import bookings as booking_service
from ..services.audit import log_action
from ..services.bookings import BOOKING_RELATED, serialize_booking
from ..services.pagination import paginate


def _denied():
    return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                    status=status.HTTP_403_FORBIDDEN)


def _load(booking_id: int) -> Booking:
    return get_object_or_404(Booking.objects.select_related(*BOOKING_RELATED), pk=booking_id)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminOrPatient])
def create_booking(request):
    s = BookingCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = dict(s.validated_data)
    patient_id = v.pop('patient_id', None)
    if request.user.role == 'admin':
        if not patient_id:
            return Response({'ok': False, 'detail': 'patient_id is required', 'error': 'invalid'}, status=400)
        patient = get_object_or_404(Patient, pk=patient_id)
    else:
        patient = get_object_or_404(Patient, user=request.user)
    booking = booking_service.create_booking(patient=patient, **v)
    try:
        log_action(user=request.user, action='booking_create', object_type='booking', object_id=booking.id)
    except Exception:
        pass
    return Response({'ok': True, 'data': serialize_booking(_load(booking.id))}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def booking_detail(request, booking_id: int):
    booking = _load(booking_id)
    if request.method == 'GET':
        if not booking_service.can_view(request.user, booking):
            return _denied()
        return Response({'ok': True, 'data': serialize_booking(booking)})

    if not booking_service.can_modify(request.user, booking):
        return _denied()
    if request.method == 'DELETE':
        booking = booking_service.cancel_booking(booking)
        action = 'booking_cancel'
    else:
        s = BookingUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        changes = dict(s.validated_data)
        # only staff roles move a booking forward
        if request.user.role == 'patient' and changes.get('status') not in (None, 'cancelled'):
            return _denied()
        if request.user.role == 'patient':
            changes.pop('payment_status', None)
        booking = booking_service.update_booking(booking, changes)
        action = 'booking_update'
    try:
        log_action(user=request.user, action=action, object_type='booking', object_id=booking.id,
                   detail={'status': booking.status})
    except Exception:
        pass
    return Response({'ok': True, 'data': serialize_booking(booking)})


def _listing(request, qs):
    q = BookingListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = qs.select_related(*BOOKING_RELATED).order_by('-created_at')
    if q.validated_data.get('status'):
        qs = qs.filter(status=q.validated_data['status'])
    return Response(paginate(qs, request.query_params, serialize_booking))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_bookings(request, doctor_id: int):
    doctor = get_object_or_404(Doctor, pk=doctor_id)
    if request.user.role != 'admin' and doctor.user_id != request.user.id:
        return _denied()
    return _listing(request, Booking.objects.filter(doctor=doctor))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def hospital_bookings(request, hospital_id: int):
    hospital = get_object_or_404(Hospital, pk=hospital_id)
    if request.user.role != 'admin' and not hospital.staff.filter(user=request.user).exists():
        return _denied()
    return _listing(request, Booking.objects.filter(hospital=hospital))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def implant_bookings(request, implant_id: int):
    implant = get_object_or_404(Implant, pk=implant_id)
    if request.user.role != 'admin' and not implant.staff.filter(user=request.user).exists():
        return _denied()
    return _listing(request, Booking.objects.filter(implant=implant))
